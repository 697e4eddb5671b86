"""Tenants module."""

from .registry import ITenantRegistry, TenantRegistry, normalize_phone

__all__ = ["ITenantRegistry", "TenantRegistry", "normalize_phone"]
