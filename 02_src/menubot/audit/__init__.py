"""Audit module."""

from .log import AuditLog, IAuditLog

__all__ = ["AuditLog", "IAuditLog"]
