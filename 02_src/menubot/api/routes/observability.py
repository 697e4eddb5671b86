"""Audit and tenant administration API routes."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field
from fastapi import APIRouter, HTTPException, Query

from ...app import IApplication
from ...models import Tenant


class AuditRecordResponse(BaseModel):
    """Response model for an audit record."""

    id: str
    tenant_id: str
    sender: str
    message_id: str | None
    input_type: str
    input_text: str
    action: str
    success: bool
    details: dict[str, Any]
    created_at: datetime


class TenantRequest(BaseModel):
    """Request model for registering a tenant."""

    id: str
    name: str
    whatsapp_numbers: list[str] = Field(default_factory=list)


def create_observability_router(app: IApplication) -> APIRouter:
    """Create observability router."""
    router = APIRouter(prefix="/api", tags=["observability"])

    @router.get("/audit", response_model=list[AuditRecordResponse])
    async def get_audit_records(
        tenant_id: str = Query(..., description="Tenant to list records for"),
        limit: int = Query(100, ge=1, le=1000),
    ) -> list[dict]:
        """Get the latest audit records for a tenant."""
        try:
            records = await app.audit_log.recent(tenant_id, limit=limit)
            return [
                {
                    "id": r.id,
                    "tenant_id": r.tenant_id,
                    "sender": r.sender,
                    "message_id": r.message_id,
                    "input_type": r.input_type.value,
                    "input_text": r.input_text,
                    "action": r.action,
                    "success": r.success,
                    "details": r.details,
                    "created_at": r.created_at.isoformat(),
                }
                for r in records
            ]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    @router.post("/tenants", response_model=TenantRequest)
    async def register_tenant(request: TenantRequest) -> dict:
        """Register a tenant and the numbers allowed to manage its menu."""
        tenant = await app.tenants.register(
            Tenant(
                id=request.id,
                name=request.name,
                whatsapp_numbers=request.whatsapp_numbers,
            )
        )
        return {
            "id": tenant.id,
            "name": tenant.name,
            "whatsapp_numbers": tenant.whatsapp_numbers,
        }

    return router
