"""Messaging API routes (direct JSON entry, no webhook signature)."""

from pydantic import BaseModel
from fastapi import APIRouter, HTTPException

from ...app import IApplication
from ...models import InboundMessage, InputType


class MessageRequest(BaseModel):
    """Request model for sending a message."""

    tenant_id: str
    sender: str
    text: str
    message_id: str | None = None


class MessageResponse(BaseModel):
    """Response model for message."""

    response: str


def create_messaging_router(app: IApplication) -> APIRouter:
    """Create messaging router."""
    router = APIRouter(prefix="/api", tags=["messaging"])

    @router.post("/messages", response_model=MessageResponse)
    async def send_message(request: MessageRequest) -> dict:
        """Send a message to the processor as if it came from the channel."""
        try:
            response = await app.processor.process(
                InboundMessage(
                    tenant_id=request.tenant_id,
                    sender=request.sender,
                    text=request.text.strip(),
                    message_id=request.message_id,
                    input_type=InputType.TEXT,
                    raw_payload=request.model_dump(),
                )
            )
            return {"response": response}
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    return router
