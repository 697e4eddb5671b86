"""WhatsApp webhook routes."""

import json

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from ...app import IApplication
from ...channels import extract_message, verify_signature
from ...commands import detect_locale
from ...dialog import Replies
from ...logging_config import get_logger, log_context
from ...models import InboundMessage, InputType

logger = get_logger(__name__)


def create_webhook_router(app: IApplication) -> APIRouter:
    """Create WhatsApp webhook router."""
    router = APIRouter(prefix="/api", tags=["whatsapp"])

    @router.get("/whatsapp", response_class=PlainTextResponse)
    async def verify_subscription(
        hub_mode: str | None = Query(None, alias="hub.mode"),
        hub_verify_token: str | None = Query(None, alias="hub.verify_token"),
        hub_challenge: str | None = Query(None, alias="hub.challenge"),
    ) -> PlainTextResponse:
        """Subscription handshake."""
        expected = app.settings.whatsapp_verify_token
        if hub_mode == "subscribe" and expected and hub_verify_token == expected:
            return PlainTextResponse(hub_challenge or "")
        return PlainTextResponse("forbidden", status_code=403)

    @router.post("/whatsapp")
    async def receive(request: Request):
        """Inbound message notification."""
        raw = await request.body()
        if not verify_signature(
            app.settings.whatsapp_app_secret,
            raw,
            request.headers.get("x-hub-signature-256"),
        ):
            raise HTTPException(status_code=401, detail="invalid signature")

        try:
            payload = json.loads(raw)
        except ValueError:
            return {"ok": True}

        message = extract_message(payload)
        sender = message.get("from") if isinstance(message, dict) else None
        if not sender:
            # Status updates and other non-message notifications
            return {"ok": True}

        text = ""
        if message.get("type") == "text":
            text = ((message.get("text") or {}).get("body") or "").strip()
        replies = Replies(
            detect_locale(text) if text else app.settings.default_locale,
            app.settings.currency,
        )

        tenant_id = None
        try:
            tenant_id = await app.tenants.resolve(sender)
            if tenant_id is None:
                reply = replies.text("not_authorized")
            elif message.get("type") == "text":
                reply = await app.processor.process(
                    InboundMessage(
                        tenant_id=tenant_id,
                        sender=sender,
                        text=text,
                        message_id=message.get("id"),
                        input_type=InputType.TEXT,
                        raw_payload=payload,
                    )
                )
            elif (message.get("audio") or {}).get("id"):
                reply = replies.text("audio_unsupported")
            else:
                reply = replies.text("text_only")
        except Exception as e:
            logger.error(
                "Processing failed: %s",
                e,
                exc_info=True,
                extra=log_context(tenant_id, sender, message.get("id")),
            )
            await app.channel.send_text(sender, replies.text("unexpected_error"))
            # Non-2xx so the channel redelivers; the idempotency gate absorbs repeats
            return JSONResponse({"ok": False, "error": str(e)}, status_code=500)

        await app.channel.send_text(sender, reply)
        return {"ok": True}

    return router
