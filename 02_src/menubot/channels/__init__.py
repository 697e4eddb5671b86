"""Message channels module."""

from .whatsapp import (
    IMessageChannel,
    WhatsAppChannel,
    extract_message,
    verify_signature,
)

__all__ = [
    "IMessageChannel",
    "WhatsAppChannel",
    "extract_message",
    "verify_signature",
]
