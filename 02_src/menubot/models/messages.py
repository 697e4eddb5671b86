"""Inbound message model."""

from dataclasses import dataclass

from .audit import InputType


@dataclass
class InboundMessage:
    """A verified inbound message, already attributed to a tenant."""

    tenant_id: str
    sender: str
    text: str
    message_id: str | None = None
    input_type: InputType = InputType.TEXT
    raw_payload: dict | None = None
