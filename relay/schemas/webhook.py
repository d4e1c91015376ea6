from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, Field


class WhatsAppText(BaseModel):
    body: Optional[str] = None


class WhatsAppMessage(BaseModel):
    id: Optional[str] = None
    from_number: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("from", "from_number"),
    )
    timestamp: Optional[str] = None
    type: Optional[str] = None
    text: Optional[WhatsAppText] = None


class WhatsAppValue(BaseModel):
    messaging_product: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None
    messages: Optional[list[WhatsAppMessage]] = None
    statuses: Optional[list[dict[str, Any]]] = None


class WhatsAppChange(BaseModel):
    field: Optional[str] = None
    value: Optional[WhatsAppValue] = None


class WhatsAppEntry(BaseModel):
    id: Optional[str] = None
    changes: list[WhatsAppChange] = Field(default_factory=list)


class WhatsAppWebhookPayload(BaseModel):
    object: Optional[str] = None
    entry: list[WhatsAppEntry] = Field(default_factory=list)

    def first_message(self) -> Optional[WhatsAppMessage]:
        """Return entry[0].changes[0].value.messages[0], if present."""
        if not self.entry or not self.entry[0].changes:
            return None
        value = self.entry[0].changes[0].value
        if value is None or not value.messages:
            return None
        return value.messages[0]


class WebhookAck(BaseModel):
    success: bool = True
    message: str


@dataclass(frozen=True)
class InboundEvent:
    message_id: str
    sender_id: str
    text: str
    received_at: datetime


def _parse_timestamp(raw: Optional[str]) -> datetime:
    if raw:
        try:
            return datetime.fromtimestamp(int(raw), tz=timezone.utc)
        except (TypeError, ValueError, OverflowError, OSError):
            pass
    return datetime.now(timezone.utc)


def extract_inbound_event(payload: WhatsAppWebhookPayload) -> Optional[InboundEvent]:
    """Build an event from the first text message of a webhook payload.

    Status callbacks, non-text messages and messages missing an id or sender
    yield None.
    """
    message = payload.first_message()
    if message is None or message.text is None or not message.text.body:
        return None
    if not message.id or not message.from_number:
        return None

    text = message.text.body.strip()
    if not text:
        return None

    return InboundEvent(
        message_id=message.id,
        sender_id=message.from_number,
        text=text,
        received_at=_parse_timestamp(message.timestamp),
    )
