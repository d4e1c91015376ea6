import json
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError

from relay.config import settings
from relay.logging_config import get_logger
from relay.runtime import get_reply_resolver
from relay.schemas.webhook import WebhookAck, WhatsAppWebhookPayload, extract_inbound_event
from relay.services.reply_service import ReplyResolver

logger = get_logger("webhook")

router = APIRouter()


async def parse_webhook_body(request: Request) -> Optional[dict]:
    """
    Parse webhook JSON with tolerant decoding to avoid utf-8 crashes.
    Returns dict or None.
    """
    try:
        body = await request.json()
        return body if isinstance(body, dict) else None
    except Exception as e:
        logger.warning(f"Standard request.json() failed: {e}, fallback decoding")

    raw = await request.body()
    for enc in ("utf-8", "latin-1"):
        try:
            body = json.loads(raw.decode(enc, errors="replace"))
            return body if isinstance(body, dict) else None
        except ValueError:
            continue

    logger.error("Failed to decode webhook payload after fallbacks")
    return None


@router.get("/webhook", response_class=PlainTextResponse)
async def verify_webhook(
    mode: Optional[str] = Query(default=None, alias="hub.mode"),
    token: Optional[str] = Query(default=None, alias="hub.verify_token"),
    challenge: Optional[str] = Query(default=None, alias="hub.challenge"),
):
    """Echo the subscription challenge when the verify token matches."""
    if mode == "subscribe" and settings.verify_token and token == settings.verify_token:
        logger.info("Webhook verified")
        return PlainTextResponse(challenge or "")

    logger.warning("Webhook verification rejected", extra={"context": {"mode": mode}})
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")


@router.post("/webhook", response_model=WebhookAck)
async def receive_webhook(request: Request, resolver: ReplyResolver = Depends(get_reply_resolver)):
    """
    Handle inbound WhatsApp notifications.
    Always acknowledges with 200 so the platform never redelivers.
    """
    try:
        body = await parse_webhook_body(request)
        if body is None:
            return WebhookAck(message="Invalid payload")

        try:
            payload = WhatsAppWebhookPayload.model_validate(body)
        except ValidationError as e:
            logger.warning(f"Unexpected webhook shape: {e.error_count()} errors")
            return WebhookAck(message="Unexpected payload")

        event = extract_inbound_event(payload)
        if event is None:
            return WebhookAck(message="No text message")

        result = await resolver.resolve(event)
        return WebhookAck(message=result.outcome.value)

    except Exception as e:
        logger.error(f"Webhook processing error: {e}", exc_info=True)
        return WebhookAck(message="Internal error")
