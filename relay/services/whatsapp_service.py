import httpx

from relay.config import settings
from relay.logging_config import get_logger
from relay.services.alert_service import alert_error

logger = get_logger("whatsapp_service")

GRAPH_API_BASE_URL = "https://graph.facebook.com"


def build_messages_url(phone_number_id: str, api_version: str) -> str:
    return f"{GRAPH_API_BASE_URL}/{api_version}/{phone_number_id}/messages"


def build_text_payload(to: str, text: str) -> dict:
    return {
        "messaging_product": "whatsapp",
        "to": to,
        "type": "text",
        "text": {
            "preview_url": False,
            "body": text,
        },
    }


async def send_whatsapp_message(to: str, text: str) -> bool:
    """Send a text message via the WhatsApp Cloud API. Returns False on any failure."""
    if not settings.whatsapp_token or not settings.phone_number_id:
        logger.error("WhatsApp credentials missing (WHATSAPP_TOKEN / PHONE_NUMBER_ID)")
        return False

    if not to or not text:
        logger.warning(f"send_whatsapp_message: missing recipient={to!r} or text")
        return False

    url = build_messages_url(settings.phone_number_id, settings.graph_api_version)
    try:
        async with httpx.AsyncClient(timeout=settings.whatsapp_timeout_seconds) as client:
            response = await client.post(
                url,
                headers={
                    "Authorization": f"Bearer {settings.whatsapp_token}",
                    "Content-Type": "application/json",
                },
                json=build_text_payload(to, text),
            )
    except Exception as e:
        logger.error(f"Failed to send WhatsApp message: {e}")
        await alert_error("WhatsApp send failed", {"to": to, "error": str(e)})
        return False

    if not response.is_success:
        logger.error(
            "WhatsApp API error",
            extra={"context": {"to": to, "status": response.status_code, "body": response.text[:500]}},
        )
        await alert_error("WhatsApp send failed", {"to": to, "status": response.status_code})
        return False

    logger.info(f"WhatsApp message sent: to={to}")
    return True
