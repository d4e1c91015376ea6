from relay.schemas.webhook import InboundEvent, WebhookAck, WhatsAppWebhookPayload, extract_inbound_event

__all__ = ["InboundEvent", "WebhookAck", "WhatsAppWebhookPayload", "extract_inbound_event"]
