"""Orchestrates admission, generation and delivery for one inbound event."""

from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional

from relay.logging_config import LoggerAdapter, get_logger
from relay.schemas.webhook import InboundEvent
from relay.services.admission_service import AdmissionDecision, AdmissionGate
from relay.services.ai_service import AIService
from relay.services.alert_service import alert_critical
from relay.services.result import INTERNAL_ERROR, Result

logger = get_logger("reply_service")

SendFunc = Callable[[str, str], Awaitable[bool]]


class ReplyOutcome(str, Enum):
    SENT = "sent"
    SUPPRESSED = "suppressed"


@dataclass
class ResolveResult:
    outcome: ReplyOutcome
    decision: AdmissionDecision
    reply: Optional[str] = None
    used_fallback: bool = False
    delivered: bool = False
    error_code: Optional[str] = None


class ReplyResolver:
    def __init__(self, gate: AdmissionGate, ai_service: AIService, send: SendFunc, fallback_reply: str):
        self.gate = gate
        self.ai_service = ai_service
        self.send = send
        self.fallback_reply = fallback_reply

    async def resolve(self, event: InboundEvent) -> ResolveResult:
        """Reply to ``event`` at most once. Never raises."""
        log = LoggerAdapter(logger, {"message_id": event.message_id, "sender": event.sender_id})

        decision = self.gate.admit(event)
        if decision is not AdmissionDecision.ADMITTED:
            return ResolveResult(outcome=ReplyOutcome.SUPPRESSED, decision=decision)

        log.info(f"Inbound message: {event.text[:200]}")

        try:
            result = await self.ai_service.try_generate(event.text)
        except Exception as e:
            log.error(f"Reply generation crashed: {e}", exc_info=True)
            result = Result.failure(str(e), INTERNAL_ERROR)

        used_fallback = not (result.ok and result.value)
        reply = self.fallback_reply if used_fallback else result.value
        if used_fallback:
            log.warning("Using fallback reply", context={"error_code": result.error_code})

        delivered = False
        try:
            delivered = await self.send(event.sender_id, reply)
        except Exception as e:
            log.error(f"Reply delivery crashed: {e}", exc_info=True)
            await alert_critical("Reply delivery crashed", {"sender": event.sender_id, "error": str(e)})

        if not delivered:
            log.error("Reply not delivered")

        return ResolveResult(
            outcome=ReplyOutcome.SENT,
            decision=decision,
            reply=reply,
            used_fallback=used_fallback,
            delivered=delivered,
            error_code=result.error_code,
        )
