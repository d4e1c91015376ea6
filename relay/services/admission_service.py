"""Admission gate: webhook redelivery dedup and per-sender cooldown."""

import time
from enum import Enum
from typing import Callable

from relay.logging_config import get_logger
from relay.schemas.webhook import InboundEvent
from relay.services.expiring_store import ExpiringStore

logger = get_logger("admission_service")

DEFAULT_MESSAGE_COOLDOWN_SECONDS = 4.0
DEFAULT_DEDUP_TTL_SECONDS = 86400.0
DEFAULT_MAX_ENTRIES = 50000


class AdmissionDecision(str, Enum):
    ADMITTED = "admitted"
    DUPLICATE = "duplicate"
    RATE_LIMITED = "rate_limited"


class AdmissionGate:
    """Decides whether an inbound event should reach the backend.

    Dedup and cooldown are independent: a message id is marked as seen before
    the cooldown is checked, so a rate-limited message is never replayed later.
    """

    def __init__(
        self,
        cooldown_seconds: float = DEFAULT_MESSAGE_COOLDOWN_SECONDS,
        dedup_ttl_seconds: float = DEFAULT_DEDUP_TTL_SECONDS,
        dedup_max_entries: int = DEFAULT_MAX_ENTRIES,
        cooldown_max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.cooldown_seconds = cooldown_seconds
        self._seen_messages = ExpiringStore(dedup_ttl_seconds, dedup_max_entries, clock=clock)
        # An expired cooldown is the same as no cooldown, so the TTL is the cooldown itself.
        self._last_processed = ExpiringStore(cooldown_seconds, cooldown_max_entries, clock=clock)

    def admit(self, event: InboundEvent) -> AdmissionDecision:
        if not self._seen_messages.add_if_absent(event.message_id):
            logger.info(
                "Duplicate message dropped",
                extra={"context": {"message_id": event.message_id, "sender": event.sender_id}},
            )
            return AdmissionDecision.DUPLICATE

        if not self._last_processed.touch_if_idle(event.sender_id, self.cooldown_seconds):
            logger.warning(
                "Rate limit per sender",
                extra={"context": {"message_id": event.message_id, "sender": event.sender_id}},
            )
            return AdmissionDecision.RATE_LIMITED

        return AdmissionDecision.ADMITTED

    def seen_count(self) -> int:
        return len(self._seen_messages)
