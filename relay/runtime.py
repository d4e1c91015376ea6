"""Process-wide relay state, exposed as FastAPI dependencies."""

import threading
from typing import Optional

from relay.config import settings
from relay.services.admission_service import AdmissionGate
from relay.services.ai_service import AIService, get_llm_provider
from relay.services.circuit_breaker import BackendCircuitBreaker
from relay.services.reply_service import ReplyResolver
from relay.services.whatsapp_service import send_whatsapp_message

_circuit_breaker: Optional[BackendCircuitBreaker] = None
_reply_resolver: Optional[ReplyResolver] = None
# Sync dependencies run in worker threads; state must be built exactly once.
_runtime_lock = threading.RLock()


def get_circuit_breaker() -> BackendCircuitBreaker:
    global _circuit_breaker
    with _runtime_lock:
        if _circuit_breaker is None:
            _circuit_breaker = BackendCircuitBreaker(block_seconds=settings.backend_block_seconds)
        return _circuit_breaker


def get_reply_resolver() -> ReplyResolver:
    global _reply_resolver
    with _runtime_lock:
        if _reply_resolver is None:
            gate = AdmissionGate(
                cooldown_seconds=settings.message_cooldown_seconds,
                dedup_ttl_seconds=settings.dedup_ttl_seconds,
                dedup_max_entries=settings.dedup_max_entries,
                cooldown_max_entries=settings.cooldown_max_entries,
            )
            ai_service = AIService(
                provider=get_llm_provider(),
                breaker=get_circuit_breaker(),
                timeout_seconds=settings.gemini_timeout_seconds,
                temperature=settings.gemini_temperature,
                max_tokens=settings.gemini_max_output_tokens,
            )
            _reply_resolver = ReplyResolver(
                gate=gate,
                ai_service=ai_service,
                send=send_whatsapp_message,
                fallback_reply=settings.fallback_reply,
            )
        return _reply_resolver


def reset_runtime() -> None:
    """Drop all in-memory relay state."""
    global _circuit_breaker, _reply_resolver
    with _runtime_lock:
        _circuit_breaker = None
        _reply_resolver = None
