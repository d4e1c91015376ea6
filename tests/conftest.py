import asyncio
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from relay.config import settings
from relay.schemas.webhook import InboundEvent
from relay.services.admission_service import AdmissionGate
from relay.services.ai_service import AIService
from relay.services.circuit_breaker import BackendCircuitBreaker
from relay.services.llm.base import LLMResponse
from relay.services.reply_service import ReplyResolver

FALLBACK = "fallback reply"


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_event(message_id="m1", sender_id="+1555", text="hello"):
    return InboundEvent(
        message_id=message_id,
        sender_id=sender_id,
        text=text,
        received_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def provider():
    mock = AsyncMock()
    mock.generate.return_value = LLMResponse(content="hi!", model="gemini-test")
    return mock


@pytest.fixture
def breaker(clock):
    return BackendCircuitBreaker(block_seconds=60, clock=clock)


@pytest.fixture
def send():
    return AsyncMock(return_value=True)


@pytest.fixture
def resolver(clock, provider, breaker, send):
    gate = AdmissionGate(cooldown_seconds=4, clock=clock)
    ai_service = AIService(provider=provider, breaker=breaker, timeout_seconds=8)
    return ReplyResolver(gate=gate, ai_service=ai_service, send=send, fallback_reply=FALLBACK)


@pytest.fixture(autouse=True)
def _silence_alerts(monkeypatch):
    """Alerts never leave the test process."""
    monkeypatch.setattr(settings, "alert_bot_token", None)
    monkeypatch.setattr(settings, "alert_chat_id", None)


def run(coro):
    return asyncio.run(coro)
