from relay.services.admission_service import AdmissionDecision, AdmissionGate
from relay.services.ai_service import AIService
from relay.services.circuit_breaker import BackendCircuitBreaker
from relay.services.reply_service import ReplyOutcome, ReplyResolver, ResolveResult
from relay.services.result import Result

__all__ = [
    "AIService",
    "AdmissionDecision",
    "AdmissionGate",
    "BackendCircuitBreaker",
    "ReplyOutcome",
    "ReplyResolver",
    "ResolveResult",
    "Result",
]
