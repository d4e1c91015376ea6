from relay.services.llm.base import LLMError, LLMProvider, LLMResponse, QuotaExceededError
from relay.services.llm.gemini_provider import GeminiProvider

__all__ = ["GeminiProvider", "LLMError", "LLMProvider", "LLMResponse", "QuotaExceededError"]
