import asyncio
from typing import Optional

from relay.config import settings
from relay.logging_config import get_logger
from relay.services.alert_service import alert_warning
from relay.services.circuit_breaker import BackendCircuitBreaker
from relay.services.llm import GeminiProvider, LLMError, LLMProvider, QuotaExceededError
from relay.services.result import BACKEND_ERROR, BACKEND_UNAVAILABLE, Result

logger = get_logger("ai_service")

_llm_provider: Optional[GeminiProvider] = None


def get_llm_provider() -> GeminiProvider:
    """Get or create LLM provider instance."""
    global _llm_provider
    if _llm_provider is None:
        _llm_provider = GeminiProvider(
            api_key=settings.gemini_api_key or "",
            default_model=settings.gemini_model,
            base_url=settings.gemini_api_base_url,
            timeout_seconds=settings.gemini_timeout_seconds,
        )
    return _llm_provider


class AIService:
    """Calls the generative backend through the circuit breaker.

    Returns ``Result.failure`` with ``backend_unavailable`` while the breaker is
    open or after a quota error, and ``backend_error`` for everything else that
    does not produce text. Never raises.
    """

    def __init__(
        self,
        provider: LLMProvider,
        breaker: BackendCircuitBreaker,
        timeout_seconds: float = 8.0,
        temperature: float = 0.7,
        max_tokens: int = 200,
    ):
        self.provider = provider
        self.breaker = breaker
        self.timeout_seconds = timeout_seconds
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def try_generate(self, prompt: str) -> Result[str]:
        if self.breaker.is_open():
            logger.info(
                "Backend temporarily blocked by quota",
                extra={"context": {"retry_in": round(self.breaker.remaining(), 1)}},
            )
            return Result.failure("Backend blocked by circuit breaker", BACKEND_UNAVAILABLE)

        try:
            response = await asyncio.wait_for(
                self.provider.generate(prompt, temperature=self.temperature, max_tokens=self.max_tokens),
                timeout=self.timeout_seconds,
            )
        except QuotaExceededError as e:
            self.breaker.trip()
            await alert_warning(
                "Gemini quota exceeded, backend blocked",
                {"block_seconds": self.breaker.block_seconds, "status": e.status_code},
            )
            return Result.failure(str(e), BACKEND_UNAVAILABLE)
        except asyncio.TimeoutError:
            logger.error(f"Gemini timed out after {self.timeout_seconds}s")
            return Result.failure("Backend timeout", BACKEND_ERROR)
        except LLMError as e:
            logger.error(f"Gemini failed: {e}")
            return Result.failure(str(e), BACKEND_ERROR)
        except Exception as e:
            logger.error(f"Gemini request failed: {e}", exc_info=True)
            return Result.failure(str(e), BACKEND_ERROR)

        content = (response.content or "").strip()
        if not content:
            logger.warning("Gemini returned empty text")
            return Result.failure("Empty backend response", BACKEND_ERROR)

        return Result.success(content)
