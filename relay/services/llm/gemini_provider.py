from typing import Optional

import httpx

from relay.logging_config import get_logger
from relay.services.llm.base import LLMError, LLMProvider, LLMResponse, QuotaExceededError

logger = get_logger("llm.gemini")

QUOTA_STATUS = "RESOURCE_EXHAUSTED"


def _extract_text(data: dict) -> str:
    candidates = data.get("candidates") or []
    if not candidates:
        return ""
    content = candidates[0].get("content") or {}
    parts = content.get("parts") or []
    if not parts:
        return ""
    return parts[0].get("text") or ""


def _is_quota_error(status_code: int, data: Optional[dict]) -> bool:
    if status_code == 429:
        return True
    error = (data or {}).get("error") if isinstance(data, dict) else None
    return isinstance(error, dict) and error.get("status") == QUOTA_STATUS


class GeminiProvider(LLMProvider):
    """Google Gemini generateContent provider."""

    def __init__(
        self,
        api_key: str,
        default_model: str = "gemini-1.5-flash",
        base_url: str = "https://generativelanguage.googleapis.com",
        timeout_seconds: float = 8.0,
    ):
        self.api_key = api_key
        self.default_model = default_model
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds

    def _endpoint(self, model: str) -> str:
        return f"{self.base_url}/v1beta/models/{model}:generateContent"

    async def generate(
        self,
        prompt: str,
        temperature: float = 0.7,
        max_tokens: int = 200,
        model: Optional[str] = None,
    ) -> LLMResponse:
        model = model or self.default_model
        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": temperature,
                "maxOutputTokens": max_tokens,
            },
        }
        logger.debug(f"Gemini request: model={model}, prompt_chars={len(prompt)}")

        async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
            response = await client.post(
                self._endpoint(model),
                params={"key": self.api_key},
                headers={"Content-Type": "application/json"},
                json=payload,
            )

        logger.debug(f"Gemini response status: {response.status_code}")

        try:
            data = response.json()
        except ValueError:
            data = None

        if response.status_code != 200:
            logger.error(f"Gemini error: {response.status_code} - {response.text[:500]}")
            if _is_quota_error(response.status_code, data):
                raise QuotaExceededError("Gemini quota exceeded", status_code=response.status_code)
            raise LLMError(f"Gemini API error: {response.status_code}", status_code=response.status_code)

        if not isinstance(data, dict):
            raise LLMError("Gemini returned a non-JSON body", status_code=response.status_code)

        content = _extract_text(data)
        logger.debug(f"Gemini content: {content[:100] if content else 'EMPTY'}")

        return LLMResponse(
            content=content,
            model=data.get("modelVersion", model),
            usage=data.get("usageMetadata"),
        )
