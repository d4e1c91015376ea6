from typing import Optional

from pydantic_settings import BaseSettings

REQUIRED_SETTINGS = ("verify_token", "gemini_api_key", "whatsapp_token", "phone_number_id")


class Settings(BaseSettings):
    verify_token: Optional[str] = None
    gemini_api_key: Optional[str] = None
    whatsapp_token: Optional[str] = None
    phone_number_id: Optional[str] = None

    port: int = 3000
    log_level: str = "INFO"

    gemini_model: str = "gemini-1.5-flash"
    gemini_api_base_url: str = "https://generativelanguage.googleapis.com"
    gemini_temperature: float = 0.7
    gemini_max_output_tokens: int = 200
    gemini_timeout_seconds: float = 8.0

    graph_api_version: str = "v21.0"
    whatsapp_timeout_seconds: float = 15.0

    message_cooldown_seconds: float = 4.0
    backend_block_seconds: float = 60.0
    dedup_ttl_seconds: float = 86400.0
    dedup_max_entries: int = 50000
    cooldown_max_entries: int = 50000

    fallback_reply: str = (
        "🤖 Estou temporariamente com alto volume ou limite de uso. Tente novamente em instantes."
    )

    alert_bot_token: Optional[str] = None
    alert_chat_id: Optional[str] = None
    alert_timeout_seconds: float = 3.0

    class Config:
        env_file = ".env"
        extra = "ignore"

    def missing_required(self) -> list[str]:
        return [name.upper() for name in REQUIRED_SETTINGS if not getattr(self, name)]


settings = Settings()
