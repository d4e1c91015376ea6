from fastapi import FastAPI

from relay.config import settings
from relay.logging_config import get_logger, setup_logging
from relay.routers import webhook
from relay.runtime import get_circuit_breaker

setup_logging(settings.log_level)

logger = get_logger("main")

app = FastAPI(
    title="WhatsApp Gemini Relay",
    description="Answers WhatsApp messages with Gemini",
    version="0.1.0",
)

app.include_router(webhook.router)


@app.on_event("startup")
async def check_required_settings() -> None:
    missing = settings.missing_required()
    if missing:
        logger.error("Missing environment variables", extra={"context": {"missing": missing}})
        raise RuntimeError(f"Missing environment variables: {', '.join(missing)}")
    logger.info(f"Relay started on port {settings.port}", extra={"context": {"model": settings.gemini_model}})


@app.get("/health")
async def health():
    breaker = get_circuit_breaker()
    is_open = breaker.is_open()
    return {
        "status": "ok",
        "backend_circuit": "open" if is_open else "closed",
        "backend_retry_in": round(breaker.remaining(), 1),
    }
