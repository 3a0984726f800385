import asyncio

from fastapi import APIRouter, Depends
from loguru import logger

from postchat.config import Settings, get_settings
from postchat.core.errors import ConfigurationError
from postchat.core.orchestrator import provider_config
from postchat.db import postgres
from postchat.models.system import HealthResponse

router = APIRouter(prefix="/api/system", tags=["system"])


async def check_postgres() -> bool:
    try:
        row = await asyncio.wait_for(postgres.fetch_one("SELECT 1"), timeout=5.0)
        return row is not None
    except Exception as e:
        logger.warning("Postgres check failed: {}", e)
        return False


def check_provider(settings: Settings) -> bool:
    # Config only; probing the deployment would spend tokens
    try:
        provider_config(settings)
    except ConfigurationError:
        return False
    return True


@router.get("/health", response_model=HealthResponse)
async def health(settings: Settings = Depends(get_settings)):
    postgres_ok = await check_postgres()
    provider_ok = check_provider(settings)

    return {
        "status": "ok" if postgres_ok and provider_ok else "error",
        "dependencies": {
            "postgres": "connected" if postgres_ok else "error",
            "provider": "configured" if provider_ok else "missing_config",
        },
    }
