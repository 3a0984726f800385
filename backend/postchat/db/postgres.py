import asyncpg
from loguru import logger
from postchat.config import get_settings

_pool: asyncpg.Pool | None = None

# The posts table belongs to the blog backend; sessions here never write
READ_ONLY_SERVER_SETTINGS = {
    "application_name": "postchat",
    "default_transaction_read_only": "on",
}
COMMAND_TIMEOUT_SECONDS = 10.0


async def create_pool() -> asyncpg.Pool:
    global _pool
    settings = get_settings()
    _pool = await asyncpg.create_pool(
        dsn=settings.database_url,
        min_size=1,
        max_size=10,
        command_timeout=COMMAND_TIMEOUT_SECONDS,
        server_settings=READ_ONLY_SERVER_SETTINGS,
    )
    logger.info("PostgreSQL read-only connection pool created")
    return _pool


async def get_pool() -> asyncpg.Pool:
    global _pool
    if _pool is None:
        _pool = await create_pool()
    return _pool


async def close_pool() -> None:
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None
        logger.info("PostgreSQL connection pool closed")


async def fetch_one(query: str, *args) -> asyncpg.Record | None:
    pool = await get_pool()
    async with pool.acquire() as conn:
        return await conn.fetchrow(query, *args)


async def fetch_all(query: str, *args) -> list[asyncpg.Record]:
    pool = await get_pool()
    async with pool.acquire() as conn:
        return await conn.fetch(query, *args)
