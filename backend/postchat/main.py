import asyncio
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from postchat.config import get_settings
from postchat.db import postgres
from postchat.api import chat, system

settings = get_settings()

logger.remove()
logger.add(sys.stderr, level=settings.log_level.upper())


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting posts assistant backend...")

    for attempt in range(10):
        try:
            await postgres.create_pool()
            break
        except Exception as e:
            if attempt < 9:
                logger.warning(
                    "DB connection attempt {} failed: {}. Retrying in 2s...", attempt + 1, e
                )
                await asyncio.sleep(2)
            else:
                logger.error("Failed to connect to database after 10 attempts")
                raise

    logger.info("Posts assistant backend ready")
    yield

    await postgres.close_pool()
    logger.info("Posts assistant backend shut down")


app = FastAPI(
    title="Posts Assistant API",
    version="0.1.0",
    description="Chat completions grounded in the blog's posts",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(chat.router)
app.include_router(system.router)


@app.get("/")
async def root():
    return {"message": "Posts Assistant API", "version": "0.1.0", "docs": "/docs"}
