import asyncio
from typing import AsyncIterator

import httpx
from fastapi import APIRouter, Depends, HTTPException, Request
from loguru import logger

from postchat.config import Settings, get_settings
from postchat.core.errors import (
    ConfigurationError,
    ProviderError,
    ProviderUnavailable,
    RetrievalFailure,
)
from postchat.core.orchestrator import complete_conversation
from postchat.db.posts import PostgresPostStore, PostStore
from postchat.models.chat import ChatCompleteRequest, ChatCompleteResponse, CompletionResult

router = APIRouter(prefix="/api/chat", tags=["chat"])

DISCONNECT_POLL_SECONDS = 0.5


# ── Dependencies ────────────────────────────────────────────────────────────────

def get_post_store() -> PostStore:
    return PostgresPostStore()


async def get_http_client(
    settings: Settings = Depends(get_settings),
) -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(timeout=settings.azure_openai_timeout_seconds) as client:
        yield client


# ── Helpers ─────────────────────────────────────────────────────────────────────

async def _wait_for_disconnect(request: Request) -> None:
    while not await request.is_disconnected():
        await asyncio.sleep(DISCONNECT_POLL_SECONDS)


async def _run_until_disconnect(request: Request, coro) -> CompletionResult | None:
    """
    Run ``coro`` but cancel it if the client goes away first.
    Returns None when cancelled; the provider call is abandoned, not awaited.
    """
    work = asyncio.create_task(coro)
    watcher = asyncio.create_task(_wait_for_disconnect(request))
    try:
        done, _ = await asyncio.wait({work, watcher}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        watcher.cancel()
        if not work.done():
            work.cancel()

    if work in done:
        return work.result()

    logger.info("[chat] client disconnected, provider call abandoned")
    return None


# ── Routes ──────────────────────────────────────────────────────────────────────

@router.post("/complete", response_model=ChatCompleteResponse)
async def complete(
    body: ChatCompleteRequest,
    request: Request,
    store: PostStore = Depends(get_post_store),
    http_client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> ChatCompleteResponse:
    try:
        result = await _run_until_disconnect(
            request,
            complete_conversation(body, store, http_client, settings),
        )
    except ConfigurationError as e:
        raise HTTPException(
            status_code=500,
            detail={"error": "configuration_error", "missing": e.missing, "message": str(e)},
        ) from e
    except RetrievalFailure as e:
        raise HTTPException(
            status_code=503,
            detail={"error": "retrieval_failed", "message": "Could not load posts for context"},
        ) from e
    except ProviderError as e:
        raise HTTPException(
            status_code=502,
            detail={"error": "provider_error", "status": e.status, "message": e.body},
        ) from e
    except ProviderUnavailable as e:
        raise HTTPException(
            status_code=504,
            detail={"error": "provider_unavailable", "message": e.reason},
        ) from e

    if result is None:
        # Nobody is listening; 499 is the conventional "client closed request"
        raise HTTPException(status_code=499, detail={"error": "client_disconnected"})

    return ChatCompleteResponse(content=result.content, mode=result.mode)
