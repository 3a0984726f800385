"""
Completion orchestration: resolve → retrieve → compose → send → apply.

One request, one provider call, no state kept between calls.
"""

import time

import httpx
from loguru import logger

from postchat.config import Settings
from postchat.core import completion, retriever
from postchat.core.errors import ConfigurationError
from postchat.core.modes import resolve_mode
from postchat.core.policy import apply_policy
from postchat.core.prompts import compose
from postchat.db.posts import PostStore
from postchat.models.chat import (
    DEFAULT_API_VERSION,
    ChatCompleteRequest,
    CompletionResult,
    ProviderConfig,
)

_REQUIRED_SETTINGS = {
    "azure_openai_api_key": "AZURE_OPENAI_API_KEY",
    "azure_openai_endpoint": "AZURE_OPENAI_ENDPOINT",
    "azure_openai_deployment": "AZURE_OPENAI_DEPLOYMENT",
}


def provider_config(settings: Settings) -> ProviderConfig:
    """Build the provider config or raise ConfigurationError naming every gap."""
    missing = [
        env
        for field, env in _REQUIRED_SETTINGS.items()
        if not (getattr(settings, field) or "").strip()
    ]
    if missing:
        raise ConfigurationError(missing)
    return ProviderConfig(
        api_key=settings.azure_openai_api_key,
        endpoint=settings.azure_openai_endpoint,
        deployment=settings.azure_openai_deployment,
        api_version=settings.azure_openai_api_version or DEFAULT_API_VERSION,
    )


async def complete_conversation(
    request: ChatCompleteRequest,
    store: PostStore,
    http_client: httpx.AsyncClient,
    settings: Settings,
) -> CompletionResult:
    start_time = time.monotonic()

    # Fail before touching the database or the network
    provider = provider_config(settings)

    mode = resolve_mode(request.mode, request.ground_with_posts)
    snippets = await retriever.retrieve(store, mode)
    messages = compose(mode, snippets, request.messages)

    raw_text, raw_payload = await completion.send(http_client, provider, messages, mode)
    content = apply_policy(mode, raw_text, settings.no_answer_message)

    latency_ms = int((time.monotonic() - start_time) * 1000)
    logger.info(
        "[chat] mode={} snippets={} messages={} latency_ms={}",
        mode.value,
        len(snippets),
        len(messages),
        latency_ms,
    )
    return CompletionResult(content=content, mode=mode, raw=raw_payload)
