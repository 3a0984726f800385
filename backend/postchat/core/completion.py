"""
Azure OpenAI chat-completions client.

One POST per call and no retries. The httpx client is injected and its
timeout is the upper bound on how long a call can take.
"""

from typing import Any

import httpx
from loguru import logger
from pydantic import BaseModel, ValidationError

from postchat.core.errors import ProviderError, ProviderUnavailable
from postchat.models.chat import Message, Mode, ProviderConfig

MAX_TOKENS = 500

# Strict favours literal answers and a clean refusal token; dynamic blends
# posts with general knowledge.
MODE_TEMPERATURE = {Mode.STRICT: 0.4, Mode.DYNAMIC: 0.8}


class _ChoiceMessage(BaseModel):
    content: str | None = None


class _Choice(BaseModel):
    message: _ChoiceMessage | None = None


class ProviderResponse(BaseModel):
    # Only choices[0] is read, so the rest are left unvalidated
    choices: list[Any] = []

    def first_content(self) -> str:
        if not self.choices:
            return ""
        choice = _Choice.model_validate(self.choices[0])
        if choice.message is None:
            return ""
        return choice.message.content or ""


def completions_url(provider: ProviderConfig) -> str:
    endpoint = provider.endpoint.rstrip("/")
    return (
        f"{endpoint}/openai/deployments/{provider.deployment}"
        f"/chat/completions?api-version={provider.api_version}"
    )


def build_payload(messages: list[Message], mode: Mode) -> dict[str, Any]:
    return {
        "messages": [m.model_dump() for m in messages],
        "temperature": MODE_TEMPERATURE[mode],
        "max_tokens": MAX_TOKENS,
    }


def parse_content(resp: httpx.Response) -> tuple[str, Any]:
    """
    Pull ``choices[0].message.content`` out of a successful response.

    Returns (content, raw_json). Anything unexpected degrades to "" with a
    warning; the conversation still ends with an (empty) assistant turn.
    """
    try:
        data = resp.json()
    except ValueError:
        logger.warning("[completion] success status but body is not JSON: {!r}", resp.text[:200])
        return "", None

    try:
        content = ProviderResponse.model_validate(data).first_content()
    except ValidationError as e:
        logger.warning("[completion] unexpected response shape: {}", e)
        return "", data

    if not content:
        logger.warning("[completion] response carried no message content")
    return content, data


async def send(
    http_client: httpx.AsyncClient,
    provider: ProviderConfig,
    messages: list[Message],
    mode: Mode,
) -> tuple[str, Any]:
    url = completions_url(provider)
    payload = build_payload(messages, mode)

    try:
        resp = await http_client.post(
            url,
            json=payload,
            headers={"Content-Type": "application/json", "api-key": provider.api_key},
        )
    except httpx.TimeoutException as e:
        logger.error("[completion] Azure OpenAI timed out: {}", e)
        raise ProviderUnavailable("timed out") from e
    except httpx.TransportError as e:
        logger.error("[completion] cannot reach Azure OpenAI: {}", e)
        raise ProviderUnavailable(str(e) or type(e).__name__) from e

    if not resp.is_success:
        body = resp.text
        logger.error("[completion] Azure OpenAI error {}: {}", resp.status_code, body)
        raise ProviderError(resp.status_code, body)

    return parse_content(resp)
