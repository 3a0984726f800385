import httpx
import pytest

from conftest import FakePostStore, RecordingProvider, completion_body
from postchat.config import DEFAULT_NO_ANSWER_MESSAGE
from postchat.core.errors import ConfigurationError, ProviderError, RetrievalFailure
from postchat.core.orchestrator import complete_conversation, provider_config
from postchat.models.chat import ChatCompleteRequest, Message, Mode


def _request(**kwargs) -> ChatCompleteRequest:
    return ChatCompleteRequest(messages=[Message(role="user", content="Where is the Louvre?")], **kwargs)


async def _complete(request, store, provider, settings):
    async with httpx.AsyncClient(transport=httpx.MockTransport(provider)) as client:
        return await complete_conversation(request, store, client, settings)


async def test_strict_no_answer_with_empty_store_returns_apology(settings):
    provider = RecordingProvider(json_body=completion_body("NO_ANSWER"))
    result = await _complete(_request(), FakePostStore(), provider, settings)

    assert result.mode is Mode.STRICT
    assert result.content == DEFAULT_NO_ANSWER_MESSAGE
    assert provider.last_payload["temperature"] == 0.4


async def test_dynamic_answer_is_returned_verbatim(settings, posts):
    provider = RecordingProvider(json_body=completion_body("Paris is the capital of France."))
    result = await _complete(_request(mode=Mode.DYNAMIC), FakePostStore(posts), provider, settings)

    assert result.content == "Paris is the capital of France."
    assert result.mode is Mode.DYNAMIC
    assert provider.last_payload["temperature"] == 0.8
    assert result.raw["choices"][0]["message"]["content"] == "Paris is the capital of France."


async def test_missing_api_key_fails_before_any_io(settings):
    settings.azure_openai_api_key = None
    store = FakePostStore()
    provider = RecordingProvider(json_body=completion_body("unused"))

    with pytest.raises(ConfigurationError) as exc_info:
        await _complete(_request(), store, provider, settings)

    assert exc_info.value.missing == ["AZURE_OPENAI_API_KEY"]
    assert provider.requests == []
    assert store.limits == []


async def test_provider_500_surfaces_status_and_body(settings):
    provider = RecordingProvider(status_code=500, text="rate limited")
    with pytest.raises(ProviderError) as exc_info:
        await _complete(_request(), FakePostStore(), provider, settings)
    assert exc_info.value.status == 500
    assert exc_info.value.body == "rate limited"


async def test_retrieval_failure_skips_provider(settings):
    provider = RecordingProvider(json_body=completion_body("unused"))
    store = FakePostStore(error=ConnectionRefusedError("db down"))
    with pytest.raises(RetrievalFailure):
        await _complete(_request(), store, provider, settings)
    assert provider.requests == []


async def test_legacy_flag_false_selects_dynamic(settings):
    provider = RecordingProvider(json_body=completion_body("ok"))
    store = FakePostStore()
    result = await _complete(_request(ground_with_posts=False), store, provider, settings)
    assert result.mode is Mode.DYNAMIC
    assert store.limits == [30]


async def test_sent_messages_start_with_composed_system_prompt(settings, posts):
    provider = RecordingProvider(json_body=completion_body("The Louvre is in Paris."))
    request = ChatCompleteRequest(
        messages=[
            Message(role="system", content="caller prompt"),
            Message(role="user", content="Where is the Louvre?"),
        ]
    )
    await _complete(request, FakePostStore(posts), provider, settings)

    sent = provider.last_payload["messages"]
    assert [m["role"] for m in sent] == ["system", "user"]
    assert "MODE: STRICT" in sent[0]["content"]
    assert "caller prompt" not in sent[0]["content"]
    assert "Trip to Paris" in sent[0]["content"]


def test_provider_config_lists_every_missing_setting(settings):
    settings.azure_openai_endpoint = ""
    settings.azure_openai_deployment = None
    with pytest.raises(ConfigurationError) as exc_info:
        provider_config(settings)
    assert exc_info.value.missing == ["AZURE_OPENAI_ENDPOINT", "AZURE_OPENAI_DEPLOYMENT"]


@pytest.mark.parametrize("blank", ["", "   ", "\t\n"])
def test_provider_config_rejects_blank_values(settings, blank):
    settings.azure_openai_api_key = blank
    with pytest.raises(ConfigurationError) as exc_info:
        provider_config(settings)
    assert exc_info.value.missing == ["AZURE_OPENAI_API_KEY"]
