import json

import httpx
import pytest

from postchat.config import Settings
from postchat.models.chat import Post


class FakePostStore:
    def __init__(self, posts: list[Post] | None = None, error: Exception | None = None):
        self.posts = posts or []
        self.error = error
        self.limits: list[int] = []

    async def latest(self, limit: int) -> list[Post]:
        self.limits.append(limit)
        if self.error is not None:
            raise self.error
        return self.posts[:limit]


class RecordingProvider:
    """MockTransport handler that answers every request with one canned response."""

    def __init__(self, status_code: int = 200, json_body=None, text: str | None = None):
        self.status_code = status_code
        self.json_body = json_body
        self.text = text
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text)
        return httpx.Response(self.status_code, json=self.json_body)

    @property
    def last_payload(self) -> dict:
        return json.loads(self.requests[-1].content)


def completion_body(content) -> dict:
    return {"id": "chatcmpl-1", "choices": [{"index": 0, "message": {"role": "assistant", "content": content}}]}


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        azure_openai_api_key="test-key",
        azure_openai_endpoint="https://blog.openai.azure.com",
        azure_openai_deployment="gpt-4o-mini",
        azure_openai_api_version="2024-02-15-preview",
    )


@pytest.fixture
def posts() -> list[Post]:
    return [
        Post(title="Trip to Paris", date="2024-05-01", content="<p>We visited the <b>Louvre</b>.</p>"),
        Post(title="Sourdough", date="2024-04-12", content="<p>Feed the starter &amp; wait.</p>"),
    ]
