from enum import Enum
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, Field, field_validator

DEFAULT_API_VERSION = "2024-02-15-preview"


class Mode(str, Enum):
    STRICT = "strict"
    DYNAMIC = "dynamic"


class Message(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str = ""

    @field_validator("content", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class ChatCompleteRequest(BaseModel):
    messages: list[Message] = Field(default_factory=list)
    mode: Mode | None = None
    # Legacy boolean from the first client; true meant "answer from posts only"
    ground_with_posts: bool | None = Field(
        None,
        validation_alias=AliasChoices("groundWithPosts", "ground_with_posts"),
    )


class ChatCompleteResponse(BaseModel):
    content: str
    mode: Mode


class Post(BaseModel):
    title: str | None = None
    date: str | None = None
    content: str | None = None

    @field_validator("date", mode="before")
    @classmethod
    def _date_to_text(cls, value: Any) -> Any:
        # "date" is a text column upstream, but tolerate real date types
        if value is None or isinstance(value, str):
            return value
        return value.isoformat() if hasattr(value, "isoformat") else str(value)


class RetrievedSnippet(BaseModel):
    title: str
    date: str | None = None
    body: str


class ProviderConfig(BaseModel):
    api_key: str
    endpoint: str
    deployment: str
    api_version: str = DEFAULT_API_VERSION


class CompletionResult(BaseModel):
    content: str
    mode: Mode
    raw: Any = None
