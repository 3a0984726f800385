"""
Typed failures raised by the completion pipeline.

Every fatal path ends in one of these so the API layer can tell configuration,
retrieval and upstream problems apart. A success response with an unexpected
shape is not an error: the completion client degrades it to empty content.
"""


class ChatError(Exception):
    """Base class for all completion pipeline failures."""


class ConfigurationError(ChatError):
    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"Azure OpenAI configuration missing: {', '.join(missing)}")


class RetrievalFailure(ChatError):
    """The post store could not be queried."""


class ProviderError(ChatError):
    def __init__(self, status: int, body: str):
        self.status = status
        self.body = body
        super().__init__(f"Azure OpenAI error {status}: {body}")


class ProviderUnavailable(ChatError):
    """The provider could not be reached or did not answer within the timeout."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Azure OpenAI unreachable: {reason}")
