from postchat.config import DEFAULT_NO_ANSWER_MESSAGE
from postchat.core.prompts import REFUSAL_TOKEN
from postchat.models.chat import Mode


def is_refusal(text: str) -> bool:
    # Prefix match is deliberately loose: the model often adds punctuation or
    # a short explanation after the token. "NO_ANSWERABLE" matches as well.
    normalized = text.strip().upper()
    return normalized.startswith(REFUSAL_TOKEN)


def apply_policy(
    mode: Mode,
    raw_text: str,
    no_answer_message: str = DEFAULT_NO_ANSWER_MESSAGE,
) -> str:
    """Replace the strict-mode refusal token with a user-facing apology."""
    if mode is Mode.STRICT and is_refusal(raw_text):
        return no_answer_message
    return raw_text
