"""
System prompt templates and message assembly.

The composer owns the system message: anything the caller sent with
role=system is dropped and replaced by the template for the active mode.
Templates are kept as plain line tuples so each mode can be read and diffed
on its own.
"""

from postchat.models.chat import Message, Mode, RetrievedSnippet

REFUSAL_TOKEN = "NO_ANSWER"
SNIPPET_SEPARATOR = "\n\n---\n\n"

STRICT_SNIPPET = "כותרת: {title}\nתאריך: {date}\n{body}"
STRICT_SNIPPET_NO_DATE = "כותרת: {title}\n{body}"
DYNAMIC_SNIPPET = "כותרת: {title}\n{body}"

STRICT_TEMPLATE = (
    "You are an assistant for a notes/blog knowledge base.",
    "MODE: STRICT (use only provided posts).",
    "RULES:",
    "- Use ONLY the provided posts context below.",
    f"- If the answer is not present, reply exactly: {REFUSAL_TOKEN}",
    "- Answer in the same language as the user.",
    "CONTEXT START",
    "{snippets}",
    "CONTEXT END",
)

DYNAMIC_TEMPLATE = (
    "You are a helpful assistant (MODE: DYNAMIC).",
    "You may use BOTH the optional posts context below AND broader world knowledge.",
    'Prefer, when relevant, to ground answers on the posts ("לפי הפוסט על ..."), but you are not forced to.',
    "Write naturally; no standalone title line.",
    "- Answer in the same language as the user main prompt (english / hebrew).",
    "OPTIONAL CONTEXT START",
    "{snippets}",
    "OPTIONAL CONTEXT END",
)


def format_snippet(mode: Mode, snippet: RetrievedSnippet) -> str:
    if mode is Mode.DYNAMIC:
        return DYNAMIC_SNIPPET.format(title=snippet.title, body=snippet.body)
    if snippet.date is None:
        return STRICT_SNIPPET_NO_DATE.format(title=snippet.title, body=snippet.body)
    return STRICT_SNIPPET.format(title=snippet.title, date=snippet.date, body=snippet.body)


def build_system_prompt(mode: Mode, snippets: list[RetrievedSnippet]) -> str:
    template = STRICT_TEMPLATE if mode is Mode.STRICT else DYNAMIC_TEMPLATE
    context = SNIPPET_SEPARATOR.join(format_snippet(mode, s) for s in snippets)
    # Substitute line by line: post bodies may contain literal braces
    return "\n".join(context if line == "{snippets}" else line for line in template)


def compose(
    mode: Mode,
    snippets: list[RetrievedSnippet],
    history: list[Message],
) -> list[Message]:
    """Return ``[system, *history]`` with caller-supplied system turns removed."""
    system = Message(role="system", content=build_system_prompt(mode, snippets))
    return [system, *(m for m in history if m.role != "system")]
