import re

TRUNCATION_MARKER = "…"

_STYLE_RE = re.compile(r"<style[^>]*>[\s\S]*?</style>", re.IGNORECASE)
_SCRIPT_RE = re.compile(r"<script[^>]*>[\s\S]*?</script>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")
_WHITESPACE_RE = re.compile(r"\s+")

_ENTITIES = {
    "&nbsp;": " ",
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#39;": "'",
}
_ENTITY_RE = re.compile("|".join(re.escape(e) for e in _ENTITIES))


def strip_html(html: str | None) -> str:
    """
    Reduce stored post HTML to a single line of plain text.

    Style and script blocks are dropped with their contents, every other tag
    becomes a space, the common entities are decoded in one pass (so
    "&amp;lt;" yields "&lt;", not "<") and whitespace runs collapse.
    """
    if not html:
        return ""
    text = _STYLE_RE.sub("", html)
    text = _SCRIPT_RE.sub("", text)
    text = _TAG_RE.sub(" ", text)
    text = _ENTITY_RE.sub(lambda m: _ENTITIES[m.group(0)], text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def truncate(text: str | None, max_chars: int) -> str:
    if not text:
        return ""
    if len(text) > max_chars:
        return text[:max_chars] + TRUNCATION_MARKER
    return text
