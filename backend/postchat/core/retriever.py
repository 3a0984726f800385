"""
Context retrieval: latest posts → plain-text snippets.

Limits and body budgets are coupled to the mode. Strict mode leans on the
posts alone, so it reads more of them and keeps longer bodies.
"""

from loguru import logger

from postchat.core.errors import RetrievalFailure
from postchat.core.text import strip_html, truncate
from postchat.db.posts import PostStore
from postchat.models.chat import Mode, RetrievedSnippet

STRICT_POST_LIMIT = 50
DYNAMIC_POST_LIMIT = 30
STRICT_BODY_CHARS = 1200
DYNAMIC_BODY_CHARS = 600

POST_LIMITS = {Mode.STRICT: STRICT_POST_LIMIT, Mode.DYNAMIC: DYNAMIC_POST_LIMIT}
BODY_BUDGETS = {Mode.STRICT: STRICT_BODY_CHARS, Mode.DYNAMIC: DYNAMIC_BODY_CHARS}


async def retrieve(store: PostStore, mode: Mode) -> list[RetrievedSnippet]:
    """
    Fetch the most recent posts for ``mode`` and render each as a snippet.

    An empty store is fine (empty list). Any store error is fatal and is
    re-raised as RetrievalFailure.
    """
    limit = POST_LIMITS[mode]
    budget = BODY_BUDGETS[mode]

    try:
        posts = await store.latest(limit)
    except Exception as e:
        logger.error("[retriever] post store query failed: {}", e)
        raise RetrievalFailure(f"Could not load posts: {e}") from e

    snippets = [
        RetrievedSnippet(
            title=post.title or "",
            date=post.date,
            body=truncate(strip_html(post.content), budget),
        )
        for post in posts
    ]
    logger.debug("[retriever] {} snippets for mode={}", len(snippets), mode.value)
    return snippets
