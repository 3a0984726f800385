"""
Read-only access to the blog's posts table.

The table is owned by the blog backend (Sequelize model ``Post``), which is why
identifiers are quoted camelCase. This service never writes to it.
"""

from typing import Protocol

from postchat.db import postgres
from postchat.models.chat import Post

LATEST_POSTS_SQL = """
    SELECT title, date, content
    FROM "Posts"
    ORDER BY date DESC, "postId" DESC
    LIMIT $1
"""


class PostStore(Protocol):
    async def latest(self, limit: int) -> list[Post]:
        """Return up to ``limit`` posts, newest first."""
        ...


class PostgresPostStore:
    async def latest(self, limit: int) -> list[Post]:
        rows = await postgres.fetch_all(LATEST_POSTS_SQL, limit)
        return [Post(**dict(r)) for r in rows]
