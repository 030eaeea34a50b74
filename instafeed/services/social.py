from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from uuid import UUID

UNIQUE_VIOLATION = "23505"


def is_unique_violation(exc: IntegrityError) -> bool:
    """Check whether an IntegrityError came from a unique constraint."""
    orig = exc.orig
    for candidate in (orig, getattr(orig, "__cause__", None)):
        code = getattr(candidate, "sqlstate", None) or getattr(candidate, "pgcode", None)
        if code == UNIQUE_VIOLATION:
            return True
    return False


class InteractionService:
    """Interaction service (likes, comments)."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def like_post(self, user_id: UUID, post_id: UUID) -> str:
        """
        Like a post.

        Duplicate likes are rejected by the (post_id, user_id) unique
        constraint; that case is reported as "already_liked". Any other
        integrity failure (e.g. unknown post) propagates.
        """
        try:
            await self.db.execute(
                text("""
                    INSERT INTO likes (post_id, user_id)
                    VALUES (:post_id, :user_id)
                """),
                {"post_id": post_id, "user_id": user_id},
            )
            await self.db.commit()
            return "liked"

        except IntegrityError as e:
            await self.db.rollback()
            if is_unique_violation(e):
                return "already_liked"
            raise

    async def unlike_post(self, user_id: UUID, post_id: UUID) -> str:
        """Unlike a post. Removing a missing like is not an error."""
        result = await self.db.execute(
            text("""
                DELETE FROM likes
                WHERE post_id = :post_id AND user_id = :user_id
            """),
            {"post_id": post_id, "user_id": user_id},
        )
        await self.db.commit()

        if result.rowcount == 0:
            return "not_liked"
        return "unliked"

    async def get_comments(
        self, post_id: UUID, limit: int = 2, offset: int = 0
    ) -> list[dict]:
        """Get comments for a post, newest first."""
        result = await self.db.execute(
            text("""
                SELECT
                    c.id,
                    c.post_id,
                    c.user_id,
                    c.content,
                    c.created_at,
                    c.updated_at,
                    u.id AS author_id,
                    u.clerk_id AS author_clerk_id,
                    u.name AS author_name,
                    u.created_at AS author_created_at
                FROM comments c
                JOIN users u ON c.user_id = u.id
                WHERE c.post_id = :post_id
                ORDER BY c.created_at DESC
                LIMIT :limit OFFSET :offset
            """),
            {"post_id": post_id, "limit": limit, "offset": offset},
        )
        rows = result.fetchall()

        return [
            {
                "id": row.id,
                "post_id": row.post_id,
                "user_id": row.user_id,
                "content": row.content,
                "created_at": row.created_at,
                "updated_at": row.updated_at,
                "user": {
                    "id": row.author_id,
                    "clerk_id": row.author_clerk_id,
                    "name": row.author_name,
                    "created_at": row.author_created_at,
                },
            }
            for row in rows
        ]
