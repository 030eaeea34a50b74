from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import bindparam, text
from typing import Optional
from uuid import UUID


class FeedService:
    """
    Offset-paginated post listing.

    A page is assembled from dependent reads:
    1. Count posts matching the owner filter
    2. Fetch the page of posts joined with their authors
    3. Look up like/comment counts for those posts in post_stats
    4. Look up which of those posts the viewer has liked
    The results are stitched together in memory.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_posts(
        self,
        page: int = 1,
        limit: int = 10,
        user_id: Optional[UUID] = None,
        viewer_user_id: Optional[UUID] = None,
    ) -> tuple[list[dict], int]:
        """
        Get one page of posts, newest first.

        Returns: (posts, total)
        """
        offset = (page - 1) * limit
        owner_filter = "WHERE p.user_id = :user_id" if user_id else ""
        params = {"user_id": user_id} if user_id else {}

        count_result = await self.db.execute(
            text(f"SELECT COUNT(*) AS total FROM posts p {owner_filter}"),
            params,
        )
        total = count_result.scalar_one() or 0

        result = await self.db.execute(
            text(f"""
                SELECT
                    p.id,
                    p.user_id,
                    p.image_url,
                    p.caption,
                    p.created_at,
                    p.updated_at,
                    u.id AS author_id,
                    u.clerk_id AS author_clerk_id,
                    u.name AS author_name,
                    u.created_at AS author_created_at
                FROM posts p
                JOIN users u ON p.user_id = u.id
                {owner_filter}
                ORDER BY p.created_at DESC
                LIMIT :limit OFFSET :offset
            """),
            {**params, "limit": limit, "offset": offset},
        )
        rows = result.fetchall()

        if not rows:
            return [], total

        post_ids = [row.id for row in rows]
        stats = await self._get_stats(post_ids)
        liked_ids = await self._get_liked_post_ids(viewer_user_id, post_ids) if viewer_user_id else set()

        posts = []
        for row in rows:
            likes_count, comments_count = stats.get(row.id, (0, 0))
            posts.append({
                "id": row.id,
                "user_id": row.user_id,
                "image_url": row.image_url,
                "caption": row.caption,
                "created_at": row.created_at,
                "updated_at": row.updated_at,
                "user": {
                    "id": row.author_id,
                    "clerk_id": row.author_clerk_id,
                    "name": row.author_name,
                    "created_at": row.author_created_at,
                },
                "likes_count": likes_count,
                "comments_count": comments_count,
                "is_liked": row.id in liked_ids,
            })

        return posts, total

    async def _get_stats(self, post_ids: list[UUID]) -> dict[UUID, tuple[int, int]]:
        """Get (likes_count, comments_count) per post from the stats view."""
        result = await self.db.execute(
            text("""
                SELECT post_id, likes_count, comments_count
                FROM post_stats
                WHERE post_id IN :post_ids
            """).bindparams(bindparam("post_ids", expanding=True)),
            {"post_ids": post_ids},
        )
        return {
            row.post_id: (row.likes_count or 0, row.comments_count or 0)
            for row in result.fetchall()
        }

    async def _get_liked_post_ids(self, user_id: UUID, post_ids: list[UUID]) -> set[UUID]:
        """Get the subset of post_ids the user has liked."""
        result = await self.db.execute(
            text("""
                SELECT post_id
                FROM likes
                WHERE user_id = :user_id AND post_id IN :post_ids
            """).bindparams(bindparam("post_ids", expanding=True)),
            {"user_id": user_id, "post_ids": post_ids},
        )
        return {row.post_id for row in result.fetchall()}
