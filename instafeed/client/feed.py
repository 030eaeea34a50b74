import logging
from typing import Optional
from uuid import UUID

import httpx

from instafeed import messages
from instafeed.client.api import ApiError, FeedApiClient
from instafeed.client.like_toggle import LikeToggle
from instafeed.schemas import CommentWithUser, PostWithUser

logger = logging.getLogger(__name__)


class InfiniteFeed:
    """
    Accumulating, page-at-a-time view of the feed.

    `on_sentinel_visible` is the hook for whatever detects that the end of
    the list scrolled into view; it fetches the next page unless one is
    already loading or the server reported no more posts.
    """

    def __init__(
        self,
        client: FeedApiClient,
        user_id: Optional[UUID] = None,
        page_size: int = 10,
        preview_comments: int = 2,
    ):
        self.client = client
        self.user_id = user_id
        self.page_size = page_size
        self.preview_comments = preview_comments

        self.posts: list[PostWithUser] = []
        self.page = 1
        self.loading = False
        self.has_more = True
        self.error: Optional[str] = None
        self._toggles: dict[UUID, LikeToggle] = {}

    @property
    def sentinel_active(self) -> bool:
        return self.has_more and not self.loading

    @property
    def can_retry(self) -> bool:
        return self.error is not None and not self.posts

    @property
    def view_state(self) -> str:
        if self.can_retry:
            return "error"
        if self.loading:
            return "loading"
        if not self.posts:
            return "empty"
        if not self.has_more:
            return "exhausted"
        return "ready"

    async def start(self) -> bool:
        """Reset to the first page; ignored while a page is loading."""
        if self.loading:
            return False
        self.page = 1
        return await self.load(1, append=False)

    async def load(self, page: int, append: bool = False) -> bool:
        """Fetch a page and append it to (or replace) the accumulated posts."""
        self.loading = True
        self.error = None
        try:
            result = await self.client.get_posts(page=page, limit=self.page_size, user_id=self.user_id)
        except (ApiError, httpx.HTTPError) as e:
            logger.warning(f"Failed to load feed page {page}: {e}")
            self.error = messages.POSTS_FETCH_FAILED
            return False
        finally:
            self.loading = False

        if append:
            self.posts.extend(result.data)
        else:
            self.posts = list(result.data)
        self.has_more = result.meta.has_more
        self._sync_toggles()
        return True

    async def on_sentinel_visible(self) -> bool:
        if not self.sentinel_active:
            return False
        next_page = self.page + 1
        loaded = await self.load(next_page, append=True)
        if loaded:
            self.page = next_page
        return loaded

    async def retry(self) -> bool:
        if not self.can_retry:
            return False
        return await self.start()

    def apply_like(self, post_id: UUID, liked: bool, likes_count: int) -> None:
        """Record a confirmed like toggle in the local post list."""
        self.posts = [
            post.model_copy(update={"is_liked": liked, "likes_count": likes_count})
            if post.id == post_id else post
            for post in self.posts
        ]
        self._sync_toggles()

    def toggle_for(self, post: PostWithUser) -> LikeToggle:
        """The like toggle bound to a post, shared across calls."""
        toggle = self._toggles.get(post.id)
        if toggle is None:
            toggle = LikeToggle(
                self.client,
                post.id,
                liked=post.is_liked,
                likes_count=post.likes_count,
                on_toggle=self.apply_like,
            )
            self._toggles[post.id] = toggle
        return toggle

    def _sync_toggles(self) -> None:
        # A pending toggle keeps its optimistic state until the request settles
        for post in self.posts:
            toggle = self._toggles.get(post.id)
            if toggle and not toggle.pending:
                toggle.sync(post.is_liked, post.likes_count)

    async def comment_preview(self, post: PostWithUser) -> list[CommentWithUser]:
        """Latest comments shown under a card; skipped when there are none."""
        if post.comments_count == 0:
            return []
        return await self.client.get_comments(post.id, limit=self.preview_comments)
