import asyncio
import logging
from typing import Callable, Optional
from uuid import UUID

import httpx

from instafeed.client.api import ApiError, FeedApiClient

logger = logging.getLogger(__name__)

OnToggle = Callable[[UUID, bool, int], None]


class LikeToggle:
    """
    Optimistic like state for a single post.

    The new state is applied before the request is sent and restored if the
    request fails. Only one request is in flight at a time; activations while
    one is pending are ignored.
    """

    def __init__(
        self,
        client: FeedApiClient,
        post_id: UUID,
        liked: bool = False,
        likes_count: int = 0,
        on_toggle: Optional[OnToggle] = None,
        burst_duration: float = 1.0,
    ):
        self.client = client
        self.post_id = post_id
        self.liked = liked
        self.likes_count = likes_count
        self.on_toggle = on_toggle
        self.burst_duration = burst_duration
        self.pending = False
        self.show_burst = False
        self._burst_handle: Optional[asyncio.TimerHandle] = None

    def sync(self, liked: bool, likes_count: int) -> None:
        """Adopt values supplied from outside (e.g. a refreshed feed page)."""
        self.liked = liked
        self.likes_count = likes_count

    async def toggle(self, from_double_tap: bool = False) -> bool:
        """
        Flip the like state and send the matching request.

        Returns True when the server accepted the change, False when the
        activation was ignored or rolled back.
        """
        if self.pending:
            return False

        prev_liked, prev_count = self.liked, self.likes_count
        new_liked = not prev_liked
        new_count = prev_count + 1 if new_liked else max(0, prev_count - 1)

        self.liked, self.likes_count = new_liked, new_count
        if from_double_tap and new_liked:
            self._start_burst()

        self.pending = True
        try:
            if new_liked:
                await self.client.like(self.post_id)
            else:
                await self.client.unlike(self.post_id)
        except (ApiError, httpx.HTTPError) as e:
            logger.warning(f"Rolling back like toggle for post {self.post_id}: {e}")
            self.liked, self.likes_count = prev_liked, prev_count
            self._clear_burst()
            return False
        finally:
            self.pending = False

        if self.on_toggle:
            self.on_toggle(self.post_id, new_liked, new_count)
        return True

    async def double_tap(self) -> bool:
        """Like via the image gesture; does nothing if already liked or busy."""
        if self.liked or self.pending:
            return False
        return await self.toggle(from_double_tap=True)

    def _start_burst(self) -> None:
        if self._burst_handle:
            self._burst_handle.cancel()
        self.show_burst = True
        loop = asyncio.get_running_loop()
        self._burst_handle = loop.call_later(self.burst_duration, self._clear_burst)

    def _clear_burst(self) -> None:
        if self._burst_handle:
            self._burst_handle.cancel()
            self._burst_handle = None
        self.show_burst = False
