import httpx
from typing import Optional
from uuid import UUID

from instafeed import messages
from instafeed.schemas import CommentWithUser, PaginatedPosts


class ApiError(Exception):
    """Non-2xx response from the feed API."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class FeedApiClient:
    """
    Async client for the feed API.

    Transport errors (connection refused, timeouts) propagate as
    httpx.HTTPError; non-2xx responses raise ApiError.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        if http_client is None:
            if not base_url:
                raise ValueError("base_url is required when no http_client is given")
            http_client = httpx.AsyncClient(base_url=base_url)
        self.http_client = http_client
        # Per-request headers; http_client itself is left untouched
        self.headers = {"Authorization": f"Bearer {token}"} if token else {}

    async def get_posts(
        self,
        page: int = 1,
        limit: int = 10,
        user_id: Optional[UUID] = None,
    ) -> PaginatedPosts:
        """Fetch one page of the feed."""
        params = {"page": page, "limit": limit}
        if user_id:
            params["userId"] = str(user_id)

        response = await self.http_client.get("/api/posts", params=params, headers=self.headers)
        self._raise_for_status(response, messages.POSTS_FETCH_FAILED)
        return PaginatedPosts(**response.json())

    async def get_comments(
        self,
        post_id: UUID,
        limit: int = 2,
        offset: int = 0,
    ) -> list[CommentWithUser]:
        """Fetch the latest comments of a post."""
        response = await self.http_client.get(
            "/api/comments",
            params={"postId": str(post_id), "limit": limit, "offset": offset},
            headers=self.headers,
        )
        self._raise_for_status(response, messages.COMMENTS_FETCH_FAILED)
        return [CommentWithUser(**c) for c in response.json()]

    async def like(self, post_id: UUID) -> None:
        response = await self.http_client.post("/api/likes", json={"postId": str(post_id)}, headers=self.headers)
        self._raise_for_status(response, messages.LIKE_TOGGLE_FAILED)

    async def unlike(self, post_id: UUID) -> None:
        response = await self.http_client.request(
            "DELETE", "/api/likes", json={"postId": str(post_id)}, headers=self.headers
        )
        self._raise_for_status(response, messages.LIKE_TOGGLE_FAILED)

    async def close(self):
        await self.http_client.aclose()

    @staticmethod
    def _raise_for_status(response: httpx.Response, default_message: str) -> None:
        if response.is_success:
            return
        try:
            body = response.json()
        except ValueError:
            body = None
        message = (body.get("error") if isinstance(body, dict) else None) or default_message
        raise ApiError(response.status_code, message)
