from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID, uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError

from instafeed.api.deps import get_feed_service, get_interaction_service, get_user_service
from instafeed.auth import get_identity
from instafeed.main import app
from instafeed.schemas import Identity

BASE_TIME = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


def db_down() -> OperationalError:
    return OperationalError("SELECT 1", {}, Exception("connection refused"))


class FakeStore:
    """In-memory stand-in for the hosted database, including the unique like pair."""

    def __init__(self):
        self.users: dict[str, dict] = {}
        self.posts: list[dict] = []
        self.likes: set[tuple[UUID, UUID]] = set()
        self.comments: list[dict] = []
        self.identity: Optional[Identity] = None
        self.fail = False

    def add_user(self, name: str, clerk_id: Optional[str] = None) -> dict:
        user = {
            "id": uuid4(),
            "clerk_id": clerk_id or f"user_{name}",
            "name": name,
            "created_at": BASE_TIME,
        }
        self.users[user["clerk_id"]] = user
        return user

    def add_post(self, user: dict, caption: Optional[str] = None, minutes: int = 0) -> dict:
        created_at = BASE_TIME + timedelta(minutes=minutes)
        post = {
            "id": uuid4(),
            "user_id": user["id"],
            "image_url": f"https://cdn.example.com/{uuid4().hex}.jpg",
            "caption": caption,
            "created_at": created_at,
            "updated_at": created_at,
        }
        self.posts.append(post)
        return post

    def add_comment(self, post: dict, user: dict, content: str, minutes: int = 0) -> dict:
        created_at = BASE_TIME + timedelta(minutes=minutes)
        comment = {
            "id": uuid4(),
            "post_id": post["id"],
            "user_id": user["id"],
            "content": content,
            "created_at": created_at,
            "updated_at": created_at,
        }
        self.comments.append(comment)
        return comment

    def sign_in(self, clerk_id: str) -> None:
        self.identity = Identity(clerk_id=clerk_id)

    def like_count(self, post_id: UUID) -> int:
        return sum(1 for pid, _ in self.likes if pid == post_id)

    def user_by_id(self, user_id: UUID) -> dict:
        return next(u for u in self.users.values() if u["id"] == user_id)

    def check(self) -> None:
        if self.fail:
            raise db_down()


class FakeFeedService:
    def __init__(self, store: FakeStore):
        self.store = store

    async def get_posts(self, page=1, limit=10, user_id=None, viewer_user_id=None):
        self.store.check()
        posts = [p for p in self.store.posts if user_id is None or p["user_id"] == user_id]
        posts.sort(key=lambda p: p["created_at"], reverse=True)
        offset = (page - 1) * limit
        result = []
        for post in posts[offset:offset + limit]:
            result.append({
                **post,
                "user": self.store.user_by_id(post["user_id"]),
                "likes_count": self.store.like_count(post["id"]),
                "comments_count": sum(1 for c in self.store.comments if c["post_id"] == post["id"]),
                "is_liked": viewer_user_id is not None and (post["id"], viewer_user_id) in self.store.likes,
            })
        return result, len(posts)


class FakeInteractionService:
    def __init__(self, store: FakeStore):
        self.store = store

    async def like_post(self, user_id, post_id):
        self.store.check()
        if (post_id, user_id) in self.store.likes:
            return "already_liked"
        self.store.likes.add((post_id, user_id))
        return "liked"

    async def unlike_post(self, user_id, post_id):
        self.store.check()
        if (post_id, user_id) not in self.store.likes:
            return "not_liked"
        self.store.likes.discard((post_id, user_id))
        return "unliked"

    async def get_comments(self, post_id, limit=2, offset=0):
        self.store.check()
        comments = [c for c in self.store.comments if c["post_id"] == post_id]
        comments.sort(key=lambda c: c["created_at"], reverse=True)
        return [
            {**c, "user": self.store.user_by_id(c["user_id"])}
            for c in comments[offset:offset + limit]
        ]


class FakeUserService:
    def __init__(self, store: FakeStore):
        self.store = store

    async def resolve_user_id(self, clerk_id):
        self.store.check()
        user = self.store.users.get(clerk_id)
        return user["id"] if user else None


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
async def client(store):
    app.dependency_overrides[get_feed_service] = lambda: FakeFeedService(store)
    app.dependency_overrides[get_interaction_service] = lambda: FakeInteractionService(store)
    app.dependency_overrides[get_user_service] = lambda: FakeUserService(store)
    app.dependency_overrides[get_identity] = lambda: store.identity

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
