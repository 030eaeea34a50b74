from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from uuid import UUID


# ----- User Schemas -----
class UserOut(BaseModel):
    id: UUID
    clerk_id: str
    name: str
    created_at: datetime

    class Config:
        from_attributes = True


class Identity(BaseModel):
    """Caller identity as reported by the auth provider."""

    clerk_id: str


# ----- Post Schemas -----
class PostWithUser(BaseModel):
    id: UUID
    user_id: UUID
    image_url: str
    caption: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    user: UserOut
    likes_count: int = 0
    comments_count: int = 0
    is_liked: bool = False

    class Config:
        from_attributes = True


class PaginationMeta(BaseModel):
    page: int
    limit: int
    total: int
    has_more: bool


class PaginatedPosts(BaseModel):
    data: list[PostWithUser]
    meta: PaginationMeta


# ----- Comment Schemas -----
class CommentWithUser(BaseModel):
    id: UUID
    post_id: UUID
    user_id: UUID
    content: str
    created_at: datetime
    updated_at: datetime
    user: UserOut

    class Config:
        from_attributes = True


# ----- Like Schemas -----
class LikeRequest(BaseModel):
    post_id: UUID = Field(..., alias="postId", description="Post to like or unlike")

    class Config:
        populate_by_name = True


class SuccessResponse(BaseModel):
    success: bool = True


class ErrorResponse(BaseModel):
    error: str


# ----- Health Schemas -----
class HealthResponse(BaseModel):
    status: str
    database: str
    service: str
