import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.exc import SQLAlchemyError

from instafeed import messages
from instafeed.api.deps import (
    get_feed_service,
    get_interaction_service,
    get_user_service,
    require_identity,
)
from instafeed.auth import get_identity
from instafeed.config import get_settings
from instafeed.exceptions import AlreadyLiked, ServiceError, UserNotFound
from instafeed.schemas import (
    CommentWithUser,
    ErrorResponse,
    Identity,
    LikeRequest,
    PaginatedPosts,
    PaginationMeta,
    PostWithUser,
    SuccessResponse,
)
from instafeed.services.feed import FeedService
from instafeed.services.social import InteractionService
from instafeed.services.user import UserService

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(prefix="/api")

ERRORS = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


async def _resolve_user_id(user_service: UserService, identity: Identity) -> UUID:
    user_id = await user_service.resolve_user_id(identity.clerk_id)
    if user_id is None:
        logger.warning(f"No user row for identity {identity.clerk_id}")
        raise UserNotFound()
    return user_id


# ----- Feed Endpoints -----
@router.get("/posts", response_model=PaginatedPosts, tags=["Posts"], responses={500: ERRORS[500]})
async def list_posts(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.feed_limit_default, ge=1),
    user_id: Optional[UUID] = Query(default=None, alias="userId", description="Owner filter (profile page)"),
    identity: Optional[Identity] = Depends(get_identity),
    feed_service: FeedService = Depends(get_feed_service),
    user_service: UserService = Depends(get_user_service),
):
    """
    Get posts newest first, enriched with author, counts and the caller's
    like state. Anonymous callers always see is_liked=false.
    """
    try:
        viewer_user_id = None
        if identity:
            viewer_user_id = await user_service.resolve_user_id(identity.clerk_id)

        posts, total = await feed_service.get_posts(
            page=page,
            limit=limit,
            user_id=user_id,
            viewer_user_id=viewer_user_id,
        )
    except SQLAlchemyError as e:
        logger.error(f"Error fetching posts: {e}", exc_info=True)
        raise ServiceError(messages.POSTS_FETCH_FAILED)

    offset = (page - 1) * limit
    return PaginatedPosts(
        data=[PostWithUser(**p) for p in posts],
        meta=PaginationMeta(
            page=page,
            limit=limit,
            total=total,
            has_more=offset + limit < total,
        ),
    )


# ----- Comment Endpoints -----
@router.get("/comments", response_model=list[CommentWithUser], tags=["Comments"], responses={400: ERRORS[400], 500: ERRORS[500]})
async def list_comments(
    post_id: UUID = Query(..., alias="postId"),
    limit: int = Query(default=settings.comments_limit_default, ge=1),
    offset: int = Query(default=0, ge=0),
    interaction_service: InteractionService = Depends(get_interaction_service),
):
    """Get the latest comments of a post (defaults to a two-comment preview)."""
    try:
        comments = await interaction_service.get_comments(post_id, limit, offset)
    except SQLAlchemyError as e:
        logger.error(f"Error fetching comments: {e}", exc_info=True)
        raise ServiceError(messages.COMMENTS_FETCH_FAILED)

    return [CommentWithUser(**c) for c in comments]


# ----- Like Endpoints -----
@router.post("/likes", response_model=SuccessResponse, tags=["Likes"], responses=ERRORS)
async def like_post(
    identity: Identity = Depends(require_identity),
    request: LikeRequest = Body(...),
    user_service: UserService = Depends(get_user_service),
    interaction_service: InteractionService = Depends(get_interaction_service),
):
    """Like a post. A second like by the same user is a 409."""
    try:
        user_id = await _resolve_user_id(user_service, identity)
        status = await interaction_service.like_post(user_id, request.post_id)
    except SQLAlchemyError as e:
        logger.error(f"Error inserting like: {e}", exc_info=True)
        raise ServiceError(messages.LIKE_ADD_FAILED)

    if status == "already_liked":
        raise AlreadyLiked()
    return SuccessResponse()


@router.delete("/likes", response_model=SuccessResponse, tags=["Likes"], responses={k: v for k, v in ERRORS.items() if k != 409})
async def unlike_post(
    identity: Identity = Depends(require_identity),
    request: LikeRequest = Body(...),
    user_service: UserService = Depends(get_user_service),
    interaction_service: InteractionService = Depends(get_interaction_service),
):
    """Unlike a post. Removing a like that does not exist still succeeds."""
    try:
        user_id = await _resolve_user_id(user_service, identity)
        await interaction_service.unlike_post(user_id, request.post_id)
    except SQLAlchemyError as e:
        logger.error(f"Error deleting like: {e}", exc_info=True)
        raise ServiceError(messages.LIKE_REMOVE_FAILED)

    return SuccessResponse()
