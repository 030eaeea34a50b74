from typing import Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from instafeed.auth import get_identity
from instafeed.database import get_db
from instafeed.exceptions import AuthenticationRequired
from instafeed.schemas import Identity
from instafeed.services.feed import FeedService
from instafeed.services.social import InteractionService
from instafeed.services.user import UserService


async def get_feed_service(db: AsyncSession = Depends(get_db)) -> FeedService:
    """Dependency for FeedService."""
    return FeedService(db)


async def get_interaction_service(db: AsyncSession = Depends(get_db)) -> InteractionService:
    """Dependency for InteractionService."""
    return InteractionService(db)


async def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    """Dependency for UserService."""
    return UserService(db)


async def require_identity(identity: Optional[Identity] = Depends(get_identity)) -> Identity:
    """Dependency for endpoints that mutate on behalf of the caller."""
    if identity is None:
        raise AuthenticationRequired()
    return identity
