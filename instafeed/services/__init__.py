from instafeed.services.feed import FeedService
from instafeed.services.social import InteractionService
from instafeed.services.user import UserService

__all__ = ["FeedService", "InteractionService", "UserService"]
