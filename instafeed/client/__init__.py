from instafeed.client.api import ApiError, FeedApiClient
from instafeed.client.feed import InfiniteFeed
from instafeed.client.like_toggle import LikeToggle

__all__ = ["ApiError", "FeedApiClient", "InfiniteFeed", "LikeToggle"]
