"""Text shown on a post card."""

from datetime import datetime, timezone
from typing import Optional

CAPTION_PREVIEW_LENGTH = 100


def format_relative_time(created_at: datetime, now: Optional[datetime] = None) -> str:
    """Relative timestamp such as "3시간 전" or "2일 전"."""
    if now is None:
        now = datetime.now(timezone.utc) if created_at.tzinfo else datetime.now()

    seconds = int((now - created_at).total_seconds())
    if seconds < 60:
        return "방금 전"

    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes}분 전"

    hours = minutes // 60
    if hours < 24:
        return f"{hours}시간 전"

    days = hours // 24
    if days < 30:
        return f"{days}일 전"

    # 30-day months
    months = days // 30
    if months < 12:
        return f"{months}개월 전"

    return f"{months // 12}년 전"


def caption_preview(caption: Optional[str], expanded: bool = False, limit: int = CAPTION_PREVIEW_LENGTH) -> str:
    if not caption:
        return ""
    if expanded or len(caption) <= limit:
        return caption
    return f"{caption[:limit]}..."


def likes_label(count: int) -> str:
    return f"좋아요 {count:,}개" if count > 0 else ""


def comments_label(count: int) -> str:
    return f"댓글 {count}개 모두 보기" if count > 0 else ""
