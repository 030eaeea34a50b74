from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text
from typing import Optional
from uuid import UUID


class UserService:
    """Maps auth-provider identities onto local user rows."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def resolve_user_id(self, clerk_id: str) -> Optional[UUID]:
        """Return users.id for an external identity, or None if not synced yet."""
        result = await self.db.execute(
            text("SELECT id FROM users WHERE clerk_id = :clerk_id LIMIT 1"),
            {"clerk_id": clerk_id},
        )
        row = result.fetchone()
        return row.id if row else None
