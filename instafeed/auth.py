import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from instafeed.config import Settings, get_settings
from instafeed.schemas import Identity

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def verify_session_token(token: str, settings: Settings) -> Optional[dict]:
    """Verify and decode a session token issued by the auth provider"""
    if not settings.clerk_jwt_key:
        logger.warning("clerk_jwt_key is not configured; rejecting session token")
        return None
    try:
        payload = jwt.decode(
            token,
            settings.clerk_jwt_key,
            algorithms=settings.clerk_jwt_algorithms,
            options={"verify_aud": False}
        )
    except JWTError as e:
        logger.info(f"Rejected session token: {e}")
        return None

    azp = payload.get("azp")
    if settings.clerk_authorized_parties and azp not in settings.clerk_authorized_parties:
        logger.info(f"Rejected session token from unauthorized party: {azp}")
        return None
    return payload


async def get_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings)
) -> Optional[Identity]:
    """Current caller identity, or None for anonymous requests"""
    if credentials is None:
        return None

    payload = verify_session_token(credentials.credentials, settings)
    if not payload or not payload.get("sub"):
        return None
    return Identity(clerk_id=payload["sub"])
