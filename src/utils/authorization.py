import secrets

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from loguru import logger

from src.config import settings

admin_bearer = HTTPBearer(auto_error=True)

def verify_api_key(credentials: HTTPAuthorizationCredentials = Depends(admin_bearer)) -> None:
    """
    Gate for every /api route: the roster admin console sends ROSTER_ADMIN_KEY as a bearer token.

    A server started without ROSTER_ADMIN_KEY refuses all roster requests (500) rather than
    serving them unauthenticated.
    """
    admin_key = settings.roster_admin_key
    if not admin_key:
        logger.error("ROSTER_ADMIN_KEY is not set, rejecting roster request")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server misconfigured: missing ROSTER_ADMIN_KEY",
        )

    if not secrets.compare_digest(credentials.credentials.encode(), admin_key.encode()):
        logger.info("Roster request rejected: invalid admin key")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key",
        )
