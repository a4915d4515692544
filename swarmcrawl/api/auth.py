import logging
import secrets
from typing import Callable, Optional

from fastapi import HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

logger = logging.getLogger(__name__)

bearer = HTTPBearer(auto_error=False)


def make_admin_guard(token_provider: Callable[[], Optional[str]]):
    """Build a FastAPI dependency protecting operator-only endpoints.

    Fails closed: with no admin token configured every request gets 503.
    Otherwise requests need `Authorization: Bearer <token>`.
    """

    def require_admin(creds: Optional[HTTPAuthorizationCredentials] = Security(bearer)) -> bool:
        admin = token_provider()
        if not admin:
            logger.warning("Rejected admin request: ADMIN_TOKEN not configured")
            raise HTTPException(status_code=503, detail="ADMIN_TOKEN not configured")
        token = creds.credentials if creds is not None else ""
        # compare_digest keeps the comparison time independent of the prefix match
        if not secrets.compare_digest(token or "", admin):
            logger.warning("Rejected admin request with missing or invalid token")
            raise HTTPException(status_code=401, detail="Unauthorized")
        return True

    return require_admin
