import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer

from retail_api.core.errors import AuthenticationError, AuthorizationError
from retail_api.core.security import verify_token, TokenVerificationError
from retail_api.db.mongo import get_db
from retail_api.services.auth_service import find_user

logger = logging.getLogger("retail_api.auth")

oauth2 = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


@dataclass
class RequestContext:
    """Per-request identity. `user` is None when the token's user no longer exists."""
    user_id: str
    user: Optional[dict] = None

    @property
    def is_admin(self) -> bool:
        return bool(self.user) and self.user.get("role") == "admin"


def get_request_context(token: Optional[str] = Depends(oauth2), db=Depends(get_db)) -> RequestContext:
    if not token:
        raise AuthenticationError("Not authorized, no token")
    try:
        user_id = verify_token(token)
    except TokenVerificationError as e:
        logger.info("Rejected token (%s): %s", type(e).__name__, e)
        raise AuthenticationError("Not authorized, invalid token")
    user = find_user(db, user_id)
    if user is None:
        logger.warning("Token for missing user %s", user_id)
    return RequestContext(user_id=user_id, user=user)


def require_admin(ctx: RequestContext = Depends(get_request_context)) -> RequestContext:
    if not ctx.is_admin:
        raise AuthorizationError("Access denied, admin only")
    return ctx
