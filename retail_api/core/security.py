from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt, JWTError, ExpiredSignatureError
from jose.exceptions import JWTClaimsError
from passlib.context import CryptContext

from retail_api.core import config

pwd_ctx = CryptContext(schemes=["bcrypt"], deprecated="auto")


class MissingSecretError(RuntimeError):
    pass


class TokenVerificationError(Exception):
    """Base class for every reason a bearer token is refused."""


class TokenMalformedError(TokenVerificationError):
    pass


class TokenSignatureError(TokenVerificationError):
    pass


class TokenExpiredError(TokenVerificationError):
    pass


def hash_password(password: str) -> str:
    return pwd_ctx.hash(password)

def verify_password(plain: str, hashed: str) -> bool:
    if not hashed:
        return False
    return pwd_ctx.verify(plain, hashed)


def signing_secret() -> str:
    if not config.JWT_SECRET:
        raise MissingSecretError("JWT_SECRET is not configured")
    return config.JWT_SECRET


def issue_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """Signs a token carrying the user id, valid for ACCESS_TOKEN_EXPIRE_DAYS by default."""
    expires = datetime.now(timezone.utc) + (expires_delta or timedelta(days=config.ACCESS_TOKEN_EXPIRE_DAYS))
    to_encode = {"id": str(user_id), "exp": expires}
    return jwt.encode(to_encode, signing_secret(), algorithm=config.JWT_ALGORITHM)


def verify_token(token: str) -> str:
    """
    Returns the user id carried by a token.

    The signature is checked before the expiry, so a tampered token is
    reported as a signature failure even when it has also expired.
    """
    secret = signing_secret()
    try:
        jwt.get_unverified_claims(token)
    except JWTError as e:
        raise TokenMalformedError(str(e))

    try:
        payload = jwt.decode(token, secret, algorithms=[config.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise TokenExpiredError("Signature has expired")
    except JWTClaimsError as e:
        raise TokenMalformedError(str(e))
    except JWTError as e:
        raise TokenSignatureError(str(e))

    user_id = payload.get("id")
    if not user_id:
        raise TokenMalformedError("Token carries no user id")
    return user_id
