from datetime import datetime, timedelta, UTC

from jose import JWTError, jwt
from passlib.context import CryptContext

from teamsync.config import settings
from teamsync.core.exceptions import UnauthorizedException

ALGORITHM = "HS256"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def create_session_token(user_id: str, expires_in: timedelta | None = None) -> str:
    """
    Sign a session token carrying only the actor id and its expiry.

    Args:
        user_id: Actor id stored in the 'sub' claim
        expires_in: Lifetime, defaults to SESSION_TTL_HOURS

    Returns:
        Encoded HS256 JWT
    """
    now = datetime.now(UTC)
    expires_in = expires_in or timedelta(hours=settings.SESSION_TTL_HOURS)
    payload = {"sub": user_id, "iat": now, "exp": now + expires_in}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_session_token(token: str) -> dict:
    """
    Decode and validate a session token using SECRET_KEY.

    Args:
        token: Session JWT from the cookie (or bearer header when bearer
            values are not trusted as raw ids)

    Returns:
        Decoded token payload with 'sub' (user id), 'exp', etc.

    Raises:
        UnauthorizedException: If token invalid, expired, or malformed
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as e:
        raise UnauthorizedException(f"Invalid token: {str(e)}")

    # jose checks expiry only when the claim is present
    if payload.get("exp") is None:
        raise UnauthorizedException("Token missing expiration")

    if not payload.get("sub"):
        raise UnauthorizedException("Token missing user identifier")

    return payload


def extract_user_id(token: str) -> str:
    """Extract the actor id from a session token"""
    payload = decode_session_token(token)
    return payload["sub"]


def hash_password(password: str) -> str:
    """Hash a plain password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """Verify a plain password against a stored hash."""
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)
