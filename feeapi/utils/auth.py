from datetime import datetime, timedelta, timezone

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from feeapi.config import settings

# auto_error is off so a missing header reaches NotAuthenticated instead of
# FastAPI's default 403 response
bearer_scheme = HTTPBearer(auto_error=False)


class NotAuthenticated(Exception):
    message = "Unauthorized. No auth token"


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = data.copy()
    to_encode.update({"exp": datetime.now(timezone.utc) + expires_delta})
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as exc:
        raise NotAuthenticated() from exc
    if not payload.get("sub"):
        raise NotAuthenticated()
    return payload


async def get_current_client(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    """Return the ``sub`` claim of the caller's bearer token."""
    if credentials is None or not credentials.credentials:
        raise NotAuthenticated()
    return decode_access_token(credentials.credentials)["sub"]
