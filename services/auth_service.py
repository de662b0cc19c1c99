import base64
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jwt.exceptions import InvalidTokenError

from core.config import Settings, get_settings
from core.exceptions import AuthorizationError

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def basic_token(username: str, password: str) -> str:
    """The Basic-style bearer value: base64 of ``username:password``."""
    return base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")


def _matches(candidate: str, expected: str) -> bool:
    return secrets.compare_digest(candidate.encode("utf-8"), expected.encode("utf-8"))


def authenticate_admin(username: str, password: str, settings: Settings) -> bool:
    if not settings.ADMIN_PASSWORD:
        return False
    return _matches(username, settings.ADMIN_USERNAME) and _matches(password, settings.ADMIN_PASSWORD)


def create_access_token(data: dict, settings: Settings, expires_delta: timedelta | None = None):
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=15)
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return encoded_jwt


def decode_admin_token(token: str, settings: Settings) -> Optional[str]:
    """Return the subject of a valid admin JWT, or None."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except InvalidTokenError:
        return None
    subject = payload.get("sub")
    if subject != settings.ADMIN_USERNAME:
        return None
    return subject


def is_valid_admin_credential(token: str, settings: Settings) -> bool:
    if _matches(token, settings.ADMIN_TOKEN):
        return True
    if settings.ADMIN_PASSWORD and _matches(token, basic_token(settings.ADMIN_USERNAME, settings.ADMIN_PASSWORD)):
        return True
    return decode_admin_token(token, settings) is not None


# Dependency guarding every admin route
def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> str:
    if credentials is None or not is_valid_admin_credential(credentials.credentials, settings):
        logger.warning("Rejected admin request with missing or invalid credential")
        raise AuthorizationError()
    return settings.ADMIN_USERNAME
