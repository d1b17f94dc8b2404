from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional
from fastapi import Request, Response
import logging

from schooldesk.core.config import settings

logger = logging.getLogger(__name__)

class CookieConfig:
    """Cookie configuration constants"""
    ALLOWED_DOMAINS = ["localhost", "127.0.0.1"]
    ACCESS_TOKEN_KEY = "access_token"
    TOKEN_PREFIX = "Bearer"
    ROOT_PATH = "/"

def get_cookie_settings(request: Request) -> Dict[str, Any]:
    host = request.headers.get("host", "").split(":")[0]
    is_localhost = host in CookieConfig.ALLOWED_DOMAINS

    cookie_settings = {
        "httponly": True,
        "secure": not is_localhost,  # False for localhost
        "samesite": "lax",
        "path": CookieConfig.ROOT_PATH
    }

    logger.debug(f"Cookie settings generated for {host}: {cookie_settings}")
    return cookie_settings

def set_session_cookie(response: Response, request: Request, access_token: str) -> None:
    """
    Store the access token in an http-only cookie.

    Args:
        response: outgoing response
        request: incoming request, used to pick cookie flags for the host
        access_token: JWT access token
    """
    expire_minutes = settings.ACCESS_TOKEN_EXPIRE_MINUTES
    expiration = datetime.now(timezone.utc) + timedelta(minutes=expire_minutes)

    response.set_cookie(
        key=CookieConfig.ACCESS_TOKEN_KEY,
        value=f"{CookieConfig.TOKEN_PREFIX} {access_token}",
        expires=expiration,
        max_age=expire_minutes * 60,
        **get_cookie_settings(request)
    )
    logger.debug("Session cookie set", extra={"expiration": expiration.isoformat()})

def clear_session_cookie(response: Response, request: Request) -> None:
    response.delete_cookie(
        key=CookieConfig.ACCESS_TOKEN_KEY,
        **get_cookie_settings(request)
    )

def extract_token(request: Request) -> Optional[str]:
    """
    Read the session token from the Authorization header, falling back to
    the access token cookie. Returns the bare token without the Bearer prefix.
    """
    prefix = f"{CookieConfig.TOKEN_PREFIX} "

    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith(prefix):
        return auth_header[len(prefix):].strip() or None

    cookie_value = request.cookies.get(CookieConfig.ACCESS_TOKEN_KEY)
    if not cookie_value:
        return None

    # Cookie values may arrive quoted because of the embedded space
    cookie_value = cookie_value.strip('"')
    if cookie_value.startswith(prefix):
        return cookie_value[len(prefix):].strip() or None
    return cookie_value
