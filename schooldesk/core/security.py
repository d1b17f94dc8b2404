# schooldesk/core/security.py

from datetime import datetime, timedelta, timezone
import secrets
from typing import Dict, Optional, Any
from jose import JWTError, jwt
from passlib.context import CryptContext

from schooldesk.core.config import settings, get_jwt_settings, get_token_expires_delta
from schooldesk.core.errors import TokenError
from schooldesk.core.logging import logger


class TokenType:
    ACCESS = "access"
    RESET = "reset"


pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__default_rounds=settings.BCRYPT_ROUNDS
)


def create_token(
    data: Dict[str, Any],
    token_type: str,
    expires_delta: Optional[timedelta] = None
) -> str:
    """Create JWT token with specified type and expiration"""
    jwt_settings = get_jwt_settings()
    to_encode = data.copy()

    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or get_token_expires_delta())

    to_encode.update({
        "exp": expire,
        "iat": now,
        "iss": jwt_settings["token_issuer"],
        "type": token_type,
        "jti": secrets.token_urlsafe(32)
    })

    return jwt.encode(
        to_encode,
        jwt_settings["secret_key"],
        algorithm=jwt_settings["algorithm"]
    )


def decode_token(token: str, token_type: Optional[str] = None) -> Dict[str, Any]:
    """
    Verify a JWT and optionally check its type.

    Raises:
        TokenError: signature, expiry, issuer or type mismatch
    """
    jwt_settings = get_jwt_settings()
    try:
        payload = jwt.decode(
            token,
            jwt_settings["secret_key"],
            algorithms=[jwt_settings["algorithm"]],
            issuer=jwt_settings["token_issuer"]
        )
    except JWTError as e:
        logger.debug(f"Token verification failed: {str(e)}")
        raise TokenError()

    if token_type and payload.get("type") != token_type:
        raise TokenError(f"Invalid token type. Expected {token_type}")

    if not payload.get("sub") or not payload.get("jti"):
        raise TokenError()

    return payload


def get_password_hash(password: str) -> str:
    """Hash password using bcrypt"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash"""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Unrecognised or corrupted hash
        return False


def create_access_token(account_id: int, email: str) -> str:
    data = {
        "sub": str(account_id),
        "email": email
    }
    return create_token(data, TokenType.ACCESS)


def create_password_reset_token(email: str) -> str:
    data = {"sub": email}
    return create_token(
        data,
        TokenType.RESET,
        get_token_expires_delta(settings.PASSWORD_RESET_EXPIRE_MINUTES)
    )
