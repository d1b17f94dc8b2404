from datetime import datetime, timezone
from typing import Optional, Tuple

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from schooldesk.core.errors import (
    ConflictError,
    DatabaseError,
    InvalidCredentialsException,
    TokenError,
    ValidationError
)
from schooldesk.core.logging import logger, log_function_call
from schooldesk.core.security import (
    TokenType,
    create_access_token,
    create_password_reset_token,
    decode_token,
    get_password_hash,
    verify_password
)
from schooldesk.models import Account, RevokedToken
from schooldesk.schemas.auth import SessionIdentity


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


class AuthService:
    """
    Identity provider backed by the accounts table.

    Sessions are stateless JWTs; signing out and consuming a reset token
    record the token id in revoked_tokens.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_account_by_email(self, email: str) -> Optional[Account]:
        result = await self.db.execute(
            select(Account).where(func.lower(Account.email) == normalize_email(email))
        )
        return result.scalars().first()

    async def _is_revoked(self, jti: str) -> bool:
        result = await self.db.execute(select(RevokedToken.id).where(RevokedToken.jti == jti))
        return result.scalar_one_or_none() is not None

    def _revoke(self, jti: str, account_id: Optional[int]) -> None:
        self.db.add(RevokedToken(jti=jti, account_id=account_id))

    @log_function_call(logger)
    async def sign_up(self, email: str, password: str) -> Account:
        email = normalize_email(email)
        if not email or not password:
            raise ValidationError()

        try:
            if await self.get_account_by_email(email):
                raise ConflictError("User already registered", error_code="ACCOUNT_EXISTS")

            account = Account(
                email=email,
                password_hash=get_password_hash(password),
                is_active=True
            )
            self.db.add(account)
            await self.db.commit()
            await self.db.refresh(account)
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("User already registered", error_code="ACCOUNT_EXISTS")
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Error creating account: {str(e)}", exc_info=True)
            raise DatabaseError(str(e))

        logger.info(f"Account created: {account.id}")
        return account

    @log_function_call(logger)
    async def sign_in(self, email: str, password: str) -> Tuple[str, SessionIdentity]:
        try:
            account = await self.get_account_by_email(email)
        except SQLAlchemyError as e:
            logger.error(f"Error loading account: {str(e)}", exc_info=True)
            raise DatabaseError(str(e))

        if not account or not verify_password(password, account.password_hash):
            logger.warning("Failed sign-in attempt")
            raise InvalidCredentialsException()
        if not account.is_active:
            logger.warning(f"Sign-in attempt on inactive account {account.id}")
            raise InvalidCredentialsException()

        token = create_access_token(account.id, account.email)
        payload = decode_token(token, TokenType.ACCESS)

        try:
            account.last_sign_in_at = datetime.now(timezone.utc)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Error recording sign-in: {str(e)}", exc_info=True)
            raise DatabaseError(str(e))

        return token, self._identity(account, payload)

    @staticmethod
    def _identity(account: Account, payload: dict) -> SessionIdentity:
        return SessionIdentity(
            account_id=account.id,
            email=account.email,
            token_id=payload["jti"],
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
        )

    async def get_session(self, token: Optional[str]) -> Optional[SessionIdentity]:
        """
        Resolve an access token to the signed-in account.

        Every failure reads as "no session": missing, malformed, expired or
        revoked tokens, unknown or inactive accounts and backend errors.
        """
        if not token:
            return None
        try:
            payload = decode_token(token, TokenType.ACCESS)
        except TokenError:
            return None

        try:
            if await self._is_revoked(payload["jti"]):
                return None
            account = await self.db.get(Account, int(payload["sub"]))
        except (SQLAlchemyError, ValueError) as e:
            logger.error(f"Session lookup failed: {str(e)}")
            return None

        if account is None or not account.is_active:
            return None
        return self._identity(account, payload)

    async def sign_out(self, session: SessionIdentity) -> None:
        try:
            if not await self._is_revoked(session.token_id):
                self._revoke(session.token_id, session.account_id)
                await self.db.commit()
        except IntegrityError:
            # Revoked concurrently
            await self.db.rollback()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Error revoking session: {str(e)}", exc_info=True)
            raise DatabaseError(str(e))
        logger.info(f"Account {session.account_id} signed out")

    async def request_password_reset(self, email: str) -> Optional[str]:
        """Reset token for a known active account, None otherwise"""
        try:
            account = await self.get_account_by_email(email)
        except SQLAlchemyError as e:
            logger.error(f"Error loading account: {str(e)}", exc_info=True)
            raise DatabaseError(str(e))

        if not account or not account.is_active:
            logger.info("Password reset requested for unknown account")
            return None
        return create_password_reset_token(account.email)

    @log_function_call(logger)
    async def reset_password(self, token: str, new_password: str) -> Account:
        payload = decode_token(token, TokenType.RESET)

        try:
            if await self._is_revoked(payload["jti"]):
                raise TokenError("Reset link has already been used")

            account = await self.get_account_by_email(payload["sub"])
            if not account or not account.is_active:
                raise TokenError()

            account.password_hash = get_password_hash(new_password)
            # A reset token works once
            self._revoke(payload["jti"], account.id)
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise TokenError("Reset link has already been used")
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Error resetting password: {str(e)}", exc_info=True)
            raise DatabaseError(str(e))

        logger.info(f"Password reset for account {account.id}")
        return account

    async def ensure_account(self, email: str, password: str) -> Optional[Account]:
        """
        Create an account for email unless one exists. Runs inside the
        caller's transaction: flushes, never commits.
        """
        existing = await self.get_account_by_email(email)
        if existing:
            return None
        account = Account(
            email=normalize_email(email),
            password_hash=get_password_hash(password),
            is_active=True
        )
        self.db.add(account)
        await self.db.flush()
        logger.info(f"Sign-in account created for teacher email {account.email}")
        return account
