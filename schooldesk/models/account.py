from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.sql import func
from .base import Base


class Account(Base):
    """Sign-in identity. Teachers are bound to a school through their email."""
    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    last_sign_in_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<Account(id={self.id}, email={self.email})>"


class RevokedToken(Base):
    __tablename__ = "revoked_tokens"

    id = Column(Integer, primary_key=True, index=True)
    jti = Column(String, unique=True, nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=True)
    revoked_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<RevokedToken(id={self.id}, jti={self.jti}, revoked_at={self.revoked_at})>"
