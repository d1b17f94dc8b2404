from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field


class SessionIdentity(BaseModel):
    """The signed-in caller, as resolved from an access token"""
    account_id: int
    email: str
    token_id: str
    expires_at: datetime


class SignUpRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)


class SignInRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class PasswordResetRequest(BaseModel):
    email: EmailStr


class PasswordResetConfirm(BaseModel):
    token: str
    new_password: str = Field(..., min_length=6)


class AccountResponse(BaseModel):
    id: int
    email: str
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class SignInResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    email: str
    redirect: str


class SessionResponse(BaseModel):
    authenticated: bool
    email: Optional[str] = None
    expires_at: Optional[datetime] = None


class AuthPageResponse(BaseModel):
    """Descriptor for a sign-in page"""
    page: str = "sign-in"
    school: Optional[str] = None
    sign_in_url: str
    sign_up_url: Optional[str] = None
    password_reset_url: Optional[str] = None
