from urllib.parse import quote

from fastapi import APIRouter, BackgroundTasks, Depends, Request, Response, status

from schooldesk.core.dependencies import get_auth_service, get_current_session, require_session
from schooldesk.core.logging import logger
from schooldesk.schemas import (
    AccountResponse,
    AuthPageResponse,
    MessageResponse,
    PasswordResetConfirm,
    PasswordResetRequest,
    SessionIdentity,
    SessionResponse,
    SignInRequest,
    SignInResponse,
    SignUpRequest
)
from schooldesk.services import AuthService, EmailService, get_email_service
from schooldesk.utils.cookie_utils import clear_session_cookie, set_session_cookie

RESET_REQUESTED_MESSAGE = "If an account exists for this email, a password reset link has been sent"

router = APIRouter(
    responses={
        401: {"description": "Unauthorized"},
        422: {"description": "Validation error"}
    }
)

tenant_router = APIRouter()


async def _sign_in(
    request: Request,
    response: Response,
    credentials: SignInRequest,
    auth_service: AuthService,
    redirect: str
) -> SignInResponse:
    token, identity = await auth_service.sign_in(credentials.email, credentials.password)
    set_session_cookie(response, request, token)
    logger.info(f"Account {identity.account_id} signed in")
    return SignInResponse(
        access_token=token,
        expires_at=identity.expires_at,
        email=identity.email,
        redirect=redirect
    )


async def _sign_out(
    request: Request,
    response: Response,
    session: SessionIdentity,
    auth_service: AuthService,
    redirect: str
) -> MessageResponse:
    await auth_service.sign_out(session)
    clear_session_cookie(response, request)
    return MessageResponse(message="Signed out successfully", redirect=redirect)


@router.get("", response_model=AuthPageResponse)
async def auth_page():
    return AuthPageResponse(
        sign_in_url="/auth/sign-in",
        sign_up_url="/auth/sign-up",
        password_reset_url="/auth/password-reset"
    )


@router.post("/sign-up", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
async def sign_up(
    account_data: SignUpRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    return await auth_service.sign_up(account_data.email, account_data.password)


@router.post("/sign-in", response_model=SignInResponse)
async def sign_in(
    request: Request,
    response: Response,
    credentials: SignInRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    return await _sign_in(request, response, credentials, auth_service, "/dashboard")


@router.post("/password-reset", response_model=MessageResponse)
async def request_password_reset(
    reset_request: PasswordResetRequest,
    background_tasks: BackgroundTasks,
    auth_service: AuthService = Depends(get_auth_service),
    email_service: EmailService = Depends(get_email_service)
):
    """Answers the same way whether or not the account exists."""
    token = await auth_service.request_password_reset(reset_request.email)
    if token:
        background_tasks.add_task(email_service.send_password_reset, reset_request.email, token)
    return MessageResponse(message=RESET_REQUESTED_MESSAGE)


@router.post("/password-reset/confirm", response_model=MessageResponse)
async def confirm_password_reset(
    reset_data: PasswordResetConfirm,
    auth_service: AuthService = Depends(get_auth_service)
):
    await auth_service.reset_password(reset_data.token, reset_data.new_password)
    return MessageResponse(message="Password updated successfully", redirect="/auth")


@router.get("/session", response_model=SessionResponse)
async def current_session(session: SessionIdentity = Depends(get_current_session)):
    if session is None:
        return SessionResponse(authenticated=False)
    return SessionResponse(authenticated=True, email=session.email, expires_at=session.expires_at)


@router.post("/sign-out", response_model=MessageResponse)
async def sign_out(
    request: Request,
    response: Response,
    session: SessionIdentity = Depends(require_session),
    auth_service: AuthService = Depends(get_auth_service)
):
    return await _sign_out(request, response, session, auth_service, "/auth")


@tenant_router.get("/{school}/auth", response_model=AuthPageResponse)
async def tenant_auth_page(school: str):
    return AuthPageResponse(school=school, sign_in_url=f"/{quote(school)}/auth")


@tenant_router.post("/{school}/auth", response_model=SignInResponse)
async def tenant_sign_in(
    school: str,
    request: Request,
    response: Response,
    credentials: SignInRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    return await _sign_in(request, response, credentials, auth_service, f"/{quote(school)}/dashboard")


@tenant_router.post("/{school}/dashboard/sign-out", response_model=MessageResponse)
async def tenant_sign_out(
    school: str,
    request: Request,
    response: Response,
    session: SessionIdentity = Depends(require_session),
    auth_service: AuthService = Depends(get_auth_service)
):
    return await _sign_out(request, response, session, auth_service, f"/{quote(school)}/auth")
