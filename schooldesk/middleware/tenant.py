# middleware/tenant.py
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional, Tuple
from urllib.parse import quote

from fastapi import Request
from fastapi.responses import JSONResponse, RedirectResponse, Response
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from schooldesk.core.config import settings
from schooldesk.core.database import AsyncSessionLocal
from schooldesk.core.errors import (
    AmbiguousTenantError,
    BaseAPIError,
    DatabaseError,
    NotFoundError,
    PermissionDenied,
    get_error_message
)
from schooldesk.core.logging import logger
from schooldesk.services.auth_service import AuthService
from schooldesk.services.base_service import backend_message
from schooldesk.services.tenant_service import TenantDirectory
from schooldesk.utils.cookie_utils import extract_token

SCHOOL_NOT_FOUND = "School not found. Please check the school name."
NOT_A_MEMBER = "Access denied. Teacher does not belong to this school."


class TenantAction(str, Enum):
    ALLOW = "allow"
    REDIRECT = "redirect"
    REJECT = "reject"


@dataclass(frozen=True)
class TenantScope:
    """The school a dashboard request operates on"""
    school_id: int
    school_name: str
    teacher_id: Optional[int] = None


@dataclass(frozen=True)
class TenantDecision:
    action: TenantAction
    location: Optional[str] = None
    error: Optional[BaseAPIError] = None
    tenant: Optional[TenantScope] = None

    @classmethod
    def allow(cls, tenant: Optional[TenantScope] = None) -> "TenantDecision":
        return cls(TenantAction.ALLOW, tenant=tenant)

    @classmethod
    def redirect(cls, location: str) -> "TenantDecision":
        return cls(TenantAction.REDIRECT, location=location)

    @classmethod
    def reject(cls, error: BaseAPIError) -> "TenantDecision":
        return cls(TenantAction.REJECT, error=error)

    @property
    def status_code(self) -> int:
        if self.action is TenantAction.REDIRECT:
            return 307
        if self.action is TenantAction.REJECT:
            return self.error.status_code
        return 200

    @property
    def message(self) -> Optional[str]:
        return self.error.message if self.error else None


class TenantResolver:
    """
    Decides what happens to a request under /<school>/dashboard or
    /<school>/auth. The first matching rule wins:

    1. reserved first segment: pass through
    2. no session away from the auth page: redirect to /<school>/auth
    3. session on the auth page: redirect to /<school>/dashboard
    4. no session on the auth page: pass through
    5. no school or several schools with that name (case-insensitive): reject
    6. signed-in email is not a teacher of the school: reject
    7. lookup failure: reject with the backend message

    Anything else is allowed with the resolved school attached. The
    resolver only reads.
    """

    def __init__(self, directory: TenantDirectory, reserved_segments: Optional[Iterable[str]] = None):
        self.directory = directory
        if reserved_segments is None:
            reserved_segments = settings.RESERVED_SEGMENTS
        self.reserved_segments = {segment.lower() for segment in reserved_segments}

    @staticmethod
    def parse(path: str) -> Optional[Tuple[str, bool]]:
        """(school segment, is auth page) for a tenant path, None otherwise"""
        segments = path.strip("/").split("/")
        if len(segments) < 2 or not segments[0]:
            return None
        if segments[1] == "dashboard":
            return segments[0], False
        if segments[1] == "auth" and len(segments) == 2:
            return segments[0], True
        return None

    def applies_to(self, path: str) -> bool:
        return self.parse(path) is not None

    async def resolve(self, path: str, session: Any) -> TenantDecision:
        parsed = self.parse(path)
        if parsed is None:
            return TenantDecision.allow()
        school_name, on_auth_page = parsed

        if school_name.lower() in self.reserved_segments:
            return TenantDecision.allow()

        base = f"/{quote(school_name)}"
        if session is None and not on_auth_page:
            return TenantDecision.redirect(f"{base}/auth")
        if session is not None and on_auth_page:
            return TenantDecision.redirect(f"{base}/dashboard")
        if session is None:
            return TenantDecision.allow()

        try:
            schools = await self.directory.find_schools_by_name(school_name)
        except SQLAlchemyError as e:
            logger.error(f"Tenant school lookup failed for '{school_name}': {backend_message(e)}")
            return TenantDecision.reject(DatabaseError("Error checking school: " + backend_message(e)))

        logger.debug(f"Tenant school check for '{school_name}': {len(schools)} match(es)")
        if not schools:
            return TenantDecision.reject(NotFoundError(SCHOOL_NOT_FOUND))
        if len(schools) > 1:
            return TenantDecision.reject(AmbiguousTenantError())
        school = schools[0]

        try:
            teacher = await self.directory.find_teacher(session.email, school.id)
        except SQLAlchemyError as e:
            logger.error(f"Tenant teacher lookup failed for school {school.id}: {backend_message(e)}")
            return TenantDecision.reject(DatabaseError("Error checking teacher: " + backend_message(e)))

        logger.debug(f"Tenant teacher check for school {school.id}: {'member' if teacher else 'not a member'}")
        if teacher is None:
            return TenantDecision.reject(PermissionDenied(NOT_A_MEMBER))

        return TenantDecision.allow(TenantScope(school_id=school.id, school_name=school.name, teacher_id=teacher.id))


class TenantMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, reserved_segments: Optional[Iterable[str]] = None, session_factory=None):
        super().__init__(app)
        self.reserved_segments = reserved_segments
        self.session_factory = session_factory or AsyncSessionLocal

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if request.method == "OPTIONS" or TenantResolver.parse(path) is None:
            return await call_next(request)

        async with self.session_factory() as db:
            session = await AuthService(db).get_session(extract_token(request))
            resolver = TenantResolver(TenantDirectory(db), self.reserved_segments)
            decision = await resolver.resolve(path, session)

        if decision.action is TenantAction.REDIRECT:
            logger.debug(f"Tenant redirect {path} -> {decision.location}")
            return RedirectResponse(decision.location, status_code=decision.status_code)

        if decision.action is TenantAction.REJECT:
            logger.warning(f"Tenant request rejected: {path} ({decision.status_code})")
            return JSONResponse(
                status_code=decision.status_code,
                content=get_error_message(decision.error)
            )

        request.state.session = session
        if decision.tenant is not None:
            request.state.tenant = decision.tenant
        return await call_next(request)
