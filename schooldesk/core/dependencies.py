from typing import Optional
from urllib.parse import quote

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from schooldesk.core.database import get_db
from schooldesk.core.errors import NotFoundError, SessionRequired
from schooldesk.middleware.tenant import SCHOOL_NOT_FOUND, TenantScope
from schooldesk.schemas.auth import SessionIdentity
from schooldesk.services import (
    AuthService,
    ClassService,
    SchoolService,
    StudentService,
    TeacherService
)
from schooldesk.utils.cookie_utils import extract_token

# Distinguishes "middleware resolved no session" from "middleware did not run"
_UNRESOLVED = object()


async def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db)


async def get_school_service(db: AsyncSession = Depends(get_db)) -> SchoolService:
    return SchoolService(db)


def sign_in_path(request: Request) -> str:
    """The sign-in route matching the tree the request is in"""
    school = request.path_params.get("school")
    return f"/{quote(school)}/auth" if school else "/auth"


async def get_current_session(
    request: Request,
    auth_service: AuthService = Depends(get_auth_service)
) -> Optional[SessionIdentity]:
    resolved = getattr(request.state, "session", _UNRESOLVED)
    if resolved is not _UNRESOLVED:
        return resolved
    return await auth_service.get_session(extract_token(request))


async def require_session(
    request: Request,
    session: Optional[SessionIdentity] = Depends(get_current_session)
) -> SessionIdentity:
    """Session guard for every dashboard view"""
    if session is None:
        raise SessionRequired(redirect_to=sign_in_path(request))
    return session


async def get_tenant(
    request: Request,
    session: SessionIdentity = Depends(require_session),
    school_service: SchoolService = Depends(get_school_service)
) -> TenantScope:
    """
    Inside /<school>/dashboard the tenant is what the tenant middleware
    resolved; under /dashboard it is the profile the account owns.
    """
    if "school" in request.path_params:
        tenant = getattr(request.state, "tenant", None)
        if tenant is None:
            raise NotFoundError(SCHOOL_NOT_FOUND)
        return tenant

    school = await school_service.require_owned(session.account_id)
    return TenantScope(school_id=school.id, school_name=school.name)


async def get_class_service(
    tenant: TenantScope = Depends(get_tenant),
    db: AsyncSession = Depends(get_db)
) -> ClassService:
    return ClassService(db, tenant.school_id)


async def get_student_service(
    tenant: TenantScope = Depends(get_tenant),
    db: AsyncSession = Depends(get_db)
) -> StudentService:
    return StudentService(db, tenant.school_id)


async def get_teacher_service(
    tenant: TenantScope = Depends(get_tenant),
    db: AsyncSession = Depends(get_db)
) -> TeacherService:
    return TeacherService(db, tenant.school_id)
