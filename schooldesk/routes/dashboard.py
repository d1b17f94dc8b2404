from fastapi import APIRouter, Depends

from schooldesk.core.dependencies import get_school_service, get_tenant, require_session
from schooldesk.middleware.tenant import TenantScope
from schooldesk.schemas import (
    DashboardOverview,
    SchoolProfileRequest,
    SchoolResponse,
    SessionIdentity,
    TenantOverview
)
from schooldesk.services import SchoolService

# /dashboard: the school profile owned by the signed-in account
router = APIRouter(responses={401: {"description": "Sign-in required"}})

# /{school}/dashboard: the school resolved by the tenant middleware
tenant_router = APIRouter(responses={401: {"description": "Sign-in required"}})


@router.get("", response_model=DashboardOverview)
async def dashboard_overview(
    session: SessionIdentity = Depends(require_session),
    school_service: SchoolService = Depends(get_school_service)
):
    school = await school_service.get_owned(session.account_id)
    return DashboardOverview(
        email=session.email,
        school=SchoolResponse.model_validate(school) if school else None
    )


@router.get("/school", response_model=SchoolResponse)
async def get_school_profile(
    session: SessionIdentity = Depends(require_session),
    school_service: SchoolService = Depends(get_school_service)
):
    return await school_service.require_owned(session.account_id)


@router.put("/school", response_model=SchoolResponse)
async def save_school_profile(
    profile: SchoolProfileRequest,
    session: SessionIdentity = Depends(require_session),
    school_service: SchoolService = Depends(get_school_service)
):
    """Create the profile on first save, update it afterwards."""
    return await school_service.save_profile(session.account_id, profile.model_dump(exclude_unset=True))


@tenant_router.get("", response_model=TenantOverview)
async def tenant_overview(
    tenant: TenantScope = Depends(get_tenant),
    school_service: SchoolService = Depends(get_school_service)
):
    counts = await school_service.counts(tenant.school_id)
    return TenantOverview(
        school=tenant.school_name,
        welcome=f"Welcome to {tenant.school_name.upper()}",
        **counts
    )


@tenant_router.get("/school", response_model=SchoolResponse)
async def get_tenant_school(
    tenant: TenantScope = Depends(get_tenant),
    school_service: SchoolService = Depends(get_school_service)
):
    return await school_service.get_by_id(tenant.school_id)


@tenant_router.put("/school", response_model=SchoolResponse)
async def update_tenant_school(
    profile: SchoolProfileRequest,
    tenant: TenantScope = Depends(get_tenant),
    school_service: SchoolService = Depends(get_school_service)
):
    return await school_service.update_profile(tenant.school_id, profile.model_dump(exclude_unset=True))
