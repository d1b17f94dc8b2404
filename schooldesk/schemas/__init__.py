from .common import ListResponse, MessageResponse
from .auth import (
    SessionIdentity,
    SignUpRequest,
    SignInRequest,
    PasswordResetRequest,
    PasswordResetConfirm,
    AccountResponse,
    SignInResponse,
    SessionResponse,
    AuthPageResponse,
)
from .school import SchoolProfileRequest, SchoolResponse, DashboardOverview, TenantOverview
from .class_ import ClassCreateRequest, ClassUpdateRequest, ClassResponse, TeacherSummary
from .student import StudentCreateRequest, StudentUpdateRequest, StudentResponse
from .teacher import TeacherCreateRequest, TeacherUpdateRequest, TeacherResponse

__all__ = [
    "ListResponse",
    "MessageResponse",
    "SessionIdentity",
    "SignUpRequest",
    "SignInRequest",
    "PasswordResetRequest",
    "PasswordResetConfirm",
    "AccountResponse",
    "SignInResponse",
    "SessionResponse",
    "AuthPageResponse",
    "SchoolProfileRequest",
    "SchoolResponse",
    "DashboardOverview",
    "TenantOverview",
    "ClassCreateRequest",
    "ClassUpdateRequest",
    "ClassResponse",
    "TeacherSummary",
    "StudentCreateRequest",
    "StudentUpdateRequest",
    "StudentResponse",
    "TeacherCreateRequest",
    "TeacherUpdateRequest",
    "TeacherResponse",
]
