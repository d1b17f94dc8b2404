from dataclasses import dataclass
from typing import List, Optional, Tuple

import pytest
from sqlalchemy.exc import OperationalError

from schooldesk.middleware.tenant import TenantAction, TenantResolver

pytestmark = pytest.mark.anyio


@dataclass
class FakeSchool:
    id: int
    name: str


@dataclass
class FakeTeacher:
    id: int
    email: str
    school_id: int


@dataclass
class FakeSession:
    email: str


class FakeDirectory:
    """In-memory stand-in for TenantDirectory"""

    def __init__(self, schools: List[FakeSchool], teachers: List[FakeTeacher], fail_on: Optional[str] = None):
        self.schools = schools
        self.teachers = teachers
        self.fail_on = fail_on
        self.calls: List[Tuple] = []

    async def find_schools_by_name(self, name: str) -> List[FakeSchool]:
        self.calls.append(("schools", name))
        if self.fail_on == "school":
            raise OperationalError("SELECT schools", {}, Exception("connection refused"))
        return [s for s in self.schools if s.name.lower() == name.lower()]

    async def find_teacher(self, email: str, school_id: int) -> Optional[FakeTeacher]:
        self.calls.append(("teacher", email, school_id))
        if self.fail_on == "teacher":
            raise OperationalError("SELECT teachers", {}, Exception("timeout"))
        for teacher in self.teachers:
            if teacher.email == email and teacher.school_id == school_id:
                return teacher
        return None


@pytest.fixture
def directory():
    return FakeDirectory(
        schools=[FakeSchool(1, "GreenwoodHS"), FakeSchool(2, "RiverdaleHS"), FakeSchool(3, "Twin"), FakeSchool(4, "twin")],
        teachers=[FakeTeacher(10, "t@x.io", 1)]
    )


@pytest.fixture
def resolver(directory):
    return TenantResolver(directory, reserved_segments={"auth", "api", "_next", "favicon.ico", "dashboard"})


SIGNED_IN = FakeSession("t@x.io")


@pytest.mark.parametrize("path, expected", [
    ("/greenwoodhs/dashboard", True),
    ("/greenwoodhs/dashboard/", True),
    ("/greenwoodhs/dashboard/students/4", True),
    ("/greenwoodhs/auth", True),
    ("/greenwoodhs/auth/extra", False),
    ("/greenwoodhs", False),
    ("/dashboard/classes", False),
    ("/", False),
])
def test_applies_to_matches_tenant_shapes(resolver, path, expected):
    assert resolver.applies_to(path) is expected


async def test_reserved_segment_passes_through_untouched(resolver, directory):
    decision = await resolver.resolve("/api/dashboard", None)

    assert decision.action is TenantAction.ALLOW
    assert decision.tenant is None
    assert directory.calls == []


async def test_no_session_on_dashboard_redirects_to_tenant_auth(resolver, directory):
    decision = await resolver.resolve("/greenwoodhs/dashboard/students", None)

    assert decision.action is TenantAction.REDIRECT
    assert decision.location == "/greenwoodhs/auth"
    assert decision.status_code == 307
    assert directory.calls == []


async def test_session_on_auth_page_redirects_to_dashboard(resolver):
    decision = await resolver.resolve("/greenwoodhs/auth", SIGNED_IN)

    assert decision.action is TenantAction.REDIRECT
    assert decision.location == "/greenwoodhs/dashboard"


async def test_auth_page_without_session_is_allowed_without_lookups(resolver, directory):
    decision = await resolver.resolve("/unknown-school/auth", None)

    assert decision.action is TenantAction.ALLOW
    assert directory.calls == []


async def test_member_is_allowed_with_resolved_school(resolver):
    decision = await resolver.resolve("/GREENWOODHS/dashboard", SIGNED_IN)

    assert decision.action is TenantAction.ALLOW
    assert decision.tenant.school_id == 1
    assert decision.tenant.school_name == "GreenwoodHS"
    assert decision.tenant.teacher_id == 10


async def test_non_member_is_rejected_with_403(resolver):
    decision = await resolver.resolve("/riverdalehs/dashboard", SIGNED_IN)

    assert decision.action is TenantAction.REJECT
    assert decision.status_code == 403
    assert decision.message == "Access denied. Teacher does not belong to this school."


async def test_unknown_school_is_rejected_with_404(resolver, directory):
    decision = await resolver.resolve("/nowhere/dashboard", SIGNED_IN)

    assert decision.status_code == 404
    assert decision.message == "School not found. Please check the school name."
    # Membership is never checked for a missing school
    assert [call[0] for call in directory.calls] == ["schools"]


async def test_ambiguous_school_name_is_rejected_with_400(resolver):
    decision = await resolver.resolve("/TWIN/dashboard", SIGNED_IN)

    assert decision.action is TenantAction.REJECT
    assert decision.status_code == 400
    assert decision.message == "Multiple schools found with this name. Please contact support."


@pytest.mark.parametrize("fail_on, message", [
    ("school", "Error checking school: connection refused"),
    ("teacher", "Error checking teacher: timeout"),
])
async def test_backend_failure_is_rejected_with_500(directory, fail_on, message):
    directory.fail_on = fail_on
    resolver = TenantResolver(directory, reserved_segments={"auth"})

    decision = await resolver.resolve("/greenwoodhs/dashboard", SIGNED_IN)

    assert decision.action is TenantAction.REJECT
    assert decision.status_code == 500
    assert decision.message == message
