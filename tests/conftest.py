# tests/conftest.py
import os
import tempfile

# Settings are read at import time, so the environment goes first
_TMP_DIR = tempfile.mkdtemp(prefix="schooldesk-tests-")
os.environ["SECRET_KEY"] = "test-secret-key-not-for-production"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP_DIR}/test.db"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from typing import Dict, List, Tuple  # noqa: E402

import pytest  # noqa: E402
from httpx import AsyncClient, ASGITransport  # noqa: E402

from schooldesk import create_app  # noqa: E402
from schooldesk.core.database import close_db, get_db_context, reset_db  # noqa: E402
from schooldesk.models import School, Teacher  # noqa: E402
from schooldesk.services import get_email_service  # noqa: E402

DEFAULT_PASSWORD = "secret123"


# Make anyio run on asyncio (so our async fixtures work everywhere)
@pytest.fixture(scope="session", autouse=True)
def anyio_backend():
    return "asyncio"


class RecordingMailer:
    """Stands in for EmailService; keeps what would have been sent"""

    def __init__(self):
        self.reset_mails: List[Tuple[str, str]] = []

    async def send_password_reset(self, email: str, token: str) -> bool:
        self.reset_mails.append((email, token))
        return True


@pytest.fixture
async def database():
    await reset_db()
    yield
    # Pooled connections belong to this test's event loop
    await close_db()


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def app(database, mailer):
    application = create_app()
    application.dependency_overrides[get_email_service] = lambda: mailer
    return application


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as ac:
        yield ac


async def sign_up_and_in(client: AsyncClient, email: str, password: str = DEFAULT_PASSWORD) -> Dict[str, str]:
    """Create an account, sign in, and return bearer headers for it"""
    response = await client.post("/auth/sign-up", json={"email": email, "password": password})
    assert response.status_code == 201, response.text
    return await sign_in(client, email, password)


async def sign_in(client: AsyncClient, email: str, password: str = DEFAULT_PASSWORD) -> Dict[str, str]:
    response = await client.post("/auth/sign-in", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    # Tests pass the token explicitly; drop the cookie the sign-in set
    client.cookies.clear()
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
async def owner_headers(client) -> Dict[str, str]:
    """Signed-in account that owns a saved school profile"""
    headers = await sign_up_and_in(client, "owner@example.com")
    response = await client.put(
        "/dashboard/school",
        json={"name": "Maple Grove Academy", "total_students": "120"},
        headers=headers
    )
    assert response.status_code == 200, response.text
    return headers


async def create_school(name: str) -> int:
    async with get_db_context() as db:
        school = School(name=name)
        db.add(school)
        await db.flush()
        return school.id


async def add_teacher(school_id: int, name: str, email: str) -> int:
    async with get_db_context() as db:
        teacher = Teacher(school_id=school_id, name=name, email=email, subjects=[], classes=[])
        db.add(teacher)
        await db.flush()
        return teacher.id
