import os
import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tortoise import Tortoise

from app.api.v1.deps import get_mail_service
from app.config import settings
from app.core import db as db_module
from app.core.exceptions import UpstreamDeliveryError
from app.core.security import hash_password
from app.main import app
from app.models.user import User
from app.services.mail_service import MailService
from helpers import PASSWORD


TEST_DB_URL = "sqlite://:memory:?cache=shared"
os.environ["DATABASE_URL"] = TEST_DB_URL
db_module.DB_URL = TEST_DB_URL
db_module.TORTOISE_ORM["connections"]["default"] = TEST_DB_URL


class RecordingMailService(MailService):
    """
    Mail collaborator for tests: records messages instead of talking SMTP,
    or fails like an SMTP server rejecting the mailbox when `fail` is set.
    """

    def __init__(self):
        super().__init__(frontend_url="http://localhost:8080")
        self.sent: list[dict] = []
        self.fail = False

    async def send(self, to: str, subject: str, html: str) -> None:
        if self.fail:
            raise UpstreamDeliveryError()
        self.sent.append({"to": to, "subject": subject, "html": html})


async def _init_test_db() -> None:
    """
    Initialize a clean in-memory SQLite database for every test.
    Ensures tables are recreated from scratch.
    """
    if Tortoise._inited:
        await Tortoise.close_connections()
    await Tortoise.init(config=db_module.TORTOISE_ORM)
    await Tortoise.generate_schemas()


@pytest_asyncio.fixture
async def db():
    """
    Fresh database without an HTTP client (for service-level tests).
    """
    await _init_test_db()
    yield
    await Tortoise.close_connections()


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    """
    Point profile image storage at a per-test temporary folder.
    """
    monkeypatch.setattr(settings, "upload_dir", str(tmp_path / "uploads"))
    return tmp_path / "uploads" / settings.profile_dir


@pytest.fixture
def mail():
    """
    Replace the mail collaborator for the duration of a test.
    """
    fake = RecordingMailService()
    app.dependency_overrides[get_mail_service] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_mail_service, None)


@pytest_asyncio.fixture
async def client(db, mail, upload_dir):
    """
    Provide an HTTPX AsyncClient bound to the FastAPI app with a fresh DB.
    """
    # Use ASGITransport without lifespan parameter (not supported in all httpx versions)
    try:
        transport = ASGITransport(app=app, lifespan="off")
    except TypeError:
        # Fallback for httpx versions that don't support lifespan parameter
        transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client


@pytest_asyncio.fixture
async def create_user():
    """
    Factory fixture to create users directly via ORM (active unless told otherwise).
    """

    async def _create_user(
        username: str | None = None,
        email: str | None = None,
        password: str = PASSWORD,
        inactive: bool = False,
    ) -> User:
        suffix = uuid.uuid4().hex[:6]
        return await User.create(
            username=username or f"user_{suffix}",
            email=email or f"{suffix}@mail.com",
            password=hash_password(password),
            inactive=inactive,
        )

    return _create_user


@pytest_asyncio.fixture
async def login(client):
    """
    Helper fixture returning the session token issued by the login endpoint.
    """

    async def _login(email: str, password: str = PASSWORD) -> str:
        resp = await client.post("/api/1.0/auth", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.text
        return resp.json()["token"]

    return _login
