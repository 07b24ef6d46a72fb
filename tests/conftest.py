import os
import re
import sys
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

# Ensure `import backend.app...` works regardless of where pytest is run from.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Must be set before importing backend.app.config so a developer .env is ignored.
os.environ["DISABLE_DOTENV"] = "1"

from backend.app.config import Settings  # noqa: E402
from backend.app.database import init_db  # noqa: E402
from backend.app.main import create_app  # noqa: E402
from backend.app.models import Role, User  # noqa: E402
from backend.app.services.emailer import EmailDeliveryError, Mailer  # noqa: E402
from backend.app.utils.security import hash_password  # noqa: E402

PASSWORD = "Testpass123!"
_VERIFY_LINK = re.compile(r"/#/verify-email/([0-9a-f]+)")


class RecordingMailer(Mailer):
    """Keeps sent messages in memory; set `fail = True` to simulate an SMTP outage."""

    def __init__(self):
        super().__init__(sender="noreply@flowpartner.test", frontend_url="http://frontend.test")
        self.sent = []
        self.fail = False

    def send(self, msg) -> None:
        if self.fail:
            raise EmailDeliveryError("Failed to send email: SMTPConnectError")
        self.sent.append(msg)

    def messages_to(self, email: str) -> list:
        return [m for m in self.sent if m["To"] == email]

    def last_token_for(self, email: str) -> str:
        for msg in reversed(self.messages_to(email)):
            body = msg.get_body(preferencelist=("plain",)).get_content()
            m = _VERIFY_LINK.search(body)
            if m:
                return m.group(1)
        raise AssertionError(f"No verification email sent to {email}")


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        secret_key="test-secret",
        database_url=f"sqlite:///{tmp_path / 'test.sqlite3'}",
        frontend_url="http://frontend.test",
        log_level="WARNING",
    )


@pytest.fixture()
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture()
def app(settings: Settings, mailer: RecordingMailer) -> FastAPI:
    """
    FastAPI app wired to a temporary SQLite DB and an in-memory mailer.

    TestClient is used without its context manager, so tables are created here
    rather than by the startup hook.
    """
    fastapi_app = create_app(settings, mailer=mailer)
    init_db(fastapi_app.state.engine)
    yield fastapi_app
    fastapi_app.state.engine.dispose()


@pytest.fixture()
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture()
def db_session(app: FastAPI):
    """
    Direct SQLAlchemy session bound to the same temporary SQLite DB used by the test app.
    """
    db = app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def signup(client, *, email: str, role: str, name: str = "Test User", password: str = PASSWORD):
    return client.post(
        "/auth/signup",
        json={"name": name, "email": email, "password": password, "role": role},
    )


def login(client, *, email: str, password: str = PASSWORD):
    return client.post("/auth/login", json={"email": email, "password": password})


@pytest.fixture()
def make_user(client, mailer, db_session):
    """
    Factory: create an account and log it in.

    BUSINESS_OWNER / FREELANCER go through the public signup (and, unless
    `verified=False`, the emailed verification link); ADMIN is inserted
    directly since signup never grants it.

    Returns a dict with id, email, token and headers.
    """
    counter = {"n": 0}

    def _make(role: str, *, name: str | None = None, email: str | None = None, verified: bool = True) -> dict:
        counter["n"] += 1
        email = email or f"{role.lower()}{counter['n']}@example.com"
        name = name or f"{role.title().replace('_', ' ')} {counter['n']}"

        if role == "ADMIN":
            db_session.add(
                User(
                    name=name,
                    email=email,
                    password_hash=hash_password(PASSWORD),
                    role=Role.ADMIN,
                    active=True,
                    email_verified=True,
                )
            )
            db_session.commit()
        else:
            r = signup(client, email=email, role=role, name=name)
            assert r.status_code == 201, r.text
            if verified:
                token = mailer.last_token_for(email)
                r = client.get(f"/auth/verify-email/{token}")
                assert r.status_code == 200, r.text

        r = login(client, email=email)
        assert r.status_code == 200, r.text
        data = r.json()
        return {
            "id": data["user"]["id"],
            "email": email,
            "name": name,
            "token": data["token"],
            "headers": auth_headers(data["token"]),
        }

    return _make


JOB_FIELDS = {
    "title": "Local Business Website",
    "description": "Build a modern responsive website for a local bakery.",
    "category": "Web Development",
    "budget_min": 1200,
    "budget_max": 2500,
    "deadline": "2030-03-15",
}


@pytest.fixture()
def make_job(client):
    def _make(owner: dict, **overrides) -> dict:
        r = client.post("/jobs", json={**JOB_FIELDS, **overrides}, headers=owner["headers"])
        assert r.status_code == 201, r.text
        return r.json()

    return _make


@pytest.fixture()
def make_proposal(client):
    def _make(freelancer: dict, job: dict, *, price: float = 1500, message: str = "I can do this.") -> dict:
        r = client.post(
            "/proposals",
            json={"job_id": job["id"], "message": message, "proposed_price": price},
            headers=freelancer["headers"],
        )
        assert r.status_code == 201, r.text
        return r.json()

    return _make
