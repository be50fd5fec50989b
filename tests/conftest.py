import os

# codehire.main builds a module-level app on import, which needs these.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from fastapi.testclient import TestClient

from codehire.core import security
from codehire.core.config import Settings
from codehire.database import Database
from codehire.main import create_app

API = "/api"


class FakeEmailClient:
    """Captures verification codes instead of talking to SMTP."""

    def __init__(self):
        self.sent: list[tuple[str, str]] = []
        self.error: Exception | None = None

    def send_otp_code(self, to_email: str, code: str) -> None:
        if self.error is not None:
            raise self.error
        self.sent.append((to_email, code))

    def last_code(self, email: str) -> str:
        return [code for to, code in self.sent if to == email][-1]


class FakeAnalysisProvider:
    def __init__(self, response: str = "{}"):
        self.response = response
        self.calls: list[tuple[str, str, float]] = []

    def complete(self, system_prompt: str, user_prompt: str, temperature: float = 0.3) -> str:
        self.calls.append((system_prompt, user_prompt, temperature))
        return self.response


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    monkeypatch.setattr(security, "BCRYPT_ROUNDS", 4)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        DATABASE_URL="sqlite://",
        JWT_SECRET="test-secret",
        ENVIRONMENT="test",
    )


@pytest.fixture
def database(settings):
    db = Database(settings.DATABASE_URL)
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def session(database):
    with database.session() as s:
        yield s


@pytest.fixture
def email_client() -> FakeEmailClient:
    return FakeEmailClient()


@pytest.fixture
def provider() -> FakeAnalysisProvider:
    return FakeAnalysisProvider()


@pytest.fixture
def app(settings, database, email_client, provider):
    return create_app(
        settings,
        database=database,
        email_client=email_client,
        analysis_provider=provider,
    )


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def signup(client, email_client):
    """Run send-otp + signup and return the signup response."""

    def _signup(email="alice@x.com", password="secret1", name="Alice"):
        sent = client.post(f"{API}/auth/send-otp", json={"email": email})
        assert sent.status_code == 200, sent.text
        code = email_client.last_code(email.strip().lower())
        return client.post(
            f"{API}/auth/signup",
            json={"email": email, "otp": code, "name": name, "password": password},
        )

    return _signup
