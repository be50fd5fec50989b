import uuid
from datetime import timedelta

import pytest
from fastapi import Response
from jose import jwt

from codehire.core.auth import SessionIssuer, clear_session_cookie, set_session_cookie
from codehire.core.config import Settings
from codehire.core.errors import UnauthorizedError


@pytest.fixture
def issuer():
    return SessionIssuer("test-secret")


def test_issue_and_verify_round_trip(issuer):
    user_id = uuid.uuid4()
    assert issuer.verify(issuer.issue(user_id)) == user_id


def test_token_expires_after_seven_days(issuer):
    claims = issuer.decode(issuer.issue(uuid.uuid4()))
    assert claims["exp"] - claims["iat"] == 7 * 24 * 60 * 60


def test_tampered_token_is_rejected(issuer):
    token = issuer.issue(uuid.uuid4())
    header, payload, signature = token.split(".")
    tampered = ".".join([header, payload, signature[::-1]])

    with pytest.raises(UnauthorizedError):
        issuer.verify(tampered)


def test_token_signed_with_other_secret_is_rejected(issuer):
    token = SessionIssuer("another-secret").issue(uuid.uuid4())
    with pytest.raises(UnauthorizedError):
        issuer.verify(token)


def test_expired_token_is_rejected():
    issuer = SessionIssuer("test-secret", ttl=timedelta(seconds=-10))
    with pytest.raises(UnauthorizedError):
        issuer.verify(issuer.issue(uuid.uuid4()))


@pytest.mark.parametrize("sub", [None, "not-a-uuid"])
def test_token_without_valid_subject_is_rejected(issuer, sub):
    claims = {"exp": 4102444800}
    if sub is not None:
        claims["sub"] = sub
    token = jwt.encode(claims, "test-secret", algorithm="HS256")

    with pytest.raises(UnauthorizedError):
        issuer.verify(token)


def test_empty_secret_is_refused():
    with pytest.raises(ValueError):
        SessionIssuer("")


def test_cookie_attributes(settings):
    response = Response()
    set_session_cookie(response, "token-value", settings)

    header = response.headers["set-cookie"].lower()
    assert header.startswith("auth=token-value")
    assert "httponly" in header
    assert "samesite=lax" in header
    assert "max-age=604800" in header
    assert "path=/" in header
    assert "secure" not in header


def test_cookie_is_secure_in_production():
    settings = Settings(
        _env_file=None,
        DATABASE_URL="sqlite://",
        JWT_SECRET="test-secret",
        ENVIRONMENT="production",
    )
    response = Response()
    set_session_cookie(response, "token-value", settings)

    assert "secure" in response.headers["set-cookie"].lower()


def test_clear_cookie_expires_it(settings):
    response = Response()
    clear_session_cookie(response, settings)

    header = response.headers["set-cookie"].lower()
    assert header.startswith('auth=""') or header.startswith("auth=;")
    assert "max-age=0" in header
