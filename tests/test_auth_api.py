import smtplib
import uuid
from datetime import timedelta

from codehire.models.user import User
from codehire.services import otp_service as otp_module

API = "/api"


def test_health(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "codehire-backend"}


# ----- send-otp -----


def test_send_otp_emails_a_code(client, email_client):
    response = client.post(f"{API}/auth/send-otp", json={"email": " Alice@X.com "})

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Verification code sent to your email."}
    [(to, code)] = email_client.sent
    assert to == "alice@x.com"
    assert len(code) == 6 and code.isdigit()


def test_send_otp_rejects_bad_email(client, email_client):
    response = client.post(f"{API}/auth/send-otp", json={"email": "not-an-email"})

    assert response.status_code == 400
    assert response.json()["errors"] == {"email": "Please enter a valid email address"}
    assert email_client.sent == []


def test_send_otp_requires_email(client):
    response = client.post(f"{API}/auth/send-otp", json={})

    assert response.status_code == 400
    assert response.json()["errors"] == {"email": "Email is required"}


def test_send_otp_reports_delivery_failure(client, email_client):
    email_client.error = RuntimeError("SMTP is not configured")

    response = client.post(f"{API}/auth/send-otp", json={"email": "alice@x.com"})

    assert response.status_code == 500
    assert response.json()["errors"] == {"email": "Failed to send email"}
    assert response.json()["error"] == "SMTP is not configured"


def test_send_otp_hides_relay_details_in_production(app, client, email_client):
    app.state.settings.ENVIRONMENT = "production"
    email_client.error = smtplib.SMTPAuthenticationError(535, b"relay user smtp-admin rejected")

    response = client.post(f"{API}/auth/send-otp", json={"email": "alice@x.com"})

    assert response.status_code == 500
    assert response.json() == {
        "error": "Failed to send verification email. Please try again.",
        "errors": {"email": "Failed to send email"},
    }


# ----- signup -----


def test_signup_creates_account_and_session(client, signup):
    response = signup("alice@x.com", "secret1", "Alice")

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["user"]["email"] == "alice@x.com"
    assert body["user"]["name"] == "Alice"
    assert "createdAt" in body["user"]
    assert "passwordHash" not in body["user"]

    user_id = client.app.state.session_issuer.verify(body["token"])
    assert user_id == uuid.UUID(body["user"]["id"])
    assert client.cookies.get("auth") == body["token"]


def test_signup_cookie_attributes(client, signup):
    response = signup()

    header = response.headers["set-cookie"].lower()
    assert "httponly" in header
    assert "samesite=lax" in header
    assert "max-age=604800" in header
    assert "path=/" in header


def test_signup_with_code_never_issued(client):
    response = client.post(
        f"{API}/auth/signup",
        json={"email": "alice@x.com", "otp": "000000", "name": "Alice", "password": "secret1"},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid or expired verification code"
    assert "otp" in response.json()["errors"]


def test_second_code_invalidates_the_first(client, email_client, monkeypatch):
    codes = iter(["111111", "222222"])
    monkeypatch.setattr(otp_module, "generate_code", lambda: next(codes))

    client.post(f"{API}/auth/send-otp", json={"email": "alice@x.com"})
    client.post(f"{API}/auth/send-otp", json={"email": "alice@x.com"})
    form = {"email": "alice@x.com", "name": "Alice", "password": "secret1"}

    stale = client.post(f"{API}/auth/signup", json={**form, "otp": "111111"})
    fresh = client.post(f"{API}/auth/signup", json={**form, "otp": "222222"})

    assert stale.status_code == 400
    assert fresh.status_code == 200


def test_code_cannot_be_used_twice(client, email_client):
    client.post(f"{API}/auth/send-otp", json={"email": "alice@x.com"})
    code = email_client.last_code("alice@x.com")
    form = {"email": "alice@x.com", "otp": code, "name": "Alice", "password": "secret1"}

    assert client.post(f"{API}/auth/signup", json=form).status_code == 200
    assert client.post(f"{API}/auth/signup", json=form).status_code == 409


def test_expired_code_is_rejected(app, client, email_client):
    app.state.settings.OTP_TTL_MINUTES = 0

    client.post(f"{API}/auth/send-otp", json={"email": "alice@x.com"})
    code = email_client.last_code("alice@x.com")
    response = client.post(
        f"{API}/auth/signup",
        json={"email": "alice@x.com", "otp": code, "name": "Alice", "password": "secret1"},
    )

    assert app.state.settings.otp_ttl == timedelta(0)
    assert response.status_code == 400


def test_duplicate_email_conflicts_regardless_of_code(client, signup, email_client):
    assert signup("alice@x.com").status_code == 200

    client.post(f"{API}/auth/send-otp", json={"email": "alice@x.com"})
    valid = email_client.last_code("alice@x.com")
    form = {"email": "ALICE@x.com", "name": "Alice 2", "password": "secret2"}

    with_valid_code = client.post(f"{API}/auth/signup", json={**form, "otp": valid})
    with_bad_code = client.post(f"{API}/auth/signup", json={**form, "otp": "999999"})

    assert with_valid_code.status_code == 409
    assert with_bad_code.status_code == 409
    assert with_valid_code.json()["errors"] == {"email": "An account with this email already exists"}


def test_signup_collects_all_field_errors(client):
    response = client.post(f"{API}/auth/signup", json={})

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Please fix the errors below"
    assert set(body["errors"]) == {"email", "otp", "name", "password"}


def test_signup_rejects_short_password_and_bad_code_format(client):
    response = client.post(
        f"{API}/auth/signup",
        json={"email": "alice@x.com", "otp": "12ab", "name": "Alice", "password": "abc"},
    )

    errors = response.json()["errors"]
    assert response.status_code == 400
    assert errors == {
        "otp": "Enter the 6-digit code",
        "password": "Password must be at least 6 characters",
    }


# ----- login -----


def test_login_returns_session(client, signup):
    signup("alice@x.com", "secret1")
    client.cookies.clear()

    response = client.post(f"{API}/auth/login", json={"email": "Alice@x.com", "password": "secret1"})

    assert response.status_code == 200
    assert response.json()["user"]["email"] == "alice@x.com"
    assert client.cookies.get("auth") == response.json()["token"]


def test_login_failures_are_indistinguishable(client, signup):
    signup("alice@x.com", "secret1")

    unknown = client.post(f"{API}/auth/login", json={"email": "bob@x.com", "password": "secret1"})
    wrong = client.post(f"{API}/auth/login", json={"email": "alice@x.com", "password": "wrong-one"})

    assert unknown.status_code == wrong.status_code == 401
    assert unknown.json() == wrong.json() == {"error": "Invalid email or password"}


def test_login_validates_fields(client):
    response = client.post(f"{API}/auth/login", json={"email": "", "password": ""})

    assert response.status_code == 400
    assert set(response.json()["errors"]) == {"email", "password"}


# ----- me / logout -----


def test_me_with_session(client, signup):
    signup("alice@x.com")

    response = client.get(f"{API}/auth/me")

    assert response.status_code == 200
    assert response.json()["user"]["email"] == "alice@x.com"


def test_me_without_session(client):
    response = client.get(f"{API}/auth/me")

    assert response.status_code == 200
    assert response.json() == {"user": None}


def test_me_with_garbage_cookie(client):
    client.cookies.set("auth", "garbage")

    response = client.get(f"{API}/auth/me")

    assert response.status_code == 200
    assert response.json() == {"user": None}


def test_logout_clears_session(client, signup):
    signup("alice@x.com")

    response = client.post(f"{API}/auth/logout")

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert "max-age=0" in response.headers["set-cookie"].lower()
    assert client.get(f"{API}/auth/me").json() == {"user": None}


# ----- change-password -----


def _change(client, current, new):
    return client.post(
        f"{API}/auth/change-password",
        json={"currentPassword": current, "newPassword": new},
    )


def test_change_password(client, signup):
    signup("alice@x.com", "secret1")

    response = _change(client, "secret1", "newsecret")

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Password updated successfully"}

    old = client.post(f"{API}/auth/login", json={"email": "alice@x.com", "password": "secret1"})
    new = client.post(f"{API}/auth/login", json={"email": "alice@x.com", "password": "newsecret"})
    assert old.status_code == 401
    assert new.status_code == 200


def test_change_password_keeps_existing_sessions(client, signup):
    token = signup("alice@x.com", "secret1").json()["token"]

    _change(client, "secret1", "newsecret")

    assert client.app.state.session_issuer.verify(token) is not None
    assert client.get(f"{API}/auth/me").json()["user"]["email"] == "alice@x.com"


def test_change_password_wrong_current(client, signup):
    signup("alice@x.com", "secret1")

    response = _change(client, "not-it", "newsecret")

    assert response.status_code == 400
    assert response.json()["errors"] == {"currentPassword": "Current password is incorrect"}


def test_change_password_weak_new(client, signup):
    signup("alice@x.com", "secret1")

    response = _change(client, "secret1", "abc")

    assert response.status_code == 400
    assert "newPassword" in response.json()["errors"]


def test_change_password_missing_fields(client, signup):
    signup("alice@x.com", "secret1")

    response = client.post(f"{API}/auth/change-password", json={})

    assert response.status_code == 400
    assert set(response.json()["errors"]) == {"currentPassword", "newPassword"}


def test_change_password_requires_session(client):
    response = _change(client, "secret1", "newsecret")

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}


def test_me_treats_storage_failure_as_anonymous(client, signup, database):
    signup("alice@x.com")
    User.__table__.drop(database.engine)

    response = client.get(f"{API}/auth/me")

    assert response.status_code == 200
    assert response.json() == {"user": None}
