from datetime import timedelta

import pytest

from codehire.repositories.otp_repo import OtpRepository
from codehire.services import otp_service as otp_module
from codehire.services.otp_service import OtpService, generate_code

repo = OtpRepository()


@pytest.fixture
def service():
    return OtpService(repo)


def test_generated_codes_are_six_digit_strings():
    for _ in range(50):
        code = generate_code()
        assert len(code) == 6
        assert code.isdigit()


def test_leading_zeros_are_kept(monkeypatch):
    monkeypatch.setattr(otp_module.secrets, "randbelow", lambda n: 42)
    assert generate_code() == "000042"


def test_issue_stores_one_code_with_expiry(session, service):
    code = service.issue(session, " Alice@X.com ")
    session.commit()

    rows = repo.list_for_email(session, "alice@x.com")
    assert [r.otp for r in rows] == [code]
    assert rows[0].expires_at > rows[0].created_at


def test_new_code_replaces_previous(session, service, monkeypatch):
    codes = iter(["111111", "222222"])
    monkeypatch.setattr(otp_module, "generate_code", lambda: next(codes))

    first = service.issue(session, "alice@x.com")
    second = service.issue(session, "alice@x.com")
    session.commit()

    assert [r.otp for r in repo.list_for_email(session, "alice@x.com")] == [second]
    assert not service.consume(session, "alice@x.com", first)
    assert service.consume(session, "alice@x.com", second)


def test_consume_deletes_all_codes_for_email(session, service):
    code = service.issue(session, "alice@x.com")
    session.commit()

    assert service.consume(session, "ALICE@x.com", code)
    session.commit()

    assert repo.list_for_email(session, "alice@x.com") == []
    assert not service.consume(session, "alice@x.com", code)


def test_wrong_code_is_rejected_and_keeps_the_valid_one(session, service, monkeypatch):
    monkeypatch.setattr(otp_module, "generate_code", lambda: "123456")
    service.issue(session, "alice@x.com")
    session.commit()

    assert not service.consume(session, "alice@x.com", "654321")
    assert service.consume(session, "alice@x.com", "123456")


def test_code_for_another_email_is_rejected(session, service):
    code = service.issue(session, "alice@x.com")
    session.commit()

    assert not service.consume(session, "bob@x.com", code)


def test_expired_code_is_rejected(session):
    expired = OtpService(repo, ttl=timedelta(seconds=-1))
    code = expired.issue(session, "alice@x.com")
    session.commit()

    assert not expired.consume(session, "alice@x.com", code)
