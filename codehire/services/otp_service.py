# codehire/services/otp_service.py
import logging
import secrets
from datetime import datetime, timedelta, timezone

from sqlmodel import Session

from codehire.repositories.otp_repo import OtpRepository
from codehire.repositories.user_repo import normalize_email

logger = logging.getLogger(__name__)

OTP_DIGITS = 6


def generate_code() -> str:
    """Uniform 6-digit code, zero-padded ("000000".."999999")."""
    return f"{secrets.randbelow(10 ** OTP_DIGITS):0{OTP_DIGITS}d}"


class OtpService:
    """
    Issues and consumes email verification codes.

    Rules:
      - at most one usable code per email: issuing deletes older codes,
        a successful consume deletes every code for the email
      - a code is usable only while expires_at is strictly in the future

    Neither method commits; the caller owns the transaction.

    NOTE:
      - two concurrent issues for the same email can interleave their
        delete/insert and leave two live codes for the rest of the
        validity window.
    """

    def __init__(self, repo: OtpRepository, ttl: timedelta = timedelta(minutes=5)):
        self.repo = repo
        self.ttl = ttl

    def issue(self, session: Session, email: str) -> str:
        email = normalize_email(email)
        code = generate_code()
        expires_at = datetime.now(timezone.utc) + self.ttl

        self.repo.delete_for_email(session, email)
        self.repo.create(session, email=email, code=code, expires_at=expires_at)
        logger.info("Issued verification code for %s", email)
        return code

    def consume(self, session: Session, email: str, code: str) -> bool:
        email = normalize_email(email)
        now = datetime.now(timezone.utc)

        match = self.repo.find_active(session, email, code.strip(), now)
        if match is None:
            return False

        self.repo.delete_for_email(session, email)
        return True
