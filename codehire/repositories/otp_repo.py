# codehire/repositories/otp_repo.py
from datetime import datetime

from sqlmodel import Session, select

from codehire.models.otp import OtpVerification


class OtpRepository:
    """
    Data access layer for email verification codes.

    No commits here; OtpService / AuthService decide the transaction.
    """

    def list_for_email(self, session: Session, email: str) -> list[OtpVerification]:
        stmt = select(OtpVerification).where(OtpVerification.email == email)
        return list(session.exec(stmt).all())

    def find_active(
        self,
        session: Session,
        email: str,
        code: str,
        now: datetime,
    ) -> OtpVerification | None:
        """Return a matching code that expires strictly after `now`."""
        stmt = select(OtpVerification).where(
            OtpVerification.email == email,
            OtpVerification.otp == code,
            OtpVerification.expires_at > now,
        )
        return session.exec(stmt).first()

    def delete_for_email(self, session: Session, email: str) -> None:
        for row in self.list_for_email(session, email):
            session.delete(row)
        session.flush()

    def create(
        self,
        session: Session,
        *,
        email: str,
        code: str,
        expires_at: datetime,
    ) -> OtpVerification:
        row = OtpVerification(email=email, otp=code, expires_at=expires_at)
        session.add(row)
        session.flush()
        return row
