# codehire/models/otp.py
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Index
from sqlmodel import SQLModel, Field

from codehire.models.user import utcnow


class OtpVerification(SQLModel, table=True):
    """
    Short-lived email verification code.

    Keyed by email rather than by user: the account does not exist yet
    when the code is issued. Lookups always filter on expires_at, so
    stale rows are never matched even before they are cleaned up.
    """

    __tablename__ = "otpverifications"
    __table_args__ = (Index("ix_otpverifications_email_otp", "email", "otp"),)

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
    )

    email: str = Field(
        index=True,
        max_length=320,
    )

    # Zero-padded, e.g. "004217"
    otp: str = Field(
        min_length=6,
        max_length=6,
    )

    expires_at: datetime = Field(
        sa_type=DateTime(timezone=True),
        description="Absolute expiry (UTC)",
    )

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_type=DateTime(timezone=True),
    )
