# codehire/models/user.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    """
    Registered account.

    Identity:
      - id: generated at signup, embedded as "sub" in session tokens

    Email is stored trimmed and lowercased; the unique index is the only
    uniqueness guarantee (there is no separate existence check to race).

    password_hash is a bcrypt hash. Repository reads defer it unless the
    caller explicitly asks for it.
    """

    __tablename__ = "users"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    email: str = Field(
        unique=True,
        index=True,
        max_length=320,
        description="Normalized (trimmed, lowercased) email",
    )

    password_hash: str = Field(
        max_length=255,
        description="bcrypt hash, never plaintext",
    )

    name: str = Field(
        max_length=200,
        description="Display name",
    )

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_type=DateTime(timezone=True),
        description="Creation timestamp (UTC)",
    )

    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_type=DateTime(timezone=True),
        description="Last modification timestamp (UTC)",
    )
