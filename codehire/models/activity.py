# codehire/models/activity.py
import uuid
from datetime import datetime

from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field

from codehire.models.user import utcnow


class UserActivity(SQLModel, table=True):
    """
    Per-user tool usage counters.

    One row per user (unique user_id), created by the first tracked
    event through an upsert. Counters only ever increase.
    """

    __tablename__ = "useractivities"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
    )

    user_id: uuid.UUID = Field(
        foreign_key="users.id",
        unique=True,
        index=True,
    )

    code_reviews_count: int = Field(default=0)
    resume_analyses_count: int = Field(default=0)

    last_code_review_at: datetime | None = Field(
        default=None,
        sa_type=DateTime(timezone=True),
    )
    last_resume_analysis_at: datetime | None = Field(
        default=None,
        sa_type=DateTime(timezone=True),
    )

    last_code_review_score: float | None = None
    last_resume_score: float | None = None

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_type=DateTime(timezone=True),
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_type=DateTime(timezone=True),
    )
