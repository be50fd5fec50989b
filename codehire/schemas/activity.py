# codehire/schemas/activity.py
import uuid
from datetime import datetime

from codehire.schemas.user import CamelModel


class TrackActivityIn(CamelModel):
    """
    Payload for recording one tool invocation.

    type must be "code_review" or "resume_analysis"; checked by the service
    so an unknown value yields the same 400 as a missing one.
    """

    type: str | None = None
    score: float | None = None


class ActivityRead(CamelModel):
    user_id: uuid.UUID
    code_reviews_count: int
    resume_analyses_count: int
    last_code_review_at: datetime | None = None
    last_resume_analysis_at: datetime | None = None
    last_code_review_score: float | None = None
    last_resume_score: float | None = None


class TrackActivityOut(CamelModel):
    success: bool = True
    activity: ActivityRead


class ProfileStats(CamelModel):
    """
    Usage summary for the profile page.

    Every field has a zero/null default so a user with no history gets a
    complete object.
    """

    code_reviews_count: int = 0
    resume_analyses_count: int = 0
    last_code_review_at: datetime | None = None
    last_resume_analysis_at: datetime | None = None
    last_resume_score: float | None = None
    last_code_review_score: float | None = None
