# codehire/services/activity_service.py
import uuid
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlmodel import Session

from codehire.repositories.activity_repo import ACTIVITY_COLUMNS, ActivityRepository
from codehire.schemas.activity import ActivityRead, ProfileStats


class ActivityService:
    """
    Business logic for the activity ledger.

    Responsibilities:
      - validate the activity kind
      - record events through the repository upsert and commit
      - build profile stats with defaults for users without history
    """

    def __init__(self, repo: ActivityRepository):
        self.repo = repo

    def record_event(
        self,
        session: Session,
        user_id: uuid.UUID,
        kind: str | None,
        score: float | None = None,
    ) -> ActivityRead:
        """
        Count one tool invocation for the user.

        Raises:
            HTTPException(400): if kind is not a known activity type.
        """
        if kind not in ACTIVITY_COLUMNS:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid activity type",
            )

        self.repo.record(
            session,
            user_id,
            kind,
            at=datetime.now(timezone.utc),
            score=score,
        )
        session.commit()

        activity = self.repo.get_for_user(session, user_id)
        return ActivityRead.model_validate(activity)

    def get_stats(self, session: Session, user_id: uuid.UUID) -> ProfileStats:
        activity = self.repo.get_for_user(session, user_id)
        if activity is None:
            return ProfileStats()
        return ProfileStats.model_validate(activity)
