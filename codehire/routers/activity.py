# codehire/routers/activity.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from codehire.core.auth import require_auth
from codehire.database import get_session
from codehire.models.user import User
from codehire.repositories.activity_repo import ActivityRepository
from codehire.schemas.activity import TrackActivityIn, TrackActivityOut
from codehire.services.activity_service import ActivityService

router = APIRouter(prefix="/activity", tags=["Activity"])

repo = ActivityRepository()
service = ActivityService(repo)


@router.post("/track", response_model=TrackActivityOut)
def track_activity(
    payload: TrackActivityIn,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Record one tool invocation for the logged-in user.

    Body:
      - type: "code_review" | "resume_analysis"
      - score: optional number, stored as the last score for that tool
    """
    activity = service.record_event(session, current_user.id, payload.type, payload.score)
    return TrackActivityOut(activity=activity)
