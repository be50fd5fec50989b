# codehire/routers/profile.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from codehire.core.auth import require_auth
from codehire.database import get_session
from codehire.models.user import User
from codehire.repositories.activity_repo import ActivityRepository
from codehire.schemas.activity import ProfileStats
from codehire.services.activity_service import ActivityService

router = APIRouter(prefix="/profile", tags=["Profile"])

repo = ActivityRepository()
service = ActivityService(repo)


@router.get("/stats", response_model=ProfileStats)
def get_profile_stats(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Usage counters and last results for the logged-in user.

    Users without any tracked activity get zeros and nulls.
    """
    return service.get_stats(session, current_user.id)
