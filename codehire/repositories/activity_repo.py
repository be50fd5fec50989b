# codehire/repositories/activity_repo.py
import uuid
from datetime import datetime
from typing import Literal

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlmodel import Session, select

from codehire.models.activity import UserActivity

ActivityKind = Literal["code_review", "resume_analysis"]

# kind -> (counter column, last-at column, last-score column)
ACTIVITY_COLUMNS: dict[str, tuple[str, str, str]] = {
    "code_review": (
        "code_reviews_count",
        "last_code_review_at",
        "last_code_review_score",
    ),
    "resume_analysis": (
        "resume_analyses_count",
        "last_resume_analysis_at",
        "last_resume_score",
    ),
}

_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class ActivityRepository:
    """
    Data access layer for per-user activity counters.

    `record` is a single INSERT ... ON CONFLICT (user_id) DO UPDATE, so
    concurrent events for the same user are serialized by the database
    and no increment is lost.
    """

    def get_for_user(self, session: Session, user_id: uuid.UUID) -> UserActivity | None:
        stmt = select(UserActivity).where(UserActivity.user_id == user_id)
        return session.exec(stmt).first()

    def record(
        self,
        session: Session,
        user_id: uuid.UUID,
        kind: ActivityKind,
        at: datetime,
        score: float | None = None,
    ) -> None:
        """
        Create-or-update the user's row for one event; caller commits.

        Raises:
            NotImplementedError: for database dialects without an upsert.
            KeyError: for an unknown kind.
        """
        count_col, at_col, score_col = ACTIVITY_COLUMNS[kind]
        dialect = session.get_bind().dialect.name
        try:
            insert = _INSERTS[dialect]
        except KeyError:
            raise NotImplementedError(f"No activity upsert for dialect {dialect!r}")

        table = UserActivity.__table__

        values = {
            "id": uuid.uuid4(),
            "user_id": user_id,
            "code_reviews_count": 0,
            "resume_analyses_count": 0,
            count_col: 1,
            at_col: at,
            "created_at": at,
            "updated_at": at,
        }
        changes = {
            count_col: table.c[count_col] + 1,
            at_col: at,
            "updated_at": at,
        }
        if score is not None:
            values[score_col] = score
            changes[score_col] = score

        stmt = insert(table).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.user_id],
            set_=changes,
        )
        session.execute(stmt)
