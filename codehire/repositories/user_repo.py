# codehire/repositories/user_repo.py
import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import defer
from sqlmodel import Session, select

from codehire.core.errors import EmailTakenError
from codehire.models.user import User, utcnow


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserRepository:
    """
    Data access layer for User (the credential store).

    Responsibilities:
      - Pure DB operations (create + lookups + password update)
      - No FastAPI routing, no business rules

    NOTE:
      - No commits here; the service owns the transaction so a signup can
        consume its verification code and create the user atomically.
      - password_hash is deferred with raiseload unless explicitly
        requested, so default reads can never leak it.
    """

    def _select(self, include_password_hash: bool):
        stmt = select(User)
        if include_password_hash:
            # The same row may already be in the session with the hash deferred
            return stmt.execution_options(populate_existing=True)
        return stmt.options(defer(User.password_hash, raiseload=True))

    def get_by_id(
        self,
        session: Session,
        user_id: uuid.UUID,
        include_password_hash: bool = False,
    ) -> User | None:
        """Return a User by primary key, or None if not found."""
        stmt = self._select(include_password_hash).where(User.id == user_id)
        return session.exec(stmt).first()

    def get_by_email(
        self,
        session: Session,
        email: str,
        include_password_hash: bool = False,
    ) -> User | None:
        """Return a User by unique (normalized) email, or None if not found."""
        stmt = self._select(include_password_hash).where(
            User.email == normalize_email(email)
        )
        return session.exec(stmt).first()

    def create(
        self,
        session: Session,
        *,
        email: str,
        password_hash: str,
        name: str,
    ) -> User:
        """
        Insert a new User and flush so the unique index is checked now.

        Raises:
            EmailTakenError: if the email is already registered.
        """
        user = User(
            email=normalize_email(email),
            password_hash=password_hash,
            name=name.strip(),
        )
        session.add(user)
        try:
            session.flush()
        except IntegrityError:
            session.rollback()
            raise EmailTakenError()
        return user

    def update_password(self, session: Session, user: User, password_hash: str) -> User:
        """Replace the stored hash; caller commits."""
        user.password_hash = password_hash
        user.updated_at = utcnow()
        session.add(user)
        session.flush()
        return user
