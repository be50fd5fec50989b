# codehire/database.py
import logging
import threading

from fastapi import Request
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session

logger = logging.getLogger(__name__)


class Database:
    """
    Process-wide connection pool.

    Constructed once by `create_app()` and stored on `app.state.db`;
    handlers receive sessions through the `get_session` dependency.

    The engine is created lazily on first use. Creation is guarded by a
    lock with a second check inside it, so concurrent first requests end
    up sharing one pool instead of each opening their own.

    Postgres (production):
      - sslmode=require   : appended when require_ssl is set
      - pool_size=5       : small fixed pool per process
      - pool_pre_ping=True: validate connections before using them

    SQLite (development / tests):
      - check_same_thread=False so the FastAPI threadpool can share it
      - in-memory URLs use a StaticPool (one shared connection)
    """

    def __init__(self, url: str, *, require_ssl: bool = False, echo: bool = False):
        self.url = url
        self.require_ssl = require_ssl
        self.echo = echo
        self._engine: Engine | None = None
        self._lock = threading.Lock()

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            with self._lock:
                if self._engine is None:
                    self._engine = self._create_engine()
        return self._engine

    def _create_engine(self) -> Engine:
        url = self.url

        if url.startswith("sqlite"):
            kwargs: dict = {"connect_args": {"check_same_thread": False}}
            if url in ("sqlite://", "sqlite:///:memory:"):
                kwargs["poolclass"] = StaticPool
            logger.info("Opening SQLite database")
            return create_engine(url, echo=self.echo, **kwargs)

        # Append sslmode=require if it is not already present
        if self.require_ssl and "sslmode=" not in url:
            url = url + ("&" if "?" in url else "?") + "sslmode=require"

        logger.info("Opening database connection pool")
        return create_engine(
            url,
            echo=self.echo,
            pool_pre_ping=True,
            pool_size=5,
            max_overflow=5,
        )

    def create_all(self) -> None:
        """
        Create all tables defined in SQLModel metadata if they do not exist.

        This is called once on application startup.
        """
        # Import models so SQLModel metadata is populated before create_all()
        from codehire.models import activity as _activity_models  # noqa: F401
        from codehire.models import otp as _otp_models  # noqa: F401
        from codehire.models import user as _user_models  # noqa: F401

        SQLModel.metadata.create_all(self.engine)

    def session(self) -> Session:
        return Session(self.engine)

    def dispose(self) -> None:
        with self._lock:
            if self._engine is not None:
                self._engine.dispose()
                self._engine = None


def get_db(request: Request) -> Database:
    """Return the Database attached to the running application."""
    return request.app.state.db


def get_session(request: Request):
    """
    FastAPI dependency that yields a SQLModel Session.

    Usage:

        from fastapi import Depends

        @router.get("/example")
        def example_endpoint(session: Session = Depends(get_session)):
            ...
    """
    with get_db(request).session() as session:
        yield session
