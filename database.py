# backend/database.py
import logging
from typing import Iterator, Optional

from dotenv import load_dotenv
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from core.config import settings

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class Database:
    """Owns the engine for the message store.

    The engine is created on first use and released by ``close()``; a closed
    Database builds a fresh engine the next time it is used.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.echo = echo
        self._engine: Optional[Engine] = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self._engine = self._create_engine()
            logger.info("Database engine created for %s", self._engine.url.render_as_string(hide_password=True))
        return self._engine

    def _create_engine(self) -> Engine:
        if self.url.startswith("sqlite"):
            kwargs = {"connect_args": {"check_same_thread": False}}
            if ":memory:" in self.url or self.url in ("sqlite://", "sqlite:///"):
                kwargs["poolclass"] = StaticPool
            return create_engine(self.url, echo=self.echo, **kwargs)
        return create_engine(self.url, echo=self.echo, pool_recycle=3600, pool_pre_ping=True)

    def create_db_and_tables(self) -> None:
        """Creates all tables from the models package."""
        # Importing models package ensures SQLModel metadata is populated
        import models  # noqa: F401
        SQLModel.metadata.create_all(self.engine)

    def session(self) -> Session:
        return Session(self.engine)

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            logger.info("Database engine disposed")


db = Database(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)


# Dependency to get a database session
def get_session() -> Iterator[Session]:
    """Provides a database session for one request."""
    with db.session() as session:
        yield session
