from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional
from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import NullPool, QueuePool

from core.config import settings
from core.sa.models import Base


def engine_options(url: str) -> Dict[str, Any]:
    """Default create_engine() arguments for the cache database.

    Fan-out work opens one session per thread, so SQLite connections are not
    pooled and wait up to 30 seconds on a locked file instead of failing.
    """
    if make_url(url).get_backend_name() == 'sqlite':
        return {
            'connect_args': {'check_same_thread': False, 'timeout': 30},
            'poolclass': NullPool,
        }
    return {'poolclass': QueuePool, 'pool_size': 5, 'max_overflow': 10, 'pool_pre_ping': True}


class Database:
    """Engine and session factory for the book cache.

    Args:
        connection_string: SQLAlchemy URL; settings.database_url (DATABASE_URL) when omitted
        engine_kwargs: Overrides for engine_options()
    """

    def __init__(self, connection_string: Optional[str] = None, **engine_kwargs):
        self.url = connection_string or settings.database_url
        options = engine_options(self.url)
        options.update(engine_kwargs)
        self.engine = create_engine(self.url, **options)

        # Records are built after commit, so loaded attributes must survive it
        self._SessionFactory = sessionmaker(
            bind=self.engine,
            autoflush=False,
            expire_on_commit=False
        )

    @property
    def dialect_name(self) -> str:
        return self.engine.dialect.name

    @contextmanager
    def get_db(self) -> Iterator[Session]:
        """Session for one unit of work: committed on success, rolled back on error"""
        session = self._SessionFactory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def get_session(self) -> Session:
        """Unmanaged session; the caller closes it"""
        return self._SessionFactory()

    def init_db(self) -> None:
        """Create any missing tables"""
        Base.metadata.create_all(self.engine)

    def dispose(self) -> None:
        self.engine.dispose()
