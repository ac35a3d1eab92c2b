import logging
from contextlib import contextmanager
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from config import Config

logger = logging.getLogger(__name__)

Base = declarative_base()


def make_engine(database_url):
    """Build an engine, with the thread settings SQLite needs under Flask."""
    if database_url.startswith('sqlite'):
        kwargs = {'connect_args': {'check_same_thread': False}}
        # In-memory databases vanish per connection unless the pool is static
        if database_url in ('sqlite://', 'sqlite:///:memory:'):
            kwargs['poolclass'] = StaticPool
        return create_engine(database_url, **kwargs)
    return create_engine(database_url, pool_pre_ping=True)


engine = make_engine(Config.DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind=None):
    """Create any missing tables. Alembic owns the schema outside SQLite."""
    # Import models so they are registered with Base
    import models  # noqa: F401
    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database tables ensured")


def check_connection(bind=None):
    """Return True when a trivial query succeeds."""
    try:
        with (bind or engine).connect() as conn:
            conn.execute(text('SELECT 1'))
        return True
    except SQLAlchemyError as e:
        logger.error(f"Database connectivity check failed: {str(e)}")
        return False


# Context manager for SQLAlchemy sessions (needed for Flask routes)
@contextmanager
def get_db_session(session_factory=None):
    """Provide a transactional scope around a series of SQLAlchemy operations."""
    db = (session_factory or SessionLocal)()
    try:
        yield db
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"SQLAlchemy Session Error: {e}")
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"General Session Error: {e}")
        raise
    finally:
        db.close()
