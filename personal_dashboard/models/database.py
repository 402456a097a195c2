"""Database connection and session management."""

from collections.abc import Callable, Generator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from personal_dashboard.utils.config import Config, get_config

Base = declarative_base()

# Engine and session factory - initialized lazily
_engine = None
_SessionLocal = None


def get_engine(config: Config | None = None):
    """Get or create the database engine."""
    global _engine
    if _engine is None:
        config = config or get_config()
        _engine = create_engine(
            config.database.url,
            echo=config.database.echo,
            connect_args={"check_same_thread": False} if "sqlite" in config.database.url else {},
        )
    return _engine


def get_session_factory(config: Config | None = None) -> Callable[[], Session]:
    """Get or create the session factory."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=get_engine(config))
    return _SessionLocal


def init_db(config: Config | None = None) -> None:
    """Initialize the database by creating all tables."""
    # Import models to register them with Base
    from personal_dashboard.models import preference  # noqa: F401

    Base.metadata.create_all(bind=get_engine(config))


@contextmanager
def get_db_session(
    session_factory: Callable[[], Session] | None = None,
) -> Generator[Session, None, None]:
    """Context manager for database sessions."""
    SessionLocal = session_factory or get_session_factory()
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def reset_engine() -> None:
    """Reset the engine and session factory (useful for testing)."""
    global _engine, _SessionLocal
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionLocal = None
