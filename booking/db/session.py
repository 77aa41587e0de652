import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from booking.core.config import settings

logger = logging.getLogger(__name__)


def _engine_kwargs(database_url: str) -> dict:
    if database_url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


engine = create_engine(settings.DATABASE_URL, echo=settings.DB_ECHO, **_engine_kwargs(settings.DATABASE_URL))
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


class Base(DeclarativeBase):
    pass


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def rollback_quietly(db: Session, context: str) -> None:
    # The transaction is already abandoned; a failed rollback is only logged.
    try:
        db.rollback()
    except Exception:
        logger.warning("%s_rollback_failed", context, exc_info=True)


def init_db() -> None:
    from booking.models import block, flight, seat  # noqa: F401  registers the mapped tables

    Base.metadata.create_all(bind=engine)
