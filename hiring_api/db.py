# 🔹 FILE: hiring_api/db.py
# ==============================================================
# DB bootstrap
# - create_db_and_tables(): creates tables from SQLModel metadata
# - check_connection(): fail fast when the database is unreachable
# - get_session(): FastAPI dependency
# - get_engine(): expose engine when needed
# ==============================================================
import logging
from typing import Generator

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel, Session, create_engine

from .config import settings

logger = logging.getLogger(__name__)


def _connect_args(url: str) -> dict:
    # sync routes run in a threadpool, SQLite refuses cross-thread use by default
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


# 🛠 engine
engine = create_engine(
    settings.DATABASE_URL,
    echo=False,
    pool_pre_ping=True,
    connect_args=_connect_args(settings.DATABASE_URL),
)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    class_=Session,
    expire_on_commit=False,
)


def get_engine():
    return engine


# 🗄 create tables
def create_db_and_tables(bind=None) -> None:
    from . import models  # noqa: F401  (register tables on the metadata)

    SQLModel.metadata.create_all(bind or engine)


def check_connection(bind=None) -> None:
    """Raise if the database cannot be reached."""
    try:
        with (bind or engine).connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.critical("Database connection failed (%s)", (bind or engine).url.render_as_string(hide_password=True))
        raise


# 🔌 Dependency - Session
def get_session() -> Generator[Session, None, None]:
    """
    FastAPI dependency: yields a SQLModel Session.
    Example:
        @router.get("/")
        def read_items(session: Session = Depends(get_session)):
            ...
    """
    with SessionLocal() as session:
        yield session
