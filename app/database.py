# app/database.py
from typing import Any

from sqlmodel import SQLModel, create_engine, Session

from app.core.config import get_settings

settings = get_settings()

# ---------------------------------------------------------
# Postgres connection (via pooler)
#
# - sslmode=require   : enforce SSL when running in the cloud
# - pool_size=1       : keep only 1 connection to the pooler
# - max_overflow=0    : do not open extra connections beyond the pool
# - pool_pre_ping=True: validate connections before using them
#
# SQLite (local runs / tests) gets none of the above: its pools do
# not accept sizing arguments and it has no SSL.
# ---------------------------------------------------------


def _prepare_url(db_url: str) -> str:
    """Append sslmode=require to Postgres URLs that do not set it."""
    if not db_url.startswith("postgres") or "sslmode=" in db_url:
        return db_url
    if "?" in db_url:
        return db_url + "&sslmode=require"
    return db_url + "?sslmode=require"


def _engine_kwargs(db_url: str) -> dict[str, Any]:
    if db_url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True, "pool_size": 1, "max_overflow": 0}


db_url = _prepare_url(settings.DATABASE_URL)

engine = create_engine(
    db_url,
    echo=False,        # set to True if you want to debug SQL queries
    **_engine_kwargs(db_url),
)


def create_db_and_tables() -> None:
    """
    Create all tables defined in SQLModel metadata if they do not exist.

    This is called once on application startup.
    """
    SQLModel.metadata.create_all(engine)


def get_session():
    """
    FastAPI dependency that yields a SQLModel Session.

    Usage:

        from fastapi import Depends

        @router.get("/example")
        def example_endpoint(session: Session = Depends(get_session)):
            ...
    """
    with Session(engine) as session:
        yield session
