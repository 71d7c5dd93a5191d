"""Synchronous SQLAlchemy engine and session factory for the SQL-backed store."""

import re

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from insighted.db.base import Base


def normalize_database_url(url: str) -> str:
    """Point bare postgres URLs at the psycopg2 driver."""
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql+psycopg2://", 1)
    elif url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+psycopg2://", 1)

    # Strip sslmode from query string; passed via connect_args instead
    if "sslmode=" in url:
        url = re.sub(r"[?&]sslmode=[^&]*", "", url)
        url = url.rstrip("?&")
    return url


def create_sync_engine(database_url: str, *, echo: bool = False) -> Engine:
    url = normalize_database_url(database_url)

    if url.startswith("sqlite"):
        # One shared connection so an in-memory database survives across sessions
        return create_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    connect_args: dict = {}
    if "sslmode=" in database_url:
        connect_args["sslmode"] = "require"

    return create_engine(
        url,
        echo=echo,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(
        engine,
        class_=Session,
        expire_on_commit=False,
    )


def create_tables(engine: Engine) -> None:
    import insighted.models  # noqa: F401  registers models on Base.metadata

    Base.metadata.create_all(engine)
