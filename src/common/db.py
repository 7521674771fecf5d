"""Database connection and table definitions for the storage boundary."""

from __future__ import annotations

import os
from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator

from dotenv import load_dotenv
from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    create_engine,
    func,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

load_dotenv()

metadata = MetaData()

raw_headlines = Table(
    "raw_headlines",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("run_id", String(64), nullable=False, index=True),
    Column("source_id", String(64), nullable=False),
    Column("title", String(500), nullable=False),
    Column("description", Text),
    Column("url", String(2048), nullable=False),
    Column("published_at", DateTime(timezone=True)),
    Column("is_selected", Boolean, nullable=False, default=False),
    Column("deduplication_group_id", String(64)),
    Column("heat_score", Integer, default=1),
    Column("is_best_version", Boolean, default=False),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
)

compiled_items = Table(
    "compiled_items",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("run_id", String(64), nullable=False, index=True),
    Column("topic", String(255), nullable=False),
    Column("hook", String(500), nullable=False),
    Column("summary", Text, nullable=False),
    Column("source_headline_ids", Text, nullable=False),  # JSON array of headline ids
    Column("heat_score", Integer, nullable=False, default=1),
    Column("is_selected", Boolean, nullable=False, default=False),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), server_default=func.now()),
)


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    """Create the engine from $DATABASE_URL (cached per process)."""
    url = os.environ.get("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is not set")
    return create_engine(url, pool_pre_ping=True)


def create_tables(engine: Engine) -> None:
    """Create pipeline tables if they don't exist."""
    metadata.create_all(engine)


@contextmanager
def get_session(engine: Engine | None = None) -> Iterator[Session]:
    """Yield a session; callers commit explicitly."""
    session = Session(engine or get_engine())
    try:
        yield session
    finally:
        session.close()
