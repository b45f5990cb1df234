"""Database package — async SQLAlchemy engine, session factory, Base."""
from propcomply.db.base import (
    Base,
    async_session_factory,
    create_schema,
    engine,
    get_db,
    make_session_factory,
)

__all__ = [
    "Base",
    "async_session_factory",
    "create_schema",
    "engine",
    "get_db",
    "make_session_factory",
]
