import asyncio

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

from propcomply.compliance import Classification, PropertyRef, builtin_registry
from propcomply.db.base import create_schema, get_db, make_session_factory
from propcomply.main import app


@pytest.fixture
def registry():
    return builtin_registry()


@pytest.fixture
def uk_flat():
    return PropertyRef(id="p-uk", jurisdiction_code="UK", label="12 Baker St")


@pytest.fixture
def uk_hmo():
    return PropertyRef(
        id="p-hmo",
        jurisdiction_code="uk",
        classification=Classification.MULTI_OCCUPANCY,
        label="Student House",
    )


@pytest.fixture
def client(tmp_path):
    """TestClient bound to a throwaway SQLite file instead of the dev database."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool
    )
    asyncio.run(create_schema(engine))
    session_factory = make_session_factory(engine)

    async def _get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _get_db
    original_factory = app.state.session_factory
    app.state.session_factory = session_factory
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    app.state.session_factory = original_factory
    asyncio.run(engine.dispose())
