import os
from itertools import count

# Settings are read at import time; point them at throwaway values first
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("WORKOS_API_KEY", "sk_test_dummy")
os.environ.setdefault("WORKOS_CLIENT_ID", "client_test_dummy")

import httpx
import pytest
from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.api.v1.schemas.auth import Caller
from app.api.v1.schemas.item import Item, ItemPayload
from app.api.v1.schemas.store import Store, StorePayload
from app.core.database import Base, get_session_maker
from app.core.dependencies import get_current_caller
from app.main import app
from app.services.durable_map import DurableMap
from app.services.item import ItemService
from app.services.store import StoreService

OWNER = Caller(id="user_owner")
STRANGER = Caller(id="user_stranger")


def store_payload(**overrides) -> StorePayload:
    fields = {"name": "Lakeside", "location": "Pier 3", "image": "img.png"}
    fields.update(overrides)
    return StorePayload(**fields)


def item_payload(**overrides) -> ItemPayload:
    fields = {
        "size": "M",
        "power": "+1.5",
        "glass_type": "glass",
        "gender": "unisex",
        "price": 49.99,
    }
    fields.update(overrides)
    return ItemPayload(**fields)


@pytest.fixture
async def session_maker():
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    await engine.dispose()


@pytest.fixture
async def session(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
def id_factory():
    counter = count(1)
    return lambda: f"id-{next(counter):04d}"


@pytest.fixture
def maps(session):
    return DurableMap(session, 0, Store), DurableMap(session, 1, Item)


@pytest.fixture
def store_service(maps, id_factory):
    stores, items = maps
    return StoreService(stores, items, id_factory=id_factory)


@pytest.fixture
def item_service(maps, id_factory):
    stores, items = maps
    return ItemService(stores, items, id_factory=id_factory)


async def _caller_from_header(request: Request) -> Caller:
    return Caller(id=request.headers.get("x-test-user", OWNER.id))


@pytest.fixture
async def client(session_maker):
    app.dependency_overrides[get_session_maker] = lambda: session_maker
    app.dependency_overrides[get_current_caller] = _caller_from_header
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
