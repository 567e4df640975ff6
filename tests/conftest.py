"""
Общие фикстуры: in-memory SQLite, UnitOfWork поверх него, FastAPI app
с подмененной get_db и набор тестовых данных (меню, акция, пользователь, профиль).
"""
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from restaurant.config import settings
from restaurant.database import get_db
from restaurant.domain.models import (
    Category, MenuItem, Promotion, RestaurantProfile, User, UserRole,
)
from restaurant.infrastructure.db_schema import metadata
from restaurant.infrastructure.unit_of_work import UnitOfWork
from restaurant.main import app as _app

ADMIN_TOKEN = "test-admin-token"


@pytest_asyncio.fixture
async def engine():
    eng = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with eng.begin() as conn:
        await conn.run_sync(metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def uow(session_factory):
    return UnitOfWork(session_factory)


@pytest_asyncio.fixture
async def seeded(uow):
    """Меню из двух позиций, акция 10% от 100, клиент и профиль ресторана"""
    created = datetime.now(timezone.utc) - timedelta(days=1)
    async with uow() as u:
        await u.menu.create_category(Category(id="cat-main", name="Main"))
        await u.menu.create_item(
            MenuItem(id="item-1", name="Beef rice", price=Decimal("50"), category_id="cat-main")
        )
        await u.menu.create_item(
            MenuItem(id="item-2", name="Fries", price=Decimal("30"), category_id="cat-main")
        )
        await u.menu.create_item(
            MenuItem(id="item-3", name="Cola", price=Decimal("12"), is_available=False)
        )
        await u.promotions.create(
            Promotion(
                id="promo-10",
                description="10% off orders over 100",
                discount_percentage=Decimal("10"),
                minimum_order=Decimal("100"),
                is_auto_applied=True,
                created_at=created,
            )
        )
        await u.users.create(
            User(id="user-1", name="Customer", email="customer@example.com", role=UserRole.CUSTOMER)
        )
        await u.profile.save(
            RestaurantProfile(
                id="profile-1",
                name="Test Restaurant",
                max_booking_days=30,
                max_booking_per_slot=2,
                max_table_size=6,
            )
        )
        await u.commit()


@pytest_asyncio.fixture
async def app(session_factory, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_API_TOKEN", ADMIN_TOKEN)

    async def _override_get_db():
        async with session_factory() as session:
            yield session

    _app.dependency_overrides[get_db] = _override_get_db
    yield _app
    _app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def admin_headers():
    return {"X-API-Key": ADMIN_TOKEN}


@pytest.fixture
def order_payload():
    """Заказ на 130 с акцией 10%: скидка 13, итого 117"""
    return {
        "userId": "user-1",
        "items": [
            {"menuItemId": "item-1", "quantity": 2, "price": 50},
            {"menuItemId": "item-2", "quantity": 1, "price": 30},
        ],
        "promotionId": "promo-10",
        "subtotal": 130,
        "discount": 13,
        "total": 117,
    }
