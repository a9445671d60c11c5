import os

# Point the app at throwaway backends before anything imports app.config
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["REDIS_URL"] = ""
os.environ["LOG_JSON"] = "false"

import uuid
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import get_session
from app.dependencies.auth import get_current_user
from app.main import app
from app.models import Application, ApplicationStatus, AvailabilityStatus, Base, Property, User, UserRole
from app.schemas.auth import Actor


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def act_as():
    """Make the Authorization Gate resolve every request to ``actor``."""
    def _act_as(actor: Actor) -> Actor:
        app.dependency_overrides[get_current_user] = lambda: actor
        return actor
    return _act_as


@pytest.fixture
def sent_notifications(monkeypatch):
    sent = []

    async def record(user_id, event, payload):
        sent.append({"user_id": user_id, "event": event, **payload})

    monkeypatch.setattr("app.services.notifications.publish_status_change", record)
    return sent


async def _user(db, role: UserRole, name: str) -> User:
    user = User(
        email=f"{name.lower().replace(' ', '.')}@example.com",
        full_name=name,
        role=role,
        phone_number="+63 917 000 0000",
        profile_pic=f"https://cdn.example.com/{uuid.uuid4().hex}.jpg",
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest.fixture
def actor_for():
    return lambda user: Actor(user_id=user.id, role=user.role)


@pytest_asyncio.fixture
async def landlord(db):
    return await _user(db, UserRole.landlord, "Lara Landlord")


@pytest_asyncio.fixture
async def other_landlord(db):
    return await _user(db, UserRole.landlord, "Otto Owner")


@pytest_asyncio.fixture
async def admin(db):
    return await _user(db, UserRole.admin, "Ada Admin")


@pytest_asyncio.fixture
async def tenant(db):
    return await _user(db, UserRole.tenant, "Tess Tenant")


@pytest_asyncio.fixture
async def other_tenant(db):
    return await _user(db, UserRole.tenant, "Theo Tenant")


@pytest.fixture
def make_property(db, landlord):
    async def _make_property(total_units: int = 1, available_units: int | None = None, owner: User | None = None, **extra) -> Property:
        property_obj = Property(
            landlord_id=(owner or landlord).id,
            title=extra.pop("title", "Apartment"),
            address=extra.pop("address", "12 Mabini St."),
            price=extra.pop("price", 8500),
            total_units=total_units,
            available_units=total_units if available_units is None else available_units,
            availability_status=extra.pop("availability_status", AvailabilityStatus.AVAILABLE.value),
        )
        db.add(property_obj)
        await db.commit()
        await db.refresh(property_obj)
        return property_obj
    return _make_property


@pytest.fixture
def make_application(db):
    """Insert an application row directly, bypassing the workflow checks."""
    async def _make_application(property_obj: Property, tenant: User, status: ApplicationStatus = ApplicationStatus.PENDING, created_at: datetime | None = None) -> Application:
        application = Application(
            property_id=property_obj.id,
            tenant_id=tenant.id,
            landlord_id=property_obj.landlord_id,
            status=status.value,
            message="",
            created_at=created_at or datetime.now(timezone.utc),
        )
        db.add(application)
        await db.commit()
        await db.refresh(application)
        return application
    return _make_application


@pytest.fixture
def minutes_ago():
    now = datetime.now(timezone.utc)
    return lambda n: now - timedelta(minutes=n)
