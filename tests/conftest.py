# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# Sets the environment before the application modules are imported (settings
# are loaded at import time) and provides database, identity and token
# fixtures shared by the test modules.
#
# Service tests run against a throwaway SQLite file through aiosqlite. The
# locations table is left out because its geography column needs PostGIS;
# property rows point at a placeholder location id instead.
# =============================================================================

import asyncio
import os
import tempfile
import time
from datetime import datetime, timezone
from decimal import Decimal

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================

_MEDIA_DIR = tempfile.mkdtemp(prefix="rental-media-")

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    _MEDIA_DIR, "unused.db"
)
os.environ["JWT_SECRET_KEY"] = "test-secret-key-for-signing-access-tokens-0123456789"
os.environ["ALGORITHM"] = "HS256"
os.environ["RECEIPTS_DIR"] = os.path.join(_MEDIA_DIR, "receipts")
os.environ["AGREEMENTS_DIR"] = os.path.join(_MEDIA_DIR, "agreements")
os.environ["ALLOWED_HOSTS"] = "http://localhost:3000"
for _name in (
    "JWKS_URL",
    "JWT_AUDIENCE",
    "CLOUDINARY_CLOUD_NAME",
    "CLOUDINARY_API_KEY",
    "CLOUDINARY_SECRET_KEY",
):
    os.environ.pop(_name, None)

import jwt
import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from core.auth import AuthContext
from core.get_db import Base
from core.settings import settings
from models.enums import ApplicationStatus, PropertyType, UserRole
from models.models import (
    Application,
    Lease,
    Manager,
    Notification,
    Payment,
    Property,
    Tenant,
    tenant_favorites,
    tenant_properties,
)

NON_SPATIAL_TABLES = [
    Manager.__table__,
    Tenant.__table__,
    Property.__table__,
    Lease.__table__,
    Application.__table__,
    Payment.__table__,
    Notification.__table__,
    tenant_favorites,
    tenant_properties,
]

MANAGER_ID = "manager-1"
TENANT_ID = "tenant-1"


# =============================================================================
# Helpers
# =============================================================================

def run(coro):
    return asyncio.run(coro)


def make_token(sub=MANAGER_ID, role="manager", expires_in=3600, **extra):
    payload = {"exp": int(time.time()) + expires_in, **extra}
    if sub is not None:
        payload["sub"] = sub
    if role is not None:
        payload["custom:role"] = role
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.ALGORITHM)


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


async def fetch_all(factory, model):
    async with factory() as session:
        result = await session.execute(select(model).order_by(model.id))
        return list(result.scalars().all())


async def fetch_tenant(factory, cognito_id=TENANT_ID):
    async with factory() as session:
        result = await session.execute(
            select(Tenant).where(Tenant.cognito_id == cognito_id)
        )
        return result.scalar_one()


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def session_factory(tmp_path):
    """Session factory bound to a fresh SQLite file per test."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'rentals.db'}", poolclass=NullPool
    )

    async def _create():
        async with engine.begin() as conn:
            await conn.run_sync(
                lambda sync_conn: Base.metadata.create_all(
                    sync_conn, tables=NON_SPATIAL_TABLES
                )
            )

    run(_create())
    yield async_sessionmaker(
        bind=engine, expire_on_commit=False, autoflush=False
    )
    run(engine.dispose())


@pytest.fixture
def media_dirs(tmp_path, monkeypatch):
    receipts = tmp_path / "receipts"
    agreements = tmp_path / "agreements"
    monkeypatch.setattr(settings, "RECEIPTS_DIR", str(receipts))
    monkeypatch.setattr(settings, "AGREEMENTS_DIR", str(agreements))
    return receipts, agreements


@pytest.fixture
def manager_auth():
    return AuthContext(user_id=MANAGER_ID, role=UserRole.MANAGER)


@pytest.fixture
def tenant_auth():
    return AuthContext(user_id=TENANT_ID, role=UserRole.TENANT)


@pytest.fixture
def seeded(session_factory):
    """Manager, tenant with a wallet balance of 500 and one property at 400/month."""

    async def _seed():
        async with session_factory() as session:
            session.add(
                Manager(
                    cognito_id=MANAGER_ID,
                    name="Mara Manager",
                    email="mara@example.com",
                )
            )
            session.add(
                Tenant(
                    cognito_id=TENANT_ID,
                    name="Tobi Tenant",
                    email="tobi@example.com",
                    phone_number="+15550100",
                    balance=Decimal("500.00"),
                    is_suspended=False,
                )
            )
            prop = Property(
                name="Harbour View Flat",
                description="Two bed flat near the water",
                price_per_month=Decimal("400.00"),
                security_deposit=Decimal("800.00"),
                application_fee=Decimal("25.00"),
                photo_urls=[],
                amenities=["WiFi", "Pool"],
                highlights=["Quiet"],
                is_pets_allowed=False,
                is_parking_included=True,
                beds=2,
                baths=1.5,
                square_feet=850,
                property_type=PropertyType.APARTMENT,
                posted_date=datetime(2026, 1, 1, tzinfo=timezone.utc),
                location_id=1,
                manager_cognito_id=MANAGER_ID,
            )
            session.add(prop)
            await session.flush()

            application = Application(
                application_date=datetime(2026, 2, 1, tzinfo=timezone.utc),
                status=ApplicationStatus.PENDING,
                property_id=prop.id,
                tenant_cognito_id=TENANT_ID,
                name="Tobi Tenant",
                email="tobi@example.com",
                phone_number="+15550100",
                message="Looking to move in next month",
            )
            session.add(application)
            await session.commit()
            return {"property_id": prop.id, "application_id": application.id}

    return run(_seed())


async def set_balance(factory, amount, cognito_id=TENANT_ID):
    async with factory() as session:
        tenant = (
            await session.execute(select(Tenant).where(Tenant.cognito_id == cognito_id))
        ).scalar_one()
        tenant.balance = Decimal(amount)
        await session.commit()
