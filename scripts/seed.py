#!/usr/bin/env python3
# =============================================================================
# scripts/seed.py - Development Data
# =============================================================================
# Loads a small, coherent data set into the configured database: one manager,
# two tenants, three listed properties with their locations, a lease with its
# approved application, and the first rent payment.
#
# Usage:
#   python scripts/seed.py            # Seed unless the demo manager exists
#   python scripts/seed.py --reset    # Wipe every model table, then seed
#
# Prerequisites:
#   - DATABASE_URL points at a PostgreSQL database with PostGIS
#   - Migrations are applied (alembic upgrade head)
# =============================================================================

import argparse
import asyncio
import logging
import os
import sys
from datetime import datetime, timezone
from decimal import Decimal

sys.path.append(
    os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "rental_app")
)

from sqlalchemy import delete, select, text

from core.get_db import AsyncSessionLocal, Base, async_engine
from models.enums import ApplicationStatus, PaymentStatus, PaymentType, PropertyType
from models.models import (
    Application,
    Lease,
    Location,
    Manager,
    Payment,
    Property,
    Tenant,
)
from models.shape import make_point

logger = logging.getLogger("seed")

MANAGER_ID = "seed-manager-1"
TENANT_IDS = ("seed-tenant-1", "seed-tenant-2")

LISTINGS = [
    {
        "name": "Harbor View Apartment",
        "property_type": PropertyType.APARTMENT,
        "price_per_month": Decimal("2400.00"),
        "beds": 2,
        "baths": 1.5,
        "square_feet": 950,
        "amenities": ["Washer/Dryer", "Air Conditioning"],
        "address": "120 Pier Ave",
        "city": "Los Angeles",
        "state": "CA",
        "postal_code": "90012",
        "lon": -118.2437,
        "lat": 34.0522,
    },
    {
        "name": "Eastside Townhouse",
        "property_type": PropertyType.TOWNHOUSE,
        "price_per_month": Decimal("3100.00"),
        "beds": 3,
        "baths": 2.5,
        "square_feet": 1600,
        "amenities": ["Parking", "Dishwasher"],
        "address": "48 Sunset Blvd",
        "city": "Los Angeles",
        "state": "CA",
        "postal_code": "90026",
        "lon": -118.2606,
        "lat": 34.0776,
    },
    {
        "name": "Canyon Cottage",
        "property_type": PropertyType.COTTAGE,
        "price_per_month": Decimal("1850.00"),
        "beds": 1,
        "baths": 1.0,
        "square_feet": 640,
        "amenities": ["Pet Friendly"],
        "address": "7 Canyon Rd",
        "city": "Pasadena",
        "state": "CA",
        "postal_code": "91101",
        "lon": -118.1445,
        "lat": 34.1478,
    },
]


def reset_order():
    """Model tables, children before parents."""
    return list(reversed(Base.metadata.sorted_tables))


def sample_records(now: datetime | None = None):
    """Builds the seed rows in insertion order."""
    now = now or datetime.now(timezone.utc)

    manager = Manager(
        cognito_id=MANAGER_ID,
        name="Morgan Reyes",
        email="manager@example.com",
        phone_number="+1 555 0100",
    )
    tenants = [
        Tenant(
            cognito_id=TENANT_IDS[0],
            name="Jordan Lee",
            email="jordan@example.com",
            phone_number="+1 555 0101",
            balance=Decimal("5000.00"),
            is_suspended=False,
        ),
        Tenant(
            cognito_id=TENANT_IDS[1],
            name="Casey Park",
            email="casey@example.com",
            phone_number="+1 555 0102",
            balance=Decimal("1200.00"),
            is_suspended=False,
        ),
    ]

    properties = []
    for listing in LISTINGS:
        location = Location(
            address=listing["address"],
            city=listing["city"],
            state=listing["state"],
            country="United States",
            postal_code=listing["postal_code"],
            coordinates=make_point(listing["lon"], listing["lat"]),
        )
        properties.append(
            Property(
                name=listing["name"],
                description=f"{listing['name']} in {listing['city']}.",
                price_per_month=listing["price_per_month"],
                security_deposit=listing["price_per_month"],
                application_fee=Decimal("50.00"),
                photo_urls=[],
                amenities=listing["amenities"],
                highlights=["Close to Transit"],
                is_pets_allowed=PropertyType.COTTAGE == listing["property_type"],
                is_parking_included="Parking" in listing["amenities"],
                beds=listing["beds"],
                baths=listing["baths"],
                square_feet=listing["square_feet"],
                property_type=listing["property_type"],
                location=location,
                manager=manager,
            )
        )

    leased = properties[0]
    start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    lease = Lease(
        start_date=start,
        end_date=start.replace(year=start.year + 1),
        rent=leased.price_per_month,
        deposit=leased.security_deposit,
        property=leased,
        tenant=tenants[0],
    )
    application = Application(
        status=ApplicationStatus.APPROVED,
        application_date=now,
        property=leased,
        tenant=tenants[0],
        name=tenants[0].name,
        email=tenants[0].email,
        phone_number=tenants[0].phone_number,
        message="Looking for a one year lease.",
        lease=lease,
    )
    pending = Application(
        status=ApplicationStatus.PENDING,
        application_date=now,
        property=properties[1],
        tenant=tenants[1],
        name=tenants[1].name,
        email=tenants[1].email,
        phone_number=tenants[1].phone_number,
        message=None,
    )
    payment = Payment(
        amount_due=lease.rent,
        amount_paid=lease.rent,
        due_date=start,
        payment_date=start,
        payment_status=PaymentStatus.PAID,
        type=PaymentType.RENT,
        is_approved=True,
        lease=lease,
        tenant=tenants[0],
    )
    leased.tenants.append(tenants[0])
    tenants[1].favorites.append(properties[2])

    return [manager, *tenants, *properties, lease, application, pending, payment]


async def reset(session) -> None:
    for table in reset_order():
        await session.execute(delete(table))
    if session.bind.dialect.name == "postgresql":
        for table in reset_order():
            if "id" in table.c and table.c.id.autoincrement is True:
                await session.execute(
                    text(
                        "SELECT setval(pg_get_serial_sequence(:table, 'id'), 1, false)"
                    ),
                    {"table": table.name},
                )
    logger.info("Cleared %d tables", len(reset_order()))


async def seed(wipe: bool = False) -> None:
    async with AsyncSessionLocal() as session:
        try:
            if wipe:
                await reset(session)
            else:
                existing = await session.scalar(
                    select(Manager.id).where(Manager.cognito_id == MANAGER_ID)
                )
                if existing is not None:
                    logger.info("Seed data already present, use --reset to reload")
                    return
            records = sample_records()
            session.add_all(records)
            await session.commit()
        except Exception:
            await session.rollback()
            raise
    logger.info("Seeded %d records", len(records))


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    parser = argparse.ArgumentParser(description="Load development data")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Delete existing rows before seeding",
    )
    args = parser.parse_args()

    async def run():
        try:
            await seed(wipe=args.reset)
        finally:
            await async_engine.dispose()

    asyncio.run(run())


if __name__ == "__main__":
    main()
