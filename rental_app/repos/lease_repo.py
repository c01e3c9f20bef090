from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from models.models import Lease, Payment, Property


class LeaseRepo:
    def __init__(self, db):
        self.db = db

    async def get_by_id(self, lease_id: int) -> Optional[Lease]:
        result = await self.db.execute(select(Lease).where(Lease.id == lease_id))
        return result.scalar_one_or_none()

    async def get_for_document(self, lease_id: int) -> Optional[Lease]:
        result = await self.db.execute(
            select(Lease)
            .options(
                selectinload(Lease.property).selectinload(Property.location),
                selectinload(Lease.tenant),
            )
            .where(Lease.id == lease_id)
        )
        return result.scalars().first()

    async def search(
        self,
        *,
        property_id: int | None = None,
        tenant_cognito_id: str | None = None,
        manager_cognito_id: str | None = None,
    ) -> List[Lease]:
        query = select(Lease).options(selectinload(Lease.property))
        if property_id is not None:
            query = query.where(Lease.property_id == property_id)
        if tenant_cognito_id is not None:
            query = query.where(Lease.tenant_cognito_id == tenant_cognito_id)
        if manager_cognito_id is not None:
            query = query.join(Lease.property).where(
                Property.manager_cognito_id == manager_cognito_id
            )
        result = await self.db.execute(query.order_by(Lease.start_date.desc()))
        return list(result.scalars().all())

    async def latest_for_pairs(
        self, pairs: Iterable[tuple[str, int]]
    ) -> dict[tuple[str, int], Lease]:
        pairs = set(pairs)
        if not pairs:
            return {}
        tenant_ids = {t for t, _ in pairs}
        property_ids = {p for _, p in pairs}
        result = await self.db.execute(
            select(Lease)
            .where(
                Lease.tenant_cognito_id.in_(tenant_ids),
                Lease.property_id.in_(property_ids),
            )
            .order_by(Lease.start_date.desc(), Lease.id.desc())
        )
        latest: dict[tuple[str, int], Lease] = {}
        for lease in result.scalars().all():
            key = (lease.tenant_cognito_id, lease.property_id)
            if key in pairs and key not in latest:
                latest[key] = lease
        return latest

    async def payments(self, lease_id: int) -> List[Payment]:
        result = await self.db.execute(
            select(Payment)
            .where(Payment.lease_id == lease_id)
            .order_by(Payment.payment_date.desc(), Payment.id.desc())
        )
        return list(result.scalars().all())

    async def create(
        self,
        *,
        property_id: int,
        tenant_cognito_id: str,
        start_date: datetime,
        end_date: datetime,
        rent: Decimal,
        deposit: Decimal,
    ) -> Lease:
        lease = Lease(
            property_id=property_id,
            tenant_cognito_id=tenant_cognito_id,
            start_date=start_date,
            end_date=end_date,
            rent=rent,
            deposit=deposit,
        )
        self.db.add(lease)
        await self.db.flush()
        return lease

    async def set_agreement_path(self, lease: Lease, path: str) -> Lease:
        lease.agreement_path = path
        try:
            await self.db.commit()
            return lease
        except SQLAlchemyError:
            await self.db.rollback()
            raise
