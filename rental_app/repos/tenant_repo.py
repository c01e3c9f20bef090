from decimal import Decimal
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from models.models import Property, Tenant


class TenantRepo:
    def __init__(self, db):
        self.db = db

    async def get_by_cognito_id(self, cognito_id: str) -> Optional[Tenant]:
        result = await self.db.execute(
            select(Tenant).where(Tenant.cognito_id == cognito_id)
        )
        return result.scalar_one_or_none()

    async def get_with_favorites(self, cognito_id: str) -> Optional[Tenant]:
        result = await self.db.execute(
            select(Tenant)
            .options(selectinload(Tenant.favorites))
            .where(Tenant.cognito_id == cognito_id)
        )
        return result.scalars().first()

    async def get_for_update(self, cognito_id: str) -> Optional[Tenant]:
        """Loads the tenant row locked for the rest of the transaction."""
        result = await self.db.execute(
            select(Tenant)
            .where(Tenant.cognito_id == cognito_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> List[Tenant]:
        result = await self.db.execute(select(Tenant).order_by(Tenant.id))
        return list(result.scalars().all())

    async def list_emails(self) -> List[str]:
        result = await self.db.execute(select(Tenant.email).order_by(Tenant.id))
        return [email for email in result.scalars().all() if email]

    async def current_residences(self, cognito_id: str) -> List[Property]:
        result = await self.db.execute(
            select(Property)
            .join(Property.tenants)
            .options(selectinload(Property.location))
            .where(Tenant.cognito_id == cognito_id)
            .order_by(Property.id)
        )
        return list(result.scalars().unique().all())

    async def create(self, data: dict) -> Tenant:
        tenant = Tenant(**data, balance=Decimal("0.00"), is_suspended=False)
        self.db.add(tenant)
        try:
            await self.db.commit()
            await self.db.refresh(tenant)
            return tenant
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def update(self, tenant: Tenant, values: dict) -> Tenant:
        for key, value in values.items():
            setattr(tenant, key, value)
        try:
            await self.db.commit()
            await self.db.refresh(tenant)
            return tenant
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    def adjust_balance(self, tenant: Tenant, delta: Decimal) -> Decimal:
        tenant.balance = Decimal(str(tenant.balance or 0)) + Decimal(str(delta))
        return tenant.balance

    async def db_commit(self):
        try:
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise
