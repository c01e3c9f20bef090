from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from models.enums import PaymentStatus, PaymentType
from models.models import Lease, Payment


class PaymentRepo:
    def __init__(self, db):
        self.db = db

    async def get_by_id(self, payment_id: int) -> Optional[Payment]:
        result = await self.db.execute(select(Payment).where(Payment.id == payment_id))
        return result.scalar_one_or_none()

    async def get_for_update(self, payment_id: int) -> Optional[Payment]:
        result = await self.db.execute(
            select(Payment)
            .where(Payment.id == payment_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_with_lease(self, payment_id: int) -> Optional[Payment]:
        result = await self.db.execute(
            select(Payment)
            .options(selectinload(Payment.lease).selectinload(Lease.property))
            .where(Payment.id == payment_id)
        )
        return result.scalars().first()

    async def list_for_tenant(self, tenant_cognito_id: str) -> List[Payment]:
        result = await self.db.execute(
            select(Payment)
            .options(selectinload(Payment.lease).selectinload(Lease.property))
            .where(Payment.tenant_cognito_id == tenant_cognito_id)
            .order_by(Payment.payment_date.desc(), Payment.id.desc())
        )
        return list(result.scalars().all())

    async def list_pending_deposits(self) -> List[Payment]:
        result = await self.db.execute(
            select(Payment)
            .where(
                Payment.type == PaymentType.DEPOSIT,
                Payment.is_approved.is_(False),
            )
            .order_by(Payment.payment_date.asc(), Payment.id.asc())
        )
        return list(result.scalars().all())

    async def add(
        self,
        *,
        tenant_cognito_id: str,
        amount_due: Decimal,
        amount_paid: Decimal,
        due_date: datetime,
        payment_date: datetime,
        payment_status: PaymentStatus,
        type: PaymentType,
        is_approved: bool,
        lease_id: int | None = None,
        destination: str | None = None,
    ) -> Payment:
        payment = Payment(
            tenant_cognito_id=tenant_cognito_id,
            amount_due=amount_due,
            amount_paid=amount_paid,
            due_date=due_date,
            payment_date=payment_date,
            payment_status=payment_status,
            type=type,
            is_approved=is_approved,
            lease_id=lease_id,
            destination=destination,
        )
        self.db.add(payment)
        await self.db.flush()
        return payment

    async def set_receipt_path(self, payment: Payment, path: str) -> Payment:
        payment.receipt_path = path
        try:
            await self.db.commit()
            return payment
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def db_commit(self):
        try:
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise
