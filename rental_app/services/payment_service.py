import logging
from decimal import Decimal
from pathlib import Path

from fastapi import HTTPException

from core.auth import AuthContext, ensure_self_or_roles
from models.enums import PaymentStatus, PaymentType
from models.models import Payment, Tenant
from models.utils import derive_payment_status, utcnow
from repos.lease_repo import LeaseRepo
from repos.payment_repo import PaymentRepo
from repos.tenant_repo import TenantRepo
from schemas.schema import (
    DepositRequest,
    FundRequest,
    LedgerEntryOut,
    PaymentCreate,
    PaymentOut,
    PaymentWithLeaseOut,
    WithdrawalRequest,
)

from .document_service import DocumentService

logger = logging.getLogger(__name__)


class PaymentService:
    def __init__(self, db):
        self.db = db
        self.repo: PaymentRepo = PaymentRepo(db)
        self.tenant_repo: TenantRepo = TenantRepo(db)
        self.lease_repo: LeaseRepo = LeaseRepo(db)
        self.documents: DocumentService = DocumentService(db)

    async def _locked_tenant(self, cognito_id: str) -> Tenant:
        tenant = await self.tenant_repo.get_for_update(cognito_id)
        if not tenant:
            raise HTTPException(status_code=404, detail="Tenant not found.")
        return tenant

    async def _locked_deposit(self, payment_id: int) -> Payment:
        payment = await self.repo.get_for_update(payment_id)
        if not payment:
            raise HTTPException(status_code=404, detail="Payment not found.")
        if payment.type != PaymentType.DEPOSIT:
            raise HTTPException(status_code=400, detail="Payment is not a deposit.")
        if payment.is_approved:
            raise HTTPException(
                status_code=409, detail="Deposit has already been approved."
            )
        return payment

    def _ledger_entry(self, payment: Payment, tenant: Tenant) -> LedgerEntryOut:
        return LedgerEntryOut(
            payment=PaymentOut.model_validate(payment), balance=tenant.balance
        )

    async def create_payment(
        self, auth: AuthContext, payload: PaymentCreate
    ) -> PaymentOut:
        lease = await self.lease_repo.get_by_id(payload.lease_id)
        if not lease:
            raise HTTPException(status_code=404, detail="Lease not found.")
        if lease.tenant_cognito_id != auth.user_id:
            raise HTTPException(status_code=403, detail="Access Denied")

        try:
            payment = await self.repo.add(
                tenant_cognito_id=auth.user_id,
                amount_due=payload.amount_due,
                amount_paid=payload.amount_paid,
                due_date=payload.due_date,
                payment_date=payload.payment_date or utcnow(),
                payment_status=derive_payment_status(
                    payload.amount_due, payload.amount_paid
                ),
                type=PaymentType.RENT,
                is_approved=False,
                lease_id=lease.id,
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        payment_id = payment.id
        try:
            await self.documents.ensure_receipt(payment)
        except Exception:
            logger.exception("Receipt generation failed for payment %s", payment_id)
            payment = await self.repo.get_by_id(payment_id)

        return PaymentOut.model_validate(payment)

    async def request_deposit(
        self, auth: AuthContext, payload: DepositRequest
    ) -> PaymentOut:
        if not await self.tenant_repo.get_by_cognito_id(auth.user_id):
            raise HTTPException(status_code=404, detail="Tenant not found.")

        now = utcnow()
        try:
            payment = await self.repo.add(
                tenant_cognito_id=auth.user_id,
                amount_due=payload.amount,
                amount_paid=Decimal("0.00"),
                due_date=payload.due_date or now,
                payment_date=now,
                payment_status=PaymentStatus.PENDING,
                type=PaymentType.DEPOSIT,
                is_approved=False,
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        return PaymentOut.model_validate(payment)

    async def pending_deposits(self) -> list[PaymentOut]:
        return [
            PaymentOut.model_validate(p) for p in await self.repo.list_pending_deposits()
        ]

    async def approve_deposit(self, payment_id: int) -> LedgerEntryOut:
        try:
            payment = await self._locked_deposit(payment_id)
            tenant = await self._locked_tenant(payment.tenant_cognito_id)

            stale_receipt = payment.receipt_path
            self.tenant_repo.adjust_balance(tenant, payment.amount_due)
            payment.amount_paid = payment.amount_due
            payment.payment_status = PaymentStatus.PAID
            payment.is_approved = True
            payment.payment_date = utcnow()
            payment.receipt_path = None
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        self.documents.discard(stale_receipt)
        logger.info("Deposit %s approved, tenant %s credited", payment.id, tenant.cognito_id)
        return self._ledger_entry(payment, tenant)

    async def decline_deposit(self, payment_id: int) -> PaymentOut:
        try:
            payment = await self._locked_deposit(payment_id)
            stale_receipt = payment.receipt_path
            payment.payment_status = PaymentStatus.PENDING
            payment.is_approved = False
            payment.receipt_path = None
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        self.documents.discard(stale_receipt)
        return PaymentOut.model_validate(payment)

    async def withdraw(
        self, auth: AuthContext, payload: WithdrawalRequest
    ) -> LedgerEntryOut:
        try:
            tenant = await self._locked_tenant(auth.user_id)
            if tenant.is_suspended:
                raise HTTPException(
                    status_code=403, detail="Tenant account is suspended."
                )
            if Decimal(str(tenant.balance)) < payload.amount:
                raise HTTPException(status_code=400, detail="Insufficient balance")

            self.tenant_repo.adjust_balance(tenant, -payload.amount)
            now = utcnow()
            payment = await self.repo.add(
                tenant_cognito_id=tenant.cognito_id,
                amount_due=payload.amount,
                amount_paid=payload.amount,
                due_date=now,
                payment_date=now,
                payment_status=PaymentStatus.PAID,
                type=PaymentType.WITHDRAWAL,
                is_approved=True,
                destination=payload.destination,
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        return self._ledger_entry(payment, tenant)

    async def fund_tenant(self, cognito_id: str, payload: FundRequest) -> LedgerEntryOut:
        try:
            tenant = await self._locked_tenant(cognito_id)
            self.tenant_repo.adjust_balance(tenant, payload.amount)
            now = utcnow()
            payment = await self.repo.add(
                tenant_cognito_id=tenant.cognito_id,
                amount_due=payload.amount,
                amount_paid=payload.amount,
                due_date=now,
                payment_date=now,
                payment_status=PaymentStatus.PAID,
                type=PaymentType.DEPOSIT,
                is_approved=True,
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        return self._ledger_entry(payment, tenant)

    async def tenant_payments(
        self, auth: AuthContext, cognito_id: str
    ) -> list[PaymentWithLeaseOut]:
        ensure_self_or_roles(auth, cognito_id)
        payments = await self.repo.list_for_tenant(cognito_id)
        return [PaymentWithLeaseOut.model_validate(p) for p in payments]

    async def receipt(self, auth: AuthContext, payment_id: int) -> Path:
        payment = await self.repo.get_by_id(payment_id)
        if not payment:
            raise HTTPException(status_code=404, detail="Payment not found.")
        ensure_self_or_roles(auth, payment.tenant_cognito_id)
        return await self.documents.ensure_receipt(payment)
