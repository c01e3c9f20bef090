from typing import List

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse
from fastapi_utils.cbv import cbv
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import AuthContext, any_member, manager_only, tenant_only
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from schemas.schema import (
    DepositRequest,
    FundRequest,
    LedgerEntryOut,
    PaymentCreate,
    PaymentOut,
    PaymentWithLeaseOut,
    WithdrawalRequest,
)
from services.payment_service import PaymentService

router = APIRouter(tags=["Payments"])


@cbv(router=router)
class PaymentRoutes:
    @router.post("/", response_model=PaymentOut, status_code=201)
    @safe_handler
    async def create(
        self,
        data: PaymentCreate,
        auth: AuthContext = Depends(tenant_only),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await PaymentService(db).create_payment(auth=auth, payload=data)

    @router.post("/deposit-request", response_model=PaymentOut, status_code=201)
    @safe_handler
    async def deposit_request(
        self,
        data: DepositRequest,
        auth: AuthContext = Depends(tenant_only),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await PaymentService(db).request_deposit(auth=auth, payload=data)

    @router.get("/deposits/pending", response_model=List[PaymentOut])
    @safe_handler
    async def pending_deposits(
        self,
        auth: AuthContext = Depends(manager_only),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await PaymentService(db).pending_deposits()

    @router.put("/deposits/{payment_id}/approve", response_model=LedgerEntryOut)
    @safe_handler
    async def approve_deposit(
        self,
        payment_id: int,
        auth: AuthContext = Depends(manager_only),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await PaymentService(db).approve_deposit(payment_id=payment_id)

    @router.put("/deposits/{payment_id}/decline", response_model=PaymentOut)
    @safe_handler
    async def decline_deposit(
        self,
        payment_id: int,
        auth: AuthContext = Depends(manager_only),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await PaymentService(db).decline_deposit(payment_id=payment_id)

    @router.post("/withdraw", response_model=LedgerEntryOut, status_code=201)
    @safe_handler
    async def withdraw(
        self,
        data: WithdrawalRequest,
        auth: AuthContext = Depends(tenant_only),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await PaymentService(db).withdraw(auth=auth, payload=data)

    @router.post(
        "/tenants/{cognito_id}/fund", response_model=LedgerEntryOut, status_code=201
    )
    @safe_handler
    async def fund_tenant(
        self,
        cognito_id: str,
        data: FundRequest,
        auth: AuthContext = Depends(manager_only),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await PaymentService(db).fund_tenant(cognito_id=cognito_id, payload=data)

    @router.get("/tenant/{cognito_id}", response_model=List[PaymentWithLeaseOut])
    @safe_handler
    async def tenant_payments(
        self,
        cognito_id: str,
        auth: AuthContext = Depends(any_member),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await PaymentService(db).tenant_payments(
            auth=auth, cognito_id=cognito_id
        )

    @router.get("/{payment_id}/receipt", response_class=FileResponse)
    @safe_handler
    async def receipt(
        self,
        payment_id: int,
        auth: AuthContext = Depends(any_member),
        db: AsyncSession = Depends(get_db_async),
    ):
        path = await PaymentService(db).receipt(auth=auth, payment_id=payment_id)
        return FileResponse(
            path,
            media_type="application/pdf",
            filename=f"receipt-{payment_id}.pdf",
        )
