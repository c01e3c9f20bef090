from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import FileResponse
from fastapi_utils.cbv import cbv
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import AuthContext, any_member
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from schemas.schema import LeaseWithPropertyOut, PaymentOut
from services.lease_service import LeaseService

router = APIRouter(tags=["Leases"])


@cbv(router=router)
class LeaseRoutes:
    @router.get("/", response_model=List[LeaseWithPropertyOut])
    @safe_handler
    async def list_leases(
        self,
        property_id: Optional[int] = Query(None, alias="propertyId"),
        auth: AuthContext = Depends(any_member),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await LeaseService(db).list_leases(auth=auth, property_id=property_id)

    @router.get("/{lease_id}/payments", response_model=List[PaymentOut])
    @safe_handler
    async def lease_payments(
        self,
        lease_id: int,
        auth: AuthContext = Depends(any_member),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await LeaseService(db).lease_payments(auth=auth, lease_id=lease_id)

    @router.get("/{lease_id}/agreement", response_class=FileResponse)
    @safe_handler
    async def agreement(
        self,
        lease_id: int,
        auth: AuthContext = Depends(any_member),
        db: AsyncSession = Depends(get_db_async),
    ):
        path = await LeaseService(db).agreement(auth=auth, lease_id=lease_id)
        return FileResponse(
            path,
            media_type="application/pdf",
            filename=f"lease-agreement-{lease_id}.pdf",
        )
