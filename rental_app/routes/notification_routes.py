from typing import List

from fastapi import APIRouter, Depends
from fastapi_utils.cbv import cbv
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import AuthContext, any_member, manager_only
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from models.enums import NotificationKind
from schemas.schema import (
    EmailAllRequest,
    EmailSendResult,
    EmailUserRequest,
    NotificationOut,
)
from services.notification_service import NotificationService

router = APIRouter(tags=["Notifications"])


@cbv(router=router)
class NotificationRoutes:
    @router.post("/email/all", response_model=EmailSendResult)
    @safe_handler
    async def email_all(
        self,
        data: EmailAllRequest,
        auth: AuthContext = Depends(manager_only),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await NotificationService(db).email_all_tenants(payload=data)

    @router.post("/email/user", response_model=EmailSendResult)
    @safe_handler
    async def email_user(
        self,
        data: EmailUserRequest,
        auth: AuthContext = Depends(manager_only),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await NotificationService(db).email_user(payload=data)

    @router.get("/messages", response_model=List[NotificationOut])
    @safe_handler
    async def messages(
        self,
        auth: AuthContext = Depends(any_member),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await NotificationService(db).feed(
            auth=auth, kind=NotificationKind.MESSAGE
        )

    @router.get("/alerts", response_model=List[NotificationOut])
    @safe_handler
    async def alerts(
        self,
        auth: AuthContext = Depends(any_member),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await NotificationService(db).feed(auth=auth, kind=NotificationKind.ALERT)
