from typing import List

from fastapi import APIRouter, Depends
from fastapi_utils.cbv import cbv
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import AuthContext, any_member, manager_only, tenant_only
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from schemas.schema import ApplicationCreate, ApplicationOut, ApplicationStatusUpdate
from services.application_service import ApplicationService

router = APIRouter(tags=["Applications"])


@cbv(router=router)
class ApplicationRoutes:
    @router.post("/", response_model=ApplicationOut, status_code=201)
    @safe_handler
    async def create(
        self,
        data: ApplicationCreate,
        auth: AuthContext = Depends(tenant_only),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await ApplicationService(db).create_application(auth=auth, payload=data)

    @router.get("/", response_model=List[ApplicationOut])
    @safe_handler
    async def list_applications(
        self,
        auth: AuthContext = Depends(any_member),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await ApplicationService(db).list_applications(auth=auth)

    @router.put("/{application_id}/status", response_model=ApplicationOut)
    @safe_handler
    async def update_status(
        self,
        application_id: int,
        data: ApplicationStatusUpdate,
        auth: AuthContext = Depends(manager_only),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await ApplicationService(db).update_status(
            auth=auth, application_id=application_id, status=data.status
        )
