from typing import List

from fastapi import APIRouter, Depends
from fastapi_utils.cbv import cbv
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import AuthContext, any_member, manager_only
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from schemas.schema import ManagerCreate, ManagerOut, ManagerUpdate, PropertyOut
from services.manager_service import ManagerService

router = APIRouter(tags=["Managers"])


@cbv(router=router)
class ManagerRoutes:
    @router.get("/{cognito_id}", response_model=ManagerOut)
    @safe_handler
    async def get_manager(
        self,
        cognito_id: str,
        auth: AuthContext = Depends(manager_only),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await ManagerService(db).get_manager(cognito_id=cognito_id)

    @router.post("/", response_model=ManagerOut, status_code=201)
    @safe_handler
    async def create(
        self,
        data: ManagerCreate,
        auth: AuthContext = Depends(manager_only),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await ManagerService(db).create_manager(auth=auth, payload=data)

    @router.put("/{cognito_id}", response_model=ManagerOut)
    @safe_handler
    async def update(
        self,
        cognito_id: str,
        data: ManagerUpdate,
        auth: AuthContext = Depends(manager_only),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await ManagerService(db).update_manager(
            auth=auth, cognito_id=cognito_id, payload=data
        )

    @router.get("/{cognito_id}/properties", response_model=List[PropertyOut])
    @safe_handler
    async def manager_properties(
        self,
        cognito_id: str,
        auth: AuthContext = Depends(any_member),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await ManagerService(db).manager_properties(cognito_id=cognito_id)
