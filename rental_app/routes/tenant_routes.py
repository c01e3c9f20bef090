from typing import List

from fastapi import APIRouter, Depends
from fastapi_utils.cbv import cbv
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import AuthContext, any_member, manager_only, tenant_only
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from schemas.schema import (
    PropertyOut,
    TenantCreate,
    TenantDetailOut,
    TenantOut,
    TenantUpdate,
)
from services.tenant_service import TenantService

router = APIRouter(tags=["Tenants"])


@cbv(router=router)
class TenantRoutes:
    @router.get("/", response_model=List[TenantOut])
    @safe_handler
    async def list_tenants(
        self,
        auth: AuthContext = Depends(manager_only),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await TenantService(db).list_tenants()

    @router.get("/{cognito_id}", response_model=TenantDetailOut)
    @safe_handler
    async def get_tenant(
        self,
        cognito_id: str,
        auth: AuthContext = Depends(any_member),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await TenantService(db).get_tenant(auth=auth, cognito_id=cognito_id)

    @router.post("/", response_model=TenantOut, status_code=201)
    @safe_handler
    async def create(
        self,
        data: TenantCreate,
        db: AsyncSession = Depends(get_db_async),
    ):
        return await TenantService(db).create_tenant(payload=data)

    @router.put("/{cognito_id}", response_model=TenantOut)
    @safe_handler
    async def update(
        self,
        cognito_id: str,
        data: TenantUpdate,
        auth: AuthContext = Depends(any_member),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await TenantService(db).update_tenant(
            auth=auth, cognito_id=cognito_id, payload=data
        )

    @router.get("/{cognito_id}/current-residences", response_model=List[PropertyOut])
    @safe_handler
    async def current_residences(
        self,
        cognito_id: str,
        auth: AuthContext = Depends(tenant_only),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await TenantService(db).current_residences(
            auth=auth, cognito_id=cognito_id
        )

    @router.post("/{cognito_id}/favorites/{property_id}", response_model=TenantDetailOut)
    @safe_handler
    async def add_favorite(
        self,
        cognito_id: str,
        property_id: int,
        auth: AuthContext = Depends(tenant_only),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await TenantService(db).add_favorite(
            auth=auth, cognito_id=cognito_id, property_id=property_id
        )

    @router.delete(
        "/{cognito_id}/favorites/{property_id}", response_model=TenantDetailOut
    )
    @safe_handler
    async def remove_favorite(
        self,
        cognito_id: str,
        property_id: int,
        auth: AuthContext = Depends(tenant_only),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await TenantService(db).remove_favorite(
            auth=auth, cognito_id=cognito_id, property_id=property_id
        )
