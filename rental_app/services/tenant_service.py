import logging

from fastapi import HTTPException

from core.auth import AuthContext, ensure_self_or_roles
from repos.property_repo import PropertyRepo
from repos.tenant_repo import TenantRepo
from schemas.schema import (
    PropertyOut,
    TenantCreate,
    TenantDetailOut,
    TenantOut,
    TenantUpdate,
)

logger = logging.getLogger(__name__)


class TenantService:
    def __init__(self, db):
        self.db = db
        self.repo: TenantRepo = TenantRepo(db)
        self.property_repo: PropertyRepo = PropertyRepo(db)

    async def list_tenants(self) -> list[TenantOut]:
        return [TenantOut.model_validate(t) for t in await self.repo.list_all()]

    async def get_tenant(self, auth: AuthContext, cognito_id: str) -> TenantDetailOut:
        ensure_self_or_roles(auth, cognito_id)
        tenant = await self.repo.get_with_favorites(cognito_id)
        if not tenant:
            raise HTTPException(status_code=404, detail="Tenant not found.")
        return TenantDetailOut.model_validate(tenant)

    async def create_tenant(self, payload: TenantCreate) -> TenantOut:
        if await self.repo.get_by_cognito_id(payload.cognito_id):
            raise HTTPException(status_code=409, detail="Tenant already exists.")
        tenant = await self.repo.create(payload.model_dump())
        logger.info("Tenant %s signed up", tenant.cognito_id)
        return TenantOut.model_validate(tenant)

    async def update_tenant(
        self, auth: AuthContext, cognito_id: str, payload: TenantUpdate
    ) -> TenantOut:
        ensure_self_or_roles(auth, cognito_id)
        values = payload.model_dump(exclude_unset=True)
        if "is_suspended" in values and not auth.is_manager:
            raise HTTPException(
                status_code=403, detail="Only managers can change suspension."
            )

        tenant = await self.repo.get_by_cognito_id(cognito_id)
        if not tenant:
            raise HTTPException(status_code=404, detail="Tenant not found.")

        tenant = await self.repo.update(tenant, values)
        return TenantOut.model_validate(tenant)

    async def current_residences(
        self, auth: AuthContext, cognito_id: str
    ) -> list[PropertyOut]:
        ensure_self_or_roles(auth, cognito_id, roles=())
        if not await self.repo.get_by_cognito_id(cognito_id):
            raise HTTPException(status_code=404, detail="Tenant not found.")
        properties = await self.repo.current_residences(cognito_id)
        return [PropertyOut.model_validate(p) for p in properties]

    async def add_favorite(
        self, auth: AuthContext, cognito_id: str, property_id: int
    ) -> TenantDetailOut:
        ensure_self_or_roles(auth, cognito_id, roles=())
        tenant = await self.repo.get_with_favorites(cognito_id)
        if not tenant:
            raise HTTPException(status_code=404, detail="Tenant not found.")
        prop = await self.property_repo.get_by_id(property_id)
        if not prop:
            raise HTTPException(status_code=404, detail="Property not found.")

        if all(p.id != property_id for p in tenant.favorites):
            tenant.favorites.append(prop)
            await self.repo.db_commit()
        return TenantDetailOut.model_validate(tenant)

    async def remove_favorite(
        self, auth: AuthContext, cognito_id: str, property_id: int
    ) -> TenantDetailOut:
        ensure_self_or_roles(auth, cognito_id, roles=())
        tenant = await self.repo.get_with_favorites(cognito_id)
        if not tenant:
            raise HTTPException(status_code=404, detail="Tenant not found.")

        remaining = [p for p in tenant.favorites if p.id != property_id]
        if len(remaining) != len(tenant.favorites):
            tenant.favorites = remaining
            await self.repo.db_commit()
        return TenantDetailOut.model_validate(tenant)
