from fastapi import HTTPException

from core.auth import AuthContext
from repos.manager_repo import ManagerRepo
from repos.property_repo import PropertyRepo
from schemas.schema import ManagerCreate, ManagerOut, ManagerUpdate, PropertyOut


class ManagerService:
    def __init__(self, db):
        self.db = db
        self.repo: ManagerRepo = ManagerRepo(db)
        self.property_repo: PropertyRepo = PropertyRepo(db)

    async def get_manager(self, cognito_id: str) -> ManagerOut:
        manager = await self.repo.get_by_cognito_id(cognito_id)
        if not manager:
            raise HTTPException(status_code=404, detail="Manager not found.")
        return ManagerOut.model_validate(manager)

    async def create_manager(
        self, auth: AuthContext, payload: ManagerCreate
    ) -> ManagerOut:
        if payload.cognito_id != auth.user_id:
            raise HTTPException(
                status_code=403, detail="Managers can only create their own profile."
            )
        if await self.repo.get_by_cognito_id(payload.cognito_id):
            raise HTTPException(status_code=409, detail="Manager already exists.")

        manager = await self.repo.create(payload.model_dump())
        return ManagerOut.model_validate(manager)

    async def update_manager(
        self, auth: AuthContext, cognito_id: str, payload: ManagerUpdate
    ) -> ManagerOut:
        if cognito_id != auth.user_id:
            raise HTTPException(
                status_code=403, detail="Managers can only update their own profile."
            )
        manager = await self.repo.get_by_cognito_id(cognito_id)
        if not manager:
            raise HTTPException(status_code=404, detail="Manager not found.")

        manager = await self.repo.update(manager, payload.model_dump(exclude_unset=True))
        return ManagerOut.model_validate(manager)

    async def manager_properties(self, cognito_id: str) -> list[PropertyOut]:
        if not await self.repo.get_by_cognito_id(cognito_id):
            raise HTTPException(status_code=404, detail="Manager not found.")
        properties = await self.property_repo.list_by_manager(cognito_id)
        return [PropertyOut.model_validate(p) for p in properties]
