from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from models.models import Manager


class ManagerRepo:
    def __init__(self, db):
        self.db = db

    async def get_by_cognito_id(self, cognito_id: str) -> Optional[Manager]:
        result = await self.db.execute(
            select(Manager).where(Manager.cognito_id == cognito_id)
        )
        return result.scalar_one_or_none()

    async def create(self, data: dict) -> Manager:
        manager = Manager(**data)
        self.db.add(manager)
        try:
            await self.db.commit()
            await self.db.refresh(manager)
            return manager
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def update(self, manager: Manager, values: dict) -> Manager:
        for key, value in values.items():
            setattr(manager, key, value)
        try:
            await self.db.commit()
            await self.db.refresh(manager)
            return manager
        except SQLAlchemyError:
            await self.db.rollback()
            raise
