from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from models.enums import ApplicationStatus
from models.models import Application, Property


class ApplicationRepo:
    def __init__(self, db):
        self.db = db

    def _with_relations(self):
        return select(Application).options(
            selectinload(Application.property),
            selectinload(Application.lease),
        )

    async def get_with_relations(self, application_id: int) -> Optional[Application]:
        result = await self.db.execute(
            self._with_relations().where(Application.id == application_id)
        )
        return result.scalars().first()

    async def get_for_update(self, application_id: int) -> Optional[Application]:
        result = await self.db.execute(
            self._with_relations()
            .where(Application.id == application_id)
            .with_for_update(of=Application)
        )
        return result.scalars().first()

    async def list_for_tenant(self, tenant_cognito_id: str) -> List[Application]:
        result = await self.db.execute(
            self._with_relations()
            .where(Application.tenant_cognito_id == tenant_cognito_id)
            .order_by(Application.application_date.desc(), Application.id.desc())
        )
        return list(result.scalars().all())

    async def list_for_manager(self, manager_cognito_id: str) -> List[Application]:
        result = await self.db.execute(
            self._with_relations()
            .join(Application.property)
            .where(Property.manager_cognito_id == manager_cognito_id)
            .order_by(Application.application_date.desc(), Application.id.desc())
        )
        return list(result.scalars().all())

    async def create(
        self,
        *,
        property_id: int,
        tenant_cognito_id: str,
        name: str,
        email: str,
        phone_number: str,
        message: str | None,
        application_date: datetime,
    ) -> Application:
        application = Application(
            property_id=property_id,
            tenant_cognito_id=tenant_cognito_id,
            name=name,
            email=email,
            phone_number=phone_number,
            message=message,
            application_date=application_date,
            status=ApplicationStatus.PENDING,
        )
        self.db.add(application)
        try:
            await self.db.commit()
            return await self.get_with_relations(application.id)
        except SQLAlchemyError:
            await self.db.rollback()
            raise
