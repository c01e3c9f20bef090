from typing import List

from sqlalchemy import select

from models.enums import NotificationKind
from models.models import Notification


class NotificationRepo:
    def __init__(self, db):
        self.db = db

    async def list_for_recipient(
        self, recipient_cognito_id: str, kind: NotificationKind
    ) -> List[Notification]:
        result = await self.db.execute(
            select(Notification)
            .where(
                Notification.recipient_cognito_id == recipient_cognito_id,
                Notification.kind == kind,
            )
            .order_by(Notification.created_at.desc(), Notification.id.desc())
        )
        return list(result.scalars().all())
