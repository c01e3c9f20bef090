import logging

from fastapi import HTTPException

from core.auth import AuthContext
from email_notify.email_service import send_bulk_email, send_email
from models.enums import NotificationKind
from repos.notification_repo import NotificationRepo
from repos.tenant_repo import TenantRepo
from schemas.schema import (
    EmailAllRequest,
    EmailSendResult,
    EmailUserRequest,
    NotificationOut,
)

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(self, db):
        self.db = db
        self.repo: NotificationRepo = NotificationRepo(db)
        self.tenant_repo: TenantRepo = TenantRepo(db)

    async def email_all_tenants(self, payload: EmailAllRequest) -> EmailSendResult:
        recipients = await self.tenant_repo.list_emails()
        if not recipients:
            raise HTTPException(status_code=404, detail="No tenants to email.")

        sent = await send_bulk_email(recipients, payload.subject, payload.message)
        logger.info("Broadcast '%s' sent to %d tenant(s)", payload.subject, sent)
        return EmailSendResult(success=True, sent=sent)

    async def email_user(self, payload: EmailUserRequest) -> EmailSendResult:
        await send_email(payload.email, payload.subject, payload.message)
        return EmailSendResult(success=True, sent=1)

    async def feed(
        self, auth: AuthContext, kind: NotificationKind
    ) -> list[NotificationOut]:
        items = await self.repo.list_for_recipient(auth.user_id, kind)
        return [NotificationOut.model_validate(n) for n in items]
