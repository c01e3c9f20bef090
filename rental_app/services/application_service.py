import logging
from decimal import Decimal

from fastapi import HTTPException

from core.auth import AuthContext
from models.enums import ApplicationStatus, PaymentStatus, PaymentType
from models.models import Application
from models.utils import calculate_lease_end, utcnow
from repos.application_repo import ApplicationRepo
from repos.lease_repo import LeaseRepo
from repos.payment_repo import PaymentRepo
from repos.property_repo import PropertyRepo
from repos.tenant_repo import TenantRepo
from schemas.schema import ApplicationCreate, ApplicationOut, LeaseOut

logger = logging.getLogger(__name__)


class ApplicationService:
    def __init__(self, db):
        self.db = db
        self.repo: ApplicationRepo = ApplicationRepo(db)
        self.property_repo: PropertyRepo = PropertyRepo(db)
        self.tenant_repo: TenantRepo = TenantRepo(db)
        self.lease_repo: LeaseRepo = LeaseRepo(db)
        self.payment_repo: PaymentRepo = PaymentRepo(db)

    async def create_application(
        self, auth: AuthContext, payload: ApplicationCreate
    ) -> ApplicationOut:
        tenant = await self.tenant_repo.get_by_cognito_id(auth.user_id)
        if not tenant:
            raise HTTPException(status_code=404, detail="Tenant not found.")
        if tenant.is_suspended:
            raise HTTPException(status_code=403, detail="Tenant account is suspended.")
        if not await self.property_repo.get_by_id(payload.property_id):
            raise HTTPException(status_code=404, detail="Property not found.")

        application = await self.repo.create(
            property_id=payload.property_id,
            tenant_cognito_id=auth.user_id,
            name=payload.name,
            email=payload.email,
            phone_number=payload.phone_number,
            message=payload.message,
            application_date=payload.application_date or utcnow(),
        )
        return ApplicationOut.model_validate(application)

    async def list_applications(self, auth: AuthContext) -> list[ApplicationOut]:
        if auth.is_tenant:
            applications = await self.repo.list_for_tenant(auth.user_id)
        else:
            applications = await self.repo.list_for_manager(auth.user_id)

        leases = await self.lease_repo.latest_for_pairs(
            (a.tenant_cognito_id, a.property_id) for a in applications
        )

        items = []
        for application in applications:
            item = ApplicationOut.model_validate(application)
            lease = leases.get((application.tenant_cognito_id, application.property_id))
            if lease is not None:
                item.lease = LeaseOut.model_validate(lease)
            items.append(item)
        return items

    async def update_status(
        self, auth: AuthContext, application_id: int, status: ApplicationStatus
    ) -> ApplicationOut:
        try:
            application = await self.repo.get_for_update(application_id)
            if not application:
                raise HTTPException(status_code=404, detail="Application not found.")
            if application.property.manager_cognito_id != auth.user_id:
                raise HTTPException(
                    status_code=403,
                    detail="Only the managing owner can review this application.",
                )
            if application.status == ApplicationStatus.APPROVED:
                raise HTTPException(
                    status_code=409, detail="Application has already been approved."
                )

            if status == ApplicationStatus.APPROVED:
                await self._approve(application)
            else:
                application.status = status

            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(
            "Application %s set to %s by %s", application_id, status.value, auth.user_id
        )
        return ApplicationOut.model_validate(application)

    async def _approve(self, application: Application) -> None:
        """Debits the first month, opens the lease and records the payment.

        Runs inside the caller's transaction; the tenant row stays locked
        until commit so concurrent debits see the updated balance.
        """
        prop = application.property
        tenant = await self.tenant_repo.get_for_update(application.tenant_cognito_id)
        if not tenant:
            raise HTTPException(status_code=404, detail="Tenant not found.")

        price = Decimal(str(prop.price_per_month))
        if Decimal(str(tenant.balance)) < price:
            raise HTTPException(
                status_code=400,
                detail="Insufficient balance to cover the first month's rent.",
            )

        self.tenant_repo.adjust_balance(tenant, -price)

        now = utcnow()
        lease = await self.lease_repo.create(
            property_id=prop.id,
            tenant_cognito_id=tenant.cognito_id,
            start_date=now,
            end_date=calculate_lease_end(now),
            rent=price,
            deposit=Decimal(str(prop.security_deposit)),
        )

        await self.payment_repo.add(
            tenant_cognito_id=tenant.cognito_id,
            amount_due=price,
            amount_paid=price,
            due_date=now,
            payment_date=now,
            payment_status=PaymentStatus.PAID,
            type=PaymentType.RENT,
            is_approved=True,
            lease_id=lease.id,
        )

        occupied = await self.property_repo.get_with_tenants(prop.id)
        if all(t.id != tenant.id for t in occupied.tenants):
            occupied.tenants.append(tenant)

        application.status = ApplicationStatus.APPROVED
        application.lease_id = lease.id
        application.lease = lease
        await self.db.flush()
