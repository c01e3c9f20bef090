# =============================================================================
# tests/test_applications.py - Application Review Workflow Tests
# =============================================================================
# Approval debits the first month, opens a lease and records the payment in
# one transaction. These tests check the happy path, every rejection, and
# that a failure half way through leaves no trace.
# =============================================================================

from decimal import Decimal

import pytest
from fastapi import HTTPException

from models.enums import ApplicationStatus, PaymentStatus, PaymentType, UserRole
from core.auth import AuthContext
from models.models import Application, Lease, Payment
from repos.payment_repo import PaymentRepo
from schemas.schema import ApplicationCreate
from services.application_service import ApplicationService
from tests.conftest import (
    TENANT_ID,
    fetch_all,
    fetch_tenant,
    run,
    set_balance,
)


def review(factory, auth, application_id, status):
    async def _review():
        async with factory() as session:
            return await ApplicationService(session).update_status(
                auth=auth, application_id=application_id, status=status
            )

    return run(_review())


# =============================================================================
# Approval
# =============================================================================

class TestApproval:
    """Approving an application with enough balance."""

    def test_balance_lease_and_payment(self, session_factory, seeded, manager_auth):
        result = review(
            session_factory,
            manager_auth,
            seeded["application_id"],
            ApplicationStatus.APPROVED,
        )

        assert result.status == ApplicationStatus.APPROVED
        assert result.lease is not None
        assert result.lease_id == result.lease.id

        tenant = run(fetch_tenant(session_factory))
        assert tenant.balance == Decimal("100.00")

        leases = run(fetch_all(session_factory, Lease))
        assert len(leases) == 1
        assert leases[0].rent == Decimal("400.00")
        assert leases[0].deposit == Decimal("800.00")
        assert leases[0].tenant_cognito_id == TENANT_ID

        payments = run(fetch_all(session_factory, Payment))
        assert len(payments) == 1
        payment = payments[0]
        assert payment.amount_due == Decimal("400.00")
        assert payment.amount_paid == Decimal("400.00")
        assert payment.payment_status == PaymentStatus.PAID
        assert payment.type == PaymentType.RENT
        assert payment.is_approved is True
        assert payment.lease_id == leases[0].id

    def test_lease_term_is_one_year(self, session_factory, seeded, manager_auth):
        result = review(
            session_factory,
            manager_auth,
            seeded["application_id"],
            ApplicationStatus.APPROVED,
        )
        lease = result.lease
        assert lease.end_date.year == lease.start_date.year + 1
        assert lease.next_payment_date > lease.start_date

    def test_double_approval_is_409(self, session_factory, seeded, manager_auth):
        review(
            session_factory,
            manager_auth,
            seeded["application_id"],
            ApplicationStatus.APPROVED,
        )
        with pytest.raises(HTTPException) as exc:
            review(
                session_factory,
                manager_auth,
                seeded["application_id"],
                ApplicationStatus.APPROVED,
            )
        assert exc.value.status_code == 409

        assert len(run(fetch_all(session_factory, Lease))) == 1
        assert run(fetch_tenant(session_factory)).balance == Decimal("100.00")

    def test_approved_cannot_be_denied(self, session_factory, seeded, manager_auth):
        review(
            session_factory,
            manager_auth,
            seeded["application_id"],
            ApplicationStatus.APPROVED,
        )
        with pytest.raises(HTTPException) as exc:
            review(
                session_factory,
                manager_auth,
                seeded["application_id"],
                ApplicationStatus.DENIED,
            )
        assert exc.value.status_code == 409


# =============================================================================
# Rejections and rollback
# =============================================================================

class TestApprovalRejected:
    """Nothing is written when approval cannot complete."""

    def test_insufficient_balance(self, session_factory, seeded, manager_auth):
        run(set_balance(session_factory, "300.00"))

        with pytest.raises(HTTPException) as exc:
            review(
                session_factory,
                manager_auth,
                seeded["application_id"],
                ApplicationStatus.APPROVED,
            )
        assert exc.value.status_code == 400

        assert run(fetch_tenant(session_factory)).balance == Decimal("300.00")
        assert run(fetch_all(session_factory, Lease)) == []
        assert run(fetch_all(session_factory, Payment)) == []
        application = run(fetch_all(session_factory, Application))[0]
        assert application.status == ApplicationStatus.PENDING

    def test_failure_mid_sequence_rolls_back(
        self, session_factory, seeded, manager_auth, monkeypatch
    ):
        async def broken_add(self, **kwargs):
            raise RuntimeError("ledger write failed")

        monkeypatch.setattr(PaymentRepo, "add", broken_add)

        with pytest.raises(RuntimeError):
            review(
                session_factory,
                manager_auth,
                seeded["application_id"],
                ApplicationStatus.APPROVED,
            )

        assert run(fetch_tenant(session_factory)).balance == Decimal("500.00")
        assert run(fetch_all(session_factory, Lease)) == []
        assert run(fetch_all(session_factory, Payment)) == []
        application = run(fetch_all(session_factory, Application))[0]
        assert application.status == ApplicationStatus.PENDING
        assert application.lease_id is None

    def test_other_manager_is_403(self, session_factory, seeded):
        stranger = AuthContext(user_id="manager-2", role=UserRole.MANAGER)
        with pytest.raises(HTTPException) as exc:
            review(
                session_factory,
                stranger,
                seeded["application_id"],
                ApplicationStatus.APPROVED,
            )
        assert exc.value.status_code == 403

    def test_unknown_application_is_404(self, session_factory, seeded, manager_auth):
        with pytest.raises(HTTPException) as exc:
            review(session_factory, manager_auth, 9999, ApplicationStatus.DENIED)
        assert exc.value.status_code == 404


# =============================================================================
# Denial and listing
# =============================================================================

class TestDenialAndListing:
    """Non-approval transitions and the application feed."""

    def test_denied_only_changes_status(self, session_factory, seeded, manager_auth):
        result = review(
            session_factory,
            manager_auth,
            seeded["application_id"],
            ApplicationStatus.DENIED,
        )
        assert result.status == ApplicationStatus.DENIED
        assert result.lease is None
        assert run(fetch_all(session_factory, Lease)) == []
        assert run(fetch_all(session_factory, Payment)) == []
        assert run(fetch_tenant(session_factory)).balance == Decimal("500.00")

    def test_listing_carries_lease(
        self, session_factory, seeded, manager_auth, tenant_auth
    ):
        review(
            session_factory,
            manager_auth,
            seeded["application_id"],
            ApplicationStatus.APPROVED,
        )

        async def _list(auth):
            async with session_factory() as session:
                return await ApplicationService(session).list_applications(auth=auth)

        for auth in (manager_auth, tenant_auth):
            items = run(_list(auth))
            assert len(items) == 1
            assert items[0].property.name == "Harbour View Flat"
            assert items[0].lease is not None
            assert items[0].lease.next_payment_date is not None

    def test_tenant_creates_pending_application(
        self, session_factory, seeded, tenant_auth
    ):
        payload = ApplicationCreate(
            property_id=seeded["property_id"],
            name="Tobi Tenant",
            email="tobi@example.com",
            phone_number="+15550100",
        )

        async def _create():
            async with session_factory() as session:
                return await ApplicationService(session).create_application(
                    auth=tenant_auth, payload=payload
                )

        created = run(_create())
        assert created.status == ApplicationStatus.PENDING
        assert created.tenant_cognito_id == TENANT_ID
        assert created.property.id == seeded["property_id"]

    def test_application_for_missing_property_is_404(
        self, session_factory, seeded, tenant_auth
    ):
        payload = ApplicationCreate(
            property_id=777,
            name="Tobi Tenant",
            email="tobi@example.com",
            phone_number="+15550100",
        )

        async def _create():
            async with session_factory() as session:
                return await ApplicationService(session).create_application(
                    auth=tenant_auth, payload=payload
                )

        with pytest.raises(HTTPException) as exc:
            run(_create())
        assert exc.value.status_code == 404
