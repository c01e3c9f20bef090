# =============================================================================
# tests/test_tenants.py - Tenant Profile and Favorites Tests
# =============================================================================

from decimal import Decimal

import pytest
from fastapi import HTTPException
from pydantic import ValidationError

from core.auth import AuthContext
from models.enums import UserRole
from schemas.schema import TenantCreate, TenantUpdate
from services.tenant_service import TenantService
from tests.conftest import MANAGER_ID, TENANT_ID, run


def call(factory, method, *args):
    async def _call():
        async with factory() as session:
            return await getattr(TenantService(session), method)(*args)

    return run(_call())


class TestFavorites:
    """Favorites are a set of property ids per tenant."""

    def test_add_is_idempotent(self, seeded, session_factory, tenant_auth):
        property_id = seeded["property_id"]

        call(session_factory, "add_favorite", tenant_auth, TENANT_ID, property_id)
        detail = call(
            session_factory, "add_favorite", tenant_auth, TENANT_ID, property_id
        )

        assert [p.id for p in detail.favorites] == [property_id]

    def test_remove(self, seeded, session_factory, tenant_auth):
        property_id = seeded["property_id"]
        call(session_factory, "add_favorite", tenant_auth, TENANT_ID, property_id)

        detail = call(
            session_factory, "remove_favorite", tenant_auth, TENANT_ID, property_id
        )
        assert detail.favorites == []

        fetched = call(session_factory, "get_tenant", tenant_auth, TENANT_ID)
        assert fetched.favorites == []

    def test_unknown_property_is_404(self, seeded, session_factory, tenant_auth):
        with pytest.raises(HTTPException) as exc:
            call(session_factory, "add_favorite", tenant_auth, TENANT_ID, 999)
        assert exc.value.status_code == 404

    def test_other_tenant_is_403(self, seeded, session_factory):
        other = AuthContext(user_id="tenant-2", role=UserRole.TENANT)
        with pytest.raises(HTTPException) as exc:
            call(
                session_factory,
                "add_favorite",
                other,
                TENANT_ID,
                seeded["property_id"],
            )
        assert exc.value.status_code == 403


class TestProfile:
    def test_signup_starts_with_empty_wallet(self, session_factory):
        tenant = call(
            session_factory,
            "create_tenant",
            TenantCreate(
                cognito_id="tenant-9", name="Nia", email=" Nia@Example.com "
            ),
        )
        assert tenant.balance == Decimal("0")
        assert tenant.is_suspended is False
        assert tenant.email == "nia@example.com"

    def test_manager_can_suspend(self, seeded, session_factory, manager_auth):
        tenant = call(
            session_factory,
            "update_tenant",
            manager_auth,
            TENANT_ID,
            TenantUpdate(is_suspended=True),
        )
        assert tenant.is_suspended is True

    def test_tenant_cannot_unsuspend_self(self, seeded, session_factory, tenant_auth):
        with pytest.raises(HTTPException) as exc:
            call(
                session_factory,
                "update_tenant",
                tenant_auth,
                TENANT_ID,
                TenantUpdate(is_suspended=False),
            )
        assert exc.value.status_code == 403

    def test_manager_reads_any_tenant(self, seeded, session_factory):
        auth = AuthContext(user_id=MANAGER_ID, role=UserRole.MANAGER)
        detail = call(session_factory, "get_tenant", auth, TENANT_ID)
        assert detail.name == "Tobi Tenant"
        assert detail.balance == Decimal("500.00")

    def test_current_residences_empty_before_approval(
        self, seeded, session_factory, tenant_auth
    ):
        assert call(session_factory, "current_residences", tenant_auth, TENANT_ID) == []


class TestPayloadValidation:
    """Explicit nulls and wrong types are rejected before reaching the database."""

    def test_null_name_rejected(self):
        with pytest.raises(ValidationError):
            TenantUpdate.model_validate({"name": None})

    def test_null_suspension_rejected(self):
        with pytest.raises(ValidationError):
            TenantUpdate.model_validate({"is_suspended": None})

    def test_phone_number_can_be_cleared(self):
        update = TenantUpdate.model_validate({"phone_number": None})
        assert update.model_dump(exclude_unset=True) == {"phone_number": None}

    def test_non_string_email_is_a_validation_error(self):
        with pytest.raises(ValidationError):
            TenantCreate.model_validate(
                {"cognito_id": "tenant-9", "name": "Nia", "email": 42}
            )
