# =============================================================================
# tests/test_auth.py - Bearer Token Gate Tests
# =============================================================================
# Exercises the role gate through real HTTP requests. None of these requests
# reach the database: the gate rejects them first.
# =============================================================================

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from app import app
from core.auth import AuthContext, ensure_self_or_roles, resolve_identity
from models.enums import UserRole
from tests.conftest import MANAGER_ID, TENANT_ID, bearer, make_token


@pytest.fixture
def client():
    return TestClient(app)


# =============================================================================
# Rejections
# =============================================================================

class TestRejections:
    """Requests the gate must turn away."""

    def test_missing_header_is_401(self, client):
        response = client.get("/tenants/")
        assert response.status_code == 401
        assert response.json() == {"message": "Unauthorized: no token"}

    def test_collection_path_without_slash(self, client):
        response = client.get("/tenants")
        assert response.status_code == 401
        assert response.json() == {"message": "Unauthorized: no token"}

    def test_non_bearer_scheme_is_401(self, client):
        response = client.get("/tenants/", headers={"Authorization": "Token abc"})
        assert response.status_code == 401
        assert response.json() == {"message": "Unauthorized: malformed header"}

    def test_empty_bearer_is_401(self, client):
        response = client.get("/tenants/", headers={"Authorization": "Bearer "})
        assert response.status_code == 401

    def test_bad_signature_is_401(self, client):
        token = make_token() + "tampered"
        response = client.get("/tenants/", headers=bearer(token))
        assert response.status_code == 401
        assert response.json() == {"message": "Invalid token"}

    def test_expired_token_is_401(self, client):
        token = make_token(expires_in=-60)
        response = client.get("/tenants/", headers=bearer(token))
        assert response.status_code == 401
        assert response.json() == {"message": "Token expired"}

    def test_missing_subject_is_400(self, client):
        token = make_token(sub=None)
        response = client.get("/tenants/", headers=bearer(token))
        assert response.status_code == 400
        assert response.json() == {"message": "Invalid token"}

    def test_role_not_allowed_is_403(self, client):
        token = make_token(sub=TENANT_ID, role="tenant")
        response = client.get("/tenants/", headers=bearer(token))
        assert response.status_code == 403
        assert response.json() == {"message": "Access Denied"}

    def test_missing_role_is_403(self, client):
        token = make_token(role=None)
        response = client.get("/payments/deposits/pending", headers=bearer(token))
        assert response.status_code == 403


# =============================================================================
# Identity resolution
# =============================================================================

class TestResolveIdentity:
    """Token decoding outside the HTTP stack."""

    def test_role_is_case_insensitive(self):
        user_id, role = resolve_identity(make_token(role="MaNaGeR"))
        assert user_id == MANAGER_ID
        assert role == "manager"

    def test_garbage_token_raises_401(self):
        with pytest.raises(HTTPException) as exc:
            resolve_identity("not-a-jwt")
        assert exc.value.status_code == 401


class TestEnsureSelfOrRoles:
    """Ownership checks on cognito ids."""

    def test_self_is_allowed(self):
        auth = AuthContext(user_id=TENANT_ID, role=UserRole.TENANT)
        ensure_self_or_roles(auth, TENANT_ID)

    def test_manager_is_allowed_by_default(self):
        auth = AuthContext(user_id=MANAGER_ID, role=UserRole.MANAGER)
        ensure_self_or_roles(auth, TENANT_ID)

    def test_other_tenant_is_denied(self):
        auth = AuthContext(user_id="someone-else", role=UserRole.TENANT)
        with pytest.raises(HTTPException) as exc:
            ensure_self_or_roles(auth, TENANT_ID)
        assert exc.value.status_code == 403

    def test_manager_denied_when_roles_empty(self):
        auth = AuthContext(user_id=MANAGER_ID, role=UserRole.MANAGER)
        with pytest.raises(HTTPException):
            ensure_self_or_roles(auth, TENANT_ID, roles=())
