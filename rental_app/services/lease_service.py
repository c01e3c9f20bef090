from pathlib import Path

from fastapi import HTTPException

from core.auth import AuthContext
from models.models import Lease
from repos.lease_repo import LeaseRepo
from schemas.schema import LeaseWithPropertyOut, PaymentOut

from .document_service import DocumentService


class LeaseService:
    def __init__(self, db):
        self.db = db
        self.repo: LeaseRepo = LeaseRepo(db)
        self.documents: DocumentService = DocumentService(db)

    def _ensure_party(self, lease: Lease, auth: AuthContext):
        if auth.is_tenant and lease.tenant_cognito_id != auth.user_id:
            raise HTTPException(status_code=403, detail="Access Denied")
        if auth.is_manager and lease.property.manager_cognito_id != auth.user_id:
            raise HTTPException(status_code=403, detail="Access Denied")

    async def _get_or_404(self, lease_id: int) -> Lease:
        lease = await self.repo.get_for_document(lease_id)
        if not lease:
            raise HTTPException(status_code=404, detail="Lease not found.")
        return lease

    async def list_leases(
        self, auth: AuthContext, property_id: int | None = None
    ) -> list[LeaseWithPropertyOut]:
        if auth.is_tenant:
            leases = await self.repo.search(
                property_id=property_id, tenant_cognito_id=auth.user_id
            )
        else:
            leases = await self.repo.search(
                property_id=property_id, manager_cognito_id=auth.user_id
            )
        return [LeaseWithPropertyOut.model_validate(lease) for lease in leases]

    async def lease_payments(self, auth: AuthContext, lease_id: int) -> list[PaymentOut]:
        lease = await self._get_or_404(lease_id)
        self._ensure_party(lease, auth)
        return [PaymentOut.model_validate(p) for p in await self.repo.payments(lease_id)]

    async def agreement(self, auth: AuthContext, lease_id: int) -> Path:
        lease = await self._get_or_404(lease_id)
        self._ensure_party(lease, auth)
        return await self.documents.ensure_agreement(lease)
