import logging
from pathlib import Path

from core.pdf_generate import LeaseAgreementGenerator, ReceiptGenerator
from core.settings import settings
from core.render_pool import render_document
from models.models import Lease, Payment
from repos.lease_repo import LeaseRepo
from repos.payment_repo import PaymentRepo

logger = logging.getLogger(__name__)


def _cached(path: str | None) -> Path | None:
    if path and Path(path).is_file():
        return Path(path)
    return None


class DocumentService:
    """Renders receipts and lease agreements once and serves them from disk."""

    def __init__(self, db):
        self.db = db
        self.payment_repo: PaymentRepo = PaymentRepo(db)
        self.lease_repo: LeaseRepo = LeaseRepo(db)

    async def ensure_receipt(self, payment: Payment) -> Path:
        cached = _cached(payment.receipt_path)
        if cached:
            return cached
        if payment.receipt_path:
            logger.info("Receipt for payment %s missing on disk, regenerating", payment.id)

        path = await render_document(
            ReceiptGenerator.generate_pdf, payment, settings.RECEIPTS_DIR
        )
        await self.payment_repo.set_receipt_path(payment, str(path))
        return path

    async def ensure_agreement(self, lease: Lease) -> Path:
        cached = _cached(lease.agreement_path)
        if cached:
            return cached

        path = await render_document(
            LeaseAgreementGenerator.generate_pdf, lease, settings.AGREEMENTS_DIR
        )
        await self.lease_repo.set_agreement_path(lease, str(path))
        return path

    @staticmethod
    def discard(path: str | None) -> None:
        """Removes a rendered file that no longer matches its row."""
        if not path:
            return
        try:
            Path(path).unlink(missing_ok=True)
        except OSError:
            logger.warning("Could not remove stale document %s", path, exc_info=True)
