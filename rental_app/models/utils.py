from datetime import datetime, timezone
from decimal import Decimal

from dateutil.relativedelta import relativedelta

from .enums import PaymentStatus

LEASE_TERM = relativedelta(years=1)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def calculate_lease_end(start: datetime) -> datetime:
    return start + LEASE_TERM


def next_payment_date(start: datetime, today: datetime | None = None) -> datetime:
    today = today or utcnow()
    if start.tzinfo is None and today.tzinfo is not None:
        today = today.replace(tzinfo=None)

    months = 0
    candidate = start
    while candidate <= today:
        months += 1
        candidate = start + relativedelta(months=months)
    return candidate


def derive_payment_status(amount_due: Decimal, amount_paid: Decimal) -> PaymentStatus:
    if amount_paid >= amount_due:
        return PaymentStatus.PAID
    if amount_paid > 0:
        return PaymentStatus.PARTIALLY_PAID
    return PaymentStatus.PENDING


def split_csv(value) -> list[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        items = []
        for v in value:
            items.extend(split_csv(v))
        return items
    return [s.strip() for s in str(value).split(",") if s.strip()]
