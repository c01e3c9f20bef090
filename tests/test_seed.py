# =============================================================================
# tests/test_seed.py - Development Data Script Tests
# =============================================================================
# The seed itself needs PostGIS, so these tests cover the row builder and the
# wipe order without touching a database.
# =============================================================================

from datetime import datetime, timezone

from models.enums import ApplicationStatus, PaymentStatus
from models.models import Application, Lease, Manager, Payment, Property, Tenant
from models.shape import convert_location
from scripts.seed import LISTINGS, MANAGER_ID, reset_order, sample_records

NOW = datetime(2026, 3, 18, 14, 30, tzinfo=timezone.utc)


def of_type(records, model):
    return [record for record in records if isinstance(record, model)]


class TestResetOrder:
    def position(self, name):
        return [table.name for table in reset_order()].index(name)

    def test_children_cleared_first(self):
        assert self.position("payments") < self.position("leases")
        assert self.position("applications") < self.position("leases")
        assert self.position("leases") < self.position("properties")
        assert self.position("properties") < self.position("locations")
        assert self.position("properties") < self.position("managers")

    def test_join_tables_before_tenants(self):
        assert self.position("tenant_favorites") < self.position("tenants")
        assert self.position("tenant_properties") < self.position("tenants")


class TestSampleRecords:
    def test_every_listing_has_a_located_property(self):
        properties = of_type(sample_records(NOW), Property)
        assert [p.name for p in properties] == [listing["name"] for listing in LISTINGS]
        for prop, listing in zip(properties, LISTINGS):
            assert prop.manager.cognito_id == MANAGER_ID
            assert convert_location(prop.location.coordinates) == {
                "longitude": listing["lon"],
                "latitude": listing["lat"],
            }

    def test_lease_follows_property_terms(self):
        records = sample_records(NOW)
        (lease,) = of_type(records, Lease)
        assert lease.rent == lease.property.price_per_month
        assert lease.deposit == lease.property.security_deposit
        assert lease.start_date == datetime(2026, 3, 1, tzinfo=timezone.utc)
        assert lease.end_date == datetime(2027, 3, 1, tzinfo=timezone.utc)
        assert lease.tenant in lease.property.tenants

    def test_only_approved_application_has_lease(self):
        records = sample_records(NOW)
        (lease,) = of_type(records, Lease)
        by_status = {a.status: a for a in of_type(records, Application)}
        assert by_status[ApplicationStatus.APPROVED].lease is lease
        assert by_status[ApplicationStatus.PENDING].lease is None

    def test_first_rent_is_paid(self):
        records = sample_records(NOW)
        (payment,) = of_type(records, Payment)
        assert payment.payment_status == PaymentStatus.PAID
        assert payment.amount_paid == payment.amount_due == payment.lease.rent
        assert payment.tenant is payment.lease.tenant

    def test_single_manager_and_two_tenants(self):
        records = sample_records(NOW)
        assert len(of_type(records, Manager)) == 1
        assert len(of_type(records, Tenant)) == 2
