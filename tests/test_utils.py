# =============================================================================
# tests/test_utils.py - Date, Parsing and Resilience Helper Tests
# =============================================================================

from datetime import datetime

import pytest

from core.breaker import CircuitBreaker, CircuitOpenError
from core.friendly_msg import DEFAULT_MESSAGE, get_friendly_message
from models.utils import calculate_lease_end, next_payment_date, split_csv
from tests.conftest import run


class TestNextPaymentDate:
    """First monthly anniversary of the lease start strictly after today."""

    def test_next_anniversary(self):
        start = datetime(2026, 1, 15)
        assert next_payment_date(start, today=datetime(2026, 3, 20)) == datetime(
            2026, 4, 15
        )

    def test_anniversary_today_moves_to_next_month(self):
        start = datetime(2026, 1, 15)
        assert next_payment_date(start, today=datetime(2026, 3, 15)) == datetime(
            2026, 4, 15
        )

    def test_month_end_is_clamped(self):
        start = datetime(2026, 1, 31)
        assert next_payment_date(start, today=datetime(2026, 2, 1)) == datetime(
            2026, 2, 28
        )

    def test_future_start_is_the_start(self):
        start = datetime(2026, 6, 1)
        assert next_payment_date(start, today=datetime(2026, 5, 1)) == start

    def test_lease_term_is_one_year(self):
        assert calculate_lease_end(datetime(2024, 2, 29)) == datetime(2025, 2, 28)


class TestSplitCsv:
    def test_strips_and_drops_blanks(self):
        assert split_csv(" WiFi, ,Pool ,") == ["WiFi", "Pool"]

    def test_none(self):
        assert split_csv(None) == []

    def test_repeated_query_values(self):
        assert split_csv(["WiFi,Pool", "Gym"]) == ["WiFi", "Pool", "Gym"]


class TestCircuitBreaker:
    """Opens after the failure threshold and fails fast while open."""

    def test_opens_after_threshold(self):
        breaker = CircuitBreaker("test", failure_threshold=2, base_recovery_time=60)
        calls = []

        async def failing():
            calls.append(1)
            raise ConnectionError("down")

        async def scenario():
            for _ in range(2):
                with pytest.raises(ConnectionError):
                    await breaker.call(failing)
            with pytest.raises(CircuitOpenError):
                await breaker.call(failing)

        run(scenario())
        assert breaker.state == "OPEN"
        assert len(calls) == 2

    def test_success_resets_failures(self):
        breaker = CircuitBreaker("test", failure_threshold=3)

        async def failing():
            raise TimeoutError()

        async def working():
            return "ok"

        async def scenario():
            with pytest.raises(TimeoutError):
                await breaker.call(failing)
            return await breaker.call(working)

        assert run(scenario()) == "ok"
        assert breaker.failure_count == 0
        assert breaker.state == "CLOSED"

    def test_half_open_after_cooldown(self):
        breaker = CircuitBreaker("test", failure_threshold=1, base_recovery_time=0)

        async def failing():
            raise ConnectionError()

        async def working():
            return 1

        async def scenario():
            with pytest.raises(ConnectionError):
                await breaker.call(failing)
            return await breaker.call(working)

        assert run(scenario()) == 1
        assert breaker.state == "CLOSED"


class TestFriendlyMessage:
    def test_known_error(self):
        assert "connect" in get_friendly_message(ConnectionRefusedError())

    def test_circuit_open(self):
        assert "temporarily unavailable" in get_friendly_message(CircuitOpenError())

    def test_unknown_error(self):
        assert get_friendly_message(KeyError("x")) == DEFAULT_MESSAGE


class TestPhotoStorage:
    def test_disabled_storage_skips_uploads(self):
        from io import BytesIO

        from fastapi import UploadFile

        from core.cloudinary_setup import CloudinaryClient

        client = CloudinaryClient()
        photo = UploadFile(file=BytesIO(b"\x89PNG"), filename="front.png")

        assert client.enabled is False
        assert run(client.upload_photos([photo])) == []
        assert run(client.upload_photos(None)) == []
