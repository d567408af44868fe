"""
Tests for order number allocation and the collision retry loop.
"""

from datetime import timedelta
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from pos_api.models import Order, utcnow
from pos_api.services.domain import OrderNumberSequencer, OrderService, parse_sequence
from shared.utils.exceptions import (
    BusinessUnitNotFoundError,
    MalformedOrderNumberError,
    OrderNumberExhaustedError,
)


def _existing_order(db_session, unit, table, waiter, order_number, created_at=None):
    order = Order(
        business_unit_id=unit.id,
        order_number=order_number,
        table_id=table.id,
        waiter_id=waiter.id,
        status="PENDING",
        total_amount=Decimal("0.00"),
        final_amount=Decimal("0.00"),
        created_at=created_at or utcnow(),
    )
    db_session.add(order)
    db_session.commit()
    return order


class ScriptedSequencer(OrderNumberSequencer):
    """Returns pre-set numbers instead of reading the latest order."""

    def __init__(self, db, numbers):
        super().__init__(db)
        self._numbers = list(numbers)
        self.calls = 0

    def next_number(self, business_unit_id, code=None):
        self.calls += 1
        if len(self._numbers) > 1:
            return self._numbers.pop(0)
        return self._numbers[0]


class TestParseSequence:
    """Tests for suffix parsing."""

    @pytest.mark.parametrize(
        "order_number,expected",
        [
            ("REST01-10001", 10001),
            ("REST01-7", 7),
            ("REST01-10A", None),
            ("REST01-", None),
            ("REST01-10001-ADD", None),
            ("OTHER-10001", None),
            ("REST01-１２", None),  # full-width digits are not ASCII
        ],
    )
    def test_parse_sequence(self, order_number, expected):
        assert parse_sequence(order_number, "REST01") == expected

    def test_code_containing_separator(self):
        """Codes with dashes are handled by stripping the prefix, not splitting."""
        assert parse_sequence("MAIN-ST-10042", "MAIN-ST") == 10042


class TestOrderNumberSequencer:
    """Tests for OrderNumberSequencer."""

    def test_first_number_is_base(self, db_session, seed_business_unit):
        """A business unit without orders starts at 10001."""
        sequencer = OrderNumberSequencer(db_session)

        assert sequencer.next_number(seed_business_unit.id) == "REST01-10001"

    def test_increments_latest(self, db_session, seed_business_unit, seed_table, seed_waiter):
        _existing_order(db_session, seed_business_unit, seed_table, seed_waiter, "REST01-10041")
        sequencer = OrderNumberSequencer(db_session)

        assert sequencer.next_number(seed_business_unit.id) == "REST01-10042"

    def test_latest_is_by_creation_time_not_text(
        self, db_session, seed_business_unit, seed_table, seed_waiter
    ):
        """REST01-9999 sorts after REST01-10000 as text; creation time decides."""
        now = utcnow()
        _existing_order(
            db_session, seed_business_unit, seed_table, seed_waiter,
            "REST01-9999", created_at=now - timedelta(minutes=5),
        )
        _existing_order(
            db_session, seed_business_unit, seed_table, seed_waiter,
            "REST01-10000", created_at=now,
        )
        sequencer = OrderNumberSequencer(db_session)

        assert sequencer.next_number(seed_business_unit.id) == "REST01-10001"

    def test_business_units_are_independent(
        self, db_session, seed_business_unit, other_business_unit, seed_table, seed_waiter
    ):
        _existing_order(db_session, seed_business_unit, seed_table, seed_waiter, "REST01-10005")
        sequencer = OrderNumberSequencer(db_session)

        assert sequencer.next_number(other_business_unit.id) == "REST02-10001"

    def test_custom_start(self, db_session, seed_business_unit):
        sequencer = OrderNumberSequencer(db_session, start=500)

        assert sequencer.next_number(seed_business_unit.id) == "REST01-500"

    def test_malformed_suffix_raises_in_strict_mode(
        self, db_session, seed_business_unit, seed_table, seed_waiter
    ):
        _existing_order(db_session, seed_business_unit, seed_table, seed_waiter, "REST01-10A")
        sequencer = OrderNumberSequencer(db_session, strict_suffix=True)

        with pytest.raises(MalformedOrderNumberError):
            sequencer.next_number(seed_business_unit.id)

    def test_malformed_suffix_restarts_when_lenient(
        self, db_session, seed_business_unit, seed_table, seed_waiter
    ):
        _existing_order(db_session, seed_business_unit, seed_table, seed_waiter, "REST01-10A")
        sequencer = OrderNumberSequencer(db_session, strict_suffix=False)

        assert sequencer.next_number(seed_business_unit.id) == "REST01-10001"

    def test_unknown_business_unit(self, db_session):
        sequencer = OrderNumberSequencer(db_session)

        with pytest.raises(BusinessUnitNotFoundError):
            sequencer.next_number("does-not-exist")


class TestOrderNumberRetry:
    """Tests for the collision retry loop in OrderService.create_order."""

    def test_sequential_creations(
        self, db_session, seed_business_unit, caller, menu_item_a, make_order_input
    ):
        """First order is REST01-10001, second REST01-10002."""
        service = OrderService(db_session)

        first, _ = service.create_order(
            seed_business_unit.id, make_order_input((menu_item_a, 1)), caller, is_draft=True
        )
        second, _ = service.create_order(
            seed_business_unit.id, make_order_input((menu_item_a, 1)), caller, is_draft=True
        )

        assert first.order_number == "REST01-10001"
        assert second.order_number == "REST01-10002"

    def test_collision_is_retried_with_jitter(
        self, db_session, seed_business_unit, seed_table, seed_waiter, caller,
        menu_item_a, make_order_input,
    ):
        """A taken number is retried once with a fresh number after a jittered sleep."""
        _existing_order(db_session, seed_business_unit, seed_table, seed_waiter, "REST01-10001")
        sleeps = []
        service = OrderService(
            db_session,
            sequencer=ScriptedSequencer(db_session, ["REST01-10001", "REST01-10002"]),
            sleep=sleeps.append,
            jitter=lambda low, high: (low + high) / 2,
        )

        order, _ = service.create_order(
            seed_business_unit.id, make_order_input((menu_item_a, 1)), caller, is_draft=True
        )

        assert order.order_number == "REST01-10002"
        assert sleeps == [pytest.approx(0.2)]

    def test_exhaustion_after_three_attempts(
        self, db_session, seed_business_unit, seed_table, seed_waiter, caller,
        menu_item_a, make_order_input,
    ):
        """Three collisions in a row fail with the exhaustion error and write nothing."""
        _existing_order(db_session, seed_business_unit, seed_table, seed_waiter, "REST01-10001")
        sequencer = ScriptedSequencer(db_session, ["REST01-10001"])
        sleeps = []
        service = OrderService(db_session, sequencer=sequencer, sleep=sleeps.append)

        with pytest.raises(OrderNumberExhaustedError) as exc_info:
            service.create_order(
                seed_business_unit.id, make_order_input((menu_item_a, 1)), caller, is_draft=True
            )

        assert str(exc_info.value) == (
            "Failed to generate unique order number after multiple attempts"
        )
        assert sequencer.calls == 3
        # No sleep after the final attempt
        assert len(sleeps) == 2
        assert all(0.1 <= delay <= 0.3 for delay in sleeps)
        assert db_session.query(Order).count() == 1

    def test_other_integrity_errors_are_not_retried(
        self, db_session, seed_business_unit, caller, menu_item_a, make_order_input,
        monkeypatch,
    ):
        """A uniqueness failure on another column propagates from the first attempt."""
        sequencer = ScriptedSequencer(db_session, ["REST01-10001"])
        sleeps = []
        service = OrderService(db_session, sequencer=sequencer, sleep=sleeps.append)

        def failing_flush(*args, **kwargs):
            raise IntegrityError(
                "INSERT INTO order_item ...",
                {},
                Exception("UNIQUE constraint failed: order_item.id"),
            )

        monkeypatch.setattr(db_session, "flush", failing_flush)

        with pytest.raises(IntegrityError):
            service.create_order(
                seed_business_unit.id, make_order_input((menu_item_a, 1)), caller, is_draft=True
            )

        assert sequencer.calls == 1
        assert sleeps == []
