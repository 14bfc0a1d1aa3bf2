"""Tests for shared value objects, the message bus and the exception handler."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from decimal import Decimal

import pytest
from rest_framework.exceptions import NotFound

from shared.application.message_bus import MessageBus
from shared.domain.base import DomainEvent
from shared.domain.exceptions import DomainError
from shared.domain.value_objects import DateRange, Money, TimeRange, round_pesos
from shared.infrastructure.exception_handler import engine_exception_handler


@dataclass
class SomethingHappened(DomainEvent):
    value: int


def test_round_pesos_rounds_half_up():
    assert round_pesos(Decimal("178500.5")) == Decimal("178501")
    assert round_pesos("0.49") == Decimal("0")


def test_money_rejects_other_currencies_and_negatives():
    with pytest.raises(ValueError):
        Money(Decimal("10"), "USD")
    with pytest.raises(ValueError):
        Money(Decimal("-1"))
    assert Money(Decimal("357000")).percent(50) == Money(Decimal("178500"))


def test_date_ranges_are_half_open():
    stay = DateRange(date(2031, 1, 10), date(2031, 1, 12))

    assert stay.overlaps_with(DateRange(date(2031, 1, 11), date(2031, 1, 13)))
    assert not stay.overlaps_with(DateRange(date(2031, 1, 12), date(2031, 1, 14)))
    assert stay.nights == 2
    with pytest.raises(ValueError):
        DateRange(date(2031, 1, 12), date(2031, 1, 12))


def test_time_ranges_overlap():
    morning = TimeRange(time(8, 0), time(12, 0))

    assert morning.overlaps_with(TimeRange(time(11, 0), time(14, 0)))
    assert not morning.overlaps_with(TimeRange(time(12, 0), time(14, 0)))


def test_message_bus_isolates_failing_handlers():
    bus = MessageBus()
    received = []

    def broken(event):
        raise RuntimeError("boom")

    bus.register_event_handler(SomethingHappened, broken)
    bus.register_event_handler(SomethingHappened, received.append)
    bus.register_event_handler(SomethingHappened, received.append)

    bus.publish_events([SomethingHappened(value=7)])

    assert [event.value for event in received] == [7]
    assert len(bus.handlers_for(SomethingHappened)) == 2


def test_exception_handler_maps_domain_errors():
    class Conflict(DomainError):
        status_code = 409
        default_code = "conflict"

    response = engine_exception_handler(Conflict("ocupado", extra={"conflicts": []}), {})

    assert response.status_code == 409
    assert response.data == {"detail": "ocupado", "code": "conflict", "conflicts": []}


def test_exception_handler_keeps_drf_errors_and_hides_unexpected_ones():
    assert engine_exception_handler(NotFound(), {}).status_code == 404

    response = engine_exception_handler(RuntimeError("db exploded"), {})

    assert response.status_code == 500
    assert response.data["code"] == "internal_error"
    assert "db exploded" not in response.data["detail"]
