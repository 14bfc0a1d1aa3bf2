"""Tests for the availability resolver and the reservation services."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from decimal import Decimal
from unittest import mock

import pytest
from django.utils import timezone

from apps.bookings import codes
from apps.bookings.availability import AvailabilityResult, busy_resource_ids, free_room_types, is_available
from apps.bookings.domain.cancellation import TIER_FREE, TIER_FULL, TIER_PARTIAL, evaluate_cancellation
from apps.bookings.exceptions import (
    CancellationAcknowledgementRequired,
    ReservationConflictError,
    ReservationValidationError,
)
from apps.bookings.models import Reservation
from apps.bookings.services import (
    GuestInfo,
    can_modify,
    cancel_reservation,
    confirm_reservation,
    modify_dates,
)
from shared.domain.value_objects import DateRange

pytestmark = pytest.mark.django_db


CHECKIN_AT = timezone.make_aware(datetime(2031, 3, 10, 15, 0))


@pytest.mark.parametrize(
    "hours_before, tier, percent",
    [
        (Decimal("48"), TIER_FREE, 0),
        (Decimal("47.99"), TIER_PARTIAL, 50),
        (Decimal("24"), TIER_PARTIAL, 50),
        (Decimal("23.99"), TIER_FULL, 100),
        (Decimal("0"), TIER_FULL, 100),
    ],
)
def test_cancellation_tier_boundaries(hours_before, tier, percent):
    now = CHECKIN_AT - timedelta(seconds=float(hours_before * 3600))

    quote = evaluate_cancellation("confirmed", CHECKIN_AT, Decimal("357000"), now)

    assert quote.allowed
    assert quote.tier == tier
    assert quote.penalty_percent == percent
    assert quote.penalty_amount + quote.refund_amount == Decimal("357000")


def test_cancellation_denied_after_checkin_and_for_closed_states():
    after = evaluate_cancellation("confirmed", CHECKIN_AT, Decimal("100000"), CHECKIN_AT + timedelta(minutes=1))
    cancelled = evaluate_cancellation("cancelled", CHECKIN_AT, Decimal("100000"), CHECKIN_AT - timedelta(days=5))
    completed = evaluate_cancellation("completed", CHECKIN_AT, Decimal("100000"), CHECKIN_AT - timedelta(days=5))

    assert (after.allowed, after.reason) == (False, "checkin_passed")
    assert (cancelled.allowed, cancelled.reason) == (False, "already_cancelled")
    assert (completed.allowed, completed.reason) == (False, "completed")


def test_penalty_is_rounded_to_whole_pesos():
    now = CHECKIN_AT - timedelta(hours=30)

    quote = evaluate_cancellation("confirmed", CHECKIN_AT, Decimal("100001"), now)

    assert quote.penalty_amount == Decimal("50001")
    assert quote.refund_amount == Decimal("50000")


def test_half_open_ranges_do_not_clash(room, guest_data, future_start):
    confirm_reservation(room, future_start, future_start + timedelta(days=2), guest_data)

    assert is_available(room, future_start + timedelta(days=2), future_start + timedelta(days=4)).available
    assert is_available(room, future_start - timedelta(days=2), future_start).available
    assert not is_available(room, future_start + timedelta(days=1), future_start + timedelta(days=2)).available
    assert not is_available(room, future_start - timedelta(days=1), future_start + timedelta(days=5)).available


def test_pending_reservations_block_and_cancelled_do_not(room, guest_data, future_start):
    pending = confirm_reservation(
        room, future_start, future_start + timedelta(days=1), guest_data, state=Reservation.State.PENDING
    )
    assert not is_available(room, future_start, future_start + timedelta(days=1)).available

    Reservation.objects.filter(pk=pending.pk).update(state=Reservation.State.CANCELLED)
    assert is_available(room, future_start, future_start + timedelta(days=1)).available


def test_write_time_check_rejects_a_stale_availability_read(room, guest_data, future_start):
    first = confirm_reservation(room, future_start, future_start + timedelta(days=3), guest_data)

    stale = AvailabilityResult(available=True, conflicts=[])
    with mock.patch("apps.bookings.services.is_available", return_value=stale):
        with pytest.raises(ReservationConflictError) as excinfo:
            confirm_reservation(room, future_start + timedelta(days=1), future_start + timedelta(days=2), guest_data)

    assert [c.pk for c in excinfo.value.conflicts] == [first.pk]
    assert Reservation.objects.count() == 1


def test_guest_data_is_required(room, future_start):
    with pytest.raises(ReservationValidationError) as excinfo:
        confirm_reservation(room, future_start, future_start + timedelta(days=1), {"first_name": "Ana"})

    assert excinfo.value.code == "missing_guest_data"
    assert set(excinfo.value.extra["missing"]) == {"last_name", "email", "phone"}


def test_capacity_is_enforced(room, guest_data, future_start):
    with pytest.raises(ReservationValidationError) as excinfo:
        confirm_reservation(room, future_start, future_start + timedelta(days=1), guest_data, guests_count=5)

    assert excinfo.value.code == "capacity_exceeded"


def test_reservation_code_collision_is_retried(room, guest_data, future_start):
    existing = confirm_reservation(room, future_start, future_start + timedelta(days=1), guest_data)
    generated = iter([existing.code, "RESZZZZ9999"])

    with mock.patch.object(codes, "generate_reservation_code", side_effect=lambda: next(generated)):
        second = confirm_reservation(room, future_start + timedelta(days=1), future_start + timedelta(days=2), guest_data)

    assert second.code == "RESZZZZ9999"


def test_package_codes_follow_a_daily_sequence():
    day = date(2031, 5, 4)

    assert codes.next_package_code(day) == "PKG310504001"
    assert codes.next_package_code(day) == "PKG310504002"
    assert codes.next_package_code(day + timedelta(days=1)) == "PKG310505001"


def test_modify_dates_loses_against_a_concurrent_cancellation(room, guest_data, future_start):
    reservation = confirm_reservation(room, future_start, future_start + timedelta(days=2), guest_data)
    stale_copy = Reservation.objects.get(pk=reservation.pk)

    cancel_reservation(reservation, reason="Cancelada por el huésped")

    with pytest.raises(ReservationConflictError) as excinfo:
        modify_dates(stale_copy, future_start + timedelta(days=3), future_start + timedelta(days=5))

    assert excinfo.value.code == "stale_reservation"
    stale_copy.refresh_from_db()
    assert stale_copy.state == Reservation.State.CANCELLED
    assert stale_copy.check_in == future_start


def test_modify_dates_rejects_past_and_unchanged_dates(room, guest_data, future_start):
    reservation = confirm_reservation(room, future_start, future_start + timedelta(days=2), guest_data)
    today = timezone.localdate()

    with pytest.raises(ReservationValidationError) as past:
        modify_dates(reservation, today - timedelta(days=1), today + timedelta(days=1))
    with pytest.raises(ReservationValidationError) as same:
        modify_dates(reservation, future_start, future_start + timedelta(days=2))

    assert past.value.code == "start_in_past"
    assert same.value.code == "same_dates"


def test_package_members_cannot_be_modified(room, guest_data, future_start):
    reservation = confirm_reservation(
        room, future_start, future_start + timedelta(days=1), guest_data, package_code="PKG310101001"
    )

    check = can_modify(reservation)

    assert not check.allowed
    assert check.reason == "package_member"


def test_penalised_cancellation_requires_acknowledgement(room, guest_data, future_start):
    reservation = confirm_reservation(room, future_start, future_start + timedelta(days=1), guest_data)
    now = reservation.checkin_at - timedelta(hours=5)

    with pytest.raises(CancellationAcknowledgementRequired) as excinfo:
        cancel_reservation(reservation, now=now)
    assert excinfo.value.extra["penalty"] == reservation.total

    quote = cancel_reservation(reservation, acknowledge_penalty=True, now=now)
    reservation.refresh_from_db()
    assert quote.refund_amount == Decimal("0")
    assert reservation.state == Reservation.State.CANCELLED
    assert reservation.penalty_percent == 100


def test_free_room_types_group_only_free_rooms(make_room, hotel, guest_data, future_start):
    first = make_room("201", "doble")
    make_room("202", "doble")
    make_room("301", "suite", price="350000", capacity=4)
    confirm_reservation(first, future_start, future_start + timedelta(days=2), guest_data)

    grouped = free_room_types(hotel, future_start, future_start + timedelta(days=1))

    assert list(grouped) == ["doble", "suite"]
    assert grouped["doble"]["available"] == 1
    assert grouped["suite"]["nightly_price"] == Decimal("350000")
    assert busy_resource_ids("room", [first.pk], future_start, future_start + timedelta(days=1)) == {first.pk}


def test_guest_info_maps_to_model_fields(guest_data):
    fields = GuestInfo.from_mapping(guest_data).as_fields()

    assert fields["guest_email"] == "laura@example.com"
    assert fields["guest_country"] == "Colombia"


def test_availability_reads_are_repeatable(room, guest_data, future_start):
    later = confirm_reservation(room, future_start + timedelta(days=4), future_start + timedelta(days=6), guest_data)
    earlier = confirm_reservation(room, future_start, future_start + timedelta(days=2), guest_data)

    first = is_available(room, future_start, future_start + timedelta(days=10))
    second = is_available(room, future_start, future_start + timedelta(days=10))

    assert first.available is second.available is False
    assert [c.pk for c in first.conflicts] == [c.pk for c in second.conflicts] == [earlier.pk, later.pk]


def test_active_reservations_never_overlap_after_mixed_writes(make_room, guest_data, future_start):
    rooms = [make_room("501"), make_room("502")]

    def day(n: int):
        return future_start + timedelta(days=n)

    attempts = [(0, 0, 3), (0, 2, 4), (0, 3, 5), (1, 0, 2), (1, 1, 3), (0, 4, 6), (1, 2, 5)]
    created = []
    for index, start, end in attempts:
        try:
            created.append(confirm_reservation(rooms[index], day(start), day(end), guest_data))
        except ReservationConflictError:
            pass
    for reservation, (start, end) in zip(created, [(5, 7), (6, 9), (2, 6), (0, 1)]):
        try:
            modify_dates(reservation, day(start), day(end))
        except (ReservationConflictError, ReservationValidationError):
            pass
    cancel_reservation(created[0], acknowledge_penalty=True)
    try:
        confirm_reservation(rooms[0], day(0), day(3), guest_data)
    except ReservationConflictError:
        pass

    for room in rooms:
        active = list(Reservation.objects.filter(room=room, state__in=Reservation.ACTIVE_STATES))
        ranges = [DateRange(r.check_in, r.check_out) for r in active]
        for i, current in enumerate(ranges):
            assert not any(current.overlaps_with(other) for other in ranges[i + 1:]), active
    assert Reservation.objects.filter(state=Reservation.State.CONFIRMED).count() >= 3
