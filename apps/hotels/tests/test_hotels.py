"""Tests for the hotel catalog."""

from __future__ import annotations

from decimal import Decimal

import pytest
from django.db import IntegrityError

from apps.bookings.availability import get_resource
from apps.bookings.exceptions import ResourceNotFoundError, ReservationValidationError
from apps.hotels.models import Room

pytestmark = pytest.mark.django_db


def test_room_numbers_are_unique_per_hotel(make_room):
    make_room("101")

    with pytest.raises(IntegrityError):
        make_room("101")


def test_inactive_units_are_not_bookable(hotel, make_room):
    room = make_room("102", is_active=False)

    with pytest.raises(ResourceNotFoundError):
        get_resource("room", room.pk)


def test_closed_hotel_hides_its_halls(hotel, hall):
    hotel.is_active = False
    hotel.save(update_fields=["is_active"])

    with pytest.raises(ResourceNotFoundError):
        get_resource("hall", hall.pk)


def test_unknown_resource_type_is_rejected(room):
    with pytest.raises(ReservationValidationError):
        get_resource("suite", room.pk)


def test_room_defaults(hotel):
    room = Room.objects.create(hotel=hotel, number="501", room_type="estandar")

    assert room.capacity == 2
    assert room.nightly_price == Decimal("100000.00")
    assert str(room).startswith("Habitación 501")
