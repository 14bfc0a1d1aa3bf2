"""Shared pytest fixtures for the HotelesCO booking engine."""

from __future__ import annotations

from datetime import time, timedelta
from decimal import Decimal

import pytest
from django.utils import timezone
from rest_framework.test import APIClient


@pytest.fixture
def api_client() -> APIClient:
    """Unauthenticated DRF test client."""
    return APIClient()


@pytest.fixture
def hotel(db):
    from apps.hotels.models import Hotel

    return Hotel.objects.create(
        name="HotelesCO Bogotá Centro",
        city="Bogotá",
        address="Carrera 7 # 26-20",
        check_in_time=time(15, 0),
    )


@pytest.fixture
def make_room(hotel):
    """Factory creating rooms in the default hotel."""

    def _make_room(number: str, room_type: str = "doble", price: str = "150000", capacity: int = 2, **extra):
        from apps.hotels.models import Room

        return Room.objects.create(
            hotel=extra.pop("hotel", hotel),
            number=number,
            room_type=room_type,
            nightly_price=Decimal(price),
            capacity=capacity,
            **extra,
        )

    return _make_room


@pytest.fixture
def room(make_room):
    return make_room("101")


@pytest.fixture
def hall(hotel):
    from apps.hotels.models import Hall

    return Hall.objects.create(
        hotel=hotel,
        name="Salón Andino",
        capacity=80,
        daily_price=Decimal("800000"),
    )


@pytest.fixture
def client_user(db):
    from apps.users.models import User

    return User.objects.create_user(
        email="cliente@example.com",
        password="ClientePass123",
        first_name="Laura",
        last_name="Gómez",
    )


@pytest.fixture
def company_user(db):
    from apps.users.models import User

    return User.objects.create_user(
        email="eventos@empresa.co",
        password="EmpresaPass123",
        role=User.RoleChoices.COMPANY,
        company_name="Andes Consultores SAS",
    )


@pytest.fixture
def guest_data() -> dict[str, str]:
    return {
        "first_name": "Laura",
        "last_name": "Gómez",
        "email": "laura@example.com",
        "phone": "+573001234567",
    }


@pytest.fixture
def future_start():
    """A check-in date comfortably outside every policy window."""
    return timezone.localdate() + timedelta(days=30)
