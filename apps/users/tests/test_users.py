"""Tests for user roles, permissions and token issuance."""

from __future__ import annotations

import pytest
from django.urls import reverse

from apps.users.models import User
from apps.users.permissions import is_chain_staff

pytestmark = pytest.mark.django_db


def test_create_user_defaults_to_client_role():
    user = User.objects.create_user(email="Nuevo@Example.com", password="NuevoPass123", phone="+57 300-123-4567")

    assert user.role == User.RoleChoices.CLIENT
    assert user.email == "Nuevo@example.com"
    assert user.phone == "+573001234567"
    assert not is_chain_staff(user)


def test_superuser_is_central_admin():
    admin = User.objects.create_superuser(email="root@hotelesco.co", password="RootPass123")

    assert admin.role == User.RoleChoices.CENTRAL_ADMIN
    assert admin.is_central_admin()
    assert is_chain_staff(admin)


def test_hotel_admin_manages_only_its_hotel(hotel):
    from apps.hotels.models import Hotel

    other = Hotel.objects.create(name="HotelesCO Cali", city="Cali")
    admin = User.objects.create_user(
        email="admin@hotelesco.co",
        password="AdminPass123",
        role=User.RoleChoices.HOTEL_ADMIN,
        hotel=hotel,
    )

    assert admin.manages_hotel(hotel.pk)
    assert not admin.manages_hotel(other.pk)


def test_token_obtain_with_email(api_client, client_user):
    response = api_client.post(
        reverse("auth:token_obtain"),
        {"email": "cliente@example.com", "password": "ClientePass123"},
        format="json",
    )

    assert response.status_code == 200, response.data
    assert "access" in response.data and "refresh" in response.data
