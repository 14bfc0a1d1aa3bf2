"""Integration tests for reservation API endpoints."""

from __future__ import annotations

from datetime import date, time, timedelta
from decimal import Decimal
from unittest import mock

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import DateChange, Reservation
from apps.bookings.services import confirm_reservation
from apps.hotels.models import Hall, Hotel, Room
from apps.users.models import User


class ReservationAPITestBase(APITestCase):
    def setUp(self) -> None:
        self.hotel = Hotel.objects.create(name="HotelesCO Cartagena", city="Cartagena", check_in_time=time(15, 0))
        self.room = Room.objects.create(
            hotel=self.hotel,
            number="101",
            room_type="doble",
            nightly_price=Decimal("150000"),
            capacity=2,
        )
        self.hall = Hall.objects.create(
            hotel=self.hotel,
            name="Salón Caribe",
            capacity=100,
            daily_price=Decimal("900000"),
        )
        self.user = User.objects.create_user(
            email="cliente@example.com",
            password="ClientePass123",
            first_name="Andrés",
            last_name="Pérez",
        )
        self.guest = {
            "first_name": "Andrés",
            "last_name": "Pérez",
            "email": "andres@example.com",
            "phone": "+573101112233",
        }
        self.list_url = reverse("reservation-list")
        self.base_day = timezone.localdate() + timedelta(days=20)

    def _payload(self, check_in: date, check_out: date, **overrides) -> dict:
        payload = {
            "resource_type": "room",
            "resource": self.room.pk,
            "check_in": str(check_in),
            "check_out": str(check_out),
            "guests_count": 2,
            "guest": self.guest,
            "policies_accepted": True,
        }
        payload.update(overrides)
        return payload

    def _reserve(self, check_in: date, check_out: date, resource=None) -> Reservation:
        return confirm_reservation(
            resource or self.room,
            check_in,
            check_out,
            self.guest,
            user=self.user,
            guests_count=1,
        )


class ReservationCreateAPITests(ReservationAPITestBase):
    """Creación de reservas y detección de solapamientos."""

    def test_overlap_is_rejected_and_touching_range_is_accepted(self) -> None:
        day = self.base_day

        first = self.client.post(self.list_url, self._payload(day, day + timedelta(days=2)), format="json")
        self.assertEqual(first.status_code, status.HTTP_201_CREATED, first.data)
        self.assertTrue(first.data["code"].startswith("RES"))
        self.assertEqual(len(first.data["code"]), 11)

        overlap = self.client.post(
            self.list_url,
            self._payload(day + timedelta(days=1), day + timedelta(days=3)),
            format="json",
        )
        self.assertEqual(overlap.status_code, status.HTTP_409_CONFLICT, overlap.data)
        self.assertEqual(overlap.data["code"], "conflict")
        self.assertEqual(overlap.data["conflicts"][0]["code"], first.data["code"])

        touching = self.client.post(
            self.list_url,
            self._payload(day + timedelta(days=2), day + timedelta(days=4)),
            format="json",
        )
        self.assertEqual(touching.status_code, status.HTTP_201_CREATED, touching.data)
        self.assertEqual(Reservation.objects.count(), 2)

    def test_tariff_is_computed_with_tax(self) -> None:
        day = self.base_day
        response = self.client.post(self.list_url, self._payload(day, day + timedelta(days=2)), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        tariff = response.data["tariff"]
        self.assertEqual(Decimal(tariff["subtotal"]), Decimal("300000"))
        self.assertEqual(Decimal(tariff["tax"]), Decimal("57000"))
        self.assertEqual(Decimal(tariff["total"]), Decimal("357000"))
        self.assertEqual(tariff["currency"], "COP")

    def test_invalid_range_is_rejected(self) -> None:
        day = self.base_day
        response = self.client.post(self.list_url, self._payload(day, day), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["code"], "invalid_range")
        self.assertFalse(Reservation.objects.exists())

    def test_policies_must_be_accepted(self) -> None:
        day = self.base_day
        payload = self._payload(day, day + timedelta(days=1), policies_accepted=False)
        response = self.client.post(self.list_url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["code"], "policies_not_accepted")

    def test_unknown_resource_returns_404(self) -> None:
        day = self.base_day
        payload = self._payload(day, day + timedelta(days=1), resource=999999)
        response = self.client.post(self.list_url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND, response.data)

    def test_authenticated_reservation_is_listed_for_its_owner(self) -> None:
        self.client.force_authenticate(self.user)
        day = self.base_day
        created = self.client.post(self.list_url, self._payload(day, day + timedelta(days=1)), format="json")
        self.assertEqual(created.status_code, status.HTTP_201_CREATED, created.data)

        stranger = User.objects.create_user(email="otro@example.com", password="OtroPass123")
        confirm_reservation(self.room, day + timedelta(days=5), day + timedelta(days=6), self.guest, user=stranger)

        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item["code"] for item in response.data], [created.data["code"]])

    def test_hall_reservation_with_event_hours(self) -> None:
        day = self.base_day
        payload = self._payload(
            day,
            day + timedelta(days=1),
            resource_type="hall",
            resource=self.hall.pk,
            guests_count=60,
            event={"name": "Lanzamiento", "type": "corporativo", "start_time": "09:00", "end_time": "13:00"},
        )
        response = self.client.post(self.list_url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["resource_type"], "hall")
        self.assertEqual(response.data["event"]["name"], "Lanzamiento")
        self.assertEqual(Decimal(response.data["tariff"]["total"]), Decimal("1071000"))


class AvailabilityAPITests(ReservationAPITestBase):
    def test_reports_conflicts_for_occupied_range(self) -> None:
        day = self.base_day
        booked = self._reserve(day, day + timedelta(days=3))
        url = reverse("availability")

        busy = self.client.get(
            url,
            {"resource_type": "room", "resource": self.room.pk, "start": day + timedelta(days=1), "end": day + timedelta(days=2)},
        )
        self.assertEqual(busy.status_code, status.HTTP_200_OK, busy.data)
        self.assertFalse(busy.data["available"])
        self.assertEqual(busy.data["conflicts"][0]["code"], booked.code)

        free = self.client.get(
            url,
            {"resource_type": "room", "resource": self.room.pk, "start": day + timedelta(days=3), "end": day + timedelta(days=5)},
        )
        self.assertEqual(free.status_code, status.HTTP_200_OK, free.data)
        self.assertTrue(free.data["available"])
        self.assertEqual(free.data["conflicts"], [])

    def test_cancelled_reservation_frees_the_range(self) -> None:
        day = self.base_day
        booked = self._reserve(day, day + timedelta(days=2))
        Reservation.objects.filter(pk=booked.pk).update(state=Reservation.State.CANCELLED)

        response = self.client.get(
            reverse("availability"),
            {"resource_type": "room", "resource": self.room.pk, "start": day, "end": day + timedelta(days=2)},
        )
        self.assertTrue(response.data["available"])


class ReservationCancellationAPITests(ReservationAPITestBase):
    """Cancelación con política por horas antes del check-in."""

    def setUp(self) -> None:
        super().setUp()
        self.client.force_authenticate(self.user)
        self.reservation = self._reserve(self.base_day, self.base_day + timedelta(days=2))
        self.cancel_url = reverse("reservation-cancel", args=[self.reservation.pk])

    def _hours_before_checkin(self, hours: int):
        return self.reservation.checkin_at - timedelta(hours=hours)

    def test_partial_penalty_requires_acknowledgement(self) -> None:
        self.assertEqual(self.reservation.total, Decimal("357000"))

        with mock.patch("django.utils.timezone.now", return_value=self._hours_before_checkin(30)):
            refused = self.client.put(self.cancel_url, {"reason": "Cambio de planes"}, format="json")
            self.assertEqual(refused.status_code, status.HTTP_400_BAD_REQUEST, refused.data)
            self.assertEqual(refused.data["code"], "acknowledgement_required")
            self.assertTrue(refused.data["requires_acknowledgement"])
            self.assertEqual(Decimal(refused.data["penalty"]), Decimal("178500"))
            self.assertEqual(Decimal(refused.data["refund"]), Decimal("178500"))

            accepted = self.client.put(
                self.cancel_url,
                {"reason": "Cambio de planes", "acknowledge_penalty": True},
                format="json",
            )

        self.assertEqual(accepted.status_code, status.HTTP_200_OK, accepted.data)
        self.assertEqual(accepted.data["state"], Reservation.State.CANCELLED)
        self.assertEqual(Decimal(accepted.data["penalty"]), Decimal("178500"))
        self.assertEqual(Decimal(accepted.data["refund"]), Decimal("178500"))
        self.assertEqual(accepted.data["penalty_percent"], 50)

        self.reservation.refresh_from_db()
        self.assertEqual(self.reservation.state, Reservation.State.CANCELLED)
        self.assertEqual(self.reservation.penalty_amount, Decimal("178500"))
        self.assertEqual(self.reservation.cancellation_reason, "Cambio de planes")
        self.assertEqual(self.reservation.cancelled_by, self.user)
        self.assertFalse(self.reservation.within_free_window)
        self.assertEqual(self.reservation.version, 2)

    def test_free_cancellation_needs_no_acknowledgement(self) -> None:
        with mock.patch("django.utils.timezone.now", return_value=self._hours_before_checkin(72)):
            response = self.client.put(self.cancel_url, {}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(Decimal(response.data["penalty"]), Decimal("0"))
        self.assertEqual(Decimal(response.data["refund"]), Decimal("357000"))
        self.assertTrue(response.data["within_free_window"])

    def test_cancelling_twice_is_rejected(self) -> None:
        first = self.client.put(self.cancel_url, {}, format="json")
        self.assertEqual(first.status_code, status.HTTP_200_OK, first.data)

        second = self.client.put(self.cancel_url, {}, format="json")
        self.assertEqual(second.status_code, status.HTTP_400_BAD_REQUEST, second.data)
        self.assertEqual(second.data["code"], "already_cancelled")

    def test_policy_endpoint_quotes_without_writing(self) -> None:
        url = reverse("reservation-cancellation-policy", args=[self.reservation.pk])
        with mock.patch("django.utils.timezone.now", return_value=self._hours_before_checkin(10)):
            response = self.client.get(url)

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["penalty_percent"], 100)
        self.assertTrue(response.data["requires_acknowledgement"])
        self.reservation.refresh_from_db()
        self.assertEqual(self.reservation.state, Reservation.State.CONFIRMED)

    def test_other_users_cannot_cancel(self) -> None:
        intruder = User.objects.create_user(email="intruso@example.com", password="IntrusoPass123")
        self.client.force_authenticate(intruder)

        response = self.client.put(self.cancel_url, {}, format="json")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND, response.data)


class ReservationModificationAPITests(ReservationAPITestBase):
    """Cambio de fechas con recálculo de tarifa."""

    def setUp(self) -> None:
        super().setUp()
        self.client.force_authenticate(self.user)
        self.reservation = self._reserve(self.base_day, self.base_day + timedelta(days=2))
        self.dates_url = reverse("reservation-dates", args=[self.reservation.pk])

    def test_moving_dates_recomputes_total_and_records_history(self) -> None:
        new_start = self.base_day + timedelta(days=5)
        response = self.client.put(
            self.dates_url,
            {"new_start": str(new_start), "new_end": str(new_start + timedelta(days=3))},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(Decimal(response.data["tariff"]["total"]), Decimal("535500"))
        self.assertEqual(Decimal(response.data["price_difference"]), Decimal("178500"))
        self.assertEqual(response.data["version"], 2)
        change = DateChange.objects.get(reservation=self.reservation)
        self.assertEqual(change.previous_check_in, self.base_day)
        self.assertEqual(change.new_check_in, new_start)

    def test_overlapping_new_dates_are_rejected(self) -> None:
        other = self._reserve(self.base_day + timedelta(days=5), self.base_day + timedelta(days=7))

        response = self.client.put(
            self.dates_url,
            {"new_start": str(self.base_day + timedelta(days=4)), "new_end": str(self.base_day + timedelta(days=6))},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT, response.data)
        self.assertEqual(response.data["conflicts"][0]["code"], other.code)
        self.reservation.refresh_from_db()
        self.assertEqual(self.reservation.check_in, self.base_day)

    def test_extending_over_own_range_is_allowed(self) -> None:
        response = self.client.put(
            self.dates_url,
            {"new_start": str(self.base_day), "new_end": str(self.base_day + timedelta(days=4))},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)

    def test_changes_close_to_checkin_are_rejected(self) -> None:
        url = reverse("reservation-modification-policy", args=[self.reservation.pk])
        with mock.patch("django.utils.timezone.now", return_value=self.reservation.checkin_at - timedelta(hours=10)):
            policy = self.client.get(url)
            response = self.client.put(
                self.dates_url,
                {"new_start": str(self.base_day + timedelta(days=1)), "new_end": str(self.base_day + timedelta(days=3))},
                format="json",
            )

        self.assertFalse(policy.data["allowed"])
        self.assertEqual(policy.data["reason"], "too_late")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["code"], "too_late")


class ReservationLookupAPITests(ReservationAPITestBase):
    def test_guest_can_look_up_by_code_with_email(self) -> None:
        reservation = self._reserve(self.base_day, self.base_day + timedelta(days=1))
        url = reverse("reservation-by-code", kwargs={"code": reservation.code.lower()})

        found = self.client.get(url, {"email": "ANDRES@example.com"})
        self.assertEqual(found.status_code, status.HTTP_200_OK, found.data)
        self.assertEqual(found.data["code"], reservation.code)

        hidden = self.client.get(url, {"email": "otra@example.com"})
        self.assertEqual(hidden.status_code, status.HTTP_404_NOT_FOUND)

    def test_hotel_admin_sees_only_own_hotel(self) -> None:
        other_hotel = Hotel.objects.create(name="HotelesCO Medellín", city="Medellín")
        other_room = Room.objects.create(hotel=other_hotel, number="201", room_type="suite")
        mine = self._reserve(self.base_day, self.base_day + timedelta(days=1))
        self._reserve(self.base_day, self.base_day + timedelta(days=1), resource=other_room)
        admin = User.objects.create_user(
            email="admin.cartagena@hotelesco.co",
            password="AdminPass123",
            role=User.RoleChoices.HOTEL_ADMIN,
            hotel=self.hotel,
        )
        self.client.force_authenticate(admin)

        response = self.client.get(self.list_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item["code"] for item in response.data], [mine.code])
