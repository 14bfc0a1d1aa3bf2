"""Concurrent writers against the write-time availability re-check."""

from __future__ import annotations

import threading
from datetime import time, timedelta
from decimal import Decimal
from unittest import skipUnless

from django.db import connection, connections
from django.test import TransactionTestCase
from django.utils import timezone

from apps.bookings.exceptions import ReservationConflictError
from apps.bookings.models import Reservation
from apps.bookings.services import confirm_reservation
from apps.hotels.models import Hotel, Room


@skipUnless(connection.vendor == "postgresql", "row locks need PostgreSQL")
class ConcurrentConfirmationTests(TransactionTestCase):
    """Two writers racing for the same room and dates."""

    def setUp(self) -> None:
        self.hotel = Hotel.objects.create(name="HotelesCO Medellín", city="Medellín", check_in_time=time(15, 0))
        self.room = Room.objects.create(
            hotel=self.hotel, number="701", room_type="doble", nightly_price=Decimal("150000"), capacity=2
        )
        self.start = timezone.localdate() + timedelta(days=40)
        self.guest = {"first_name": "Ana", "last_name": "Ríos", "email": "ana@example.com", "phone": "+573001112233"}

    def test_exactly_one_writer_wins(self):
        barrier = threading.Barrier(2)
        outcomes: list[object] = []
        lock = threading.Lock()

        def book():
            result: object = None
            try:
                barrier.wait()
                result = confirm_reservation(
                    self.room, self.start, self.start + timedelta(days=2), self.guest
                )
            except ReservationConflictError as exc:
                result = exc
            finally:
                connections.close_all()
            with lock:
                outcomes.append(result)

        threads = [threading.Thread(target=book) for _ in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        winners = [o for o in outcomes if isinstance(o, Reservation)]
        losers = [o for o in outcomes if isinstance(o, ReservationConflictError)]
        self.assertEqual(len(winners), 1)
        self.assertEqual(len(losers), 1)
        self.assertEqual(
            Reservation.objects.filter(room=self.room, state=Reservation.State.CONFIRMED).count(), 1
        )
