"""Message bus handlers turning reservation events into notices."""

from __future__ import annotations

import logging

from apps.bookings.domain.events import (
    ReservationApproved,
    ReservationCancelled,
    ReservationConfirmed,
    ReservationDatesModified,
)
from apps.bookings.models import Reservation
from apps.packages.domain.events import PackageConfirmed
from shared.application.message_bus import message_bus

from .models import NotificationDispatch
from .services import schedule_notification

logger = logging.getLogger(__name__)


def _load(reservation_id: int) -> Reservation | None:
    reservation = Reservation.objects.select_related("hotel").filter(pk=reservation_id).first()
    if reservation is None:
        logger.warning(f"Reservation {reservation_id} vanished before its notification")
    return reservation


def on_reservation_confirmed(event: ReservationConfirmed) -> None:
    reservation = _load(event.reservation_id)
    # Package members are announced once, by the package notice
    if reservation is None or reservation.package_code:
        return
    if reservation.state == Reservation.State.PENDING:
        return
    schedule_notification(reservation, NotificationDispatch.Kind.CONFIRMATION)


def on_reservation_approved(event: ReservationApproved) -> None:
    reservation = _load(event.reservation_id)
    if reservation is None:
        return
    if reservation.kind == Reservation.Kind.PACKAGE:
        schedule_notification(reservation, NotificationDispatch.Kind.PACKAGE_CONFIRMATION)
    else:
        schedule_notification(reservation, NotificationDispatch.Kind.CONFIRMATION)


def on_reservation_cancelled(event: ReservationCancelled) -> None:
    reservation = _load(event.reservation_id)
    if reservation is None:
        return
    schedule_notification(reservation, NotificationDispatch.Kind.CANCELLATION)


def on_reservation_dates_modified(event: ReservationDatesModified) -> None:
    reservation = _load(event.reservation_id)
    if reservation is None:
        return
    schedule_notification(reservation, NotificationDispatch.Kind.MODIFICATION)


def on_package_confirmed(event: PackageConfirmed) -> None:
    reservation = _load(event.parent_reservation_id)
    if reservation is None:
        return
    schedule_notification(reservation, NotificationDispatch.Kind.PACKAGE_CONFIRMATION)


def register_handlers() -> None:
    message_bus.register_event_handler(ReservationConfirmed, on_reservation_confirmed)
    message_bus.register_event_handler(ReservationApproved, on_reservation_approved)
    message_bus.register_event_handler(ReservationCancelled, on_reservation_cancelled)
    message_bus.register_event_handler(ReservationDatesModified, on_reservation_dates_modified)
    message_bus.register_event_handler(PackageConfirmed, on_package_confirmed)
