"""Domain services for booking workflows.

``confirm_reservation`` is the only path that inserts reservations. It runs
the availability check, then repeats it at write time inside a transaction
holding a row lock on the resource, so of two concurrent requests for the
same resource exactly one inserts and the other gets a conflict.

Date changes and cancellations write with a compare-and-swap on
``Reservation.version``; a stale read loses with a conflict instead of
overwriting a concurrent change.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any, Mapping

from django.db import transaction  # type: ignore
from django.db.models import F  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore
from django.utils import timezone  # type: ignore

from apps.hotels.models import Hall, Room
from shared.application.uow import DjangoUnitOfWork
from shared.domain.value_objects import DateRange

from .availability import find_conflicts, is_available, resource_field, validate_range
from .codes import create_with_unique_code
from .conf import engine_setting
from .domain.cancellation import CancellationQuote, evaluate_cancellation, hours_between
from .domain.events import (
    ReservationApproved,
    ReservationCancelled,
    ReservationConfirmed,
    ReservationDatesModified,
)
from .domain.tariff import Tariff
from .exceptions import (
    CancellationAcknowledgementRequired,
    ReservationConflictError,
    ReservationValidationError,
    ResourceNotFoundError,
)
from .models import DateChange, Reservation

logger = logging.getLogger(__name__)

REQUIRED_GUEST_FIELDS = ("first_name", "last_name", "email", "phone")


@dataclass(frozen=True)
class GuestInfo:
    first_name: str
    last_name: str
    email: str
    phone: str
    document: str = ""
    country: str = "Colombia"
    city: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "GuestInfo":
        missing = [name for name in REQUIRED_GUEST_FIELDS if not str(data.get(name) or "").strip()]
        if missing:
            raise ReservationValidationError(
                "Faltan datos obligatorios del huésped.",
                code="missing_guest_data",
                extra={"missing": missing},
            )
        return cls(
            first_name=str(data["first_name"]).strip(),
            last_name=str(data["last_name"]).strip(),
            email=str(data["email"]).strip(),
            phone=str(data["phone"]).strip(),
            document=str(data.get("document") or ""),
            country=str(data.get("country") or "Colombia"),
            city=str(data.get("city") or ""),
        )

    def as_fields(self) -> dict[str, str]:
        return {f"guest_{name}": value for name, value in asdict(self).items()}


@dataclass(frozen=True)
class EventInfo:
    name: str = ""
    type: str = ""
    start_time: time | None = None
    end_time: time | None = None

    def __post_init__(self):
        if (self.start_time is None) != (self.end_time is None):
            raise ReservationValidationError(
                "Indique hora de inicio y hora de fin del evento.",
                code="invalid_event_hours",
            )
        if self.start_time and self.end_time and self.start_time >= self.end_time:
            raise ReservationValidationError(
                "La hora de fin del evento debe ser posterior a la hora de inicio.",
                code="invalid_event_hours",
            )

    def as_fields(self) -> dict[str, Any]:
        return {
            "event_name": self.name,
            "event_type": self.type,
            "event_start_time": self.start_time,
            "event_end_time": self.end_time,
        }


@dataclass(frozen=True)
class ModificationCheck:
    allowed: bool
    reason: str | None
    message: str
    hours_until_checkin: Decimal
    deadline: datetime

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


def _lock_resource(resource) -> None:
    """Serialize writers of one resource on its catalog row."""
    list(_lock_queryset_if_possible(type(resource).objects.filter(pk=resource.pk)))


def _ensure_bookable(resource) -> None:
    if not isinstance(resource, (Room, Hall)):
        raise TypeError(f"Unsupported resource type: {type(resource).__name__}")
    if not resource.is_active or not resource.hotel.is_active:
        raise ResourceNotFoundError()


def _ensure_capacity(resource, guests_count: int) -> None:
    if guests_count < 1:
        raise ReservationValidationError("Debe haber al menos un huésped.", code="invalid_guests")
    if guests_count > resource.capacity:
        raise ReservationValidationError(
            f"La capacidad máxima es de {resource.capacity} personas.",
            code="capacity_exceeded",
            extra={"capacity": resource.capacity},
        )


def unit_price_for(resource) -> Decimal:
    return resource.nightly_price if isinstance(resource, Room) else resource.daily_price


def default_tariff(resource, start: date, end: date) -> Tariff:
    return Tariff.compute(unit_price_for(resource), DateRange(start, end).nights, engine_setting("TAX_PERCENT"))


def confirm_reservation(
    resource,
    start: date,
    end: date,
    guest: GuestInfo | Mapping[str, Any],
    *,
    user=None,
    guests_count: int = 1,
    tariff: Tariff | None = None,
    state: str = Reservation.State.CONFIRMED,
    kind: str | None = None,
    event: EventInfo | None = None,
    notes: str = "",
    package_code: str = "",
    parent: Reservation | None = None,
    policies_accepted: bool = True,
    check_capacity: bool = True,
) -> Reservation:
    """Persist one reservation for ``resource`` or raise ``ReservationConflictError``."""

    validate_range(start, end)
    _ensure_bookable(resource)
    if not isinstance(guest, GuestInfo):
        guest = GuestInfo.from_mapping(guest)
    if check_capacity:
        _ensure_capacity(resource, guests_count)
    if not policies_accepted:
        raise ReservationValidationError(
            "Debe aceptar las políticas de cancelación para reservar.",
            code="policies_not_accepted",
        )
    if state not in Reservation.ACTIVE_STATES:
        raise ValueError(f"A new reservation cannot start in state {state!r}")

    tariff = tariff or default_tariff(resource, start, end)
    field_name = resource_field(resource)
    kind = kind or field_name
    event = event or EventInfo()

    precheck = is_available(resource, start, end)
    if not precheck.available:
        logger.info(f"Availability check failed for {field_name} {resource.pk} {start}..{end}")
        raise ReservationConflictError(conflicts=precheck.conflicts)

    with DjangoUnitOfWork() as uow:
        _lock_resource(resource)
        conflicts = list(find_conflicts(resource, start, end))
        if conflicts:
            logger.warning(
                f"Write-time conflict for {field_name} {resource.pk} {start}..{end}: "
                f"{[c.code for c in conflicts]}"
            )
            raise ReservationConflictError(conflicts=conflicts)

        now = timezone.now()

        def _create(code: str) -> Reservation:
            return Reservation.objects.create(
                code=code,
                kind=kind,
                hotel=resource.hotel,
                user=user if getattr(user, "is_authenticated", False) else None,
                parent=parent,
                package_code=package_code,
                check_in=start,
                check_out=end,
                state=state,
                guests_count=guests_count,
                notes=notes,
                policies_accepted_at=now,
                confirmed_at=now if state == Reservation.State.CONFIRMED else None,
                **{field_name: resource},
                **guest.as_fields(),
                **tariff.as_fields(),
                **event.as_fields(),
            )

        reservation = create_with_unique_code(_create)
        uow.add_event(ReservationConfirmed(reservation_id=reservation.pk, code=reservation.code))

    logger.info(f"Reservation {reservation.code} {reservation.state} for {field_name} {resource.pk} {start}..{end}")
    return reservation


def can_modify(reservation: Reservation, now: datetime | None = None) -> ModificationCheck:
    now = now or timezone.now()
    checkin_at = reservation.checkin_at
    min_hours = engine_setting("MODIFICATION_MIN_HOURS")
    hours = hours_between(now, checkin_at).quantize(Decimal("0.01"))
    deadline = checkin_at - timedelta(hours=min_hours)

    if reservation.is_package_member:
        return ModificationCheck(
            False,
            "package_member",
            "Las reservas de un paquete corporativo no pueden cambiar de fechas.",
            hours,
            deadline,
        )
    if reservation.state != Reservation.State.CONFIRMED:
        return ModificationCheck(
            False,
            "invalid_state",
            "Solo se pueden modificar reservas confirmadas.",
            hours,
            deadline,
        )
    if now > deadline:
        return ModificationCheck(
            False,
            "too_late",
            f"Las modificaciones deben hacerse con al menos {min_hours} horas de anticipación.",
            hours,
            deadline,
        )
    return ModificationCheck(True, None, "La reserva puede modificarse.", hours, deadline)


def modify_dates(
    reservation: Reservation,
    new_start: date,
    new_end: date,
    *,
    now: datetime | None = None,
    changed_by=None,
) -> Reservation:
    now = now or timezone.now()
    check = can_modify(reservation, now)
    if not check.allowed:
        raise ReservationValidationError(check.message, code=check.reason, extra={"modification": check.to_dict()})

    validate_range(new_start, new_end)
    if new_start < timezone.localdate(now):
        raise ReservationValidationError(
            "La nueva fecha de inicio no puede estar en el pasado.",
            code="start_in_past",
        )
    if (new_start, new_end) == (reservation.check_in, reservation.check_out):
        raise ReservationValidationError("Las fechas no cambiaron.", code="same_dates")

    resource = reservation.resource
    precheck = is_available(resource, new_start, new_end, exclude=reservation)
    if not precheck.available:
        raise ReservationConflictError(conflicts=precheck.conflicts)

    tariff = Tariff.compute(reservation.unit_price, DateRange(new_start, new_end).nights, engine_setting("TAX_PERCENT"))
    previous = (reservation.check_in, reservation.check_out, reservation.total)

    with DjangoUnitOfWork() as uow:
        _lock_resource(resource)
        conflicts = list(find_conflicts(resource, new_start, new_end, exclude=reservation))
        if conflicts:
            raise ReservationConflictError(conflicts=conflicts)

        updated = Reservation.objects.filter(
            pk=reservation.pk,
            version=reservation.version,
            state=Reservation.State.CONFIRMED,
        ).update(
            check_in=new_start,
            check_out=new_end,
            units=tariff.units,
            subtotal=tariff.subtotal,
            tax=tariff.tax,
            total=tariff.total,
            version=F("version") + 1,
            updated_at=timezone.now(),
        )
        if not updated:
            raise ReservationConflictError(
                "La reserva fue modificada por otra operación. Vuelva a consultarla.",
                code="stale_reservation",
            )

        DateChange.objects.create(
            reservation=reservation,
            previous_check_in=previous[0],
            previous_check_out=previous[1],
            new_check_in=new_start,
            new_check_out=new_end,
            previous_total=previous[2],
            new_total=tariff.total,
            changed_by=changed_by if getattr(changed_by, "is_authenticated", False) else None,
        )
        uow.add_event(
            ReservationDatesModified(
                reservation_id=reservation.pk,
                code=reservation.code,
                previous_check_in=previous[0],
                previous_check_out=previous[1],
            )
        )

    reservation.refresh_from_db()
    logger.info(f"Reservation {reservation.code} moved to {new_start}..{new_end}, total {tariff.total}")
    return reservation


def quote_cancellation(reservation: Reservation, now: datetime | None = None) -> CancellationQuote:
    return evaluate_cancellation(
        reservation.state,
        reservation.checkin_at,
        reservation.total,
        now or timezone.now(),
        free_hours=engine_setting("FREE_CANCELLATION_HOURS"),
        partial_hours=engine_setting("PARTIAL_PENALTY_HOURS"),
        partial_percent=engine_setting("PARTIAL_PENALTY_PERCENT"),
        package_member=reservation.parent_id is not None,
    )


def _mark_cancelled(reservation: Reservation, quote: CancellationQuote, *, now, reason: str, cancelled_by) -> None:
    updated = Reservation.objects.filter(
        pk=reservation.pk,
        version=reservation.version,
        state__in=Reservation.ACTIVE_STATES,
    ).update(
        state=Reservation.State.CANCELLED,
        cancelled_at=now,
        cancellation_reason=reason[:255],
        cancelled_by=cancelled_by if getattr(cancelled_by, "is_authenticated", False) else None,
        penalty_percent=quote.penalty_percent,
        penalty_amount=quote.penalty_amount,
        refund_amount=quote.refund_amount,
        hours_before_checkin=quote.hours_until_checkin,
        within_free_window=quote.within_free_window,
        version=F("version") + 1,
        updated_at=timezone.now(),
    )
    if not updated:
        raise ReservationConflictError(
            "La reserva fue modificada por otra operación. Vuelva a consultarla.",
            code="stale_reservation",
        )


def cancel_reservation(
    reservation: Reservation,
    *,
    reason: str = "",
    acknowledge_penalty: bool = False,
    now: datetime | None = None,
    cancelled_by=None,
) -> CancellationQuote:
    """Cancel a pending or confirmed reservation and return the applied quote.

    Cancelling a package's main reservation also releases its room
    reservations; the penalty is charged once, on the package total.
    """
    now = now or timezone.now()
    quote = quote_cancellation(reservation, now)
    if not quote.allowed:
        raise ReservationValidationError(quote.message, code=quote.reason, extra={"cancellation": quote.to_dict()})
    if quote.penalty_amount > 0 and not acknowledge_penalty:
        raise CancellationAcknowledgementRequired(quote)

    with DjangoUnitOfWork() as uow:
        _mark_cancelled(reservation, quote, now=now, reason=reason, cancelled_by=cancelled_by)
        uow.add_event(
            ReservationCancelled(
                reservation_id=reservation.pk,
                code=reservation.code,
                penalty_amount=quote.penalty_amount,
                refund_amount=quote.refund_amount,
            )
        )
        if reservation.kind == Reservation.Kind.PACKAGE:
            _cancel_children(reservation, quote, now=now, cancelled_by=cancelled_by)

    reservation.refresh_from_db()
    logger.info(
        f"Reservation {reservation.code} cancelled: tier={quote.tier} "
        f"penalty={quote.penalty_amount} refund={quote.refund_amount}"
    )
    return quote


def _free_quote(quote: CancellationQuote) -> CancellationQuote:
    return CancellationQuote(
        allowed=True,
        reason=None,
        tier=quote.tier,
        penalty_percent=0,
        penalty_amount=Decimal("0"),
        refund_amount=Decimal("0"),
        hours_until_checkin=quote.hours_until_checkin,
        within_free_window=quote.within_free_window,
    )


def _cancel_children(parent: Reservation, quote: CancellationQuote, *, now, cancelled_by) -> None:
    child_quote = _free_quote(quote)
    for child in parent.children.filter(state__in=Reservation.ACTIVE_STATES):
        _mark_cancelled(
            child,
            child_quote,
            now=now,
            reason=f"Cancelación del paquete {parent.package_code}",
            cancelled_by=cancelled_by,
        )


# ============================================================================
# PENDING APPROVAL
# ============================================================================

def _ensure_pending(reservation: Reservation) -> None:
    if reservation.parent_id is not None:
        raise ReservationValidationError(
            "Las habitaciones de un paquete se aprueban junto con el paquete.",
            code="package_member",
        )
    if reservation.state != Reservation.State.PENDING:
        raise ReservationValidationError(
            f"No se puede aprobar o rechazar una reserva en estado {reservation.get_state_display()}.",
            code="not_pending",
        )


def approve_reservation(reservation: Reservation, *, notes: str = "", approved_by=None) -> Reservation:
    """Move a pending reservation, and its package rooms, to confirmed."""
    _ensure_pending(reservation)
    now = timezone.now()

    with DjangoUnitOfWork() as uow:
        updated = Reservation.objects.filter(
            pk=reservation.pk,
            version=reservation.version,
            state=Reservation.State.PENDING,
        ).update(
            state=Reservation.State.CONFIRMED,
            confirmed_at=now,
            hotel_notes=notes,
            version=F("version") + 1,
            updated_at=now,
        )
        if not updated:
            raise ReservationConflictError(
                "La reserva fue modificada por otra operación. Vuelva a consultarla.",
                code="stale_reservation",
            )
        reservation.children.filter(state=Reservation.State.PENDING).update(
            state=Reservation.State.CONFIRMED,
            confirmed_at=now,
            version=F("version") + 1,
            updated_at=now,
        )
        uow.add_event(ReservationApproved(reservation_id=reservation.pk, code=reservation.code))

    reservation.refresh_from_db()
    logger.info(f"Reservation {reservation.code} approved by {getattr(approved_by, 'pk', None)}")
    return reservation


def reject_reservation(reservation: Reservation, *, reason: str, notes: str = "", rejected_by=None) -> Reservation:
    """Cancel a pending reservation without penalty."""
    _ensure_pending(reservation)
    if not reason.strip():
        raise ReservationValidationError("El motivo de rechazo es obligatorio.", code="missing_reason")
    now = timezone.now()
    quote = _free_quote(quote_cancellation(reservation, now))

    with DjangoUnitOfWork() as uow:
        _mark_cancelled(reservation, quote, now=now, reason=reason, cancelled_by=rejected_by)
        Reservation.objects.filter(pk=reservation.pk).update(hotel_notes=notes)
        _cancel_children(reservation, quote, now=now, cancelled_by=rejected_by)
        uow.add_event(
            ReservationCancelled(
                reservation_id=reservation.pk,
                code=reservation.code,
                penalty_amount=quote.penalty_amount,
                refund_amount=quote.refund_amount,
            )
        )

    reservation.refresh_from_db()
    logger.info(f"Reservation {reservation.code} rejected: {reason}")
    return reservation
