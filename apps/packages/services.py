"""Package orchestrator.

A corporate package is validated as a whole: the hall, every requested
room type and the catering order. Validation never writes. Confirmation
re-runs it and then writes the main reservation and one reservation per
room, each through ``confirm_reservation`` and each committing on its own.
If a room is lost to a concurrent booking after the main reservation was
written, what was written stays and the package is reported as partial.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Iterable, Mapping

from django.db import transaction  # type: ignore
from django.utils import timezone  # type: ignore

from apps.bookings.availability import (
    find_conflicts,
    free_halls,
    free_room_types,
    free_rooms,
    validate_range,
)
from apps.bookings.codes import next_package_code
from apps.bookings.conf import engine_setting
from apps.bookings.domain.cancellation import hours_between
from apps.bookings.domain.tariff import Tariff
from apps.bookings.exceptions import (
    PackagePartialFailureError,
    PackageUnavailableError,
    ReservationConflictError,
    ReservationValidationError,
    ResourceNotFoundError,
)
from apps.bookings.models import Reservation
from apps.bookings.services import EventInfo, GuestInfo, confirm_reservation
from apps.hotels.models import Hall, Hotel, Room
from shared.application.uow import DjangoUnitOfWork
from shared.domain.value_objects import DateRange, TimeRange, round_pesos

from .catering import CATERING_OPTIONS, catering_menu, price_per_person
from .domain.events import PackageConfirmed
from .models import PackageBooking

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoomRequest:
    type: str
    count: int


@dataclass(frozen=True)
class CateringRequest:
    type: str
    guests: int


@dataclass(frozen=True)
class PackageRequest:
    hotel: Hotel
    hall: Hall
    start: date
    end: date
    rooms: tuple[RoomRequest, ...] = ()
    catering: CateringRequest | None = None
    event_hours: TimeRange | None = None
    attendees: int = 1

    @property
    def days(self) -> int:
        return DateRange(self.start, self.end).nights


@dataclass
class PackageValidation:
    all_available: bool
    hall: dict[str, Any]
    rooms: list[dict[str, Any]]
    catering: dict[str, Any]
    issues: list[dict[str, Any]] = field(default_factory=list)
    alternatives: dict[str, list] = field(default_factory=lambda: {"halls": [], "room_types": []})

    @property
    def hall_available(self) -> bool:
        return self.hall["available"]

    @property
    def rooms_available(self) -> bool:
        return all(entry["sufficient"] for entry in self.rooms)

    @property
    def catering_available(self) -> bool:
        return self.catering["available"]

    def to_dict(self) -> dict[str, Any]:
        return {
            "all_available": self.all_available,
            "components": {
                "hall": self.hall,
                "rooms": self.rooms,
                "catering": self.catering,
            },
            "issues": self.issues,
            "alternatives": self.alternatives,
        }


@dataclass(frozen=True)
class PackagePricing:
    hall_cost: Decimal
    rooms_cost: Decimal
    catering_cost: Decimal
    total_before_discount: Decimal
    discount_percent: int
    discount_amount: Decimal
    subtotal: Decimal
    tax: Decimal
    total: Decimal

    def as_fields(self) -> dict[str, Any]:
        return {
            "hall_cost": self.hall_cost,
            "rooms_cost": self.rooms_cost,
            "catering_cost": self.catering_cost,
            "total_before_discount": self.total_before_discount,
            "discount_percent": self.discount_percent,
            "discount_amount": self.discount_amount,
            "subtotal": self.subtotal,
            "tax": self.tax,
            "total": self.total,
        }


def normalize_room_requests(raw: Iterable[Mapping[str, Any] | RoomRequest]) -> tuple[RoomRequest, ...]:
    """Merge repeated types, keeping the order in which types first appear."""
    merged: dict[str, int] = {}
    for item in raw:
        if isinstance(item, RoomRequest):
            room_type, count = item.type, item.count
        else:
            room_type, count = str(item.get("type") or "").strip(), int(item.get("count") or 0)
        if not room_type or count < 1:
            raise ReservationValidationError(
                "Cada solicitud de habitaciones necesita un tipo y una cantidad mayor a cero.",
                code="invalid_room_request",
            )
        merged[room_type] = merged.get(room_type, 0) + count
    return tuple(RoomRequest(type=t, count=c) for t, c in merged.items())


def build_request(
    *,
    hotel_id: Any,
    hall_id: Any,
    start: date,
    end: date,
    rooms: Iterable[Mapping[str, Any]] = (),
    catering: Mapping[str, Any] | None = None,
    event_start_time: time | None = None,
    event_end_time: time | None = None,
    attendees: int = 1,
) -> PackageRequest:
    validate_range(start, end)
    try:
        hotel = Hotel.objects.get(pk=hotel_id, is_active=True)
        hall = Hall.objects.select_related("hotel").get(pk=hall_id, hotel=hotel, is_active=True)
    except (Hotel.DoesNotExist, Hall.DoesNotExist, ValueError, TypeError):
        raise ResourceNotFoundError("El hotel o el salón no existen o no están disponibles.")

    event_hours = None
    if event_start_time or event_end_time:
        if not (event_start_time and event_end_time) or event_start_time >= event_end_time:
            raise ReservationValidationError(
                "El horario del evento no es válido.",
                code="invalid_event_hours",
            )
        event_hours = TimeRange(event_start_time, event_end_time)

    catering_request = None
    if catering:
        catering_request = CateringRequest(
            type=str(catering.get("type") or ""),
            guests=int(catering.get("guests") or 0),
        )

    return PackageRequest(
        hotel=hotel,
        hall=hall,
        start=start,
        end=end,
        rooms=normalize_room_requests(rooms),
        catering=catering_request,
        event_hours=event_hours,
        attendees=attendees,
    )


def _event_start(request: PackageRequest) -> datetime:
    start_time = request.event_hours.start if request.event_hours else time(0, 0)
    return timezone.make_aware(datetime.combine(request.start, start_time))


def _hall_status(request: PackageRequest) -> tuple[dict[str, Any], list[dict[str, Any]]]:
    hall = request.hall
    conflicts = []
    for reservation in find_conflicts(hall, request.start, request.end):
        summary = reservation.conflict_summary()
        hours_overlap = True
        if request.event_hours and reservation.event_start_time and reservation.event_end_time:
            booked = TimeRange(reservation.event_start_time, reservation.event_end_time)
            hours_overlap = request.event_hours.overlaps_with(booked)
        summary["hours_overlap"] = hours_overlap
        conflicts.append(summary)

    issues = []
    if conflicts:
        occupied = ", ".join(
            f"{c['check_in']:%d/%m/%Y}"
            + (f" {c['event_start_time']:%H:%M}-{c['event_end_time']:%H:%M}" if "event_start_time" in c else "")
            for c in conflicts
        )
        issues.append({
            "component": "hall",
            "reason": f"El salón {hall.name} ya está reservado en las fechas solicitadas ({occupied}).",
        })
    if request.attendees > hall.capacity:
        issues.append({
            "component": "hall",
            "reason": f"El salón {hall.name} admite máximo {hall.capacity} personas.",
        })

    status = {
        "id": hall.pk,
        "name": hall.name,
        "capacity": hall.capacity,
        "available": not issues,
        "conflicts": conflicts,
    }
    return status, issues


def _rooms_status(request: PackageRequest) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
    statuses, issues = [], []
    for room_request in request.rooms:
        candidates = free_rooms(request.hotel, room_request.type, request.start, request.end)
        sufficient = len(candidates) >= room_request.count
        statuses.append({
            "type": room_request.type,
            "requested": room_request.count,
            "available": len(candidates),
            "sufficient": sufficient,
            "room_ids": [room.pk for room in candidates],
        })
        if not sufficient:
            issues.append({
                "component": "rooms",
                "type": room_request.type,
                "reason": (
                    f"Solo hay {len(candidates)} habitaciones tipo {room_request.type} disponibles "
                    f"de {room_request.count} solicitadas."
                ),
            })
    return statuses, issues


def _catering_status(request: PackageRequest, now: datetime) -> tuple[dict[str, Any], list[dict[str, Any]]]:
    catering = request.catering
    if catering is None:
        return {"included": False, "available": True}, []

    max_guests = engine_setting("CATERING_MAX_GUESTS")
    min_lead = engine_setting("CATERING_MIN_LEAD_HOURS")
    lead_hours = hours_between(now, _event_start(request)).quantize(Decimal("0.01"))
    reasons = []
    if catering.type not in CATERING_OPTIONS:
        reasons.append(f"El tipo de catering '{catering.type}' no existe.")
    if catering.guests < 1:
        reasons.append("El catering necesita al menos una persona.")
    if catering.guests > max_guests:
        reasons.append(f"La capacidad máxima de catering es de {max_guests} personas.")
    if lead_hours < min_lead:
        reasons.append(f"El catering debe solicitarse con mínimo {min_lead} horas de anticipación.")

    status = {
        "included": True,
        "type": catering.type,
        "guests": catering.guests,
        "max_guests": max_guests,
        "lead_hours": lead_hours,
        "min_lead_hours": min_lead,
        "price_per_person": price_per_person(catering.type) if catering.type in CATERING_OPTIONS else None,
        "available": not reasons,
        "reasons": reasons,
    }
    return status, [{"component": "catering", "reason": reason} for reason in reasons]


def _alternatives(request: PackageRequest, hall_ok: bool, rooms: list[dict[str, Any]]) -> dict[str, list]:
    alternatives: dict[str, list] = {"halls": [], "room_types": []}
    if not hall_ok:
        limit = engine_setting("MAX_HALL_ALTERNATIVES")
        candidates = [
            hall for hall in free_halls(request.hotel, request.start, request.end, exclude=[request.hall.pk])
            if hall.capacity >= request.attendees
        ]
        alternatives["halls"] = [
            {"id": hall.pk, "name": hall.name, "capacity": hall.capacity, "daily_price": hall.daily_price}
            for hall in candidates[:limit]
        ]
    if any(not entry["sufficient"] for entry in rooms):
        requested = {entry["type"]: entry["requested"] for entry in rooms}
        for room_type, entry in free_room_types(request.hotel, request.start, request.end).items():
            surplus = entry["available"] - requested.get(room_type, 0)
            if surplus > 0:
                alternatives["room_types"].append({
                    "type": room_type,
                    "available": surplus,
                    "capacity": entry["capacity"],
                    "nightly_price": entry["nightly_price"],
                })
    return alternatives


def validate_package(request: PackageRequest, now: datetime | None = None) -> PackageValidation:
    """Check every component of the package without writing anything."""
    now = now or timezone.now()
    hall, hall_issues = _hall_status(request)
    rooms, room_issues = _rooms_status(request)
    catering, catering_issues = _catering_status(request, now)
    issues = hall_issues + room_issues + catering_issues

    validation = PackageValidation(
        all_available=not issues,
        hall=hall,
        rooms=rooms,
        catering=catering,
        issues=issues,
    )
    if issues:
        validation.alternatives = _alternatives(request, hall["available"], rooms)
    logger.info(
        f"Package validation for hall {request.hall.pk} {request.start}..{request.end}: "
        f"all_available={validation.all_available} issues={len(issues)}"
    )
    return validation


def price_package(request: PackageRequest, room_prices: Iterable[Decimal]) -> PackagePricing:
    days = request.days
    hall_cost = round_pesos(request.hall.daily_price * days)
    rooms_cost = round_pesos(sum((price * days for price in room_prices), Decimal("0")))
    catering_cost = Decimal("0")
    if request.catering is not None:
        catering_cost = round_pesos(price_per_person(request.catering.type) * request.catering.guests)

    total_before_discount = hall_cost + rooms_cost + catering_cost
    discount_percent = engine_setting("PACKAGE_DISCOUNT_PERCENT")
    discount_amount = round_pesos(total_before_discount * Decimal(discount_percent) / Decimal("100"))
    subtotal = total_before_discount - discount_amount
    tax = round_pesos(subtotal * Decimal(str(engine_setting("TAX_PERCENT"))) / Decimal("100"))
    return PackagePricing(
        hall_cost=hall_cost,
        rooms_cost=rooms_cost,
        catering_cost=catering_cost,
        total_before_discount=total_before_discount,
        discount_percent=discount_percent,
        discount_amount=discount_amount,
        subtotal=subtotal,
        tax=tax,
        total=subtotal + tax,
    )


def _room_failure(room, exc: Exception) -> dict[str, Any]:
    failure = {
        "room_id": room.pk,
        "room_number": room.number,
        "type": room.room_type,
        "reason": getattr(exc, "message", str(exc)),
    }
    if isinstance(exc, ReservationConflictError):
        failure["conflicts"] = exc.extra.get("conflicts", [])
    return failure


def confirm_package(
    request: PackageRequest,
    *,
    contact: GuestInfo | Mapping[str, Any],
    event_name: str,
    event_type: str = "",
    responsible_name: str,
    responsible_phone: str = "",
    user=None,
    policies_accepted: bool = True,
    now: datetime | None = None,
) -> PackageBooking:
    """Re-validate and book every component of the package.

    Raises ``PackageUnavailableError`` (nothing written) when the hall or a
    room type is short, ``ReservationValidationError`` when only the
    catering order is rejected, and ``PackagePartialFailureError`` when room
    reservations failed after the main reservation was committed.
    """
    now = now or timezone.now()
    if not isinstance(contact, GuestInfo):
        contact = GuestInfo.from_mapping(contact)
    if not event_name.strip() or not responsible_name.strip():
        raise ReservationValidationError(
            "El nombre del evento y el responsable son obligatorios.",
            code="missing_event_data",
        )
    if not policies_accepted:
        raise ReservationValidationError(
            "Debe aceptar las políticas de cancelación para reservar.",
            code="policies_not_accepted",
        )

    validation = validate_package(request, now)
    if not (validation.hall_available and validation.rooms_available):
        raise PackageUnavailableError(validation.to_dict())
    if not validation.catering_available:
        raise ReservationValidationError(
            "El pedido de catering no puede atenderse.",
            code="catering_unavailable",
            extra={"validation": validation.to_dict()},
        )

    rooms_by_id = {}
    selected_ids: list[int] = []
    for entry, room_request in zip(validation.rooms, request.rooms):
        selected_ids.extend(entry["room_ids"][: room_request.count])
    if selected_ids:
        rooms_by_id = Room.objects.select_related("hotel").in_bulk(selected_ids)
    selected_rooms = [rooms_by_id[pk] for pk in selected_ids]

    pricing = price_package(request, [room.nightly_price for room in selected_rooms])
    package_code = next_package_code(timezone.localdate(now))
    state = Reservation.State.PENDING if engine_setting("PACKAGE_REQUIRES_APPROVAL") else Reservation.State.CONFIRMED
    event = EventInfo(
        name=event_name,
        type=event_type,
        start_time=request.event_hours.start if request.event_hours else None,
        end_time=request.event_hours.end if request.event_hours else None,
    )

    try:
        with transaction.atomic():
            parent = confirm_reservation(
                request.hall,
                request.start,
                request.end,
                contact,
                user=user,
                guests_count=request.attendees,
                kind=Reservation.Kind.PACKAGE,
                state=state,
                tariff=Tariff.from_amounts(
                    unit_price=request.hall.daily_price,
                    units=request.days,
                    subtotal=pricing.subtotal,
                    tax=pricing.tax,
                    total=pricing.total,
                ),
                event=event,
                package_code=package_code,
                notes=f"Paquete corporativo {package_code}",
            )
            package = PackageBooking.objects.create(
                package_code=package_code,
                parent=parent,
                hotel=request.hotel,
                user=parent.user,
                room_requests=[{"type": r.type, "count": r.count} for r in request.rooms],
                attendees=request.attendees,
                responsible_name=responsible_name,
                responsible_phone=responsible_phone,
                catering_type=request.catering.type if request.catering else "",
                catering_guests=request.catering.guests if request.catering else 0,
                catering_price_per_person=(
                    price_per_person(request.catering.type) if request.catering else Decimal("0")
                ),
                **pricing.as_fields(),
            )
    except ReservationConflictError:
        # Hall lost between validation and write; nothing was written
        raise PackageUnavailableError(validate_package(request, now).to_dict())

    reserved = [{"component": "hall", "hall_id": request.hall.pk, "code": parent.code}]
    failed = []
    for room in selected_rooms:
        try:
            child = confirm_reservation(
                room,
                request.start,
                request.end,
                contact,
                user=user,
                guests_count=room.capacity,
                # Billed once, on the package reservation
                tariff=Tariff.from_amounts(
                    unit_price=room.nightly_price,
                    units=request.days,
                    subtotal=Decimal("0"),
                    tax=Decimal("0"),
                ),
                state=state,
                parent=parent,
                package_code=package_code,
                notes=f"Parte del paquete corporativo {package_code}",
            )
        except (ReservationConflictError, ResourceNotFoundError) as exc:
            logger.warning(f"Package {package_code}: room {room.pk} could not be reserved: {exc}")
            failed.append(_room_failure(room, exc))
            continue
        reserved.append({
            "component": "room",
            "room_id": room.pk,
            "room_number": room.number,
            "type": room.room_type,
            "code": child.code,
        })

    if failed:
        package.status = PackageBooking.Status.PARTIAL
        package.failed_components = failed
        package.save(update_fields=["status", "failed_components", "updated_at"])
        logger.error(f"Package {package_code} partially confirmed: {len(failed)} room(s) failed")
        raise PackagePartialFailureError(package_code, reserved, failed)

    if state == Reservation.State.PENDING:
        logger.info(f"Package {package_code} awaiting approval by the hotel")
        return package

    with DjangoUnitOfWork() as uow:
        uow.add_event(
            PackageConfirmed(
                package_id=package.pk,
                package_code=package_code,
                parent_reservation_id=parent.pk,
            )
        )
    logger.info(f"Package {package_code} confirmed with {len(selected_rooms)} room(s)")
    return package


def package_options(hotel: Hotel, start: date, end: date) -> dict[str, Any]:
    """Halls, free room types and the catering menu of a hotel for a range."""
    validate_range(start, end)
    free_hall_ids = {hall.pk for hall in free_halls(hotel, start, end)}
    halls = [
        {
            "id": hall.pk,
            "name": hall.name,
            "capacity": hall.capacity,
            "daily_price": hall.daily_price,
            "equipment": hall.equipment,
            "available": hall.pk in free_hall_ids,
        }
        for hall in Hall.objects.filter(hotel=hotel, is_active=True).order_by("name", "id")
    ]
    room_types = [
        {key: value for key, value in entry.items() if key != "room_ids"}
        for entry in free_room_types(hotel, start, end).values()
    ]
    return {
        "hotel": {"id": hotel.pk, "name": hotel.name, "city": hotel.city},
        "start": start,
        "end": end,
        "days": (end - start).days,
        "halls": halls,
        "room_types": room_types,
        "catering": catering_menu(),
        "discount_percent": engine_setting("PACKAGE_DISCOUNT_PERCENT"),
    }
