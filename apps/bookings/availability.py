"""Availability resolver.

Read-only interval queries over active reservations. A resource is free
for ``[start, end)`` when no pending or confirmed reservation of it
satisfies ``check_in < end AND check_out > start``; touching ranges do not
clash. Nothing here writes, so every function is safe to call repeatedly
and concurrently.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable

from django.db.models import Q, QuerySet  # type: ignore

from apps.hotels.models import Hall, Hotel, Room

from .exceptions import ReservationValidationError, ResourceNotFoundError
from .models import Reservation

RESOURCE_ROOM = "room"
RESOURCE_HALL = "hall"


@dataclass(frozen=True)
class AvailabilityResult:
    available: bool
    conflicts: list[Reservation] = field(default_factory=list)


def validate_range(start: date | None, end: date | None) -> None:
    if start is None or end is None:
        raise ReservationValidationError(
            "Debe indicar fecha de inicio y fecha de fin.",
            code="missing_dates",
        )
    if start >= end:
        raise ReservationValidationError(
            "La fecha de fin debe ser posterior a la fecha de inicio.",
            code="invalid_range",
        )


def overlap_filter(start: date, end: date) -> Q:
    return Q(check_in__lt=end) & Q(check_out__gt=start)


def active_reservations() -> QuerySet:
    return Reservation.objects.filter(state__in=Reservation.ACTIVE_STATES)


def resource_field(resource) -> str:
    if isinstance(resource, Room):
        return RESOURCE_ROOM
    if isinstance(resource, Hall):
        return RESOURCE_HALL
    raise TypeError(f"Unsupported resource type: {type(resource).__name__}")


def get_resource(resource_type: str, resource_id: Any):
    """Load an active room or hall, or raise ``ResourceNotFoundError``."""
    models = {RESOURCE_ROOM: Room, RESOURCE_HALL: Hall}
    model = models.get(resource_type)
    if model is None:
        raise ReservationValidationError(
            "El tipo de recurso debe ser 'room' o 'hall'.",
            code="invalid_resource_type",
        )
    try:
        return model.objects.select_related("hotel").get(
            pk=resource_id,
            is_active=True,
            hotel__is_active=True,
        )
    except (model.DoesNotExist, ValueError, TypeError):
        raise ResourceNotFoundError()


def find_conflicts(resource, start: date, end: date, exclude: Reservation | int | None = None) -> QuerySet:
    validate_range(start, end)
    qs = active_reservations().filter(**{resource_field(resource): resource}).filter(overlap_filter(start, end))
    if exclude is not None:
        qs = qs.exclude(pk=getattr(exclude, "pk", exclude))
    return qs.order_by("check_in", "id")


def is_available(resource, start: date, end: date, exclude: Reservation | int | None = None) -> AvailabilityResult:
    conflicts = list(find_conflicts(resource, start, end, exclude=exclude))
    return AvailabilityResult(available=not conflicts, conflicts=conflicts)


def busy_resource_ids(kind: str, ids: Iterable[int], start: date, end: date) -> set[int]:
    """Ids among ``ids`` with at least one active overlapping reservation."""
    validate_range(start, end)
    column = f"{kind}_id"
    rows = (
        active_reservations()
        .filter(**{f"{column}__in": list(ids)})
        .filter(overlap_filter(start, end))
        .values_list(column, flat=True)
    )
    return set(rows)


def free_rooms(hotel: Hotel, room_type: str, start: date, end: date) -> list[Room]:
    rooms = list(
        Room.objects.filter(hotel=hotel, room_type=room_type, is_active=True).order_by("number", "id")
    )
    busy = busy_resource_ids(RESOURCE_ROOM, [room.pk for room in rooms], start, end)
    return [room for room in rooms if room.pk not in busy]


def free_halls(hotel: Hotel, start: date, end: date, exclude: Iterable[int] = ()) -> list[Hall]:
    halls = list(
        Hall.objects.filter(hotel=hotel, is_active=True).exclude(pk__in=list(exclude)).order_by("name", "id")
    )
    busy = busy_resource_ids(RESOURCE_HALL, [hall.pk for hall in halls], start, end)
    return [hall for hall in halls if hall.pk not in busy]


def free_room_types(hotel: Hotel, start: date, end: date) -> "OrderedDict[str, dict[str, Any]]":
    """Free rooms of the hotel grouped by type, in type order."""
    rooms = list(Room.objects.filter(hotel=hotel, is_active=True).order_by("room_type", "number", "id"))
    busy = busy_resource_ids(RESOURCE_ROOM, [room.pk for room in rooms], start, end)
    grouped: "OrderedDict[str, dict[str, Any]]" = OrderedDict()
    for room in rooms:
        if room.pk in busy:
            continue
        entry = grouped.setdefault(
            room.room_type,
            {
                "type": room.room_type,
                "available": 0,
                "room_ids": [],
                "capacity": room.capacity,
                "nightly_price": room.nightly_price,
            },
        )
        entry["available"] += 1
        entry["room_ids"].append(room.pk)
    return grouped
