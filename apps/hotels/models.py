"""Hotel catalog models for HotelesCO.

Rooms and halls are the bookable resources. ``is_active`` only says
whether a unit is offered at all; whether it is free on given dates is
always derived from reservations by ``apps.bookings.availability``.
"""

from __future__ import annotations

from datetime import time
from decimal import Decimal

from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Hotel(models.Model):
    """Hotel de la cadena."""

    name = models.CharField(_("Nombre"), max_length=255)
    city = models.CharField(_("Ciudad"), max_length=100)
    address = models.CharField(_("Dirección"), max_length=255, blank=True)
    phone = models.CharField(_("Teléfono"), max_length=20, blank=True)
    email = models.EmailField(_("Email"), blank=True)
    check_in_time = models.TimeField(
        _("Hora de check-in"),
        default=time(15, 0),
        help_text=_("Hora a partir de la cual se cuenta el inicio de la estadía."),
    )
    check_out_time = models.TimeField(_("Hora de check-out"), default=time(12, 0))
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Hotel")
        verbose_name_plural = _("Hoteles")
        ordering = ["name"]

    def __str__(self) -> str:
        return f"{self.name} ({self.city})"


class Room(models.Model):
    """Habitación reservable de un hotel."""

    hotel = models.ForeignKey(Hotel, on_delete=models.CASCADE, related_name="rooms")
    number = models.CharField(_("Número"), max_length=20)
    room_type = models.CharField(
        _("Tipo"),
        max_length=50,
        db_index=True,
        help_text=_("estandar, doble, suite, etc."),
    )
    capacity = models.PositiveSmallIntegerField(
        _("Capacidad"),
        default=2,
        validators=[MinValueValidator(1)],
    )
    nightly_price = models.DecimalField(
        _("Precio por noche"),
        max_digits=12,
        decimal_places=2,
        default=Decimal("100000.00"),
    )
    amenities = models.JSONField(_("Servicios"), default=list, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Habitación")
        verbose_name_plural = _("Habitaciones")
        ordering = ["hotel", "number"]
        constraints = [
            models.UniqueConstraint(fields=["hotel", "number"], name="room_unique_number_per_hotel"),
        ]
        indexes = [
            models.Index(fields=["hotel", "room_type", "is_active"], name="room_hotel_type_active_idx"),
        ]

    def __str__(self) -> str:
        return f"Habitación {self.number} ({self.room_type}) - {self.hotel.name}"


class Hall(models.Model):
    """Salón de eventos de un hotel."""

    hotel = models.ForeignKey(Hotel, on_delete=models.CASCADE, related_name="halls")
    name = models.CharField(_("Nombre"), max_length=150)
    capacity = models.PositiveIntegerField(
        _("Capacidad"),
        default=50,
        validators=[MinValueValidator(1)],
    )
    daily_price = models.DecimalField(
        _("Precio por día"),
        max_digits=12,
        decimal_places=2,
        default=Decimal("500000.00"),
    )
    equipment = models.JSONField(_("Equipamiento"), default=list, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Salón")
        verbose_name_plural = _("Salones")
        ordering = ["hotel", "name"]
        constraints = [
            models.UniqueConstraint(fields=["hotel", "name"], name="hall_unique_name_per_hotel"),
        ]

    def __str__(self) -> str:
        return f"{self.name} - {self.hotel.name}"
