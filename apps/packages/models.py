"""Corporate package models."""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.serializers.json import DjangoJSONEncoder  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class PackageBooking(models.Model):
    """Paquete corporativo: salón, habitaciones y catering.

    ``parent`` is the package reservation bound to the hall; room
    reservations point to it through ``Reservation.parent``.
    """

    class Status(models.TextChoices):
        COMPLETE = "complete", _("Completo")
        PARTIAL = "partial", _("Parcial")

    package_code = models.CharField(max_length=16, unique=True)
    parent = models.OneToOneField(
        "bookings.Reservation",
        on_delete=models.PROTECT,
        related_name="package",
    )
    hotel = models.ForeignKey("hotels.Hotel", on_delete=models.PROTECT, related_name="packages")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="packages",
    )
    room_requests = models.JSONField(default=list, help_text=_("[{type, count}] solicitado."))
    attendees = models.PositiveIntegerField(default=1)
    responsible_name = models.CharField(max_length=150)
    responsible_phone = models.CharField(max_length=30, blank=True)

    catering_type = models.CharField(max_length=50, blank=True)
    catering_guests = models.PositiveIntegerField(default=0)
    catering_price_per_person = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    hall_cost = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    rooms_cost = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    catering_cost = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    total_before_discount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    discount_percent = models.PositiveSmallIntegerField(default=10)
    discount_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    subtotal = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    tax = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    total = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    status = models.CharField(max_length=16, choices=Status.choices, default=Status.COMPLETE)
    failed_components = models.JSONField(default=list, blank=True, encoder=DjangoJSONEncoder)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Paquete corporativo")
        verbose_name_plural = _("Paquetes corporativos")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"Paquete {self.package_code} ({self.get_status_display()})"
