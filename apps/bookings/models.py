"""Booking domain models for HotelesCO."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Reservation(models.Model):
    """Reserva de una habitación o de un salón.

    El rango ``[check_in, check_out)`` es semiabierto: el día de salida no
    queda ocupado. Las reservas nunca se eliminan; se cancelan.
    """

    class Kind(models.TextChoices):
        ROOM = "room", _("Habitación")
        HALL = "hall", _("Salón")
        PACKAGE = "package", _("Paquete corporativo")

    class State(models.TextChoices):
        PENDING = "pending", _("Pendiente")
        CONFIRMED = "confirmed", _("Confirmada")
        CANCELLED = "cancelled", _("Cancelada")
        COMPLETED = "completed", _("Completada")

    ACTIVE_STATES = (State.PENDING, State.CONFIRMED)

    code = models.CharField(max_length=16, unique=True, editable=False)
    kind = models.CharField(max_length=10, choices=Kind.choices, default=Kind.ROOM)
    hotel = models.ForeignKey(
        "hotels.Hotel",
        on_delete=models.PROTECT,
        related_name="reservations",
    )
    room = models.ForeignKey(
        "hotels.Room",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="reservations",
    )
    hall = models.ForeignKey(
        "hotels.Hall",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="reservations",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="reservations",
    )
    parent = models.ForeignKey(
        "self",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="children",
        help_text=_("Reserva principal del paquete al que pertenece esta habitación."),
    )
    package_code = models.CharField(max_length=16, blank=True, db_index=True)
    check_in = models.DateField()
    check_out = models.DateField()
    state = models.CharField(
        max_length=16,
        choices=State.choices,
        default=State.CONFIRMED,
    )

    guest_first_name = models.CharField(_("Nombre"), max_length=100)
    guest_last_name = models.CharField(_("Apellido"), max_length=100)
    guest_email = models.EmailField(_("Email"))
    guest_phone = models.CharField(_("Teléfono"), max_length=30)
    guest_document = models.CharField(_("Documento"), max_length=30, blank=True)
    guest_country = models.CharField(_("País"), max_length=60, default="Colombia")
    guest_city = models.CharField(_("Ciudad"), max_length=100, blank=True)
    guests_count = models.PositiveIntegerField(default=1)

    units = models.PositiveIntegerField(
        default=1,
        help_text=_("Noches para habitaciones, días para salones."),
    )
    unit_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    subtotal = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    tax = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    total = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    currency = models.CharField(max_length=3, default="COP")
    notes = models.TextField(blank=True)

    event_name = models.CharField(max_length=255, blank=True)
    event_type = models.CharField(max_length=100, blank=True)
    event_start_time = models.TimeField(null=True, blank=True)
    event_end_time = models.TimeField(null=True, blank=True)

    policies_accepted_at = models.DateTimeField(null=True, blank=True)
    confirmed_at = models.DateTimeField(null=True, blank=True)
    hotel_notes = models.TextField(blank=True, help_text=_("Notas del hotel al aprobar o rechazar."))

    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancellation_reason = models.CharField(max_length=255, blank=True)
    cancelled_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="cancelled_reservations",
    )
    penalty_percent = models.PositiveSmallIntegerField(null=True, blank=True)
    penalty_amount = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    refund_amount = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    hours_before_checkin = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    within_free_window = models.BooleanField(null=True, blank=True)

    version = models.PositiveIntegerField(
        default=1,
        help_text=_("Se incrementa en cada modificación o cancelación."),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Reserva")
        verbose_name_plural = _("Reservas")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(check_out__gt=models.F("check_in")),
                name="reservation_valid_dates",
            ),
            models.CheckConstraint(
                condition=(
                    models.Q(room__isnull=False, hall__isnull=True)
                    | models.Q(room__isnull=True, hall__isnull=False)
                ),
                name="reservation_single_resource",
            ),
        ]
        indexes = [
            models.Index(fields=["room", "check_in", "check_out"], name="reservation_room_dates_idx"),
            models.Index(fields=["hall", "check_in", "check_out"], name="reservation_hall_dates_idx"),
            models.Index(fields=["state"], name="reservation_state_idx"),
        ]

    def __str__(self) -> str:
        return f"Reserva {self.code} ({self.get_state_display()})"

    @property
    def resource(self):
        return self.room if self.room_id else self.hall

    @property
    def resource_label(self) -> str:
        if self.room_id:
            return f"Habitación {self.room.number}"
        return self.hall.name

    @property
    def guest_name(self) -> str:
        return f"{self.guest_first_name} {self.guest_last_name}".strip()

    @property
    def is_active(self) -> bool:
        return self.state in self.ACTIVE_STATES

    @property
    def is_package_member(self) -> bool:
        return bool(self.package_code)

    @property
    def checkin_at(self) -> datetime:
        """Instant the stay or event begins, in the project time zone."""
        start_time = self.hotel.check_in_time
        if self.hall_id and self.event_start_time:
            start_time = self.event_start_time
        return timezone.make_aware(datetime.combine(self.check_in, start_time))

    def conflict_summary(self) -> dict:
        summary = {
            "id": self.pk,
            "code": self.code,
            "state": self.state,
            "check_in": self.check_in,
            "check_out": self.check_out,
        }
        if self.event_start_time and self.event_end_time:
            summary["event_start_time"] = self.event_start_time
            summary["event_end_time"] = self.event_end_time
        return summary


class DateChange(models.Model):
    """Historial de cambios de fechas de una reserva."""

    reservation = models.ForeignKey(
        Reservation,
        on_delete=models.CASCADE,
        related_name="date_changes",
    )
    previous_check_in = models.DateField()
    previous_check_out = models.DateField()
    new_check_in = models.DateField()
    new_check_out = models.DateField()
    previous_total = models.DecimalField(max_digits=14, decimal_places=2)
    new_total = models.DecimalField(max_digits=14, decimal_places=2)
    changed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    changed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Cambio de fechas")
        verbose_name_plural = _("Cambios de fechas")
        ordering = ["changed_at", "id"]

    def __str__(self) -> str:
        return (
            f"{self.reservation_id}: {self.previous_check_in}->{self.new_check_in} "
            f"/ {self.previous_check_out}->{self.new_check_out}"
        )


class CodeSequence(models.Model):
    """Contador atómico por prefijo y día, usado para los códigos de paquete."""

    key = models.CharField(max_length=32, unique=True)
    value = models.PositiveIntegerField(default=0)

    class Meta:
        verbose_name = _("Secuencia de códigos")
        verbose_name_plural = _("Secuencias de códigos")

    def __str__(self) -> str:
        return f"{self.key}={self.value}"
