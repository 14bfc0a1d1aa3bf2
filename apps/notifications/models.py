"""Notification dispatch and incident models.

Every notice handed to the delivery task gets a ``NotificationDispatch``
row tracking its status. When enqueueing or sending fails an ``Incident``
is attached to the reservation so staff can follow up by hand.
"""

from __future__ import annotations

from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class NotificationDispatch(models.Model):
    """A notice sent, or to be sent, about one reservation."""

    class Kind(models.TextChoices):
        CONFIRMATION = "confirmation", _("Confirmación")
        CANCELLATION = "cancellation", _("Cancelación")
        MODIFICATION = "modification", _("Modificación de fechas")
        PACKAGE_CONFIRMATION = "package_confirmation", _("Confirmación de paquete")

    class Status(models.TextChoices):
        QUEUED = "queued", _("En cola")
        SENT = "sent", _("Enviado")
        FAILED = "failed", _("Fallido")

    reservation = models.ForeignKey(
        "bookings.Reservation",
        on_delete=models.CASCADE,
        related_name="notifications",
    )
    kind = models.CharField(max_length=32, choices=Kind.choices)
    recipient = models.EmailField()
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.QUEUED)
    attempts = models.PositiveSmallIntegerField(default=0)
    last_error = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    sent_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        verbose_name = _("Envío de notificación")
        verbose_name_plural = _("Envíos de notificaciones")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.kind} -> {self.recipient} ({self.status})"

    def mark_sent(self) -> None:
        self.status = self.Status.SENT
        self.attempts += 1
        self.sent_at = timezone.now()
        self.last_error = ""
        self.save(update_fields=["status", "attempts", "sent_at", "last_error"])

    def mark_failed(self, error: str, *, attempted: bool = True) -> None:
        self.status = self.Status.FAILED
        if attempted:
            self.attempts += 1
        self.last_error = error
        self.save(update_fields=["status", "attempts", "last_error"])


class Incident(models.Model):
    """Problem recorded against a reservation that needs manual follow-up."""

    class Kind(models.TextChoices):
        NOTIFICATION_FAILED = "notification_failed", _("Fallo al enviar notificación")
        ENQUEUE_FAILED = "enqueue_failed", _("Fallo al encolar notificación")

    reservation = models.ForeignKey(
        "bookings.Reservation",
        on_delete=models.CASCADE,
        related_name="incidents",
    )
    dispatch = models.ForeignKey(
        NotificationDispatch,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="incidents",
    )
    kind = models.CharField(max_length=32, choices=Kind.choices)
    message = models.TextField()
    is_resolved = models.BooleanField(default=False)
    resolved_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Incidente")
        verbose_name_plural = _("Incidentes")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"Incident {self.kind} on reservation {self.reservation_id}"

    def resolve(self) -> None:
        self.is_resolved = True
        self.resolved_at = timezone.now()
        self.save(update_fields=["is_resolved", "resolved_at"])
