"""Notification services: scheduling, rendering and email delivery."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.conf import settings  # type: ignore
from django.core.mail import send_mail  # type: ignore
from django.utils.html import strip_tags  # type: ignore

from .models import Incident, NotificationDispatch

if TYPE_CHECKING:  # pragma: no cover
    from apps.bookings.models import Reservation

logger = logging.getLogger(__name__)


# ============================================================================
# INCIDENTS
# ============================================================================

def record_incident(
    reservation: "Reservation",
    kind: str,
    message: str,
    *,
    dispatch: NotificationDispatch | None = None,
) -> Incident:
    incident = Incident.objects.create(
        reservation=reservation,
        dispatch=dispatch,
        kind=kind,
        message=message,
    )
    logger.warning(f"Incident {kind} recorded for reservation {reservation.code}: {message}")
    return incident


# ============================================================================
# SCHEDULING
# ============================================================================

def schedule_notification(reservation: "Reservation", kind: str) -> NotificationDispatch:
    """
    Create a dispatch record and hand it to the delivery task.

    If the broker refuses the task the dispatch is marked failed and an
    incident is recorded; the caller is never interrupted.
    """
    from .tasks import deliver_notification

    dispatch = NotificationDispatch.objects.create(
        reservation=reservation,
        kind=kind,
        recipient=reservation.guest_email,
    )
    try:
        deliver_notification.delay(dispatch.pk)
    except Exception as e:
        logger.error(f"Could not enqueue {kind} notification for {reservation.code}: {e}", exc_info=True)
        dispatch.mark_failed(str(e), attempted=False)
        record_incident(
            reservation,
            Incident.Kind.ENQUEUE_FAILED,
            f"No se pudo encolar la notificación ({kind}): {e}",
            dispatch=dispatch,
        )
    return dispatch


# ============================================================================
# RENDERING
# ============================================================================

def _money(amount) -> str:
    return f"${amount:,.0f} COP".replace(",", ".")


def _details(reservation: "Reservation") -> str:
    lines = [
        f"<li><strong>Código de reserva:</strong> {reservation.code}</li>",
        f"<li><strong>Hotel:</strong> {reservation.hotel.name}</li>",
        f"<li><strong>Recurso:</strong> {reservation.resource_label}</li>",
        f"<li><strong>Entrada:</strong> {reservation.check_in:%d/%m/%Y}</li>",
        f"<li><strong>Salida:</strong> {reservation.check_out:%d/%m/%Y}</li>",
        f"<li><strong>Total:</strong> {_money(reservation.total)}</li>",
    ]
    if reservation.package_code:
        lines.append(f"<li><strong>Código de paquete:</strong> {reservation.package_code}</li>")
    return "<ul>" + "".join(lines) + "</ul>"


def render_notification(dispatch: NotificationDispatch) -> tuple[str, str]:
    """Return ``(subject, html_message)`` for a dispatch."""
    reservation = dispatch.reservation
    greeting = f"<h2>Hola, {reservation.guest_name}!</h2>"
    kind = dispatch.kind

    if kind == NotificationDispatch.Kind.CONFIRMATION:
        subject = f"Reserva {reservation.code} confirmada"
        body = "<p>Su reserva ha sido confirmada.</p>"
    elif kind == NotificationDispatch.Kind.CANCELLATION:
        subject = f"Reserva {reservation.code} cancelada"
        body = (
            "<p>Su reserva ha sido cancelada.</p>"
            f"<p>Penalización: {_money(reservation.penalty_amount or 0)}. "
            f"Reembolso: {_money(reservation.refund_amount or 0)}.</p>"
        )
    elif kind == NotificationDispatch.Kind.MODIFICATION:
        subject = f"Reserva {reservation.code} modificada"
        body = "<p>Las fechas de su reserva fueron modificadas.</p>"
    elif kind == NotificationDispatch.Kind.PACKAGE_CONFIRMATION:
        subject = f"Paquete corporativo {reservation.package_code} confirmado"
        rooms = reservation.children.select_related("room").order_by("id")
        room_lines = "".join(
            f"<li>Habitación {child.room.number} ({child.room.room_type}) - {child.code}</li>" for child in rooms
        )
        body = "<p>Su paquete corporativo ha sido confirmado.</p>"
        if room_lines:
            body += f"<p>Habitaciones:</p><ul>{room_lines}</ul>"
    else:
        raise ValueError(f"Unknown notification kind: {kind}")

    return subject, f"<html><body>{greeting}{body}{_details(reservation)}</body></html>"


# ============================================================================
# DELIVERY
# ============================================================================

def send_email(recipient_email: str, subject: str, html_message: str) -> None:
    send_mail(
        subject=subject,
        message=strip_tags(html_message),
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[recipient_email],
        html_message=html_message,
        fail_silently=False,
    )


def deliver(dispatch: NotificationDispatch) -> bool:
    """Send one dispatch; on failure mark it failed and record an incident."""
    if dispatch.status == NotificationDispatch.Status.SENT:
        return True
    try:
        subject, html_message = render_notification(dispatch)
        send_email(dispatch.recipient, subject, html_message)
    except Exception as e:
        logger.error(
            f"Failed to send {dispatch.kind} notification {dispatch.pk} to {dispatch.recipient}: {e}",
            exc_info=True,
        )
        dispatch.mark_failed(str(e))
        record_incident(
            dispatch.reservation,
            Incident.Kind.NOTIFICATION_FAILED,
            f"No se pudo enviar la notificación ({dispatch.kind}): {e}",
            dispatch=dispatch,
        )
        return False

    dispatch.mark_sent()
    logger.info(f"Notification {dispatch.kind} sent to {dispatch.recipient}")
    return True
