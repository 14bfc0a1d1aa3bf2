"""Errors raised by the booking engine.

Each carries its HTTP status; ``shared.infrastructure.exception_handler``
turns them into responses. None of them is retried automatically.
"""

from __future__ import annotations

from typing import Any, Iterable

from shared.domain.exceptions import DomainError


def _summaries(reservations: Iterable[Any]) -> list[dict[str, Any]]:
    summaries = []
    for item in reservations:
        if hasattr(item, "conflict_summary"):
            summaries.append(item.conflict_summary())
        else:
            summaries.append(item)
    return summaries


class ReservationValidationError(DomainError):
    status_code = 400
    default_code = "invalid"
    default_message = "Los datos de la reserva no son válidos."


class ResourceNotFoundError(DomainError):
    status_code = 404
    default_code = "not_found"
    default_message = "El recurso solicitado no existe o no está disponible para reservas."


class ReservationConflictError(DomainError):
    """The resource is taken for the requested dates, or a concurrent write won."""

    status_code = 409
    default_code = "conflict"
    default_message = "El recurso no está disponible para las fechas seleccionadas."

    def __init__(self, message: str | None = None, *, conflicts: Iterable[Any] = (), code: str | None = None, extra: dict | None = None):
        self.conflicts = list(conflicts)
        payload = {"conflicts": _summaries(self.conflicts)}
        payload.update(extra or {})
        super().__init__(message, code=code, extra=payload)


class CancellationAcknowledgementRequired(ReservationValidationError):
    """A penalty applies and the caller has not accepted it yet."""

    default_code = "acknowledgement_required"
    default_message = "La cancelación tiene penalización. Confirme que acepta el cargo para continuar."

    def __init__(self, quote):
        self.quote = quote
        extra = {
            "requires_acknowledgement": True,
            "penalty": quote.penalty_amount,
            "refund": quote.refund_amount,
            "penalty_percent": quote.penalty_percent,
            "hours_until_checkin": quote.hours_until_checkin,
        }
        super().__init__(code=self.default_code, extra=extra)


class PackageUnavailableError(ReservationConflictError):
    """A hall or room component of a package is unavailable; nothing was created."""

    default_code = "package_unavailable"
    default_message = "Uno o más componentes del paquete no están disponibles."

    def __init__(self, report: dict[str, Any], message: str | None = None):
        self.report = report
        super().__init__(message, extra={"validation": report})


class PackagePartialFailureError(ReservationConflictError):
    """
    Some package reservations were persisted and at least one failed.

    Persisted records are kept; ``reserved`` and ``failed`` tell the caller
    which components need manual follow-up.
    """

    default_code = "package_partial_failure"
    default_message = "El paquete se confirmó parcialmente: algunas habitaciones no pudieron reservarse."

    def __init__(self, package_code: str, reserved: list[dict[str, Any]], failed: list[dict[str, Any]]):
        self.package_code = package_code
        self.reserved = reserved
        self.failed = failed
        super().__init__(
            extra={
                "partial": True,
                "package_code": package_code,
                "reserved": reserved,
                "failed": failed,
            }
        )
