"""
Cancellation policy

Pure computation of the cancellation tier for a reservation: how many
hours remain before check-in decides what share of the paid total is
kept as a penalty.

    hours >= 48        -> 0 %    (free window)
    24 <= hours < 48   -> 50 %
    hours < 24         -> 100 %

Cancelling is denied for reservations already cancelled or completed and
once the check-in instant has passed.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from decimal import Decimal

from shared.domain.value_objects import round_pesos

TIER_FREE = "free"
TIER_PARTIAL = "partial"
TIER_FULL = "full"

DENIED_ALREADY_CANCELLED = "already_cancelled"
DENIED_COMPLETED = "completed"
DENIED_CHECKIN_PASSED = "checkin_passed"
DENIED_PACKAGE_MEMBER = "package_member"

_DENIAL_MESSAGES = {
    DENIED_ALREADY_CANCELLED: "La reserva ya fue cancelada.",
    DENIED_COMPLETED: "No se puede cancelar una reserva completada.",
    DENIED_CHECKIN_PASSED: "No se puede cancelar: la fecha de check-in ya pasó.",
    DENIED_PACKAGE_MEMBER: "Las habitaciones de un paquete se cancelan junto con el paquete.",
}


@dataclass(frozen=True)
class CancellationQuote:
    allowed: bool
    reason: str | None
    tier: str | None
    penalty_percent: int
    penalty_amount: Decimal
    refund_amount: Decimal
    hours_until_checkin: Decimal
    within_free_window: bool

    @property
    def message(self) -> str:
        if self.reason:
            return _DENIAL_MESSAGES.get(self.reason, self.reason)
        if self.penalty_percent == 0:
            return "Cancelación gratuita: se reembolsa el total pagado."
        return (
            f"Cancelación con penalización del {self.penalty_percent}%: "
            f"se cobran {self.penalty_amount} y se reembolsan {self.refund_amount}."
        )

    def to_dict(self) -> dict:
        data = asdict(self)
        data["message"] = self.message
        return data


def hours_between(now: datetime, checkin_at: datetime) -> Decimal:
    seconds = Decimal(str((checkin_at - now).total_seconds()))
    return seconds / Decimal("3600")


def evaluate_cancellation(
    state: str,
    checkin_at: datetime,
    total,
    now: datetime,
    *,
    free_hours: int = 48,
    partial_hours: int = 24,
    partial_percent: int = 50,
    package_member: bool = False,
) -> CancellationQuote:
    total = Decimal(str(total))
    hours = hours_between(now, checkin_at)
    reported_hours = hours.quantize(Decimal("0.01"))

    denial = None
    if package_member:
        denial = DENIED_PACKAGE_MEMBER
    elif state == "cancelled":
        denial = DENIED_ALREADY_CANCELLED
    elif state == "completed":
        denial = DENIED_COMPLETED
    elif now > checkin_at:
        denial = DENIED_CHECKIN_PASSED

    if denial:
        return CancellationQuote(
            allowed=False,
            reason=denial,
            tier=None,
            penalty_percent=0,
            penalty_amount=Decimal("0"),
            refund_amount=Decimal("0"),
            hours_until_checkin=reported_hours,
            within_free_window=False,
        )

    if hours >= free_hours:
        tier, percent = TIER_FREE, 0
    elif hours >= partial_hours:
        tier, percent = TIER_PARTIAL, partial_percent
    else:
        tier, percent = TIER_FULL, 100

    penalty = round_pesos(total * Decimal(percent) / Decimal("100"))
    return CancellationQuote(
        allowed=True,
        reason=None,
        tier=tier,
        penalty_percent=percent,
        penalty_amount=penalty,
        refund_amount=total - penalty,
        hours_until_checkin=reported_hours,
        within_free_window=tier == TIER_FREE,
    )
