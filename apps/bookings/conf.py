"""Engine tunables read from ``settings.BOOKING_ENGINE``."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from django.conf import settings  # type: ignore

DEFAULTS: dict[str, Any] = {
    # IVA applied on top of every subtotal, in percent
    "TAX_PERCENT": Decimal("19"),
    "FREE_CANCELLATION_HOURS": 48,
    "PARTIAL_PENALTY_HOURS": 24,
    "PARTIAL_PENALTY_PERCENT": 50,
    "MODIFICATION_MIN_HOURS": 24,
    "CATERING_MAX_GUESTS": 200,
    "CATERING_MIN_LEAD_HOURS": 48,
    "PACKAGE_DISCOUNT_PERCENT": 10,
    # Package reservations wait for a hotel administrator when enabled
    "PACKAGE_REQUIRES_APPROVAL": False,
    "MAX_HALL_ALTERNATIVES": 3,
    "CODE_MAX_ATTEMPTS": 5,
}


def engine_setting(name: str) -> Any:
    overrides = getattr(settings, "BOOKING_ENGINE", {}) or {}
    if name in overrides:
        return overrides[name]
    return DEFAULTS[name]
