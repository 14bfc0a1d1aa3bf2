"""Human-readable codes for reservations and packages.

Reservation codes are ``RES`` + 8 random characters, inserted with a
retry when the unique constraint rejects a collision. Package codes are
``PKG`` + ``yymmdd`` + a 3-digit daily sequence taken from an atomic
counter row, so two packages confirmed on the same day never share one.
"""

from __future__ import annotations

import logging
import secrets
import string
from datetime import date
from typing import Callable, TypeVar

from django.db import IntegrityError, transaction  # type: ignore
from django.db.models import F  # type: ignore
from django.utils import timezone  # type: ignore

from .conf import engine_setting
from .models import CodeSequence, Reservation

logger = logging.getLogger(__name__)

T = TypeVar("T")

RESERVATION_PREFIX = "RES"
PACKAGE_PREFIX = "PKG"
CODE_ALPHABET = string.ascii_uppercase + string.digits
CODE_LENGTH = 8


class CodeAllocationError(RuntimeError):
    """No free code was found within the configured number of attempts."""


def generate_reservation_code() -> str:
    return RESERVATION_PREFIX + "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))


def create_with_unique_code(factory: Callable[[str], T]) -> T:
    """Call ``factory(code)`` until the insert does not collide on ``code``.

    Each attempt runs in its own savepoint. Integrity errors that are not a
    code collision propagate unchanged.
    """
    attempts = engine_setting("CODE_MAX_ATTEMPTS")
    for attempt in range(1, attempts + 1):
        code = generate_reservation_code()
        try:
            with transaction.atomic():
                return factory(code)
        except IntegrityError:
            if not Reservation.objects.filter(code=code).exists():
                raise
            logger.warning(f"Reservation code collision on {code} (attempt {attempt}/{attempts})")
    raise CodeAllocationError(f"Could not allocate a unique reservation code after {attempts} attempts")


def next_package_code(today: date | None = None) -> str:
    today = today or timezone.localdate()
    key = f"{PACKAGE_PREFIX}{today:%y%m%d}"
    with transaction.atomic():
        sequence, _ = CodeSequence.objects.get_or_create(key=key)
        CodeSequence.objects.filter(pk=sequence.pk).update(value=F("value") + 1)
        sequence.refresh_from_db(fields=["value"])
    return f"{key}{sequence.value:03d}"
