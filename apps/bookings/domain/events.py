"""
Booking Domain Events

Published through the message bus after the transaction that produced
them commits. The notification app subscribes to all of them.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from shared.domain.base import DomainEvent


@dataclass
class ReservationConfirmed(DomainEvent):
    """
    Event: A reservation was persisted as pending or confirmed

    Triggers:
    - Send confirmation email to the guest
    """
    reservation_id: int
    code: str


@dataclass
class ReservationCancelled(DomainEvent):
    """
    Event: A reservation was cancelled

    Triggers:
    - Send cancellation notice with penalty and refund
    """
    reservation_id: int
    code: str
    penalty_amount: Decimal
    refund_amount: Decimal


@dataclass
class ReservationDatesModified(DomainEvent):
    """
    Event: The dates of a confirmed reservation changed

    Triggers:
    - Send modification notice with the new dates and total
    """
    reservation_id: int
    code: str
    previous_check_in: date
    previous_check_out: date


@dataclass
class ReservationApproved(DomainEvent):
    """
    Event: A hotel administrator confirmed a pending reservation

    Triggers:
    - Send confirmation email (package notice for package reservations)
    """
    reservation_id: int
    code: str
