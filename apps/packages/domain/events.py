"""
Package Domain Events
"""

from dataclasses import dataclass

from shared.domain.base import DomainEvent


@dataclass
class PackageConfirmed(DomainEvent):
    """
    Event: Every component of a corporate package was reserved

    Triggers:
    - Send the package confirmation with the room list
    """
    package_id: int
    package_code: str
    parent_reservation_id: int
