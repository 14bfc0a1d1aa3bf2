"""
Base Domain Classes

Building blocks shared by the booking contexts:
- ValueObject: Immutable objects compared by value
- DomainEvent: Something that happened and must be announced after commit
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

from django.utils import timezone


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects

    Value objects are immutable and have no identity.
    Two value objects are equal if all their attributes are equal.
    """
    pass


@dataclass(kw_only=True)
class DomainEvent:
    """
    Base class for domain events

    Events are collected by the unit of work while a transaction is open
    and handed to the message bus once it commits.
    """
    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=timezone.now)

    @property
    def name(self) -> str:
        return self.__class__.__name__

    def to_dict(self) -> dict:
        """Convert event to dictionary for logging and task payloads"""
        return {
            'event_id': str(self.event_id),
            'event_type': self.name,
            'occurred_at': self.occurred_at.isoformat(),
        }
