"""
Base Domain Classes

Building blocks shared by every bounded context:
- ValueObject: immutable objects compared by value
- EventRecorder: lets an ORM aggregate collect domain events
- DomainEvent: something that happened, published after commit
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List
from uuid import UUID, uuid4


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects

    Value objects are immutable and have no identity.
    Two value objects are equal if all their attributes are equal.
    """
    pass


class EventRecorder:
    """
    Mixin for aggregate roots persisted through the Django ORM

    Events are kept on the instance (never persisted) until the unit of
    work collects them. They are published only after the transaction
    commits.
    """

    def add_event(self, event: 'DomainEvent'):
        self.__dict__.setdefault('_pending_events', []).append(event)

    def clear_events(self):
        self.__dict__.get('_pending_events', []).clear()

    @property
    def events(self) -> List['DomainEvent']:
        """Copy of the events collected so far"""
        return list(self.__dict__.get('_pending_events', []))


@dataclass(kw_only=True)
class DomainEvent:
    """
    Base class for domain events

    Fields are keyword-only so that subclasses can declare required
    fields after the defaulted ones declared here.
    """
    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=datetime.now)
    aggregate_id: Any = None

    def to_dict(self) -> dict:
        """Convert event to dictionary for logging and task payloads"""
        return {
            'event_id': str(self.event_id),
            'event_type': self.__class__.__name__,
            'occurred_at': self.occurred_at.isoformat(),
            'aggregate_id': str(self.aggregate_id) if self.aggregate_id is not None else None,
        }
