"""
Base Domain Classes

Building blocks shared by the bounded contexts:
- ValueObject: Immutable objects compared by value
- AggregateRoot: Mixin for Django models that act as consistency boundaries
  and record domain events
- DomainEvent: Events that represent something that happened
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List
from uuid import UUID, uuid4


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects

    Value objects are immutable and have no identity.
    Two value objects are equal if all their attributes are equal.
    """
    pass


class AggregateRoot:
    """
    Mixin for aggregate roots persisted as Django models

    Aggregates are the consistency boundaries in DDD. They collect domain
    events that the unit of work publishes after a successful commit.
    Events live on the instance only; they are never persisted.
    """

    def add_event(self, event: 'DomainEvent'):
        """Add a domain event to be published"""
        self.__dict__.setdefault('_pending_events', []).append(event)

    def clear_events(self):
        """Clear all collected events (called after publishing)"""
        self.__dict__.pop('_pending_events', None)

    @property
    def events(self) -> List['DomainEvent']:
        """Get copy of collected events"""
        return list(self.__dict__.get('_pending_events', []))


@dataclass(kw_only=True)
class DomainEvent:
    """
    Base class for domain events

    Domain events represent something that happened in the domain.
    They are used to communicate between bounded contexts.
    """
    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    aggregate_id: UUID | None = None

    def to_dict(self) -> dict:
        """Convert event to dictionary for serialization"""
        return {
            'event_id': str(self.event_id),
            'event_type': self.__class__.__name__,
            'occurred_at': self.occurred_at.isoformat(),
            'aggregate_id': str(self.aggregate_id) if self.aggregate_id else None,
        }
