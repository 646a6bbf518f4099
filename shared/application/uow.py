"""
Unit of Work

One unit of work is one database transaction. Aggregates touched inside it
hand their domain events over; the events are published on the message bus
only once the outermost transaction has committed, and dropped on rollback.

Usage:
    with DjangoUnitOfWork() as uow:
        booking = lock_booking(booking_id)
        booking.confirm()
        booking.save(update_fields=[...])
        uow.collect_events(booking)
    # BookingConfirmed is published after commit
"""

from abc import ABC, abstractmethod
from typing import List, Optional
import logging

from django.db import DEFAULT_DB_ALIAS, NotSupportedError, transaction

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)


class AbstractUnitOfWork(ABC):
    """Transaction boundary of a use case"""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.commit()
        else:
            self.rollback()

    @abstractmethod
    def commit(self):
        pass

    @abstractmethod
    def rollback(self):
        pass

    @abstractmethod
    def collect_events(self, aggregate):
        pass


class DjangoUnitOfWork(AbstractUnitOfWork):
    """
    Unit of work on top of ``transaction.atomic``

    Nesting is allowed: an inner unit of work becomes a savepoint and its
    events still wait for the outermost commit, because publication goes
    through ``transaction.on_commit``.
    """

    def __init__(self, using: Optional[str] = None):
        self.using = using or DEFAULT_DB_ALIAS
        self._events: List[DomainEvent] = []
        self._atomic = None

    def __enter__(self):
        self._atomic = transaction.atomic(using=self.using)
        self._atomic.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            super().__exit__(exc_type, exc_val, exc_tb)
        finally:
            atomic, self._atomic = self._atomic, None
            if atomic is not None:
                atomic.__exit__(exc_type, exc_val, exc_tb)

    def collect_events(self, aggregate):
        """Take the pending events off ``aggregate``"""
        pending = getattr(aggregate, 'events', None)
        if not pending:
            return
        self._events.extend(pending)
        aggregate.clear_events()
        logger.debug(f"Collected {len(pending)} event(s) from {aggregate.__class__.__name__} {aggregate.pk}")

    def commit(self):
        events, self._events = self._events, []
        if events:
            transaction.on_commit(lambda: _publish(events), using=self.using)

    def rollback(self):
        if self._events:
            logger.warning(f"Transaction rolled back, {len(self._events)} event(s) discarded")
        self._events = []


def _publish(events: List[DomainEvent]) -> None:
    from shared.application.message_bus import message_bus

    logger.info(f"Publishing {len(events)} domain event(s) after commit")
    message_bus.publish_events(events)


def lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection(queryset.db).in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset
