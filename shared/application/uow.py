"""
Unit of Work Pattern

Wraps a ledger operation in one database transaction and makes sure
domain events are published only after that transaction commits.
"""

from typing import List
import logging

from django.db import transaction

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)


class DjangoUnitOfWork:
    """
    Django implementation of Unit of Work

    The exclusivity check and the write of a ledger operation must run
    inside the same `with` block so that both see the same locked rows.

    Usage:
        with DjangoUnitOfWork() as uow:
            structure = lock_structure(structure_id)
            ensure_slot_is_free(...)
            booking = Booking.objects.create(...)
            booking.add_event(BookingCreated(...))
            uow.collect_events(booking)
        # BookingCreated is published here, after commit
    """

    def __init__(self):
        self._events: List[DomainEvent] = []
        self._atomic = None

    def __enter__(self):
        self._atomic = transaction.atomic()
        self._atomic.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            if exc_type is None:
                self.commit()
            else:
                self.rollback()
        finally:
            self._atomic.__exit__(exc_type, exc_val, exc_tb)
            self._atomic = None

    def commit(self):
        """
        Schedule publication of the collected events

        transaction.on_commit() defers the callback until the outermost
        atomic block commits; nothing is published if it rolls back.
        """
        events = self._events.copy()
        self._events.clear()
        logger.debug(f"Committing unit of work with {len(events)} events")

        if events:
            transaction.on_commit(lambda: self._publish_events(events))

    def rollback(self):
        if self._events:
            logger.warning(f"Rolling back unit of work, discarding {len(self._events)} events")
        self._events.clear()

    def collect_events(self, aggregate):
        """Move the pending events of an aggregate into this unit of work"""
        new_events = aggregate.events
        if new_events:
            self._events.extend(new_events)
            aggregate.clear_events()
            logger.debug(
                f"Collected {len(new_events)} events from "
                f"{aggregate.__class__.__name__} (ID: {aggregate.pk})"
            )

    def record(self, event: DomainEvent):
        """Add an event that does not belong to a single aggregate"""
        self._events.append(event)

    def _publish_events(self, events: List[DomainEvent]):
        from shared.application.message_bus import message_bus

        logger.info(f"Publishing {len(events)} domain events after commit")
        message_bus.publish_events(events)
