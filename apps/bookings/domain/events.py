"""
Booking Domain Events

Events that represent things that have happened in the booking ledger.
They are published on the message bus after the transaction commits.
"""

from dataclasses import dataclass, field
from datetime import date, time
from typing import List, Optional

from shared.domain.base import DomainEvent


# ===== Guest requests =====

@dataclass(kw_only=True)
class BookingCreated(DomainEvent):
    """
    Event: A booking was created for a stay

    Triggers:
    - Activity log entry (requested, confirmed or changed by guest)
    - Notification task for the guest message queue
    """
    booking_id: int
    structure_id: Optional[int]
    structure_name: str
    unit: Optional[str]
    date: date
    start_time: time
    end_time: time
    stay_id: str
    guest_name: str
    status: str
    scheduled_by_staff: bool = False
    superseded_booking_id: Optional[int] = None


@dataclass(kw_only=True)
class BookingCancelled(DomainEvent):
    """
    Event: A booking or block moved to cancelado

    Triggers:
    - Activity log entry (cancelled by guest or by staff)

    Supersession does not publish this event; BookingCreated carries the
    superseded booking id instead.
    """
    booking_id: int
    structure_id: Optional[int]
    structure_name: str
    date: date
    start_time: time
    stay_id: str
    guest_name: str
    previous_status: str
    source: str
    reason: str = ''


# ===== Staff approval =====

@dataclass(kw_only=True)
class BookingApproved(DomainEvent):
    """
    Event: Staff approved a request (solicitado -> confirmado)

    Triggers:
    - Activity log entry
    - Notification task for the guest message queue
    """
    booking_id: int
    structure_id: Optional[int]
    structure_name: str
    date: date
    start_time: time
    stay_id: str
    guest_name: str


@dataclass(kw_only=True)
class BookingRejected(DomainEvent):
    """
    Event: Staff declined a request (solicitado -> cancelado)

    Triggers:
    - Activity log entry
    """
    booking_id: int
    structure_id: Optional[int]
    structure_name: str
    date: date
    start_time: time
    stay_id: str
    guest_name: str
    reason: str = ''


# ===== Staff schedule =====

@dataclass(kw_only=True)
class SlotBlocked(DomainEvent):
    """Event: Staff blocked a single slot"""
    booking_id: int
    structure_id: int
    structure_name: str
    unit: Optional[str]
    date: date
    start_time: time


@dataclass(kw_only=True)
class SlotUnblocked(DomainEvent):
    """Event: Staff released a blocked slot"""
    booking_id: int
    structure_id: int
    structure_name: str
    unit: Optional[str]
    date: date
    start_time: time


@dataclass(kw_only=True)
class BulkSlotsUpdated(DomainEvent):
    """
    Event: A bulk block or release was applied

    Triggers:
    - One activity log entry for the whole batch
    """
    date: date
    action: str
    applied: List[dict] = field(default_factory=list)
    skipped: List[dict] = field(default_factory=list)
