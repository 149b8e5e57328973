"""
Booking Ledger Errors

Raised by ledger commands and translated to HTTP responses by
DomainErrorMixin.
"""

from shared.domain.exceptions import Conflict, ValidationFailed


class SlotInPast(ValidationFailed):
    """The requested slot has already started."""

    code = 'slot_in_past'


class SlotTaken(Conflict):
    """
    The slot is held by another stay or blocked by staff

    Recoverable: the caller should re-read availability and pick another
    slot. The engine never retries on its own.
    """

    code = 'slot_taken'


class SlotClosed(Conflict):
    """The structure is closed for this day."""

    code = 'slot_closed'


class InvalidTransition(Conflict):
    """The booking status does not allow this change."""

    code = 'invalid_transition'
