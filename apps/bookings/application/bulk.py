"""
Bulk Operation Engine

Blocks or releases many slots of one day in a single transaction. Every
selection is validated before the first write; a failure on any of them
leaves the ledger untouched.
"""

from dataclasses import asdict, dataclass, field
from datetime import date, time
from typing import List, Optional, Tuple
import logging

from shared.application.uow import DjangoUnitOfWork
from shared.domain.exceptions import ValidationFailed
from shared.domain.value_objects import format_clock_time
from apps.bookings import services
from apps.bookings.domain.events import BulkSlotsUpdated
from apps.bookings.models import Booking

logger = logging.getLogger(__name__)


BLOCK = 'block'
RELEASE = 'release'
BULK_ACTIONS = (BLOCK, RELEASE)


@dataclass(frozen=True)
class SlotSelection:
    """One (structure, unit, start time) picked on the staff grid"""
    structure_id: int
    unit: Optional[str]
    start_time: time


@dataclass
class BulkSlotsCommand:
    """Command to block or release a set of slots on one day"""
    date: date
    action: str
    selections: List[SlotSelection]
    created_by_id: Optional[int] = None


@dataclass
class BulkOutcome:
    structure_id: int
    unit: Optional[str]
    start_time: str
    booking_id: Optional[int]
    result: str


@dataclass
class BulkResult:
    """What was applied and what was skipped because a guest holds the slot"""
    action: str
    date: date
    applied: List[BulkOutcome] = field(default_factory=list)
    skipped: List[BulkOutcome] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            'action': self.action,
            'date': self.date.isoformat(),
            'applied': [asdict(outcome) for outcome in self.applied],
            'skipped': [asdict(outcome) for outcome in self.skipped],
        }


class BulkSlotsHandler:
    """
    Handler for BulkSlots command

    block:
    - free slot -> new bloqueado record
    - already bloqueado -> kept
    - active record without a stay -> replaced by a block
    - record held by a stay -> skipped (reported, never raised)

    release:
    - any active record -> cancelado
    - free slot -> untouched
    """

    def handle(self, command: BulkSlotsCommand) -> BulkResult:
        if command.action not in BULK_ACTIONS:
            raise ValidationFailed(f"Unknown bulk action {command.action!r}, expected block or release")
        if not command.selections:
            raise ValidationFailed("Select at least one slot")
        services.ensure_staff_can_edit(command.date)

        logger.info(
            f"Bulk {command.action} of {len(command.selections)} slots on {command.date}"
        )
        result = BulkResult(action=command.action, date=command.date)

        with services.slot_conflicts_as_slot_taken(f"bulk {command.action} on {command.date}"):
            with DjangoUnitOfWork() as uow:
                structures = services.lock_structures(
                    selection.structure_id for selection in command.selections
                )
                targets = self._validate(command.selections, structures)

                for structure, unit, time_slot in targets:
                    current = services.find_slot_booking(structure, unit, command.date, time_slot)
                    if command.action == BLOCK:
                        self._block(command, result, structure, unit, time_slot, current)
                    else:
                        self._release(result, structure, unit, time_slot, current)

                uow.record(
                    BulkSlotsUpdated(
                        date=command.date,
                        action=command.action,
                        applied=[asdict(outcome) for outcome in result.applied],
                        skipped=[asdict(outcome) for outcome in result.skipped],
                    )
                )

        logger.info(
            f"Bulk {command.action} on {command.date}: "
            f"{len(result.applied)} applied, {len(result.skipped)} skipped"
        )
        return result

    def _validate(self, selections, structures) -> List[Tuple]:
        targets = []
        seen = set()
        for selection in selections:
            structure = structures[int(selection.structure_id)]
            unit = structure.normalize_unit(selection.unit)
            time_slot = structure.find_time_slot(selection.start_time)
            key = (structure.pk, unit, time_slot.start_time)
            if key in seen:
                continue
            seen.add(key)
            targets.append((structure, unit, time_slot))
        return targets

    def _outcome(self, structure, unit, time_slot, booking, result: str) -> BulkOutcome:
        return BulkOutcome(
            structure_id=structure.pk,
            unit=unit or None,
            start_time=format_clock_time(time_slot.start_time),
            booking_id=booking.pk if booking else None,
            result=result,
        )

    def _block(self, command, result: BulkResult, structure, unit, time_slot, current) -> None:
        if current is not None and current.stay_id:
            result.skipped.append(self._outcome(structure, unit, time_slot, current, 'held_by_guest'))
            return
        if current is not None and current.status == Booking.Status.BLOQUEADO:
            result.applied.append(self._outcome(structure, unit, time_slot, current, 'kept'))
            return

        outcome = 'blocked'
        if current is not None:
            current.cancel(Booking.CancellationSource.STAFF, "Substituído por bloqueio")
            outcome = 'replaced'

        block = Booking.objects.create(
            structure=structure,
            structure_name=structure.name,
            unit=unit,
            date=command.date,
            start_time=time_slot.start_time,
            end_time=time_slot.end_time,
            status=Booking.Status.BLOQUEADO,
            created_by_id=command.created_by_id,
        )
        result.applied.append(self._outcome(structure, unit, time_slot, block, outcome))

    def _release(self, result: BulkResult, structure, unit, time_slot, current) -> None:
        if current is None:
            return
        current.cancel(Booking.CancellationSource.STAFF, "Liberado em massa")
        result.applied.append(self._outcome(structure, unit, time_slot, current, 'released'))
