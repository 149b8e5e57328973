"""Catalog models: bookable structures and their time slots."""

from __future__ import annotations

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.exceptions import NotFound, ValidationFailed
from shared.domain.value_objects import format_clock_time, parse_clock_time


class Structure(models.Model):
    """A shared resource guests can reserve by time slot."""

    class ManagementType(models.TextChoices):
        BY_STRUCTURE = "by_structure", _("Por estrutura")
        BY_UNIT = "by_unit", _("Por unidade")

    class DefaultStatus(models.TextChoices):
        OPEN = "open", _("Aberto")
        CLOSED = "closed", _("Fechado")

    class ApprovalMode(models.TextChoices):
        AUTOMATIC = "automatic", _("Automática")
        MANUAL = "manual", _("Manual")

    name = models.CharField(max_length=120)
    photo_ref = models.CharField(
        max_length=500,
        blank=True,
        help_text=_("Opaque reference to the structure photo."),
    )
    management_type = models.CharField(
        max_length=20,
        choices=ManagementType.choices,
        default=ManagementType.BY_STRUCTURE,
    )
    units = models.JSONField(
        default=list,
        blank=True,
        help_text=_("Ordered unit names; only used when managed by unit."),
    )
    default_status = models.CharField(
        max_length=10,
        choices=DefaultStatus.choices,
        default=DefaultStatus.OPEN,
    )
    approval_mode = models.CharField(
        max_length=10,
        choices=ApprovalMode.choices,
        default=ApprovalMode.AUTOMATIC,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Estrutura")
        verbose_name_plural = _("Estruturas")
        ordering = ["name", "id"]

    def __str__(self) -> str:
        return self.name

    @property
    def uses_units(self) -> bool:
        return self.management_type == self.ManagementType.BY_UNIT

    @property
    def requires_approval(self) -> bool:
        return self.approval_mode == self.ApprovalMode.MANUAL

    def unit_choices(self) -> list[str | None]:
        """Units to render a day grid for; [None] for a shared pool"""
        return list(self.units) if self.uses_units else [None]

    def normalize_unit(self, unit: str | None) -> str:
        """
        Storage form of a unit for this structure

        by_structure structures ignore the unit (stored as ""); by_unit
        structures require one of their configured units.
        """
        if not self.uses_units:
            return ""
        unit = (unit or "").strip()
        if not unit:
            raise ValidationFailed(f"Structure '{self.name}' is managed by unit: a unit is required")
        if unit not in self.units:
            raise ValidationFailed(f"Unknown unit '{unit}' for structure '{self.name}'")
        return unit

    def find_time_slot(self, start_time, end_time=None) -> "TimeSlot":
        """Slot of this structure starting at `start_time` (and ending at `end_time` if given)"""
        start = parse_clock_time(start_time)
        for slot in self.time_slots.all():
            if slot.start_time != start:
                continue
            if end_time is not None and slot.end_time != parse_clock_time(end_time):
                raise ValidationFailed(
                    f"Slot starting at {format_clock_time(start)} ends at "
                    f"{format_clock_time(slot.end_time)}, not {end_time}"
                )
            return slot
        raise NotFound(f"Structure '{self.name}' has no slot starting at {format_clock_time(start)}")


class TimeSlot(models.Model):
    """A (start, end) window on a structure's daily grid."""

    structure = models.ForeignKey(
        Structure,
        on_delete=models.CASCADE,
        related_name="time_slots",
    )
    slot_id = models.CharField(max_length=32)
    start_time = models.TimeField()
    end_time = models.TimeField()
    label = models.CharField(max_length=50)

    class Meta:
        verbose_name = _("Horário")
        verbose_name_plural = _("Horários")
        ordering = ["start_time", "end_time", "id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_time__gt=models.F("start_time")),
                name="timeslot_valid_window",
            ),
        ]
        indexes = [
            models.Index(fields=["structure", "start_time"], name="timeslot_structure_start_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.structure_id}: {self.label}"
