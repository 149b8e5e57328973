"""Booking ledger models."""

from __future__ import annotations

import secrets

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.base import EventRecorder

from .domain.exceptions import InvalidTransition


class BookingQuerySet(models.QuerySet):
    def active(self):  # type: ignore
        return self.filter(status__in=Booking.ACTIVE_STATUSES)

    def held_by_stay(self, stay_id: str):  # type: ignore
        return self.filter(stay_id=stay_id, status__in=Booking.GUEST_HELD_STATUSES)


class Booking(EventRecorder, models.Model):
    """A guest reservation or a staff block of one slot on one day."""

    class Status(models.TextChoices):
        SOLICITADO = "solicitado", _("Solicitado")
        CONFIRMADO = "confirmado", _("Confirmado")
        BLOQUEADO = "bloqueado", _("Bloqueado")
        CANCELADO = "cancelado", _("Cancelado")

    class CancellationSource(models.TextChoices):
        GUEST = "guest", _("Hóspede")
        STAFF = "staff", _("Equipe")
        SUPERSEDED = "superseded", _("Substituída")
        SYSTEM = "system", _("Sistema")

    ACTIVE_STATUSES = (Status.SOLICITADO, Status.CONFIRMADO, Status.BLOQUEADO)
    GUEST_HELD_STATUSES = (Status.SOLICITADO, Status.CONFIRMADO)

    TRANSITIONS = {
        Status.SOLICITADO: {Status.CONFIRMADO, Status.CANCELADO},
        Status.CONFIRMADO: {Status.CANCELADO},
        Status.BLOQUEADO: {Status.CANCELADO},
        Status.CANCELADO: set(),
    }

    booking_code = models.CharField(max_length=12, unique=True, editable=False)
    structure = models.ForeignKey(
        "structures.Structure",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="bookings",
    )
    structure_name = models.CharField(
        max_length=120,
        help_text=_("Structure name at booking time, kept if the structure is deleted."),
    )
    unit = models.CharField(
        max_length=60,
        blank=True,
        help_text=_("Empty for structures managed as a whole."),
    )
    date = models.DateField()
    start_time = models.TimeField()
    end_time = models.TimeField()
    stay_id = models.CharField(max_length=64, blank=True, db_index=True)
    guest_name = models.CharField(max_length=150, blank=True)
    status = models.CharField(max_length=20, choices=Status.choices)
    preference_time = models.TimeField(null=True, blank=True)
    selected_options = models.JSONField(default=list, blank=True)
    notes = models.TextField(blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    confirmed_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancellation_source = models.CharField(
        max_length=20,
        choices=CancellationSource.choices,
        blank=True,
    )
    cancellation_reason = models.CharField(max_length=255, blank=True)
    superseded_by = models.ForeignKey(
        "self",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    confirmation_sent_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = BookingQuerySet.as_manager()

    class Meta:
        verbose_name = _("Agendamento")
        verbose_name_plural = _("Agendamentos")
        ordering = ["date", "start_time", "structure_name", "unit"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_time__gt=models.F("start_time")),
                name="booking_valid_window",
            ),
            models.UniqueConstraint(
                fields=["structure", "unit", "date", "start_time"],
                condition=models.Q(status__in=["solicitado", "confirmado", "bloqueado"]),
                name="booking_unique_active_slot",
            ),
            models.UniqueConstraint(
                fields=["stay_id", "structure", "date"],
                condition=models.Q(status__in=["solicitado", "confirmado"]) & ~models.Q(stay_id=""),
                name="booking_unique_stay_per_structure_day",
            ),
        ]
        indexes = [
            models.Index(fields=["date", "status"], name="booking_date_status_idx"),
            models.Index(fields=["status", "created_at"], name="booking_status_created_idx"),
        ]

    def __str__(self) -> str:
        return f"Booking #{self.booking_code} {self.structure_name} {self.date} {self.start_time:%H:%M}"

    def save(self, *args, **kwargs):  # type: ignore
        if self._state.adding and not self.booking_code:
            self.booking_code = self.generate_booking_code()
        super().save(*args, **kwargs)

    @staticmethod
    def generate_booking_code() -> str:
        return secrets.token_hex(4).upper()

    @property
    def is_active(self) -> bool:
        return self.status in self.ACTIVE_STATUSES

    @property
    def is_block(self) -> bool:
        return not self.stay_id

    @property
    def unit_or_none(self) -> str | None:
        return self.unit or None

    def can_transition_to(self, new_status: str) -> bool:
        return new_status in self.TRANSITIONS.get(self.status, set())

    def _transition(self, new_status: str) -> None:
        if not self.can_transition_to(new_status):
            raise InvalidTransition(
                f"Booking {self.pk} cannot go from {self.status} to {new_status}",
                status=self.status,
            )
        self.status = new_status

    def confirm(self) -> None:
        self._transition(self.Status.CONFIRMADO)
        self.confirmed_at = timezone.now()
        self.save(update_fields=["status", "confirmed_at", "updated_at"])

    def cancel(self, source: str, reason: str = "") -> None:
        self._transition(self.Status.CANCELADO)
        self.cancellation_source = source
        self.cancellation_reason = reason
        self.cancelled_at = timezone.now()
        self.save(
            update_fields=[
                "status",
                "cancellation_source",
                "cancellation_reason",
                "cancelled_at",
                "updated_at",
            ]
        )

    def mark_confirmation_sent(self) -> None:
        self.confirmation_sent_at = timezone.now()
        self.save(update_fields=["confirmation_sent_at", "updated_at"])
