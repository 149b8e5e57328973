"""Activity feed entries."""

from __future__ import annotations

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class ActivityLog(models.Model):
    """One line of the staff activity feed."""

    class ActorType(models.TextChoices):
        GUEST = "guest", _("Hóspede")
        STAFF = "staff", _("Equipe")
        SYSTEM = "system", _("Sistema")

    class Type(models.TextChoices):
        BOOKING_REQUESTED = "booking_requested", _("Agendamento solicitado")
        BOOKING_CONFIRMED = "booking_confirmed", _("Agendamento confirmado")
        BOOKING_CHANGED_BY_GUEST = "booking_changed_by_guest", _("Agendamento alterado pelo hóspede")
        BOOKING_CREATED_BY_STAFF = "booking_created_by_staff", _("Agendamento criado pela equipe")
        BOOKING_CANCELLED_BY_GUEST = "booking_cancelled_by_guest", _("Agendamento cancelado pelo hóspede")
        BOOKING_CANCELLED_BY_STAFF = "booking_cancelled_by_staff", _("Agendamento cancelado pela equipe")
        BOOKING_APPROVED = "booking_approved", _("Solicitação aprovada")
        BOOKING_REJECTED = "booking_rejected", _("Solicitação recusada")
        BOOKING_EXPIRED = "booking_expired", _("Solicitação expirada")
        SLOT_BLOCKED = "slot_blocked", _("Horário bloqueado")
        SLOT_UNBLOCKED = "slot_unblocked", _("Horário liberado")
        BULK_BLOCK = "bulk_block", _("Bloqueio em massa")
        BULK_RELEASE = "bulk_release", _("Liberação em massa")

    actor_type = models.CharField(max_length=10, choices=ActorType.choices)
    actor_identifier = models.CharField(max_length=150, blank=True)
    type = models.CharField(max_length=40, choices=Type.choices)
    details = models.TextField()
    link = models.CharField(max_length=255, blank=True)
    booking = models.ForeignKey(
        "bookings.Booking",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="activity_logs",
    )
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Atividade")
        verbose_name_plural = _("Atividades")
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["is_read", "created_at"], name="activity_read_created_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.type}: {self.details[:50]}"
