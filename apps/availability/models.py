"""Daily overrides of a structure's default open/closed policy."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from apps.structures.models import Structure


class DailyOverride(models.Model):
    """Forces a structure open or closed for one calendar day."""

    class Status(models.TextChoices):
        OPEN = "open", _("Aberto")
        CLOSED = "closed", _("Fechado")

    date = models.DateField()
    structure = models.ForeignKey(
        Structure,
        on_delete=models.CASCADE,
        related_name="daily_overrides",
    )
    status = models.CharField(max_length=10, choices=Status.choices)
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Exceção diária")
        verbose_name_plural = _("Exceções diárias")
        ordering = ["date", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["date", "structure"],
                name="dailyoverride_unique_date_structure",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.structure_id} {self.date:%Y-%m-%d}: {self.status}"
