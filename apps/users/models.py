"""User domain models.

Two kinds of people talk to the booking engine: property staff, who
configure structures and manage the schedule, and guests, who act on
behalf of a stay. The stay itself lives in another subsystem; here it is
only an opaque identifier copied onto the guest account.
"""

from __future__ import annotations

from typing import Any

from django.contrib.auth.models import AbstractUser, BaseUserManager  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class CustomUserManager(BaseUserManager):
    """Manager using the email as login."""

    use_in_migrations = True

    def _create_user(self, email: str, password: str | None, **extra_fields: Any):
        if not email:
            raise ValueError("Email is required to create a user.")
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_user(self, email: str, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        extra_fields.setdefault("role", CustomUser.RoleChoices.GUEST)
        return self._create_user(email, password, **extra_fields)

    def create_staff(self, email: str, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("role", CustomUser.RoleChoices.STAFF)
        return self.create_user(email, password, **extra_fields)

    def create_superuser(self, email: str, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", CustomUser.RoleChoices.ADMIN)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self._create_user(email, password, **extra_fields)


class CustomUser(AbstractUser):
    """Account of a staff member or of the guest of a stay."""

    class RoleChoices(models.TextChoices):
        GUEST = "guest", _("Hóspede")
        STAFF = "staff", _("Equipe")
        ADMIN = "admin", _("Administrador")

    username = models.CharField(
        _("Nome de exibição"),
        max_length=150,
        blank=True,
    )
    email = models.EmailField(_("Email"), unique=True)
    role = models.CharField(
        _("Papel"),
        max_length=20,
        choices=RoleChoices.choices,
        default=RoleChoices.GUEST,
    )
    stay_id = models.CharField(
        _("Estadia"),
        max_length=64,
        blank=True,
        db_index=True,
        help_text=_("Opaque id of the stay this guest account acts for."),
    )
    cabin_name = models.CharField(_("Acomodação"), max_length=100, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CustomUserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["username"]

    class Meta:
        verbose_name = _("Usuário")
        verbose_name_plural = _("Usuários")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.email} ({self.get_role_display()})"

    def is_staff_member(self) -> bool:
        return (
            self.role in (self.RoleChoices.STAFF, self.RoleChoices.ADMIN)
            or self.is_staff
            or self.is_superuser
        )

    def is_guest(self) -> bool:
        return self.role == self.RoleChoices.GUEST and bool(self.stay_id)

    @property
    def display_name(self) -> str:
        """Name shown in the schedule and in the activity feed"""
        name = self.get_full_name() or self.username
        if name:
            return name
        if self.stay_id:
            return f"Hóspede {self.stay_id[:5]}"
        return self.email


User = CustomUser
