from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("structures", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Booking",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("booking_code", models.CharField(editable=False, max_length=12, unique=True)),
                (
                    "structure_name",
                    models.CharField(help_text="Structure name at booking time, kept if the structure is deleted.", max_length=120),
                ),
                ("unit", models.CharField(blank=True, help_text="Empty for structures managed as a whole.", max_length=60)),
                ("date", models.DateField()),
                ("start_time", models.TimeField()),
                ("end_time", models.TimeField()),
                ("stay_id", models.CharField(blank=True, db_index=True, max_length=64)),
                ("guest_name", models.CharField(blank=True, max_length=150)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("solicitado", "Solicitado"),
                            ("confirmado", "Confirmado"),
                            ("bloqueado", "Bloqueado"),
                            ("cancelado", "Cancelado"),
                        ],
                        max_length=20,
                    ),
                ),
                ("preference_time", models.TimeField(blank=True, null=True)),
                ("selected_options", models.JSONField(blank=True, default=list)),
                ("notes", models.TextField(blank=True)),
                ("confirmed_at", models.DateTimeField(blank=True, null=True)),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                (
                    "cancellation_source",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("guest", "Hóspede"),
                            ("staff", "Equipe"),
                            ("superseded", "Substituída"),
                            ("system", "Sistema"),
                        ],
                        max_length=20,
                    ),
                ),
                ("cancellation_reason", models.CharField(blank=True, max_length=255)),
                ("confirmation_sent_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "structure",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="bookings",
                        to="structures.structure",
                    ),
                ),
                (
                    "superseded_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to="bookings.booking",
                    ),
                ),
            ],
            options={
                "verbose_name": "Agendamento",
                "verbose_name_plural": "Agendamentos",
                "ordering": ["date", "start_time", "structure_name", "unit"],
                "indexes": [
                    models.Index(fields=["date", "status"], name="booking_date_status_idx"),
                    models.Index(fields=["status", "created_at"], name="booking_status_created_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("end_time__gt", models.F("start_time"))),
                        name="booking_valid_window",
                    ),
                    models.UniqueConstraint(
                        condition=models.Q(("status__in", ["solicitado", "confirmado", "bloqueado"])),
                        fields=("structure", "unit", "date", "start_time"),
                        name="booking_unique_active_slot",
                    ),
                    models.UniqueConstraint(
                        condition=models.Q(
                            models.Q(("status__in", ["solicitado", "confirmado"])),
                            models.Q(("stay_id", ""), _negated=True),
                        ),
                        fields=("stay_id", "structure", "date"),
                        name="booking_unique_stay_per_structure_day",
                    ),
                ],
            },
        ),
    ]
