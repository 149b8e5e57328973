from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("bookings", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="ActivityLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "actor_type",
                    models.CharField(
                        choices=[("guest", "Hóspede"), ("staff", "Equipe"), ("system", "Sistema")],
                        max_length=10,
                    ),
                ),
                ("actor_identifier", models.CharField(blank=True, max_length=150)),
                (
                    "type",
                    models.CharField(
                        choices=[
                            ("booking_requested", "Agendamento solicitado"),
                            ("booking_confirmed", "Agendamento confirmado"),
                            ("booking_changed_by_guest", "Agendamento alterado pelo hóspede"),
                            ("booking_created_by_staff", "Agendamento criado pela equipe"),
                            ("booking_cancelled_by_guest", "Agendamento cancelado pelo hóspede"),
                            ("booking_cancelled_by_staff", "Agendamento cancelado pela equipe"),
                            ("booking_approved", "Solicitação aprovada"),
                            ("booking_rejected", "Solicitação recusada"),
                            ("booking_expired", "Solicitação expirada"),
                            ("slot_blocked", "Horário bloqueado"),
                            ("slot_unblocked", "Horário liberado"),
                            ("bulk_block", "Bloqueio em massa"),
                            ("bulk_release", "Liberação em massa"),
                        ],
                        max_length=40,
                    ),
                ),
                ("details", models.TextField()),
                ("link", models.CharField(blank=True, max_length=255)),
                ("is_read", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "booking",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="activity_logs",
                        to="bookings.booking",
                    ),
                ),
            ],
            options={
                "verbose_name": "Atividade",
                "verbose_name_plural": "Atividades",
                "ordering": ["-created_at", "-id"],
                "indexes": [models.Index(fields=["is_read", "created_at"], name="activity_read_created_idx")],
            },
        ),
    ]
