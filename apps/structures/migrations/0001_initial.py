from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Structure",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=120)),
                ("photo_ref", models.CharField(blank=True, help_text="Opaque reference to the structure photo.", max_length=500)),
                (
                    "management_type",
                    models.CharField(
                        choices=[("by_structure", "Por estrutura"), ("by_unit", "Por unidade")],
                        default="by_structure",
                        max_length=20,
                    ),
                ),
                ("units", models.JSONField(blank=True, default=list, help_text="Ordered unit names; only used when managed by unit.")),
                (
                    "default_status",
                    models.CharField(choices=[("open", "Aberto"), ("closed", "Fechado")], default="open", max_length=10),
                ),
                (
                    "approval_mode",
                    models.CharField(
                        choices=[("automatic", "Automática"), ("manual", "Manual")],
                        default="automatic",
                        max_length=10,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Estrutura",
                "verbose_name_plural": "Estruturas",
                "ordering": ["name", "id"],
            },
        ),
        migrations.CreateModel(
            name="TimeSlot",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("slot_id", models.CharField(max_length=32)),
                ("start_time", models.TimeField()),
                ("end_time", models.TimeField()),
                ("label", models.CharField(max_length=50)),
                (
                    "structure",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="time_slots",
                        to="structures.structure",
                    ),
                ),
            ],
            options={
                "verbose_name": "Horário",
                "verbose_name_plural": "Horários",
                "ordering": ["start_time", "end_time", "id"],
                "indexes": [models.Index(fields=["structure", "start_time"], name="timeslot_structure_start_idx")],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("end_time__gt", models.F("start_time"))),
                        name="timeslot_valid_window",
                    )
                ],
            },
        ),
    ]
