import django.db.models.deletion
import uuid6
from django.db import migrations, models


def _base_fields():
    return [
        (
            "id",
            models.UUIDField(
                default=uuid6.uuid7, editable=False, primary_key=True, serialize=False
            ),
        ),
        ("created_at", models.DateTimeField(auto_now_add=True)),
        ("updated_at", models.DateTimeField(auto_now=True)),
    ]


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Process",
            fields=[
                *_base_fields(),
                ("code", models.CharField(max_length=20, unique=True)),
                ("name", models.CharField(max_length=120)),
            ],
            options={"db_table": "workflow_processes", "ordering": ["code"]},
        ),
        migrations.CreateModel(
            name="State",
            fields=[
                *_base_fields(),
                ("code", models.CharField(max_length=20)),
                ("name", models.CharField(max_length=120)),
                (
                    "kind",
                    models.CharField(
                        choices=[("I", "Inicial"), ("N", "Normal"), ("T", "Terminal")],
                        default="N",
                        max_length=1,
                    ),
                ),
                (
                    "public_step",
                    models.PositiveSmallIntegerField(blank=True, null=True),
                ),
                (
                    "process",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="states",
                        to="workflow.process",
                    ),
                ),
            ],
            options={
                "db_table": "workflow_states",
                "ordering": ["code"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("process", "code"), name="workflow_state_code_uniq"
                    ),
                    models.UniqueConstraint(
                        condition=models.Q(kind="I"),
                        fields=("process",),
                        name="workflow_single_initial_state",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Transition",
            fields=[
                *_base_fields(),
                ("code", models.CharField(max_length=60)),
                ("name", models.CharField(max_length=120)),
                (
                    "process",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="transitions",
                        to="workflow.process",
                    ),
                ),
                (
                    "from_state",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="outgoing_transitions",
                        to="workflow.state",
                    ),
                ),
                (
                    "to_state",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="incoming_transitions",
                        to="workflow.state",
                    ),
                ),
            ],
            options={
                "db_table": "workflow_transitions",
                "ordering": ["code"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("process", "from_state", "to_state"),
                        name="workflow_transition_edge_uniq",
                    ),
                ],
            },
        ),
    ]
