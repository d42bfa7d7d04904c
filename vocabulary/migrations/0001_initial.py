# vocabulary/migrations/0001_initial.py
import uuid

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Section",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=200)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("user", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="vocabulary_sections",
                    to=settings.AUTH_USER_MODEL,
                )),
            ],
            options={"ordering": ["-created_at"]},
        ),
        migrations.CreateModel(
            name="Entry",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("term", models.TextField()),
                ("meaning", models.TextField(blank=True, default="")),
                ("example", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ("ordinal", models.PositiveIntegerField(default=0)),
                ("section", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="entries",
                    to="vocabulary.section",
                )),
                ("user", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="vocabulary_entries",
                    to=settings.AUTH_USER_MODEL,
                )),
            ],
            options={"ordering": ["-created_at", "ordinal"]},
        ),
        migrations.CreateModel(
            name="CompletionRecord",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("section_name", models.CharField(max_length=200)),
                ("cycle_number", models.PositiveIntegerField(default=1)),
                ("completed_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("section", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="completions",
                    to="vocabulary.section",
                )),
                ("user", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="section_completions",
                    to=settings.AUTH_USER_MODEL,
                )),
            ],
            options={
                "ordering": ["-completed_at", "-cycle_number"],
                "indexes": [
                    models.Index(fields=["user", "-completed_at"], name="idx_completion_user_recent"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("user", "section", "cycle_number"),
                        name="uniq_completion_per_cycle",
                    ),
                ],
            },
        ),
    ]
