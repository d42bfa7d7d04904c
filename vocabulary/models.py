import uuid

from django.conf import settings
from django.db import models
from django.utils import timezone


class Section(models.Model):
    id         = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user       = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE,
                                   related_name="vocabulary_sections")
    name       = models.CharField(max_length=200)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return self.name


class Entry(models.Model):
    id      = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user    = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE,
                                related_name="vocabulary_entries")
    section = models.ForeignKey(Section, on_delete=models.CASCADE, related_name="entries")
    term    = models.TextField()
    meaning = models.TextField(blank=True, default="")
    example = models.TextField(blank=True, default="")

    # one timestamp per batch; ordinal keeps the pasted line order inside it
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    ordinal    = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["-created_at", "ordinal"]


class CompletionRecord(models.Model):
    id           = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user         = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE,
                                     related_name="section_completions")
    section      = models.ForeignKey(Section, on_delete=models.CASCADE, related_name="completions")
    section_name = models.CharField(max_length=200)   # snapshot at completion time
    cycle_number = models.PositiveIntegerField(default=1)
    completed_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-completed_at", "-cycle_number"]
        constraints = [
            models.UniqueConstraint(fields=["user", "section", "cycle_number"],
                                    name="uniq_completion_per_cycle"),
        ]
        indexes = [
            models.Index(fields=["user", "-completed_at"], name="idx_completion_user_recent"),
        ]
