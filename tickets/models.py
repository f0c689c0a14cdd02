"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

import uuid

from django.db import models


def new_id() -> str:
    return uuid.uuid4().hex


class Event(models.Model):
    """Persistence model for events."""

    id = models.CharField(primary_key=True, max_length=64, default=new_id, editable=False)
    name = models.CharField(max_length=255)
    owner = models.CharField(max_length=42, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    expires_at = models.DateTimeField()
    sold = models.PositiveIntegerField(default=0)
    scanned = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["expires_at"], name="tickets_event_expires_idx"),
        ]

    def __str__(self) -> str:
        return self.name


class Ticket(models.Model):
    """Persistence model for tickets. The primary key doubles as the token id."""

    id = models.CharField(primary_key=True, max_length=64, default=new_id, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="tickets")
    address = models.CharField(max_length=42, db_index=True)
    purchased_at = models.DateTimeField(auto_now_add=True)
    scanned = models.BooleanField(default=False)
    scanned_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["event", "address"], name="uniq_ticket_event_address"
            ),
        ]

    def __str__(self) -> str:
        return f"{self.address} - {self.event_id}"
