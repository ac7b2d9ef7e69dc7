"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/.
"""

import uuid

from django.db import models
from django.utils import timezone


class Offer(models.Model):
    """Persistence model for offers."""

    class Status(models.TextChoices):
        OPEN = "open", "Open"
        CLOSED = "closed", "Closed"
        CANCELLED = "cancelled", "Cancelled"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    organizer_id = models.UUIDField(db_index=True)
    title = models.CharField(max_length=255)
    description = models.TextField()
    event_date = models.DateTimeField(blank=True, null=True)
    genre = models.CharField(max_length=100, blank=True, default="")
    location = models.CharField(max_length=255, blank=True, default="")
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.OPEN)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)
    close_date = models.DateTimeField(blank=True, null=True)
    has_accepted = models.BooleanField(default=False)
    version = models.PositiveIntegerField(default=1)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["-created_at"], name="offer_created_idx"),
            models.Index(fields=["genre", "location"], name="offer_genre_location_idx"),
        ]

    def __str__(self) -> str:
        return self.title


class Application(models.Model):
    """Persistence model for applications embedded in an offer."""

    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        ACCEPTED = "accepted", "Accepted"
        REJECTED = "rejected", "Rejected"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    offer = models.ForeignKey(Offer, on_delete=models.CASCADE, related_name="applications")
    musician_id = models.UUIDField(db_index=True)
    motivation = models.TextField(blank=True, default="")
    submitted_at = models.DateTimeField(default=timezone.now)
    status = models.CharField(
        max_length=16, choices=Status.choices, default=Status.PENDING
    )
    score = models.PositiveSmallIntegerField(blank=True, null=True)
    comment = models.TextField(blank=True, null=True)
    rated = models.BooleanField(default=False)
    organizer_score = models.PositiveSmallIntegerField(blank=True, null=True)
    organizer_comment = models.TextField(blank=True, null=True)
    organizer_rated = models.BooleanField(default=False)
    position = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["position"]
        constraints = [
            models.UniqueConstraint(
                fields=["offer", "musician_id"],
                name="unique_application_per_musician",
            ),
            models.UniqueConstraint(
                fields=["offer"],
                condition=models.Q(status="accepted"),
                name="single_accepted_application_per_offer",
            ),
            models.CheckConstraint(
                condition=models.Q(score__isnull=True) | models.Q(score__gte=1, score__lte=5),
                name="application_score_between_1_and_5",
            ),
            models.CheckConstraint(
                condition=models.Q(organizer_score__isnull=True)
                | models.Q(organizer_score__gte=1, organizer_score__lte=5),
                name="application_organizer_score_between_1_and_5",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.musician_id} -> {self.offer.title}"
