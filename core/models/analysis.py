"""Analysis and AnalysisFile models."""

from django.db import models
from django.contrib.auth.models import User


DIRECTIONS = (
    "north",
    "south",
    "east",
    "west",
    "northeast",
    "northwest",
    "southeast",
    "southwest",
)

ROOM_DIRECTIONS = DIRECTIONS + ("center",)

ROOM_TYPES = (
    "bedroom",
    "living-room",
    "kitchen",
    "bathroom",
    "dining-room",
    "study",
    "puja-room",
    "balcony",
    "other",
)

ELEMENTS = ("earth", "water", "fire", "air", "space")

AREA_UNITS = ("sqft", "sqm")


def derive_area(length, width):
    """Area is only defined when both sides are present."""
    if length and width:
        return length * width
    return None


class Analysis(models.Model):
    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        PROCESSING = "processing", "Processing"
        COMPLETED = "completed", "Completed"
        FAILED = "failed", "Failed"

    user = models.ForeignKey(User, models.CASCADE, related_name="analyses")
    title = models.CharField(max_length=100)
    description = models.CharField(max_length=500, blank=True, default="")
    tags = models.JSONField(default=list, blank=True)

    # Floor plan descriptor
    orientation = models.TextField(choices=[(d, d.title()) for d in DIRECTIONS])
    length = models.FloatField(blank=True, null=True)
    width = models.FloatField(blank=True, null=True)
    area = models.FloatField(blank=True, null=True, editable=False)
    unit = models.TextField(choices=[(u, u) for u in AREA_UNITS], default="sqft")
    rooms = models.JSONField(default=list, blank=True)

    # Lifecycle
    status = models.TextField(
        choices=Status.choices, default=Status.PENDING, db_index=True
    )
    processing_started_at = models.DateTimeField(blank=True, null=True)
    completed_at = models.DateTimeField(blank=True, null=True)
    processing_time = models.PositiveIntegerField(blank=True, null=True)
    failure_reason = models.TextField(blank=True, null=True)

    # Result
    vastu_analysis = models.JSONField(blank=True, null=True)
    overall_score = models.PositiveSmallIntegerField(blank=True, null=True)

    # Visibility / engagement
    is_public = models.BooleanField(default=False)
    views = models.PositiveIntegerField(default=0)
    likes = models.PositiveIntegerField(default=0)
    shares = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = "core"
        indexes = [
            models.Index(fields=["user", "-created_at"], name="analysis_user_created_idx"),
            models.Index(fields=["-overall_score"], name="analysis_score_idx"),
            models.Index(fields=["is_public", "-created_at"], name="analysis_public_created_idx"),
        ]

    def __str__(self):
        return f"{self.title} ({self.status})"

    def save(self, *args, **kwargs):
        self.area = derive_area(self.length, self.width)
        for room in self.rooms or []:
            dimensions = room.get("dimensions")
            if dimensions:
                dimensions["area"] = derive_area(
                    dimensions.get("length"), dimensions.get("width")
                )
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and (
            {"length", "width", "rooms"} & set(update_fields)
        ):
            kwargs["update_fields"] = set(update_fields) | {"area", "rooms"}
        super().save(*args, **kwargs)

    @property
    def processing_duration(self):
        if self.processing_started_at and self.completed_at:
            return round(
                (self.completed_at - self.processing_started_at).total_seconds()
            )
        return None

    @property
    def room_count(self) -> int:
        return len(self.rooms or [])

    @property
    def floor_plan(self) -> dict:
        """Floor-plan descriptor handed to the scoring step."""
        return {
            "orientation": self.orientation,
            "dimensions": {
                "length": self.length,
                "width": self.width,
                "area": self.area,
                "unit": self.unit,
            },
            "rooms": list(self.rooms or []),
        }


class AnalysisFile(models.Model):
    analysis = models.ForeignKey(Analysis, models.CASCADE, related_name="files")
    position = models.PositiveSmallIntegerField(default=0)
    storage_id = models.TextField()
    original_name = models.TextField()
    url = models.TextField()
    size = models.PositiveIntegerField()
    mime_type = models.TextField()
    width = models.PositiveIntegerField(blank=True, null=True)
    height = models.PositiveIntegerField(blank=True, null=True)
    uploaded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        app_label = "core"
        ordering = ["position", "id"]

    def __str__(self):
        return self.original_name
