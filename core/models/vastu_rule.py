"""VastuRule model."""

from django.db import models
from django.contrib.auth.models import User

from .analysis import ROOM_DIRECTIONS, ELEMENTS


RULE_CATEGORIES = (
    "direction",
    "room-placement",
    "five-elements",
    "energy-flow",
    "color-scheme",
    "furniture-placement",
    "entrance",
    "kitchen",
    "bedroom",
    "bathroom",
    "puja-room",
    "general",
)

RULE_ROOM_TYPES = (
    "bedroom",
    "living-room",
    "kitchen",
    "bathroom",
    "dining-room",
    "study",
    "puja-room",
    "balcony",
    "entrance",
    "any",
)

RULE_DIRECTIONS = ROOM_DIRECTIONS + ("any",)
RULE_ELEMENTS = ELEMENTS + ("any",)

# Higher rank sorts first
IMPORTANCE_RANK = {"critical": 4, "high": 3, "medium": 2, "low": 1}


def _choices(values):
    return [(v, v) for v in values]


class VastuRule(models.Model):
    class Importance(models.TextChoices):
        CRITICAL = "critical", "Critical"
        HIGH = "high", "High"
        MEDIUM = "medium", "Medium"
        LOW = "low", "Low"

    class Impact(models.TextChoices):
        POSITIVE = "positive", "Positive"
        NEGATIVE = "negative", "Negative"
        NEUTRAL = "neutral", "Neutral"

    name = models.CharField(max_length=100, unique=True)
    category = models.TextField(choices=_choices(RULE_CATEGORIES))
    subcategory = models.TextField(blank=True, null=True)
    description = models.TextField()
    detailed_explanation = models.TextField(blank=True, null=True)
    direction = models.TextField(choices=_choices(RULE_DIRECTIONS), blank=True, null=True)
    room_type = models.TextField(choices=_choices(RULE_ROOM_TYPES), blank=True, null=True)
    element = models.TextField(choices=_choices(RULE_ELEMENTS), blank=True, null=True)
    importance = models.TextField(choices=Importance.choices, default=Importance.MEDIUM)
    impact = models.TextField(choices=Impact.choices)
    remedies = models.JSONField(default=list, blank=True)
    benefits = models.JSONField(default=list, blank=True)
    consequences = models.JSONField(default=list, blank=True)
    exceptions = models.JSONField(default=list, blank=True)
    modern_adaptations = models.JSONField(default=list, blank=True)
    scientific_basis = models.TextField(blank=True, null=True)
    references = models.JSONField(default=list, blank=True)
    is_active = models.BooleanField(default=True)
    priority = models.PositiveSmallIntegerField(default=5)
    tags = models.JSONField(default=list, blank=True)
    created_by = models.ForeignKey(
        User, models.SET_NULL, blank=True, null=True, related_name="created_rules"
    )
    last_modified_by = models.ForeignKey(
        User, models.SET_NULL, blank=True, null=True, related_name="modified_rules"
    )
    version = models.PositiveIntegerField(default=1)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = "core"
        indexes = [
            models.Index(fields=["category", "direction"], name="rule_category_direction_idx"),
            models.Index(fields=["room_type", "importance"], name="rule_room_importance_idx"),
            models.Index(fields=["element", "impact"], name="rule_element_impact_idx"),
            models.Index(fields=["is_active", "-priority"], name="rule_active_priority_idx"),
        ]

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        # Version is a counter only; earlier revisions are not kept.
        if not self._state.adding:
            self.version += 1
            update_fields = kwargs.get("update_fields")
            if update_fields is not None:
                kwargs["update_fields"] = set(update_fields) | {"version"}
        super().save(*args, **kwargs)

    @property
    def complexity(self) -> int:
        score = 0
        if len(self.remedies or []) > 3:
            score += 1
        if self.exceptions:
            score += 1
        if self.modern_adaptations:
            score += 1
        if self.scientific_basis:
            score += 1
        return score
