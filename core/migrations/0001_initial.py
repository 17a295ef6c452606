import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

import core.models.user

DIRECTION_CHOICES = [
    ("north", "North"),
    ("south", "South"),
    ("east", "East"),
    ("west", "West"),
    ("northeast", "Northeast"),
    ("northwest", "Northwest"),
    ("southeast", "Southeast"),
    ("southwest", "Southwest"),
]


def _pairs(values):
    return [(v, v) for v in values]


RULE_DIRECTIONS = [d for d, _ in DIRECTION_CHOICES] + ["center", "any"]
RULE_ROOM_TYPES = [
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
]
RULE_CATEGORIES = [
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
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Profile",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("phone", models.CharField(blank=True, max_length=15, null=True, unique=True)),
                (
                    "gender",
                    models.TextField(
                        blank=True,
                        choices=[
                            ("male", "Male"),
                            ("female", "Female"),
                            ("other", "Other"),
                            ("prefer-not-to-say", "Prefer not to say"),
                        ],
                        null=True,
                    ),
                ),
                ("date_of_birth", models.DateField(blank=True, null=True)),
                ("avatar", models.URLField(blank=True, null=True)),
                (
                    "subscription_tier",
                    models.TextField(
                        choices=[("free", "Free"), ("premium", "Premium"), ("expert", "Expert")],
                        default="free",
                    ),
                ),
                ("subscription_active", models.BooleanField(default=True)),
                ("is_email_verified", models.BooleanField(default=False)),
                ("is_phone_verified", models.BooleanField(default=False)),
                ("email_verification_token", models.CharField(blank=True, max_length=64, null=True)),
                ("email_verification_expire", models.DateTimeField(blank=True, null=True)),
                ("reset_password_token", models.CharField(blank=True, max_length=64, null=True)),
                ("reset_password_expire", models.DateTimeField(blank=True, null=True)),
                ("login_count", models.PositiveIntegerField(default=0)),
                ("preferences", models.JSONField(default=core.models.user.default_preferences)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(blank=True, null=True)),
                (
                    "user",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="profile",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
        ),
        migrations.CreateModel(
            name="Analysis",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=100)),
                ("description", models.CharField(blank=True, default="", max_length=500)),
                ("tags", models.JSONField(blank=True, default=list)),
                ("orientation", models.TextField(choices=DIRECTION_CHOICES)),
                ("length", models.FloatField(blank=True, null=True)),
                ("width", models.FloatField(blank=True, null=True)),
                ("area", models.FloatField(blank=True, editable=False, null=True)),
                ("unit", models.TextField(choices=[("sqft", "sqft"), ("sqm", "sqm")], default="sqft")),
                ("rooms", models.JSONField(blank=True, default=list)),
                (
                    "status",
                    models.TextField(
                        choices=[
                            ("pending", "Pending"),
                            ("processing", "Processing"),
                            ("completed", "Completed"),
                            ("failed", "Failed"),
                        ],
                        db_index=True,
                        default="pending",
                    ),
                ),
                ("processing_started_at", models.DateTimeField(blank=True, null=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("processing_time", models.PositiveIntegerField(blank=True, null=True)),
                ("failure_reason", models.TextField(blank=True, null=True)),
                ("vastu_analysis", models.JSONField(blank=True, null=True)),
                ("overall_score", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("is_public", models.BooleanField(default=False)),
                ("views", models.PositiveIntegerField(default=0)),
                ("likes", models.PositiveIntegerField(default=0)),
                ("shares", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="analyses",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "indexes": [
                    models.Index(fields=["user", "-created_at"], name="analysis_user_created_idx"),
                    models.Index(fields=["-overall_score"], name="analysis_score_idx"),
                    models.Index(fields=["is_public", "-created_at"], name="analysis_public_created_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="AnalysisFile",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("position", models.PositiveSmallIntegerField(default=0)),
                ("storage_id", models.TextField()),
                ("original_name", models.TextField()),
                ("url", models.TextField()),
                ("size", models.PositiveIntegerField()),
                ("mime_type", models.TextField()),
                ("width", models.PositiveIntegerField(blank=True, null=True)),
                ("height", models.PositiveIntegerField(blank=True, null=True)),
                ("uploaded_at", models.DateTimeField(auto_now_add=True)),
                (
                    "analysis",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="files",
                        to="core.analysis",
                    ),
                ),
            ],
            options={
                "ordering": ["position", "id"],
            },
        ),
        migrations.CreateModel(
            name="VastuRule",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100, unique=True)),
                ("category", models.TextField(choices=_pairs(RULE_CATEGORIES))),
                ("subcategory", models.TextField(blank=True, null=True)),
                ("description", models.TextField()),
                ("detailed_explanation", models.TextField(blank=True, null=True)),
                ("direction", models.TextField(blank=True, choices=_pairs(RULE_DIRECTIONS), null=True)),
                ("room_type", models.TextField(blank=True, choices=_pairs(RULE_ROOM_TYPES), null=True)),
                (
                    "element",
                    models.TextField(
                        blank=True,
                        choices=_pairs(["earth", "water", "fire", "air", "space", "any"]),
                        null=True,
                    ),
                ),
                (
                    "importance",
                    models.TextField(
                        choices=[
                            ("critical", "Critical"),
                            ("high", "High"),
                            ("medium", "Medium"),
                            ("low", "Low"),
                        ],
                        default="medium",
                    ),
                ),
                (
                    "impact",
                    models.TextField(
                        choices=[
                            ("positive", "Positive"),
                            ("negative", "Negative"),
                            ("neutral", "Neutral"),
                        ]
                    ),
                ),
                ("remedies", models.JSONField(blank=True, default=list)),
                ("benefits", models.JSONField(blank=True, default=list)),
                ("consequences", models.JSONField(blank=True, default=list)),
                ("exceptions", models.JSONField(blank=True, default=list)),
                ("modern_adaptations", models.JSONField(blank=True, default=list)),
                ("scientific_basis", models.TextField(blank=True, null=True)),
                ("references", models.JSONField(blank=True, default=list)),
                ("is_active", models.BooleanField(default=True)),
                ("priority", models.PositiveSmallIntegerField(default=5)),
                ("tags", models.JSONField(blank=True, default=list)),
                ("version", models.PositiveIntegerField(default=1)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="created_rules",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "last_modified_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="modified_rules",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "indexes": [
                    models.Index(fields=["category", "direction"], name="rule_category_direction_idx"),
                    models.Index(fields=["room_type", "importance"], name="rule_room_importance_idx"),
                    models.Index(fields=["element", "impact"], name="rule_element_impact_idx"),
                    models.Index(fields=["is_active", "-priority"], name="rule_active_priority_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Notification",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=255)),
                ("message", models.TextField()),
                ("is_read", models.BooleanField(default=False)),
                ("notification_type", models.CharField(default="info", max_length=50)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "analysis",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="notifications",
                        to="core.analysis",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="notifications",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
        ),
    ]
