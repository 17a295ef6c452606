"""User and Profile models."""

from django.db import models
from django.contrib.auth.models import User
from typing import Dict


GENDER_OPTIONS: Dict[str, str] = {
    "male": "Male",
    "female": "Female",
    "other": "Other",
    "prefer-not-to-say": "Prefer not to say",
}

LANGUAGE_OPTIONS: Dict[str, str] = {
    "en": "English",
    "hi": "Hindi",
    "ta": "Tamil",
    "te": "Telugu",
}

PREMIUM_TIERS = ("premium", "expert")


def default_preferences() -> dict:
    return {
        "language": "en",
        "notifications": {"email": True, "sms": False, "push": True},
        "vastu_preferences": {
            "region": "north-india",
            "elements": {
                "earth": True,
                "water": True,
                "fire": True,
                "air": True,
                "space": True,
            },
        },
    }


class Profile(models.Model):
    class SubscriptionTier(models.TextChoices):
        FREE = "free", "Free"
        PREMIUM = "premium", "Premium"
        EXPERT = "expert", "Expert"

    user = models.OneToOneField(User, models.CASCADE, related_name="profile")
    phone = models.CharField(max_length=15, unique=True, blank=True, null=True)
    gender = models.TextField(blank=True, null=True, choices=GENDER_OPTIONS.items())
    date_of_birth = models.DateField(blank=True, null=True)
    avatar = models.URLField(blank=True, null=True)
    subscription_tier = models.TextField(
        choices=SubscriptionTier.choices, default=SubscriptionTier.FREE
    )
    subscription_active = models.BooleanField(default=True)
    is_email_verified = models.BooleanField(default=False)
    is_phone_verified = models.BooleanField(default=False)
    email_verification_token = models.CharField(max_length=64, blank=True, null=True)
    email_verification_expire = models.DateTimeField(blank=True, null=True)
    reset_password_token = models.CharField(max_length=64, blank=True, null=True)
    reset_password_expire = models.DateTimeField(blank=True, null=True)
    login_count = models.PositiveIntegerField(default=0)
    preferences = models.JSONField(default=default_preferences)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        app_label = "core"

    def __str__(self):
        return f"Profile({self.user_id}, {self.subscription_tier})"

    @property
    def is_premium(self) -> bool:
        return self.subscription_active and self.subscription_tier in PREMIUM_TIERS
