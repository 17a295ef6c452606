"""Core models package."""

from .user import Profile, GENDER_OPTIONS, LANGUAGE_OPTIONS, PREMIUM_TIERS
from .analysis import (
    Analysis,
    AnalysisFile,
    DIRECTIONS,
    ROOM_DIRECTIONS,
    ROOM_TYPES,
    ELEMENTS,
    AREA_UNITS,
)
from .vastu_rule import (
    VastuRule,
    RULE_CATEGORIES,
    RULE_DIRECTIONS,
    RULE_ROOM_TYPES,
    RULE_ELEMENTS,
    IMPORTANCE_RANK,
)
from .notification import Notification

__all__ = [
    "Profile",
    "Analysis",
    "AnalysisFile",
    "VastuRule",
    "Notification",
    "GENDER_OPTIONS",
    "LANGUAGE_OPTIONS",
    "PREMIUM_TIERS",
    "DIRECTIONS",
    "ROOM_DIRECTIONS",
    "ROOM_TYPES",
    "ELEMENTS",
    "AREA_UNITS",
    "RULE_CATEGORIES",
    "RULE_DIRECTIONS",
    "RULE_ROOM_TYPES",
    "RULE_ELEMENTS",
    "IMPORTANCE_RANK",
]
