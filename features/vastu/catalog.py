"""Rule catalog queries. Scoring consumes ``rule_snapshot``; endpoints the rest."""

import logging
from typing import Iterable, List, Optional

from django.db.models import Case, IntegerField, Q, QuerySet, Value, When

from core.models import IMPORTANCE_RANK, VastuRule

logger = logging.getLogger(__name__)


SNAPSHOT_FIELDS = (
    "name",
    "category",
    "direction",
    "room_type",
    "element",
    "importance",
    "impact",
    "remedies",
    "benefits",
    "consequences",
)

# Attributes where a rule tagged "any" matches every requested value.
WILDCARD_FILTERS = ("direction", "room_type", "element")


def _ordered(queryset: QuerySet) -> QuerySet:
    """Order by priority, then importance rank (critical first)."""
    rank = Case(
        *[When(importance=name, then=Value(r)) for name, r in IMPORTANCE_RANK.items()],
        default=Value(0),
        output_field=IntegerField(),
    )
    return queryset.annotate(importance_rank=rank).order_by(
        "-priority", "-importance_rank", "id"
    )


def _filtered(
    queryset: QuerySet,
    category: Optional[str] = None,
    direction: Optional[str] = None,
    room_type: Optional[str] = None,
    element: Optional[str] = None,
    importance: Optional[str] = None,
    impact: Optional[str] = None,
) -> QuerySet:
    queryset = queryset.filter(is_active=True)
    if category:
        queryset = queryset.filter(category=category)
    wildcard_values = {"direction": direction, "room_type": room_type, "element": element}
    for field in WILDCARD_FILTERS:
        value = wildcard_values[field]
        if value:
            queryset = queryset.filter(**{f"{field}__in": [value, "any"]})
    if importance:
        queryset = queryset.filter(importance=importance)
    if impact:
        queryset = queryset.filter(impact=impact)
    return queryset


def find_rules(
    category: Optional[str] = None,
    direction: Optional[str] = None,
    room_type: Optional[str] = None,
    element: Optional[str] = None,
    importance: Optional[str] = None,
    impact: Optional[str] = None,
) -> QuerySet:
    """Active rules matching the filters, most important first."""
    return _ordered(
        _filtered(
            VastuRule.objects.all(),
            category=category,
            direction=direction,
            room_type=room_type,
            element=element,
            importance=importance,
            impact=impact,
        )
    )


def search_rules(q: str, **filters) -> QuerySet:
    """Case-insensitive match on name, description or any tag."""
    text = Q(name__icontains=q) | Q(description__icontains=q) | Q(tags__icontains=q)
    return find_rules(**filters).filter(text)


def critical_rules() -> QuerySet:
    return find_rules(importance=VastuRule.Importance.CRITICAL)


def rule_snapshot(**filters) -> List[dict]:
    """Plain-dict copy of the matching rules, safe to hand to a scoring thread."""
    return [dict(row) for row in find_rules(**filters).values(*SNAPSHOT_FIELDS)]


def applicable_remedies(
    remedies: Iterable[dict], budget: str = "medium", difficulty: str = "medium"
) -> List[dict]:
    """
    Remedies affordable within ``budget`` and doable at ``difficulty``.

    Low-cost and easy remedies always qualify; ``any`` disables a filter.
    """
    result = []
    for remedy in remedies or []:
        cost_ok = budget == "any" or remedy.get("cost") in (budget, "low")
        difficulty_ok = difficulty == "any" or remedy.get("difficulty") in (
            difficulty,
            "easy",
        )
        if cost_ok and difficulty_ok:
            result.append(remedy)
    return result
