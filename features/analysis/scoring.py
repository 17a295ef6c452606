"""
Scoring step for the analysis lifecycle.

A scoring strategy turns a floor-plan descriptor plus a snapshot of the rule
catalog into a ``vastu_analysis`` result payload. Strategies are pure: they
never read or write the database, so the worker can run them in isolation and
tests can swap them for stubs through the ``VASTU_SCORING_STRATEGY`` setting.
"""

import logging
import math
from statistics import mean
from typing import Any, Dict, List, Optional

import requests
from django.conf import settings
from django.utils.module_loading import import_string

from core.models import DIRECTIONS, ELEMENTS
from core.utils.config import get_setting

logger = logging.getLogger(__name__)


# =============================================================================
# Reference data
# =============================================================================

# First entry is the ideal placement, the rest are acceptable.
IDEAL_DIRECTIONS: Dict[str, tuple] = {
    "kitchen": ("southeast", "northwest"),
    "bedroom": ("southwest", "south", "west"),
    "bathroom": ("northwest", "west", "south"),
    "puja-room": ("northeast", "east", "north"),
    "living-room": ("north", "east", "northeast", "northwest"),
    "dining-room": ("west", "east", "south"),
    "study": ("east", "north", "northeast", "west"),
    "balcony": ("north", "east", "northeast"),
}

AVOID_DIRECTIONS: Dict[str, tuple] = {
    "kitchen": ("northeast", "southwest", "center"),
    "bedroom": ("northeast", "southeast", "center"),
    "bathroom": ("northeast", "southwest", "center"),
    "puja-room": ("south", "southwest"),
    "living-room": ("southwest",),
    "dining-room": ("center",),
    "study": ("south", "southwest"),
    "balcony": ("south", "southwest"),
}

DIRECTION_ELEMENT = {
    "north": "water",
    "northeast": "water",
    "south": "fire",
    "southeast": "fire",
    "southwest": "earth",
    "northwest": "air",
    "west": "air",
    "east": "air",
    "center": "space",
}

ELEMENT_RECOMMENDATIONS = {
    "earth": ["Place heavy furniture in the southwest", "Use brown and yellow tones"],
    "water": ["Add a water feature in the northeast", "Use blue tones in the north"],
    "fire": ["Keep the southeast well lit", "Use red or orange accents in the southeast"],
    "air": ["Improve ventilation in the northwest", "Add wind chimes near windows"],
    "space": ["Keep the center of the house open", "Avoid heavy objects at the center"],
}

ELEMENT_COLORS = {
    "earth": "brown, beige or yellow",
    "water": "blue or black",
    "fire": "red, orange or pink",
    "air": "white, grey or silver",
    "space": "purple or violet",
}

FAVOURABLE_ORIENTATIONS = ("north", "east", "northeast")

IMPORTANCE_PRIORITY = {
    "critical": "high",
    "high": "high",
    "medium": "medium",
    "low": "low",
}

NEUTRAL_SCORE = 75
UNKNOWN_DIRECTION_SCORE = 60


def clamp_score(value: float) -> int:
    return max(0, min(100, int(round(value))))


def balance_for(score: int) -> str:
    if score >= 85:
        return "Excellent"
    if score >= 70:
        return "Good"
    if score >= 55:
        return "Moderate"
    return "Poor"


def _label(room_type: str) -> str:
    return room_type.replace("-", " ")


def _matching_rules(rules: List[dict], room_type: str, direction: str) -> List[dict]:
    return [
        rule
        for rule in rules
        if rule.get("room_type") in (room_type, "any")
        and rule.get("direction") in (direction, "any")
    ]


# =============================================================================
# Strategies
# =============================================================================


class ScoringStrategy:
    """Interface: ``score(floor_plan, rules) -> vastu_analysis payload``."""

    name = "base"

    def score(self, floor_plan: Dict[str, Any], rules: List[dict]) -> Dict[str, Any]:
        raise NotImplementedError


class RuleBasedScoring(ScoringStrategy):
    """Deterministic scoring from room placement and the rule catalog."""

    name = "rule-based"

    def score(self, floor_plan: Dict[str, Any], rules: List[dict]) -> Dict[str, Any]:
        orientation = floor_plan.get("orientation")
        rooms = floor_plan.get("rooms") or []
        remedies: List[dict] = []

        room_analysis = [self._score_room(room, rules, remedies) for room in rooms]
        directional = self._score_directions(orientation, rooms, room_analysis)
        elements = self._score_elements(directional, rooms, room_analysis)
        energy_flow = self._energy_flow(orientation, directional, room_analysis)

        for element, result in elements.items():
            if result["balance"] in ("Moderate", "Poor"):
                remedies.append(
                    {
                        "type": "color",
                        "description": f"Use {ELEMENT_COLORS[element]} colors to strengthen the {element} element",
                        "priority": "medium" if result["balance"] == "Moderate" else "high",
                        "cost": "low",
                        "difficulty": "easy",
                    }
                )

        directional_mean = mean(d["score"] for d in directional.values())
        element_mean = mean(e["score"] for e in elements.values())
        room_mean = (
            mean(r["vastu_score"] for r in room_analysis)
            if room_analysis
            else directional_mean
        )
        overall = clamp_score(
            0.4 * room_mean
            + 0.3 * directional_mean
            + 0.2 * element_mean
            + 0.1 * energy_flow["score"]
        )

        positive = [
            f"{r['room_name']} is well placed"
            for r in room_analysis
            if r["vastu_score"] >= 85
        ]
        if orientation in FAVOURABLE_ORIENTATIONS:
            positive.append(f"{orientation.title()} facing property welcomes positive energy")
        negative = [issue for r in room_analysis for issue in r["issues"]]

        return {
            "overall_score": overall,
            "energy_flow": energy_flow,
            "directional_analysis": directional,
            "five_elements": elements,
            "room_analysis": room_analysis,
            "remedies": self._dedupe(remedies),
            "positive_aspects": positive,
            "negative_aspects": negative,
            "summary": self._summary(overall, len(negative)),
            "expert_notes": "Consider consulting a Vastu expert for detailed recommendations.",
        }

    def _score_room(self, room: dict, rules: List[dict], remedies: List[dict]) -> dict:
        room_type = room.get("type", "other")
        direction = room.get("direction")
        name = room.get("name") or _label(room_type).title()
        ideal = IDEAL_DIRECTIONS.get(room_type, ())
        issues: List[str] = []
        recommendations: List[str] = []
        room_remedies: List[str] = []

        if direction is None:
            score = UNKNOWN_DIRECTION_SCORE
            issues.append(f"Direction of {name} is not specified")
            recommendations.append(f"Record the direction of {name} for a precise reading")
        elif not ideal:
            score = NEUTRAL_SCORE
        elif direction == ideal[0]:
            score = 95
        elif direction in ideal:
            score = 85
        elif direction in AVOID_DIRECTIONS.get(room_type, ()):
            score = 35
            issues.append(f"{name} ({_label(room_type)}) in the {direction} is against Vastu")
        else:
            score = 60
            issues.append(f"{name} ({_label(room_type)}) in the {direction} is not ideal")

        if direction is not None:
            for rule in _matching_rules(rules, room_type, direction):
                exact = rule.get("direction") == direction
                if rule.get("impact") == "positive" and exact:
                    score += 5
                elif rule.get("impact") == "negative" and exact:
                    score -= 15
                    issues.append(rule.get("description") or rule["name"])
                    for remedy in rule.get("remedies") or []:
                        room_remedies.append(remedy.get("description", ""))
                        remedies.append(
                            {
                                "type": remedy.get("type") or "other",
                                "description": remedy.get("description", ""),
                                "priority": IMPORTANCE_PRIORITY.get(
                                    rule.get("importance"), "medium"
                                ),
                                "cost": remedy.get("cost") or "medium",
                                "difficulty": remedy.get("difficulty") or "medium",
                            }
                        )

        score = clamp_score(score)
        if ideal and score < 60:
            recommendations.append(f"Consider moving the {_label(room_type)} to the {ideal[0]}")
            remedies.append(
                {
                    "type": "placement",
                    "description": f"Move the {_label(room_type)} to the {ideal[0]}",
                    "priority": "high",
                    "cost": "high",
                    "difficulty": "hard",
                }
            )
        elif score >= 85:
            recommendations.append("Excellent placement")

        return {
            "room_name": name,
            "room_type": room_type,
            "vastu_score": score,
            "issues": issues,
            "recommendations": recommendations,
            "remedies": [r for r in room_remedies if r],
        }

    def _score_directions(
        self, orientation: Optional[str], rooms: List[dict], room_analysis: List[dict]
    ) -> Dict[str, dict]:
        directional = {}
        for direction in DIRECTIONS:
            placed = [
                result
                for room, result in zip(rooms, room_analysis)
                if room.get("direction") == direction
            ]
            issues = [issue for result in placed for issue in result["issues"]]
            recommendations = [
                rec
                for result in placed
                for rec in result["recommendations"]
                if rec != "Excellent placement"
            ]
            if placed:
                score = mean(result["vastu_score"] for result in placed)
            else:
                score = NEUTRAL_SCORE
            if orientation == direction and direction in FAVOURABLE_ORIENTATIONS:
                score += 10
                recommendations.append("Keep the main entrance clean and well lit")
            if not recommendations and not issues:
                recommendations.append("Good placement")
            directional[direction] = {
                "score": clamp_score(score),
                "issues": issues,
                "recommendations": recommendations,
            }
        return directional

    def _score_elements(
        self, directional: Dict[str, dict], rooms: List[dict], room_analysis: List[dict]
    ) -> Dict[str, dict]:
        elements = {}
        for element in ELEMENTS:
            if element == "space":
                centered = [
                    result["vastu_score"]
                    for room, result in zip(rooms, room_analysis)
                    if room.get("direction") == "center"
                ]
                score = mean(centered) if centered else 85
            else:
                score = mean(
                    directional[d]["score"]
                    for d, e in DIRECTION_ELEMENT.items()
                    if e == element and d in directional
                )
            score = clamp_score(score)
            balance = balance_for(score)
            recommendations = (
                ["Maintain the current balance"]
                if balance in ("Excellent", "Good")
                else list(ELEMENT_RECOMMENDATIONS[element])
            )
            elements[element] = {
                "score": score,
                "balance": balance,
                "recommendations": recommendations,
            }
        return elements

    def _energy_flow(
        self,
        orientation: Optional[str],
        directional: Dict[str, dict],
        room_analysis: List[dict],
    ) -> dict:
        # Energy enters from the north and east quadrants.
        entry = mean(directional[d]["score"] for d in ("north", "east", "northeast"))
        issues = [
            issue
            for result in room_analysis
            if result["vastu_score"] < 50
            for issue in result["issues"]
        ]
        recommendations = []
        if orientation not in FAVOURABLE_ORIENTATIONS:
            recommendations.append("Use bright lighting and mirrors near the entrance")
        if directional["northeast"]["score"] < 70:
            recommendations.append("Keep the northeast corner clutter free")
        if not recommendations:
            recommendations.append("Energy flow is well supported")
        return {
            "score": clamp_score(entry - 5 * len(issues)),
            "issues": issues,
            "recommendations": recommendations,
        }

    @staticmethod
    def _dedupe(remedies: List[dict]) -> List[dict]:
        seen = set()
        unique = []
        for remedy in remedies:
            if not remedy["description"] or remedy["description"] in seen:
                continue
            seen.add(remedy["description"])
            unique.append(remedy)
        return unique

    @staticmethod
    def _summary(overall: int, issue_count: int) -> str:
        if overall >= 85:
            verdict = "Excellent Vastu compliance"
        elif overall >= 70:
            verdict = "Overall good Vastu compliance"
        elif overall >= 55:
            verdict = "Moderate Vastu compliance"
        else:
            verdict = "Poor Vastu compliance"
        if issue_count:
            return f"{verdict} with {issue_count} area(s) needing attention."
        return f"{verdict}. No placement issues were found."


class RemoteModelScoring(RuleBasedScoring):
    """
    Delegate the overall score to the external ML service.

    The rule-based payload supplies the breakdown; the model only replaces the
    overall score. Any failure of the service falls back to the rule-based
    result.
    """

    name = "remote-model"

    def __init__(self, session: Optional[requests.Session] = None):
        self.session = session or requests.Session()
        self.config = get_setting()

    def score(self, floor_plan: Dict[str, Any], rules: List[dict]) -> Dict[str, Any]:
        result = super().score(floor_plan, rules)
        try:
            prediction = self._predict(self._features(floor_plan))
        except (requests.RequestException, ValueError, KeyError, TypeError) as exc:
            logger.warning("ML service unavailable, using rule-based score: %s", exc)
            return result

        result["overall_score"] = prediction["vastu_score"]
        model = prediction["model_type"] or "unknown model"
        confidence = prediction["confidence"]
        note = f"Overall score predicted by {model}"
        if confidence is not None:
            note += f" (confidence {confidence:.2f})"
        result["expert_notes"] = note
        result["summary"] = self._summary(
            result["overall_score"], len(result["negative_aspects"])
        )
        return result

    def _features(self, floor_plan: Dict[str, Any]) -> Dict[str, Any]:
        rooms = floor_plan.get("rooms") or []
        dimensions = floor_plan.get("dimensions") or {}
        return {
            "orientation": floor_plan.get("orientation"),
            "area": dimensions.get("area"),
            "unit": dimensions.get("unit"),
            "room_count": len(rooms),
            "rooms": [
                {"type": room.get("type"), "direction": room.get("direction")}
                for room in rooms
            ],
        }

    def _predict(self, features: Dict[str, Any]) -> Dict[str, Any]:
        headers = {}
        if self.config.ML_API_KEY:
            headers["X-API-Key"] = self.config.ML_API_KEY
        response = self.session.post(
            f"{self.config.ML_API_URL.rstrip('/')}/predict",
            json=features,
            headers=headers,
            timeout=self.config.ML_API_TIMEOUT,
        )
        response.raise_for_status()
        payload = response.json()
        score = float(payload["vastu_score"])
        if not math.isfinite(score):
            raise ValueError(f"Model returned a non-finite score: {score}")
        return {
            "vastu_score": clamp_score(score),
            "confidence": self._confidence(payload.get("confidence")),
            "model_type": payload.get("model_type"),
        }

    @staticmethod
    def _confidence(value: Any) -> Optional[float]:
        if value is None:
            return None
        try:
            confidence = float(value)
        except (TypeError, ValueError):
            logger.warning("Ignoring non-numeric model confidence %r", value)
            return None
        return confidence if math.isfinite(confidence) else None


def get_scoring_strategy() -> ScoringStrategy:
    """Instantiate the strategy named by ``VASTU_SCORING_STRATEGY``."""
    return import_string(settings.VASTU_SCORING_STRATEGY)()
