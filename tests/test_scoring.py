from unittest import mock

import requests
from django.test import SimpleTestCase, override_settings

from features.analysis.schemas import VastuAnalysisSchema
from features.analysis.scoring import (
    RemoteModelScoring,
    RuleBasedScoring,
    balance_for,
    clamp_score,
    get_scoring_strategy,
)
from features.analysis.worker import call_with_timeout

FLOOR_PLAN = {
    "orientation": "north",
    "dimensions": {"length": 40, "width": 30, "area": 1200, "unit": "sqft"},
    "rooms": [
        {"name": "Kitchen", "type": "kitchen", "direction": "southeast"},
        {"name": "Master Bedroom", "type": "bedroom", "direction": "southwest"},
        {"name": "Toilet", "type": "bathroom", "direction": "northeast"},
    ],
}

BATHROOM_RULE = {
    "name": "Bathroom Placement",
    "category": "bathroom",
    "direction": "northeast",
    "room_type": "bathroom",
    "element": "water",
    "importance": "critical",
    "impact": "negative",
    "remedies": [
        {
            "type": "construction",
            "description": "Relocate the bathroom out of the northeast",
            "cost": "high",
            "difficulty": "hard",
        }
    ],
}


class RuleBasedScoringTests(SimpleTestCase):
    def setUp(self):
        self.strategy = RuleBasedScoring()

    def test_payload_satisfies_result_contract(self):
        payload = self.strategy.score(FLOOR_PLAN, [BATHROOM_RULE])

        VastuAnalysisSchema.model_validate(payload)
        self.assertTrue(0 <= payload["overall_score"] <= 100)

    def test_scoring_is_deterministic(self):
        first = self.strategy.score(FLOOR_PLAN, [BATHROOM_RULE])
        second = self.strategy.score(FLOOR_PLAN, [BATHROOM_RULE])

        self.assertEqual(first, second)

    def test_ideal_placement_beats_avoided_placement(self):
        rooms = {
            r["room_name"]: r["vastu_score"]
            for r in self.strategy.score(FLOOR_PLAN, [])["room_analysis"]
        }

        self.assertEqual(rooms["Kitchen"], 95)
        self.assertEqual(rooms["Master Bedroom"], 95)
        self.assertEqual(rooms["Toilet"], 35)

    def test_negative_rule_lowers_score_and_adds_remedy(self):
        without = self.strategy.score(FLOOR_PLAN, [])
        with_rule = self.strategy.score(FLOOR_PLAN, [BATHROOM_RULE])

        toilet = with_rule["room_analysis"][2]
        self.assertEqual(toilet["vastu_score"], 20)
        self.assertIn("Relocate the bathroom out of the northeast", toilet["remedies"])
        self.assertLess(with_rule["overall_score"], without["overall_score"])
        descriptions = [r["description"] for r in with_rule["remedies"]]
        self.assertEqual(len(descriptions), len(set(descriptions)))

    def test_rule_for_other_direction_is_ignored(self):
        rule = dict(BATHROOM_RULE, direction="southwest")

        self.assertEqual(
            self.strategy.score(FLOOR_PLAN, [rule]),
            self.strategy.score(FLOOR_PLAN, []),
        )

    def test_room_without_direction(self):
        plan = {"orientation": "south", "rooms": [{"name": "Den", "type": "study"}]}

        room = self.strategy.score(plan, [])["room_analysis"][0]

        self.assertEqual(room["vastu_score"], 60)
        self.assertTrue(room["issues"])

    def test_empty_plan_covers_every_direction_and_element(self):
        payload = self.strategy.score({"orientation": "east", "rooms": []}, [])

        self.assertEqual(len(payload["directional_analysis"]), 8)
        self.assertEqual(len(payload["five_elements"]), 5)
        self.assertEqual(payload["directional_analysis"]["east"]["score"], 85)
        self.assertEqual(payload["room_analysis"], [])

    def test_helpers(self):
        self.assertEqual(clamp_score(-3), 0)
        self.assertEqual(clamp_score(140.2), 100)
        self.assertEqual(balance_for(85), "Excellent")
        self.assertEqual(balance_for(70), "Good")
        self.assertEqual(balance_for(55), "Moderate")
        self.assertEqual(balance_for(54), "Poor")


class RemoteModelScoringTests(SimpleTestCase):
    def _strategy(self, session):
        return RemoteModelScoring(session=session)

    def test_uses_predicted_score(self):
        session = mock.Mock()
        session.post.return_value.json.return_value = {
            "vastu_score": 73.6,
            "confidence": 0.9,
            "model_type": "random_forest",
        }

        payload = self._strategy(session).score(FLOOR_PLAN, [])

        self.assertEqual(payload["overall_score"], 74)
        self.assertIn("random_forest", payload["expert_notes"])
        features = session.post.call_args.kwargs["json"]
        self.assertEqual(features["room_count"], 3)
        VastuAnalysisSchema.model_validate(payload)

    def test_falls_back_when_service_unreachable(self):
        session = mock.Mock()
        session.post.side_effect = requests.ConnectionError("refused")

        payload = self._strategy(session).score(FLOOR_PLAN, [])

        self.assertEqual(payload, RuleBasedScoring().score(FLOOR_PLAN, []))

    def test_falls_back_on_malformed_response(self):
        session = mock.Mock()
        session.post.return_value.json.return_value = {"unexpected": True}

        payload = self._strategy(session).score(FLOOR_PLAN, [])

        self.assertEqual(
            payload["overall_score"],
            RuleBasedScoring().score(FLOOR_PLAN, [])["overall_score"],
        )

    def test_falls_back_on_nan_score(self):
        session = mock.Mock()
        session.post.return_value.json.return_value = {"vastu_score": float("nan")}

        payload = self._strategy(session).score(FLOOR_PLAN, [])

        self.assertEqual(payload, RuleBasedScoring().score(FLOOR_PLAN, []))

    def test_non_numeric_confidence_is_dropped(self):
        session = mock.Mock()
        session.post.return_value.json.return_value = {
            "vastu_score": 64,
            "confidence": "high",
            "model_type": "xgboost",
        }

        payload = self._strategy(session).score(FLOOR_PLAN, [])

        self.assertEqual(payload["overall_score"], 64)
        self.assertEqual(payload["expert_notes"], "Overall score predicted by xgboost")
        VastuAnalysisSchema.model_validate(payload)


class StrategyLoadingTests(SimpleTestCase):
    @override_settings(VASTU_SCORING_STRATEGY="features.analysis.scoring.RuleBasedScoring")
    def test_loads_configured_strategy(self):
        self.assertIsInstance(get_scoring_strategy(), RuleBasedScoring)

    def test_call_with_timeout_returns_result(self):
        self.assertEqual(call_with_timeout(sum, 1, [1, 2, 3]), 6)
