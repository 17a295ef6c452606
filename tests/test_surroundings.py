from django.test import SimpleTestCase, TestCase
from ninja.testing import TestClient

from config.api import api
from features.maps.surroundings import (
    analyze_surroundings,
    bearing,
    compass_direction,
    haversine_km,
)
from tests.factories import auth_headers, make_user

HOME = (12.9716, 77.5946)


class CompassTests(SimpleTestCase):
    def test_cardinal_bearings(self):
        lat, lon = HOME
        self.assertAlmostEqual(bearing(lat, lon, lat + 0.01, lon), 0.0, places=3)
        self.assertAlmostEqual(bearing(lat, lon, lat - 0.01, lon), 180.0, places=3)
        self.assertAlmostEqual(bearing(lat, lon, lat, lon + 0.01), 90.0, delta=0.1)
        self.assertAlmostEqual(bearing(lat, lon, lat, lon - 0.01), 270.0, delta=0.1)

    def test_sectors_are_centered_on_compass_points(self):
        self.assertEqual(compass_direction(0), "north")
        self.assertEqual(compass_direction(22.4), "north")
        self.assertEqual(compass_direction(22.5), "northeast")
        self.assertEqual(compass_direction(135), "southeast")
        self.assertEqual(compass_direction(200), "south")
        self.assertEqual(compass_direction(337.5), "north")
        self.assertEqual(compass_direction(-45), "northwest")

    def test_haversine(self):
        # One degree of latitude is about 111 km.
        self.assertAlmostEqual(haversine_km(0, 0, 1, 0), 111.19, places=1)
        self.assertEqual(haversine_km(*HOME, *HOME), 0)


class AnalyzeSurroundingsTests(SimpleTestCase):
    def test_scores_each_place_type_once(self):
        lat, lon = HOME
        places = [
            {"name": "Lake", "type": "water", "latitude": lat + 0.01, "longitude": lon},
            {"name": "Pond", "type": "water", "latitude": lat + 0.02, "longitude": lon},
            {"name": "Old Cemetery", "type": "cemetery", "latitude": lat - 0.01, "longitude": lon},
            {"name": "Mall", "type": "other", "latitude": lat, "longitude": lon + 0.01},
        ]

        result = analyze_surroundings(lat, lon, places)

        self.assertEqual(result["vastu_score"], 10 - 15)
        self.assertEqual(len(result["positive_elements"]), 1)
        self.assertEqual(len(result["negative_elements"]), 1)
        self.assertEqual(result["directional_analysis"]["north"]["score"], 20)
        self.assertEqual(result["directional_analysis"]["north"]["elements"], ["Lake", "Pond"])
        self.assertEqual(result["directional_analysis"]["south"]["score"], -15)
        self.assertEqual(result["directional_analysis"]["east"]["elements"], ["Mall"])
        self.assertEqual(
            [p["direction"] for p in result["places"]], ["north", "north", "south", "east"]
        )
        self.assertIn(
            "Main entrance should face north for prosperity",
            result["orientation"]["recommendations"],
        )

    def test_no_places(self):
        result = analyze_surroundings(*HOME, [])

        self.assertEqual(result["vastu_score"], 0)
        self.assertEqual(result["recommendations"], [])
        self.assertEqual(len(result["directional_analysis"]), 8)


class SurroundingsEndpointTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.user = make_user()

    def setUp(self):
        self.client = TestClient(api)

    def test_requires_token(self):
        response = self.client.post("/maps/surroundings", json={"latitude": 0, "longitude": 0})

        self.assertEqual(response.status_code, 401)

    def test_analyzes_places(self):
        lat, lon = HOME
        response = self.client.post(
            "/maps/surroundings",
            json={
                "latitude": lat,
                "longitude": lon,
                "places": [
                    {"name": "Cubbon Park", "type": "park", "latitude": lat, "longitude": lon - 0.01}
                ],
            },
            headers=auth_headers(self.user),
        )

        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["vastu_score"], 8)
        self.assertEqual(data["places"][0]["direction"], "west")

    def test_rejects_out_of_range_latitude(self):
        response = self.client.post(
            "/maps/surroundings",
            json={"latitude": 120, "longitude": 0},
            headers=auth_headers(self.user),
        )

        self.assertEqual(response.status_code, 400)
