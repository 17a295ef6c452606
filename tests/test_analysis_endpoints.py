import asyncio

from asgiref.sync import sync_to_async
from django.test import TestCase
from ninja.testing import TestAsyncClient

from config.api import api
from core.models import Analysis
from tests.factories import SAMPLE_ROOMS, auth_headers, make_analysis, make_user


class AnalysisEndpointTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.owner = make_user()
        cls.stranger = make_user(email="stranger@example.com")
        cls.private = make_analysis(cls.owner, title="Private Home")
        cls.public = make_analysis(
            cls.owner, title="Public Home", is_public=True, tags=["villa", "north"]
        )

    def setUp(self):
        self.client = TestAsyncClient(api)
        self.owner_headers = auth_headers(self.owner)
        self.stranger_headers = auth_headers(self.stranger)

    async def test_create_returns_pending_analysis(self):
        response = await self.client.post(
            "/analysis/",
            json={
                "title": "  Sea View  ",
                "floor_plan": {
                    "orientation": "east",
                    "dimensions": {"length": 50, "width": 20, "unit": "sqft"},
                    "rooms": SAMPLE_ROOMS,
                },
                "tags": ["flat", "flat", " sea "],
            },
            headers=self.owner_headers,
        )

        self.assertEqual(response.status_code, 201)
        data = response.json()["data"]
        self.assertEqual(data["status"], "pending")
        self.assertEqual(data["title"], "Sea View")
        self.assertEqual(data["tags"], ["flat", "sea"])
        self.assertEqual(data["floor_plan"]["dimensions"]["area"], 1000)
        self.assertEqual(data["room_count"], 3)

    async def test_create_requires_token(self):
        response = await self.client.post(
            "/analysis/",
            json={"title": "Home", "floor_plan": {"orientation": "north"}},
        )

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["kind"], "UnauthorizedError")

    async def test_create_rejects_bad_orientation(self):
        response = await self.client.post(
            "/analysis/",
            json={"title": "Home", "floor_plan": {"orientation": "upwards"}},
            headers=self.owner_headers,
        )

        self.assertEqual(response.status_code, 400)
        body = response.json()
        self.assertFalse(body["success"])
        self.assertEqual(body["kind"], "ValidationError")

    async def test_start_then_read_completed(self):
        analysis = await sync_to_async(make_analysis)(self.owner, rooms=SAMPLE_ROOMS)

        response = await self.client.post(
            f"/analysis/{analysis.id}/start", headers=self.owner_headers
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["status"], "processing")

        response = await self.client.get(
            f"/analysis/{analysis.id}", headers=self.owner_headers
        )
        data = response.json()["data"]
        self.assertEqual(data["status"], "completed")
        self.assertTrue(0 <= data["overall_score"] <= 100)
        self.assertEqual(len(data["vastu_analysis"]["directional_analysis"]), 8)

    async def test_second_start_is_conflict(self):
        analysis = await sync_to_async(make_analysis)(self.owner)
        await self.client.post(f"/analysis/{analysis.id}/start", headers=self.owner_headers)

        response = await self.client.post(
            f"/analysis/{analysis.id}/start", headers=self.owner_headers
        )

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["kind"], "ConflictError")

    async def test_private_analysis_hidden_from_others(self):
        response = await self.client.get(
            f"/analysis/{self.private.id}", headers=self.stranger_headers
        )
        self.assertEqual(response.status_code, 403)

        response = await self.client.get(f"/analysis/{self.private.id}")
        self.assertEqual(response.status_code, 403)

    async def test_owner_read_does_not_count_view(self):
        response = await self.client.get(
            f"/analysis/{self.private.id}", headers=self.owner_headers
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["views"], 0)

    async def test_anonymous_read_of_public_counts_view(self):
        response = await self.client.get(f"/analysis/{self.public.id}")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["views"], 1)
        views = await sync_to_async(
            lambda: Analysis.objects.get(id=self.public.id).views
        )()
        self.assertEqual(views, 1)

    async def test_missing_analysis_is_not_found(self):
        response = await self.client.get("/analysis/999999", headers=self.owner_headers)

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["kind"], "NotFoundError")

    async def test_score_endpoint_for_premium_user(self):
        response = await self.client.post(
            "/analysis/score",
            json={"orientation": "north", "rooms": SAMPLE_ROOMS},
            headers=self.owner_headers,
        )

        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertTrue(0 <= data["overall_score"] <= 100)
        self.assertEqual(len(data["five_elements"]), 5)

    async def test_score_endpoint_rejects_free_tier(self):
        free_user = await sync_to_async(make_user)(email="free@example.com", tier="free")

        response = await self.client.post(
            "/analysis/score",
            json={"orientation": "north"},
            headers=await sync_to_async(auth_headers)(free_user),
        )

        self.assertEqual(response.status_code, 403)

    async def test_likes_through_endpoint_accumulate(self):
        responses = await asyncio.gather(
            *[
                self.client.post(
                    f"/analysis/{self.public.id}/like", headers=self.stranger_headers
                )
                for _ in range(50)
            ]
        )

        self.assertTrue(all(r.status_code == 200 for r in responses))
        likes = await sync_to_async(
            lambda: Analysis.objects.get(id=self.public.id).likes
        )()
        self.assertEqual(likes, 50)

    async def test_like_private_is_forbidden(self):
        response = await self.client.post(
            f"/analysis/{self.private.id}/like", headers=self.owner_headers
        )

        self.assertEqual(response.status_code, 403)

    async def test_share_returns_new_count(self):
        response = await self.client.post(
            f"/analysis/{self.public.id}/share", headers=self.stranger_headers
        )

        self.assertEqual(response.json()["data"], {"shares": 1})

    async def test_update_by_owner(self):
        response = await self.client.put(
            f"/analysis/{self.private.id}",
            json={"title": "Renamed Home", "is_public": True},
            headers=self.owner_headers,
        )

        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["title"], "Renamed Home")
        self.assertTrue(data["is_public"])

    async def test_update_by_stranger_is_forbidden(self):
        response = await self.client.put(
            f"/analysis/{self.public.id}",
            json={"title": "Hijacked"},
            headers=self.stranger_headers,
        )

        self.assertEqual(response.status_code, 403)

    async def test_update_cleans_tags(self):
        response = await self.client.put(
            f"/analysis/{self.private.id}",
            json={"tags": ["  duplex ", "duplex", "", "   ", "garden"]},
            headers=self.owner_headers,
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["tags"], ["duplex", "garden"])

    async def test_delete_by_stranger_is_forbidden(self):
        response = await self.client.delete(
            f"/analysis/{self.public.id}", headers=self.stranger_headers
        )

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["kind"], "ForbiddenError")
        exists = await sync_to_async(Analysis.objects.filter(id=self.public.id).exists)()
        self.assertTrue(exists)

    async def test_delete_by_owner(self):
        analysis = await sync_to_async(make_analysis)(self.owner)

        response = await self.client.delete(
            f"/analysis/{analysis.id}", headers=self.owner_headers
        )

        self.assertEqual(response.status_code, 200)
        exists = await sync_to_async(Analysis.objects.filter(id=analysis.id).exists)()
        self.assertFalse(exists)


class AnalysisListTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.owner = make_user()
        cls.other = make_user(email="other@example.com")
        cls.high = make_analysis(
            cls.owner, title="Alpha", is_public=True, overall_score=90,
            status="completed", tags=["villa"],
        )
        cls.low = make_analysis(
            cls.other, title="Beta", is_public=True, overall_score=60,
            status="completed", tags=["flat"],
        )
        cls.unscored = make_analysis(cls.owner, title="Gamma", is_public=True)
        cls.hidden = make_analysis(cls.other, title="Delta", overall_score=95)

    def setUp(self):
        self.client = TestAsyncClient(api)

    async def test_public_feed_excludes_private(self):
        response = await self.client.get("/analysis/")

        data = response.json()["data"]
        ids = {item["id"] for item in data["items"]}
        self.assertEqual(ids, {self.high.id, self.low.id, self.unscored.id})
        self.assertEqual(data["pagination"]["total"], 3)

    async def test_min_score_filter(self):
        response = await self.client.get("/analysis/?min_score=70")

        items = response.json()["data"]["items"]
        self.assertEqual([item["id"] for item in items], [self.high.id])

    async def test_sort_by_title(self):
        response = await self.client.get("/analysis/?sort=title")

        titles = [item["title"] for item in response.json()["data"]["items"]]
        self.assertEqual(titles, ["Alpha", "Beta", "Gamma"])

    async def test_tag_filter(self):
        response = await self.client.get("/analysis/?tags=flat")

        items = response.json()["data"]["items"]
        self.assertEqual([item["id"] for item in items], [self.low.id])

    async def test_pagination(self):
        response = await self.client.get("/analysis/?limit=2&page=2&sort=title")

        data = response.json()["data"]
        self.assertEqual([item["title"] for item in data["items"]], ["Gamma"])
        self.assertEqual(data["pagination"], {"current": 2, "pages": 2, "total": 3, "limit": 2})

    async def test_mine_lists_own_analyses_including_private(self):
        response = await self.client.get(
            "/analysis/?mine=true", headers=auth_headers(self.other)
        )

        ids = {item["id"] for item in response.json()["data"]["items"]}
        self.assertEqual(ids, {self.low.id, self.hidden.id})

    async def test_mine_requires_token(self):
        response = await self.client.get("/analysis/?mine=true")

        self.assertEqual(response.status_code, 401)

    async def test_limit_out_of_range(self):
        response = await self.client.get("/analysis/?limit=500")

        self.assertEqual(response.status_code, 400)
