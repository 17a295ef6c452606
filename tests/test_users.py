from asgiref.sync import sync_to_async
from django.contrib.auth.models import User
from django.test import TestCase
from ninja.testing import TestAsyncClient

from config.api import api
from core.models import Notification, Profile
from core.utils.exceptions import ValidationError
from features.users import service
from tests.factories import auth_headers, make_analysis, make_user


class UserServiceTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.user = make_user()

    def test_fetch_user_merges_profile(self):
        data = service.fetch_user(self.user.id)

        self.assertEqual(data["email"], "owner@example.com")
        self.assertEqual(data["subscription_tier"], "premium")
        self.assertTrue(data["is_premium"])

    def test_stats_count_by_status(self):
        make_analysis(self.user, status="completed", overall_score=80)
        make_analysis(self.user, status="completed", overall_score=61)
        make_analysis(self.user, status="failed")
        make_analysis(self.user)

        stats = service.fetch_user_stats(self.user.id)

        self.assertEqual(stats["total_analyses"], 4)
        self.assertEqual(stats["completed_analyses"], 2)
        self.assertEqual(stats["failed_analyses"], 1)
        self.assertEqual(stats["pending_analyses"], 1)
        self.assertEqual(stats["average_score"], 70.5)
        self.assertEqual(len(stats["recent_analyses"]), 4)

    def test_merge_preferences_is_deep(self):
        merged = service.merge_preferences(
            {"language": "en", "notifications": {"email": True, "sms": False}},
            {"notifications": {"sms": True}},
        )

        self.assertEqual(
            merged, {"language": "en", "notifications": {"email": True, "sms": True}}
        )

    def test_duplicate_phone(self):
        other = make_user(email="other@example.com")
        Profile.objects.filter(user=other).update(phone="9876543210")

        with self.assertRaisesMessage(ValidationError, "Phone number is already registered"):
            service.update_profile(self.user.id, {"phone": "9876543210"})


class UserEndpointTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.user = make_user()

    def setUp(self):
        self.client = TestAsyncClient(api)
        self.headers = auth_headers(self.user)

    async def test_update_profile(self):
        response = await self.client.put(
            "/users/profile",
            json={"first_name": "Meera", "phone": "9123456789"},
            headers=self.headers,
        )

        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["first_name"], "Meera")
        self.assertEqual(data["phone"], "9123456789")

    async def test_invalid_phone(self):
        response = await self.client.put(
            "/users/profile", json={"phone": "12345"}, headers=self.headers
        )

        self.assertEqual(response.status_code, 400)

    async def test_update_preferences(self):
        response = await self.client.put(
            "/users/preferences",
            json={"language": "hi", "notifications": {"sms": True}},
            headers=self.headers,
        )

        preferences = response.json()["data"]
        self.assertEqual(preferences["language"], "hi")
        self.assertEqual(
            preferences["notifications"], {"email": True, "sms": True, "push": True}
        )

    async def test_deactivate_account_blocks_token(self):
        response = await self.client.delete("/users/account", headers=self.headers)
        self.assertEqual(response.status_code, 200)

        is_active = await sync_to_async(
            lambda: User.objects.get(id=self.user.id).is_active
        )()
        self.assertFalse(is_active)
        response = await self.client.get("/users/profile", headers=self.headers)
        self.assertEqual(response.status_code, 401)


class NotificationEndpointTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.user = make_user()
        cls.other = make_user(email="other@example.com")
        cls.unread = Notification.objects.create(
            user=cls.user, title="Analysis Completed", message="Ready"
        )
        cls.read = Notification.objects.create(
            user=cls.user, title="Old", message="Seen", is_read=True
        )
        cls.foreign = Notification.objects.create(
            user=cls.other, title="Not yours", message="Private"
        )

    def setUp(self):
        self.client = TestAsyncClient(api)
        self.headers = auth_headers(self.user)

    async def test_list_unread_only(self):
        response = await self.client.get("/notifications/?unread=true", headers=self.headers)

        ids = [n["id"] for n in response.json()["data"]]
        self.assertEqual(ids, [self.unread.id])

    async def test_mark_as_read(self):
        response = await self.client.put(
            f"/notifications/{self.unread.id}/read", headers=self.headers
        )

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["data"]["is_read"])

    async def test_cannot_mark_another_users_notification(self):
        response = await self.client.put(
            f"/notifications/{self.foreign.id}/read", headers=self.headers
        )

        self.assertEqual(response.status_code, 404)


class StaffUserManagementTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.staff = make_user(email="admin@example.com", is_staff=True)
        cls.member = make_user(email="member@example.com", tier="free")

    def setUp(self):
        self.client = TestAsyncClient(api)
        self.staff_headers = auth_headers(self.staff)

    async def test_list_users_is_paginated(self):
        response = await self.client.get("/users/?limit=1", headers=self.staff_headers)

        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["pagination"]["total"], 2)
        self.assertEqual(data["pagination"]["pages"], 2)
        self.assertEqual(data["items"][0]["email"], "member@example.com")

    async def test_members_cannot_list_users(self):
        response = await self.client.get(
            "/users/", headers=auth_headers(self.member)
        )

        self.assertEqual(response.status_code, 403)

    async def test_get_user(self):
        response = await self.client.get(
            f"/users/{self.member.id}", headers=self.staff_headers
        )

        self.assertEqual(response.json()["data"]["subscription_tier"], "free")

    async def test_get_missing_user(self):
        response = await self.client.get("/users/999999", headers=self.staff_headers)

        self.assertEqual(response.status_code, 404)

    async def test_upgrade_subscription(self):
        response = await self.client.put(
            f"/users/{self.member.id}",
            json={"subscription_tier": "premium", "is_staff": True},
            headers=self.staff_headers,
        )

        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["subscription_tier"], "premium")
        self.assertTrue(data["is_premium"])
        self.assertTrue(data["is_staff"])

    async def test_deactivate_user(self):
        response = await self.client.delete(
            f"/users/{self.member.id}", headers=self.staff_headers
        )

        self.assertEqual(response.status_code, 200)
        is_active = await sync_to_async(
            lambda: User.objects.get(id=self.member.id).is_active
        )()
        self.assertFalse(is_active)

    async def test_staff_cannot_deactivate_self_through_admin_route(self):
        response = await self.client.delete(
            f"/users/{self.staff.id}", headers=self.staff_headers
        )

        self.assertEqual(response.status_code, 400)
