import re
import smtplib
from unittest import mock

from asgiref.sync import sync_to_async
from django.contrib.auth.models import User
from django.core import mail
from django.test import TestCase
from ninja.testing import TestAsyncClient

from config.api import api
from core.models import Profile
from tests.factories import PASSWORD, auth_headers, make_user

REGISTRATION = {
    "first_name": "Asha",
    "last_name": "Rao",
    "email": "Asha.Rao@Example.com",
    "phone": "9876543210",
    "password": PASSWORD,
}

SMTP_DOWN = mock.patch(
    "django.core.mail.EmailMultiAlternatives.send",
    side_effect=smtplib.SMTPException("connection refused"),
)


def link_token(message, marker):
    html = message.alternatives[0][0]
    return re.search(rf"{marker}/([0-9a-f]+)", html).group(1)


class RegistrationTests(TestCase):
    def setUp(self):
        self.client = TestAsyncClient(api)

    async def test_register_creates_user_and_sends_verification(self):
        response = await self.client.post("/auth/register", json=REGISTRATION)

        self.assertEqual(response.status_code, 201)
        data = response.json()["data"]
        self.assertEqual(data["user"]["email"], "asha.rao@example.com")
        self.assertFalse(data["user"]["is_email_verified"])
        self.assertIn("access", data["tokens"])
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ["asha.rao@example.com"])

    async def test_register_succeeds_when_email_fails(self):
        with SMTP_DOWN:
            response = await self.client.post("/auth/register", json=REGISTRATION)

        self.assertEqual(response.status_code, 201)
        exists = await sync_to_async(
            User.objects.filter(email="asha.rao@example.com").exists
        )()
        self.assertTrue(exists)

    async def test_duplicate_email_is_rejected(self):
        await self.client.post("/auth/register", json=REGISTRATION)

        response = await self.client.post(
            "/auth/register", json=dict(REGISTRATION, phone="9876500000")
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(await sync_to_async(User.objects.count)(), 1)

    async def test_weak_password_is_rejected(self):
        response = await self.client.post(
            "/auth/register", json=dict(REGISTRATION, password="password")
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["kind"], "ValidationError")

    async def test_verify_email_with_mailed_token(self):
        await self.client.post("/auth/register", json=REGISTRATION)
        token = link_token(mail.outbox[0], "verify-email")

        response = await self.client.get(f"/auth/verify-email/{token}")

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["data"]["is_email_verified"])
        self.assertEqual(mail.outbox[-1].subject, "Welcome to Vastu Vision!")

    async def test_verify_email_rejects_unknown_token(self):
        response = await self.client.get("/auth/verify-email/deadbeef")

        self.assertEqual(response.status_code, 400)


class LoginTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.user = make_user(email="login@example.com")
        cls.inactive = make_user(email="gone@example.com", active=False)

    def setUp(self):
        self.client = TestAsyncClient(api)
        self.headers = auth_headers(self.user)

    async def test_login_returns_tokens_and_counts(self):
        response = await self.client.post(
            "/auth/login", json={"email": "LOGIN@example.com", "password": PASSWORD}
        )

        self.assertEqual(response.status_code, 200)
        self.assertIn("refresh", response.json()["data"]["tokens"])
        profile = await sync_to_async(Profile.objects.get)(user=self.user)
        self.assertEqual(profile.login_count, 1)

    async def test_wrong_password(self):
        response = await self.client.post(
            "/auth/login", json={"email": "login@example.com", "password": "Wrong@123"}
        )

        self.assertEqual(response.status_code, 401)

    async def test_inactive_account(self):
        response = await self.client.post(
            "/auth/login", json={"email": "gone@example.com", "password": PASSWORD}
        )

        self.assertEqual(response.status_code, 401)

    async def test_refresh_issues_new_access_token(self):
        login = await self.client.post(
            "/auth/login", json={"email": "login@example.com", "password": PASSWORD}
        )
        refresh = login.json()["data"]["tokens"]["refresh"]

        response = await self.client.post("/auth/refresh", json={"refresh": refresh})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["user_id"], self.user.id)

    async def test_me_requires_token(self):
        self.assertEqual((await self.client.get("/auth/me")).status_code, 401)

        response = await self.client.get("/auth/me", headers=self.headers)
        self.assertEqual(response.json()["data"]["email"], "login@example.com")


class PasswordResetTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.user = make_user(email="reset@example.com")

    def setUp(self):
        self.client = TestAsyncClient(api)

    async def test_reset_with_mailed_token(self):
        response = await self.client.post(
            "/auth/forgot-password", json={"email": "reset@example.com"}
        )
        self.assertTrue(response.json()["data"]["email_sent"])
        token = link_token(mail.outbox[0], "reset-password")

        response = await self.client.post(
            f"/auth/reset-password/{token}", json={"password": "N3w@Password"}
        )

        self.assertEqual(response.status_code, 200)
        await sync_to_async(self.user.refresh_from_db)()
        self.assertTrue(self.user.check_password("N3w@Password"))
        profile = await sync_to_async(Profile.objects.get)(user=self.user)
        self.assertIsNone(profile.reset_password_token)

    async def test_token_cannot_be_reused(self):
        await self.client.post("/auth/forgot-password", json={"email": "reset@example.com"})
        token = link_token(mail.outbox[0], "reset-password")
        await self.client.post(f"/auth/reset-password/{token}", json={"password": "N3w@Password"})

        response = await self.client.post(
            f"/auth/reset-password/{token}", json={"password": "An0ther@Pass"}
        )

        self.assertEqual(response.status_code, 400)

    async def test_failed_email_clears_reset_token(self):
        with SMTP_DOWN:
            response = await self.client.post(
                "/auth/forgot-password", json={"email": "reset@example.com"}
            )

        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.json()["data"]["email_sent"])
        profile = await sync_to_async(Profile.objects.get)(user=self.user)
        self.assertIsNone(profile.reset_password_token)
        self.assertIsNone(profile.reset_password_expire)

    async def test_unknown_email(self):
        response = await self.client.post(
            "/auth/forgot-password", json={"email": "nobody@example.com"}
        )

        self.assertEqual(response.status_code, 404)
