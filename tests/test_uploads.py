import io
import shutil
import tempfile
from unittest import mock

from asgiref.sync import sync_to_async
from django.core.files.storage import FileSystemStorage, default_storage
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase
from ninja.testing import TestAsyncClient
from PIL import Image

from config.api import api
from core.models import Analysis
from core.utils.exceptions import (
    DependencyError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from features.uploads import service
from features.uploads.storage import BlobStore
from tests.factories import auth_headers, make_analysis, make_user, principal


def png_file(name="plan.png", size=(3000, 2000)):
    buffer = io.BytesIO()
    Image.new("RGB", size, color=(200, 180, 150)).save(buffer, format="PNG")
    return SimpleUploadedFile(name, buffer.getvalue(), content_type="image/png")


def pdf_file(name="plan.pdf"):
    return SimpleUploadedFile(
        name, b"%PDF-1.4 floor plan", content_type="application/pdf"
    )


class BlobStoreTests(TestCase):
    def test_large_image_is_resized_to_jpeg(self):
        blob = BlobStore().upload(
            png_file().read(), "image/png", "vastu-vision/users/1", "plan.png"
        )

        self.assertEqual(blob.mime_type, "image/jpeg")
        self.assertEqual((blob.width, blob.height), (1620, 1080))
        self.assertTrue(blob.storage_id.endswith(".jpg"))
        self.assertTrue(default_storage.exists(blob.storage_id))

    def test_pdf_is_stored_untouched(self):
        blob = BlobStore().upload(
            b"%PDF-1.4", "application/pdf", "vastu-vision/users/1", "plan.pdf"
        )

        self.assertEqual(blob.size, 8)
        self.assertIsNone(blob.width)

    def test_corrupt_image_is_rejected(self):
        with self.assertRaises(ValidationError):
            BlobStore().upload(b"not an image", "image/png", "vastu-vision/users/1")

    def test_delete_missing_blob(self):
        self.assertFalse(BlobStore().delete("vastu-vision/users/1/missing.jpg"))


class UploadAnalysisFilesTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.owner = make_user()

    def setUp(self):
        self.principal = principal(self.owner)

    def test_creates_pending_analysis_with_files(self):
        data = service.upload_analysis_files(
            self.principal, [png_file(), pdf_file()], orientation="north"
        )

        self.assertEqual(data["status"], "pending")
        self.assertEqual(data["file_count"], 2)
        self.assertTrue(data["title"].startswith("Analysis "))
        for stored in data["files"]:
            self.assertTrue(
                stored["storage_id"].startswith(f"vastu-vision/users/{self.owner.id}/")
            )
            self.assertTrue(default_storage.exists(stored["storage_id"]))

    def test_failed_upload_removes_stored_blobs(self):
        real_upload = BlobStore.upload
        stored = []

        def flaky_upload(store, *args, **kwargs):
            if stored:
                raise DependencyError("storage offline")
            blob = real_upload(store, *args, **kwargs)
            stored.append(blob)
            return blob

        with mock.patch.object(
            BlobStore, "upload", autospec=True, side_effect=flaky_upload
        ):
            with self.assertRaises(DependencyError):
                service.upload_analysis_files(
                    self.principal, [pdf_file("a.pdf"), pdf_file("b.pdf")], orientation="east"
                )

        self.assertEqual(len(stored), 1)
        self.assertFalse(default_storage.exists(stored[0].storage_id))
        self.assertFalse(Analysis.objects.exists())

    def test_requires_orientation(self):
        with self.assertRaises(ValidationError):
            service.upload_analysis_files(self.principal, [pdf_file()], orientation=None)

    def test_rejects_empty_batch(self):
        with self.assertRaises(ValidationError):
            service.upload_analysis_files(self.principal, [], orientation="north")

    def test_rejects_too_many_files(self):
        files = [pdf_file(f"{i}.pdf") for i in range(6)]

        with self.assertRaises(ValidationError):
            service.upload_analysis_files(self.principal, files, orientation="north")

    def test_rejects_unsupported_type(self):
        upload = SimpleUploadedFile("notes.txt", b"hello", content_type="text/plain")

        with self.assertRaises(ValidationError):
            service.upload_analysis_files(self.principal, [upload], orientation="north")

    def test_rejects_oversized_file(self):
        with self.settings(MAX_UPLOAD_SIZE=10):
            with self.assertRaises(ValidationError):
                service.upload_analysis_files(
                    self.principal, [pdf_file()], orientation="north"
                )


class FileManagementTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.owner = make_user()
        cls.free_user = make_user(email="free@example.com", tier="free")

    def test_delete_own_file(self):
        blob = service.upload_single_file(principal(self.owner), pdf_file())

        self.assertTrue(service.delete_file(principal(self.owner), blob["storage_id"]))
        self.assertFalse(default_storage.exists(blob["storage_id"]))

    def test_cannot_delete_another_users_file(self):
        blob = service.upload_single_file(principal(self.owner), pdf_file())

        with self.assertRaises(ForbiddenError):
            service.delete_file(principal(self.free_user), blob["storage_id"])

    def test_stats_for_free_tier(self):
        make_analysis(self.free_user)
        make_analysis(self.free_user)

        stats = service.upload_stats(principal(self.free_user))

        self.assertEqual(stats["total_analyses"], 2)
        self.assertEqual(stats["subscription_tier"], "free")
        self.assertEqual(stats["remaining_uploads"], 8)

    def test_stats_for_premium_has_no_limit(self):
        stats = service.upload_stats(principal(self.owner))

        self.assertIsNone(stats["remaining_uploads"])


class FileSystemOwnershipTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.victim = make_user(email="victim@example.com")
        cls.attacker = make_user(email="attacker@example.com")

    def setUp(self):
        location = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, location, ignore_errors=True)
        self.store = BlobStore(FileSystemStorage(location=location, base_url="/media/"))
        patcher = mock.patch.object(service, "get_blob_store", return_value=self.store)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.blob = self.store.upload(
            b"%PDF-1.4", "application/pdf", service.user_folder(self.victim.id), "plan.pdf"
        )
        self.climbing_path = "{}/../{}/{}".format(
            service.user_folder(self.attacker.id),
            self.victim.id,
            self.blob.storage_id.rsplit("/", 1)[1],
        )

    def test_parent_segments_cannot_reach_another_users_folder(self):
        with self.assertRaises(ForbiddenError):
            service.delete_file(principal(self.attacker), self.climbing_path)

        self.assertTrue(self.store.storage.exists(self.blob.storage_id))

    def test_file_info_rejects_parent_segments(self):
        with self.assertRaises(ForbiddenError):
            service.file_info(principal(self.attacker), self.climbing_path)

    def test_owner_reads_and_deletes_own_file(self):
        info = service.file_info(principal(self.victim), self.blob.storage_id)

        self.assertEqual(info["size"], 8)
        self.assertEqual(info["mime_type"], "application/pdf")
        self.assertTrue(service.delete_file(principal(self.victim), self.blob.storage_id))
        self.assertFalse(self.store.storage.exists(self.blob.storage_id))

    def test_file_info_for_missing_file(self):
        with self.assertRaises(NotFoundError):
            service.file_info(
                principal(self.victim), f"{service.user_folder(self.victim.id)}/gone.pdf"
            )


class FileInfoEndpointTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.owner = make_user()
        cls.stranger = make_user(email="stranger@example.com")

    def setUp(self):
        self.client = TestAsyncClient(api)
        self.blob = service.upload_single_file(principal(self.owner), pdf_file())

    async def test_owner_reads_file_info(self):
        response = await self.client.get(
            f"/upload/files/{self.blob['storage_id']}",
            headers=await sync_to_async(auth_headers)(self.owner),
        )

        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["storage_id"], self.blob["storage_id"])
        self.assertEqual(data["mime_type"], "application/pdf")

    async def test_stranger_is_forbidden(self):
        response = await self.client.get(
            f"/upload/files/{self.blob['storage_id']}",
            headers=await sync_to_async(auth_headers)(self.stranger),
        )

        self.assertEqual(response.status_code, 403)
