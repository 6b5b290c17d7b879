# =============================================================================
# tests/test_storage_service.py - Storage Adapter Tests
# =============================================================================
# Tests for core/services/storage_service.py with a mocked Supabase client:
# - object path building and URL -> path mapping
# - upload error translation
# - batch deletion with per-URL outcomes (never raises)
#
# Run with: pytest tests/test_storage_service.py -v
# =============================================================================

import re
from unittest.mock import MagicMock

import pytest

from app.exceptions import StorageUploadError
from core.services.storage_service import (
    StorageService,
    UploadedFile,
    build_object_path,
    path_from_url,
)

BASE = "https://test-project.supabase.co/storage/v1/object"


@pytest.fixture
def mock_client():
    """Supabase client whose storage bucket API is a MagicMock."""
    client = MagicMock()
    bucket_api = client.storage.from_.return_value
    bucket_api.get_public_url.side_effect = lambda path: f"{BASE}/public/project-files/{path}?"
    return client


@pytest.fixture
def bucket_api(mock_client):
    return mock_client.storage.from_.return_value


class TestPaths:
    """Tests for object path helpers."""

    def test_build_object_path(self):
        path = build_object_path("hero-images", "Front View.JPG")

        assert re.fullmatch(r"hero-images/[0-9a-f]{32}-front-view\.jpg", path)

    def test_build_object_path_without_name(self):
        path = build_object_path("/docs/", "")

        assert re.fullmatch(r"docs/[0-9a-f]{32}-file", path)

    def test_paths_are_unique(self):
        assert build_object_path("a", "x.png") != build_object_path("a", "x.png")

    def test_public_url(self):
        url = f"{BASE}/public/project-files/hero-images/a.jpg"

        assert path_from_url("project-files", url) == "hero-images/a.jpg"

    def test_signed_url_with_query(self):
        url = f"{BASE}/sign/project-files/docs/b%20c.pdf?token=abc"

        assert path_from_url("project-files", url) == "docs/b c.pdf"

    @pytest.mark.parametrize("url", [
        "",
        "https://example.com/a.jpg",
        f"{BASE}/public/other-bucket/a.jpg",
        f"{BASE}/public/project-files/",
    ])
    def test_foreign_urls(self, url):
        assert path_from_url("project-files", url) is None


class TestUpload:
    """Tests for StorageService.upload()."""

    def test_returns_public_url(self, mock_client, bucket_api):
        service = StorageService(client=mock_client)

        url = service.upload("project-files", "hero-images", b"data", "front.jpg", "image/jpeg")

        mock_client.storage.from_.assert_called_with("project-files")
        kwargs = bucket_api.upload.call_args.kwargs
        assert kwargs["file"] == b"data"
        assert kwargs["file_options"]["content-type"] == "image/jpeg"
        assert kwargs["path"].startswith("hero-images/")
        assert url == f"{BASE}/public/project-files/{kwargs['path']}"

    def test_default_content_type(self, mock_client, bucket_api):
        StorageService(client=mock_client).upload("b", "f", b"x", "blob")

        options = bucket_api.upload.call_args.kwargs["file_options"]
        assert options["content-type"] == "application/octet-stream"

    def test_failure_raises_storage_upload_error(self, mock_client, bucket_api):
        bucket_api.upload.side_effect = Exception("Bucket not found")

        with pytest.raises(StorageUploadError) as exc_info:
            StorageService(client=mock_client).upload("b", "f", b"x", "a.png")

        assert exc_info.value.status_code == 500
        assert exc_info.value.details["filename"] == "a.png"

    def test_upload_many(self, mock_client, bucket_api):
        files = [UploadedFile(b"1", "a.png"), UploadedFile(b"2", "b.png", "image/png")]

        urls = StorageService(client=mock_client).upload_many("project-files", "imgs", files)

        assert len(urls) == 2
        assert bucket_api.upload.call_count == 2


class TestDeleteByUrls:
    """Tests for StorageService.delete_by_urls()."""

    def test_single_batch_call(self, mock_client, bucket_api):
        urls = [
            f"{BASE}/public/project-files/hero-images/a.jpg",
            f"{BASE}/public/project-files/project-images/b.jpg",
        ]
        bucket_api.remove.return_value = [
            {"name": "hero-images/a.jpg"},
            {"name": "project-images/b.jpg"},
        ]

        outcomes = StorageService(client=mock_client).delete_by_urls("project-files", urls)

        bucket_api.remove.assert_called_once_with(["hero-images/a.jpg", "project-images/b.jpg"])
        assert [o.deleted for o in outcomes] == [True, True]
        assert [o.url for o in outcomes] == urls

    def test_partial_outcome(self, mock_client, bucket_api):
        urls = [
            f"{BASE}/public/project-files/a.jpg",
            f"{BASE}/public/project-files/missing.jpg",
            "https://example.com/elsewhere.jpg",
        ]
        bucket_api.remove.return_value = [{"name": "a.jpg"}]

        outcomes = StorageService(client=mock_client).delete_by_urls("project-files", urls)

        assert [o.deleted for o in outcomes] == [True, False, False]
        assert outcomes[1].error == "Object not found in storage"
        assert "not an object" in outcomes[2].error

    def test_never_raises(self, mock_client, bucket_api):
        bucket_api.remove.side_effect = Exception("timeout")
        url = f"{BASE}/public/project-files/a.jpg"

        outcomes = StorageService(client=mock_client).delete_by_urls("project-files", [url])

        assert outcomes[0].deleted is False
        assert outcomes[0].error == "timeout"

    def test_duplicates_and_blanks(self, mock_client, bucket_api):
        url = f"{BASE}/public/project-files/a.jpg"
        bucket_api.remove.return_value = [{"name": "a.jpg"}]

        outcomes = StorageService(client=mock_client).delete_by_urls(
            "project-files",
            [url, "", url],
        )

        assert len(outcomes) == 1
        bucket_api.remove.assert_called_once_with(["a.jpg"])

    def test_nothing_to_delete(self, mock_client, bucket_api):
        assert StorageService(client=mock_client).delete_by_urls("project-files", []) == []
        bucket_api.remove.assert_not_called()
