"""
Tests for media uploads.
"""
import io
import os

import pytest
from django.core.exceptions import ValidationError
from django.core.files.uploadedfile import SimpleUploadedFile
from django.urls import reverse
from PIL import Image

from starlite_blog.models import Media


def png_upload(name="pixel.png", size=(4, 3)):
    buffer = io.BytesIO()
    Image.new("RGB", size, color="purple").save(buffer, format="PNG")
    return SimpleUploadedFile(name, buffer.getvalue(), content_type="image/png")


@pytest.fixture(autouse=True)
def media_root(settings, tmp_path):
    settings.MEDIA_ROOT = str(tmp_path)
    return tmp_path


class TestMediaModel:
    """Tests for Media.create_from_upload."""

    def test_create_from_upload(self, db, user):
        media = Media.create_from_upload(png_upload(), alt="Purple", uploaded_by=user)
        assert media.width == 4
        assert media.height == 3
        assert media.mime_type == "image/png"
        assert media.original_name == "pixel.png"
        assert media.alt == "Purple"
        assert os.path.exists(media.file.path)

    def test_rejects_non_image_type(self, db):
        upload = SimpleUploadedFile("notes.txt", b"hello", content_type="text/plain")
        with pytest.raises(ValidationError):
            Media.create_from_upload(upload)

    def test_rejects_fake_image(self, db):
        upload = SimpleUploadedFile("fake.png", b"not really a png", content_type="image/png")
        with pytest.raises(ValidationError):
            Media.create_from_upload(upload)
        assert not Media.objects.exists()

    def test_rejects_oversized(self, db, settings):
        settings.STARLITE_BLOG = {"MEDIA_MAX_SIZE": 10}
        with pytest.raises(ValidationError):
            Media.create_from_upload(png_upload())

    def test_delete_removes_file(self, db):
        media = Media.create_from_upload(png_upload())
        path = media.file.path
        media.delete()
        assert not os.path.exists(path)

    def test_human_size(self, db):
        media = Media(original_name="big.jpg", size=1536000)
        assert "MB" in media.human_size


class TestMediaApi:
    """Tests for the media endpoints."""

    def test_upload_requires_admin(self, client, user):
        client.force_login(user)
        response = client.post(reverse("starlite_blog:media_upload"), {"file": png_upload()})
        assert response.status_code == 403

    def test_upload_single(self, admin_client, post):
        response = admin_client.post(
            reverse("starlite_blog:media_upload"),
            {"file": png_upload(), "caption": "A pixel", "post_id": post.pk},
        )
        assert response.status_code == 201
        data = response.json()
        assert data["caption"] == "A pixel"
        assert data["post"]["slug"] == "test-post"
        assert data["width"] == 4

    def test_upload_without_file(self, admin_client):
        response = admin_client.post(reverse("starlite_blog:media_upload"), {})
        assert response.status_code == 400

    def test_upload_multiple_is_all_or_nothing(self, admin_client, media_root):
        bad = SimpleUploadedFile("bad.png", b"garbage", content_type="image/png")
        response = admin_client.post(
            reverse("starlite_blog:media_upload_multiple"),
            {"files": [png_upload("one.png"), bad]},
        )
        assert response.status_code == 400
        assert not Media.objects.exists()
        assert not any(p.is_file() for p in media_root.rglob("*"))

    def test_upload_multiple(self, admin_client):
        response = admin_client.post(
            reverse("starlite_blog:media_upload_multiple"),
            {"files": [png_upload("one.png"), png_upload("two.png")]},
        )
        assert response.status_code == 201
        assert len(response.json()["media"]) == 2

    def test_update_and_delete(self, admin_client, post):
        media = Media.create_from_upload(png_upload(), post=post)
        url = reverse("starlite_blog:media_detail", kwargs={"pk": media.pk})

        response = admin_client.put(
            url, data={"alt": "New alt", "post_id": None}, content_type="application/json"
        )
        assert response.status_code == 200
        assert response.json()["alt"] == "New alt"
        assert response.json()["post"] is None

        response = admin_client.delete(url)
        assert response.status_code == 200
        assert not Media.objects.exists()

    def test_list(self, admin_client):
        Media.create_from_upload(png_upload())
        response = admin_client.get(reverse("starlite_blog:media_list"))
        assert response.json()["pagination"]["total"] == 1
