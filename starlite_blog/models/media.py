"""
Media models for starlite-blog.

Uploaded images are stored through Django's storage API and described by a
``Media`` row that can optionally be attached to a post.
"""
import os

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone
from PIL import Image, UnidentifiedImageError

from ..conf import blog_settings


def get_upload_path(instance, filename):
    """Generate upload path for media files."""
    return timezone.now().strftime(blog_settings.MEDIA_UPLOAD_PATH) + filename


class Media(models.Model):
    """Uploaded image with display metadata."""

    file = models.FileField(upload_to=get_upload_path)
    original_name = models.CharField(max_length=255)
    mime_type = models.CharField(max_length=100)
    size = models.PositiveIntegerField(default=0, help_text="File size in bytes")
    width = models.PositiveIntegerField(null=True, blank=True)
    height = models.PositiveIntegerField(null=True, blank=True)
    alt = models.CharField(max_length=500, blank=True)
    caption = models.CharField(max_length=500, blank=True)

    post = models.ForeignKey(
        "starlite_blog.Post",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="media",
    )
    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="uploaded_blog_media",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Media Item"
        verbose_name_plural = "Media"

    def __str__(self):
        return self.original_name

    @property
    def url(self):
        """Return URL to the file."""
        if self.file:
            return self.file.url
        return None

    @property
    def file_extension(self):
        return os.path.splitext(self.original_name)[1].lower()

    @property
    def human_size(self):
        """Return human-readable file size."""
        size = self.size
        for unit in ["B", "KB", "MB", "GB"]:
            if size < 1024:
                return f"{size:.1f} {unit}"
            size /= 1024
        return f"{size:.1f} TB"

    @classmethod
    def create_from_upload(cls, file_obj, alt="", caption="", post=None, uploaded_by=None):
        """
        Validate an uploaded image and store it.

        Args:
            file_obj: Django UploadedFile
            alt: Alt text for accessibility
            caption: Display caption
            post: Optional Post the image belongs to
            uploaded_by: User who uploaded the file

        Returns:
            The created Media instance

        Raises:
            ValidationError: if the file is not an image or is too large.
        """
        mime_type = getattr(file_obj, "content_type", "") or ""
        if mime_type not in blog_settings.ALLOWED_IMAGE_TYPES:
            raise ValidationError("Only image files are allowed.", code="invalid_type")

        if file_obj.size > blog_settings.MEDIA_MAX_SIZE:
            raise ValidationError(
                "File exceeds the %(limit)d byte limit.",
                code="too_large",
                params={"limit": blog_settings.MEDIA_MAX_SIZE},
            )

        width, height = read_image_dimensions(file_obj)

        return cls.objects.create(
            file=file_obj,
            original_name=file_obj.name,
            mime_type=mime_type,
            size=file_obj.size,
            width=width,
            height=height,
            alt=alt or "",
            caption=caption or "",
            post=post,
            uploaded_by=uploaded_by,
        )

    def delete(self, *args, **kwargs):
        """Delete the row, then the stored file."""
        storage, name = self.file.storage, self.file.name
        result = super().delete(*args, **kwargs)
        if name:
            storage.delete(name)
        return result


def read_image_dimensions(file_obj):
    """Open ``file_obj`` with Pillow and return ``(width, height)``."""
    try:
        with Image.open(file_obj) as img:
            width, height = img.size
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as exc:
        raise ValidationError("Only image files are allowed.", code="invalid_image") from exc
    finally:
        file_obj.seek(0)
    return width, height
