"""Django app configuration for starlite_blog."""
from django.apps import AppConfig


class StarliteBlogConfig(AppConfig):
    """Configuration for the blog app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "starlite_blog"
    verbose_name = "Starlite Blog"

    repository = None

    def ready(self):
        """Build the repository shared by every view."""
        from .repository import EntityRepository

        self.repository = EntityRepository()
