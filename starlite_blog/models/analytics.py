"""
Page view tracking for starlite-blog.
"""
from django.db import models


class PostView(models.Model):
    """A single tracked view of a post."""

    post = models.ForeignKey(
        "starlite_blog.Post",
        on_delete=models.CASCADE,
        related_name="views",
    )
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.TextField(blank=True)
    referrer = models.TextField(blank=True)
    viewed_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ["-viewed_at"]
        indexes = [
            models.Index(fields=["post", "-viewed_at"]),
        ]

    def __str__(self):
        return f"View of {self.post_id} at {self.viewed_at}"

    @property
    def browser(self):
        """Best-effort browser family from the user agent."""
        agent = self.user_agent
        if not agent:
            return None
        # Edge and Chrome agents both mention Safari; check them first
        if "Edg" in agent:
            return "Edge"
        if "Chrome" in agent:
            return "Chrome"
        if "Firefox" in agent:
            return "Firefox"
        if "Safari" in agent:
            return "Safari"
        return "Unknown"

    @classmethod
    def record(cls, post, request=None, referrer=None):
        """Store a view of ``post`` using request metadata when available."""
        meta = request.META if request is not None else {}
        return cls.objects.create(
            post=post,
            ip_address=meta.get("REMOTE_ADDR") or None,
            user_agent=meta.get("HTTP_USER_AGENT", ""),
            referrer=referrer or meta.get("HTTP_REFERER", ""),
        )
