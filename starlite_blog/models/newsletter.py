"""
Newsletter subscriber model for starlite-blog.
"""
from django.core.validators import validate_email
from django.db import models
from django.utils import timezone

from ..exceptions import NotFound


def normalize_email(email):
    """Validate ``email`` and return it lower-cased."""
    email = (email or "").strip().lower()
    validate_email(email)
    return email


class NewsletterSubscriber(models.Model):
    """
    Email address subscribed to the newsletter.

    Unsubscribing keeps the row so a later subscribe reactivates it.
    """

    BULK_ACTIONS = ("activate", "deactivate", "delete")

    email = models.EmailField(unique=True)
    is_active = models.BooleanField(default=True)
    subscribed_at = models.DateTimeField(default=timezone.now, db_index=True)
    unsubscribed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-subscribed_at"]

    def __str__(self):
        return self.email

    @classmethod
    def subscribe(cls, email):
        """
        Subscribe an email address.

        Returns (subscriber, action) where action is "created",
        "reactivated" or "already".
        """
        email = normalize_email(email)
        existing = cls.objects.filter(email=email).first()

        if existing is None:
            return cls.objects.create(email=email), "created"

        if existing.is_active:
            return existing, "already"

        existing.is_active = True
        existing.unsubscribed_at = None
        existing.save(update_fields=["is_active", "unsubscribed_at"])
        return existing, "reactivated"

    @classmethod
    def unsubscribe(cls, email):
        """
        Unsubscribe an email address.

        Returns (subscriber, action) where action is "unsubscribed" or
        "already". Raises NotFound for unknown addresses.
        """
        email = normalize_email(email)
        existing = cls.objects.filter(email=email).first()

        if existing is None:
            raise NotFound("Email not found in our newsletter list", email=email)

        if not existing.is_active:
            return existing, "already"

        existing.is_active = False
        existing.unsubscribed_at = timezone.now()
        existing.save(update_fields=["is_active", "unsubscribed_at"])
        return existing, "unsubscribed"

    @classmethod
    def bulk_action(cls, action, ids):
        """Apply ``action`` to the subscribers in ``ids``; return rows affected."""
        qs = cls.objects.filter(pk__in=ids)
        if action == "activate":
            return qs.update(is_active=True, unsubscribed_at=None)
        if action == "deactivate":
            return qs.update(is_active=False, unsubscribed_at=timezone.now())
        if action == "delete":
            deleted, _ = qs.delete()
            return deleted
        raise ValueError(f"Invalid bulk action: {action}")
