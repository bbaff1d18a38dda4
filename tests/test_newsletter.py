"""
Tests for newsletter subscriptions.
"""
import pytest
from django.core.exceptions import ValidationError

from starlite_blog.exceptions import NotFound
from starlite_blog.models import NewsletterSubscriber


class TestSubscribe:
    """Tests for NewsletterSubscriber.subscribe."""

    def test_new_subscriber(self, db):
        subscriber, action = NewsletterSubscriber.subscribe("Reader@Example.com ")
        assert action == "created"
        assert subscriber.email == "reader@example.com"
        assert subscriber.is_active

    def test_already_subscribed(self, db):
        NewsletterSubscriber.subscribe("reader@example.com")
        _, action = NewsletterSubscriber.subscribe("READER@example.com")
        assert action == "already"
        assert NewsletterSubscriber.objects.count() == 1

    def test_reactivate(self, db):
        NewsletterSubscriber.subscribe("reader@example.com")
        NewsletterSubscriber.unsubscribe("reader@example.com")

        subscriber, action = NewsletterSubscriber.subscribe("reader@example.com")

        assert action == "reactivated"
        assert subscriber.is_active
        assert subscriber.unsubscribed_at is None

    @pytest.mark.parametrize("email", ["", "not-an-email", "a@b", "two words@example.com"])
    def test_invalid_email(self, db, email):
        with pytest.raises(ValidationError):
            NewsletterSubscriber.subscribe(email)


class TestUnsubscribe:
    """Tests for NewsletterSubscriber.unsubscribe."""

    def test_unsubscribe(self, db):
        NewsletterSubscriber.subscribe("reader@example.com")
        subscriber, action = NewsletterSubscriber.unsubscribe("reader@example.com")
        assert action == "unsubscribed"
        assert not subscriber.is_active
        assert subscriber.unsubscribed_at is not None

    def test_already_unsubscribed(self, db):
        NewsletterSubscriber.subscribe("reader@example.com")
        NewsletterSubscriber.unsubscribe("reader@example.com")
        _, action = NewsletterSubscriber.unsubscribe("reader@example.com")
        assert action == "already"

    def test_unknown_email(self, db):
        with pytest.raises(NotFound):
            NewsletterSubscriber.unsubscribe("ghost@example.com")


class TestBulkAction:
    """Tests for NewsletterSubscriber.bulk_action."""

    @pytest.fixture
    def subscribers(self, db):
        return [
            NewsletterSubscriber.subscribe(f"reader{i}@example.com")[0]
            for i in range(3)
        ]

    def test_deactivate_then_activate(self, subscribers):
        ids = [s.pk for s in subscribers[:2]]

        assert NewsletterSubscriber.bulk_action("deactivate", ids) == 2
        assert NewsletterSubscriber.objects.filter(is_active=False).count() == 2

        assert NewsletterSubscriber.bulk_action("activate", ids) == 2
        assert NewsletterSubscriber.objects.filter(is_active=True).count() == 3

    def test_delete(self, subscribers):
        assert NewsletterSubscriber.bulk_action("delete", [subscribers[0].pk]) == 1
        assert NewsletterSubscriber.objects.count() == 2

    def test_unknown_action(self, subscribers):
        with pytest.raises(ValueError):
            NewsletterSubscriber.bulk_action("archive", [subscribers[0].pk])
