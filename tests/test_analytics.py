"""
Tests for dashboard analytics and view tracking.
"""
from datetime import timedelta

from django.test import RequestFactory
from django.utils import timezone

from starlite_blog import analytics
from starlite_blog.models import NewsletterSubscriber, Post, PostTag, PostView

CHROME = "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 Chrome/120.0 Safari/537.36"
FIREFOX = "Mozilla/5.0 (X11; Linux x86_64; rv:121.0) Gecko/20100101 Firefox/121.0"


class TestPostView:
    """Tests for PostView."""

    def test_record_from_request(self, db, post):
        request = RequestFactory().get(
            "/", HTTP_USER_AGENT=FIREFOX, HTTP_REFERER="https://news.example.com/"
        )
        view = PostView.record(post, request)
        assert view.ip_address == "127.0.0.1"
        assert view.referrer == "https://news.example.com/"
        assert view.browser == "Firefox"

    def test_explicit_referrer_wins(self, db, post):
        request = RequestFactory().get("/", HTTP_REFERER="https://a.example.com/")
        view = PostView.record(post, request, referrer="newsletter")
        assert view.referrer == "newsletter"

    def test_browser_detection(self, db, post):
        assert PostView(post=post, user_agent=CHROME).browser == "Chrome"
        assert PostView(post=post, user_agent="curl/8.0").browser == "Unknown"
        assert PostView(post=post, user_agent="").browser is None


class TestDashboard:
    """Tests for analytics.dashboard_stats."""

    def test_overview_counts(self, db, post, user, tags):
        Post.objects.create(title="Draft", content="WIP", author=user, view_count=4)
        Post.objects.filter(pk=post.pk).update(view_count=10)
        PostView.record(post)

        stats = analytics.dashboard_stats()

        overview = stats["overview"]
        assert overview["total_posts"] == 2
        assert overview["published_posts"] == 1
        assert overview["draft_posts"] == 1
        assert overview["total_views"] == 14
        assert overview["total_tags"] == 3
        assert overview["recent_views"] == 1
        assert [p["slug"] for p in stats["popular_posts"]] == ["test-post"]

    def test_empty_database(self, db):
        stats = analytics.dashboard_stats()
        assert stats["overview"]["total_views"] == 0
        assert stats["popular_posts"] == []


class TestPostStats:
    """Tests for analytics.post_stats."""

    def test_breakdowns(self, db, post):
        PostView.objects.create(post=post, user_agent=CHROME, referrer="https://google.com/")
        PostView.objects.create(post=post, user_agent=CHROME)
        PostView.objects.create(post=post, user_agent=FIREFOX)

        stats = analytics.post_stats(post, days=30)

        data = stats["analytics"]
        assert data["total_views"] == 3
        assert {"source": "Direct", "count": 2} in data["referrers"]
        assert {"browser": "Chrome", "count": 2} in data["browsers"]
        assert sum(day["views"] for day in data["daily_views"]) == 3

    def test_old_views_excluded(self, db, post):
        old = PostView.objects.create(post=post)
        PostView.objects.filter(pk=old.pk).update(viewed_at=timezone.now() - timedelta(days=60))

        stats = analytics.post_stats(post, days=30)

        assert stats["analytics"]["total_views"] == 0


class TestTrends:
    """Tests for analytics.trends."""

    def test_top_tags_count_published_posts(self, db, post, user, tags):
        draft = Post.objects.create(title="Draft", content="WIP", author=user)
        PostTag.objects.create(post=post, tag=tags["React"])
        PostTag.objects.create(post=draft, tag=tags["React"])
        PostTag.objects.create(post=draft, tag=tags["Python"])

        data = analytics.trends(days=7)

        top = data["top_tags"][0]
        assert top["slug"] == "react"
        assert top["post_count"] == 1
        assert [p["slug"] for p in data["recent_posts"]] == ["test-post"]


class TestNewsletterStats:
    """Tests for analytics.newsletter_stats."""

    def test_overview(self, db):
        NewsletterSubscriber.subscribe("a@example.com")
        NewsletterSubscriber.subscribe("b@example.com")
        NewsletterSubscriber.unsubscribe("b@example.com")

        stats = analytics.newsletter_stats()

        assert stats["overview"]["total_subscribers"] == 2
        assert stats["overview"]["active_subscribers"] == 1
        assert stats["overview"]["growth_rate"] == "100.00"
        assert stats["monthly_growth"][0]["subscriptions"] == 2
