"""
Read-only aggregate queries behind the admin dashboard.
"""
from collections import Counter
from datetime import timedelta

from django.db.models import Count, Q, Sum
from django.db.models.functions import TruncDate, TruncMonth
from django.utils import timezone

from .conf import blog_settings
from .models import Category, NewsletterSubscriber, Post, PostView, Tag
from .serializers import serialize_category, serialize_post_summary, serialize_tag

POST_VIEW_SAMPLE = 1000

published_posts = Count("posts", filter=Q(posts__is_published=True), distinct=True)


def since(days):
    return timezone.now() - timedelta(days=days)


def daily_views(views, descending=False):
    """Bucket a PostView queryset by calendar day."""
    order = "-date" if descending else "date"
    return list(
        views.annotate(date=TruncDate("viewed_at"))
        .values("date")
        .annotate(views=Count("id"))
        .order_by(order)
    )


def dashboard_stats():
    posts = Post.objects.all()
    total_views = posts.aggregate(total=Sum("view_count"))["total"] or 0
    popular = posts.filter(is_published=True).order_by("-view_count")
    return {
        "overview": {
            "total_posts": posts.count(),
            "published_posts": posts.filter(is_published=True).count(),
            "draft_posts": posts.filter(is_published=False).count(),
            "total_views": total_views,
            "total_categories": Category.objects.count(),
            "total_tags": Tag.objects.count(),
            "recent_views": PostView.objects.filter(
                viewed_at__gte=since(blog_settings.RECENT_VIEWS_DAYS)
            ).count(),
        },
        "popular_posts": [
            serialize_post_summary(p) for p in popular[:blog_settings.POPULAR_POSTS_LIMIT]
        ],
    }


def post_stats(post, days):
    """
    View statistics for one post over the last ``days`` days.

    Referrer and browser breakdowns are computed over the most recent
    POST_VIEW_SAMPLE views only.
    """
    views = post.views.filter(viewed_at__gte=since(days))
    sample = list(views.order_by("-viewed_at")[:POST_VIEW_SAMPLE])

    referrers = Counter(view.referrer or "Direct" for view in sample)
    browsers = Counter(view.browser for view in sample if view.browser)

    summary = serialize_post_summary(post)
    summary["is_published"] = post.is_published
    return {
        "post": summary,
        "analytics": {
            "total_views": len(sample),
            "daily_views": daily_views(views, descending=True),
            "referrers": [{"source": s, "count": c} for s, c in referrers.most_common()],
            "browsers": [{"browser": b, "count": c} for b, c in browsers.most_common()],
        },
    }


def trends(days):
    start = since(days)
    categories = Category.objects.annotate(published_posts=published_posts)
    tags = Tag.objects.annotate(published_posts=published_posts)
    recent = Post.objects.filter(is_published=True, published_at__gte=start)
    return {
        "daily_views": daily_views(PostView.objects.filter(viewed_at__gte=start)),
        "top_categories": [
            serialize_category(c, post_count=c.published_posts)
            for c in categories.order_by("-published_posts", "name")[:5]
        ],
        "top_tags": [
            serialize_tag(t, post_count=t.published_posts)
            for t in tags.order_by("-published_posts", "name")[:10]
        ],
        "recent_posts": [
            serialize_post_summary(p) for p in recent.order_by("-view_count")[:5]
        ],
    }


def newsletter_stats():
    subscribers = NewsletterSubscriber.objects.all()
    total = subscribers.count()
    recent = subscribers.filter(
        subscribed_at__gte=since(blog_settings.RECENT_SUBSCRIBERS_DAYS)
    ).count()
    monthly = (
        subscribers.filter(subscribed_at__gte=since(365))
        .annotate(month=TruncMonth("subscribed_at"))
        .values("month")
        .annotate(subscriptions=Count("id"))
        .order_by("-month")
    )
    return {
        "overview": {
            "total_subscribers": total,
            "active_subscribers": subscribers.filter(is_active=True).count(),
            "inactive_subscribers": subscribers.filter(is_active=False).count(),
            "recent_subscriptions": recent,
            "growth_rate": f"{recent / total * 100:.2f}" if total else "0",
        },
        "monthly_growth": list(monthly),
    }
