"""
Configuration settings for starlite-blog.

Override these in your Django settings.py:

    STARLITE_BLOG = {
        'SLUG_MAX_LENGTH': 80,
        'POSTS_PER_PAGE': 20,
        'MEDIA_MAX_SIZE': 10 * 1024 * 1024,
        ...
    }
"""
from django.conf import settings

DEFAULTS = {
    # Slugs
    "SLUG_MAX_LENGTH": 100,

    # Pagination
    "POSTS_PER_PAGE": 10,
    "MAX_PAGE_SIZE": 100,
    "MEDIA_PER_PAGE": 20,
    "SUBSCRIBERS_PER_PAGE": 50,

    # Media
    "MEDIA_UPLOAD_PATH": "blog/uploads/%Y/%m/",
    "MEDIA_MAX_SIZE": 5 * 1024 * 1024,
    "MEDIA_MAX_FILES": 10,
    "ALLOWED_IMAGE_TYPES": ["image/jpeg", "image/png", "image/gif", "image/webp"],

    # Analytics
    "RECENT_VIEWS_DAYS": 30,
    "RECENT_SUBSCRIBERS_DAYS": 7,
    "POPULAR_POSTS_LIMIT": 10,
    "POST_ANALYTICS_DAYS": 30,
    "TRENDS_DAYS": 7,
}


class BlogSettings:
    """
    Lazy settings object that reads from Django settings.

    Access via: from starlite_blog.conf import blog_settings
    """

    def __getattr__(self, name):
        if name not in DEFAULTS:
            raise AttributeError(f"Invalid starlite_blog setting: {name}")

        user_settings = getattr(settings, "STARLITE_BLOG", {})
        return user_settings.get(name, DEFAULTS[name])


blog_settings = BlogSettings()
