"""
Models for starlite-blog.

All models are importable from starlite_blog.models:

    from starlite_blog.models import Post, Category, Tag, Media
"""
from .posts import Category, Tag, Post, PostCategory, PostTag
from .media import Media
from .newsletter import NewsletterSubscriber
from .analytics import PostView

__all__ = [
    # Posts
    "Category",
    "Tag",
    "Post",
    "PostCategory",
    "PostTag",
    # Media
    "Media",
    # Newsletter
    "NewsletterSubscriber",
    # Analytics
    "PostView",
]
