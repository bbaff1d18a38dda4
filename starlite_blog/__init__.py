"""
starlite-blog - a Django blog backend with a JSON API.

Features:
- Posts, categories and tags addressed by unique, collision-free slugs
- Atomic replacement of a post's category and tag links
- Image uploads with Pillow validation
- Newsletter subscriptions with reactivation
- View tracking and dashboard analytics
"""

__version__ = "0.1.0"
