"""
Plain-dict shaping of models for JSON responses.

Datetimes are left as-is; ``JsonResponse`` encodes them with
``DjangoJSONEncoder``.
"""


def serialize_author(user):
    return {
        "id": user.pk,
        "name": user.get_full_name() or user.get_username(),
    }


def serialize_user(user):
    return {
        "id": user.pk,
        "username": user.get_username(),
        "email": user.email,
        "name": user.get_full_name(),
        "is_admin": user.is_staff,
        "date_joined": user.date_joined,
    }


def serialize_category(category, post_count=None):
    data = {
        "id": category.pk,
        "name": category.name,
        "slug": category.slug,
        "description": category.description,
        "color": category.color,
        "created_at": category.created_at,
        "updated_at": category.updated_at,
    }
    if post_count is not None:
        data["post_count"] = post_count
    return data


def serialize_tag(tag, post_count=None):
    data = {
        "id": tag.pk,
        "name": tag.name,
        "slug": tag.slug,
        "created_at": tag.created_at,
    }
    if post_count is not None:
        data["post_count"] = post_count
    return data


def serialize_post(post, include_content=True):
    """Serialize a post with author, categories and tags."""
    data = {
        "id": post.pk,
        "title": post.title,
        "slug": post.slug,
        "excerpt": post.excerpt,
        "meta_description": post.meta_description,
        "featured_image": post.featured_image,
        "reading_time": post.reading_time,
        "is_published": post.is_published,
        "published_at": post.published_at,
        "view_count": post.view_count,
        "created_at": post.created_at,
        "updated_at": post.updated_at,
        "author": serialize_author(post.author),
        "categories": [serialize_category(c) for c in post.categories.all()],
        "tags": [serialize_tag(t) for t in post.tags.all()],
    }
    if include_content:
        data["content"] = post.content
    return data


def serialize_post_summary(post):
    return {
        "id": post.pk,
        "title": post.title,
        "slug": post.slug,
        "view_count": post.view_count,
        "published_at": post.published_at,
    }


def serialize_media(media):
    return {
        "id": media.pk,
        "url": media.url,
        "original_name": media.original_name,
        "mime_type": media.mime_type,
        "size": media.size,
        "width": media.width,
        "height": media.height,
        "alt": media.alt,
        "caption": media.caption,
        "post": (
            {"id": media.post.pk, "title": media.post.title, "slug": media.post.slug}
            if media.post
            else None
        ),
        "created_at": media.created_at,
    }


def serialize_subscriber(subscriber):
    return {
        "id": subscriber.pk,
        "email": subscriber.email,
        "is_active": subscriber.is_active,
        "subscribed_at": subscriber.subscribed_at,
        "unsubscribed_at": subscriber.unsubscribed_at,
    }
