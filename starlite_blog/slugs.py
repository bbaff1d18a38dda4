"""
Slug allocation for posts, categories and tags.

A slug is derived from the display name and probed against the store
until a free candidate is found:

    >>> allocate_slug("Mastering Tailwind CSS!", lambda slug: False)
    'mastering-tailwind-css'

Allocation only reads. The database unique constraint on ``slug`` stays
the final word when two writers race for the same candidate.
"""
import logging
import re

from django.core.exceptions import ValidationError
from django.utils.text import slugify

from .conf import blog_settings

logger = logging.getLogger(__name__)

_REPEATED_HYPHENS = re.compile(r"-{2,}")


def normalize_slug(value, max_length=None):
    """
    Project a display name onto ``[a-z0-9-]``.

    Uses Django's slugify for case folding, ASCII folding and whitespace
    handling, then drops underscores and collapses hyphen runs so the
    result never starts or ends with a hyphen.
    """
    slug = slugify(value).replace("_", "")
    slug = _REPEATED_HYPHENS.sub("-", slug).strip("-")
    if max_length:
        slug = slug[:max_length].rstrip("-")
    return slug


def allocate_slug(display_name, exists, max_length=None):
    """
    Return the first free slug for ``display_name``.

    Args:
        display_name: Title or name the slug is derived from.
        exists: Callable taking a candidate slug and returning True when it
            is already taken. On rename it must ignore the entity's own row.
        max_length: Upper bound for the slug, suffix included. Defaults to
            the SLUG_MAX_LENGTH setting.

    Returns:
        ``base`` when free, otherwise ``base-1``, ``base-2``, ...

    Raises:
        ValidationError: if the name is missing or normalizes to nothing.
    """
    if not display_name or not str(display_name).strip():
        raise ValidationError("A name is required to build a slug.", code="required")

    if max_length is None:
        max_length = blog_settings.SLUG_MAX_LENGTH

    base = normalize_slug(display_name, max_length)
    if not base:
        raise ValidationError(
            "Could not build a slug from %(name)r.",
            code="empty_slug",
            params={"name": display_name},
        )

    candidate = base
    counter = 1
    while exists(candidate):
        suffix = f"-{counter}"
        candidate = base[:max_length - len(suffix)].rstrip("-") + suffix
        counter += 1

    if counter > 1:
        logger.debug("Slug %r taken, allocated %r after %d probes", base, candidate, counter)
    return candidate
