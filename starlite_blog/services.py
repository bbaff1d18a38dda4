"""
Create, update and delete operations for posts, categories and tags.

Each operation takes the shared ``EntityRepository`` and a plain dict of
input (usually a decoded JSON body). Slugs are allocated on create and on
rename only; category and tag links are swapped wholesale when the input
carries ``category_ids`` / ``tag_ids``. Everything runs in one transaction
per call.
"""
import logging

from django.core.exceptions import ValidationError

from .associations import RelationKind, replace_associations
from .exceptions import Conflict
from .models import Category, Post, Tag
from .slugs import allocate_slug

logger = logging.getLogger(__name__)

POST_FIELDS = ("content", "excerpt", "meta_description", "featured_image", "reading_time")
CATEGORY_FIELDS = ("description", "color")

LINK_KEYS = {
    RelationKind.CATEGORY: "category_ids",
    RelationKind.TAG: "tag_ids",
}


def require(data, *names):
    """Raise ValidationError naming every blank required field."""
    missing = [name for name in names if not data.get(name)]
    if missing:
        raise ValidationError({name: "This field is required." for name in missing})


def pick(data, model, names):
    """
    Copy the fields in ``names`` that are present in ``data``.

    Each value goes through the model field's ``clean`` so wrong types and
    lengths surface as ValidationError instead of database errors.
    """
    fields = {}
    errors = {}
    for name in names:
        if name not in data:
            continue
        value = data[name]
        if value is None and name != "reading_time":
            value = ""
        try:
            fields[name] = model._meta.get_field(name).clean(value, None)
        except ValidationError as exc:
            errors[name] = exc.messages
    if errors:
        raise ValidationError(errors)
    return fields


def flag(data, name):
    """Return ``data[name]`` as a bool, or None when absent or null."""
    value = data.get(name)
    if value is not None and not isinstance(value, bool):
        raise ValidationError({name: "Must be true or false."})
    return value


def rename_fields(repository, instance, new_name):
    """
    Return the display-name and slug updates for a rename.

    The slug is recomputed only when the name really changes, and the probe
    ignores the instance's own row so a rename onto its current slug keeps it.
    """
    if not new_name or new_name == instance.display_name:
        return {}
    model = type(instance)
    slug = allocate_slug(new_name, repository.slug_probe(model, exclude_id=instance.pk))
    return {instance.slug_source: new_name, "slug": slug}


def create_sluggable(repository, model, display_name, **fields):
    """Allocate a slug for ``display_name`` and create the row."""
    slug = allocate_slug(display_name, repository.slug_probe(model))
    fields[model.slug_source] = display_name
    return repository.create_entity(model, slug=slug, **fields)


def replace_links(repository, post, data):
    for kind, key in LINK_KEYS.items():
        if key in data:
            replace_associations(repository, post.pk, kind, data[key])


# Posts

def create_post(repository, author, data):
    """Create a post with its category and tag links."""
    require(data, "title", "content")

    def create():
        post = create_sluggable(
            repository,
            Post,
            data["title"],
            author=author,
            is_published=bool(flag(data, "is_published")),
            **pick(data, Post, POST_FIELDS),
        )
        replace_links(repository, post, data)
        return post

    post = repository.run_in_transaction(create)
    logger.info("Created post %s slug=%r", post.pk, post.slug)
    return post


def update_post(repository, post_id, data):
    """
    Update a post.

    Only fields present in ``data`` change. Blank title or content keep the
    current value.
    """
    post = repository.get(Post, post_id)

    def update():
        names = [n for n in POST_FIELDS if n != "content" or data.get("content")]
        fields = pick(data, Post, names)
        fields.update(rename_fields(repository, post, data.get("title")))
        is_published = flag(data, "is_published")
        if is_published is not None:
            fields["is_published"] = is_published
        repository.update_entity(post, **fields)
        replace_links(repository, post, data)
        return post

    post = repository.run_in_transaction(update)
    logger.info("Updated post %s slug=%r", post.pk, post.slug)
    return post


def delete_post(repository, post_id):
    post = repository.get(Post, post_id)
    repository.delete_entity(post)
    logger.info("Deleted post %s slug=%r", post_id, post.slug)


# Categories

def create_category(repository, data):
    require(data, "name")
    fields = pick(data, Category, CATEGORY_FIELDS)
    category = repository.run_in_transaction(
        create_sluggable, repository, Category, data["name"], **fields
    )
    logger.info("Created category %s slug=%r", category.pk, category.slug)
    return category


def update_category(repository, category_id, data):
    category = repository.get(Category, category_id)

    def update():
        fields = pick(data, Category, CATEGORY_FIELDS)
        fields.update(rename_fields(repository, category, data.get("name")))
        return repository.update_entity(category, **fields)

    category = repository.run_in_transaction(update)
    logger.info("Updated category %s slug=%r", category.pk, category.slug)
    return category


def delete_category(repository, category_id):
    category = repository.get(Category, category_id)
    if category.post_links.exists():
        raise Conflict("Cannot delete category with associated posts", pk=category.pk)
    repository.delete_entity(category)
    logger.info("Deleted category %s slug=%r", category_id, category.slug)


# Tags

def create_tag(repository, data):
    require(data, "name")
    tag = repository.run_in_transaction(create_sluggable, repository, Tag, data["name"])
    logger.info("Created tag %s slug=%r", tag.pk, tag.slug)
    return tag


def update_tag(repository, tag_id, data):
    tag = repository.get(Tag, tag_id)
    require(data, "name")
    tag = repository.run_in_transaction(
        lambda: repository.update_entity(tag, **rename_fields(repository, tag, data["name"]))
    )
    logger.info("Updated tag %s slug=%r", tag.pk, tag.slug)
    return tag


def delete_tag(repository, tag_id):
    tag = repository.get(Tag, tag_id)
    if tag.post_links.exists():
        raise Conflict("Cannot delete tag with associated posts", pk=tag.pk)
    repository.delete_entity(tag)
    logger.info("Deleted tag %s slug=%r", tag_id, tag.slug)
