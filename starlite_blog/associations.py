"""
Whole-set replacement of a post's category and tag links.
"""
import enum
import logging

from django.apps import apps
from django.core.exceptions import ValidationError
from django.db import IntegrityError

from .exceptions import InvalidReference

logger = logging.getLogger(__name__)


class RelationKind(enum.Enum):
    """Link tables hanging off a post: (link model label, target field)."""

    CATEGORY = ("starlite_blog.PostCategory", "category")
    TAG = ("starlite_blog.PostTag", "tag")

    @property
    def link_model(self):
        return apps.get_model(self.value[0])

    @property
    def target_field(self):
        return self.value[1]

    def clean_ids(self, other_ids):
        """Coerce ids to the target primary key type and drop duplicates, keeping order."""
        if other_ids is None:
            return []
        if not isinstance(other_ids, (list, tuple, set)):
            raise ValidationError({f"{self.target_field}_ids": "Must be a list of ids."})
        pk_field = self.link_model._meta.get_field(self.target_field).target_field
        cleaned = []
        for value in other_ids:
            value = pk_field.to_python(value)
            if value not in cleaned:
                cleaned.append(value)
        return cleaned


def replace_associations(repository, post_id, kind, other_ids):
    """
    Make the post's ``kind`` links exactly ``other_ids``.

    Existing rows are deleted and the new set inserted inside one
    transaction, so readers see either the old set or the new one. An empty
    ``other_ids`` clears the links.

    Raises:
        NotFound: the post does not exist.
        InvalidReference: an id matches no category/tag.
        ValidationError: an id is not a valid primary key value.

    Returns:
        The list of ids now linked.
    """
    post = repository.get(apps.get_model("starlite_blog", "Post"), post_id)
    ids = kind.clean_ids(other_ids)
    repository.run_in_transaction(_replace_links, repository, post.pk, kind, ids)
    logger.info("Replaced %s links of post %s with %s", kind.target_field, post.pk, ids)
    return ids


def _replace_links(repository, post_id, kind, ids):
    link_model = kind.link_model
    manager = repository.manager(link_model)
    manager.filter(post_id=post_id).delete()
    try:
        manager.bulk_create(
            link_model(post_id=post_id, **{f"{kind.target_field}_id": other_id})
            for other_id in ids
        )
        # Foreign keys are deferred on most backends; surface bad ids now
        repository.check_constraints(link_model)
    except IntegrityError as exc:
        logger.warning("Rejected %s ids %s for post %s: %s", kind.target_field, ids, post_id, exc)
        raise InvalidReference(
            f"Unknown {kind.target_field} id in {ids}",
            post_id=post_id,
            ids=ids,
        ) from exc
