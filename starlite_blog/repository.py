"""
Entity repository for starlite-blog.

One ``EntityRepository`` is built when the app registry is ready (see
``StarliteBlogConfig.ready``) and handed to views and services, so every
write path shares the same database alias and error mapping:

    repository = EntityRepository(using="default")
    post = repository.get(Post, 42)
    repository.update_entity(post, title="New title")

Integrity errors raised by the database are turned into ``Conflict`` here;
nothing is retried.
"""
import logging
from functools import partial

from django.db import DEFAULT_DB_ALIAS, IntegrityError, connections, transaction

from .exceptions import Conflict, NotFound

logger = logging.getLogger(__name__)


class EntityRepository:
    """Persistence capability shared by the slug and association code."""

    def __init__(self, using=None):
        self.using = using or DEFAULT_DB_ALIAS

    def __repr__(self):
        return f"<EntityRepository using={self.using!r}>"

    def manager(self, model):
        """Return ``model``'s default manager bound to this repository's database."""
        return model._default_manager.db_manager(self.using)

    def run_in_transaction(self, fn, *args, **kwargs):
        """Call ``fn`` inside one atomic block; any exception rolls it back."""
        with transaction.atomic(using=self.using):
            return fn(*args, **kwargs)

    def check_constraints(self, model):
        """
        Force deferred constraint checks for ``model``'s table.

        Raises IntegrityError for rows pointing at missing foreign keys.
        """
        connections[self.using].check_constraints(table_names=[model._meta.db_table])

    # Lookups

    def get(self, model, pk):
        try:
            return self.manager(model).get(pk=pk)
        except (model.DoesNotExist, ValueError, TypeError) as exc:
            raise NotFound(f"{model._meta.verbose_name.capitalize()} not found", pk=pk) from exc

    def get_by_slug(self, model, slug, **filters):
        try:
            return self.manager(model).get(slug=slug, **filters)
        except model.DoesNotExist as exc:
            raise NotFound(f"{model._meta.verbose_name.capitalize()} not found", slug=slug) from exc

    def exists_by_slug(self, model, slug, exclude_id=None):
        """Check whether ``slug`` is taken by a row other than ``exclude_id``."""
        return model.slug_taken(slug, exclude_id=exclude_id, using=self.using)

    def slug_probe(self, model, exclude_id=None):
        """Return a one-argument ``exists`` callable for the slug allocator."""
        return partial(self.exists_by_slug, model, exclude_id=exclude_id)

    # Writes

    def create_entity(self, model, **fields):
        instance = model(**fields)
        return self.save(instance)

    def update_entity(self, instance, **fields):
        for name, value in fields.items():
            setattr(instance, name, value)
        return self.save(instance)

    def save(self, instance, update_fields=None):
        """Save ``instance``; a constraint violation becomes ``Conflict``."""
        try:
            with transaction.atomic(using=self.using):
                instance.save(using=self.using, update_fields=update_fields)
        except IntegrityError as exc:
            label = instance._meta.verbose_name
            slug = getattr(instance, "slug", None)
            logger.warning("Integrity error saving %s slug=%r: %s", label, slug, exc)
            raise Conflict(f"A {label} with these values already exists", slug=slug) from exc
        return instance

    def delete_entity(self, instance):
        with transaction.atomic(using=self.using):
            instance.delete(using=self.using)
