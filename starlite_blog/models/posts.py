"""
Post, Category and Tag models for starlite-blog.
"""
from django.conf import settings
from django.db import models
from django.utils import timezone

from ..slugs import allocate_slug


class SluggableModel(models.Model):
    """
    Base for models addressed by a unique slug.

    ``slug_source`` names the field the slug is derived from. A blank slug
    is allocated on save; an existing slug is only replaced through an
    explicit rename (see ``starlite_blog.services``).
    """

    slug_source = "name"

    class Meta:
        abstract = True

    @property
    def display_name(self):
        return getattr(self, self.slug_source)

    @classmethod
    def slug_taken(cls, slug, exclude_id=None, using=None):
        """Check whether another row of this model already uses ``slug``."""
        qs = cls._default_manager.using(using).filter(slug=slug)
        if exclude_id is not None:
            qs = qs.exclude(pk=exclude_id)
        return qs.exists()

    def assign_slug(self, using=None):
        """Allocate a slug from the display name, ignoring this row."""
        self.slug = allocate_slug(
            self.display_name,
            lambda candidate: self.slug_taken(candidate, exclude_id=self.pk, using=using),
        )
        return self.slug

    def save(self, *args, **kwargs):
        if not self.slug:
            self.assign_slug(using=kwargs.get("using"))
        super().save(*args, **kwargs)


class Category(SluggableModel):
    """Flat category for organizing posts. A post may sit in several."""

    name = models.CharField(max_length=100)
    slug = models.SlugField(max_length=100, unique=True, blank=True)
    description = models.TextField(blank=True)
    color = models.CharField(max_length=7, blank=True, help_text="Hex color, e.g. #7C3AED")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "Categories"

    def __str__(self):
        return self.name

    @property
    def post_count(self):
        """Return count of published posts in this category."""
        return self.posts.filter(is_published=True).count()


class Tag(SluggableModel):
    """
    Flat tag for posts.

    Tags are non-hierarchical and can be applied to multiple posts.
    """

    name = models.CharField(max_length=100, unique=True)
    slug = models.SlugField(max_length=100, unique=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name

    @property
    def post_count(self):
        """Return count of published posts with this tag."""
        return self.posts.filter(is_published=True).count()


class Post(SluggableModel):
    """
    Blog post / article.

    Categories and tags hang off explicit link models so a post's link set
    can be swapped wholesale inside one transaction.
    """

    slug_source = "title"

    # Content
    title = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True, blank=True)
    content = models.TextField()
    excerpt = models.TextField(blank=True)
    meta_description = models.CharField(max_length=300, blank=True)
    featured_image = models.CharField(max_length=500, blank=True)
    reading_time = models.PositiveIntegerField(
        null=True,
        blank=True,
        help_text="Estimated reading time in minutes",
    )

    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="blog_posts",
    )

    # Status
    is_published = models.BooleanField(default=False)
    published_at = models.DateTimeField(
        null=True,
        blank=True,
        db_index=True,
        help_text="When post was first published",
    )

    # Taxonomy
    categories = models.ManyToManyField(
        Category,
        through="PostCategory",
        related_name="posts",
        blank=True,
    )
    tags = models.ManyToManyField(
        Tag,
        through="PostTag",
        related_name="posts",
        blank=True,
    )

    # Engagement stats
    view_count = models.PositiveIntegerField(default=0)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-published_at", "-created_at"]
        indexes = [
            models.Index(fields=["is_published", "-published_at"]),
            models.Index(fields=["author", "-created_at"]),
        ]

    def __str__(self):
        return self.title

    def save(self, *args, **kwargs):
        # Stamp the first transition to published
        if self.is_published and not self.published_at:
            self.published_at = timezone.now()
        super().save(*args, **kwargs)

    @property
    def preview(self):
        """Return excerpt, or truncated content when there is none."""
        if self.excerpt:
            return self.excerpt
        if len(self.content) > 280:
            return self.content[:280] + "..."
        return self.content

    def publish(self):
        """Publish the post immediately."""
        self.is_published = True
        self.save(update_fields=["is_published", "published_at", "updated_at"])

    def unpublish(self):
        """Move the post back to drafts, keeping its first publish date."""
        self.is_published = False
        self.save(update_fields=["is_published", "updated_at"])

    def increment_view_count(self):
        """Increment view count atomically."""
        Post.objects.filter(pk=self.pk).update(view_count=models.F("view_count") + 1)


class PostCategory(models.Model):
    """Link row between a post and one of its categories."""

    post = models.ForeignKey(Post, on_delete=models.CASCADE, related_name="category_links")
    category = models.ForeignKey(Category, on_delete=models.CASCADE, related_name="post_links")

    class Meta:
        verbose_name = "Post Category"
        constraints = [
            models.UniqueConstraint(fields=["post", "category"], name="unique_post_category"),
        ]

    def __str__(self):
        return f"{self.post} - {self.category}"


class PostTag(models.Model):
    """Link row between a post and one of its tags."""

    post = models.ForeignKey(Post, on_delete=models.CASCADE, related_name="tag_links")
    tag = models.ForeignKey(Tag, on_delete=models.CASCADE, related_name="post_links")

    class Meta:
        verbose_name = "Post Tag"
        constraints = [
            models.UniqueConstraint(fields=["post", "tag"], name="unique_post_tag"),
        ]

    def __str__(self):
        return f"{self.post} - {self.tag}"
