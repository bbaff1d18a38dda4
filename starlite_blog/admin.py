"""
Django admin configuration for starlite_blog.
"""
from django.contrib import admin
from django.utils.html import format_html

from .models import (
    Category,
    Media,
    NewsletterSubscriber,
    Post,
    PostCategory,
    PostTag,
    PostView,
    Tag,
)


class SluggableAdmin(admin.ModelAdmin):
    """
    Leave the slug blank to have one allocated.

    Renaming without touching the slug allocates a fresh one, the same way
    the API does.
    """

    def save_model(self, request, obj, form, change):
        if change and obj.slug_source in form.changed_data and "slug" not in form.changed_data:
            obj.assign_slug()
        super().save_model(request, obj, form, change)


class PostCategoryInline(admin.TabularInline):
    model = PostCategory
    extra = 1
    raw_id_fields = ["category"]


class PostTagInline(admin.TabularInline):
    model = PostTag
    extra = 1
    raw_id_fields = ["tag"]


@admin.register(Category)
class CategoryAdmin(SluggableAdmin):
    list_display = ["name", "slug", "color", "post_count", "created_at"]
    search_fields = ["name", "slug", "description"]
    ordering = ["name"]


@admin.register(Tag)
class TagAdmin(SluggableAdmin):
    list_display = ["name", "slug", "post_count", "created_at"]
    search_fields = ["name", "slug"]
    readonly_fields = ["created_at"]


@admin.register(Post)
class PostAdmin(SluggableAdmin):
    list_display = [
        "title_preview",
        "author",
        "is_published",
        "view_count",
        "published_at",
        "created_at",
    ]
    list_filter = ["is_published", "categories", "created_at"]
    search_fields = ["title", "content", "author__username"]
    raw_id_fields = ["author"]
    date_hierarchy = "created_at"
    inlines = [PostCategoryInline, PostTagInline]
    readonly_fields = [
        "view_count",
        "created_at",
        "updated_at",
        "published_at",
    ]

    fieldsets = (
        (None, {
            "fields": ("title", "slug", "content", "excerpt", "author")
        }),
        ("SEO & Presentation", {
            "fields": ("meta_description", "featured_image", "reading_time")
        }),
        ("Status", {
            "fields": ("is_published", "published_at")
        }),
        ("Metadata", {
            "fields": ("view_count", "created_at", "updated_at"),
            "classes": ("collapse",),
        }),
    )

    actions = ["publish_posts", "unpublish_posts"]

    @admin.display(description="Title")
    def title_preview(self, obj):
        """Truncated title for list display."""
        return obj.title[:60] + "..." if len(obj.title) > 60 else obj.title

    @admin.action(description="Publish selected posts")
    def publish_posts(self, request, queryset):
        for post in queryset:
            post.publish()
        self.message_user(request, f"{queryset.count()} posts published.")

    @admin.action(description="Move selected posts to drafts")
    def unpublish_posts(self, request, queryset):
        for post in queryset:
            post.unpublish()
        self.message_user(request, f"{queryset.count()} posts moved to drafts.")


@admin.register(Media)
class MediaAdmin(admin.ModelAdmin):
    list_display = [
        "thumbnail_preview",
        "original_name",
        "mime_type",
        "human_size",
        "dimensions",
        "post",
        "created_at",
    ]
    list_filter = ["mime_type", "created_at"]
    search_fields = ["original_name", "alt", "caption"]
    raw_id_fields = ["post", "uploaded_by"]
    readonly_fields = ["size", "width", "height", "mime_type", "created_at"]

    @admin.display(description="Preview")
    def thumbnail_preview(self, obj):
        if obj.file:
            return format_html(
                '<img src="{}" style="max-width: 50px; max-height: 50px;" />',
                obj.file.url,
            )
        return "-"

    @admin.display(description="Size")
    def dimensions(self, obj):
        if obj.width and obj.height:
            return f"{obj.width}x{obj.height}"
        return "-"


@admin.register(NewsletterSubscriber)
class NewsletterSubscriberAdmin(admin.ModelAdmin):
    list_display = ["email", "is_active", "subscribed_at", "unsubscribed_at"]
    list_filter = ["is_active", "subscribed_at"]
    search_fields = ["email"]
    actions = ["activate_subscribers", "deactivate_subscribers"]

    @admin.action(description="Activate selected subscribers")
    def activate_subscribers(self, request, queryset):
        count = NewsletterSubscriber.bulk_action("activate", queryset.values_list("pk", flat=True))
        self.message_user(request, f"{count} subscribers activated.")

    @admin.action(description="Deactivate selected subscribers")
    def deactivate_subscribers(self, request, queryset):
        count = NewsletterSubscriber.bulk_action("deactivate", queryset.values_list("pk", flat=True))
        self.message_user(request, f"{count} subscribers deactivated.")


@admin.register(PostView)
class PostViewAdmin(admin.ModelAdmin):
    list_display = ["post", "ip_address", "referrer", "viewed_at"]
    list_filter = ["viewed_at"]
    search_fields = ["post__title", "referrer"]
    raw_id_fields = ["post"]
    readonly_fields = ["post", "ip_address", "user_agent", "referrer", "viewed_at"]
