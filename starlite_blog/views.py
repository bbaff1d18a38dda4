"""
JSON API views for starlite-blog.

Every view resolves the shared EntityRepository through ``get_repository``;
pass ``repository=`` to ``as_view`` to inject another one.
"""
import json
import logging

from django.apps import apps
from django.contrib.auth import (
    authenticate,
    get_user_model,
    login,
    logout,
    password_validation,
    update_session_auth_hash,
)
from django.core.exceptions import ValidationError
from django.core.paginator import Paginator
from django.db.models import Q
from django.http import JsonResponse
from django.views import View

from . import analytics, services
from .analytics import published_posts
from .conf import blog_settings
from .exceptions import BlogError, Conflict, NotFound
from .models import Category, Media, NewsletterSubscriber, Post, PostView, Tag
from .serializers import (
    serialize_category,
    serialize_media,
    serialize_post,
    serialize_post_summary,
    serialize_subscriber,
    serialize_tag,
    serialize_user,
)

logger = logging.getLogger(__name__)


def json_error(message, status, **extra):
    return JsonResponse({"error": message, **extra}, status=status)


def validation_error_response(exc):
    if hasattr(exc, "error_dict"):
        fields = {name: [str(m) for m in messages] for name, messages in exc.message_dict.items()}
        return json_error("Invalid input", 400, fields=fields)
    return json_error(" ".join(exc.messages), 400)


def paginate(queryset, page, per_page):
    """Return (page object, pagination dict) for ``queryset``."""
    paginator = Paginator(queryset, per_page)
    page_obj = paginator.get_page(page)
    return page_obj, {
        "page": page_obj.number,
        "limit": per_page,
        "total": paginator.count,
        "total_pages": paginator.num_pages,
    }


class ApiView(View):
    """
    Base JSON view.

    Maps Django's ValidationError and BlogError subclasses onto JSON error
    responses. Methods listed in ``admin_methods`` need a staff user;
    ``login_required`` gates every method on an authenticated user.
    """

    repository = None
    admin_methods = ()
    login_required = False

    def get_repository(self):
        if self.repository is None:
            return apps.get_app_config("starlite_blog").repository
        return self.repository

    def dispatch(self, request, *args, **kwargs):
        method = request.method.lower()
        user = request.user
        if self.login_required or method in self.admin_methods:
            if not user.is_authenticated:
                return json_error("Authentication required", 401)
        if method in self.admin_methods and not user.is_staff:
            return json_error("Admin access required", 403)

        try:
            return super().dispatch(request, *args, **kwargs)
        except ValidationError as exc:
            return validation_error_response(exc)
        except BlogError as exc:
            if isinstance(exc, Conflict):
                logger.warning("%s %s rejected: %s", request.method, request.path, exc.message)
            return json_error(exc.message, exc.status_code)

    def get_data(self):
        """Decode the JSON request body into a dict."""
        if not self.request.body:
            return {}
        try:
            data = json.loads(self.request.body)
        except ValueError as exc:
            raise ValidationError("Request body must be valid JSON.") from exc
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object.")
        return data

    def get_int(self, name, default, maximum=None):
        raw = self.request.GET.get(name)
        if raw in (None, ""):
            return default
        try:
            value = int(raw)
        except ValueError as exc:
            raise ValidationError({name: "Must be an integer."}) from exc
        if value < 1:
            raise ValidationError({name: "Must be a positive integer."})
        if maximum:
            value = min(value, maximum)
        return value


# Posts

class PostListView(ApiView):
    """List published posts; admins create posts."""

    admin_methods = ("post",)

    def get_queryset(self):
        qs = Post.objects.filter(is_published=True)

        category = self.request.GET.get("category")
        if category:
            qs = qs.filter(categories__slug=category)

        tag = self.request.GET.get("tag")
        if tag:
            qs = qs.filter(tags__slug=tag)

        search = self.request.GET.get("search")
        if search:
            qs = qs.filter(
                Q(title__icontains=search)
                | Q(excerpt__icontains=search)
                | Q(content__icontains=search)
            )

        return (
            qs.distinct()
            .select_related("author")
            .prefetch_related("categories", "tags")
            .order_by("-published_at")
        )

    def get(self, request):
        page_obj, pagination = paginate(
            self.get_queryset(),
            self.get_int("page", 1),
            self.get_int("limit", blog_settings.POSTS_PER_PAGE, blog_settings.MAX_PAGE_SIZE),
        )
        return JsonResponse({
            "posts": [serialize_post(p) for p in page_obj],
            "pagination": pagination,
        })

    def post(self, request):
        post = services.create_post(self.get_repository(), request.user, self.get_data())
        return JsonResponse(serialize_post(post), status=201)


class AdminPostListView(ApiView):
    """List every post, drafts included."""

    admin_methods = ("get",)

    def get(self, request):
        qs = Post.objects.select_related("author").prefetch_related("categories", "tags")
        status = request.GET.get("status")
        if status == "published":
            qs = qs.filter(is_published=True)
        elif status == "draft":
            qs = qs.filter(is_published=False)

        page_obj, pagination = paginate(
            qs.order_by("-created_at"),
            self.get_int("page", 1),
            self.get_int("limit", blog_settings.POSTS_PER_PAGE, blog_settings.MAX_PAGE_SIZE),
        )
        return JsonResponse({
            "posts": [serialize_post(p) for p in page_obj],
            "pagination": pagination,
        })


class PostDetailView(ApiView):
    """
    GET a published post by slug; PUT/DELETE a post by id.

    Reading a post counts as a view.
    """

    admin_methods = ("put", "delete")

    def get(self, request, key):
        post = self.get_repository().get_by_slug(Post, key, is_published=True)
        post.increment_view_count()
        PostView.record(post, request)
        post.refresh_from_db(fields=["view_count"])
        return JsonResponse(serialize_post(post))

    def put(self, request, key):
        post = services.update_post(self.get_repository(), key, self.get_data())
        return JsonResponse(serialize_post(post))

    def delete(self, request, key):
        services.delete_post(self.get_repository(), key)
        return JsonResponse({"message": "Post deleted successfully"})


# Categories and tags

class CategoryListView(ApiView):
    admin_methods = ("post",)

    def get(self, request):
        categories = Category.objects.annotate(published_posts=published_posts)
        return JsonResponse(
            [serialize_category(c, post_count=c.published_posts) for c in categories],
            safe=False,
        )

    def post(self, request):
        category = services.create_category(self.get_repository(), self.get_data())
        return JsonResponse(serialize_category(category), status=201)


class CategoryDetailView(ApiView):
    """GET a category and its published posts by slug; PUT/DELETE by id."""

    admin_methods = ("put", "delete")

    def get(self, request, key):
        category = self.get_repository().get_by_slug(Category, key)
        posts = (
            category.posts.filter(is_published=True)
            .select_related("author")
            .prefetch_related("categories", "tags")
            .order_by("-published_at")
        )
        data = serialize_category(category)
        data["posts"] = [serialize_post(p, include_content=False) for p in posts]
        return JsonResponse(data)

    def put(self, request, key):
        category = services.update_category(self.get_repository(), key, self.get_data())
        return JsonResponse(serialize_category(category))

    def delete(self, request, key):
        services.delete_category(self.get_repository(), key)
        return JsonResponse({"message": "Category deleted successfully"})


class TagListView(ApiView):
    admin_methods = ("post",)

    def get(self, request):
        tags = Tag.objects.annotate(published_posts=published_posts)
        return JsonResponse(
            [serialize_tag(t, post_count=t.published_posts) for t in tags],
            safe=False,
        )

    def post(self, request):
        tag = services.create_tag(self.get_repository(), self.get_data())
        return JsonResponse(serialize_tag(tag), status=201)


class TagDetailView(ApiView):
    """GET a tag and its published posts by slug; PUT/DELETE by id."""

    admin_methods = ("put", "delete")

    def get(self, request, key):
        tag = self.get_repository().get_by_slug(Tag, key)
        posts = (
            tag.posts.filter(is_published=True)
            .select_related("author")
            .prefetch_related("categories", "tags")
            .order_by("-published_at")
        )
        data = serialize_tag(tag)
        data["posts"] = [serialize_post(p, include_content=False) for p in posts]
        return JsonResponse(data)

    def put(self, request, key):
        tag = services.update_tag(self.get_repository(), key, self.get_data())
        return JsonResponse(serialize_tag(tag))

    def delete(self, request, key):
        services.delete_tag(self.get_repository(), key)
        return JsonResponse({"message": "Tag deleted successfully"})


# Media

class MediaListView(ApiView):
    admin_methods = ("get",)

    def get(self, request):
        page_obj, pagination = paginate(
            Media.objects.select_related("post"),
            self.get_int("page", 1),
            self.get_int("limit", blog_settings.MEDIA_PER_PAGE, blog_settings.MAX_PAGE_SIZE),
        )
        return JsonResponse({
            "media": [serialize_media(m) for m in page_obj],
            "pagination": pagination,
        })


class MediaUploadView(ApiView):
    """Upload one image (``file``) or several (``files``)."""

    admin_methods = ("post",)
    multiple = False

    def get_post(self):
        post_id = self.request.POST.get("post_id")
        if not post_id:
            return None
        return self.get_repository().get(Post, post_id)

    def post(self, request):
        field = "files" if self.multiple else "file"
        files = request.FILES.getlist(field)
        if not files:
            raise ValidationError("No file uploaded.")
        if len(files) > blog_settings.MEDIA_MAX_FILES:
            raise ValidationError(
                "At most %(limit)d files per upload.",
                params={"limit": blog_settings.MEDIA_MAX_FILES},
            )

        post = self.get_post()
        created = []

        def store():
            for upload in files:
                created.append(Media.create_from_upload(
                    upload,
                    alt=request.POST.get("alt", "") if not self.multiple else "",
                    caption=request.POST.get("caption", "") if not self.multiple else "",
                    post=post,
                    uploaded_by=request.user,
                ))

        try:
            self.get_repository().run_in_transaction(store)
        except Exception:
            # Rows were rolled back; remove the files already written
            for media in created:
                media.file.delete(save=False)
            raise

        logger.info("Uploaded %d media file(s) by %s", len(created), request.user)
        if self.multiple:
            return JsonResponse({"media": [serialize_media(m) for m in created]}, status=201)
        return JsonResponse(serialize_media(created[0]), status=201)


class MediaDetailView(ApiView):
    admin_methods = ("get", "put", "delete")

    def get(self, request, pk):
        return JsonResponse(serialize_media(self.get_repository().get(Media, pk)))

    def put(self, request, pk):
        repository = self.get_repository()
        media = repository.get(Media, pk)
        data = self.get_data()

        fields = {name: data[name] or "" for name in ("alt", "caption") if name in data}
        if "post_id" in data:
            fields["post"] = repository.get(Post, data["post_id"]) if data["post_id"] else None

        repository.update_entity(media, **fields)
        return JsonResponse(serialize_media(media))

    def delete(self, request, pk):
        repository = self.get_repository()
        repository.delete_entity(repository.get(Media, pk))
        return JsonResponse({"message": "Media deleted successfully"})


# Newsletter

class SubscribeView(ApiView):
    MESSAGES = {
        "created": ("Successfully subscribed to our newsletter!", 201),
        "reactivated": ("Welcome back! Your subscription has been reactivated.", 200),
        "already": ("You are already subscribed to our newsletter", 200),
    }

    def post(self, request):
        data = self.get_data()
        services.require(data, "email")
        _, action = NewsletterSubscriber.subscribe(data["email"])
        message, status = self.MESSAGES[action]
        return JsonResponse({"message": message}, status=status)


class UnsubscribeView(ApiView):
    MESSAGES = {
        "unsubscribed": "Successfully unsubscribed from our newsletter",
        "already": "You are already unsubscribed from our newsletter",
    }

    def post(self, request):
        data = self.get_data()
        services.require(data, "email")
        _, action = NewsletterSubscriber.unsubscribe(data["email"])
        return JsonResponse({"message": self.MESSAGES[action]})


class SubscriberListView(ApiView):
    admin_methods = ("get",)

    def get(self, request):
        qs = NewsletterSubscriber.objects.all()
        status = request.GET.get("status", "all")
        if status == "active":
            qs = qs.filter(is_active=True)
        elif status == "inactive":
            qs = qs.filter(is_active=False)

        page_obj, pagination = paginate(
            qs,
            self.get_int("page", 1),
            self.get_int("limit", blog_settings.SUBSCRIBERS_PER_PAGE, blog_settings.MAX_PAGE_SIZE),
        )
        return JsonResponse({
            "subscribers": [serialize_subscriber(s) for s in page_obj],
            "pagination": pagination,
        })


class SubscriberDetailView(ApiView):
    admin_methods = ("delete",)

    def delete(self, request, pk):
        repository = self.get_repository()
        repository.delete_entity(repository.get(NewsletterSubscriber, pk))
        return JsonResponse({"message": "Subscriber deleted successfully"})


class SubscriberBulkActionView(ApiView):
    admin_methods = ("post",)

    def post(self, request):
        data = self.get_data()
        action = data.get("action")
        ids = data.get("subscriber_ids")
        if not action or not isinstance(ids, list):
            raise ValidationError("Action and subscriber_ids array are required.")
        if action not in NewsletterSubscriber.BULK_ACTIONS:
            raise ValidationError("Invalid action.")

        affected = self.get_repository().run_in_transaction(
            NewsletterSubscriber.bulk_action, action, ids
        )
        return JsonResponse({
            "message": f"Bulk {action} completed successfully",
            "affected": affected,
        })


class NewsletterStatsView(ApiView):
    admin_methods = ("get",)

    def get(self, request):
        return JsonResponse(analytics.newsletter_stats())


# Analytics

class DashboardView(ApiView):
    admin_methods = ("get",)

    def get(self, request):
        return JsonResponse(analytics.dashboard_stats())


class PostAnalyticsView(ApiView):
    admin_methods = ("get",)

    def get(self, request, pk):
        post = self.get_repository().get(Post, pk)
        days = self.get_int("days", blog_settings.POST_ANALYTICS_DAYS)
        return JsonResponse(analytics.post_stats(post, days))


class TrendsView(ApiView):
    admin_methods = ("get",)

    def get(self, request):
        return JsonResponse(analytics.trends(self.get_int("period", blog_settings.TRENDS_DAYS)))


class TrackView(ApiView):
    """Record a view of a published post."""

    def post(self, request):
        data = self.get_data()
        services.require(data, "post_id")
        post = self.get_repository().get(Post, data["post_id"])
        if not post.is_published:
            raise NotFound("Post not found", pk=post.pk)
        PostView.record(post, request, referrer=data.get("referrer"))
        return JsonResponse({"success": True, "post": serialize_post_summary(post)})


# Auth

class LoginView(ApiView):
    def post(self, request):
        data = self.get_data()
        identifier = data.get("username") or data.get("email")
        password = data.get("password")
        if not identifier or not password:
            raise ValidationError("Username or email and password are required.")

        user = authenticate(request, username=identifier, password=password)
        if user is None and "@" in identifier:
            match = get_user_model()._default_manager.filter(email__iexact=identifier).first()
            if match is not None:
                user = authenticate(request, username=match.get_username(), password=password)
        if user is None:
            return json_error("Invalid credentials", 401)

        login(request, user)
        return JsonResponse({"user": serialize_user(user)})


class LogoutView(ApiView):
    def post(self, request):
        logout(request)
        return JsonResponse({"message": "Logged out"})


class MeView(ApiView):
    login_required = True

    def get(self, request):
        return JsonResponse({"user": serialize_user(request.user)})


class RegisterAdminView(ApiView):
    admin_methods = ("post",)

    def post(self, request):
        data = self.get_data()
        services.require(data, "email", "password", "name")
        User = get_user_model()

        email = data["email"].strip().lower()
        if User._default_manager.filter(Q(email__iexact=email) | Q(username=email)).exists():
            raise Conflict("User already exists", email=email)

        user = User(username=email, email=email, first_name=data["name"], is_staff=True)
        password_validation.validate_password(data["password"], user)
        user.set_password(data["password"])
        self.get_repository().save(user)
        logger.info("Registered admin %s", email)
        return JsonResponse({"user": serialize_user(user)}, status=201)


class ChangePasswordView(ApiView):
    login_required = True

    def put(self, request):
        data = self.get_data()
        services.require(data, "current_password", "new_password")
        user = request.user
        if not user.check_password(data["current_password"]):
            raise ValidationError({"current_password": "Current password is incorrect."})

        password_validation.validate_password(data["new_password"], user)
        user.set_password(data["new_password"])
        self.get_repository().save(user)
        update_session_auth_hash(request, user)
        return JsonResponse({"message": "Password updated successfully"})
