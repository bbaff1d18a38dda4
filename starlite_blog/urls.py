"""
URL configuration for starlite-blog.

Include in your project urls.py:

    path('api/', include('starlite_blog.urls')),
"""
from django.urls import path

from . import views

app_name = "starlite_blog"

urlpatterns = [
    # Posts
    path("posts/", views.PostListView.as_view(), name="post_list"),
    path("posts/admin/all/", views.AdminPostListView.as_view(), name="post_admin_list"),
    path("posts/<str:key>/", views.PostDetailView.as_view(), name="post_detail"),

    # Categories and tags
    path("categories/", views.CategoryListView.as_view(), name="category_list"),
    path("categories/<str:key>/", views.CategoryDetailView.as_view(), name="category_detail"),
    path("tags/", views.TagListView.as_view(), name="tag_list"),
    path("tags/<str:key>/", views.TagDetailView.as_view(), name="tag_detail"),

    # Media
    path("media/", views.MediaListView.as_view(), name="media_list"),
    path("media/upload/", views.MediaUploadView.as_view(), name="media_upload"),
    path(
        "media/upload-multiple/",
        views.MediaUploadView.as_view(multiple=True),
        name="media_upload_multiple",
    ),
    path("media/<int:pk>/", views.MediaDetailView.as_view(), name="media_detail"),

    # Newsletter
    path("newsletter/subscribe/", views.SubscribeView.as_view(), name="newsletter_subscribe"),
    path("newsletter/unsubscribe/", views.UnsubscribeView.as_view(), name="newsletter_unsubscribe"),
    path("newsletter/subscribers/", views.SubscriberListView.as_view(), name="subscriber_list"),
    path(
        "newsletter/subscribers/<int:pk>/",
        views.SubscriberDetailView.as_view(),
        name="subscriber_detail",
    ),
    path("newsletter/stats/", views.NewsletterStatsView.as_view(), name="newsletter_stats"),
    path(
        "newsletter/bulk-action/",
        views.SubscriberBulkActionView.as_view(),
        name="subscriber_bulk_action",
    ),

    # Analytics
    path("analytics/dashboard/", views.DashboardView.as_view(), name="analytics_dashboard"),
    path("analytics/posts/<int:pk>/", views.PostAnalyticsView.as_view(), name="analytics_post"),
    path("analytics/trends/", views.TrendsView.as_view(), name="analytics_trends"),
    path("analytics/track/", views.TrackView.as_view(), name="analytics_track"),

    # Auth
    path("auth/login/", views.LoginView.as_view(), name="login"),
    path("auth/logout/", views.LogoutView.as_view(), name="logout"),
    path("auth/me/", views.MeView.as_view(), name="me"),
    path("auth/register-admin/", views.RegisterAdminView.as_view(), name="register_admin"),
    path("auth/change-password/", views.ChangePasswordView.as_view(), name="change_password"),
]
