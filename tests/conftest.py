"""
Shared fixtures for starlite-blog tests.
"""
import pytest
from django.contrib.auth import get_user_model

from starlite_blog.models import Category, Post, Tag
from starlite_blog.repository import EntityRepository

User = get_user_model()


@pytest.fixture
def repository(db):
    return EntityRepository()


@pytest.fixture
def user(db):
    """Create a test user."""
    return User.objects.create_user(
        username="testuser",
        email="test@example.com",
        password="testpass123",
    )


@pytest.fixture
def staff_user(db):
    """Create a staff (admin) user."""
    return User.objects.create_user(
        username="editor",
        email="editor@example.com",
        password="editorpass123",
        first_name="Editor",
        is_staff=True,
    )


@pytest.fixture
def category(db):
    """Create a test category."""
    return Category.objects.create(name="Web Development", color="#7C3AED")


@pytest.fixture
def tags(db):
    """Create three tags keyed by name."""
    return {
        name: Tag.objects.create(name=name)
        for name in ("TypeScript", "React", "Python")
    }


@pytest.fixture
def post(db, user):
    """Create a published test post."""
    return Post.objects.create(
        title="Test Post",
        content="This is a test post body.",
        author=user,
        is_published=True,
    )
