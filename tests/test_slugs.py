"""
Tests for slug normalization and allocation.
"""
import re

import pytest
from django.core.exceptions import ValidationError
from django.db import DatabaseError

from starlite_blog.slugs import allocate_slug, normalize_slug

SLUG_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def never_taken(candidate):
    return False


class TestNormalizeSlug:
    """Tests for normalize_slug."""

    def test_strips_punctuation(self):
        assert normalize_slug("Mastering Tailwind CSS!") == "mastering-tailwind-css"

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("  Hello,   World!  ", "hello-world"),
            ("__init__ files", "init-files"),
            ("snake_case_name", "snakecasename"),
            ("Café au lait", "cafe-au-lait"),
            ("a - b", "a-b"),
            ("--leading and trailing--", "leading-and-trailing"),
            ("C# 10 / .NET", "c-10-net"),
            ("Node.js", "nodejs"),
        ],
    )
    def test_normalization(self, name, expected):
        assert normalize_slug(name) == expected

    def test_truncation_does_not_leave_hyphen(self):
        slug = normalize_slug("abcd efgh", max_length=5)
        assert slug == "abcd"


class TestAllocateSlug:
    """Tests for allocate_slug."""

    def test_free_base_has_no_suffix(self):
        assert allocate_slug("Career Tips", never_taken) == "career-tips"

    def test_taken_base_gets_first_suffix(self):
        taken = {"mastering-tailwind-css"}
        slug = allocate_slug("Mastering Tailwind CSS!", taken.__contains__)
        assert slug == "mastering-tailwind-css-1"

    def test_counter_skips_every_taken_candidate(self):
        taken = {"react", "react-1", "react-2", "react-3"}
        assert allocate_slug("React", taken.__contains__) == "react-4"

    def test_probes_are_sequential(self):
        probes = []
        taken = {"news", "news-1"}

        def exists(candidate):
            probes.append(candidate)
            return candidate in taken

        allocate_slug("News", exists)
        assert probes == ["news", "news-1", "news-2"]

    @pytest.mark.parametrize(
        "name",
        ["Hello World", "  spaced  out  ", "Über-cool_thing!!", "1999: A Retrospective", "-x-"],
    )
    def test_result_is_url_safe(self, name):
        slug = allocate_slug(name, lambda candidate: candidate.count("-") < 1)
        assert SLUG_RE.match(slug)

    @pytest.mark.parametrize("name", ["", "   ", "!!!", "???", None])
    def test_empty_base_is_rejected_without_probing(self, name):
        probes = []

        with pytest.raises(ValidationError):
            allocate_slug(name, probes.append)

        assert probes == []

    def test_suffix_fits_max_length(self):
        name = "word " * 20
        base = allocate_slug(name, never_taken, max_length=20)
        slug = allocate_slug(name, lambda candidate: candidate == base, max_length=20)

        assert base == "word-word-word-word"
        assert slug == "word-word-word-wor-1"
        assert len(slug) <= 20

    def test_probe_failure_propagates(self):
        def broken(candidate):
            raise DatabaseError("connection lost")

        with pytest.raises(DatabaseError):
            allocate_slug("Anything", broken)
