"""
test_utils.py
-------------
Unit tests for slug, read-time and file helpers.
"""
import pytest
from folio.utils.files import format_file_size, get_file_extension, is_image, is_video
from folio.utils.read_time import (
    calculate_read_time,
    calculate_read_time_from_document,
    count_words,
    extract_text,
    format_read_time,
)
from folio.utils.slug import generate_slug, is_valid_slug
from conftest import make_doc


class TestGenerateSlug:
    """Tests for generate_slug."""

    @pytest.mark.parametrize("text, expected", [
        ("Hello World", "hello-world"),
        ("Hello, World!", "hello-world"),
        ("  React   Native -- Tips ", "react-native-tips"),
        ("snake_case_title", "snakecasetitle"),
        ("Already-a-slug", "already-a-slug"),
        ("Version 2.0 Released", "version-20-released"),
    ])
    def test_slugifies(self, text, expected):
        """Lowercases, strips punctuation and hyphenates whitespace."""
        assert generate_slug(text) == expected

    def test_empty_input(self):
        """Empty or punctuation-only text gives an empty slug."""
        assert generate_slug("") == ""
        assert generate_slug("!!!") == ""

    def test_output_is_always_valid(self):
        """Any non-empty result matches the slug pattern."""
        for text in ["A -- B", "---x---", "Title: Part 1/2", "C++ & Rust"]:
            slug = generate_slug(text)
            assert slug == "" or is_valid_slug(slug)


class TestIsValidSlug:
    """Tests for is_valid_slug."""

    def test_accepts_lowercase_hyphenated(self):
        assert is_valid_slug("hello-world-2")

    @pytest.mark.parametrize("slug", ["", "Hello", "hello--world", "-hello", "hello-", "hello world"])
    def test_rejects_malformed(self, slug):
        assert not is_valid_slug(slug)


class TestReadTime:
    """Tests for read time estimation."""

    def test_count_words(self):
        assert count_words("one  two\nthree") == 3
        assert count_words("") == 0

    def test_rounds_up(self):
        """201 words at 200 wpm is two minutes."""
        assert calculate_read_time(" ".join(["word"] * 200)) == 1
        assert calculate_read_time(" ".join(["word"] * 201)) == 2

    def test_strips_html(self):
        """Tags do not count as words."""
        assert calculate_read_time("<p><strong>one</strong> two</p>") == 1

    def test_empty_is_zero(self):
        assert calculate_read_time("") == 0
        assert calculate_read_time_from_document(None) == 0
        assert calculate_read_time_from_document({}) == 0

    def test_extract_text_walks_nested_nodes(self):
        """Text from every leaf is collected, blocks separated by spaces."""
        document = {
            "type": "doc",
            "content": [
                {"type": "heading", "content": [{"type": "text", "text": "Title"}]},
                {"type": "bulletList", "content": [
                    {"type": "listItem", "content": [
                        {"type": "paragraph", "content": [{"type": "text", "text": "first item"}]},
                    ]},
                ]},
                {"type": "image", "attrs": {"src": "x.png"}},
            ],
        }
        assert extract_text(document).split() == ["Title", "first", "item"]

    def test_document_read_time(self):
        """Words across paragraphs are summed before rounding."""
        document = make_doc(" ".join(["a"] * 150), " ".join(["b"] * 150))
        assert calculate_read_time_from_document(document) == 2

    @pytest.mark.parametrize("minutes, expected", [
        (0, "Less than 1 min read"),
        (1, "1 min read"),
        (7, "7 min read"),
    ])
    def test_format_read_time(self, minutes, expected):
        assert format_read_time(minutes) == expected


class TestFileHelpers:
    """Tests for file helpers."""

    @pytest.mark.parametrize("size, expected", [
        (512, "512 B"),
        (2048, "2.0 KB"),
        (5 * 1024 * 1024, "5.0 MB"),
    ])
    def test_format_file_size(self, size, expected):
        assert format_file_size(size) == expected

    def test_get_file_extension(self):
        assert get_file_extension("photo.JPG") == "jpg"
        assert get_file_extension("archive.tar.gz") == "gz"
        assert get_file_extension("README") == ""

    def test_mime_checks(self):
        assert is_image("image/png")
        assert not is_image("application/pdf")
        assert is_video("video/mp4")
        assert not is_video("image/gif")
