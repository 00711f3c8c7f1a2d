import re

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def generate_slug(text: str) -> str:
    """
    Convert a title or tag name into a URL-safe slug.

    Lowercases, drops everything that is not a letter, digit, whitespace or
    hyphen, turns whitespace runs into hyphens and collapses repeated hyphens.

        >>> generate_slug("Hello, World!")
        'hello-world'
        >>> generate_slug("  React   Native -- Tips ")
        'react-native-tips'
    """
    if not text:
        return ""
    slug = text.lower()
    slug = re.sub(r"[^\w\s-]", "", slug, flags=re.ASCII)
    slug = slug.replace("_", "")
    slug = re.sub(r"\s+", "-", slug.strip())
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def is_valid_slug(slug: str) -> bool:
    return bool(slug) and SLUG_PATTERN.match(slug) is not None
