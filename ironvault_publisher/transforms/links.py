"""Link, slug and escaping helpers shared by every renderer.

Slugs are vault-relative paths with the ``.md`` suffix dropped and each
path segment parameterized, so ``Characters/Kira Vale.md`` becomes
``characters/kira-vale``.
"""

import re
from pathlib import PurePosixPath
from typing import Callable

import inflection

LinkTransform = Callable[[str, str], str]

# [Face Danger](datasworn:move:starforged/adventure/face_danger)
MARKDOWN_LINK_PATTERN = re.compile(r'\[([^\]]+)\]\([^)]+\)')


def normalize_path(path: str) -> str:
    """Normalize Windows separators to forward slashes."""
    return path.replace('\\', '/')


def path_to_slug(path: str) -> str:
    """Convert a vault path (or bare note name) to a site slug.

    Args:
        path: Vault-relative path, with or without the ``.md`` suffix

    Returns:
        Slug without a leading slash, or ``""`` for an empty path
    """
    path = normalize_path(path).strip().strip('/')
    if path.lower().endswith('.md'):
        path = path[:-3]
    segments = [inflection.parameterize(s) for s in path.split('/') if s]
    return '/'.join(s for s in segments if s)


def file_stem(path: str) -> str:
    """Return the filename of a vault path without directories or ``.md``."""
    name = PurePosixPath(normalize_path(path)).name
    if name.lower().endswith('.md'):
        name = name[:-3]
    return name


def anchor_slug(section: str) -> str:
    """Convert a heading name to an anchor fragment."""
    return inflection.parameterize(section)


def url_for(base_url: str, slug: str) -> str:
    """Join a base URL prefix and a slug."""
    return f"{base_url.rstrip('/')}/{slug}"


def strip_markdown_link(text: str) -> str:
    """Reduce ``[Name](target)`` to ``Name``, leaving other text untouched."""
    return MARKDOWN_LINK_PATTERN.sub(r'\1', text)


def escape_html(text: str) -> str:
    """Escape text for use in HTML content and double-quoted attributes."""
    return (
        str(text)
        .replace('&', '&amp;')
        .replace('<', '&lt;')
        .replace('>', '&gt;')
        .replace('"', '&quot;')
    )


def absolute_link(prefix: str = "") -> LinkTransform:
    """Create a transform producing markdown links under a URL prefix.

    Args:
        prefix: URL prefix, e.g. ``/campaign`` (trailing slash ignored)

    Returns:
        A transform function (text, slug) -> markdown link
    """
    def transform(text: str, slug: str) -> str:
        return f"[{text}]({url_for(prefix, slug)})"
    return transform


def html_anchor(prefix: str = "", css_class: str = "") -> LinkTransform:
    """Create a transform producing escaped ``<a>`` tags under a URL prefix."""
    class_attr = f' class="{css_class}"' if css_class else ''

    def transform(text: str, slug: str) -> str:
        href = url_for(prefix, slug) if slug else '#'
        return f'<a href="{escape_html(href)}"{class_attr}>{escape_html(text)}</a>'
    return transform
