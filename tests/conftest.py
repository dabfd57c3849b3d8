"""Shared fixtures."""

import sys

import pytest
from loguru import logger

from ironvault_publisher.core.models import Document


@pytest.fixture(autouse=True)
def reset_logging():
    """CLI commands replace the loguru sink; restore a plain stderr sink."""
    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def documents():
    """A small campaign document set."""
    return [
        Document.from_path("Characters/Kira Vale.md", frontmatter={
            "tags": ["character", "pc"],
            "faction": "[[Iron Syndicate]]",
            "rank": 3,
        }),
        Document.from_path("Characters/Tomas Reyes.md", frontmatter={
            "tags": ["character"],
            "faction": "Free Traders",
            "rank": 5,
        }),
        Document.from_path("Progress/Vow to Kira.md", frontmatter={
            "tags": "vow",
            "status": "[[Done]]",
            "rank": 3,
        }),
        Document.from_path("Locations/Bleakhold.md", frontmatter={
            "tags": ["location"],
        }),
    ]
