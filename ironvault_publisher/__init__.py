"""
Iron Vault Publisher - Publish Iron Vault campaign notes as a static site

Converts an Obsidian vault of Ironsworn/Starforged campaign notes to HTML
with support for:
- Wikilinks and transclusions
- Callouts
- Iron Vault inline and block mechanics
- Dataview TABLE/LIST queries
"""

from ironvault_publisher.core.models import Document, LinkIndex, NoteError, PublishResult, RenderedDocument
from ironvault_publisher.core.discovery import VaultDiscovery
from ironvault_publisher.core.processor import ContentProcessor
from ironvault_publisher.core.publisher import Publisher, PublisherConfig

__version__ = "0.1.0"

__all__ = [
    "Document",
    "LinkIndex",
    "NoteError",
    "PublishResult",
    "RenderedDocument",
    "VaultDiscovery",
    "ContentProcessor",
    "Publisher",
    "PublisherConfig",
]
