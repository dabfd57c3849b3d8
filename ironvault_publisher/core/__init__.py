"""Core components for Iron Vault Publisher."""

from ironvault_publisher.core.models import Document, LinkIndex, NoteError, PublishResult, RenderedDocument
from ironvault_publisher.core.processor import ContentProcessor
from ironvault_publisher.core.discovery import VaultDiscovery
from ironvault_publisher.core.publisher import ConfigError, Publisher, PublisherConfig, create_publisher_from_config

__all__ = [
    "Document",
    "LinkIndex",
    "NoteError",
    "PublishResult",
    "RenderedDocument",
    "VaultDiscovery",
    "ContentProcessor",
    "ConfigError",
    "Publisher",
    "PublisherConfig",
    "create_publisher_from_config",
]
