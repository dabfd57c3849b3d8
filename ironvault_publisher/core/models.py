"""Data models for Iron Vault Publisher."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from ironvault_publisher.transforms.links import file_stem, path_to_slug


@dataclass(frozen=True)
class Document:
    """One vault note, as seen by every renderer.

    Identity is the vault-relative path. Content is NOT stored here; the
    loader reads it on demand through ``source`` when a note is rendered.
    """
    path: str
    slug: str = field(compare=False)
    title: str = field(compare=False)
    frontmatter: Dict[str, Any] = field(default_factory=dict, compare=False)
    source: Optional[Path] = field(default=None, compare=False, repr=False)

    @classmethod
    def from_path(cls, path: str, frontmatter: Optional[Dict[str, Any]] = None,
                  title: Optional[str] = None, source: Optional[Path] = None) -> "Document":
        """Build a document, deriving slug and title from its vault path."""
        frontmatter = frontmatter or {}
        return cls(
            path=path,
            slug=path_to_slug(path),
            title=title or str(frontmatter.get('title') or file_stem(path)),
            frontmatter=frontmatter,
            source=source,
        )

    @property
    def folder(self) -> str:
        """Vault-relative parent directory, ``""`` for root notes."""
        normalized = self.path.replace('\\', '/')
        return normalized.rsplit('/', 1)[0] if '/' in normalized else ''


@dataclass
class LinkIndex:
    """Case-insensitive lookup from note title or filename to document."""

    by_name: Dict[str, Document]

    @classmethod
    def from_documents(cls, documents: Iterable[Document]) -> "LinkIndex":
        """Index every document by title and by filename stem."""
        by_name: Dict[str, Document] = {}
        for doc in documents:
            by_name[doc.title.lower()] = doc
            by_name[file_stem(doc.path).lower()] = doc
        return cls(by_name)

    def get(self, name: str) -> Optional[Document]:
        """Find a document by title or filename, case-insensitive."""
        return self.by_name.get(name.strip().lower())

    def get_slug(self, name: str) -> Optional[str]:
        """Get slug for a title or filename, case-insensitive."""
        doc = self.get(name)
        return doc.slug if doc else None

    def resolve(self, target: str) -> str:
        """Slug for a link target, falling back to the slug rule."""
        return self.get_slug(target) or path_to_slug(target)

    def resolve_path(self, path: str) -> str:
        """Slug for a vault path, looked up by its filename stem.

        Returns ``""`` for an empty path.
        """
        if not path.strip():
            return ''
        return self.get_slug(file_stem(path)) or path_to_slug(path)


@dataclass
class RenderedDocument:
    """Result of rendering one document to HTML."""
    document: Document
    html: str
    missing_links: List[str] = field(default_factory=list)


@dataclass
class NoteError:
    """An error that occurred while processing a note.

    Used for errors at any phase: discovery, rendering, or writing.
    """
    path: str
    error: str
    title: Optional[str] = None


@dataclass
class PublishResult:
    """Result of a publish operation."""
    published_titles: List[str] = field(default_factory=list)
    failures: List[NoteError] = field(default_factory=list)
    written_paths: List[Path] = field(default_factory=list)
    dry_run: bool = False
