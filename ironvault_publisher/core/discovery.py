"""Vault discovery module for loading the document set."""

import re
from pathlib import Path
from typing import Dict, List, Optional, Pattern, Sequence

import yaml
from loguru import logger

from ironvault_publisher.core.models import Document
from ironvault_publisher.core.processor import extract_content

DEFAULT_EXCLUDE_PATTERNS = (
    r'^\.',               # hidden files and folders
    r'\.excalidraw\.md$',
    r'\.base$',
    r'^README\.md$',
)


class VaultDiscovery:
    """Finds notes in an Obsidian vault and parses their frontmatter."""

    def __init__(
        self,
        vault_path: Path,
        source_dirs: Optional[List[str]] = None,
        exclude_patterns: Optional[Sequence[str]] = None,
    ):
        """Initialize VaultDiscovery.

        Args:
            vault_path: Path to the Obsidian vault root
            source_dirs: Subdirectories within vault to scan (default: vault root)
            exclude_patterns: Regexes matched against each file or folder name
        """
        self.vault_path = Path(vault_path)
        self.source_dirs = [
            self.vault_path / d for d in (source_dirs or ["."])
        ]
        patterns = DEFAULT_EXCLUDE_PATTERNS if exclude_patterns is None else exclude_patterns
        self.exclude_patterns: List[Pattern] = [re.compile(p) for p in patterns]

    def discover_all(self) -> List[Document]:
        """Load every note in the source directories.

        Returns:
            Documents sorted by vault-relative path
        """
        existing_dirs = [d for d in self.source_dirs if d.exists()]

        for d in self.source_dirs:
            if not d.exists():
                logger.warning(f"Source directory not found: {d}")

        if not existing_dirs:
            dirs = ', '.join(str(d) for d in self.source_dirs)
            raise FileNotFoundError(f"No source directories found: {dirs}")

        documents: Dict[str, Document] = {}
        for source_dir in existing_dirs:
            for note_path in source_dir.rglob("*.md"):
                if self._is_excluded(note_path):
                    continue
                document = self._load_document(note_path)
                if document is not None:
                    documents[document.path] = document

        return [documents[path] for path in sorted(documents)]

    def get_note(self, name_or_path: str) -> Optional[Document]:
        """Get a single note by path, filename or title.

        Args:
            name_or_path: Note title, filename (with or without .md), or path

        Returns:
            Document if found, None otherwise
        """
        path = Path(name_or_path)
        if path.is_absolute() and path.exists() and path.suffix == '.md':
            return self._load_document(path)
        if (self.vault_path / path).is_file() and path.suffix == '.md':
            return self._load_document(self.vault_path / path)

        search_name = Path(name_or_path).stem.lower() if path.suffix == '.md' else name_or_path.lower()
        for document in self.discover_all():
            if Path(document.path).stem.lower() == search_name or document.title.lower() == search_name:
                return document
        return None

    def read_body(self, document: Document) -> str:
        """Read a document's text without its frontmatter."""
        if document.source is None:
            raise ValueError(f"Document has no source file: {document.path}")
        return extract_content(document.source.read_text(encoding='utf-8'))

    def _is_excluded(self, note_path: Path) -> bool:
        relative = note_path.relative_to(self.vault_path)
        return any(
            pattern.search(part)
            for part in relative.parts
            for pattern in self.exclude_patterns
        )

    def _load_document(self, file_path: Path) -> Optional[Document]:
        """Parse a note file into a Document.

        Args:
            file_path: Path to the markdown file

        Returns:
            Document or None if parsing fails
        """
        try:
            relative = file_path.resolve().relative_to(self.vault_path.resolve()).as_posix()
            frontmatter = self._parse_frontmatter(file_path)
            return Document.from_path(relative, frontmatter=frontmatter, source=file_path)
        except (OSError, ValueError, UnicodeDecodeError) as e:
            logger.warning(f"Failed to load {file_path.name}: {e}")
            return None

    def _parse_frontmatter(self, file_path: Path) -> Dict:
        """Parse YAML frontmatter from markdown file.

        Args:
            file_path: Path to the markdown file

        Returns:
            Frontmatter dict (empty if not found or invalid)
        """
        content = file_path.read_text(encoding='utf-8').replace('\r\n', '\n')

        if not content.startswith('---'):
            return {}

        try:
            parts = content.split('---\n', 2)
            if len(parts) < 3:
                return {}

            frontmatter = yaml.safe_load(parts[1])
            if not isinstance(frontmatter, dict):
                return {}

            return frontmatter

        except yaml.YAMLError as e:
            logger.warning(f"Failed to parse YAML in {file_path.name}: {e}")
            return {}
