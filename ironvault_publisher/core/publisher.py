"""Batch publishing of a whole vault to HTML fragments."""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from loguru import logger

from ironvault_publisher.core.discovery import DEFAULT_EXCLUDE_PATTERNS, VaultDiscovery
from ironvault_publisher.core.models import Document, NoteError, PublishResult, RenderedDocument
from ironvault_publisher.core.processor import ContentProcessor


class ConfigError(ValueError):
    """Invalid publisher configuration."""


@dataclass
class PublisherConfig:
    """Settings for one publish run."""
    vault_path: Path
    output_dir: Path
    source_dirs: Optional[List[str]] = None
    base_url: str = ""
    attachments_prefix: str = "/attachments"
    exclude_patterns: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS))
    warn_on_missing_link: bool = True
    workers: int = 1
    dry_run: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base_dir: Optional[Path] = None) -> "PublisherConfig":
        """Build a config from a mapping, resolving paths against base_dir.

        Raises:
            ConfigError: Unknown keys, missing paths or bad values
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(sorted(unknown))}")
        for required in ('vault_path', 'output_dir'):
            if not data.get(required):
                raise ConfigError(f"Missing required config key: {required}")

        values = dict(data)
        base_dir = base_dir or Path.cwd()
        for key in ('vault_path', 'output_dir'):
            path = Path(values[key]).expanduser()
            values[key] = path if path.is_absolute() else base_dir / path

        workers = values.get('workers', 1)
        if not isinstance(workers, int) or workers < 1:
            raise ConfigError(f"workers must be a positive integer, got {workers!r}")

        return cls(**values)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "PublisherConfig":
        """Load a YAML config file; relative paths resolve against its folder."""
        path = Path(path)
        try:
            data = yaml.safe_load(path.read_text(encoding='utf-8')) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config must be a mapping: {path}")
        return cls.from_dict(data, base_dir=path.parent)


class Publisher:
    """Renders every vault document and writes one HTML file per slug."""

    def __init__(self, config: PublisherConfig):
        self.config = config
        self.discovery = VaultDiscovery(
            config.vault_path,
            source_dirs=config.source_dirs,
            exclude_patterns=config.exclude_patterns,
        )

    def publish(self) -> PublishResult:
        """Publish the vault.

        Failures are collected per document; one bad note never stops the run.
        """
        result = PublishResult(dry_run=self.config.dry_run)
        documents = self.discovery.discover_all()
        logger.info(f"Discovered {len(documents)} documents in {self.config.vault_path}")

        processor = ContentProcessor(
            documents,
            base_url=self.config.base_url,
            attachments_prefix=self.config.attachments_prefix,
            warn_on_missing_link=self.config.warn_on_missing_link,
        )

        def publish_one(document: Document) -> Union[RenderedDocument, NoteError]:
            try:
                rendered = processor.process(document, self.discovery.read_body(document))
                if not self.config.dry_run:
                    self.write(rendered)
                return rendered
            except Exception as e:
                logger.error(f"Failed to publish {document.path}: {e}")
                return NoteError(path=document.path, error=str(e), title=document.title)

        if self.config.workers > 1:
            with ThreadPoolExecutor(max_workers=self.config.workers) as pool:
                outcomes = list(pool.map(publish_one, documents))
        else:
            outcomes = [publish_one(doc) for doc in documents]

        for outcome in outcomes:
            if isinstance(outcome, NoteError):
                result.failures.append(outcome)
            else:
                result.published_titles.append(outcome.document.title)
                if not self.config.dry_run:
                    result.written_paths.append(self.output_path(outcome.document))

        logger.info(
            f"Published {len(result.published_titles)} documents, "
            f"{len(result.failures)} failures{' (dry run)' if result.dry_run else ''}"
        )
        return result

    def output_path(self, document: Document) -> Path:
        return self.config.output_dir / f"{document.slug or 'index'}.html"

    def write(self, rendered: RenderedDocument) -> Path:
        path = self.output_path(rendered.document)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(rendered.html, encoding='utf-8')
        return path


def create_publisher_from_config(path: Union[str, Path], **overrides: Any) -> Publisher:
    """Create a Publisher from a YAML config file, with keyword overrides."""
    config = PublisherConfig.from_yaml(path)
    for key, value in overrides.items():
        if value is not None:
            setattr(config, key, value)
    return Publisher(config)
