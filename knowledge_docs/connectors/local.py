"""
Local filesystem documentation source.
Globs markdown files under a base path, parses frontmatter and infers metadata.
"""

from datetime import datetime, timezone
from fnmatch import fnmatch
from pathlib import Path
from typing import Dict, List, Optional

from knowledge_docs.connectors.base import DocumentSource, SourceError
from knowledge_docs.ingestion.parsers.markdown import (
    determine_category,
    extract_tags,
    extract_title,
    flatten_frontmatter,
    parse_markdown,
)
from knowledge_docs.shared.config import SourceConfig
from knowledge_docs.shared.models import Document
from knowledge_docs.shared.observability import get_logger

logger = get_logger(__name__)

MARKDOWN_SUFFIXES = {".md", ".mdx"}


class LocalDocumentationSource(DocumentSource):
    def __init__(self, config: SourceConfig):
        super().__init__(config, f"Local documentation from {config.path}")
        self.base_path = Path(config.path).expanduser()
        self._cache: Dict[str, Document] = {}

    def connect(self) -> None:
        if not self.base_path.is_dir():
            raise SourceError(f"Documentation path not found: {self.base_path}")
        self.connected = True
        logger.info(
            "Connected to local documentation source",
            source=self.name,
            path=str(self.base_path),
        )

    def disconnect(self) -> None:
        self.connected = False
        self._cache.clear()

    def fetch_documents(self) -> List[Document]:
        documents: List[Document] = []
        files = self.find_files()
        logger.info("Found documentation files", source=self.name, file_count=len(files))

        for file_path in files:
            try:
                doc = self.load_document(file_path)
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(
                    "Failed to load document",
                    source=self.name,
                    file=str(file_path),
                    error=str(e),
                )
                continue
            documents.append(doc)
            self._cache[doc.id] = doc

        return documents

    def fetch_document(self, document_id: str) -> Optional[Document]:
        if document_id in self._cache:
            return self._cache[document_id]

        # Accept either a document id or a path relative to the base path
        relative = document_id
        prefix = f"{self.name}:"
        if relative.startswith(prefix):
            relative = relative[len(prefix) :]

        file_path = self.base_path / relative
        if not file_path.is_file():
            return None
        try:
            doc = self.load_document(file_path)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to load document", file=str(file_path), error=str(e))
            return None
        self._cache[doc.id] = doc
        return doc

    def get_document_count(self) -> int:
        return len(self.find_files())

    # ---------- helpers ----------

    def find_files(self) -> List[Path]:
        """All files matching the configured patterns, minus excludes, deduplicated."""
        found = set()
        for pattern in self.config.patterns:
            for path in self.base_path.glob(pattern):
                if path.is_file() and not self._is_excluded(path):
                    found.add(path.resolve())
        return sorted(found)

    def _is_excluded(self, path: Path) -> bool:
        relative = self._relative(path)
        for pattern in self.config.exclude_patterns:
            # "**/x/**" also covers a top-level "x/" directory
            if fnmatch(relative, pattern) or fnmatch(f"/{relative}", pattern):
                return True
        return False

    def _relative(self, path: Path) -> str:
        try:
            relative = path.resolve().relative_to(self.base_path.resolve())
        except ValueError:
            relative = path
        return relative.as_posix()

    def generate_id(self, relative_path: str) -> str:
        """Stable ID: "<source name>:<posix relative path>"."""
        return f"{self.name}:{relative_path}"

    def load_document(self, file_path: Path) -> Document:
        raw = file_path.read_text(encoding="utf-8")
        relative_path = self._relative(file_path)
        parsed = parse_markdown(raw)

        doc_type = "markdown" if file_path.suffix.lower() in MARKDOWN_SUFFIXES else "text"
        # Computed fields win over frontmatter keys of the same name
        metadata = flatten_frontmatter(parsed.data)
        metadata.update(
            {
                "source": self.name,
                "path": relative_path,
                "category": determine_category(
                    relative_path, parsed.data, self.config.default_category
                ),
                "language": parsed.data.get("language") or self.config.default_language,
                "framework": parsed.data.get("framework") or self.config.default_framework,
                "tags": extract_tags(parsed.data, parsed.content),
                "created_at": datetime.now(timezone.utc).isoformat(),
            }
        )
        metadata.setdefault("excerpt", parsed.excerpt)

        return Document(
            id=self.generate_id(relative_path),
            type=doc_type,
            title=extract_title(parsed, file_path.stem),
            content=parsed.content,
            metadata=metadata,
        )
