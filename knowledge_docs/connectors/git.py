"""
Git repository documentation source.
Keeps a shallow checkout in a cache directory and reads it as a local source.
"""

import re
import subprocess
from pathlib import Path
from typing import List, Optional

from knowledge_docs.connectors.base import DocumentSource, SourceError
from knowledge_docs.connectors.local import LocalDocumentationSource
from knowledge_docs.shared.config import SourceConfig
from knowledge_docs.shared.models import Document
from knowledge_docs.shared.observability import get_logger

logger = get_logger(__name__)

GIT_TIMEOUT_SECONDS = 300


def checkout_dir_name(repo_url: str) -> str:
    """Filesystem-safe directory name for a repository URL."""
    name = re.sub(r"^https?://", "", repo_url)
    return re.sub(r"[^a-zA-Z0-9-]", "_", name)


class GitDocumentationSource(DocumentSource):
    def __init__(self, config: SourceConfig, cache_dir: str = ".knowledge-docs-cache"):
        super().__init__(config, f"Git documentation from {config.path}")
        self.repo_url = config.path
        self.local_path = Path(cache_dir) / checkout_dir_name(config.path)
        self.local_source: Optional[LocalDocumentationSource] = None

    def connect(self) -> None:
        logger.info("Cloning/updating git repository", source=self.name, repo=self.repo_url)

        if self.local_path.exists():
            self._git(["git", "-C", str(self.local_path), "pull", "--ff-only"])
        else:
            self.local_path.parent.mkdir(parents=True, exist_ok=True)
            self._git(["git", "clone", "--depth", "1", self.repo_url, str(self.local_path)])

        local_config = self.config.model_copy(
            update={"type": "local", "path": str(self.local_path)}
        )
        self.local_source = LocalDocumentationSource(local_config)
        self.local_source.connect()
        self.connected = True
        logger.info("Git source connected", source=self.name, path=str(self.local_path))

    def disconnect(self) -> None:
        if self.local_source:
            self.local_source.disconnect()
            self.local_source = None
        self.connected = False

    def fetch_documents(self) -> List[Document]:
        return self._require_local().fetch_documents()

    def fetch_document(self, document_id: str) -> Optional[Document]:
        return self._require_local().fetch_document(document_id)

    def get_document_count(self) -> int:
        if not self.local_source:
            return 0
        return self.local_source.get_document_count()

    def _require_local(self) -> LocalDocumentationSource:
        if not self.local_source:
            raise SourceError("Git source not connected")
        return self.local_source

    def _git(self, args: List[str]) -> None:
        logger.debug("Running git", source=self.name, args=args)
        try:
            subprocess.run(
                args,
                check=True,
                capture_output=True,
                text=True,
                timeout=GIT_TIMEOUT_SECONDS,
            )
        except FileNotFoundError as e:
            raise SourceError("git executable not found") from e
        except subprocess.CalledProcessError as e:
            logger.error(
                "Git command failed",
                source=self.name,
                returncode=e.returncode,
                stderr=(e.stderr or "").strip(),
            )
            raise SourceError(f"git failed for {self.repo_url}: {e.stderr}") from e
        except subprocess.TimeoutExpired as e:
            raise SourceError(f"git timed out for {self.repo_url}") from e
