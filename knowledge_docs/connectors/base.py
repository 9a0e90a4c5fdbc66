"""
Base class for documentation sources.
A source connects to where documentation lives and hands over Document records.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from knowledge_docs.shared.config import SourceConfig
from knowledge_docs.shared.models import Document


class SourceError(RuntimeError):
    """Raised when a documentation source cannot be reached or is misused."""


class DocumentSource(ABC):
    def __init__(self, config: SourceConfig, description: str = ""):
        self.config = config
        self.name = config.name
        self.description = description
        self.connected = False

    @abstractmethod
    def connect(self) -> None:
        """Prepare the source; raises SourceError when it is unavailable."""

    @abstractmethod
    def disconnect(self) -> None:
        ...

    @abstractmethod
    def fetch_documents(self) -> List[Document]:
        ...

    @abstractmethod
    def fetch_document(self, document_id: str) -> Optional[Document]:
        ...

    @abstractmethod
    def get_document_count(self) -> int:
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, connected={self.connected})"
