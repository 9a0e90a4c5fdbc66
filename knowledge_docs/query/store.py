from typing import Dict, List, Optional

from knowledge_docs.shared.models import Document


class DocumentStore:
    """In-memory documents keyed by id; re-adding an id replaces it."""

    def __init__(self):
        self._documents: Dict[str, Document] = {}

    def add(self, document: Document) -> None:
        self._documents[document.id] = document

    def get(self, document_id: str) -> Optional[Document]:
        return self._documents.get(document_id)

    def remove(self, document_id: str) -> bool:
        return self._documents.pop(document_id, None) is not None

    def all(self) -> List[Document]:
        return list(self._documents.values())

    def clear(self) -> None:
        self._documents.clear()

    def __len__(self) -> int:
        return len(self._documents)

    def __contains__(self, document_id: str) -> bool:
        return document_id in self._documents
