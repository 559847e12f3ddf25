from __future__ import annotations

import base64
import itertools
import logging
import threading
from datetime import datetime, timezone
from functools import lru_cache
from typing import Callable
from uuid import uuid4

from docportal_api.schemas.api import Document, DocumentCreate

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid4())


class DocumentStore:
    """In-memory document store.

    Metadata and content live in two dicts sharing one key space, so listing
    never touches file bytes. Content is kept base64-encoded. Every access to
    the pair goes through ``_lock``; readers never see a document with
    metadata but no content or the reverse.
    """

    def __init__(
        self,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self._clock = clock
        self._id_factory = id_factory
        self._lock = threading.Lock()
        self._documents: dict[str, Document] = {}
        self._contents: dict[str, str] = {}
        self._sequence: dict[str, int] = {}
        self._counter = itertools.count()
        self._issued_ids: set[str] = set()

    def _next_id(self) -> str:
        doc_id = self._id_factory()
        while doc_id in self._issued_ids:
            logger.warning("Document id collision, drawing a new id", extra={"doc_id": doc_id})
            doc_id = self._id_factory()
        self._issued_ids.add(doc_id)
        return doc_id

    def create(self, data: DocumentCreate, content: bytes) -> Document:
        encoded = base64.b64encode(content).decode("ascii")
        with self._lock:
            doc_id = self._next_id()
            document = Document(id=doc_id, created_at=self._clock(), **data.model_dump())
            self._documents[doc_id] = document
            self._contents[doc_id] = encoded
            self._sequence[doc_id] = next(self._counter)
        return document

    def list_all(self) -> list[Document]:
        with self._lock:
            documents = list(self._documents.values())
            sequence = dict(self._sequence)
        return sorted(
            documents,
            key=lambda doc: (doc.created_at, sequence[doc.id]),
            reverse=True,
        )

    def find_by_id(self, doc_id: str) -> Document | None:
        with self._lock:
            return self._documents.get(doc_id)

    def delete(self, doc_id: str) -> bool:
        with self._lock:
            self._contents.pop(doc_id, None)
            self._sequence.pop(doc_id, None)
            return self._documents.pop(doc_id, None) is not None

    def get_content(self, doc_id: str) -> bytes | None:
        with self._lock:
            encoded = self._contents.get(doc_id)
        if encoded is None:
            return None
        return base64.b64decode(encoded)

    def count(self) -> int:
        with self._lock:
            return len(self._documents)

    def __len__(self) -> int:
        return self.count()


@lru_cache
def get_document_store() -> DocumentStore:
    return DocumentStore()
