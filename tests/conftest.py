from __future__ import annotations

from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from docportal_api.main import app
from docportal_api.services.document_store import DocumentStore, get_document_store
from docportal_api.settings import get_settings
from tests.pdf_factory import make_contract_pdf_bytes


@pytest.fixture()
def store() -> DocumentStore:
    return DocumentStore()


@pytest.fixture()
def client(store: DocumentStore) -> Iterator[TestClient]:
    get_settings.cache_clear()
    app.dependency_overrides[get_document_store] = lambda: store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        get_settings.cache_clear()


@pytest.fixture()
def upload_pdf(client: TestClient):
    def _upload(
        data: bytes | None = None,
        filename: str = "contract.pdf",
        content_type: str = "application/pdf",
    ):
        payload = make_contract_pdf_bytes() if data is None else data
        return client.post(
            "/documents/upload",
            files={"file": (filename, payload, content_type)},
        )

    return _upload
