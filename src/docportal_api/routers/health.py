from __future__ import annotations

from fastapi import APIRouter, Depends

from docportal_api.services.document_store import DocumentStore, get_document_store
from docportal_api.settings import get_settings

router = APIRouter()


@router.get("/health")
def health(store: DocumentStore = Depends(get_document_store)) -> dict[str, str | int]:
    settings = get_settings()
    return {
        "status": "ok",
        "build_version": settings.DOCPORTAL_BUILD_VERSION or "dev",
        "document_count": store.count(),
        "max_upload_bytes": settings.DOCPORTAL_MAX_UPLOAD_BYTES,
    }
