from __future__ import annotations

import logging
import time
from urllib.parse import quote

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from starlette.datastructures import UploadFile

from docportal_api.core.errors import APIError, DocumentNotFound, StoreError, ValidationFailed
from docportal_api.schemas.api import (
    DeleteResponse,
    DocumentCreate,
    DocumentListResponse,
    ErrorResponse,
    UploadResponse,
)
from docportal_api.services.document_store import DocumentStore, get_document_store
from docportal_api.settings import get_settings

router = APIRouter(
    prefix="/documents",
    tags=["documents"],
    responses={500: {"model": ErrorResponse}},
)
logger = logging.getLogger(__name__)


def _storage_path(filename: str) -> str:
    # Millisecond prefix only; two same-named uploads in one ms share a path.
    prefix = get_settings().DOCPORTAL_UPLOAD_PREFIX.strip("/")
    return f"{prefix}/{int(time.time() * 1000)}-{filename}"


def _format_limit(max_bytes: int) -> str:
    mib = 1024 * 1024
    if max_bytes % mib == 0:
        return f"{max_bytes // mib}MB"
    return f"{max_bytes} bytes"


def _quoted(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def _content_disposition(filename: str) -> str:
    try:
        filename.encode("latin-1")
    except UnicodeEncodeError:
        fallback = _quoted(filename.encode("ascii", "replace").decode("ascii"))
        return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"
    return f'attachment; filename="{_quoted(filename)}"'


@router.get("", response_model=DocumentListResponse)
def list_documents(store: DocumentStore = Depends(get_document_store)) -> DocumentListResponse:
    try:
        documents = store.list_all()
    except Exception as exc:
        logger.exception("List documents failed")
        raise StoreError(code="list_failed", message="Failed to retrieve documents") from exc
    return DocumentListResponse(documents=documents)


def _check_size(size: int, max_bytes: int) -> None:
    if size > max_bytes:
        raise ValidationFailed(
            code="file_too_large",
            message=f"File size must be less than {_format_limit(max_bytes)}",
            details={"filesize": size, "max_bytes": max_bytes},
        )


def _unsupported_type(content_type: str | None) -> ValidationFailed:
    return ValidationFailed(
        code="unsupported_type",
        message="Only PDF files are allowed",
        details={"content_type": content_type},
    )


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={400: {"model": ErrorResponse}},
)
async def upload_document(
    request: Request,
    store: DocumentStore = Depends(get_document_store),
) -> UploadResponse:
    # The form is read directly so a "file" field that is not a file part
    # gets a 400 here instead of a 422 from parameter validation.
    async with request.form() as form:
        return await _store_upload(form.get("file"), store)


async def _store_upload(file: UploadFile | str | None, store: DocumentStore) -> UploadResponse:
    settings = get_settings()
    if file is None or file == "" or (isinstance(file, UploadFile) and not file.filename):
        logger.info("Upload rejected: no file provided")
        raise ValidationFailed(code="missing_file", message="No file provided")
    if not isinstance(file, UploadFile):
        logger.info("Upload rejected: file field is not a file part")
        raise _unsupported_type(None)

    filename = file.filename
    logger.info(
        "Upload received filename=%s content_type=%s size=%s",
        filename,
        file.content_type,
        file.size,
    )

    if file.content_type != settings.DOCPORTAL_ACCEPTED_CONTENT_TYPE:
        raise _unsupported_type(file.content_type)

    max_bytes = settings.DOCPORTAL_MAX_UPLOAD_BYTES
    if file.size is not None:
        _check_size(file.size, max_bytes)

    try:
        content = await file.read()
    except Exception as exc:
        logger.exception("Upload read failed filename=%s", filename)
        raise StoreError(code="upload_failed", message="Failed to upload file") from exc

    _check_size(len(content), max_bytes)

    try:
        document = store.create(
            DocumentCreate(
                filename=filename,
                filepath=_storage_path(filename),
                filesize=len(content),
            ),
            content,
        )
    except Exception as exc:
        logger.exception("Upload store failed filename=%s", filename)
        raise StoreError(code="upload_failed", message="Failed to upload file") from exc

    logger.info("Document created doc_id=%s size=%s", document.id, document.filesize)
    return UploadResponse(message="File uploaded successfully", document=document)


@router.get("/{doc_id}", responses={404: {"model": ErrorResponse}})
def download_document(doc_id: str, store: DocumentStore = Depends(get_document_store)) -> Response:
    try:
        document = store.find_by_id(doc_id)
        if document is None:
            raise DocumentNotFound(details={"doc_id": doc_id})
        content = store.get_content(doc_id)
        if content is None:
            logger.error("Document metadata without content doc_id=%s", doc_id)
            raise DocumentNotFound(message="File content not found", details={"doc_id": doc_id})
        return Response(
            content=content,
            media_type=get_settings().DOCPORTAL_ACCEPTED_CONTENT_TYPE,
            headers={
                "Content-Disposition": _content_disposition(document.filename),
                "Content-Length": str(len(content)),
            },
        )
    except APIError:
        raise
    except Exception as exc:
        logger.exception("Document download failed doc_id=%s", doc_id)
        raise StoreError(code="download_failed", message="Failed to download file") from exc


@router.delete(
    "/{doc_id}",
    response_model=DeleteResponse,
    responses={404: {"model": ErrorResponse}},
)
def delete_document(doc_id: str, store: DocumentStore = Depends(get_document_store)) -> DeleteResponse:
    try:
        if store.find_by_id(doc_id) is None:
            raise DocumentNotFound(details={"doc_id": doc_id})
        if not store.delete(doc_id):
            raise StoreError(
                code="delete_failed",
                message="Failed to delete document",
                details={"doc_id": doc_id},
            )
    except APIError:
        raise
    except Exception as exc:
        logger.exception("Document delete failed doc_id=%s", doc_id)
        raise StoreError(code="delete_failed", message="Failed to delete file") from exc

    logger.info("Document deleted doc_id=%s", doc_id)
    return DeleteResponse(message="Document deleted successfully")
