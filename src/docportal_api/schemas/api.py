from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class DocumentCreate(BaseModel):
    filename: str
    filepath: str
    filesize: int = Field(..., ge=0)


class Document(DocumentCreate):
    model_config = ConfigDict(frozen=True)

    id: str
    created_at: datetime


class DocumentListResponse(BaseModel):
    documents: list[Document]


class UploadResponse(BaseModel):
    message: str
    document: Document


class DeleteResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str
    code: str
    details: dict[str, Any] | None = None
    request_id: str
