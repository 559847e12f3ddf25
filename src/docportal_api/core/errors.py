from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class APIError(Exception):
    status_code: int
    code: str
    message: str
    details: dict[str, Any] | None = None


class ValidationFailed(APIError):
    def __init__(self, code: str, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(status_code=400, code=code, message=message, details=details)


class DocumentNotFound(APIError):
    def __init__(self, message: str = "Document not found", details: dict[str, Any] | None = None) -> None:
        super().__init__(status_code=404, code="not_found", message=message, details=details)


class StoreError(APIError):
    def __init__(self, code: str, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(status_code=500, code=code, message=message, details=details)
