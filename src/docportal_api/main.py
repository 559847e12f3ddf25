from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from docportal_api.core.errors import APIError
from docportal_api.core.request_context import REQUEST_ID_HEADER, RequestIdMiddleware, get_request_id
from docportal_api.routers.documents import router as documents_router
from docportal_api.routers.health import router as health_router
from docportal_api.settings import get_settings

logging.basicConfig(level=get_settings().LOG_LEVEL.upper())
logger = logging.getLogger("docportal_api")

LOCAL_WEB_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]


def _cors_origins() -> list[str]:
    settings = get_settings()
    if settings.WEB_ORIGIN:
        return [origin.strip() for origin in settings.WEB_ORIGIN.split(",") if origin.strip()]
    if settings.DOCPORTAL_ENV.lower() == "production":
        return []
    return list(LOCAL_WEB_ORIGINS)


def _error_response(
    request: Request,
    status_code: int,
    message: str,
    code: str,
    details: Any = None,
) -> JSONResponse:
    """Build the ``{error, code, details, request_id}`` body shared by every failure.

    The request id is also set as a response header. Responses built for the
    catch-all handler never pass back through ``RequestIdMiddleware``.
    """
    request_id = get_request_id(request)
    return JSONResponse(
        status_code=status_code,
        content={
            "error": message,
            "code": code,
            "details": details,
            "request_id": request_id,
        },
        headers={REQUEST_ID_HEADER: request_id},
    )


def _jsonable_errors(exc: RequestValidationError) -> list[dict]:
    # Upload errors can carry raw bytes in "input".
    errors = [{key: value for key, value in error.items() if key != "input"} for error in exc.errors()]
    return jsonable_encoder(errors)


app = FastAPI(title="Document Portal API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestIdMiddleware)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        "Unhandled exception on %s %s request_id=%s",
        request.method,
        request.url.path,
        get_request_id(request),
        exc_info=exc,
    )
    return _error_response(
        request,
        500,
        "Internal server error",
        "internal_error",
        {"path": request.url.path},
    )


@app.exception_handler(APIError)
async def api_error_handler(request: Request, exc: APIError):
    level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    logger.log(
        level,
        "API error %s on %s %s code=%s",
        exc.status_code,
        request.method,
        request.url.path,
        exc.code,
    )
    return _error_response(request, exc.status_code, exc.message, exc.code, exc.details)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info("Invalid request payload on %s %s", request.method, request.url.path)
    return _error_response(
        request,
        422,
        "Invalid request payload",
        "validation_error",
        _jsonable_errors(exc),
    )


@app.on_event("startup")
async def log_startup_config() -> None:
    settings = get_settings()
    logger.info(
        "Document Portal API starting env=%s max_upload_bytes=%s accepted_content_type=%s",
        settings.DOCPORTAL_ENV,
        settings.DOCPORTAL_MAX_UPLOAD_BYTES,
        settings.DOCPORTAL_ACCEPTED_CONTENT_TYPE,
    )


app.include_router(health_router)
app.include_router(documents_router)
