"""
Dependencias de FastAPI.

Proveen el `DocumentService` y el `Exporter` a las rutas. Se resuelven una
sola vez a partir de `get_settings()`; los tests las reemplazan con
`app.dependency_overrides`.
"""

import logging
from functools import lru_cache

from fastapi import HTTPException

from html_docgen.config import build_exporter, build_service, get_settings
from html_docgen.document_service import DocumentService
from html_docgen.errors import (
    DocGenError,
    NotFoundError,
    RendererUnavailableError,
    RenderTimeoutError,
    ValidationError,
)
from html_docgen.export import Exporter

logger = logging.getLogger(__name__)


@lru_cache
def get_document_service() -> DocumentService:
    return build_service(get_settings())


@lru_cache
def get_exporter() -> Exporter:
    return build_exporter(get_settings())


def to_http_exception(error: DocGenError) -> HTTPException:
    """
    Traduce un error del core a un HTTPException.

    - ValidationError          → 400
    - NotFoundError            → 404
    - RendererUnavailableError → 503
    - RenderTimeoutError       → 504
    - resto                    → 500
    """
    if isinstance(error, ValidationError):
        status_code = 400
    elif isinstance(error, NotFoundError):
        status_code = 404
    elif isinstance(error, RendererUnavailableError):
        status_code = 503
    elif isinstance(error, RenderTimeoutError):
        status_code = 504
    else:
        status_code = 500

    if status_code >= 500:
        logger.error(f"Error {status_code}: {error}")
    return HTTPException(status_code=status_code, detail=str(error))
