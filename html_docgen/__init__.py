"""
html_docgen
===========

Gestión de documentos HTML autocontenidos en disco y export a html/pdf/docx.

- idgen: IDs legibles `<slug>-<sufijo>`
- storage: layout en disco (index.html + metadata.json + media/)
- document_service: validación y orquestación
- export: pipeline de renderers (browser headless → Pandoc)
- tools / cli: capa de operaciones invocables por nombre y modo terminal
"""

from .document_service import DocumentService
from .domain_models import Document, DocumentInfo, DocumentMetadata
from .errors import (
    DocGenError,
    NotFoundError,
    RendererUnavailableError,
    RenderError,
    RenderFailureError,
    RenderTimeoutError,
    StorageIOError,
    ValidationError,
)
from .export import Exporter
from .storage import FileSystemStorage, InMemoryStorage

__all__ = [
    "DocGenError",
    "Document",
    "DocumentInfo",
    "DocumentMetadata",
    "DocumentService",
    "Exporter",
    "FileSystemStorage",
    "InMemoryStorage",
    "NotFoundError",
    "RenderError",
    "RenderFailureError",
    "RenderTimeoutError",
    "RendererUnavailableError",
    "StorageIOError",
    "ValidationError",
]
