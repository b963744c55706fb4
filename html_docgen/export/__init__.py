from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..document_service import DocumentService
from .pandoc import PandocRenderer, pandoc_available
from .pdf_browser import BrowserPdfRenderer
from .pdf_weasyprint import WeasyprintRenderer
from .pipeline import Exporter
from .print_styles import inject_default_print_styles


def export_document(
    document_id: str,
    format: str,
    service: DocumentService,
    output_path: Optional[Path | str] = None,
) -> Path:
    exporter = Exporter()
    return exporter.export_document(document_id, format, service, output_path=output_path)


__all__ = [
    "BrowserPdfRenderer",
    "Exporter",
    "PandocRenderer",
    "WeasyprintRenderer",
    "export_document",
    "inject_default_print_styles",
    "pandoc_available",
]
