"""
html_docgen.export.pipeline
===========================

Pipeline de export: documento → archivo html / pdf / docx.

Formatos
--------
- html: copia literal del cuerpo al path de salida (sin procesos externos).
- pdf:  lista ordenada de renderers; se prueba uno por uno hasta que alguno
        tenga éxito. Por defecto: browser headless → Pandoc (xelatex).
- docx: sólo Pandoc.

Si todos los renderers fallan se lanza el error del último, con los fallos
anteriores en `error.attempts` para diagnóstico.

Agregar un tier nuevo es sólo sumar un objeto con `name` y `attempt(...)` a
la lista (ver `core.abstractions.Renderer`).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from ..core.abstractions import Renderer
from ..document_service import DocumentService
from ..domain_models import EXPORT_FORMATS, Document
from ..errors import DocGenError, RenderError, StorageIOError, ValidationError
from .pandoc import PandocRenderer
from .pdf_browser import BrowserPdfRenderer
from .pdf_weasyprint import WeasyprintRenderer

logger = logging.getLogger(__name__)

DEFAULT_PDF_RENDERERS = ("browser", "pandoc")
PDF_ENGINE = "xelatex"


class Exporter:
    """
    Exporta documentos a los formatos soportados.

    Parameters
    ----------
    browser_timeout:
        Presupuesto (segundos) del tier de browser.
    pandoc_timeout:
        Timeout (segundos) de cada conversión con Pandoc.
    pdf_renderers:
        Nombres de los tiers de PDF en orden de preferencia
        ("browser", "pandoc", "weasyprint"), o directamente objetos renderer.
    chrome_path:
        Ejecutable de Chrome/Chromium explícito para el tier de browser.
    """

    def __init__(
        self,
        browser_timeout: float = 30.0,
        pandoc_timeout: float = 30.0,
        pdf_renderers: Optional[Sequence[str | Renderer]] = None,
        chrome_path: Optional[str] = None,
    ) -> None:
        self.browser_timeout = browser_timeout
        self.pandoc_timeout = pandoc_timeout
        self.chrome_path = chrome_path

        names_or_renderers = pdf_renderers if pdf_renderers is not None else DEFAULT_PDF_RENDERERS
        self.pdf_renderers: List[Renderer] = [self._resolve_renderer(r) for r in names_or_renderers]
        if not self.pdf_renderers:
            raise ValidationError("Se necesita al menos un renderer de PDF")

        self.docx_renderers: List[Renderer] = [
            PandocRenderer(name="pandoc-docx", timeout=pandoc_timeout),
        ]

    def _resolve_renderer(self, renderer: str | Renderer) -> Renderer:
        if not isinstance(renderer, str):
            return renderer

        factories: Dict[str, Renderer] = {
            "browser": BrowserPdfRenderer(timeout=self.browser_timeout, chrome_path=self.chrome_path),
            "pandoc": PandocRenderer(name="pandoc", pdf_engine=PDF_ENGINE, timeout=self.pandoc_timeout),
            "weasyprint": WeasyprintRenderer(),
        }
        key = renderer.strip().lower()
        if key not in factories:
            raise ValidationError(
                f"Renderer de PDF desconocido: {renderer} (opciones: {', '.join(factories)})"
            )
        return factories[key]

    def export_document(
        self,
        document_id: str,
        format: str,
        service: DocumentService,
        output_path: Optional[Path | str] = None,
    ) -> Path:
        """
        Exporta un documento.

        Parameters
        ----------
        document_id:
            ID del documento.
        format:
            "html", "pdf" o "docx".
        service:
            Servicio de documentos (lectura y resolución de rutas).
        output_path:
            Ruta de salida. Si es None: `<dir del documento>/<id>.<format>`.
            Si se indica, se crean los directorios padre necesarios.

        Returns
        -------
        Path
            Ruta del archivo generado.

        Raises
        ------
        ValidationError
            Formato no soportado (antes de cualquier IO) o ID inválido.
        NotFoundError
            El documento no existe.
        RenderError
            Todos los renderers del formato fallaron.
        """
        if format not in EXPORT_FORMATS:
            raise ValidationError(
                f"Formato no soportado: {format} (debe ser html, pdf o docx)",
                operation="export_document",
                document_id=document_id,
            )

        doc = service.get_document(document_id)

        if output_path:
            out = Path(output_path)
            try:
                out.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise StorageIOError(
                    f"No se pudo crear el directorio de salida: {e}",
                    operation="export_document",
                    document_id=document_id,
                ) from e
        else:
            out = service.get_document_path(document_id) / f"{document_id}.{format}"

        if format == "html":
            self._export_html(doc, out)
        elif format == "pdf":
            self._run_tiers(doc, out, service, self.pdf_renderers, format)
        else:
            self._run_tiers(doc, out, service, self.docx_renderers, format)

        logger.info(f"📄 {document_id} exportado a {format}: {out}")
        return out

    def _export_html(self, doc: Document, out: Path) -> None:
        try:
            out.write_bytes(doc.html_content.encode("utf-8"))
        except OSError as e:
            raise StorageIOError(
                f"No se pudo escribir el HTML exportado: {e}",
                operation="export_document",
                document_id=doc.id,
            ) from e

    def _run_tiers(
        self,
        doc: Document,
        out: Path,
        service: DocumentService,
        renderers: Sequence[Renderer],
        format: str,
    ) -> None:
        failures: List[Tuple[str, DocGenError]] = []

        for renderer in renderers:
            try:
                renderer.attempt(doc, out, service)
                if failures:
                    logger.info(f"{doc.id}: {format} generado con '{renderer.name}' tras fallback")
                return
            except (RenderError, StorageIOError) as e:
                if e.document_id is None:
                    e.document_id = doc.id
                if e.operation is None:
                    e.operation = f"export_{format}:{renderer.name}"
                logger.warning(f"⚠️ Renderer '{renderer.name}' falló para {doc.id}: {e}")
                failures.append((renderer.name, e))

        _, last_error = failures[-1]
        last_error.attempts = failures[:-1]
        logger.error(f"Export {format} de {doc.id}: fallaron todos los renderers ({len(failures)})")
        raise last_error
