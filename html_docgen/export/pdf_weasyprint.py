"""
html_docgen.export.pdf_weasyprint
=================================

Exportador HTML → PDF usando WeasyPrint.

Tier opcional para PDF: no está en la lista por defecto, se habilita con
`PDF_RENDERERS=browser,pandoc,weasyprint`. Sirve en servidores sin Chromium
ni LaTeX, porque WeasyPrint renderiza HTML+CSS en proceso.

- Los recursos relativos (`media/...`) se resuelven con `base_url` apuntando
  al directorio del documento.
- Se aplican los mismos estilos de impresión por defecto que en el tier de
  browser.

Requisitos
----------
- weasyprint instalado en el entorno: `pip install weasyprint`
- Librerías de sistema de Pango (ver docs de WeasyPrint).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from ..domain_models import Document
from ..errors import RendererUnavailableError, RenderFailureError
from .print_styles import inject_default_print_styles

if TYPE_CHECKING:
    from ..document_service import DocumentService


@dataclass
class WeasyprintRenderer:
    """
    Tier de PDF basado en WeasyPrint (HTML → PDF nativo).

    Atributos
    ---------
    name:
        Identificador del renderer.
    """

    name: str = "weasyprint"

    def attempt(
        self,
        doc: Document,
        output_path: Path,
        service: "DocumentService",
    ) -> None:
        """
        Genera el PDF del documento con WeasyPrint.

        Raises
        ------
        RendererUnavailableError
            Si WeasyPrint (o sus librerías de sistema) no están instalados.
        RenderFailureError
            Si WeasyPrint falla al generar el PDF.
        """
        try:
            from weasyprint import HTML
        except (ImportError, OSError) as e:
            raise RendererUnavailableError(
                f"WeasyPrint no está disponible. Ejecutá: pip install weasyprint ({e})",
                document_id=doc.id,
            ) from e

        output_path = Path(output_path)
        full_html = _wrap_html(inject_default_print_styles(doc.html_content))
        base_url = str(service.get_document_path(doc.id).resolve())

        try:
            HTML(string=full_html, base_url=base_url).write_pdf(str(output_path))
        except Exception as e:
            raise RenderFailureError(
                f"WeasyPrint falló al generar el PDF: {e}",
                document_id=doc.id,
            ) from e

        if not output_path.is_file() or output_path.stat().st_size == 0:
            raise RenderFailureError("WeasyPrint no generó output", document_id=doc.id)


def _wrap_html(html_content: str) -> str:
    """
    Si el contenido no incluye <html>, lo envuelve en un documento completo.
    Esto garantiza que WeasyPrint tenga el contexto correcto para renderizar.
    """
    stripped = html_content.strip().lower()
    if "<html" in stripped or stripped.startswith("<!doctype"):
        return html_content
    return f"""<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
</head>
<body>
{html_content}
</body>
</html>"""
