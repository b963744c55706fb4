from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional

from ..domain_models import Document
from ..errors import RendererUnavailableError, RenderFailureError, RenderTimeoutError
from .process import run_bounded, temporary_html

if TYPE_CHECKING:
    from ..document_service import DocumentService

"""
html_docgen.export.pandoc
=========================

Conversor HTML → PDF / DOCX usando Pandoc.

Se usa como:
- único tier para DOCX (Pandoc lo genera nativamente)
- fallback para PDF cuando el browser headless no está disponible o falla

Detalles
--------
- **Resolución de rutas relativas** (`media/...`): Pandoc corre con
  `cwd=<directorio del documento>` y el HTML temporal vive en ese mismo
  directorio.
- **HTML sin modificar**: a diferencia del tier de browser, acá no se
  inyectan estilos de impresión.
- **Errores explicativos**: diferencia entre "pandoc no está instalado"
  (RendererUnavailableError) y "pandoc falló al convertir"
  (RenderFailureError con STDERR).

Requisitos
----------
- Pandoc instalado y en PATH:
  - macOS: `brew install pandoc`
  - Debian/Ubuntu: `apt install pandoc`
- Para PDF, un engine LaTeX: `xelatex` (TeX Live / MacTeX), elegido por su
  soporte de Unicode.
"""

PANDOC_BIN = "pandoc"


def check_pandoc(binary: str = PANDOC_BIN, timeout: float = 10.0) -> None:
    """
    Verifica que Pandoc se pueda ejecutar (`pandoc --version`).

    Raises
    ------
    RendererUnavailableError
        Si el binario no existe, falla o no responde.
    """
    try:
        run_bounded([binary, "--version"], timeout=timeout)
    except (RenderFailureError, RenderTimeoutError) as e:
        raise RendererUnavailableError(
            "No se encontró 'pandoc' funcional en el PATH. Instalalo para habilitar export PDF/DOCX."
        ) from e
    except RendererUnavailableError as e:
        raise RendererUnavailableError(
            "No se encontró 'pandoc' en el PATH. Instalalo para habilitar export PDF/DOCX."
        ) from e


def pandoc_available(binary: str = PANDOC_BIN) -> bool:
    """True si Pandoc está disponible (para chequeos desde terminal/health)."""
    try:
        check_pandoc(binary)
    except RendererUnavailableError:
        return False
    return True


@dataclass
class PandocRenderer:
    """
    Tier de conversión basado en Pandoc.

    Attributes
    ----------
    name:
        Identificador del renderer (aparece en logs y diagnósticos).
    pdf_engine:
        Engine para PDF (`--pdf-engine=...`). `None` para DOCX.
    timeout:
        Segundos máximos de la conversión; al vencer se mata el proceso.
    binary:
        Ejecutable de Pandoc.
    """

    name: str = "pandoc"
    pdf_engine: Optional[str] = None
    timeout: float = 30.0
    binary: str = PANDOC_BIN

    def build_command(self, input_path: Path, output_path: Path) -> List[str]:
        cmd = [
            self.binary,
            "-f",
            "html",
            "-o",
            str(output_path),
        ]
        if self.pdf_engine:
            cmd.append(f"--pdf-engine={self.pdf_engine}")
        cmd.append(str(input_path))
        return cmd

    def attempt(
        self,
        doc: Document,
        output_path: Path,
        service: "DocumentService",
    ) -> None:
        """
        Convierte el documento con Pandoc y escribe `output_path`.

        Raises
        ------
        RendererUnavailableError
            Si Pandoc no está instalado (no se intenta convertir).
        RenderTimeoutError
            Si la conversión supera `timeout`.
        RenderFailureError
            Si Pandoc termina con error (mensaje con STDERR) o no deja output.
        """
        check_pandoc(self.binary)

        doc_dir = service.get_document_path(doc.id).resolve()
        output_path = Path(output_path).resolve()

        with temporary_html(doc_dir, doc.html_content) as tmp_html:
            run_bounded(
                self.build_command(tmp_html, output_path),
                cwd=doc_dir,
                timeout=self.timeout,
            )

        if not output_path.is_file() or output_path.stat().st_size == 0:
            raise RenderFailureError(
                f"Pandoc no generó output en {output_path}",
                document_id=doc.id,
            )
