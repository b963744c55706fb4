"""
html_docgen.export.pdf_browser
==============================

Exportador HTML → PDF usando un Chromium headless (Playwright).

Es el tier preferido para PDF porque preserva el CSS del documento tal como
lo vería un browser. Flujo de un intento:

1) Inyectar estilos de impresión por defecto en una copia del HTML.
2) Escribir esa copia como `temp_export.html` en el directorio del documento
   (así `media/...` se resuelve igual que desde index.html).
3) Lanzar Chromium headless: primero un binario instalado en el sistema,
   si no, el browser administrado por Playwright.
4) Navegar a `file://...`, esperar `load` y pedir el PDF con fondos, márgenes
   de 0.4in y tamaño de página tomado del `@page` del documento.
5) Escribir los bytes en el path de salida.

Todo el intento comparte un único presupuesto de tiempo (`timeout`). Cualquier
error hace fallar el tier sin reintentos; el pipeline decide el fallback.

Requisitos
----------
- `pip install playwright`
- Un Chromium/Chrome en el sistema, o `playwright install chromium`.
"""

from __future__ import annotations

import logging
import os
import shutil
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Tuple

from ..domain_models import Document
from ..errors import RendererUnavailableError, RenderFailureError, RenderTimeoutError
from .print_styles import inject_default_print_styles
from .process import temporary_html

if TYPE_CHECKING:
    from ..document_service import DocumentService

logger = logging.getLogger(__name__)

PDF_MARGIN = "0.4in"

# Nombres habituales del ejecutable en Linux/macOS/Windows
CHROME_CANDIDATES: Tuple[str, ...] = (
    "chromium",
    "chromium-browser",
    "google-chrome",
    "google-chrome-stable",
    "chrome",
    "msedge",
)
CHROME_APP_PATHS: Tuple[str, ...] = (
    "/Applications/Google Chrome.app/Contents/MacOS/Google Chrome",
    "/Applications/Chromium.app/Contents/MacOS/Chromium",
)


def find_system_chrome(explicit_path: Optional[str] = None) -> Optional[str]:
    """
    Busca un Chrome/Chromium instalado.

    Orden: `explicit_path` (ej: settings.chrome_path), variable `CHROME_PATH`,
    ejecutables en PATH, rutas típicas de macOS. Devuelve `None` si no hay
    ninguno; en ese caso se usa el browser administrado por Playwright.
    """
    for candidate in (explicit_path, os.getenv("CHROME_PATH")):
        if candidate and Path(candidate).is_file():
            return candidate

    for name in CHROME_CANDIDATES:
        found = shutil.which(name)
        if found:
            return found

    for app_path in CHROME_APP_PATHS:
        if Path(app_path).is_file():
            return app_path

    return None


@dataclass
class BrowserPdfRenderer:
    """
    Tier de PDF basado en Chromium headless.

    Attributes
    ----------
    name:
        Identificador del renderer.
    timeout:
        Presupuesto total del intento, en segundos.
    chrome_path:
        Ejecutable a usar; si es None se busca con `find_system_chrome`.
    """

    name: str = "browser"
    timeout: float = 30.0
    chrome_path: Optional[str] = field(default=None)

    def attempt(
        self,
        doc: Document,
        output_path: Path,
        service: "DocumentService",
    ) -> None:
        """
        Renderiza el documento a PDF con Chromium.

        Raises
        ------
        RendererUnavailableError
            Playwright no instalado o el browser no se pudo lanzar.
        RenderTimeoutError
            Se agotó el presupuesto de tiempo.
        RenderFailureError
            Falló la carga de la página, la generación del PDF o la escritura.
        """
        try:
            from playwright.sync_api import Error as PlaywrightError
            from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
            from playwright.sync_api import sync_playwright
        except ImportError as e:
            raise RendererUnavailableError(
                "Playwright no está instalado. Ejecutá: pip install playwright"
            ) from e

        deadline = time.monotonic() + self.timeout

        def remaining_ms() -> float:
            left = deadline - time.monotonic()
            if left <= 0:
                raise RenderTimeoutError(
                    f"El render con browser superó el timeout de {self.timeout:g}s",
                    timeout=self.timeout,
                    document_id=doc.id,
                )
            return left * 1000

        html = inject_default_print_styles(doc.html_content)
        doc_dir = service.get_document_path(doc.id).resolve()
        executable = self.chrome_path or find_system_chrome()

        with temporary_html(doc_dir, html) as tmp_html:
            # start() también falla si se lo llama dentro de un event loop asyncio
            try:
                p = sync_playwright().start()
            except PlaywrightError as e:
                raise RendererUnavailableError(
                    f"No se pudo iniciar Playwright: {e}",
                    document_id=doc.id,
                ) from e

            try:
                try:
                    browser = p.chromium.launch(
                        headless=True,
                        executable_path=executable,
                        timeout=remaining_ms(),
                    )
                except PlaywrightTimeoutError as e:
                    raise RenderTimeoutError(
                        f"Chromium no arrancó dentro de {self.timeout:g}s",
                        timeout=self.timeout,
                        document_id=doc.id,
                    ) from e
                except PlaywrightError as e:
                    raise RendererUnavailableError(
                        f"Chrome/Chromium no disponible: {e}",
                        document_id=doc.id,
                    ) from e

                try:
                    page = browser.new_page()
                    page.set_default_timeout(remaining_ms())
                    page.goto(tmp_html.as_uri(), wait_until="load", timeout=remaining_ms())
                    pdf_bytes = page.pdf(
                        print_background=True,
                        margin={
                            "top": PDF_MARGIN,
                            "bottom": PDF_MARGIN,
                            "left": PDF_MARGIN,
                            "right": PDF_MARGIN,
                        },
                        prefer_css_page_size=True,
                    )
                    remaining_ms()
                except PlaywrightTimeoutError as e:
                    raise RenderTimeoutError(
                        f"El render con browser superó el timeout de {self.timeout:g}s",
                        timeout=self.timeout,
                        document_id=doc.id,
                    ) from e
                except PlaywrightError as e:
                    raise RenderFailureError(
                        f"Falló la generación del PDF con browser: {e}",
                        document_id=doc.id,
                    ) from e
                finally:
                    browser.close()
            finally:
                p.stop()

        if not pdf_bytes:
            raise RenderFailureError("El browser devolvió un PDF vacío", document_id=doc.id)

        try:
            Path(output_path).write_bytes(pdf_bytes)
        except OSError as e:
            raise RenderFailureError(
                f"No se pudo escribir el PDF: {e}",
                document_id=doc.id,
            ) from e

        logger.debug(f"PDF generado con browser ({executable or 'playwright'}): {output_path}")
