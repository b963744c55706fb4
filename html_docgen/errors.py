"""
html_docgen.errors
==================

Jerarquía de excepciones del core.

Todas heredan de `DocGenError` y además de la excepción built-in que mejor
describe su semántica (`ValueError`, `LookupError`, `RuntimeError`), para que
el código que ya captura esas built-ins siga funcionando.

Taxonomía
---------
- ValidationError          → input inválido, se rechaza antes de tocar disco.
- NotFoundError            → el documento no existe (no hay index.html).
- StorageIOError           → falló una operación de filesystem.
- RendererUnavailableError → el renderer (browser/pandoc) no se pudo iniciar.
- RenderTimeoutError       → el renderer superó el timeout y fue terminado.
- RenderFailureError       → el renderer terminó con error o sin output.
"""

from __future__ import annotations

from typing import List, Optional, Tuple


class DocGenError(Exception):
    """
    Excepción base del core.

    Attributes
    ----------
    operation:
        Nombre lógico de la operación que falló (ej: "create_document").
    document_id:
        ID del documento involucrado, si aplica.
    """

    def __init__(
        self,
        message: str,
        *,
        operation: Optional[str] = None,
        document_id: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.document_id = document_id
        # Fallos previos cuando el pipeline de export agota sus renderers:
        # lista de (nombre_renderer, error)
        self.attempts: List[Tuple[str, "DocGenError"]] = []

    def __str__(self) -> str:
        context = []
        if self.operation:
            context.append(self.operation)
        if self.document_id:
            context.append(self.document_id)
        if not context:
            return self.message
        return f"[{' '.join(context)}] {self.message}"


class ValidationError(DocGenError, ValueError):
    """Input vacío, ID mal formado, formato o tipo de media no soportado."""


class NotFoundError(DocGenError, LookupError):
    """El documento pedido no existe."""


class StorageIOError(DocGenError, RuntimeError):
    """Falló una operación de filesystem (la causa queda encadenada)."""


class RenderError(DocGenError, RuntimeError):
    """Base de los errores de exportación."""


class RendererUnavailableError(RenderError):
    """El binario o proceso del renderer no está disponible."""


class RenderTimeoutError(RenderError):
    """El renderer superó el tiempo máximo y fue terminado."""

    def __init__(self, message: str, *, timeout: float, **kwargs) -> None:
        super().__init__(message, **kwargs)
        self.timeout = timeout


class RenderFailureError(RenderError):
    """El renderer terminó con código != 0 o no produjo output."""

    def __init__(self, message: str, *, stderr: str = "", **kwargs) -> None:
        super().__init__(message, **kwargs)
        self.stderr = stderr
