"""
Abstracciones (Protocols) del core.

`DocumentService` y el pipeline de export sólo conocen estas interfaces, de
modo que el backend de storage (filesystem, memoria en tests) y los renderers
se pueden intercambiar sin tocar el resto.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, List, Protocol

from ..domain_models import Document, DocumentInfo

if TYPE_CHECKING:
    from ..document_service import DocumentService


class DocumentStorage(Protocol):
    """
    Capacidades de persistencia que necesita el servicio de documentos.

    La existencia de un documento se define por la presencia de su cuerpo
    HTML; cualquier implementación debe respetar esa regla.
    """

    def document_exists(self, document_id: str) -> bool:
        ...

    def create_document(self, doc: Document) -> None:
        """Materializa directorio, media/, index.html y metadata.json."""
        ...

    def update_document(self, doc: Document) -> None:
        """Reemplaza cuerpo y metadata. NotFoundError si no existe."""
        ...

    def get_document(self, document_id: str) -> Document:
        ...

    def list_documents(self) -> List[DocumentInfo]:
        """Lista resúmenes; entradas corruptas se omiten sin fallar."""
        ...

    def copy_media_file(self, document_id: str, source_path: str) -> str:
        """
        Copia un archivo a media/ con su nombre base.

        Returns:
            Ruta relativa al directorio del documento (`media/<archivo>`).
        """
        ...

    def delete_document(self, document_id: str) -> None:
        ...

    def get_document_path(self, document_id: str) -> Path:
        ...

    def get_html_path(self, document_id: str) -> Path:
        ...


class Renderer(Protocol):
    """
    Un tier de renderizado del pipeline de export.

    `attempt` escribe el artefacto en `output_path` o lanza una subclase de
    `RenderError`. El pipeline prueba los renderers en orden hasta que uno
    tenga éxito.
    """

    name: str

    def attempt(
        self,
        doc: Document,
        output_path: Path,
        service: "DocumentService",
    ) -> None:
        ...
