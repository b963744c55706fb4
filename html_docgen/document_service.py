"""
html_docgen.document_service
============================

Capa de validación + orquestación sobre el storage.

El servicio no sabe nada del layout en disco: recibe cualquier objeto que
cumpla `DocumentStorage` (filesystem, memoria) y se limita a:

- validar inputs antes de cualquier IO (ValidationError)
- generar IDs y timestamps
- delegar la persistencia
- loguear los fallos con contexto y re-lanzarlos sin tragarlos
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import List

from .core.abstractions import DocumentStorage
from .domain_models import MEDIA_KINDS, Document, DocumentInfo
from .errors import DocGenError, ValidationError
from .idgen import generate_document_id, validate_document_id

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(UTC)


class DocumentService:
    """Operaciones sobre documentos HTML."""

    def __init__(self, storage: DocumentStorage) -> None:
        self.storage = storage

    def create_document(self, name: str, html_content: str) -> Document:
        """
        Crea un documento nuevo.

        Parameters
        ----------
        name:
            Nombre legible; se usa para derivar el ID.
        html_content:
            Cuerpo HTML completo.

        Returns
        -------
        Document
            El documento persistido, con `created_at == updated_at`.

        Raises
        ------
        ValidationError
            Si `name` o `html_content` están vacíos.
        StorageIOError
            Si falla la escritura en disco.
        """
        if not name:
            raise ValidationError("El nombre del documento no puede estar vacío", operation="create_document")
        if not html_content:
            raise ValidationError("El contenido HTML no puede estar vacío", operation="create_document")

        document_id = generate_document_id(name, self.storage.document_exists)
        now = _now()
        doc = Document(
            id=document_id,
            name=name,
            html_content=html_content,
            created_at=now,
            updated_at=now,
        )

        try:
            self.storage.create_document(doc)
        except DocGenError as e:
            logger.error(f"create_document falló para {document_id}: {e}")
            raise

        logger.info(f"Documento creado: {document_id} ({name})")
        return doc

    def update_document(self, document_id: str, html_content: str) -> Document:
        """
        Reemplaza el contenido HTML completo de un documento.

        Conserva `name` y `created_at`; refresca `updated_at`.
        """
        self._validate_id(document_id, "update_document")
        if not html_content:
            raise ValidationError(
                "El contenido HTML no puede estar vacío",
                operation="update_document",
                document_id=document_id,
            )

        try:
            doc = self.storage.get_document(document_id)
            doc.html_content = html_content
            # max(): relojes que retroceden no deben romper la monotonía
            doc.updated_at = max(_now(), doc.updated_at)
            self.storage.update_document(doc)
        except DocGenError as e:
            logger.error(f"update_document falló para {document_id}: {e}")
            raise

        logger.info(f"Documento actualizado: {document_id}")
        return doc

    def get_document(self, document_id: str) -> Document:
        self._validate_id(document_id, "get_document")
        return self.storage.get_document(document_id)

    def list_documents(self) -> List[DocumentInfo]:
        return self.storage.list_documents()

    def add_media(self, document_id: str, source_path: str, media_type: str) -> str:
        """
        Agrega una imagen o video al documento.

        Returns
        -------
        str
            Ruta relativa para referenciar desde el HTML (ej: "media/foto.png").
        """
        self._validate_id(document_id, "add_media")
        if not source_path:
            raise ValidationError(
                "La ruta del archivo de media no puede estar vacía",
                operation="add_media",
                document_id=document_id,
            )
        if media_type not in MEDIA_KINDS:
            raise ValidationError(
                f"Tipo de media inválido: {media_type} (debe ser 'image' o 'video')",
                operation="add_media",
                document_id=document_id,
            )

        try:
            relative_path = self.storage.copy_media_file(document_id, source_path)
        except DocGenError as e:
            logger.error(f"add_media falló para {document_id}: {e}")
            raise

        logger.info(f"Media agregada a {document_id}: {relative_path} ({media_type})")
        return relative_path

    def delete_document(self, document_id: str) -> None:
        self._validate_id(document_id, "delete_document")
        try:
            self.storage.delete_document(document_id)
        except DocGenError as e:
            logger.error(f"delete_document falló para {document_id}: {e}")
            raise
        logger.info(f"Documento borrado: {document_id}")

    def get_document_path(self, document_id: str) -> Path:
        return self.storage.get_document_path(document_id)

    def get_html_path(self, document_id: str) -> Path:
        return self.storage.get_html_path(document_id)

    @staticmethod
    def _validate_id(document_id: str, operation: str) -> None:
        if not validate_document_id(document_id):
            raise ValidationError(
                f"ID de documento inválido: {document_id}",
                operation=operation,
                document_id=document_id or None,
            )
