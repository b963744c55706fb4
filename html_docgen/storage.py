from __future__ import annotations

"""
html_docgen.storage
===================

Persistencia de documentos en disco.

Layout (estable, no cambiar):

    <root>/<id>/index.html      → cuerpo HTML
    <root>/<id>/metadata.json   → {"name", "created_at", "updated_at"}
    <root>/<id>/media/<archivo> → imágenes / videos copiados

Reglas
------
- Todas las rutas se derivan sólo de `root_dir` + `id`; no hay estado extra.
- Un documento "existe" si y sólo si existe su index.html. Un directorio sin
  index.html se trata como inexistente.
- No hay rollback: si `create_document` falla a mitad de camino puede quedar
  un directorio parcial.
- No hay locks: dos operaciones concurrentes sobre el mismo ID compiten
  (last-write-wins).

También se incluye `InMemoryStorage`, una implementación en memoria del mismo
protocolo para tests que no deben tocar el filesystem.
"""

import json
import logging
import os
import shutil
from dataclasses import replace
from pathlib import Path, PurePosixPath
from typing import Dict, List

from .domain_models import Document, DocumentInfo, DocumentMetadata
from .errors import NotFoundError, StorageIOError, ValidationError

logger = logging.getLogger(__name__)

HTML_FILENAME = "index.html"
METADATA_FILENAME = "metadata.json"
MEDIA_DIRNAME = "media"

DIR_MODE = 0o755
FILE_MODE = 0o644


def _check_path_component(value: str, what: str) -> str:
    # Un ID o nombre de archivo nunca puede salir de su directorio
    if not value or value in (".", "..") or "/" in value or "\\" in value or "\x00" in value:
        raise ValidationError(f"{what} inválido: {value!r}")
    return value


class FileSystemStorage:
    """
    Storage de documentos sobre el filesystem local.

    Parameters
    ----------
    root_dir:
        Directorio raíz donde vive un subdirectorio por documento. Se recibe
        explícito (no se lee del entorno) para mantener el storage testeable.
    """

    def __init__(self, root_dir: Path | str) -> None:
        self.root_dir = Path(root_dir)

    # ------------------------------------------------------------
    # Rutas
    # ------------------------------------------------------------

    def get_document_path(self, document_id: str) -> Path:
        return self.root_dir / _check_path_component(document_id, "ID de documento")

    def get_html_path(self, document_id: str) -> Path:
        return self.get_document_path(document_id) / HTML_FILENAME

    def get_metadata_path(self, document_id: str) -> Path:
        return self.get_document_path(document_id) / METADATA_FILENAME

    def get_media_dir(self, document_id: str) -> Path:
        return self.get_document_path(document_id) / MEDIA_DIRNAME

    # ------------------------------------------------------------
    # Operaciones
    # ------------------------------------------------------------

    def document_exists(self, document_id: str) -> bool:
        return self.get_html_path(document_id).is_file()

    def create_document(self, doc: Document) -> None:
        """
        Crea el directorio del documento, su carpeta media/, el index.html y
        el metadata.json.

        Raises
        ------
        StorageIOError
            Si falla cualquier operación de filesystem. Lo que ya se haya
            creado queda en disco.
        """
        try:
            self.get_document_path(doc.id).mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
            self.get_media_dir(doc.id).mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
        except OSError as e:
            raise StorageIOError(
                f"No se pudo crear el directorio del documento: {e}",
                operation="create_document",
                document_id=doc.id,
            ) from e

        self._write_html(doc, operation="create_document")
        self.write_metadata(doc.id, doc.to_metadata())

    def update_document(self, doc: Document) -> None:
        """Reemplaza index.html y metadata.json de un documento existente."""
        if not self.document_exists(doc.id):
            raise NotFoundError(
                f"El documento {doc.id} no existe",
                operation="update_document",
                document_id=doc.id,
            )
        self._write_html(doc, operation="update_document")
        self.write_metadata(doc.id, doc.to_metadata())

    def get_document(self, document_id: str) -> Document:
        if not self.document_exists(document_id):
            raise NotFoundError(
                f"El documento {document_id} no existe",
                operation="get_document",
                document_id=document_id,
            )

        try:
            html_content = self.get_html_path(document_id).read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StorageIOError(
                f"No se pudo leer el HTML: {e}",
                operation="get_document",
                document_id=document_id,
            ) from e

        metadata = self.read_metadata(document_id)
        return Document(
            id=document_id,
            name=metadata.name,
            html_content=html_content,
            created_at=metadata.created_at,
            updated_at=metadata.updated_at,
        )

    def write_metadata(self, document_id: str, metadata: DocumentMetadata) -> None:
        path = self.get_metadata_path(document_id)
        data = json.dumps(metadata.to_dict(), indent=2, ensure_ascii=False)
        try:
            path.write_text(data, encoding="utf-8")
            os.chmod(path, FILE_MODE)
        except OSError as e:
            raise StorageIOError(
                f"No se pudo escribir metadata.json: {e}",
                operation="write_metadata",
                document_id=document_id,
            ) from e

    def read_metadata(self, document_id: str) -> DocumentMetadata:
        path = self.get_metadata_path(document_id)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            return DocumentMetadata.from_dict(data)
        except (OSError, UnicodeDecodeError) as e:
            raise StorageIOError(
                f"No se pudo leer metadata.json: {e}",
                operation="read_metadata",
                document_id=document_id,
            ) from e
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            raise StorageIOError(
                f"metadata.json mal formado: {e}",
                operation="read_metadata",
                document_id=document_id,
            ) from e

    def list_documents(self) -> List[DocumentInfo]:
        """
        Enumera los documentos del root.

        Directorios sin index.html o con metadata ilegible se omiten: un
        documento corrupto no rompe el listado completo.
        """
        try:
            entries = sorted(self.root_dir.iterdir())
        except OSError as e:
            raise StorageIOError(
                f"No se pudo leer el directorio raíz {self.root_dir}: {e}",
                operation="list_documents",
            ) from e

        docs: List[DocumentInfo] = []
        for entry in entries:
            if not entry.is_dir():
                continue

            document_id = entry.name
            if not (entry / HTML_FILENAME).is_file():
                continue

            try:
                metadata = self.read_metadata(document_id)
            except StorageIOError as e:
                logger.debug(f"Se omite {document_id} del listado: {e}")
                continue

            docs.append(
                DocumentInfo(
                    id=document_id,
                    name=metadata.name,
                    created_at=metadata.created_at,
                    updated_at=metadata.updated_at,
                    file_path=str(PurePosixPath(document_id) / HTML_FILENAME),
                )
            )

        return docs

    def copy_media_file(self, document_id: str, source_path: str) -> str:
        """
        Copia un archivo de media al directorio media/ del documento.

        Sólo se usa el nombre base de `source_path` como destino, nunca la
        ruta completa. Si ya existe un archivo con ese nombre se sobrescribe.

        Returns
        -------
        str
            Ruta relativa al directorio del documento, ej: "media/foto.png".
        """
        if not self.document_exists(document_id):
            raise NotFoundError(
                f"El documento {document_id} no existe",
                operation="copy_media_file",
                document_id=document_id,
            )

        src = Path(source_path)
        filename = _check_path_component(src.name, "Nombre de archivo")
        if not src.is_file():
            raise StorageIOError(
                f"No existe el archivo de media: {src}",
                operation="copy_media_file",
                document_id=document_id,
            )

        media_dir = self.get_media_dir(document_id)
        try:
            media_dir.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
            shutil.copyfile(src, media_dir / filename)
        except OSError as e:
            raise StorageIOError(
                f"No se pudo copiar {src} a media/: {e}",
                operation="copy_media_file",
                document_id=document_id,
            ) from e

        return f"{MEDIA_DIRNAME}/{filename}"

    def delete_document(self, document_id: str) -> None:
        """Borra el directorio completo del documento (incluye media/)."""
        if not self.document_exists(document_id):
            raise NotFoundError(
                f"El documento {document_id} no existe",
                operation="delete_document",
                document_id=document_id,
            )
        try:
            shutil.rmtree(self.get_document_path(document_id))
        except OSError as e:
            raise StorageIOError(
                f"No se pudo borrar el directorio del documento: {e}",
                operation="delete_document",
                document_id=document_id,
            ) from e

    # ------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------

    def _write_html(self, doc: Document, operation: str) -> None:
        path = self.get_html_path(doc.id)
        try:
            path.write_bytes(doc.html_content.encode("utf-8"))
            os.chmod(path, FILE_MODE)
        except OSError as e:
            raise StorageIOError(
                f"No se pudo escribir index.html: {e}",
                operation=operation,
                document_id=doc.id,
            ) from e


class InMemoryStorage:
    """
    Storage en memoria con la misma semántica que `FileSystemStorage`.

    Las rutas se derivan de un `root_dir` ficticio pero nunca se tocan.
    El contenido de media se guarda como bytes leídos del archivo fuente.
    """

    def __init__(self, root_dir: Path | str = "/memory") -> None:
        self.root_dir = Path(root_dir)
        self._docs: Dict[str, Document] = {}
        self.media: Dict[str, Dict[str, bytes]] = {}

    def get_document_path(self, document_id: str) -> Path:
        return self.root_dir / _check_path_component(document_id, "ID de documento")

    def get_html_path(self, document_id: str) -> Path:
        return self.get_document_path(document_id) / HTML_FILENAME

    def document_exists(self, document_id: str) -> bool:
        return document_id in self._docs

    def create_document(self, doc: Document) -> None:
        self._docs[doc.id] = replace(doc)
        self.media.setdefault(doc.id, {})

    def update_document(self, doc: Document) -> None:
        self._require(doc.id, "update_document")
        self._docs[doc.id] = replace(doc)

    def get_document(self, document_id: str) -> Document:
        self._require(document_id, "get_document")
        return replace(self._docs[document_id])

    def list_documents(self) -> List[DocumentInfo]:
        return [
            DocumentInfo(
                id=doc.id,
                name=doc.name,
                created_at=doc.created_at,
                updated_at=doc.updated_at,
                file_path=f"{doc.id}/{HTML_FILENAME}",
            )
            for doc in sorted(self._docs.values(), key=lambda d: d.id)
        ]

    def copy_media_file(self, document_id: str, source_path: str) -> str:
        self._require(document_id, "copy_media_file")
        src = Path(source_path)
        filename = _check_path_component(src.name, "Nombre de archivo")
        try:
            self.media[document_id][filename] = src.read_bytes()
        except OSError as e:
            raise StorageIOError(
                f"No se pudo leer {src}: {e}",
                operation="copy_media_file",
                document_id=document_id,
            ) from e
        return f"{MEDIA_DIRNAME}/{filename}"

    def delete_document(self, document_id: str) -> None:
        self._require(document_id, "delete_document")
        del self._docs[document_id]
        self.media.pop(document_id, None)

    def _require(self, document_id: str, operation: str) -> None:
        if document_id not in self._docs:
            raise NotFoundError(
                f"El documento {document_id} no existe",
                operation=operation,
                document_id=document_id,
            )
