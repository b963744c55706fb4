"""
html_docgen.tools
=================

Capa "tool": expone las operaciones del core como herramientas invocables
por nombre con un dict de argumentos string, devolviendo siempre un payload
uniforme.

- Éxito:  {"status": "succeeded", ...campos de la operación}
- Fallo:  {"status": "failed", "error": "...", "error_type": "NotFoundError"}

Los errores de protocolo (tool desconocida, argumento requerido ausente o de
tipo incorrecto) se lanzan como `ToolArgumentError`, un `ValidationError`.
Los fallos de la operación en sí se devuelven como payload "failed". Es la
capa que usan la CLI y cualquier transporte (MCP, HTTP, etc.).
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping

from .document_service import DocumentService
from .domain_models import EXPORT_FORMATS, MEDIA_KINDS
from .errors import DocGenError, ValidationError
from .export import Exporter

logger = logging.getLogger(__name__)

_PRINT_CSS_HINT = (
    "Incluí reglas CSS @media print para optimizar el export a PDF: quitá fondos "
    "decorativos, box-shadow y text-shadow, conservando tipografías, colores con "
    "significado y layout. Ejemplo: @media print { body { background: white !important; } }"
)

TOOL_DEFINITIONS: List[Dict[str, Any]] = [
    {
        "name": "create_document",
        "description": "Crea un documento HTML nuevo con un nombre y contenido HTML. Devuelve el ID y la ruta del archivo.",
        "input_schema": {
            "type": "object",
            "properties": {
                "name": {
                    "type": "string",
                    "description": "Nombre del documento (se usa para generar un ID único)",
                },
                "html_content": {
                    "type": "string",
                    "description": "Contenido HTML del documento; puede incluir CSS en <style>. " + _PRINT_CSS_HINT,
                },
            },
            "required": ["name", "html_content"],
        },
    },
    {
        "name": "update_document",
        "description": "Reemplaza el contenido HTML de un documento existente. Conserva nombre y created_at.",
        "input_schema": {
            "type": "object",
            "properties": {
                "document_id": {
                    "type": "string",
                    "description": "ID del documento (ej: 'my-report-a3f9')",
                },
                "html_content": {
                    "type": "string",
                    "description": "Nuevo contenido HTML completo. " + _PRINT_CSS_HINT,
                },
            },
            "required": ["document_id", "html_content"],
        },
    },
    {
        "name": "add_media",
        "description": "Agrega una imagen o video al documento. Copia el archivo a la carpeta media/ y devuelve la ruta relativa para usar en el HTML.",
        "input_schema": {
            "type": "object",
            "properties": {
                "document_id": {"type": "string", "description": "ID del documento"},
                "source_path": {"type": "string", "description": "Ruta absoluta del archivo de media"},
                "media_type": {
                    "type": "string",
                    "enum": list(MEDIA_KINDS),
                    "description": "Tipo de media",
                },
            },
            "required": ["document_id", "source_path", "media_type"],
        },
    },
    {
        "name": "get_document",
        "description": "Devuelve el contenido y la metadata de un documento.",
        "input_schema": {
            "type": "object",
            "properties": {
                "document_id": {"type": "string", "description": "ID del documento"},
            },
            "required": ["document_id"],
        },
    },
    {
        "name": "list_documents",
        "description": "Lista todos los documentos HTML con su metadata.",
        "input_schema": {"type": "object", "properties": {}},
    },
    {
        "name": "export_document",
        "description": "Exporta un documento a html, pdf o docx. Devuelve la ruta del archivo generado.",
        "input_schema": {
            "type": "object",
            "properties": {
                "document_id": {"type": "string", "description": "ID del documento"},
                "format": {
                    "type": "string",
                    "enum": list(EXPORT_FORMATS),
                    "description": "Formato de export",
                },
                "output_path": {
                    "type": "string",
                    "description": "Ruta de salida opcional. Por defecto se exporta al directorio del documento.",
                },
            },
            "required": ["document_id", "format"],
        },
    },
    {
        "name": "delete_document",
        "description": "Borra un documento y todos sus archivos de media.",
        "input_schema": {
            "type": "object",
            "properties": {
                "document_id": {"type": "string", "description": "ID del documento"},
            },
            "required": ["document_id"],
        },
    },
]


class ToolArgumentError(ValidationError):
    """Tool desconocida o argumentos inválidos (error de protocolo, no de la operación)."""


def _ts(value: datetime) -> str:
    return value.isoformat()


def _require_str(args: Mapping[str, Any], key: str) -> str:
    value = args.get(key)
    if not isinstance(value, str) or not value:
        raise ToolArgumentError(f"{key} es requerido y debe ser un string")
    return value


def _optional_str(args: Mapping[str, Any], key: str) -> str | None:
    value = args.get(key)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ToolArgumentError(f"{key} debe ser un string")
    return value


def failure_payload(error: DocGenError) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "status": "failed",
        "error": str(error),
        "error_type": type(error).__name__,
    }
    if error.attempts:
        payload["attempts"] = [
            {"renderer": name, "error": str(err), "error_type": type(err).__name__}
            for name, err in error.attempts
        ]
    return payload


class DocumentTools:
    """Despachador de tools sobre `DocumentService` + `Exporter`."""

    def __init__(self, service: DocumentService, exporter: Exporter) -> None:
        self.service = service
        self.exporter = exporter
        self._handlers: Dict[str, Callable[[Mapping[str, Any]], Dict[str, Any]]] = {
            "create_document": self._create_document,
            "update_document": self._update_document,
            "add_media": self._add_media,
            "get_document": self._get_document,
            "list_documents": self._list_documents,
            "export_document": self._export_document,
            "delete_document": self._delete_document,
        }

    def list_tools(self) -> List[Dict[str, Any]]:
        return TOOL_DEFINITIONS

    def call_tool(self, name: str, arguments: Mapping[str, Any] | None = None) -> Dict[str, Any]:
        """
        Invoca una tool por nombre.

        Raises
        ------
        ToolArgumentError
            Tool desconocida o argumentos requeridos ausentes/mal tipados
            (subclase de ValidationError).
        """
        handler = self._handlers.get(name)
        if handler is None:
            raise ToolArgumentError(f"Tool desconocida: {name}")

        args = arguments or {}
        try:
            return handler(args)
        except ToolArgumentError:
            raise
        except DocGenError as e:
            logger.warning(f"Tool {name} falló: {e}")
            return failure_payload(e)

    # ------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------

    def _create_document(self, args: Mapping[str, Any]) -> Dict[str, Any]:
        name = _require_str(args, "name")
        html_content = _require_str(args, "html_content")
        doc = self.service.create_document(name, html_content)
        return {
            "status": "succeeded",
            "document_id": doc.id,
            "name": doc.name,
            "file_path": str(self.service.get_html_path(doc.id)),
            "created_at": _ts(doc.created_at),
            "updated_at": _ts(doc.updated_at),
        }

    def _update_document(self, args: Mapping[str, Any]) -> Dict[str, Any]:
        document_id = _require_str(args, "document_id")
        html_content = _require_str(args, "html_content")
        doc = self.service.update_document(document_id, html_content)
        return {
            "status": "succeeded",
            "document_id": doc.id,
            "name": doc.name,
            "file_path": str(self.service.get_html_path(doc.id)),
            "updated_at": _ts(doc.updated_at),
        }

    def _add_media(self, args: Mapping[str, Any]) -> Dict[str, Any]:
        document_id = _require_str(args, "document_id")
        source_path = _require_str(args, "source_path")
        media_type = _require_str(args, "media_type")
        relative_path = self.service.add_media(document_id, source_path, media_type)
        return {
            "status": "succeeded",
            "document_id": document_id,
            "relative_path": relative_path,
            "media_type": media_type,
        }

    def _get_document(self, args: Mapping[str, Any]) -> Dict[str, Any]:
        document_id = _require_str(args, "document_id")
        doc = self.service.get_document(document_id)
        return {
            "status": "succeeded",
            "document_id": doc.id,
            "name": doc.name,
            "html_content": doc.html_content,
            "file_path": str(self.service.get_html_path(doc.id)),
            "created_at": _ts(doc.created_at),
            "updated_at": _ts(doc.updated_at),
        }

    def _list_documents(self, args: Mapping[str, Any]) -> Dict[str, Any]:
        docs = self.service.list_documents()
        documents = [
            {
                "document_id": info.id,
                "name": info.name,
                "file_path": str(self.service.get_html_path(info.id)),
                "created_at": _ts(info.created_at),
                "updated_at": _ts(info.updated_at),
            }
            for info in docs
        ]
        return {
            "status": "succeeded",
            "count": len(documents),
            "documents": documents,
        }

    def _export_document(self, args: Mapping[str, Any]) -> Dict[str, Any]:
        document_id = _require_str(args, "document_id")
        format = _require_str(args, "format")
        output_path = _optional_str(args, "output_path")
        out = self.exporter.export_document(document_id, format, self.service, output_path=output_path)
        return {
            "status": "succeeded",
            "document_id": document_id,
            "format": format,
            "output_path": str(out),
        }

    def _delete_document(self, args: Mapping[str, Any]) -> Dict[str, Any]:
        document_id = _require_str(args, "document_id")
        self.service.delete_document(document_id)
        return {
            "status": "succeeded",
            "document_id": document_id,
        }
