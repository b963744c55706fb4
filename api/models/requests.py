"""
Modelos de request/response para la API.

Estos modelos definen la estructura esperada de los requests HTTP,
validando tipos y valores antes de pasarlos al core.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class MediaType(str, Enum):
    """Tipo de media que se puede agregar a un documento."""

    IMAGE = "image"
    VIDEO = "video"


class ExportFormat(str, Enum):
    """Formatos de export soportados."""

    HTML = "html"
    PDF = "pdf"
    DOCX = "docx"


class DocumentCreateRequest(BaseModel):
    """Request para crear un documento."""

    name: str = Field(..., min_length=1, description="Nombre del documento (se usa para generar el ID)")
    html_content: str = Field(..., min_length=1, description="Contenido HTML completo")


class DocumentUpdateRequest(BaseModel):
    """Request para reemplazar el contenido de un documento."""

    html_content: str = Field(..., min_length=1, description="Nuevo contenido HTML completo")


class MediaAddRequest(BaseModel):
    """Request para copiar un archivo local a la carpeta media/ del documento."""

    source_path: str = Field(..., min_length=1, description="Ruta absoluta del archivo en el servidor")
    media_type: MediaType = Field(..., description="image o video")


class ExportRequest(BaseModel):
    """Request de export."""

    format: ExportFormat = Field(..., description="html, pdf o docx")
    output_path: Optional[str] = Field(
        default=None,
        description="Ruta de salida. Si no se indica, se exporta al directorio del documento.",
    )


class DocumentResponse(BaseModel):
    """Documento completo (con HTML)."""

    id: str
    name: str
    html_content: str
    file_path: str
    created_at: str
    updated_at: str


class DocumentSummaryResponse(BaseModel):
    """Resumen de documento para listados."""

    id: str
    name: str
    file_path: str = Field(..., description="Ruta relativa al root: <id>/index.html")
    created_at: str
    updated_at: str


class DocumentListResponse(BaseModel):
    count: int
    documents: List[DocumentSummaryResponse]


class MediaResponse(BaseModel):
    document_id: str
    relative_path: str = Field(..., description="Ruta para usar en el HTML, ej: media/foto.png")
    media_type: MediaType


class ExportResponse(BaseModel):
    document_id: str
    format: ExportFormat
    output_path: str
