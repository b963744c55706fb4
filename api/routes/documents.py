"""
Endpoints para gestionar documentos HTML.

Endpoints:
- POST   /api/v1/documents                      - Crear documento
- GET    /api/v1/documents                      - Listar documentos
- GET    /api/v1/documents/{id}                 - Obtener documento
- PUT    /api/v1/documents/{id}                 - Reemplazar contenido HTML
- DELETE /api/v1/documents/{id}                 - Borrar documento (y su media)
- POST   /api/v1/documents/{id}/media           - Copiar media desde una ruta del servidor
- POST   /api/v1/documents/{id}/media/upload    - Subir un archivo de media
- POST   /api/v1/documents/{id}/export          - Exportar a html/pdf/docx
- GET    /api/v1/documents/{id}/export/{format} - Exportar y descargar el archivo
"""

import logging
import tempfile
from pathlib import Path

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import FileResponse

from html_docgen.document_service import DocumentService
from html_docgen.domain_models import Document, DocumentInfo
from html_docgen.errors import DocGenError, ValidationError
from html_docgen.export import Exporter

from ..dependencies import get_document_service, get_exporter, to_http_exception
from ..models.requests import (
    DocumentCreateRequest,
    DocumentListResponse,
    DocumentResponse,
    DocumentSummaryResponse,
    DocumentUpdateRequest,
    ExportFormat,
    ExportRequest,
    ExportResponse,
    MediaAddRequest,
    MediaResponse,
    MediaType,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/documents", tags=["documents"])

_MEDIA_TYPES = {
    ExportFormat.HTML: "text/html",
    ExportFormat.PDF: "application/pdf",
    ExportFormat.DOCX: "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}


def _document_response(doc: Document, service: DocumentService) -> DocumentResponse:
    return DocumentResponse(
        id=doc.id,
        name=doc.name,
        html_content=doc.html_content,
        file_path=str(service.get_html_path(doc.id)),
        created_at=doc.created_at.isoformat(),
        updated_at=doc.updated_at.isoformat(),
    )


def _summary_response(info: DocumentInfo) -> DocumentSummaryResponse:
    return DocumentSummaryResponse(
        id=info.id,
        name=info.name,
        file_path=info.file_path,
        created_at=info.created_at.isoformat(),
        updated_at=info.updated_at.isoformat(),
    )


@router.post("", response_model=DocumentResponse, status_code=201)
async def create_document(
    request: DocumentCreateRequest,
    service: DocumentService = Depends(get_document_service),
):
    """
    Crea un documento nuevo.

    El ID se genera a partir del nombre (`<slug>-<sufijo>`).

    Returns:
        DocumentResponse con el documento creado
    """
    try:
        doc = service.create_document(request.name, request.html_content)
    except DocGenError as e:
        raise to_http_exception(e)

    logger.info(f"📄 Documento creado vía API: {doc.id}")
    return _document_response(doc, service)


@router.get("", response_model=DocumentListResponse)
async def list_documents(service: DocumentService = Depends(get_document_service)):
    """Lista todos los documentos, ordenados por ID."""
    try:
        docs = service.list_documents()
    except DocGenError as e:
        raise to_http_exception(e)

    return DocumentListResponse(
        count=len(docs),
        documents=[_summary_response(info) for info in docs],
    )


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: str,
    service: DocumentService = Depends(get_document_service),
):
    """
    Obtiene un documento con su contenido HTML.

    Raises:
        HTTPException 404: Si el documento no existe
    """
    try:
        doc = service.get_document(document_id)
    except DocGenError as e:
        raise to_http_exception(e)

    return _document_response(doc, service)


@router.put("/{document_id}", response_model=DocumentResponse)
async def update_document(
    document_id: str,
    request: DocumentUpdateRequest,
    service: DocumentService = Depends(get_document_service),
):
    """
    Reemplaza el HTML de un documento. Conserva nombre y created_at.

    Raises:
        HTTPException 404: Si el documento no existe
    """
    try:
        doc = service.update_document(document_id, request.html_content)
    except DocGenError as e:
        raise to_http_exception(e)

    return _document_response(doc, service)


@router.delete("/{document_id}", status_code=204)
async def delete_document(
    document_id: str,
    service: DocumentService = Depends(get_document_service),
):
    try:
        service.delete_document(document_id)
    except DocGenError as e:
        raise to_http_exception(e)

    logger.info(f"🗑️ Documento borrado vía API: {document_id}")


@router.post("/{document_id}/media", response_model=MediaResponse)
async def add_media(
    document_id: str,
    request: MediaAddRequest,
    service: DocumentService = Depends(get_document_service),
):
    """
    Copia un archivo que ya está en el servidor a `media/` del documento.

    Returns:
        MediaResponse con la ruta relativa para referenciar desde el HTML
    """
    try:
        relative_path = service.add_media(document_id, request.source_path, request.media_type.value)
    except DocGenError as e:
        raise to_http_exception(e)

    return MediaResponse(
        document_id=document_id,
        relative_path=relative_path,
        media_type=request.media_type,
    )


@router.post("/{document_id}/media/upload", response_model=MediaResponse)
async def upload_media(
    document_id: str,
    file: UploadFile = File(...),
    media_type: MediaType = Form(MediaType.IMAGE),
    service: DocumentService = Depends(get_document_service),
):
    """
    Sube un archivo de media y lo copia a `media/` del documento.

    Se conserva el nombre original del archivo; si ya existe uno igual se
    sobreescribe.
    """
    filename = Path(file.filename or "").name
    if not filename:
        raise to_http_exception(
            ValidationError("el archivo subido no tiene nombre", operation="add_media", document_id=document_id)
        )

    with tempfile.TemporaryDirectory() as temp_dir_str:
        temp_path = Path(temp_dir_str) / filename
        content = await file.read()
        temp_path.write_bytes(content)

        try:
            relative_path = service.add_media(document_id, str(temp_path), media_type.value)
        except DocGenError as e:
            raise to_http_exception(e)

    return MediaResponse(
        document_id=document_id,
        relative_path=relative_path,
        media_type=media_type,
    )


@router.post("/{document_id}/export", response_model=ExportResponse)
def export_document(
    document_id: str,
    request: ExportRequest,
    service: DocumentService = Depends(get_document_service),
    exporter: Exporter = Depends(get_exporter),
):
    """
    Exporta un documento y devuelve la ruta del archivo generado.

    Es `def` y no `async def`: FastAPI la corre en su threadpool. Playwright
    sync no puede ejecutarse dentro del event loop.

    Raises:
        HTTPException 404: Si el documento no existe
        HTTPException 503: Si ningún renderer está disponible
        HTTPException 504: Si el último renderer excedió su timeout
    """
    try:
        out = exporter.export_document(
            document_id,
            request.format.value,
            service,
            output_path=request.output_path,
        )
    except DocGenError as e:
        raise to_http_exception(e)

    return ExportResponse(document_id=document_id, format=request.format, output_path=str(out))


@router.get("/{document_id}/export/{format}")
def download_export(
    document_id: str,
    format: ExportFormat,
    service: DocumentService = Depends(get_document_service),
    exporter: Exporter = Depends(get_exporter),
):
    """Exporta al directorio del documento y devuelve el archivo."""
    try:
        out = exporter.export_document(document_id, format.value, service)
    except DocGenError as e:
        raise to_http_exception(e)

    return FileResponse(
        path=str(out),
        media_type=_MEDIA_TYPES[format],
        filename=out.name,
    )
