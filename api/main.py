"""
API HTTP principal para html-docgen.

Esta aplicación FastAPI expone endpoints REST sobre el core interno
(html_docgen) para crear, editar y exportar documentos HTML.

La configuración (nivel de log, orígenes CORS, directorio raíz, tiers de
PDF) sale de `html_docgen.config.get_settings()`, igual que en la CLI.

Uso:
    uvicorn api.main:app --reload --port 8000
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from html_docgen.config import get_settings
from html_docgen.export import pandoc_available

from .routes import documents

API_VERSION = "0.1.0"
SERVICE_NAME = "html-docgen-api"

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)
logger.info(f"🚀 Iniciando API (documentos en {settings.root_dir})")

app = FastAPI(
    title="HTML DocGen API",
    description="API para gestionar documentos HTML y exportarlos a html, pdf o docx",
    version=API_VERSION,
)

logger.info(f"🌐 CORS origins configurados: {list(settings.cors_origins)}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)

app.include_router(documents.router)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": SERVICE_NAME}


@app.get("/health")
def health():
    """
    Health check detallado: tiers de PDF configurados y si Pandoc (necesario
    para DOCX y como fallback de PDF) está instalado.
    """
    current = get_settings()
    return {
        "status": "ok",
        "service": SERVICE_NAME,
        "version": API_VERSION,
        "pdf_renderers": list(current.pdf_renderers),
        "pandoc_available": pandoc_available(),
    }
