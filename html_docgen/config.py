# html_docgen/config.py
from dataclasses import dataclass, field
from functools import lru_cache
import os
from pathlib import Path
from typing import Tuple

from dotenv import load_dotenv

"""
html_docgen.config
==================

Gestión centralizada de configuración.

Este módulo define:
- La estructura de configuración (`Settings`)
- El mecanismo para cargar variables desde entorno (.env)
- Un acceso único y cacheado a la configuración (`get_settings`)
- Factories que arman el servicio y el exporter a partir de `Settings`

Convenciones
------------
- Las variables de entorno se cargan desde un archivo `.env` si existe.
- El core (storage, servicio, exporter) NO lee el entorno: recibe los valores
  ya resueltos por parámetro. Sólo los puntos de entrada (CLI, API) pasan
  por acá.
- La creación del directorio raíz ocurre en `ensure_root_dir`, no al importar.
"""

# Cargar variables de entorno desde .env (si existe)
load_dotenv()


@dataclass
class Settings:
    """
    Contenedor tipado de configuración.

    Attributes
    ----------
    root_dir:
        Directorio raíz de los documentos (un subdirectorio por documento).
    browser_timeout:
        Segundos máximos del render PDF con browser headless.
    pandoc_timeout:
        Segundos máximos de cada conversión con Pandoc.
    pdf_renderers:
        Tiers de PDF en orden de preferencia.
    chrome_path:
        Ejecutable de Chrome/Chromium explícito (opcional).
    log_level:
        Nivel de logging para los puntos de entrada.
    cors_origins:
        Orígenes permitidos por la API HTTP.
    """

    root_dir: str
    browser_timeout: float = 30.0
    pandoc_timeout: float = 30.0
    pdf_renderers: Tuple[str, ...] = field(default=("browser", "pandoc"))
    chrome_path: str = ""
    log_level: str = "INFO"
    cors_origins: Tuple[str, ...] = field(default=("http://localhost:3000",))


def _default_root_dir() -> str:
    return str(Path.home() / ".simple_html_docs")


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} debe ser un número de segundos, se recibió {raw!r}")


def _csv_env(name: str, default: str) -> Tuple[str, ...]:
    raw = os.getenv(name, default)
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@lru_cache
def get_settings() -> Settings:
    """
    Devuelve una instancia única y cacheada de `Settings`.

    Variables de entorno utilizadas
    -------------------------------
    - SIMPLE_HTML_ROOT_DIR (default: ~/.simple_html_docs)
    - EXPORT_BROWSER_TIMEOUT (default: 30)
    - EXPORT_PANDOC_TIMEOUT (default: 30)
    - PDF_RENDERERS (default: "browser,pandoc")
    - CHROME_PATH (default: vacío → autodetección)
    - LOG_LEVEL (default: "INFO")
    - CORS_ORIGINS (default: "http://localhost:3000", separados por coma)
    """
    return Settings(
        root_dir=os.getenv("SIMPLE_HTML_ROOT_DIR") or _default_root_dir(),
        browser_timeout=_float_env("EXPORT_BROWSER_TIMEOUT", 30.0),
        pandoc_timeout=_float_env("EXPORT_PANDOC_TIMEOUT", 30.0),
        pdf_renderers=_csv_env("PDF_RENDERERS", "browser,pandoc"),
        chrome_path=os.getenv("CHROME_PATH", ""),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        cors_origins=_csv_env("CORS_ORIGINS", "http://localhost:3000"),
    )


def ensure_root_dir(settings: Settings) -> Path:
    """Crea el directorio raíz si no existe (permisos 0755) y lo devuelve."""
    root = Path(settings.root_dir).expanduser()
    try:
        root.mkdir(mode=0o755, parents=True, exist_ok=True)
    except OSError as e:
        raise RuntimeError(f"No se pudo crear el directorio raíz {root}: {e}") from e
    return root


def build_service(settings: Settings):
    """Arma un `DocumentService` sobre el filesystem según `settings`."""
    from .document_service import DocumentService
    from .storage import FileSystemStorage

    return DocumentService(FileSystemStorage(ensure_root_dir(settings)))


def build_exporter(settings: Settings):
    """Arma el `Exporter` con los timeouts y tiers de `settings`."""
    from .export import Exporter

    return Exporter(
        browser_timeout=settings.browser_timeout,
        pandoc_timeout=settings.pandoc_timeout,
        pdf_renderers=settings.pdf_renderers,
        chrome_path=settings.chrome_path or None,
    )
