"""
html_docgen.idgen
=================

Generación y validación de IDs de documento.

Formato: `<slug>-<sufijo>`, por ejemplo "My Report" → "my-report-a3f9".

- El slug es ASCII, en minúsculas, con palabras unidas por guiones.
- El sufijo son 4 caracteres hex aleatorios; si choca con un documento
  existente se vuelve a sortear (hasta 100 veces).
- Si después de 100 intentos sigue chocando, se usa un sufijo de 8 caracteres
  sin volver a verificar existencia.
"""

from __future__ import annotations

import logging
import random
import re
import secrets
from typing import Callable
from unicodedata import normalize

from pymdownx.slugs import slugify as _md_slugify

logger = logging.getLogger(__name__)

MAX_SLUG_LENGTH = 30
SUFFIX_LENGTH = 4
MAX_ATTEMPTS = 100
FALLBACK_SLUG = "document"

_slugify_lower = _md_slugify(case="lower")
_RE_SEPARATORS = re.compile(r"[-_\s]+")


def slugify_name(name: str) -> str:
    """
    Normaliza un nombre libre a un slug seguro para URLs y filesystem.

    Translitera a ASCII (NFKD), pasa a minúsculas, descarta todo lo que no sea
    alfanumérico y une las palabras con "-". No trunca ni aplica fallback.

    Examples
    --------
    >>> slugify_name("My Report")
    'my-report'
    >>> slugify_name("Café à Paris")
    'cafe-a-paris'
    >>> slugify_name("!!!")
    ''
    """
    ascii_text = normalize("NFKD", name).encode("ascii", "ignore").decode("ascii")
    slug = _slugify_lower(ascii_text, sep="-")
    return _RE_SEPARATORS.sub("-", slug).strip("-")


def _random_suffix() -> str:
    try:
        return secrets.token_hex(SUFFIX_LENGTH // 2 + 1)[:SUFFIX_LENGTH]
    except Exception as e:  # la generación de IDs nunca debe fallar
        logger.warning(f"Fuente aleatoria segura no disponible ({e}); uso random")
        return f"{random.getrandbits(SUFFIX_LENGTH * 4):0{SUFFIX_LENGTH}x}"


def generate_document_id(name: str, exists: Callable[[str], bool]) -> str:
    """
    Genera un ID único para un documento a partir de su nombre.

    Parameters
    ----------
    name:
        Nombre legible del documento.
    exists:
        Predicado que indica si un ID ya está en uso (típicamente
        `storage.document_exists`).

    Returns
    -------
    str
        ID con formato `<slug>-<sufijo>`.
    """
    slug = slugify_name(name)[:MAX_SLUG_LENGTH]
    if not slug:
        slug = FALLBACK_SLUG

    for _ in range(MAX_ATTEMPTS):
        candidate = f"{slug}-{_random_suffix()}"
        if not exists(candidate):
            return candidate

    # Sufijo largo: no se vuelve a verificar existencia
    logger.warning(
        f"No se encontró ID libre para '{slug}' en {MAX_ATTEMPTS} intentos; "
        "se usa sufijo largo"
    )
    return f"{slug}-{_random_suffix()}{_random_suffix()}"


def validate_document_id(document_id: str) -> bool:
    """
    Chequeo sintáctico de un ID (no verifica que el documento exista).

    Un ID es válido si no está vacío, tiene al menos un guión y no supera
    `MAX_SLUG_LENGTH + SUFFIX_LENGTH + 1` caracteres.
    """
    if not document_id:
        return False
    if "-" not in document_id:
        return False
    return len(document_id) <= MAX_SLUG_LENGTH + SUFFIX_LENGTH + 1
