from __future__ import annotations

"""
html_docgen.domain_models
=========================

Modelos de dominio (dataclasses) usados por storage, servicio y export.

Principios de diseño
--------------------
- Dataclasses sin lógica pesada: este módulo NO hace IO.
- Los timestamps son `datetime` con zona horaria (UTC) y se serializan en
  formato RFC-3339 vía `isoformat()`.
- `DocumentMetadata` es lo único que se persiste como JSON (metadata.json);
  el cuerpo HTML vive aparte en index.html.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Literal, Tuple


# ============================================================
# Tipos base
# ============================================================

MediaKind = Literal["image", "video"]
MEDIA_KINDS: Tuple[str, ...] = ("image", "video")

ExportFormat = Literal["html", "pdf", "docx"]
EXPORT_FORMATS: Tuple[str, ...] = ("html", "pdf", "docx")

_RE_FRACTION = re.compile(r"(\.\d+)")


# ============================================================
# Documento
# ============================================================

@dataclass
class Document:
    """
    Un documento HTML completo.

    Attributes:
        id:
            Identificador inmutable `<slug>-<sufijo>` (ej: "my-report-a3f9").
        name:
            Nombre legible con el que se creó el documento.
        html_content:
            Cuerpo HTML completo (puede incluir <style> embebido).
        created_at:
            Momento de creación; no cambia nunca.
        updated_at:
            Último reemplazo de contenido.
    """

    id: str
    name: str
    html_content: str
    created_at: datetime
    updated_at: datetime

    def to_metadata(self) -> "DocumentMetadata":
        return DocumentMetadata(
            name=self.name,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


@dataclass
class DocumentMetadata:
    """Sidecar persistido en metadata.json."""

    name: str
    created_at: datetime
    updated_at: datetime

    def to_dict(self) -> Dict[str, str]:
        return {
            "name": self.name,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DocumentMetadata":
        """
        Reconstruye la metadata desde el JSON leído de disco.

        Raises
        ------
        KeyError, TypeError, ValueError
            Si falta algún campo o un timestamp no es parseable.
        """
        return cls(
            name=str(data["name"]),
            created_at=_parse_timestamp(data["created_at"]),
            updated_at=_parse_timestamp(data["updated_at"]),
        )


@dataclass
class DocumentInfo:
    """
    Resumen liviano para listados. No se persiste: se arma al leer.

    `file_path` es relativo al root de documentos: `<id>/index.html`.
    """

    id: str
    name: str
    created_at: datetime
    updated_at: datetime
    file_path: str


def _parse_timestamp(value: Any) -> datetime:
    if not isinstance(value, str):
        raise TypeError(f"Timestamp inválido: {value!r}")
    # Python < 3.11 no acepta el sufijo "Z" de RFC-3339
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    # datetime guarda microsegundos; metadata escrita por otras herramientas
    # puede traer nanosegundos
    value = _RE_FRACTION.sub(lambda m: m.group(1)[:7], value)
    parsed = datetime.fromisoformat(value)
    # RFC-3339 exige offset; un timestamp naive no se puede comparar con now(UTC)
    if parsed.tzinfo is None:
        raise ValueError(f"Timestamp sin zona horaria: {value!r}")
    return parsed

