"""
html_docgen.cli
===============

Modo terminal: ejecuta una operación puntual sobre los documentos e imprime
el payload JSON resultante.

Ejemplos
--------
    html-docgen --create "My Report" --html "<h1>Hello World</h1>"
    html-docgen --list
    html-docgen --get my-report-a3f9
    html-docgen --update my-report-a3f9 --html "<h1>Hola</h1>"
    html-docgen --add-media my-report-a3f9 --media-path ./foto.png --media-type image
    html-docgen --export my-report-a3f9 --format pdf
    html-docgen --delete my-report-a3f9

Notas
-----
- Los logs van a STDERR; STDOUT sólo lleva el JSON.
- Código de salida: 0 éxito, 1 operación fallida, 2 uso incorrecto.
- La configuración (directorio raíz, timeouts) sale de `config.get_settings()`.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional, Tuple

from .config import build_exporter, build_service, get_settings
from .domain_models import EXPORT_FORMATS, MEDIA_KINDS
from .errors import ValidationError
from .tools import DocumentTools


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="html-docgen",
        description="Gestión y export de documentos HTML.",
    )
    parser.add_argument("--create", metavar="NAME", help="Crea un documento con ese nombre")
    parser.add_argument("--update", metavar="ID", help="Actualiza el documento con ese ID")
    parser.add_argument("--html", help="Contenido HTML para --create/--update")
    parser.add_argument("--list", action="store_true", help="Lista todos los documentos")
    parser.add_argument("--get", metavar="ID", help="Muestra un documento")
    parser.add_argument("--export", metavar="ID", help="Exporta un documento")
    parser.add_argument("--format", default="html", choices=EXPORT_FORMATS, help="Formato de export")
    parser.add_argument("--output", metavar="PATH", help="Ruta de salida del export (opcional)")
    parser.add_argument("--add-media", metavar="ID", help="Agrega media al documento")
    parser.add_argument("--media-path", metavar="PATH", help="Archivo de media a copiar")
    parser.add_argument("--media-type", default="image", choices=MEDIA_KINDS, help="Tipo de media")
    parser.add_argument("--delete", metavar="ID", help="Borra un documento")
    return parser


def resolve_command(
    parser: argparse.ArgumentParser,
    args: argparse.Namespace,
) -> Tuple[str, Dict[str, Any]]:
    """
    Traduce los flags a `(tool, argumentos)`.

    Si no se pidió ninguna operación o faltan flags obligatorios se corta con
    `parser.error` (exit code 2).
    """
    if args.create:
        if not args.html:
            parser.error("--html es requerido al crear un documento")
        return "create_document", {"name": args.create, "html_content": args.html}

    if args.update:
        if not args.html:
            parser.error("--html es requerido al actualizar un documento")
        return "update_document", {"document_id": args.update, "html_content": args.html}

    if args.list:
        return "list_documents", {}

    if args.get:
        return "get_document", {"document_id": args.get}

    if args.export:
        tool_args: Dict[str, Any] = {"document_id": args.export, "format": args.format}
        if args.output:
            tool_args["output_path"] = args.output
        return "export_document", tool_args

    if args.add_media:
        if not args.media_path:
            parser.error("--media-path es requerido al agregar media")
        return "add_media", {
            "document_id": args.add_media,
            "source_path": args.media_path,
            "media_type": args.media_type,
        }

    if args.delete:
        return "delete_document", {"document_id": args.delete}

    parser.error("no se indicó ninguna operación (usá --help)")
    raise AssertionError("unreachable")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    tool_name, tool_args = resolve_command(parser, args)

    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    tools = DocumentTools(build_service(settings), build_exporter(settings))
    try:
        payload = tools.call_tool(tool_name, tool_args)
    except ValidationError as e:
        print(json.dumps({"status": "failed", "error": str(e)}, indent=2, ensure_ascii=False))
        return 2

    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return 0 if payload.get("status") == "succeeded" else 1


if __name__ == "__main__":
    sys.exit(main())
