"""
Ejecución acotada de procesos externos (pandoc, etc.).

`run_bounded` corre un comando, captura STDERR y le impone un timeout de
reloj: si el proceso no termina a tiempo se mata y se reporta
`RenderTimeoutError`. Es el único lugar donde el export lanza procesos.

`temporary_html` maneja el HTML temporal de cada intento de render.
"""

from __future__ import annotations

import logging
import subprocess
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Sequence

from ..errors import (
    RendererUnavailableError,
    RenderFailureError,
    RenderTimeoutError,
    StorageIOError,
)

logger = logging.getLogger(__name__)


def run_bounded(
    cmd: Sequence[str],
    *,
    cwd: Path | str | None = None,
    timeout: float = 30.0,
) -> str:
    """
    Ejecuta `cmd` con timeout y devuelve el STDERR capturado.

    Parameters
    ----------
    cmd:
        Comando y argumentos (sin shell).
    cwd:
        Directorio de trabajo del proceso.
    timeout:
        Segundos máximos de ejecución.

    Raises
    ------
    RendererUnavailableError
        Si el binario no existe o no se puede ejecutar.
    RenderTimeoutError
        Si el proceso supera `timeout` (se lo termina con kill).
    RenderFailureError
        Si el proceso termina con código distinto de cero.
    """
    logger.debug(f"Ejecutando: {' '.join(cmd)} (cwd={cwd}, timeout={timeout}s)")

    try:
        proc = subprocess.Popen(
            list(cmd),
            cwd=str(cwd) if cwd is not None else None,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
            text=True,
        )
    except (FileNotFoundError, PermissionError) as e:
        raise RendererUnavailableError(f"No se pudo ejecutar '{cmd[0]}': {e}") from e

    try:
        _, stderr = proc.communicate(timeout=timeout)
    except subprocess.TimeoutExpired as e:
        proc.kill()
        proc.communicate()
        raise RenderTimeoutError(
            f"'{cmd[0]}' superó el timeout de {timeout:g}s",
            timeout=timeout,
        ) from e

    stderr = (stderr or "").strip()
    if proc.returncode != 0:
        msg = f"'{cmd[0]}' terminó con código {proc.returncode}"
        if stderr:
            msg += f"\nSTDERR:\n{stderr}"
        raise RenderFailureError(msg, stderr=stderr)

    return stderr


TEMP_HTML_NAME = "temp_export.html"


@contextmanager
def temporary_html(directory: Path, html_content: str) -> Iterator[Path]:
    """
    Escribe `html_content` en `<directory>/temp_export.html` y lo borra al
    salir del bloque, con éxito, error o timeout.

    El archivo vive en el directorio del documento para que las rutas
    relativas (media/...) se resuelvan igual que desde index.html.
    """
    path = Path(directory) / TEMP_HTML_NAME
    try:
        path.write_bytes(html_content.encode("utf-8"))
    except OSError as e:
        raise StorageIOError(f"No se pudo escribir el HTML temporal: {e}", operation="export") from e
    try:
        yield path
    finally:
        path.unlink(missing_ok=True)
