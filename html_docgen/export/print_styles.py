"""
Estilos de impresión por defecto para el tier de browser.

Se inyectan como fallback conservador: sacan fondos y sombras decorativas
y fijan un margen de página. Las reglas `@media print` que el propio
documento declare después del bloque inyectado ganan por cascada.
"""

from __future__ import annotations

DEFAULT_PRINT_STYLES = """
<style media="print">
/* Auto-injected print optimization fallback */
@media print {
  body {
    background: white !important;
    background-color: white !important;
    background-image: none !important;
  }

  * {
    box-shadow: none !important;
    text-shadow: none !important;
  }

  @page {
    margin: 0.5in;
  }
}
</style>"""


def inject_default_print_styles(html_content: str) -> str:
    """
    Inserta `DEFAULT_PRINT_STYLES` en el HTML.

    Orden de preferencia del punto de inserción:
    1) justo antes del primer `</head>` (sin distinguir mayúsculas)
    2) justo después del `>` que cierra el primer `<body ...>`
    3) al principio del documento

    El contenido original se conserva completo en todos los casos.
    """
    lowered = html_content.lower()

    idx = lowered.find("</head>")
    if idx != -1:
        return html_content[:idx] + DEFAULT_PRINT_STYLES + "\n" + html_content[idx:]

    idx = lowered.find("<body")
    if idx != -1:
        end = html_content.find(">", idx)
        if end != -1:
            pos = end + 1
            return html_content[:pos] + "\n" + DEFAULT_PRINT_STYLES + "\n" + html_content[pos:]

    return DEFAULT_PRINT_STYLES + "\n" + html_content
