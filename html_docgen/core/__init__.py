"""
Interfaces del core de html_docgen.

- DocumentStorage: capacidades de persistencia (filesystem, memoria)
- Renderer: un tier del pipeline de export (browser, pandoc, weasyprint)
"""

from .abstractions import DocumentStorage, Renderer

__all__ = ["DocumentStorage", "Renderer"]
