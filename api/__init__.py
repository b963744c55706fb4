"""
API HTTP para html-docgen.

Esta capa expone endpoints REST sobre el core interno (html_docgen):
los handlers sólo traducen requests a llamadas a `DocumentService` /
`Exporter` y los errores del core a códigos HTTP.
"""
