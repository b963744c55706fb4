"""Rutas de la API."""

from . import documents

__all__ = ["documents"]
