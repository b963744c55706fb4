"""Modelos Pydantic de la API."""
