#!/usr/bin/env python3
"""
Script helper para ejecutar la API FastAPI.
Ejecutar desde la raíz del proyecto para que Python encuentre el módulo 'api'.
"""

import os
import sys

import uvicorn

if __name__ == "__main__":
    host = os.getenv("API_HOST", "0.0.0.0")
    port = int(os.getenv("API_PORT", "8000"))
    print(f"🚀 Iniciando API FastAPI en http://{host}:{port}")
    print(f"📖 Documentación disponible en http://{host}:{port}/docs")
    try:
        uvicorn.run("api.main:app", host=host, port=port, reload=True)
    except Exception as e:
        print(f"❌ Error al iniciar el servidor: {e}")
        sys.exit(1)
