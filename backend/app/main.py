# backend/app/main.py
"""
Punto de entrada principal de la aplicación FastAPI.

Este módulo configura y inicializa la aplicación FastAPI completa,
incluyendo el logging, CORS, los ficheros estáticos del frontend y el
registro de las rutas de la API.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.core.config import settings  # Configuración centralizada de la aplicación
from app.api.v1.api_router import api_router_v1  # Router principal de la API

# ========================================
# LOGGING
# ========================================

logging.basicConfig(level=settings.LOG_LEVEL, format=settings.LOG_FORMAT)
logger = logging.getLogger(__name__)

# ========================================
# CONFIGURACIÓN DE LA APLICACIÓN FASTAPI
# ========================================

app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_PREFIX_STR}/openapi.json",
    version=settings.PROJECT_VERSION,
    description="API de la tienda Fram: catálogo, carrito, nutrición y asistente"
)

# El frontend se sirve desde otro origen durante el desarrollo
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ========================================
# REGISTRO DE ROUTERS DE LA API
# ========================================

app.include_router(api_router_v1, prefix=settings.API_PREFIX_STR)


@app.get("/health", tags=["Root"])
async def health():
    """
    Health check básico para monitoreo.

    Example:
        GET /health
        Response: {"message": "Fram API v0.1.0 is running"}
    """
    return {"message": f"{settings.PROJECT_NAME} v{settings.PROJECT_VERSION} is running"}


# Los ficheros estáticos se montan al final para no tapar las rutas de la API
if settings.STATIC_DIR is not None and settings.STATIC_DIR.is_dir():
    app.mount("/", StaticFiles(directory=settings.STATIC_DIR, html=True), name="static")
    logger.info(f"Sirviendo ficheros estáticos desde {settings.STATIC_DIR}")
