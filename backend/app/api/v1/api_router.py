# backend/app/api/v1/api_router.py
"""
Este archivo contiene el router principal de la API.

Se encarga de registrar y configurar todos los routers de la API.
"""

from fastapi import APIRouter

# Importación de routers especializados por dominio de negocio
from app.api.v1.endpoints import (
    products,
    cart,
    nutrition,
    chat
)

# ========================================
# CONFIGURACIÓN DEL ROUTER PRINCIPAL
# ========================================

api_router_v1 = APIRouter()

# ========================================
# REGISTRO DE ROUTERS POR DOMINIO DE NEGOCIO
# ========================================

# ROUTER DE PRODUCTOS
# Catálogo, productos populares y ficha nutricional
api_router_v1.include_router(
    products.router,
    prefix="/products",
    tags=["Products"]
)

# ROUTER DEL CARRITO
# Maneja las operaciones del carrito de compras
api_router_v1.include_router(
    cart.router,
    prefix="/cart",
    tags=["Cart"]
)

# ROUTER DE NUTRICIÓN
# Proxy hacia USDA Food Data Central
api_router_v1.include_router(
    nutrition.router,
    prefix="/nutrition",
    tags=["Nutrition"]
)

# ROUTER DEL CHAT
# Proxy hacia OpenAI con el catálogo en el prompt
api_router_v1.include_router(
    chat.router,
    prefix="/chat",
    tags=["Chat"]
)
