# backend/app/api/v1/endpoints/products.py

"""
Endpoints REST para el catálogo de productos y su información nutricional.
"""

from fastapi import APIRouter, Depends, HTTPException, status, Query
import asyncio
import logging

from app.api import deps
from app.core.exceptions import ProductNotFoundError
from app.schemas.nutrition_schema import ProductNutrition
from app.schemas.product_schema import ProductListResponse, ProductResponse
from app.services.nutrition_cache import NutritionCache
from app.services.nutrition_service import (
    NUTRITION_SOURCE,
    get_basic_nutrition_fallback,
    summarize_nutrients,
)
from app.services.product_service import ProductService

logger = logging.getLogger(__name__)
router = APIRouter()


def _get_product_or_404(products: ProductService, product_id: str) -> ProductResponse:
    try:
        return products.get_product(product_id)
    except ProductNotFoundError:
        logger.error(f"❌ ERROR: Producto '{product_id}' no encontrado")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    except (OSError, ValueError) as e:
        logger.error(f"❌ ERROR: Error leyendo el catálogo: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch product data. Please try again later.",
        )


@router.get("", response_model=ProductListResponse)
def read_products(
    popular: bool = Query(False, description="Solo productos populares"),
    products: ProductService = Depends(deps.get_product_service),
) -> ProductListResponse:
    """Lista el catálogo completo, o solo los productos populares."""
    try:
        items = products.list_products(popular_only=popular)
    except (OSError, ValueError) as e:
        logger.error(f"❌ ERROR: Error leyendo el catálogo: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch product data. Please try again later.",
        )
    return ProductListResponse(products=items)


@router.get("/{product_id}", response_model=ProductResponse)
def read_product(
    product_id: str,
    products: ProductService = Depends(deps.get_product_service),
) -> ProductResponse:
    """Detalle de un producto."""
    return _get_product_or_404(products, product_id)


@router.get("/{product_id}/nutrition", response_model=ProductNutrition)
async def read_product_nutrition(
    product_id: str,
    refresh: bool = Query(False, description="Pedir datos frescos aunque haya caché"),
    products: ProductService = Depends(deps.get_product_service),
    cache: NutritionCache = Depends(deps.get_nutrition_cache),
) -> ProductNutrition:
    """
    Información nutricional de un producto.

    Se consulta primero la caché de la sesión; si no hay datos se usan unos
    valores básicos para algunos alimentos comunes.
    """
    # Catálogo (fichero) y caché (Redis) se leen fuera del event loop
    product = await asyncio.to_thread(_get_product_or_404, products, product_id)

    fallback = False
    data = await cache.get_nutrition(product.name, force_refresh=refresh)
    if data is None:
        data = get_basic_nutrition_fallback(product.name)
        fallback = data is not None

    if data is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Failed to load nutrition information. Please try again later.",
        )

    foods = data.get("foods") or []
    nutrients = summarize_nutrients(foods[0] if foods else None)
    return ProductNutrition(
        product_id=str(product.id),
        product_name=product.name,
        nutrients=nutrients,
        source=NUTRITION_SOURCE if nutrients and not fallback else None,
        fallback=fallback,
    )
