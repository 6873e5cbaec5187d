# backend/app/api/v1/endpoints/nutrition.py
"""
Endpoints de nutrición.

- GET /nutrition/{query}: reenvía la búsqueda a USDA Food Data Central sin
  exponer la API key al cliente.
- DELETE /nutrition/cache: vacía la caché de nutrición de la sesión.
"""

from fastapi import APIRouter, Depends, HTTPException, status
import logging

from app.api import deps
from app.core.exceptions import NutritionLookupError, NutritionNotConfiguredError
from app.services.nutrition_cache import NutritionCache
from app.services.nutrition_service import FoodDataCentralClient

logger = logging.getLogger(__name__)
router = APIRouter()


@router.delete("/cache", status_code=status.HTTP_204_NO_CONTENT)
def clear_nutrition_cache(cache: NutritionCache = Depends(deps.get_nutrition_cache)):
    """Elimina todos los datos de nutrición guardados para la sesión."""
    cache.clear_cache()


@router.get("/{query}")
async def search_nutrition(
    query: str,
    client: FoodDataCentralClient = Depends(deps.get_nutrition_client),
):
    """
    Busca información nutricional de un alimento en Food Data Central.
    Devuelve la respuesta de USDA tal cual.
    """
    try:
        return await client.search_foods(query)
    except NutritionNotConfiguredError as e:
        logger.error(f"❌ ERROR: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    except NutritionLookupError as e:
        logger.error(f"❌ ERROR: Error fetching nutrition data: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch nutrition data. Please try again later.",
        )
