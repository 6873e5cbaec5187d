# backend/app/services/nutrition_service.py
"""
Servicio de nutrición.

Consulta la API de USDA Food Data Central y extrae los nutrientes principales
que se muestran en la página de detalle de un producto.
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from app.core.config import settings
from app.core.exceptions import NutritionLookupError, NutritionNotConfiguredError

logger = logging.getLogger(__name__)

# Nutrientes mostrados en la ficha del producto, por id de nutriente de USDA.
# Se usa el primer id que aparezca en la respuesta.
KEY_NUTRIENTS: List[Dict[str, Any]] = [
    {"name": "Energy", "ids": [1008, 2048], "unit": "kcal"},
    {"name": "Protein", "ids": [1003], "unit": "g"},
    {"name": "Carbohydrates", "ids": [1005, 2000], "unit": "g"},
    {"name": "Fat", "ids": [1004], "unit": "g"},
    {"name": "Fiber", "ids": [1079, 2033], "unit": "g"},
    {"name": "Sugar", "ids": [2000, 1082], "unit": "g"},
    {"name": "Sodium", "ids": [1093, 1090], "unit": "mg"},
]

NUTRITION_SOURCE = "USDA Food Data Central"

# Datos básicos para cuando no hay ni caché ni API
_BASIC_FALLBACK: Dict[str, Dict[str, Any]] = {
    "apple": {
        "foods": [
            {
                "foodNutrients": [
                    {"nutrientId": 1008, "value": 52, "unitName": "kcal"},
                    {"nutrientId": 1003, "value": 0.3, "unitName": "g"},
                ]
            }
        ]
    },
}


class FoodDataCentralClient:
    """Cliente asíncrono para el endpoint de búsqueda de Food Data Central."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.FDC_API_KEY
        self.base_url = (base_url or settings.FDC_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT_SECONDS
        self.transport = transport

    async def search_foods(self, query: str) -> Dict[str, Any]:
        """
        Busca un alimento y devuelve la respuesta JSON sin modificar.

        Raises:
            NutritionNotConfiguredError: si no hay API key.
            NutritionLookupError: si la API falla o responde con error.
        """
        if not self.api_key:
            raise NutritionNotConfiguredError(
                "Food Data Central API key not configured. Please add FDC_API_KEY to your .env file."
            )

        params = {
            "api_key": self.api_key,
            "query": query,
            "dataType": "Foundation",
            "pageSize": 1,
            "sortBy": "dataType.keyword",
            "sortOrder": "asc",
        }
        logger.info(f"Fetching nutrition data for: {query}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(f"{self.base_url}/foods/search", params=params)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Food Data Central respondió con estado {e.response.status_code}")
            raise NutritionLookupError(
                f"Food Data Central API responded with status: {e.response.status_code}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error consultando Food Data Central: {e}")
            raise NutritionLookupError(str(e)) from e


def summarize_nutrients(food: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Extrae los nutrientes principales de un alimento de la respuesta de USDA.

    Returns:
        Lista de {"name", "value", "unit"} en el orden de KEY_NUTRIENTS.
    """
    if not isinstance(food, dict):
        return []
    nutrients = food.get("foodNutrients") or []

    summary = []
    for key_nutrient in KEY_NUTRIENTS:
        found = None
        for nutrient in nutrients:
            if not isinstance(nutrient, dict):
                continue
            nested = nutrient.get("nutrient") if isinstance(nutrient.get("nutrient"), dict) else {}
            nutrient_id = nutrient.get("nutrientId") or nested.get("id")
            if nutrient_id in key_nutrient["ids"]:
                found = nutrient
                break
        if found is None:
            continue
        nested = found.get("nutrient") if isinstance(found.get("nutrient"), dict) else {}
        summary.append({
            "name": key_nutrient["name"],
            "value": found.get("value") or found.get("amount") or 0,
            "unit": found.get("unitName") or nested.get("unitName") or key_nutrient["unit"],
        })
    return summary


def get_basic_nutrition_fallback(product_name: str) -> Optional[Dict[str, Any]]:
    """Datos básicos para algunos alimentos comunes, o None."""
    lowered = product_name.lower()
    for keyword, data in _BASIC_FALLBACK.items():
        if keyword in lowered:
            return data
    return None
