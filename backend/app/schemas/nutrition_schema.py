# backend/app/schemas/nutrition_schema.py
"""
Esquemas Pydantic para la información nutricional de un producto.
"""

from pydantic import BaseModel
from typing import List, Optional, Union


class NutrientValue(BaseModel):
    name: str
    value: Union[int, float]
    unit: str


class ProductNutrition(BaseModel):
    """Nutrientes principales de un producto para su ficha."""
    product_id: str
    product_name: str
    nutrients: List[NutrientValue]
    source: Optional[str] = None
    fallback: bool = False
