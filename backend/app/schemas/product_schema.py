# backend/app/schemas/product_schema.py
"""
Esquemas Pydantic para los productos del catálogo.

El catálogo se lee de un fichero JSON con la forma {"products": [...]}.
El precio se mantiene como texto de presentación ("45 kr / kg"); el valor
numérico se calcula al añadirlo al carrito.
"""

from typing import Optional, List, Union
from pydantic import BaseModel, ConfigDict, Field

# ========================================
# ESQUEMA BASE
# ========================================

class ProductBase(BaseModel):
    """Propiedades comunes compartidas entre esquemas de producto."""
    name: str = Field(..., min_length=1)
    price: Union[str, int, float]
    quantity: Optional[str] = None  # Tamaño del paquete, ej: "500 g"
    image: Optional[str] = None
    popular: bool = False
    description: Optional[str] = None
    farm: Optional[str] = None
    cultivation: Optional[str] = None


# ========================================
# ESQUEMAS DE RESPUESTA
# ========================================

class ProductResponse(ProductBase):
    """Producto tal y como se expone en la API."""
    id: Union[int, str]

    model_config = ConfigDict(from_attributes=True, extra="allow")


class ProductListResponse(BaseModel):
    """Mantiene la forma {"products": [...]} que espera el frontend."""
    products: List[ProductResponse]
