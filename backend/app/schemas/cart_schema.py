# backend/app/schemas/cart_schema.py
"""
Esquemas Pydantic para la gestión del carrito de la compra.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Union

# ========================================
# LÍNEA DE CARRITO (ESTADO PERSISTIDO)
# ========================================

class CartLineItem(BaseModel):
    """
    Una línea consolidada del carrito: un único registro por producto.

    Se persiste con los nombres de campo del frontend
    (id, name, price, image, quantity, priceValue).
    """
    product_id: str = Field(..., alias="id")
    name: str = Field(..., min_length=1)
    display_price: Union[str, int, float] = Field("", alias="price")
    unit_price: Union[int, float] = Field(0, alias="priceValue")
    image: Optional[str] = None
    quantity: int = Field(1, ge=1)

    model_config = ConfigDict(populate_by_name=True)

    @property
    def line_total(self) -> Union[int, float]:
        return self.unit_price * self.quantity


# ========================================
# PETICIONES
# ========================================

class CartItemCreate(BaseModel):
    """Esquema para añadir un item al carrito."""
    product_id: Union[int, str]
    quantity: int = Field(1, ge=1)


class CartQuantityUpdate(BaseModel):
    """Nueva cantidad de una línea. 0 o menos elimina la línea."""
    quantity: int


# ========================================
# RESPUESTAS (VISTA DEL CARRITO)
# ========================================

class CartRow(BaseModel):
    """Fila de la vista del carrito."""
    product_id: str
    name: str
    display_price: str
    image: Optional[str] = None
    quantity: int
    line_total: Union[int, float]
    line_total_text: str


class Cart(BaseModel):
    """Esquema que representa el estado renderizado del carrito."""
    is_empty: bool
    items: List[CartRow]
    empty_message: Optional[str] = None
    subtotal: Union[int, float]
    subtotal_text: str
    total_quantity: int
    badge_text: str


class CartSummary(BaseModel):
    """Resumen del pedido: subtotal, gastos de envío y total."""
    subtotal: Union[int, float]
    subtotal_text: str
    delivery_fee: Union[int, float]
    delivery_fee_text: str
    total: Union[int, float]
    total_text: str
