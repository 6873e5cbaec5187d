# backend/app/api/v1/endpoints/cart.py
"""
Este archivo contiene los endpoints para el carrito de compras.

Se encarga de gestionar las operaciones de agregar productos, cambiar
cantidades, eliminar productos, vaciar el carrito y obtener su contenido
renderizado. Todas las escrituras pasan por el CartActionDispatcher.
"""

from fastapi import APIRouter, Depends, HTTPException, status
import logging

from app.api import deps
from app.core.exceptions import ProductNotFoundError
from app.schemas.cart_schema import Cart, CartItemCreate, CartQuantityUpdate, CartSummary
from app.services.cart_actions import CartActionDispatcher
from app.services.cart_view import CartView
from app.services.product_service import ProductService

logger = logging.getLogger(__name__)

# Router para el carrito de compras
router = APIRouter()


@router.get("", response_model=Cart)
def get_cart(cart_view: CartView = Depends(deps.get_cart_view)):
    """
    Obtiene el contenido renderizado del carrito de la sesión.
    """
    return cart_view.render()


@router.get("/summary", response_model=CartSummary)
def get_cart_summary(cart_view: CartView = Depends(deps.get_cart_view)):
    """
    Subtotal, gastos de envío y total del pedido.
    """
    return cart_view.render_summary()


@router.post("/items", status_code=status.HTTP_201_CREATED, response_model=Cart)
def add_item_to_cart(
    item: CartItemCreate,
    cart_view: CartView = Depends(deps.get_cart_view),
    dispatcher: CartActionDispatcher = Depends(deps.get_cart_dispatcher),
    products: ProductService = Depends(deps.get_product_service),
):
    """
    Añade un producto del catálogo al carrito.
    Si el producto ya está en el carrito se suma la cantidad.
    """
    try:
        product = products.get_product(item.product_id)
    except ProductNotFoundError:
        raise HTTPException(status_code=404, detail="Product not found")
    except (OSError, ValueError) as e:
        logger.error(f"❌ ERROR: No se pudo leer el catálogo: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch product data. Please try again later.")

    if not dispatcher.add_product(products.to_cart_product(product), item.quantity):
        raise HTTPException(status_code=400, detail="Product could not be added to the cart")

    return cart_view.render()


@router.put("/items/{product_id}", response_model=Cart)
def update_item_quantity(
    product_id: str,
    update: CartQuantityUpdate,
    cart_view: CartView = Depends(deps.get_cart_view),
):
    """
    Cambia la cantidad de una línea. Con 0 o menos se elimina la línea.
    """
    if cart_view.store.get_item(product_id) is None:
        raise HTTPException(status_code=404, detail="Product not in cart")
    cart_view.quantity_changed(product_id, update.quantity)
    return cart_view.render()


@router.delete("/items/{product_id}", response_model=Cart)
def remove_item_from_cart(
    product_id: str,
    cart_view: CartView = Depends(deps.get_cart_view),
):
    """
    Elimina un producto del carrito, sea cual sea su cantidad.
    Si el producto no está en el carrito no hace nada.
    """
    cart_view.remove_clicked(product_id)
    return cart_view.render()


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def clear_cart(cart_view: CartView = Depends(deps.get_cart_view)):
    """
    Vacía completamente el carrito (p. ej. al completar un pedido).
    """
    cart_view.clear_clicked()
