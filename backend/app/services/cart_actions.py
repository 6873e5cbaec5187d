# backend/app/services/cart_actions.py
"""
Punto único de entrada para las acciones sobre el carrito.

Todos los botones de "añadir al carrito", los cambios de cantidad y las
eliminaciones pasan por aquí, de modo que solo el CartActionDispatcher
llama a las operaciones de escritura del CartStore.
"""
import logging

from app.services.cart_service import CartStore
from app.services.cart_view import CartIntent

logger = logging.getLogger(__name__)


class CartActionDispatcher:

    def __init__(self, store: CartStore):
        self.store = store

    def dispatch(self, intent: CartIntent) -> bool:
        """
        Aplica una intención sobre el carrito.
        Devuelve True si el carrito ha cambiado.
        """
        if intent.action == "add":
            quantity = intent.quantity if intent.quantity is not None else 1
            return self.store.add(intent.product, quantity)
        if intent.action == "remove":
            return self.store.remove(intent.product_id)
        if intent.action == "set_quantity":
            return self.store.set_quantity(intent.product_id, intent.quantity)
        if intent.action == "clear":
            self.store.clear()
            return True

        logger.error(f"Acción de carrito desconocida: '{intent.action}'")
        return False

    def add_product(self, product, quantity: int = 1) -> bool:
        return self.dispatch(CartIntent(action="add", product=product, quantity=quantity))
