# backend/app/services/cart_view.py
"""
Vista del carrito.

Convierte el estado de un CartStore en filas listas para mostrar y en el
subtotal formateado ("120 kr"). No modifica el carrito: las acciones del
usuario (quitar, cambiar cantidad) se emiten hacia arriba como CartIntent
para que el CartActionDispatcher las aplique.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Union

from app.core.pricing import format_price
from app.schemas.cart_schema import Cart, CartRow, CartSummary
from app.services.cart_service import CartStore

logger = logging.getLogger(__name__)

EMPTY_CART_MESSAGE = "Your cart is empty"


@dataclass(frozen=True)
class CartIntent:
    """Acción solicitada por el usuario desde la interfaz."""
    action: str  # "add" | "remove" | "set_quantity" | "clear"
    product_id: Optional[Union[int, str]] = None
    quantity: Optional[int] = None
    product: Optional[object] = None


class CartView:
    """
    Renderiza un CartStore. Se vuelve a renderizar entero en cada
    notificación del store mientras está conectada (attach/detach).
    """

    def __init__(
        self,
        store: CartStore,
        currency: str = "kr",
        delivery_fee: Union[int, float] = 0,
        on_intent: Optional[Callable[[CartIntent], None]] = None,
        on_render: Optional[Callable[[Cart], None]] = None,
    ):
        self.store = store
        self.currency = currency
        self.delivery_fee = delivery_fee
        self.on_intent = on_intent
        self.on_render = on_render
        self.last_render: Optional[Cart] = None
        self._unsubscribe: Optional[Callable[[], None]] = None

    def attach(self) -> Cart:
        """Se suscribe al store y hace el primer renderizado."""
        if self._unsubscribe is None:
            self._unsubscribe = self.store.subscribe(self.refresh)
        return self.refresh()

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def refresh(self) -> Cart:
        self.last_render = self.render()
        if self.on_render is not None:
            self.on_render(self.last_render)
        return self.last_render

    # ========================================
    # RENDERIZADO
    # ========================================

    def render(self) -> Cart:
        subtotal = self.store.get_subtotal()
        total_quantity = self.store.get_total_quantity()

        if self.store.is_empty():
            return Cart(
                is_empty=True,
                items=[],
                empty_message=EMPTY_CART_MESSAGE,
                subtotal=subtotal,
                subtotal_text=format_price(subtotal, self.currency),
                total_quantity=0,
                badge_text="0",
            )

        rows = [
            CartRow(
                product_id=item.product_id,
                name=item.name,
                display_price=str(item.display_price),
                image=item.image,
                quantity=item.quantity,
                line_total=item.line_total,
                line_total_text=format_price(item.line_total, self.currency),
            )
            for item in self.store.get_items()
        ]
        return Cart(
            is_empty=False,
            items=rows,
            subtotal=subtotal,
            subtotal_text=format_price(subtotal, self.currency),
            total_quantity=total_quantity,
            badge_text=str(total_quantity),
        )

    def badge_text(self) -> str:
        """Contador del icono del carrito en la barra de navegación."""
        return str(self.store.get_total_quantity())

    def render_summary(self) -> CartSummary:
        """Resumen del pedido tal y como aparece en el checkout."""
        subtotal = self.store.get_subtotal()
        total = subtotal + self.delivery_fee
        return CartSummary(
            subtotal=subtotal,
            subtotal_text=format_price(subtotal, self.currency),
            delivery_fee=self.delivery_fee,
            delivery_fee_text=format_price(self.delivery_fee, self.currency),
            total=total,
            total_text=format_price(total, self.currency),
        )

    # ========================================
    # INTENCIONES DEL USUARIO
    # ========================================

    def _emit(self, intent: CartIntent) -> None:
        if self.on_intent is None:
            logger.warning(f"CartView sin destino para la acción '{intent.action}'")
            return
        self.on_intent(intent)

    def remove_clicked(self, product_id: Union[int, str]) -> None:
        self._emit(CartIntent(action="remove", product_id=product_id))

    def quantity_changed(self, product_id: Union[int, str], quantity: int) -> None:
        self._emit(CartIntent(action="set_quantity", product_id=product_id, quantity=quantity))

    def clear_clicked(self) -> None:
        self._emit(CartIntent(action="clear"))
