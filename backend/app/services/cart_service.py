# backend/app/services/cart_service.py
"""
Servicio de Carrito de Compras para la aplicación.

CartStore es el único que modifica y persiste el estado del carrito de una
sesión. Cada producto ocupa una sola línea: añadir un producto que ya está
en el carrito incrementa su cantidad en lugar de duplicar la línea.

Cada operación de escritura (add, remove, set_quantity, clear) actualiza el
estado en memoria, lo persiste y notifica a los suscriptores antes de
retornar. Ninguna operación pública lanza excepciones: los errores de
validación y de persistencia se registran en el log y se ignoran.
"""
import json
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from pydantic import ValidationError

from app.core.exceptions import StorageError
from app.core.pricing import parse_price
from app.db.storage import KeyValueStorage
from app.schemas.cart_schema import CartLineItem

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


def _product_field(product: Any, name: str) -> Any:
    """Lee un campo de un producto, sea un dict o un modelo Pydantic."""
    if isinstance(product, Mapping):
        return product.get(name)
    return getattr(product, name, None)


def _normalize_id(product_id: Any) -> Optional[str]:
    if product_id is None or isinstance(product_id, bool):
        return None
    normalized = str(product_id).strip()
    return normalized or None


class CartStore:
    """
    Estado autoritativo del carrito de una sesión.
    """

    def __init__(self, storage: KeyValueStorage, storage_key: str = "cart"):
        self.storage = storage
        self.storage_key = storage_key
        self._items: Dict[str, CartLineItem] = {}
        self._listeners: List[Listener] = []

    # ========================================
    # CARGA Y PERSISTENCIA
    # ========================================

    def load(self) -> None:
        """
        Hidrata el carrito desde el almacenamiento.

        Si no hay datos o están corruptos se empieza con un carrito vacío.
        Las entradas sin id o sin nombre se descartan, las entradas repetidas
        de un mismo producto se consolidan, y si algo ha cambiado se vuelve a
        guardar el estado limpio.
        """
        self._items = {}
        try:
            raw = self.storage.get_item(self.storage_key)
        except StorageError as e:
            logger.error(f"Error cargando el carrito: {e}")
            return

        if raw is None:
            return

        try:
            entries = json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.error(f"Error decodificando el carrito, se reinicia vacío: {e}")
            self._persist()
            return

        if not isinstance(entries, list):
            logger.error("El carrito persistido no es una lista, se reinicia vacío")
            self._persist()
            return

        needs_save = False
        for entry in entries:
            item = self._restore_entry(entry)
            if item is None:
                needs_save = True
                continue
            existing = self._items.get(item.product_id)
            if existing is not None:
                existing.quantity += item.quantity
                needs_save = True
            else:
                if not isinstance(entry.get("priceValue"), (int, float)) or "quantity" not in entry:
                    needs_save = True
                self._items[item.product_id] = item

        if needs_save:
            logger.info(f"Carrito '{self.storage_key}' normalizado tras la carga, se vuelve a guardar")
            self._persist()

    def _restore_entry(self, entry: Any) -> Optional[CartLineItem]:
        if not isinstance(entry, dict):
            return None
        product_id = _normalize_id(entry.get("id"))
        name = entry.get("name")
        if product_id is None or not isinstance(name, str) or not name.strip():
            logger.warning(f"Entrada de carrito descartada por datos incompletos: {entry}")
            return None

        quantity = entry.get("quantity")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            quantity = 1

        price = entry.get("price", "")
        if isinstance(price, bool) or not isinstance(price, (str, int, float)):
            price = ""
        unit_price = entry.get("priceValue")
        if isinstance(unit_price, bool) or not isinstance(unit_price, (int, float)):
            unit_price = parse_price(price)

        try:
            return CartLineItem(
                product_id=product_id,
                name=name,
                display_price=price,
                unit_price=unit_price,
                image=entry.get("image") if isinstance(entry.get("image"), str) else None,
                quantity=quantity,
            )
        except ValidationError as e:
            logger.warning(f"Entrada de carrito descartada: {e}")
            return None

    def persisted_snapshot(self) -> str:
        """Representación JSON del carrito, tal y como se guarda."""
        return json.dumps(
            [item.model_dump(by_alias=True) for item in self._items.values()],
            ensure_ascii=False,
        )

    def _persist(self) -> bool:
        """
        Guarda el carrito. Si falla se reintenta una vez (sin podar nada);
        si vuelve a fallar el estado en memoria sigue siendo el válido.
        """
        payload = self.persisted_snapshot()
        try:
            self.storage.set_item(self.storage_key, payload)
            return True
        except StorageError as e:
            logger.warning(f"Error guardando el carrito, reintentando: {e}")

        try:
            self.storage.set_item(self.storage_key, payload)
            return True
        except StorageError as e:
            logger.error(f"No se pudo guardar el carrito, se mantiene solo en memoria: {e}")
            return False

    # ========================================
    # SUSCRIPCIONES
    # ========================================

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Registra un callback que se invoca tras cada cambio del carrito.
        Devuelve una función para cancelar la suscripción.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception as e:
                logger.error(f"Error en un suscriptor del carrito: {e}")

    def _commit(self) -> None:
        self._persist()
        self._notify()

    # ========================================
    # OPERACIONES DE ESCRITURA
    # ========================================

    def add(self, product: Any, quantity: int = 1) -> bool:
        """
        Añade un producto al carrito.
        Si el producto ya existe, incrementa su cantidad.

        Devuelve False (sin cambios) si el producto no tiene id o nombre,
        o si la cantidad no es un entero positivo.
        """
        product_id = _normalize_id(_product_field(product, "id"))
        name = _product_field(product, "name")
        if product_id is None or not isinstance(name, str) or not name.strip():
            logger.error(f"Producto inválido, no se añade al carrito: {product!r}")
            return False

        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            logger.warning(f"Cantidad inválida ({quantity!r}) para el producto {product_id}, se ignora")
            return False

        existing = self._items.get(product_id)
        if existing is not None:
            existing.quantity += quantity
        else:
            price = _product_field(product, "price")
            if isinstance(price, bool) or not isinstance(price, (str, int, float)):
                price = ""
            unit_price = _product_field(product, "unit_price")
            if isinstance(unit_price, bool) or not isinstance(unit_price, (int, float)):
                unit_price = parse_price(price)
            image = _product_field(product, "image")
            self._items[product_id] = CartLineItem(
                product_id=product_id,
                name=name,
                display_price=price,
                unit_price=unit_price,
                image=image if isinstance(image, str) else None,
                quantity=quantity,
            )

        logger.info(f"🛒 CARRITO: +{quantity} x '{name}' ({product_id})")
        self._commit()
        return True

    def remove(self, product_id: Union[int, str]) -> bool:
        """
        Elimina la línea completa de un producto, sea cual sea su cantidad.
        Si el producto no está en el carrito no hace nada ni notifica.
        """
        key = _normalize_id(product_id)
        if key is None or key not in self._items:
            return False
        del self._items[key]
        logger.info(f"🗑️ CARRITO: eliminado el producto {key}")
        self._commit()
        return True

    def set_quantity(self, product_id: Union[int, str], quantity: int) -> bool:
        """
        Fija la cantidad de una línea. Con 0 o menos equivale a remove().
        """
        key = _normalize_id(product_id)
        if key is None or key not in self._items:
            return False
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            logger.warning(f"Cantidad inválida ({quantity!r}) para el producto {key}, se ignora")
            return False
        if quantity <= 0:
            return self.remove(key)
        self._items[key].quantity = quantity
        self._commit()
        return True

    def clear(self) -> None:
        """Vacía completamente el carrito."""
        self._items = {}
        logger.info(f"🧹 CARRITO: vaciado '{self.storage_key}'")
        self._commit()

    # ========================================
    # LECTURAS
    # ========================================

    def get_items(self) -> List[CartLineItem]:
        """Copia de las líneas del carrito, en orden de inserción."""
        return [item.model_copy() for item in self._items.values()]

    def get_item(self, product_id: Union[int, str]) -> Optional[CartLineItem]:
        key = _normalize_id(product_id)
        item = self._items.get(key) if key is not None else None
        return item.model_copy() if item is not None else None

    def get_subtotal(self) -> Union[int, float]:
        return sum(item.unit_price * item.quantity for item in self._items.values())

    def get_total_quantity(self) -> int:
        return sum(item.quantity for item in self._items.values())

    def is_empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)
