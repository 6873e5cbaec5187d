# backend/app/services/product_service.py

"""
Capa de servicios para el catálogo de productos.

El catálogo vive en un fichero JSON ({"products": [...]}) que mantiene el
equipo de la tienda. Este servicio lo lee, lo valida con los esquemas
Pydantic y prepara los productos para añadirlos al carrito.

Responsabilidades principales:
- Lectura y validación del catálogo
- Filtro de productos populares (portada)
- Búsqueda de un producto por id
- Conversión de producto de catálogo a producto de carrito, parseando el
  precio una sola vez
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from app.core.config import settings
from app.core.exceptions import ProductNotFoundError
from app.core.pricing import parse_price
from app.schemas.product_schema import ProductResponse

# Configurar logger
logger = logging.getLogger(__name__)


class ProductService:
    """
    Servicio para operaciones de negocio relacionadas con productos.
    """

    def __init__(self, products_file: Optional[Union[str, Path]] = None):
        self.products_file = Path(products_file) if products_file is not None else settings.PRODUCTS_FILE

    # ========================================
    # LECTURA DEL CATÁLOGO
    # ========================================

    def load_products(self) -> List[ProductResponse]:
        """
        Lee y valida el catálogo completo.

        Raises:
            OSError / ValueError: si el fichero no se puede leer o no es JSON válido.
        """
        with open(self.products_file, "r", encoding="utf-8") as f:
            raw = json.load(f)

        products = []
        for entry in raw.get("products", []):
            try:
                products.append(ProductResponse.model_validate(entry))
            except ValidationError as e:
                logger.warning(f"Producto inválido en el catálogo, se ignora: {e}")
        return products

    def load_products_or_empty(self) -> List[ProductResponse]:
        """Como load_products, pero devuelve una lista vacía si falla."""
        try:
            return self.load_products()
        except (OSError, ValueError) as e:
            logger.error(f"Error leyendo el catálogo de productos: {e}")
            return []

    # ========================================
    # OPERACIONES DE CONSULTA
    # ========================================

    def list_products(self, popular_only: bool = False) -> List[ProductResponse]:
        products = self.load_products()
        if popular_only:
            return [p for p in products if p.popular]
        return products

    def get_product(self, product_id: Union[int, str]) -> ProductResponse:
        """
        Busca un producto por id. Compara como texto para que 1 y "1"
        sean el mismo producto.
        """
        wanted = str(product_id).strip()
        for product in self.load_products():
            if str(product.id) == wanted:
                return product
        raise ProductNotFoundError(product_id)

    # ========================================
    # CONVERSIONES
    # ========================================

    @staticmethod
    def to_cart_product(product: ProductResponse) -> Dict[str, Any]:
        """Producto listo para CartStore.add(), con el precio ya parseado."""
        return {
            "id": str(product.id),
            "name": product.name,
            "price": product.price,
            "unit_price": parse_price(product.price),
            "image": product.image,
        }

    @staticmethod
    def format_for_prompt(products: List[ProductResponse]) -> str:
        """Lista de productos para el prompt del asistente: '- Nombre (precio, cantidad)'."""
        lines = []
        for p in products:
            extra = f", {p.quantity}" if p.quantity else ""
            lines.append(f"- {p.name} ({p.price}{extra})")
        return "\n".join(lines)


# Instancia singleton del servicio
product_service = ProductService()
