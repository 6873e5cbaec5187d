# backend/app/core/exceptions.py
"""
Excepciones propias de la aplicación.

Las capas de servicio lanzan estas excepciones y la capa de API las traduce
a códigos HTTP. El carrito y la caché de nutrición las capturan internamente
y nunca las dejan salir de sus operaciones públicas.
"""


class FramError(Exception):
    """Excepción base de la aplicación."""


# ========================================
# ALMACENAMIENTO
# ========================================

class StorageError(FramError):
    """Fallo al leer o escribir en el almacenamiento clave/valor."""


class StorageQuotaExceededError(StorageError):
    """La escritura supera la cuota de espacio disponible."""


class StorageUnavailableError(StorageError):
    """El almacenamiento no está disponible (conexión caída, timeout...)."""


# ========================================
# CATÁLOGO
# ========================================

class ProductNotFoundError(FramError):
    """El producto solicitado no existe en el catálogo."""

    def __init__(self, product_id):
        self.product_id = product_id
        super().__init__(f"Product {product_id} not found")


# ========================================
# SERVICIOS EXTERNOS
# ========================================

class NutritionLookupError(FramError):
    """Fallo al consultar la API de nutrición."""


class NutritionNotConfiguredError(NutritionLookupError):
    """Falta la API key de Food Data Central."""


class NutritionNotFoundError(NutritionLookupError):
    """La respuesta no contiene ningún alimento."""


class ChatServiceError(FramError):
    """Fallo al llamar al proveedor del chat."""


class ChatNotConfiguredError(ChatServiceError):
    """Falta la API key de OpenAI."""
