# backend/app/services/nutrition_cache.py
"""
Caché de información nutricional.

Reduce las llamadas a la API de nutrición guardando las respuestas correctas
en el almacenamiento de la sesión, con una marca de tiempo por entrada.

Características principales:
- Claves normalizadas (nombre del producto en minúsculas y sin espacios)
- Expiración de las entradas a las 24 horas
- Las entradas caducadas se usan como respaldo si la API falla
- Si el almacenamiento se llena se elimina la mitad más antigua de la caché
"""
import asyncio
import json
import logging
import math
import time
from typing import Any, Awaitable, Callable, Dict, Optional

from app.core.exceptions import (
    NutritionNotFoundError,
    StorageError,
    StorageQuotaExceededError,
)
from app.db.storage import KeyValueStorage

logger = logging.getLogger(__name__)

DEFAULT_EXPIRATION_SECONDS = 24 * 60 * 60

Fetcher = Callable[[str], Awaitable[Any]]


def normalize_key(name: str) -> str:
    return name.strip().lower()


def has_foods(data: Any) -> bool:
    """Comprueba que la respuesta contiene una lista de alimentos no vacía."""
    return isinstance(data, dict) and isinstance(data.get("foods"), list) and len(data["foods"]) > 0


class NutritionCache:
    """
    Caché con expiración delante de la consulta de nutrición.

    Cada entrada se guarda como {"data": ..., "timestamp": <segundos epoch>}.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        fetcher: Fetcher,
        storage_key: str = "nutritionCache",
        expiration_seconds: float = DEFAULT_EXPIRATION_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.storage = storage
        self.fetcher = fetcher
        self.storage_key = storage_key
        self.expiration_seconds = expiration_seconds
        self.clock = clock
        self.cache: Dict[str, Dict[str, Any]] = {}

    # ========================================
    # CARGA Y PERSISTENCIA
    # ========================================

    def load(self) -> None:
        """Carga la caché del almacenamiento o empieza con una vacía."""
        self.cache = {}
        try:
            raw = self.storage.get_item(self.storage_key)
        except StorageError as e:
            logger.error(f"Error cargando la caché de nutrición: {e}")
            return
        if raw is None:
            return

        try:
            stored = json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.error(f"Error decodificando la caché de nutrición: {e}")
            return
        if not isinstance(stored, dict):
            logger.error("La caché de nutrición persistida no es un objeto, se ignora")
            return

        for key, entry in stored.items():
            if not isinstance(entry, dict) or "data" not in entry:
                continue
            timestamp = entry.get("timestamp")
            if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
                continue
            self.cache[key] = {"data": entry["data"], "timestamp": timestamp}

    def _save(self) -> bool:
        """
        Guarda la caché. Si se supera la cuota se poda la mitad más antigua y
        se reintenta una vez; un segundo fallo solo se registra.
        """
        try:
            self.storage.set_item(self.storage_key, json.dumps(self.cache))
            return True
        except StorageQuotaExceededError as e:
            logger.warning(f"Caché de nutrición llena, se poda: {e}")
        except StorageError as e:
            logger.error(f"Error guardando la caché de nutrición: {e}")
            return False

        self.prune()
        try:
            self.storage.set_item(self.storage_key, json.dumps(self.cache))
            return True
        except StorageError as e:
            logger.error(f"No se pudo guardar la caché de nutrición tras podarla: {e}")
            return False

    def prune(self) -> int:
        """Elimina la mitad más antigua de las entradas (por timestamp)."""
        ordered = sorted(self.cache.items(), key=lambda kv: kv[1]["timestamp"])
        to_remove = math.ceil(len(ordered) / 2)
        for key, _ in ordered[:to_remove]:
            del self.cache[key]
        logger.info(f"Podadas {to_remove} entradas de la caché de nutrición")
        return to_remove

    def clear_cache(self) -> None:
        """Elimina toda la caché, en memoria y en el almacenamiento."""
        self.cache = {}
        try:
            self.storage.remove_item(self.storage_key)
        except StorageError as e:
            logger.error(f"Error borrando la caché de nutrición: {e}")
        logger.info("Caché de nutrición vaciada")

    # ========================================
    # CONSULTA
    # ========================================

    def is_fresh(self, name: str) -> bool:
        entry = self.cache.get(normalize_key(name))
        if entry is None:
            return False
        return self.clock() - entry["timestamp"] < self.expiration_seconds

    def peek(self, name: str) -> Optional[Any]:
        """Devuelve el dato guardado, fresco o caducado, sin llamar a la API."""
        entry = self.cache.get(normalize_key(name))
        return entry["data"] if entry is not None else None

    async def get_nutrition(self, name: str, force_refresh: bool = False) -> Optional[Any]:
        """
        Devuelve los datos de nutrición de un producto.

        1. Si hay una entrada fresca se devuelve sin llamar a la API
           (salvo force_refresh).
        2. Si no, se consulta la API y se guarda el resultado.
        3. Si la API falla se devuelve la entrada guardada aunque esté
           caducada, o None si no hay ninguna.
        """
        if not isinstance(name, str) or not name.strip():
            logger.warning("Nombre de producto vacío, no se consulta la nutrición")
            return None

        key = normalize_key(name)
        if not force_refresh and self.is_fresh(key):
            logger.info(f"Usando datos de nutrición en caché para '{name}'")
            return self.cache[key]["data"]

        logger.info(f"Consultando datos de nutrición para '{name}'")
        try:
            data = await self.fetcher(name.strip())
            if not has_foods(data):
                raise NutritionNotFoundError(f"Sin alimentos para '{name}'")
        except Exception as e:
            logger.error(f"Error consultando datos de nutrición para '{name}': {e}")
            if key in self.cache:
                logger.info(f"Usando caché caducada como respaldo para '{name}'")
                return self.cache[key]["data"]
            return None

        self.cache[key] = {"data": data, "timestamp": self.clock()}
        await asyncio.to_thread(self._save)
        return data
