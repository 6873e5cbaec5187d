# backend/app/db/storage.py
"""
Almacenamiento clave/valor por sesión.

Hace el papel del localStorage del navegador: cada sesión de cliente tiene
sus propias claves ('cart', 'nutritionCache') con valores de texto (JSON).

Implementaciones:
- RedisStorage: persistencia real en Redis, con un prefijo por sesión.
- InMemoryStorage: diccionario en memoria con cuota opcional; se usa en
  desarrollo, en tests y para simular una cuota llena.
"""
import logging
import threading
from collections import OrderedDict
from typing import Dict, Optional

import redis

from app.core.config import Settings
from app.core.exceptions import StorageQuotaExceededError, StorageUnavailableError

logger = logging.getLogger(__name__)


class KeyValueStorage:
    """Interfaz mínima compartida por todos los almacenamientos."""

    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove_item(self, key: str) -> None:
        raise NotImplementedError


class InMemoryStorage(KeyValueStorage):
    """
    Almacenamiento en memoria.

    Si se indica `quota_bytes`, cualquier escritura que deje el total de
    claves + valores por encima de la cuota lanza StorageQuotaExceededError
    y no modifica nada.
    """

    def __init__(self, quota_bytes: Optional[int] = None):
        self.quota_bytes = quota_bytes
        self._data: Dict[str, str] = {}

    def _size_with(self, key: str, value: str) -> int:
        total = len(key.encode("utf-8")) + len(value.encode("utf-8"))
        for other_key, other_value in self._data.items():
            if other_key != key:
                total += len(other_key.encode("utf-8")) + len(other_value.encode("utf-8"))
        return total

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.quota_bytes is not None and self._size_with(key, value) > self.quota_bytes:
            raise StorageQuotaExceededError(
                f"Writing '{key}' would exceed the storage quota of {self.quota_bytes} bytes"
            )
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self):
        return list(self._data.keys())


class RedisStorage(KeyValueStorage):
    """
    Almacenamiento en Redis con un prefijo por sesión.

    Las claves se guardan como '{prefix}:{key}' y, si se indica `ttl_seconds`,
    caducan tras ese tiempo sin escrituras. Los errores de memoria de Redis
    (OOM) y los valores mayores que `max_value_bytes` se traducen a
    StorageQuotaExceededError; cualquier otro error de Redis a
    StorageUnavailableError.
    """

    def __init__(
        self,
        client: redis.Redis,
        prefix: str = "",
        max_value_bytes: Optional[int] = None,
        ttl_seconds: Optional[int] = None,
    ):
        self.client = client
        self.prefix = prefix
        self.max_value_bytes = max_value_bytes
        self.ttl_seconds = ttl_seconds

    def _key(self, key: str) -> str:
        return f"{self.prefix}:{key}" if self.prefix else key

    def get_item(self, key: str) -> Optional[str]:
        try:
            return self.client.get(self._key(key))
        except redis.RedisError as e:
            raise StorageUnavailableError(f"Error leyendo '{key}' de Redis: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        if self.max_value_bytes is not None and len(value.encode("utf-8")) > self.max_value_bytes:
            raise StorageQuotaExceededError(
                f"Value for '{key}' exceeds {self.max_value_bytes} bytes"
            )
        try:
            self.client.set(self._key(key), value, ex=self.ttl_seconds)
        except redis.ResponseError as e:
            if str(e).startswith("OOM"):
                raise StorageQuotaExceededError(str(e)) from e
            raise StorageUnavailableError(f"Error guardando '{key}' en Redis: {e}") from e
        except redis.RedisError as e:
            raise StorageUnavailableError(f"Redis no disponible: {e}") from e

    def remove_item(self, key: str) -> None:
        try:
            self.client.delete(self._key(key))
        except redis.RedisError as e:
            raise StorageUnavailableError(f"Error borrando '{key}' de Redis: {e}") from e


# ========================================
# FÁBRICA
# ========================================

# Conexión a Redis (se manejará de forma lazy)
_redis_client: Optional[redis.Redis] = None

# Almacenes en memoria por namespace, para que sobrevivan entre peticiones.
# Se descartan los menos usados al pasar de MEMORY_STORAGE_MAX_SESSIONS.
_memory_stores: "OrderedDict[str, InMemoryStorage]" = OrderedDict()
_memory_stores_lock = threading.Lock()


def _get_redis_client(settings: Settings) -> redis.Redis:
    """Inicializa y devuelve el cliente de Redis."""
    global _redis_client
    if _redis_client is None:
        _redis_client = redis.Redis(
            host=settings.REDIS_HOST,
            port=settings.REDIS_PORT,
            db=settings.REDIS_DB,
            decode_responses=True,
        )
    return _redis_client


def _get_memory_storage(settings: Settings, namespace: str) -> InMemoryStorage:
    with _memory_stores_lock:
        if namespace in _memory_stores:
            _memory_stores.move_to_end(namespace)
            return _memory_stores[namespace]

        storage = InMemoryStorage(settings.MEMORY_STORAGE_QUOTA_BYTES)
        _memory_stores[namespace] = storage
        while len(_memory_stores) > max(settings.MEMORY_STORAGE_MAX_SESSIONS, 1):
            evicted, _ = _memory_stores.popitem(last=False)
            logger.info(f"Sesión en memoria descartada: {evicted}")
        return storage


def create_storage(settings: Settings, namespace: str) -> KeyValueStorage:
    """Devuelve el almacenamiento de una sesión según STORAGE_BACKEND."""
    backend = settings.STORAGE_BACKEND.lower()
    if backend == "memory":
        return _get_memory_storage(settings, namespace)
    if backend == "redis":
        return RedisStorage(
            _get_redis_client(settings),
            prefix=f"{settings.STORAGE_KEY_PREFIX}:{namespace}",
            max_value_bytes=settings.STORAGE_MAX_VALUE_BYTES,
            ttl_seconds=settings.STORAGE_TTL_SECONDS,
        )
    raise ValueError(f"STORAGE_BACKEND desconocido: {settings.STORAGE_BACKEND}")


def reset_memory_storage() -> None:
    """Vacía los almacenes en memoria (útil en tests)."""
    with _memory_stores_lock:
        _memory_stores.clear()
