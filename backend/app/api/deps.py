# backend/app/api/deps.py
"""
Módulo de dependencias para FastAPI.

Este archivo centraliza todas las dependencias que pueden ser inyectadas
en los endpoints de la API. Sigue el patrón de Dependency Injection de FastAPI
para promover código reutilizable y testeable.

La sesión del cliente se identifica con la cabecera X-Session-Id o con la
cookie de sesión que se emite en la primera petición. Cada sesión
tiene su propio almacenamiento clave/valor, y con él su carrito y su caché
de nutrición.
"""

import asyncio
import logging
import uuid
from typing import Optional

from fastapi import Depends, Header, Request, Response

from app.core.config import Settings, settings
from app.db.storage import KeyValueStorage, create_storage
from app.services.cart_actions import CartActionDispatcher
from app.services.cart_service import CartStore
from app.services.cart_view import CartView
from app.services.chat_service import ChatService
from app.services.nutrition_cache import NutritionCache
from app.services.nutrition_service import FoodDataCentralClient
from app.services.product_service import ProductService, product_service

logger = logging.getLogger(__name__)


def get_settings() -> Settings:
    """
    Dependencia de FastAPI para obtener el objeto de configuración.
    """
    return settings


def get_session_id(
    request: Request,
    response: Response,
    x_session_id: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
) -> str:
    """
    Identificador de la sesión del cliente.

    Se usa la cabecera X-Session-Id si viene; si no, la cookie de sesión.
    Un cliente sin ninguna de las dos recibe un id nuevo en la cookie, así
    que nunca se comparte el carrito entre clientes distintos.
    """
    if x_session_id and x_session_id.strip():
        return x_session_id.strip()

    cookie_id = request.cookies.get(settings.SESSION_COOKIE_NAME, "").strip()
    if cookie_id:
        return cookie_id

    session_id = uuid.uuid4().hex
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        session_id,
        max_age=settings.STORAGE_TTL_SECONDS,
        httponly=True,
        samesite="lax",
    )
    logger.info(f"Nueva sesión de cliente: {session_id}")
    return session_id


def get_storage(
    session_id: str = Depends(get_session_id),
    settings: Settings = Depends(get_settings),
) -> KeyValueStorage:
    """Almacenamiento clave/valor de la sesión."""
    return create_storage(settings, session_id)


def get_product_service() -> ProductService:
    return product_service


def get_cart_store(
    storage: KeyValueStorage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
) -> CartStore:
    """
    Dependencia para obtener el carrito de la sesión, ya cargado.
    """
    store = CartStore(storage, storage_key=settings.CART_STORAGE_KEY)
    store.load()
    return store


def get_cart_dispatcher(store: CartStore = Depends(get_cart_store)) -> CartActionDispatcher:
    return CartActionDispatcher(store)


def get_cart_view(
    dispatcher: CartActionDispatcher = Depends(get_cart_dispatcher),
    settings: Settings = Depends(get_settings),
) -> CartView:
    """Vista del carrito conectada a su dispatcher."""
    return CartView(
        dispatcher.store,
        currency=settings.CURRENCY_SUFFIX,
        delivery_fee=settings.DELIVERY_FEE,
        on_intent=dispatcher.dispatch,
    )


def get_nutrition_client(settings: Settings = Depends(get_settings)) -> FoodDataCentralClient:
    return FoodDataCentralClient(
        api_key=settings.FDC_API_KEY,
        base_url=settings.FDC_BASE_URL,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )


async def get_nutrition_cache(
    storage: KeyValueStorage = Depends(get_storage),
    client: FoodDataCentralClient = Depends(get_nutrition_client),
    settings: Settings = Depends(get_settings),
) -> NutritionCache:
    """
    Caché de nutrición de la sesión, con Food Data Central como origen.
    La carga desde el almacenamiento se hace fuera del event loop.
    """
    cache = NutritionCache(
        storage,
        fetcher=client.search_foods,
        storage_key=settings.NUTRITION_CACHE_STORAGE_KEY,
        expiration_seconds=settings.NUTRITION_CACHE_EXPIRATION_SECONDS,
    )
    await asyncio.to_thread(cache.load)
    return cache


# El cliente de OpenAI se crea una sola vez (lazy)
_chat_service: Optional[ChatService] = None


def get_chat_service(products: ProductService = Depends(get_product_service)) -> ChatService:
    global _chat_service
    if _chat_service is None:
        _chat_service = ChatService(products)
    return _chat_service
