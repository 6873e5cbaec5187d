# backend/app/core/config.py
"""
Este archivo contiene la configuración de la aplicación.
"""

from pydantic_settings import BaseSettings
from typing import List, Optional
from pathlib import Path
import os

# Apunta al directorio 'backend/'
BASE_DIR = Path(__file__).resolve().parent.parent.parent

class Settings(BaseSettings):
    """
    Configuración de la aplicación usando Pydantic BaseSettings.
    Variables sensibles desde .env, defaults seguros para el resto.
    """
    # Configuración general del proyecto
    BASE_DIR: Path = BASE_DIR
    API_PREFIX_STR: str = "/api"
    PROJECT_NAME: str = "Fram API"
    PROJECT_VERSION: str = "0.1.0"

    # Almacenamiento clave/valor por sesión (equivalente al localStorage del navegador)
    STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", "redis")  # "redis" | "memory"
    REDIS_HOST: str = os.getenv("REDIS_HOST", "localhost")
    REDIS_PORT: int = int(os.getenv("REDIS_PORT", 6379))
    REDIS_DB: int = 0
    STORAGE_KEY_PREFIX: str = "fram"
    # Límite por valor, parecido a la cuota de 5 MB de localStorage
    STORAGE_MAX_VALUE_BYTES: Optional[int] = 5 * 1024 * 1024
    MEMORY_STORAGE_QUOTA_BYTES: Optional[int] = 5 * 1024 * 1024
    # Las sesiones inactivas caducan: TTL de las claves en Redis y máximo de
    # sesiones que se guardan en memoria
    STORAGE_TTL_SECONDS: Optional[int] = 30 * 24 * 60 * 60
    MEMORY_STORAGE_MAX_SESSIONS: int = 1000

    # Sesión del cliente: cabecera X-Session-Id o, si no viene, una cookie
    # que se emite en la primera petición
    SESSION_COOKIE_NAME: str = "fram_session"

    # Carrito
    CART_STORAGE_KEY: str = "cart"
    CURRENCY_SUFFIX: str = "kr"
    DELIVERY_FEE: int = 49

    # Caché de nutrición
    NUTRITION_CACHE_STORAGE_KEY: str = "nutritionCache"
    NUTRITION_CACHE_EXPIRATION_SECONDS: int = 24 * 60 * 60

    # OpenAI - Del .env (sensibles)
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = "gpt-3.5-turbo"
    OPENAI_MAX_TOKENS: int = 250
    OPENAI_TEMPERATURE: float = 0.7

    # USDA Food Data Central - Del .env (sensibles)
    FDC_API_KEY: Optional[str] = None
    FDC_BASE_URL: str = "https://api.nal.usda.gov/fdc/v1"
    HTTP_TIMEOUT_SECONDS: float = 10.0

    # Catálogo y ficheros estáticos
    PRODUCTS_FILE: Path = BASE_DIR / "data" / "products.json"
    STATIC_DIR: Optional[Path] = None

    # Logging - Defaults seguros
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Server - Del .env con defaults
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    CORS_ORIGINS: List[str] = ["*"]

    class Config:
        env_file = ".env"
        case_sensitive = False

# Instancia global de la configuración
settings = Settings()
