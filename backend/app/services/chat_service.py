# backend/app/services/chat_service.py
"""
Servicio de chat con el asistente de Fram.

Reenvía el mensaje del usuario a OpenAI junto con un prompt de sistema que
incluye el catálogo actual, para que el asistente pueda recomendar productos
y dar precios reales.
"""

import logging
from typing import Optional

from openai import AsyncOpenAI

from app.core.config import settings
from app.core.exceptions import ChatNotConfiguredError, ChatServiceError
from app.schemas.chat_schema import ChatResponse
from app.services.product_service import ProductService

logger = logging.getLogger(__name__)

SYSTEM_PROMPT_TEMPLATE = """
You are a helpful assistant for Fram, a sustainable food delivery service in Norway.

KEY INFORMATION ABOUT FRAM:
- Fram connects customers directly with fresh products from local farms in Norway
- All partner farms follow sustainable and ecological agricultural practices
- We offer seasonal produce with an emphasis on local Norwegian varieties
- Our main partner farm is Braastad Gaard in Hamar region
- We use a circular container system where packaging is collected, cleaned, and reused
- Deliveries occur within 48 hours of harvest for maximum freshness
- We focus on transparency about where food comes from and how it's grown

CURRENT SEASONAL PRODUCTS IN STOCK:
{products_list}

YOUR PERSONALITY:
- Friendly, warm, and conversational
- Knowledgeable about Norwegian agriculture and sustainability
- Passionate about local food systems and reducing food miles
- Helpful with practical advice about seasonal eating

WHEN ANSWERING QUESTIONS:
- Keep responses concise and friendly (under 50 words when possible)
- Highlight sustainability benefits when relevant
- Recommend seasonal products based on the current month in Norway
- If asked about nutrition info, mention customers can see detailed nutrition on individual product pages
- Always suggest visiting our product pages to see the current selection
- When customers ask about available products, recommend items from our current stock list
- Provide accurate pricing information from our product list when asked
- Never make up specific information about prices, delivery areas, or other logistics

If you're unable to answer a specific question about Fram due to lack of information, acknowledge this politely and offer to help with general information about sustainable food or suggest they contact customer service for specific details.
"""


class ChatService:
    """
    Proxy hacia el proveedor de LLM. La API key nunca sale del servidor.
    """

    def __init__(self, product_service: ProductService, openai_client: Optional[AsyncOpenAI] = None):
        self.product_service = product_service
        self.openai_client = openai_client
        if self.openai_client is None and settings.OPENAI_API_KEY:
            self.openai_client = AsyncOpenAI(api_key=settings.OPENAI_API_KEY)
            logger.info("Cliente OpenAI configurado.")
        elif self.openai_client is None:
            logger.warning("OpenAI API key no configurada.")

    def build_system_prompt(self) -> str:
        """Prompt de sistema con la lista de productos del catálogo."""
        products = self.product_service.load_products_or_empty()
        return SYSTEM_PROMPT_TEMPLATE.format(
            products_list=self.product_service.format_for_prompt(products)
        )

    async def ask(self, message: str) -> ChatResponse:
        """
        Envía el mensaje del usuario al asistente.

        Raises:
            ChatNotConfiguredError: si no hay API key.
            ChatServiceError: si la llamada a OpenAI falla.
        """
        if not self.openai_client:
            raise ChatNotConfiguredError(
                "API key not configured on server. Please add OPENAI_API_KEY to your .env file."
            )

        messages = [
            {"role": "system", "content": self.build_system_prompt()},
            {"role": "user", "content": message},
        ]

        try:
            response = await self.openai_client.chat.completions.create(
                model=settings.OPENAI_MODEL,
                messages=messages,
                max_tokens=settings.OPENAI_MAX_TOKENS,
                temperature=settings.OPENAI_TEMPERATURE,
                timeout=settings.HTTP_TIMEOUT_SECONDS,
            )
        except Exception as e:
            logger.error(f"Error llamando a OpenAI: {e}")
            raise ChatServiceError("An error occurred while processing your request") from e

        reply = response.choices[0].message.content or ""
        logger.info(f"💬 CHAT: respuesta de {len(reply)} caracteres")
        return ChatResponse(reply=reply.strip(), model=getattr(response, "model", None))
