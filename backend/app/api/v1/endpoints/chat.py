# backend/app/api/v1/endpoints/chat.py
"""
Endpoint del chat con el asistente de la tienda.
"""

from fastapi import APIRouter, Depends, HTTPException, status
import logging

from app.api import deps
from app.core.exceptions import ChatNotConfiguredError, ChatServiceError
from app.schemas.chat_schema import ChatRequest, ChatResponse
from app.services.chat_service import ChatService

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    chat_service: ChatService = Depends(deps.get_chat_service),
) -> ChatResponse:
    """Envía el mensaje del usuario al asistente y devuelve su respuesta."""
    try:
        return await chat_service.ask(request.message)
    except ChatNotConfiguredError as e:
        logger.error(f"❌ ERROR: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    except ChatServiceError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
