# backend/app/schemas/chat_schema.py
"""
Esquemas Pydantic para el chat con el asistente.
"""

from pydantic import BaseModel, Field
from typing import Optional


class ChatRequest(BaseModel):
    """Mensaje del usuario."""
    message: str = Field(..., min_length=1, max_length=2000)


class ChatResponse(BaseModel):
    """Respuesta del asistente."""
    reply: str
    model: Optional[str] = None
