"""
Modelos de sesión local.

Usuario demo, propiedades guardadas, alertas e historial de chat.
Se persisten como JSON en el key-value store.
"""

import time
from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import BaseModel, Field


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _epoch_ms() -> int:
    return int(time.time() * 1000)


class User(BaseModel):
    """Usuario del login demo (sin autenticación real)."""

    id: str = Field(default_factory=lambda: f"user-{_epoch_ms()}")
    email: str = Field(..., description="Email ingresado en el login")
    name: str = Field(..., description="Nombre visible")
    avatar: Optional[str] = Field(None, description="URL del avatar")
    created_at: str = Field(default_factory=_now_iso)


class SavedProperty(BaseModel):
    """Propiedad marcada como favorita."""

    property_id: str = Field(..., description="ID de la propiedad guardada")
    saved_at: str = Field(default_factory=_now_iso)
    notes: Optional[str] = Field(None, description="Notas libres del usuario")
    tags: list[str] = Field(default_factory=list)


class PropertyAlert(BaseModel):
    """Alerta sobre un cambio detectado en una propiedad."""

    id: str = Field(default_factory=lambda: f"alert-{_epoch_ms()}")
    property_id: str
    type: str = Field(..., description="Ej: price-change, legal, market")
    message: str
    created_at: str = Field(default_factory=_now_iso)
    read: bool = False


class ChatMessage(BaseModel):
    """Mensaje del chat con el asistente."""

    role: Literal["user", "assistant", "system"]
    content: str
    timestamp: str = Field(default_factory=_now_iso)
