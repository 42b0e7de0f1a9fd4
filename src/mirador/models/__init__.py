"""
Modelos de datos del sistema.

- Propiedades: PropertyRecord y los tipos del núcleo (estados, pesos, criterios)
- Sesión: usuario demo, guardados, alertas, chat
- Asistente: contrato de respuesta del LLM
"""

from mirador.models.property import (
    PropertyRecord,
    PropertyStatus,
    STATUS_ORDER,
    StatusWeights,
    FilterCriteria,
    ComparisonMode,
)
from mirador.models.session import User, SavedProperty, PropertyAlert, ChatMessage
from mirador.models.assistant import AIResponse, AISource, TrustBreakdown

__all__ = [
    # Propiedades
    "PropertyRecord",
    "PropertyStatus",
    "STATUS_ORDER",
    "StatusWeights",
    "FilterCriteria",
    "ComparisonMode",
    # Sesión
    "User",
    "SavedProperty",
    "PropertyAlert",
    "ChatMessage",
    # Asistente
    "AIResponse",
    "AISource",
    "TrustBreakdown",
]
