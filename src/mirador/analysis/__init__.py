"""
Módulo de análisis con IA.

Provee el asistente con capa de confianza sobre un LLM (Gemini/Groq)
y el cálculo de trust scores.
"""

from mirador.analysis.assistant import TrustLayerAssistant
from mirador.analysis.llm_providers import (
    get_llm_provider,
    BaseLLMProvider,
    GeminiProvider,
    GroqProvider,
    LLMResponse,
)
from mirador.analysis.trust import (
    calculate_trust_score,
    trust_score_color,
    trust_score_label,
)

__all__ = [
    # Asistente
    "TrustLayerAssistant",
    # Proveedores LLM
    "get_llm_provider",
    "BaseLLMProvider",
    "GeminiProvider",
    "GroqProvider",
    "LLMResponse",
    # Trust score
    "calculate_trust_score",
    "trust_score_color",
    "trust_score_label",
]
