"""
Contrato de respuesta del asistente.

Solo `answer`, `confidence` y `sources` son obligatorios; los campos
de cada fuente y del desglose tienen default para tolerar respuestas
del modelo incompletas.
"""

from typing import Optional

from pydantic import AliasChoices, BaseModel, Field


class AISource(BaseModel):
    """Fuente citada por el asistente."""

    # Algunos modelos usan "title" en vez de "name"
    name: str = Field(
        default="",
        validation_alias=AliasChoices("name", "title"),
        description="Publicador o dataset",
    )
    url: str = Field(default="#", description="Link directo, '#' si no hay")
    snippet: str = Field(default="", description="Por qué la fuente respalda la respuesta")
    published_at: str = Field(default="", description="Fecha ISO si se conoce")
    type: str = Field(
        default="other",
        description="government, news, research, listing/MLS, company, CBRE_internal, other",
    )


class TrustBreakdown(BaseModel):
    """Desglose breve de la confianza (útil para debug en la UI)."""

    internal_used: bool = False
    external_count: int = 0
    freshness_days: float = 0
    agreements: str = ""
    conflicts: str = ""
    missing: str = ""


class AIResponse(BaseModel):
    """Respuesta normalizada del asistente."""

    answer: str = Field(..., min_length=1, description="Markdown")
    confidence: float = Field(..., ge=0, le=100)
    sources: list[AISource] = Field(..., description="Fuentes ordenadas por importancia")
    trust_breakdown: Optional[TrustBreakdown] = None
