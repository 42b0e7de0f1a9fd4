"""
Modelo de propiedad y tipos del núcleo de curaduría.

PropertyRecord es el registro tal como viene del dataset estático.
El núcleo solo lee `id`, `address` y `price`, y reescribe `status`;
el resto de los campos pasa sin cambios.
"""

import math
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class PropertyStatus(str, Enum):
    """Estados del ciclo de vida de una propiedad, en orden fijo."""

    OFF_MARKET = "off-market"
    FOR_SALE = "for-sale"
    TRENDING = "trending"
    FLAGGED = "flagged"


# Orden fijo usado para normalizar pesos y repartir el resto
STATUS_ORDER: tuple[PropertyStatus, ...] = (
    PropertyStatus.OFF_MARKET,
    PropertyStatus.FOR_SALE,
    PropertyStatus.TRENDING,
    PropertyStatus.FLAGGED,
)


class ComparisonMode(str, Enum):
    """Intención de comparación de precio detectada en la pregunta."""

    AT_LEAST = "at-least"
    AT_MOST = "at-most"
    NEAR = "near"


class PropertyRecord(BaseModel):
    """
    Propiedad del dataset.

    Acepta campos extra para no perder información del JSON original
    (title, type, class, sqft, lat/lng, images, etc.).
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str = Field(..., description="Identificador único y estable")
    address: str = Field(default="", description="Dirección en texto libre")
    price: Optional[Any] = Field(
        None, description="Precio en moneda local (puede faltar o no ser numérico)"
    )
    status: Optional[str] = Field(None, description="Estado: off-market, for-sale, trending, flagged")

    title: str = Field(default="", description="Título de la propiedad")
    type: str = Field(default="", description="Office, Industrial, Retail, ...")
    property_class: Optional[str] = Field(None, alias="class", description="Clase A/B/C")
    sqft: Optional[float] = Field(None, description="Superficie en pies cuadrados")

    @property
    def numeric_price(self) -> Optional[float]:
        """Precio como float, o None si falta o no es un número real."""
        if isinstance(self.price, bool) or not isinstance(self.price, (int, float)):
            return None
        if math.isnan(self.price) or math.isinf(self.price):
            return None
        return float(self.price)

    def to_dict(self) -> dict:
        """Convierte al formato del JSON original (con alias como `class`)."""
        return self.model_dump(by_alias=True, exclude_none=True)


class StatusWeights(BaseModel):
    """
    Pesos objetivo por estado.

    No necesitan sumar 1: el redistribuidor los normaliza.
    """

    off_market: float = Field(default=0.0, ge=0)
    for_sale: float = Field(default=0.0, ge=0)
    trending: float = Field(default=0.0, ge=0)
    flagged: float = Field(default=0.0, ge=0)

    def for_status(self, status: PropertyStatus) -> float:
        return getattr(self, status.name.lower())

    def ordered(self) -> list[float]:
        """Pesos en el orden fijo de STATUS_ORDER."""
        return [self.for_status(status) for status in STATUS_ORDER]

    @classmethod
    def from_mapping(cls, weights: dict) -> "StatusWeights":
        """Construye desde un dict con claves de estado ('off-market', ...)."""
        values = {}
        for key, value in weights.items():
            status = PropertyStatus(key)
            values[status.name.lower()] = value
        return cls(**values)

    @classmethod
    def from_settings(cls, settings) -> "StatusWeights":
        return cls(
            off_market=settings.status_weight_off_market,
            for_sale=settings.status_weight_for_sale,
            trending=settings.status_weight_trending,
            flagged=settings.status_weight_flagged,
        )


class FilterCriteria(BaseModel):
    """Criterios derivados de una pregunta en texto libre."""

    matched_location_tokens: set[str] = Field(default_factory=set)
    price_threshold: Optional[float] = None
    comparison_mode: ComparisonMode = ComparisonMode.NEAR

    @property
    def is_empty(self) -> bool:
        return not self.matched_location_tokens and self.price_threshold is None
