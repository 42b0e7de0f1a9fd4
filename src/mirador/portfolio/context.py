"""
Filtro heurístico de contexto para el asistente.

Acota qué propiedades se mandan al LLM a partir de una pregunta en
texto libre: estados de EE.UU. mencionados, un umbral de precio y la
intención de comparación ("over 5 million", "around 2m").

Es una heurística best-effort, no un lenguaje de consulta: si no se
detecta nada, se manda todo hasta el tope.
"""

import re
from typing import Optional, Sequence

import structlog

from mirador.config import US_STATES
from mirador.models import ComparisonMode, FilterCriteria, PropertyRecord

logger = structlog.get_logger()

DEFAULT_MAX_ITEMS = 50

# Banda del modo "near": ±10% del umbral
NEAR_BAND = 0.1

_WORD_RE = re.compile(r"\w+")

# Número con unidad opcional: "$5", "1,800,000", "2.5m", "3 billion"
_PRICE_RE = re.compile(
    r"\$?\s*(\d[\d,]*(?:\.\d+)?)\s*(million|billion|m|b)?\b",
    re.IGNORECASE,
)

_UNIT_MULTIPLIERS = {
    "": 1,
    "m": 1_000_000,
    "million": 1_000_000,
    "b": 1_000_000_000,
    "billion": 1_000_000_000,
}

_AT_LEAST_RE = re.compile(
    r"\b(?:more than|over|above|greater than|at least)\b|>=", re.IGNORECASE
)
_AT_MOST_RE = re.compile(
    r"\b(?:less than|under|below|at most)\b|<=", re.IGNORECASE
)


def match_states(question: str) -> set[str]:
    """
    Tokens de ubicación mencionados en la pregunta.

    Un estado matchea si su nombre aparece como substring o su
    abreviatura aparece como palabra suelta ("ca" no matchea "cable").
    Devuelve nombre y abreviatura de cada estado que matchea.
    """
    q = question.lower()
    words = set(_WORD_RE.findall(q))

    matched: set[str] = set()
    for name, abbr in US_STATES:
        if name in q or abbr in words:
            matched.update((name, abbr))
    return matched


def extract_price(question: str) -> Optional[float]:
    """Primer monto de la pregunta en unidades de moneda, o None."""
    match = _PRICE_RE.search(question)
    if not match:
        return None

    digits = match.group(1).replace(",", "")
    try:
        base = float(digits)
    except ValueError:
        return None

    unit = (match.group(2) or "").lower()
    return base * _UNIT_MULTIPLIERS[unit]


def detect_comparison(question: str) -> ComparisonMode:
    if _AT_LEAST_RE.search(question):
        return ComparisonMode.AT_LEAST
    if _AT_MOST_RE.search(question):
        return ComparisonMode.AT_MOST
    return ComparisonMode.NEAR


def parse_criteria(question: str) -> FilterCriteria:
    """Deriva los criterios de filtrado de una pregunta."""
    return FilterCriteria(
        matched_location_tokens=match_states(question),
        price_threshold=extract_price(question),
        comparison_mode=detect_comparison(question),
    )


def _price_matches(price: Optional[float], threshold: float, mode: ComparisonMode) -> bool:
    if price is None:
        return False
    if mode == ComparisonMode.AT_LEAST:
        return price >= threshold
    if mode == ComparisonMode.AT_MOST:
        return price <= threshold
    return abs(price - threshold) <= threshold * NEAR_BAND


def apply_criteria(
    criteria: FilterCriteria,
    items: Sequence[PropertyRecord],
) -> list[PropertyRecord]:
    """Aplica los criterios sin truncar. No modifica `items`."""
    filtered = list(items)

    tokens = criteria.matched_location_tokens
    if tokens:
        filtered = [
            item for item in filtered
            if any(token in (item.address or "").lower() for token in tokens)
        ]

    # Un umbral de 0 no filtra
    threshold = criteria.price_threshold
    if threshold:
        filtered = [
            item for item in filtered
            if _price_matches(item.numeric_price, threshold, criteria.comparison_mode)
        ]

    return filtered


def select_context(
    question: str,
    items: Sequence[PropertyRecord],
    max_items: int = DEFAULT_MAX_ITEMS,
) -> list[PropertyRecord]:
    """
    Selecciona el subconjunto de propiedades a enviar al LLM.

    Args:
        question: Pregunta del usuario
        items: Colección completa de propiedades
        max_items: Tope de propiedades a devolver

    Returns:
        Las primeras `max_items` propiedades que cumplen los criterios,
        en el orden original. Puede ser una lista vacía.
    """
    if max_items < 0:
        raise ValueError(f"max_items debe ser >= 0 (recibido: {max_items})")

    criteria = parse_criteria(question)
    filtered = apply_criteria(criteria, items)
    subset = filtered[:max_items]

    logger.debug(
        "Contexto seleccionado",
        states=sorted(criteria.matched_location_tokens),
        price_threshold=criteria.price_threshold,
        mode=criteria.comparison_mode.value,
        matched=len(filtered),
        sent=len(subset),
    )
    if not subset:
        logger.info("Ninguna propiedad coincide con la pregunta", question=question[:80])

    return subset
