"""
Redistribución determinística de estados.

Reasigna el `status` de cada propiedad para que las proporciones
coincidan con los pesos objetivo. La asignación depende solo del
conjunto de IDs y de los pesos, no del orden de entrada ni del
estado previo, así que re-renderizar produce siempre lo mismo.
"""

import math
from collections import Counter
from typing import Sequence

import structlog

from mirador.models import PropertyRecord, StatusWeights, STATUS_ORDER

logger = structlog.get_logger()

# Tolerancia para que 0.3 * 100 cuente como 30 y no como 29
_FLOOR_EPSILON = 1e-9


class InvalidConfiguration(ValueError):
    """Los pesos de estado no permiten calcular una distribución."""


def _normalize(weights: StatusWeights) -> list[float]:
    raw = weights.ordered()
    total = math.fsum(raw)
    # `not total > 0` también cubre NaN
    if not total > 0 or math.isinf(total):
        raise InvalidConfiguration(
            f"Los pesos de estado deben sumar más de 0 (recibido: {raw})"
        )
    return [w / total for w in raw]


def target_counts(n: int, weights: StatusWeights) -> list[int]:
    """
    Cantidad objetivo por estado, en el orden de STATUS_ORDER.

    Piso de peso * n, y el resto se reparte de a una unidad
    siguiendo el orden fijo (ciclando si hace falta).
    """
    normalized = _normalize(weights)
    counts = [math.floor(w * n + _FLOOR_EPSILON) for w in normalized]

    remainder = n - sum(counts)
    index = 0
    while remainder > 0:
        counts[index % len(counts)] += 1
        remainder -= 1
        index += 1

    return counts


def redistribute(
    items: Sequence[PropertyRecord],
    weights: StatusWeights,
) -> list[PropertyRecord]:
    """
    Reasigna estados según los pesos.

    Args:
        items: Propiedades de entrada (no se modifican)
        weights: Pesos objetivo por estado

    Returns:
        Lista del mismo largo y orden que `items`, con solo `status` cambiado

    Raises:
        InvalidConfiguration: Si los pesos suman 0
    """
    counts = target_counts(len(items), weights)
    if not items:
        return []

    labels: list[str] = []
    for status, count in zip(STATUS_ORDER, counts):
        labels.extend([status.value] * count)

    # Orden de asignación determinístico: por id ascendente
    ordered = sorted(items, key=lambda item: item.id)
    assigned = {item.id: label for item, label in zip(ordered, labels)}

    result = []
    for item in items:
        label = assigned.get(item.id)
        if label is None:
            result.append(item)
        else:
            result.append(item.model_copy(update={"status": label}))

    logger.debug(
        "Estados redistribuidos",
        total=len(result),
        **{status.name.lower(): count for status, count in zip(STATUS_ORDER, counts)},
    )
    return result


def status_counts(items: Sequence[PropertyRecord]) -> dict[str, int]:
    """Cuenta propiedades por estado (incluye todos los estados, aunque sean 0)."""
    counter = Counter(item.status for item in items)
    return {status.value: counter.get(status.value, 0) for status in STATUS_ORDER}
