"""
Catálogo de propiedades.

Carga del dataset estático, búsqueda de la lista lateral,
comparación lado a lado y colores de marcadores del mapa.
"""

import json
from pathlib import Path
from typing import Optional, Sequence, Union

import structlog

from mirador.config import DEFAULT_STATUS_COLOR, STATUS_COLORS
from mirador.models import PropertyRecord

logger = structlog.get_logger()

MIN_COMPARE = 2
MAX_COMPARE = 4


def load_properties(path: Union[str, Path]) -> list[PropertyRecord]:
    """
    Carga el dataset de propiedades desde un archivo JSON.

    Raises:
        FileNotFoundError: Si el archivo no existe
        ValueError: Si el JSON no es una lista de propiedades
    """
    path = Path(path)
    with path.open(encoding="utf-8") as fh:
        data = json.load(fh)

    if not isinstance(data, list):
        raise ValueError(f"{path} debe contener una lista de propiedades")

    properties = [PropertyRecord.model_validate(entry) for entry in data]
    logger.info("Propiedades cargadas", path=str(path), total=len(properties))
    return properties


def save_properties(path: Union[str, Path], items: Sequence[PropertyRecord]) -> None:
    """Escribe el dataset con el mismo formato que el original."""
    path = Path(path)
    payload = [item.to_dict() for item in items]
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")


def search_properties(query: str, items: Sequence[PropertyRecord]) -> list[PropertyRecord]:
    """Búsqueda por substring en título, dirección o tipo (sin distinguir mayúsculas)."""
    q = (query or "").strip().lower()
    if not q:
        return list(items)
    return [
        item for item in items
        if q in item.title.lower()
        or q in (item.address or "").lower()
        or q in item.type.lower()
    ]


def find_property(property_id: str, items: Sequence[PropertyRecord]) -> Optional[PropertyRecord]:
    for item in items:
        if item.id == property_id:
            return item
    return None


def _extra(item: PropertyRecord, key: str):
    return (item.model_extra or {}).get(key)


def compare_properties(
    property_ids: Sequence[str],
    items: Sequence[PropertyRecord],
) -> list[dict]:
    """
    Arma filas comparables para 2 a 4 propiedades.

    Raises:
        ValueError: Si se piden menos de 2 o más de 4 propiedades
        KeyError: Si algún ID no existe en el catálogo
    """
    ids = list(dict.fromkeys(property_ids))
    if not MIN_COMPARE <= len(ids) <= MAX_COMPARE:
        raise ValueError(
            f"Se pueden comparar entre {MIN_COMPARE} y {MAX_COMPARE} propiedades "
            f"(recibido: {len(ids)})"
        )

    by_id = {item.id: item for item in items}
    rows = []
    for property_id in ids:
        item = by_id.get(property_id)
        if item is None:
            raise KeyError(property_id)

        price = item.numeric_price
        price_per_sqft = None
        if price is not None and item.sqft:
            price_per_sqft = round(price / item.sqft, 2)

        rows.append({
            "id": item.id,
            "title": item.title,
            "address": item.address,
            "type": item.type,
            "class": item.property_class,
            "status": item.status,
            "price": price,
            "sqft": item.sqft,
            "price_per_sqft": price_per_sqft,
            "occupancy": _extra(item, "occupancy"),
            "trust_score": _extra(item, "trustScore"),
        })
    return rows


def status_color(status: Optional[str]) -> str:
    """Color del marcador para un estado (azul por defecto)."""
    return STATUS_COLORS.get(status or "", DEFAULT_STATUS_COLOR)
