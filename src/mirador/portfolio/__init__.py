"""
Curaduría del portfolio de propiedades.

Transformaciones puras sobre la colección en memoria:
- Redistribución determinística de estados
- Selección de contexto para el asistente
- Catálogo: carga, búsqueda, comparación y colores del mapa
"""

from mirador.portfolio.status import (
    InvalidConfiguration,
    redistribute,
    status_counts,
    target_counts,
)
from mirador.portfolio.context import (
    DEFAULT_MAX_ITEMS,
    apply_criteria,
    parse_criteria,
    select_context,
)
from mirador.portfolio.catalog import (
    compare_properties,
    find_property,
    load_properties,
    save_properties,
    search_properties,
    status_color,
)
from mirador.portfolio.description import build_rich_description, with_description

__all__ = [
    # Estados
    "InvalidConfiguration",
    "redistribute",
    "status_counts",
    "target_counts",
    # Contexto
    "DEFAULT_MAX_ITEMS",
    "apply_criteria",
    "parse_criteria",
    "select_context",
    # Catálogo
    "compare_properties",
    "find_property",
    "load_properties",
    "save_properties",
    "search_properties",
    "status_color",
    "build_rich_description",
    "with_description",
]
