"""
Descripción narrativa de una propiedad.

Se usa como campo `description` del contexto que recibe el LLM
cuando el dataset no trae una.
"""

from mirador.models import PropertyRecord


def _fmt_number(value) -> str:
    number = float(value)
    if number.is_integer():
        return f"{int(number):,}"
    return f"{number:,.2f}"


def _join_list(value) -> str:
    """Une una lista del dataset; cualquier otro tipo se ignora."""
    if not isinstance(value, (list, tuple)):
        return ""
    return ", ".join(str(item) for item in value if item not in (None, ""))


_LIST_SENTENCES = [
    ("keyFeatures", "Key features include {}."),
    ("opportunities", "Opportunities: {}."),
    ("risks", "Considerations/Risks: {}."),
]


def build_rich_description(record: PropertyRecord) -> str:
    extra = record.model_extra or {}
    parts = []

    class_text = f", Class {record.property_class}" if record.property_class else ""
    parts.append(f"{record.title} at {record.address} is a {record.type}{class_text} asset.")

    if record.sqft:
        parts.append(f"The property comprises approximately {_fmt_number(record.sqft)} square feet.")
    if extra.get("yearBuilt"):
        parts.append(
            f"Originally delivered in {extra['yearBuilt']}, it has been maintained to modern standards."
        )
    occupancy = extra.get("occupancy")
    if isinstance(occupancy, (int, float)) and not isinstance(occupancy, bool):
        parts.append(f"Current reported occupancy is {occupancy}%.")
    if record.numeric_price:
        parts.append(f"Pricing guidance is around ${_fmt_number(record.numeric_price)}.")
    if record.status:
        parts.append(f"Current status: {record.status.replace('-', ' ', 1)}.")
    for key, template in _LIST_SENTENCES:
        listed = _join_list(extra.get(key))
        if listed:
            parts.append(template.format(listed))
    trust_score = extra.get("trustScore")
    if isinstance(trust_score, (int, float)) and not isinstance(trust_score, bool):
        parts.append(f"Trust score: {trust_score} based on verified sources and data freshness.")

    parts.append(
        "Location context, tenant appeal, and surrounding amenities support "
        "continued interest from target user groups."
    )
    return " ".join(parts)


def with_description(record: PropertyRecord) -> PropertyRecord:
    """Devuelve una copia con `description` completada si faltaba."""
    extra = record.model_extra or {}
    if extra.get("description"):
        return record
    return record.model_copy(update={"description": build_rich_description(record)})
