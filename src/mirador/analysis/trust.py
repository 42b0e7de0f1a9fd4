"""
Trust score de una propiedad.

Puntaje 0-100 a partir de verificación interna, cantidad de fuentes
externas, frescura de los datos y anomalías detectadas.
"""


def calculate_trust_score(
    internal_data_verified: bool,
    external_sources_count: int,
    data_freshness_days: float,
    anomalies_detected: int,
) -> int:
    score = 0

    # Verificación interna (40 puntos)
    if internal_data_verified:
        score += 40

    # Fuentes externas (30 puntos)
    score += min(max(external_sources_count, 0) * 10, 30)

    # Frescura (20 puntos)
    if data_freshness_days <= 7:
        score += 20
    elif data_freshness_days <= 30:
        score += 15
    elif data_freshness_days <= 90:
        score += 10
    else:
        score += 5

    # Penalización por anomalías (10 puntos)
    score += max(10 - anomalies_detected * 5, 0)

    return min(score, 100)


def trust_score_color(score: float) -> str:
    if score >= 80:
        return "trust-high"
    if score >= 60:
        return "trust-medium"
    return "trust-low"


def trust_score_label(score: float) -> str:
    if score >= 90:
        return "Excellent"
    if score >= 80:
        return "Very Good"
    if score >= 70:
        return "Good"
    if score >= 60:
        return "Fair"
    return "Needs Review"
