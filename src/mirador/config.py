"""
Configuración centralizada del sistema.
Carga variables de entorno y define settings globales.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Encontrar la raíz del proyecto (donde está el .env)
# config.py -> mirador/ -> src/ -> raíz del proyecto
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Configuración principal de la aplicación."""

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # LLM Provider
    llm_provider: str = Field(
        "gemini",
        description="Proveedor de LLM a usar: 'gemini' o 'groq'"
    )

    # Gemini
    gemini_api_key: Optional[str] = Field(None, description="API key de Google Gemini")
    gemini_model: str = Field("gemini-2.0-flash", description="Modelo de Gemini a usar")

    # Groq
    groq_api_key: Optional[str] = Field(None, description="API key de Groq")
    groq_model: str = Field(
        "llama-3.3-70b-versatile",
        description="Modelo de Groq a usar (llama-3.1-8b-instant, llama-3.3-70b-versatile)"
    )

    # Asistente
    ai_temperature: float = Field(0.8, ge=0.0, le=2.0, description="Temperatura del asistente")
    ai_max_output_tokens: int = Field(2048, description="Máximo de tokens de respuesta")
    ai_timeout_seconds: float = Field(
        30.0, gt=0, description="Timeout de la llamada al LLM (segundos)"
    )
    context_max_items: int = Field(
        50, ge=1, description="Máximo de propiedades enviadas como contexto al LLM"
    )

    # Distribución de estados (no necesitan sumar 1)
    status_weight_off_market: float = Field(0.4, ge=0.0)
    status_weight_for_sale: float = Field(0.3, ge=0.0)
    status_weight_trending: float = Field(0.2, ge=0.0)
    status_weight_flagged: float = Field(0.1, ge=0.0)

    # Datos y almacenamiento local
    properties_path: Path = Field(
        _PROJECT_ROOT / "data" / "properties.json",
        description="Dataset estático de propiedades (JSON)",
    )
    storage_path: Path = Field(
        _PROJECT_ROOT / ".mirador" / "storage.json",
        description="Archivo del key-value store local",
    )

    # Logging
    log_level: str = Field("INFO", description="Nivel de logging")


@lru_cache
def get_settings() -> Settings:
    """Obtiene la configuración cacheada."""
    return Settings()


# Constantes del sistema

# (nombre completo, abreviatura) de los estados reconocidos en las preguntas
US_STATES = [
    ("texas", "tx"),
    ("california", "ca"),
    ("new york", "ny"),
    ("florida", "fl"),
    ("illinois", "il"),
    ("washington", "wa"),
    ("massachusetts", "ma"),
    ("arizona", "az"),
    ("colorado", "co"),
    ("utah", "ut"),
    ("georgia", "ga"),
    ("north carolina", "nc"),
    ("ohio", "oh"),
    ("pennsylvania", "pa"),
    ("nevada", "nv"),
    ("oregon", "or"),
    ("missouri", "mo"),
    ("tennessee", "tn"),
    ("maryland", "md"),
    ("minnesota", "mn"),
]

# Colores de los marcadores del mapa por estado
STATUS_COLORS = {
    "for-sale": "#3b82f6",
    "off-market": "#06b6d4",
    "trending": "#eab308",
    "flagged": "#ef4444",
}

DEFAULT_STATUS_COLOR = "#3b82f6"

PROPERTY_TYPES = ["Office", "Industrial", "Retail", "Residential", "Mixed-Use"]

# Keywords de búsqueda de imágenes por tipo de propiedad
PROPERTY_TYPE_KEYWORDS = {
    "Office": "modern office building",
    "Industrial": "warehouse industrial",
    "Retail": "retail shopping center",
    "Residential": "apartment building",
    "Mixed-Use": "mixed use building",
}
