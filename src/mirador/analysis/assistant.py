"""
Asistente "Trust-Layer" sobre el LLM configurado.

Recibe la pregunta del usuario y el subconjunto de propiedades
seleccionado, y devuelve una respuesta con confianza y fuentes.
Nunca propaga errores de red: ante timeout o respuesta inválida
devuelve una respuesta de fallback fija.
"""

import asyncio
import json
import math
from typing import Optional, Sequence

import httpx
import structlog
from pydantic import BaseModel, ValidationError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from mirador.analysis.llm_providers import BaseLLMProvider, get_llm_provider
from mirador.config import Settings, get_settings
from mirador.models import AIResponse, AISource, PropertyRecord, TrustBreakdown
from mirador.portfolio.description import with_description

logger = structlog.get_logger()

TRUST_LAYER_SYSTEM_PROMPT = """SYSTEM: "CBRE Trust-Layer Assistant"

ROLE
You are an AI analyst embedded in a real-estate app. Your job is not only to answer questions but to prove why the user should trust each answer. You fuse:
1) Internal data: the app passes a list of properties; when present it is the simulated CBRE database and the primary source of truth.
2) External data: use your knowledge and reasoning to verify, contextualize, or challenge internal data based on market trends and real estate principles.

PRINCIPLES
- Precision over hype. If something is uncertain, say so and quantify it.
- Never invent facts, figures, or URLs. Prefer primary sources.
- Freshness matters. Prefer the most recent credible sources; report data timestamps.
- Transparency by default. Always return a confidence score and a source list.
- Strictly follow the response contract below (no extra top-level fields).

WHAT TO DO FOR EACH REQUEST
1) Understand intent and scope (location, asset type/class, timeframe, metrics).
2) If internal properties exist, search them first for relevant assets; treat them as internal/"CBRE" data.
3) Analyze key claims (cap rates, vacancies, comps, permits, sales, zoning, macro trends).
4) Reconcile conflicts between internal vs external knowledge. Call out discrepancies explicitly.
5) Compute a confidence score (0-100) from: source quality & independence, recency, agreement among sources, coverage, and presence of anomalies.
6) Surface gaps: what's missing, noisy, or likely to change.
7) Return results in the schema below.

RESPONSE CONTRACT (JSON object only)
YOU MUST RETURN ONLY A VALID JSON OBJECT WITH NO MARKDOWN CODE BLOCKS OR EXTRA TEXT.
{
  "answer": string,                // Markdown. Concise but complete.
  "confidence": number,            // 0-100 integer. Your overall confidence in THIS answer.
  "sources": [                     // 2-8 items, ordered by importance
    {
      "name": string,              // Publisher or dataset name
      "url": string,               // Direct, openable link (use "#" if not available)
      "snippet": string,           // 1-2 lines summarizing why this source supports the answer
      "published_at": string,      // ISO date if known; else ""
      "type": string               // one of: "government", "news", "research", "listing/MLS", "company", "CBRE_internal", "other"
    }
  ],
  "trust_breakdown": {
    "internal_used": boolean,
    "external_count": number,
    "freshness_days": number,
    "agreements": string,
    "conflicts": string,
    "missing": string
  }
}

ANSWER STYLE
- Put the conclusion first (one short paragraph).
- Then bullet points with the key drivers/risks or the steps/assumptions for any calculations. Show formulas and inputs.
- If the user asks about a specific property, include a compact "Property snapshot" (price, size, type/class, notable comps).
- Keep claims traceable to sources returned in sources.

TRUST / CONFIDENCE HEURISTIC (guidance, not shown to user)
Start at 50. Add up to +25 for multiple independent, high-quality sources in agreement; add up to +15 for recency (<90 days). Subtract up to -30 for conflicts or stale data, -20 for missing critical inputs. Clamp 0-100.

SAFETY & SECRETS
- Never display or echo API keys, headers, tokens, or environment variables.
- No legal, tax, or investment advice; present as informational analysis.

FAILURE MODE
If you cannot verify key facts, return a lower confidence, clearly list "missing" in trust_breakdown, and keep the answer short with next steps."""

CONTEXT_HEADER = (
    "=== AVAILABLE PROPERTIES DATABASE ===\n\n"
    "IMPORTANT: Each property has a detailed description field that contains comprehensive "
    "context about the property. Use it as your primary source of information, along with "
    "location, type, class, price, occupancy, risks, and opportunities."
)
CONTEXT_FOOTER = "=== END OF PROPERTIES DATABASE ==="

NO_INTERNAL_DATA_NOTE = (
    "=== AVAILABLE PROPERTIES DATABASE ===\n\n"
    "No internal properties match this question. Say so explicitly, set "
    "trust_breakdown.internal_used to false, and rely on external knowledge only."
)

# Errores de transporte que vale la pena reintentar
_TRANSIENT_ERRORS = (httpx.TransportError, ConnectionError)


def _unparsed_fallback(raw_text: str) -> AIResponse:
    """Respuesta cuando el modelo contestó pero no respetó el contrato JSON."""
    return AIResponse(
        answer=raw_text or "I couldn't generate a proper response. Please try rephrasing your question.",
        confidence=50,
        sources=[
            AISource(
                name="CBRE Internal Database",
                url="#",
                snippet="Property listings and market data",
                type="CBRE_internal",
            )
        ],
        trust_breakdown=TrustBreakdown(
            internal_used=True,
            external_count=0,
            freshness_days=7,
            agreements="Limited data sources",
            conflicts="",
            missing="Unable to fully process request",
        ),
    )


def _error_fallback(error_message: str) -> AIResponse:
    """Respuesta cuando la llamada al LLM falló."""
    return AIResponse(
        answer=(
            "Sorry, I encountered an error processing your request. "
            "Please verify your API key is correct and try again."
        ),
        confidence=0,
        sources=[AISource(name="Error", url="#", snippet=error_message, type="other")],
        trust_breakdown=TrustBreakdown(missing="API request failed"),
    )


def _strip_code_fences(text: str) -> str:
    """Quita bloques ```json ... ``` que a veces agrega el modelo."""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = cleaned[3:]
        if cleaned.lower().startswith("json"):
            cleaned = cleaned[4:]
        if cleaned.rstrip().endswith("```"):
            cleaned = cleaned.rstrip()[:-3]
    return cleaned.strip()


def _drop_invalid_fields(model: type[BaseModel], raw: dict) -> BaseModel:
    """Valida `raw` descartando los campos que no pasan; quedan en su default."""
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        invalid = {err["loc"][0] for err in e.errors() if err["loc"]}
    try:
        return model.model_validate({k: v for k, v in raw.items() if k not in invalid})
    except ValidationError:
        return model()


def _salvage_response(data) -> Optional[AIResponse]:
    """
    Arma la respuesta con lo que sirva del JSON del modelo.

    Requiere `answer` no vacío, `confidence` numérico y `sources` como
    lista; si falta alguno devuelve None.
    """
    if not isinstance(data, dict):
        return None

    answer = data.get("answer")
    sources = data.get("sources")
    if not isinstance(answer, str) or not answer.strip() or not isinstance(sources, list):
        return None
    try:
        confidence = float(data.get("confidence"))
    except (TypeError, ValueError):
        return None
    if math.isnan(confidence):
        return None

    breakdown = data.get("trust_breakdown")
    return AIResponse(
        answer=answer,
        confidence=min(max(confidence, 0.0), 100.0),
        sources=[_drop_invalid_fields(AISource, s) for s in sources if isinstance(s, dict)],
        trust_breakdown=(
            _drop_invalid_fields(TrustBreakdown, breakdown) if isinstance(breakdown, dict) else None
        ),
    )


class TrustLayerAssistant:
    """
    Cliente del asistente con capa de confianza.

    El proveedor se crea al primer uso, así una API key faltante
    termina en la respuesta de error y no en una excepción al
    construir la aplicación.
    """

    def __init__(
        self,
        provider: Optional[BaseLLMProvider] = None,
        settings: Optional[Settings] = None,
    ):
        self._settings = settings or get_settings()
        self._provider = provider

    @property
    def provider(self) -> BaseLLMProvider:
        if self._provider is None:
            self._provider = get_llm_provider(self._settings)
        return self._provider

    def build_system_prompt(self, properties: Sequence[PropertyRecord]) -> str:
        """System prompt con las propiedades serializadas como contexto."""
        if not properties:
            return f"{TRUST_LAYER_SYSTEM_PROMPT}\n\n{NO_INTERNAL_DATA_NOTE}"

        payload = [with_description(item).to_dict() for item in properties]
        context = json.dumps(payload, indent=2, ensure_ascii=False)
        return f"{TRUST_LAYER_SYSTEM_PROMPT}\n\n{CONTEXT_HEADER}\n\n{context}\n\n{CONTEXT_FOOTER}"

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=8),
        retry=retry_if_exception_type(_TRANSIENT_ERRORS),
        reraise=True,
    )
    async def _generate(self, system_prompt: str, question: str) -> str:
        response = await self.provider.generate(
            system_prompt=system_prompt,
            user_prompt=question,
            temperature=self._settings.ai_temperature,
            max_tokens=self._settings.ai_max_output_tokens,
            json_output=True,
        )
        return response.text

    def parse_response(self, raw_text: str) -> AIResponse:
        """
        Valida la respuesta del modelo contra el contrato.

        Si el JSON trae `answer`, `confidence` y `sources` se acepta
        aunque algún campo anidado no valide (ese campo se descarta).
        Si no es JSON o falta alguno de esos tres, usa el texto crudo
        como respuesta con confianza media.
        """
        cleaned = _strip_code_fences(raw_text)
        try:
            data = json.loads(cleaned)
        except json.JSONDecodeError as e:
            logger.warning(
                "Respuesta del asistente no es JSON",
                error=str(e),
                response=raw_text[:200],
            )
            return _unparsed_fallback(raw_text)

        try:
            return AIResponse.model_validate(data)
        except ValidationError as e:
            salvaged = _salvage_response(data)
            if salvaged is not None:
                logger.warning(
                    "Respuesta del asistente con campos inválidos descartados",
                    errors=e.error_count(),
                )
                return salvaged
            logger.warning(
                "Respuesta del asistente fuera de contrato",
                error=str(e),
                response=raw_text[:200],
            )
            return _unparsed_fallback(raw_text)

    async def ask(self, question: str, properties: Sequence[PropertyRecord]) -> AIResponse:
        """
        Responde una pregunta usando las propiedades como contexto interno.

        Args:
            question: Pregunta del usuario
            properties: Subconjunto ya filtrado (puede ser vacío)

        Returns:
            AIResponse validada o de fallback

        Raises:
            ValueError: Si la pregunta está vacía
        """
        if not question or not question.strip():
            raise ValueError("La pregunta no puede estar vacía")

        system_prompt = self.build_system_prompt(properties)
        timeout = self._settings.ai_timeout_seconds

        try:
            raw_text = await asyncio.wait_for(
                self._generate(system_prompt, question),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            logger.error("Timeout consultando al asistente", timeout=timeout)
            return _error_fallback(f"Request timed out after {timeout:g}s")
        except Exception as e:
            logger.error("Error consultando al asistente", error=str(e))
            return _error_fallback(str(e) or e.__class__.__name__)

        if not raw_text:
            logger.error("El asistente devolvió una respuesta vacía")
            return _error_fallback("No response generated from AI model.")

        response = self.parse_response(raw_text)
        logger.info(
            "Respuesta del asistente",
            confidence=response.confidence,
            sources=len(response.sources),
            context_size=len(properties),
        )
        return response
