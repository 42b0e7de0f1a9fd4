"""
Proveedores LLM del asistente.

El asistente solo conoce `BaseLLMProvider.generate`; cuál proveedor se
usa (Gemini o Groq), con qué key y qué modelo sale del `Settings` que
se le inyecta a `get_llm_provider`.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

import structlog

from mirador.config import Settings, get_settings

logger = structlog.get_logger()


@dataclass
class LLMResponse:
    """Texto generado, normalizado entre proveedores."""
    text: str
    model: str
    provider: str
    tokens_used: Optional[int] = None


class BaseLLMProvider(ABC):
    """
    Proveedor con una única operación: system prompt + pregunta -> texto.

    Las subclases reciben la key y el modelo ya resueltos; un cliente
    se puede inyectar para no tocar la red (tests).
    """

    provider_name: str = "base"
    key_setting: str = ""

    def __init__(self, api_key: Optional[str], model: str, client: Any = None):
        if not api_key:
            raise ValueError(f"{self.key_setting.upper()} no configurada")
        self.api_key = api_key
        self.model = model
        self.client = client if client is not None else self._build_client()
        logger.info("Proveedor LLM listo", provider=self.provider_name, model=self.model)

    @abstractmethod
    def _build_client(self) -> Any: ...

    @abstractmethod
    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.8,
        max_tokens: int = 2048,
        json_output: bool = False,
    ) -> LLMResponse:
        """
        Args:
            system_prompt: Instrucciones + contexto de propiedades
            user_prompt: Pregunta del usuario
            temperature: Temperatura de generación
            max_tokens: Máximo de tokens de salida
            json_output: Pedir un objeto JSON como respuesta
        """


class GeminiProvider(BaseLLMProvider):
    """Google Gemini vía google-genai (cliente async)."""

    provider_name = "gemini"
    key_setting = "gemini_api_key"

    def _build_client(self):
        from google import genai

        return genai.Client(api_key=self.api_key)

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.8,
        max_tokens: int = 2048,
        json_output: bool = False,
    ) -> LLMResponse:
        from google.genai import types

        response = await self.client.aio.models.generate_content(
            model=self.model,
            contents=user_prompt,
            config=types.GenerateContentConfig(
                system_instruction=system_prompt,
                temperature=temperature,
                max_output_tokens=max_tokens,
                response_mime_type="application/json" if json_output else None,
            ),
        )

        usage = getattr(response, "usage_metadata", None)
        return LLMResponse(
            text=(response.text or "").strip(),
            model=self.model,
            provider=self.provider_name,
            tokens_used=getattr(usage, "total_token_count", None),
        )


class GroqProvider(BaseLLMProvider):
    """
    Groq (chat completions compatibles con OpenAI).

    Con `json_output` se pide `response_format=json_object`, que Groq
    solo acepta si el prompt menciona JSON (el del asistente lo hace).
    """

    provider_name = "groq"
    key_setting = "groq_api_key"

    def _build_client(self):
        from groq import AsyncGroq

        return AsyncGroq(api_key=self.api_key)

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.8,
        max_tokens: int = 2048,
        json_output: bool = False,
    ) -> LLMResponse:
        options: dict[str, Any] = {}
        if json_output:
            options["response_format"] = {"type": "json_object"}

        completion = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=temperature,
            max_tokens=max_tokens,
            **options,
        )

        usage = getattr(completion, "usage", None)
        return LLMResponse(
            text=(completion.choices[0].message.content or "").strip(),
            model=self.model,
            provider=self.provider_name,
            tokens_used=getattr(usage, "total_tokens", None),
        )


_PROVIDERS: dict[str, type[BaseLLMProvider]] = {
    GeminiProvider.provider_name: GeminiProvider,
    GroqProvider.provider_name: GroqProvider,
}


def get_llm_provider(
    settings: Optional[Settings] = None,
    client: Any = None,
) -> BaseLLMProvider:
    """
    Construye el proveedor indicado por `settings.llm_provider`.

    Args:
        settings: Configuración a usar (default: get_settings())
        client: Cliente ya construido del SDK, en lugar de crear uno

    Raises:
        ValueError: Proveedor desconocido o API key faltante
    """
    settings = settings or get_settings()
    name = (settings.llm_provider or "").strip().lower()

    provider_cls = _PROVIDERS.get(name)
    if provider_cls is None:
        raise ValueError(
            f"Proveedor LLM no soportado: {settings.llm_provider!r}. "
            f"Opciones: {', '.join(sorted(_PROVIDERS))}"
        )

    return provider_cls(
        api_key=getattr(settings, provider_cls.key_setting),
        model=getattr(settings, f"{name}_model"),
        client=client,
    )
