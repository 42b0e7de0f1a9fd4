import asyncio
import json

import pytest

from mirador.analysis import BaseLLMProvider, LLMResponse
from mirador.config import Settings
from mirador.models import PropertyRecord


class FakeProvider(BaseLLMProvider):
    """Proveedor que devuelve respuestas predefinidas y registra las llamadas."""

    provider_name = "fake"

    def __init__(self, responses=None, delay: float = 0.0):
        self.responses = list(responses or [])
        self.delay = delay
        self.calls = []

    def _build_client(self):
        return None

    async def generate(self, system_prompt, user_prompt, temperature=0.8, max_tokens=2048,
                       json_output=False):
        self.calls.append({
            "system_prompt": system_prompt,
            "user_prompt": user_prompt,
            "json_output": json_output,
        })
        if self.delay:
            await asyncio.sleep(self.delay)
        result = self.responses.pop(0) if self.responses else ""
        if isinstance(result, BaseException):
            raise result
        return LLMResponse(text=result, model="fake-model", provider=self.provider_name)


def valid_answer(**overrides) -> str:
    payload = {
        "answer": "Domain Tower is the strongest candidate.",
        "confidence": 82,
        "sources": [
            {
                "name": "CBRE Internal Database",
                "url": "#",
                "snippet": "Listing data",
                "published_at": "",
                "type": "CBRE_internal",
            },
            {
                "name": "Austin Permits",
                "url": "https://example.gov/permits",
                "snippet": "Permit history",
                "published_at": "2025-01-10",
                "type": "government",
            },
        ],
        "trust_breakdown": {
            "internal_used": True,
            "external_count": 1,
            "freshness_days": 30,
            "agreements": "Pricing consistent",
            "conflicts": "",
            "missing": "",
        },
    }
    payload.update(overrides)
    return json.dumps(payload)


@pytest.fixture
def settings():
    return Settings(_env_file=None, ai_timeout_seconds=5, context_max_items=50)


@pytest.fixture
def make_property():
    def _make(property_id, address="", price=None, status="for-sale", **extra):
        return PropertyRecord(id=property_id, address=address, price=price, status=status, **extra)
    return _make


@pytest.fixture
def fake_provider():
    return FakeProvider(responses=[valid_answer()])
