"""Pytest configuration and fixtures."""

from datetime import date
from pathlib import Path

import pytest

from stockroom.config.settings import (
    LLMSettings,
    Settings,
    StorageSettings,
    reset_settings,
)
from stockroom.core.interfaces import HealthStatus, ILLMProvider, LLMResponse


class StubLLMProvider(ILLMProvider):
    """Returns canned completions, or raises the configured error."""

    def __init__(self, text: str = "", error: Exception | None = None, healthy: bool = True):
        self.text = text
        self.error = error
        self.healthy = healthy
        self.prompts: list[str] = []

    async def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return LLMResponse(text=self.text, model="stub")

    async def check_health(self) -> HealthStatus:
        return HealthStatus(available=self.healthy, provider="stub", model="stub")

    def is_available(self) -> bool:
        return self.healthy


SAMPLE_INVOICE_TEXT = """Hurtownia Budowlana ABC Sp. z o.o.
ul. Przemysłowa 12, 00-001 Warszawa
Faktura VAT nr FV/2024/01/15
Data wystawienia: 15.01.2024

Cement portlandzki 10 szt 25,50 23% 31,37
Piasek płukany 2,5 kg 4.00 8% 4.32
Usługa transportowa 1 godz 150,00 23% 184,50
"""


@pytest.fixture(autouse=True)
def _reset_settings():
    """Drop the cached settings singleton between tests."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def today() -> date:
    return date(2024, 6, 1)


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings isolated to a temporary data directory, completions off."""
    return Settings(
        storage=StorageSettings(data_dir=tmp_path / "data", db_name="test.db", pool_size=2),
        llm=LLMSettings(enabled=False),
    )


@pytest.fixture
def sample_invoice_text() -> str:
    return SAMPLE_INVOICE_TEXT


@pytest.fixture
def sample_ai_json() -> str:
    """A well-formed completion, wrapped in chatter like real models produce."""
    return """Oto dane faktury:
```json
{
  "invoiceNumber": "FV/2024/07/001",
  "date": "2024-07-03",
  "vendor": "Stalmet s.c.",
  "items": [
    {"name": "Pręt zbrojeniowy 12mm", "quantity": 40, "unit": "m",
     "percentage": 23, "net_price": 6.5, "gross_price": 8.0,
     "total_net": 999, "total_gross": 999},
    {"name": "Drut wiązałkowy", "quantity": "2,5", "unit": "kg",
     "percentage": "8%", "net_price": "12,00", "gross_price": 12.96}
  ],
  "totalNet": 1,
  "totalGross": 1
}
```"""


@pytest.fixture
def make_llm():
    """Factory for stub completion providers."""
    return StubLLMProvider
