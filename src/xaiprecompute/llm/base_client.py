# src/xaiprecompute/llm/base_client.py - v1
"""Abstract completion client interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from xaiprecompute.llm.models import LLMResponse, Message


class BaseLLMClient(ABC):
    """Unified interface for completion providers.

    Implementations raise ConfigurationError when their credential is missing,
    UpstreamError when the call fails, and SchemaError when the response
    cannot be read.
    """

    @abstractmethod
    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 1000,
        temperature: float = 0.7,
    ) -> LLMResponse:
        """Text completion."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (openai)."""

    @property
    @abstractmethod
    def model(self) -> str:
        """Model id sent with every request."""
