# src/xaiprecompute/llm/client_factory.py - v2
"""Factory: build the completion client named by settings.llm_provider.

Adapters are imported lazily so that only the selected provider's SDK has to
be importable. Each registry entry pairs the adapter class path with the
settings fields it is constructed from.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Callable

from xaiprecompute.config.settings import Settings
from xaiprecompute.llm.base_client import BaseLLMClient

logger = logging.getLogger(__name__)

CredentialResolver = Callable[[Settings], dict[str, object]]


def _openai_credentials(settings: Settings) -> dict[str, object]:
    return {"api_key": settings.openai_api_key, "base_url": settings.openai_base_url}


def _no_credentials(settings: Settings) -> dict[str, object]:
    return {}


_PROVIDERS: dict[str, tuple[str, CredentialResolver]] = {
    "openai": (
        "xaiprecompute.llm.adapters.openai_adapter.OpenAIAdapter",
        _openai_credentials,
    ),
}


class UnsupportedProviderError(ValueError):
    """No adapter is registered under the requested provider name."""


def create_llm_client(
    settings: Settings,
    provider: str | None = None,
    model: str | None = None,
    **kwargs: object,
) -> BaseLLMClient:
    """Build the adapter for ``provider`` (default: settings.llm_provider).

    ``model`` defaults to settings.precompute_model. Extra keyword arguments
    win over the values resolved from settings.

    Raises:
        UnsupportedProviderError: Unknown provider name.
    """
    name = provider or settings.llm_provider
    entry = _PROVIDERS.get(name)
    if entry is None:
        raise UnsupportedProviderError(
            f"Unsupported LLM provider: {name!r}. "
            f"Available: {', '.join(sorted(_PROVIDERS))}"
        )

    class_path, resolve = entry
    module_name, _, class_name = class_path.rpartition(".")
    adapter_cls = getattr(importlib.import_module(module_name), class_name)

    options = {**resolve(settings), **kwargs, "model": model or settings.precompute_model}
    logger.debug("Creating completion client: provider=%s, model=%s", name, options["model"])
    return adapter_cls(**options)


def register_provider(
    name: str,
    class_path: str,
    credentials: CredentialResolver = _no_credentials,
) -> None:
    """Make an extra BaseLLMClient implementation selectable by name."""
    _PROVIDERS[name] = (class_path, credentials)
    logger.info("Registered completion provider %s -> %s", name, class_path)
