"""Versioned embedding and chat model providers."""

from ragdesk.core.providers.provider_registry import (
    ProviderRegistry,
    ProviderSnapshot,
    build_provider_config,
)

__all__ = ["ProviderRegistry", "ProviderSnapshot", "build_provider_config"]
