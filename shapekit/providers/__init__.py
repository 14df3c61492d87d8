from .registry import (
    ARTIFACT_KINDS,
    ProviderBundle,
    ProviderRegistry,
    default_registry,
    get_provider,
    register,
)

__all__ = [
    "ARTIFACT_KINDS",
    "ProviderBundle",
    "ProviderRegistry",
    "default_registry",
    "get_provider",
    "register",
]
