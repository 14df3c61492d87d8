"""Declaration provider registry.

A ProviderBundle supplies the artifacts of an opaque Declaration. Each entry
is a factory: it receives the derived artifacts of the declaration's type
parameters (same kind, same order) and returns the artifact for the
declaration itself. Arbitrary factories also get the active ``Settings`` as
the ``settings`` keyword, so generators honour the size bounds of the
``arbitrary_for`` call.
"""
from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Callable, Iterator

from shapekit.core.errors import MissingProviderError
from shapekit.core.logging import provider_logger

log = provider_logger()

ARTIFACT_KINDS = ("decoder", "guard", "encoder", "pretty", "arbitrary")

Factory = Callable[..., Callable[..., Any]]


@dataclass(frozen=True, slots=True)
class ProviderBundle:
    decoder: Factory | None = None
    guard: Factory | None = None
    encoder: Factory | None = None
    pretty: Factory | None = None
    arbitrary: Factory | None = None

    def factory_for(self, artifact: str) -> Factory | None:
        if artifact not in ARTIFACT_KINDS:
            raise ValueError(f"Unknown artifact kind '{artifact}'. Available: {', '.join(ARTIFACT_KINDS)}")
        return getattr(self, artifact)

    @property
    def provided(self) -> tuple[str, ...]:
        return tuple(f.name for f in fields(self) if getattr(self, f.name) is not None)


class ProviderRegistry:
    """Maps declaration ids to provider bundles."""

    def __init__(self):
        self._bundles: dict[str, ProviderBundle] = {}

    def register(self, declaration_id: str, bundle: ProviderBundle) -> None:
        """Register (or replace) the bundle for a declaration id."""
        if declaration_id in self._bundles:
            log.debug("provider_replaced", declaration_id=declaration_id, artifacts=bundle.provided)
        self._bundles[declaration_id] = bundle

    def unregister(self, declaration_id: str) -> None:
        self._bundles.pop(declaration_id, None)

    def get(self, declaration_id: str) -> ProviderBundle | None:
        return self._bundles.get(declaration_id)

    def resolve(self, declaration_id: str, artifact: str) -> Factory:
        """Factory for one artifact kind. Raises MissingProviderError if absent."""
        bundle = self._bundles.get(declaration_id)
        factory = bundle.factory_for(artifact) if bundle is not None else None
        if factory is None:
            raise MissingProviderError(artifact, declaration_id)
        return factory

    def copy(self) -> ProviderRegistry:
        clone = ProviderRegistry()
        clone._bundles = dict(self._bundles)
        return clone

    def __contains__(self, declaration_id: object) -> bool:
        return declaration_id in self._bundles

    def __iter__(self) -> Iterator[str]:
        return iter(self._bundles)

    def __len__(self) -> int:
        return len(self._bundles)


default_registry = ProviderRegistry()


def register(declaration_id: str, bundle: ProviderBundle) -> None:
    """Register a bundle in the default registry."""
    default_registry.register(declaration_id, bundle)


def get_provider(declaration_id: str) -> ProviderBundle | None:
    return default_registry.get(declaration_id)


def _auto_register() -> None:
    """Register the built-in data types on import."""
    # Import triggers registration
    import shapekit.datatypes  # noqa: F401


_auto_register()
