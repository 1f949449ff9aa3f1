"""Dependency injection: the provider registry.

One entry per concern. Mockable entries resolve to their production or mock
implementation when a container is built; see ``container.create_container``
and ``tests.di.build_test_container``.
"""

from rolo.util.di.application import ProdApplicationProvider
from rolo.util.di.base import Component, ProviderBase
from rolo.util.di.core import ProdConfigProvider
from rolo.util.di.domain import ProdDomainProvider
from rolo.util.di.infrastructure import (
    IdentityProvider,
    NotificationProvider,
    PersistenceProvider,
)

PROVIDERS: list[type[ProviderBase]] = [
    ProdConfigProvider,
    ProdDomainProvider,
    ProdApplicationProvider,
    PersistenceProvider,
    IdentityProvider,
    NotificationProvider,
]

COMPONENTS: frozenset[Component] = frozenset(
    base.__mock_component__ for base in PROVIDERS if base.__mock_component__
)


def build_providers(
    mocked: set[Component] | frozenset[Component] = frozenset(),
) -> list[ProviderBase]:
    """Instantiate every registry entry, using mocks for the named components.

    Raises:
        ValueError: If an unknown component is named, or a mock is missing
    """
    unknown = set(mocked) - COMPONENTS
    if unknown:
        raise ValueError(f"Unknown components: {sorted(unknown)}")

    return [
        base.implementation(use_mock=base.__mock_component__ in mocked)()
        for base in PROVIDERS
    ]


__all__ = [
    "COMPONENTS",
    "Component",
    "PROVIDERS",
    "ProviderBase",
    "build_providers",
]
