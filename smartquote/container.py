"""Dependency injection container.

Explicit registration and resolution of ports and services, with lazily
created singletons. Tests build an empty Container and register fakes;
applications use :meth:`Container.create_default`.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, TypeVar

from .config import AppConfig, get_config
from .domain.errors import ConfigurationError

T = TypeVar("T")


@dataclass
class Container:
    """Dependency injection container.

    Usage:
        # Production
        container = Container.create_default()
        processor = container.resolve(QuoteLineProcessor)

        # Testing
        container = Container()
        container.register(DistanceProviderPort, lambda: FakeDistances())

    Attributes:
        config: Application configuration
    """

    config: AppConfig = field(default_factory=get_config)

    _factories: Dict[type[Any], Callable[[], Any]] = field(
        default_factory=dict, repr=False
    )
    _singletons: Dict[type[Any], Any] = field(default_factory=dict, repr=False)
    _singleton_types: set[type[Any]] = field(default_factory=set, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def register(
        self,
        port_type: type[Any],
        factory: Callable[[], Any],
        singleton: bool = True,
    ) -> None:
        """Register a factory for a port or service type.

        Re-registering a type replaces its factory and drops any singleton
        already built from the old one.
        """
        with self._lock:
            self._factories[port_type] = factory
            self._singletons.pop(port_type, None)
            if singleton:
                self._singleton_types.add(port_type)
            else:
                self._singleton_types.discard(port_type)

    def resolve(self, port_type: type[T]) -> T:
        """Resolve an instance of a registered type.

        Raises:
            KeyError: If the type is not registered.
        """
        with self._lock:
            factory = self._factories.get(port_type)
            if factory is None:
                raise KeyError(f"Type not registered: {port_type}")

            if port_type not in self._singleton_types:
                return factory()
            if port_type not in self._singletons:
                self._singletons[port_type] = factory()
            return self._singletons[port_type]

    def is_registered(self, port_type: type[Any]) -> bool:
        return port_type in self._factories

    def clear_singletons(self) -> None:
        with self._lock:
            self._singletons.clear()

    def clear_all(self) -> None:
        with self._lock:
            self._factories.clear()
            self._singletons.clear()
            self._singleton_types.clear()

    @classmethod
    def create_default(cls, config: Optional[AppConfig] = None) -> Container:
        """Create a container wired with the default adapters and services.

        Adapters are built lazily, so a bad setting surfaces as a
        ConfigurationError on first resolve of the component that uses it.
        """
        from .adapters.cache import InMemoryCache
        from .adapters.catalogue import CSVCatalogueStore
        from .adapters.distance import (
            GeodesicDistanceProvider,
            PostcodeAreaDistanceProvider,
        )
        from .adapters.zones import zone_providers_from_config
        from .ports.cache import CachePort
        from .ports.catalogue import CatalogueStorePort
        from .ports.distance import DistanceProviderPort
        from .ports.zones import ZoneProviders
        from .services import (
            CatalogueResolver,
            QuoteLineProcessor,
            RouteCalculator,
            WasteEstimator,
        )

        config = config or get_config()
        container = cls(config=config)

        cache: InMemoryCache[Any] = InMemoryCache(
            name="distance",
            default_ttl_seconds=config.distance.cache_ttl_seconds,
            max_size=10_000,
        )
        container.register(CachePort, lambda: cache)

        container.register(
            CatalogueStorePort,
            lambda: CSVCatalogueStore(config.catalogue),
        )

        def create_distance_provider() -> DistanceProviderPort:
            if config.distance.provider == "geodesic":
                if config.distance.coordinates_file is None:
                    raise ConfigurationError(
                        "Geodesic distance provider needs a coordinates file",
                        setting_name="distance.coordinates_file",
                        expected_type="path",
                    )
                return GeodesicDistanceProvider.from_csv(
                    config.distance.coordinates_file,
                    config=config.distance,
                    cache=container.resolve(CachePort),
                )
            return PostcodeAreaDistanceProvider()

        container.register(DistanceProviderPort, create_distance_provider)
        container.register(
            ZoneProviders,
            lambda: zone_providers_from_config(config.zones),
        )

        container.register(
            WasteEstimator,
            lambda: WasteEstimator.from_config(config.waste),
        )
        container.register(
            CatalogueResolver,
            lambda: CatalogueResolver(config=config.matching),
        )
        container.register(
            QuoteLineProcessor,
            lambda: QuoteLineProcessor(
                resolver=container.resolve(CatalogueResolver),
                estimator=container.resolve(WasteEstimator),
            ),
        )
        container.register(
            RouteCalculator,
            lambda: RouteCalculator(
                distance_provider=container.resolve(DistanceProviderPort),
                zone_providers=container.resolve(ZoneProviders),
                config=config.route,
            ),
        )

        return container


# Global default container (lazy initialized)
_default_container: Optional[Container] = None
_container_lock = threading.Lock()


def get_container() -> Container:
    """Return the process-wide default container, creating it if needed."""
    global _default_container
    if _default_container is None:
        with _container_lock:
            if _default_container is None:
                _default_container = Container.create_default()
    return _default_container


def reset_container() -> None:
    """Drop the default container; the next get_container() builds a new one."""
    global _default_container
    with _container_lock:
        if _default_container is not None:
            _default_container.clear_all()
        _default_container = None
