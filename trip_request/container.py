"""Dependency injection container.

A small container without external frameworks: ports are registered
against factories and resolved lazily. There is deliberately no
module-level default container; callers build one and pass the
resulting coordinator around.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from .config import AppConfig, get_config
from .ports.scheduler import SchedulerPort


@dataclass
class Container:
    """Dependency injection container.

    Usage:
        # Production
        container = Container.create_default()
        coordinator = container.resolve(TripRequestCoordinator)

        # Testing
        container = Container.create_default(scheduler=ManualScheduler())
        container.register(TripPlannerServicePort, lambda: fake_service)
        coordinator = container.resolve(TripRequestCoordinator)

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
        """Register a factory for a port type.

        Re-registering a type replaces its factory and drops any
        instance already built from the old one.
        """
        with self._lock:
            self._factories[port_type] = factory
            self._singletons.pop(port_type, None)
            if singleton:
                self._singleton_types.add(port_type)
            else:
                self._singleton_types.discard(port_type)

    def resolve(self, port_type: type[Any]) -> Any:
        """Resolve an instance of a port type.

        Raises:
            KeyError: If the type is not registered.
        """
        with self._lock:
            if port_type not in self._factories:
                raise KeyError(f"Type not registered: {port_type}")

            if port_type in self._singleton_types:
                if port_type not in self._singletons:
                    self._singletons[port_type] = self._factories[port_type]()
                return self._singletons[port_type]

            return self._factories[port_type]()

    def resolve_optional(self, port_type: type[Any]) -> Any:
        """Resolve a port, or return None when it is not registered."""
        if not self.is_registered(port_type):
            return None
        return self.resolve(port_type)

    def is_registered(self, port_type: type[Any]) -> bool:
        return port_type in self._factories

    def clear_singletons(self) -> None:
        """Clear all cached singletons."""
        with self._lock:
            self._singletons.clear()

    def clear_all(self) -> None:
        """Clear all registrations and singletons."""
        with self._lock:
            self._factories.clear()
            self._singletons.clear()
            self._singleton_types.clear()

    @classmethod
    def create_default(
        cls,
        config: Optional[AppConfig] = None,
        scheduler: Optional[SchedulerPort] = None,
    ) -> Container:
        """Create a container with default production bindings.

        Args:
            config: Optional configuration override.
            scheduler: Timer source; defaults to the running asyncio loop.

        Returns:
            A configured Container instance.
        """
        from .adapters.cache import InMemoryCache
        from .adapters.geocoding import NominatimGeocoderAdapter
        from .adapters.notify import LoggingNotifier
        from .adapters.parsing import ItineraryParser
        from .adapters.rendering import FoliumMapOverlay
        from .adapters.scheduling import AsyncioScheduler
        from .adapters.service import OTPServiceClient
        from .ports.cache import CachePort
        from .ports.geocoding import GeocoderPort
        from .ports.map_overlay import MapOverlayPort
        from .ports.notifier import NotifierPort
        from .ports.plan_parser import TripPlanParserPort
        from .ports.trip_service import TripPlannerServicePort
        from .services import ErrorMapper, TripRequestCoordinator

        config = config or get_config()
        container = cls(config=config)

        container.register(SchedulerPort, lambda: scheduler or AsyncioScheduler())

        container.register(
            CachePort,
            lambda: InMemoryCache(
                name="geocode",
                default_ttl_seconds=config.geocoding.cache_ttl_seconds,
            ),
        )

        if config.geocoding.enabled:
            container.register(
                GeocoderPort,
                lambda: NominatimGeocoderAdapter(
                    config.geocoding, container.resolve(CachePort)
                ),
            )

        container.register(
            TripPlannerServicePort,
            lambda: OTPServiceClient(config.service),
        )
        container.register(TripPlanParserPort, lambda: ItineraryParser())
        container.register(MapOverlayPort, lambda: FoliumMapOverlay())
        container.register(NotifierPort, lambda: LoggingNotifier())
        container.register(ErrorMapper, lambda: ErrorMapper())

        def create_coordinator() -> TripRequestCoordinator:
            return TripRequestCoordinator(
                service=container.resolve(TripPlannerServicePort),
                parser=container.resolve(TripPlanParserPort),
                scheduler=container.resolve(SchedulerPort),
                geocoder=container.resolve_optional(GeocoderPort),
                map_overlay=container.resolve(MapOverlayPort),
                notifier=container.resolve(NotifierPort),
                form=config.form,
                service_config=config.service,
                submission_config=config.submission,
                error_mapper=container.resolve(ErrorMapper),
            )

        container.register(TripRequestCoordinator, create_coordinator)

        return container
