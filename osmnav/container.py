"""Dependency injection container.

A small DI container without external frameworks. Ports are registered
with factories and resolved lazily; singletons are cached.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from .config import AppConfig, get_config


@dataclass
class Container:
    """Dependency injection container.

    Usage:
        # Production
        container = Container.create_default()
        navigator = container.resolve(NavigatorService)

        # Testing
        container = Container()
        container.register(RouteSolverPort, lambda: FakeSolver())
        solver = container.resolve(RouteSolverPort)

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

        Args:
            port_type: The type (usually a Protocol) to register.
            factory: A callable that creates instances of the type.
            singleton: If True, only one instance is created.
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

    def is_registered(self, port_type: type[Any]) -> bool:
        return port_type in self._factories

    def clear_singletons(self) -> None:
        with self._lock:
            self._singletons.clear()

    @classmethod
    def create_default(
        cls,
        config: Optional[AppConfig] = None,
        logger: Optional[logging.Logger] = None,
    ) -> Container:
        """Create a container with default production bindings.

        The renderer follows ``config.rendering.backend``. The navigator
        is not a singleton: each resolution holds its own loaded graph.
        When ``logger`` is given, the solver and the navigator both log
        to it.
        """
        from .adapters.graph import DijkstraRouteSolver, DotGraphReader, OsmXmlReader
        from .adapters.rendering import FoliumMapRenderer, GraphvizExporter
        from .domain.models import InputFormat
        from .ports.graph import RouteSolverPort
        from .ports.rendering import GraphRendererPort
        from .services import NavigatorService

        config = config or get_config()
        container = cls(config=config)

        container.register(
            RouteSolverPort,
            lambda: DijkstraRouteSolver(
                enforce_one_way=config.routing.enforce_one_way, logger=logger
            ),
        )

        def create_renderer() -> GraphRendererPort:
            if config.rendering.backend == "folium":
                return FoliumMapRenderer()
            return GraphvizExporter(config.rendering)

        container.register(GraphRendererPort, create_renderer)

        def create_navigator() -> NavigatorService:
            return NavigatorService(
                route_solver=container.resolve(RouteSolverPort),
                readers={
                    InputFormat.MAP_RECORDS: OsmXmlReader,
                    InputFormat.ANNOTATED_GRAPH: DotGraphReader,
                },
                renderer=container.resolve(GraphRendererPort),
                ingestion=config.ingestion,
                rendering=config.rendering,
                logger=logger,
            )

        container.register(NavigatorService, create_navigator, singleton=False)

        return container
