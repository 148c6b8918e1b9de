import logging

import pytest
from pydantic import ValidationError

from osmnav.adapters.graph import DijkstraRouteSolver
from osmnav.adapters.rendering import FoliumMapRenderer, GraphvizExporter
from osmnav.config import DEFAULT_HIGHWAYS, IngestionConfig, ObservabilityConfig, get_config
from osmnav.container import Container
from osmnav.observability import configure_logging
from osmnav.ports.graph import RouteSolverPort
from osmnav.ports.rendering import GraphRendererPort
from osmnav.services import NavigatorService


class TestConfig:
    def test_defaults(self):
        config = get_config()

        assert config.ingestion.highway_whitelist == DEFAULT_HIGHWAYS
        assert config.ingestion.default_speed_kmh == 50.0
        assert config.routing.enforce_one_way is False
        assert config.rendering.backend == "graphviz"

    def test_config_is_cached(self):
        assert get_config() is get_config()

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("OSMNAV_ROUTING_ENFORCE_ONE_WAY", "true")
        monkeypatch.setenv("OSMNAV_INGEST_HIGHWAY_WHITELIST", '["primary"]')
        monkeypatch.setenv("OSMNAV_RENDER_BACKEND", "folium")

        config = get_config()

        assert config.routing.enforce_one_way is True
        assert config.ingestion.highway_whitelist == ["primary"]
        assert config.rendering.backend == "folium"

    def test_invalid_default_speed_rejected(self):
        with pytest.raises(ValidationError):
            IngestionConfig(default_speed_kmh=0)


class TestContainer:
    def test_default_bindings(self):
        container = Container.create_default()

        solver = container.resolve(RouteSolverPort)
        assert isinstance(solver, DijkstraRouteSolver)
        assert solver is container.resolve(RouteSolverPort)
        assert isinstance(container.resolve(GraphRendererPort), GraphvizExporter)

    def test_navigator_is_not_shared(self):
        container = Container.create_default()

        first = container.resolve(NavigatorService)
        second = container.resolve(NavigatorService)

        assert first is not second
        assert first.route_solver is second.route_solver

    def test_backend_and_one_way_follow_config(self, monkeypatch):
        monkeypatch.setenv("OSMNAV_RENDER_BACKEND", "folium")
        monkeypatch.setenv("OSMNAV_ROUTING_ENFORCE_ONE_WAY", "1")

        container = Container.create_default()

        assert isinstance(container.resolve(GraphRendererPort), FoliumMapRenderer)
        assert container.resolve(RouteSolverPort).enforce_one_way is True

    def test_override_registration(self):
        container = Container.create_default()
        container.resolve(RouteSolverPort)

        fake = DijkstraRouteSolver(enforce_one_way=True)
        container.register(RouteSolverPort, lambda: fake)

        assert container.resolve(RouteSolverPort) is fake
        assert container.resolve(NavigatorService).route_solver is fake

    def test_injected_logger_is_shared(self):
        logger = logging.getLogger("tests.container")
        container = Container.create_default(logger=logger)

        navigator = container.resolve(NavigatorService)

        assert navigator.logger is logger
        assert navigator.route_solver.logger is logger

    def test_unregistered_type_raises(self):
        with pytest.raises(KeyError):
            Container().resolve(RouteSolverPort)


@pytest.fixture
def package_logger():
    logger = logging.getLogger("osmnav")
    level = logger.level
    yield logger
    logger.setLevel(level)


def test_configure_logging_is_idempotent(package_logger):
    logger = configure_logging(ObservabilityConfig(level="debug"))
    handlers = list(logger.handlers)

    again = configure_logging(ObservabilityConfig(level="warning"))

    assert again is logger
    assert again.handlers == handlers
    assert logger.level == logging.WARNING


def test_log_records_carry_extra_context(package_logger):
    logger = configure_logging(ObservabilityConfig(level="INFO"))
    formatter = logger.handlers[0].formatter
    record = logging.LogRecord("osmnav.test", logging.INFO, __file__, 1, "Route found", None, None)
    record.stops = 3

    assert formatter.format(record).endswith("Route found [stops=3]")
