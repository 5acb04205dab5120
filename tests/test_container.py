"""Tests for the dependency injection container."""

import pytest

from smartquote.adapters.distance import GeodesicDistanceProvider, PostcodeAreaDistanceProvider
from smartquote.config import AppConfig, DistanceConfig
from smartquote.container import Container, get_container, reset_container
from smartquote.domain.errors import ConfigurationError
from smartquote.domain.models import Address, ProductLineInput
from smartquote.ports.catalogue import CatalogueStorePort
from smartquote.ports.distance import DistanceProviderPort
from smartquote.services import QuoteLineProcessor, RouteCalculator


class TestContainer:
    def test_register_and_resolve_singleton(self):
        container = Container(config=AppConfig())
        container.register(DistanceProviderPort, PostcodeAreaDistanceProvider)

        first = container.resolve(DistanceProviderPort)

        assert container.resolve(DistanceProviderPort) is first

    def test_transient_registration(self):
        container = Container(config=AppConfig())
        container.register(DistanceProviderPort, PostcodeAreaDistanceProvider, singleton=False)

        assert container.resolve(DistanceProviderPort) is not container.resolve(
            DistanceProviderPort
        )

    def test_reregistering_replaces_singleton(self, make_distance):
        container = Container(config=AppConfig())
        container.register(DistanceProviderPort, PostcodeAreaDistanceProvider)
        container.resolve(DistanceProviderPort)
        fake = make_distance()

        container.register(DistanceProviderPort, lambda: fake)

        assert container.resolve(DistanceProviderPort) is fake

    def test_unregistered_type_raises(self):
        with pytest.raises(KeyError):
            Container(config=AppConfig()).resolve(RouteCalculator)


class TestDefaultContainer:
    def test_end_to_end_quote(self):
        container = Container.create_default(AppConfig())
        snapshot = container.resolve(CatalogueStorePort).load_snapshot()
        processor = container.resolve(QuoteLineProcessor)

        result = processor.process_batch(
            [ProductLineInput("FLX-4P-2816-A", quantity=10), ProductLineInput("JUST A CHAIR", quantity=20)],
            snapshot,
        )

        assert result.resolved_count == 2
        assert result.total_waste_m3 == pytest.approx(1.05)

    def test_route_uses_area_table_by_default(self):
        container = Container.create_default(AppConfig())

        calc = container.resolve(RouteCalculator)
        result = calc.compute_route(Address("Client", "EC1A 1BB"))

        assert isinstance(calc.distance_provider, PostcodeAreaDistanceProvider)
        assert result.total_distance_miles == 100.0
        assert result.ulez_charge == 12.50

    def test_fake_distance_provider_can_be_swapped_in(self, make_distance):
        container = Container.create_default(AppConfig())
        fake = make_distance(default=(1.0, 2.0))
        container.register(DistanceProviderPort, lambda: fake)

        result = container.resolve(RouteCalculator).compute_route(Address("Client", "M1 1AE"))

        assert result.total_distance_miles == 2.0
        assert fake.calls

    def test_geodesic_provider_needs_coordinates(self):
        config = AppConfig(distance=DistanceConfig(provider="geodesic"))
        container = Container.create_default(config)

        with pytest.raises(ConfigurationError):
            container.resolve(DistanceProviderPort)

    def test_geodesic_provider_from_config(self, tmp_path):
        coords = tmp_path / "postcodes.csv"
        coords.write_text("postcode,latitude,longitude\nSE1 4AA,51.501,-0.089\n", encoding="utf-8")
        config = AppConfig(
            distance=DistanceConfig(provider="geodesic", coordinates_file=coords)
        )

        provider = Container.create_default(config).resolve(DistanceProviderPort)

        assert isinstance(provider, GeodesicDistanceProvider)
        assert "SE1 4AA" in provider.coordinates


def test_global_container_is_reset():
    first = get_container()
    reset_container()

    assert get_container() is not first
    reset_container()
