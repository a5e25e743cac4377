import pytest
from httpx import ASGITransport, AsyncClient

from freight_pricing.main import app
from freight_pricing.api.deps import get_pricing_repository
from freight_pricing.core.config import settings
from freight_pricing.services.pricing_config import default_config, resolve_config


class InMemoryPricingRepository:
    """Stands in for PricingRepository without a database."""

    def __init__(self, config_record=None, distances=None, route_rates=None):
        self.config_record = config_record
        self.distances = distances or {}
        self.route_rates = route_rates or {}
        self.calls = []

    async def get_pricing_config(self):
        self.calls.append("config")
        if self.config_record is None:
            return default_config()
        return resolve_config(self.config_record)

    async def get_distances(self, origin, destination):
        self.calls.append("distances")
        key = (origin.upper(), destination.upper())
        if key in self.distances:
            return {key: self.distances[key]}
        return {}

    async def get_route_rate(self, origin, destination, mode):
        self.calls.append("route_rate")
        return self.route_rates.get((origin.upper(), destination.upper(), mode))


@pytest.fixture
def pricing_config():
    return default_config()


@pytest.fixture
def repository():
    return InMemoryPricingRepository()


@pytest.fixture
def repository_factory():
    return InMemoryPricingRepository


@pytest.fixture
async def test_client(repository):
    app.dependency_overrides[get_pricing_repository] = lambda: repository
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def valid_estimate_data():
    return {
        "origin_country": "FR",
        "destination_country": "DE",
        "cargo_type": "GENERAL",
        "weight": 1000.0,
        "transport_mode": ["ROAD"],
        "priority": "STANDARD",
    }


@pytest.fixture
def valid_packages_data():
    return {
        "origin_country": "FR",
        "destination_country": "DE",
        "transport_mode": ["ROAD"],
        "priority": "STANDARD",
        "packages": [
            {"description": "Pallet", "quantity": 2, "cargo_type": "PALLETIZED", "weight": 250.0},
            {"description": "Crate", "quantity": 1, "cargo_type": "FRAGILE", "weight": 80.0,
             "length": 120, "width": 80, "height": 100},
        ],
    }


@pytest.fixture
def app_settings():
    """Return application settings"""
    return settings


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "pricing: marks tests related to pricing"
    )
    config.addinivalue_line(
        "markers", "api: marks tests exercising the HTTP API"
    )
