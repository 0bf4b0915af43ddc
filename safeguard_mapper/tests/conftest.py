"""Shared fixtures: fake clock, catalog, rules and service."""

import pytest

from safeguard_mapper.catalog.safeguard_catalog import SafeguardCatalog
from safeguard_mapper.rules.rules_config import RulesConfig
from safeguard_mapper.services.mapping_service import MappingService


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture(scope="session")
def catalog():
    return SafeguardCatalog()


@pytest.fixture(scope="session")
def rules():
    return RulesConfig()


@pytest.fixture
def service(catalog, rules):
    catalog.clear_cache()
    return MappingService(catalog=catalog, rules=rules)
