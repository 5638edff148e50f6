"""
Test Suite Configuration
"""
import pytest

from multidim.config import Settings
from multidim.catalog import Catalog, Dimension, DimensionItem, DimensionMapping, normalize


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Create test settings"""
    return Settings(
        app_env="testing",
        debug=True,
    )


@pytest.fixture
def planet_dimension() -> Dimension:
    return Dimension("planet", "Planet", [
        DimensionItem("earth", "Earth"),
        DimensionItem("mars", "Mars"),
    ])


@pytest.fixture
def region_dimension() -> Dimension:
    return Dimension("region", "Region", [
        DimensionItem("europe", "Europe", [DimensionMapping("europe_planet", "planet", "earth")]),
        DimensionItem("usa", "USA", [DimensionMapping("usa_planet", "planet", "earth")]),
    ])


@pytest.fixture
def country_dimension() -> Dimension:
    return Dimension("country", "Country", [
        DimensionItem("germany", "Germany", [DimensionMapping("germany_region", "region", "europe")]),
        DimensionItem("poland", "Poland", [DimensionMapping("poland_region", "region", "europe")]),
    ])


@pytest.fixture
def ads_dimension() -> Dimension:
    return Dimension("ads", "Ads", [
        DimensionItem("google", "Google"),
        DimensionItem("facebook", "Facebook"),
        DimensionItem("linkedin", "LinkedIn"),
    ])


@pytest.fixture
def catalog(country_dimension, ads_dimension, region_dimension, planet_dimension) -> Catalog:
    """Full catalog; region is listed twice on purpose"""
    return normalize([
        country_dimension,
        ads_dimension,
        region_dimension,
        region_dimension,
        planet_dimension,
    ])
