"""
Test configuration and fixtures for DataSonify.

This file contains pytest configuration and shared fixtures
for testing the DataSonify package.
"""

import pytest
import tempfile
from pathlib import Path

from datasonify.audio import RecordingEmitter
from datasonify.config import reset_config


@pytest.fixture(autouse=True)
def default_config():
    """Give every test the default configuration."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def emitter():
    """Emitter that records every note it receives."""
    return RecordingEmitter()


@pytest.fixture
def pizza_csv(temp_dir):
    """Monthly pizza sales, the classic melody demo."""
    path = temp_dir / "pizza.csv"
    path.write_text(
        "Month,Total\n"
        "Jan,100\n"
        "Feb,200\n"
        "Mar,300\n"
        "Apr,\n"
        "May,n/a\n"
        "Jun,250\n"
    )
    return path


@pytest.fixture
def pizza_orders_csv(temp_dir):
    """Raw pizza orders, one row per sale."""
    path = temp_dir / "orders.csv"
    path.write_text(
        "date,pizza,price\n"
        "2015-02-03,hawaiian,5.5\n"
        "2015-01-01,margherita,10\n"
        "2015-01-15,pepperoni,20\n"
        "2015-03-10,four cheese,40\n"
    )
    return path


@pytest.fixture
def revenue_csv(temp_dir):
    """Yearly studio revenue with a numeric key column."""
    path = temp_dir / "revenue.csv"
    path.write_text(
        "Year,Revenue,Studio\n"
        "1985,\"1,000,000\",Ghibli\n"
        "1990,4000000,Ghibli\n"
        "1995,2000000,Ghibli\n"
        "2000,8000000,Ghibli\n"
        "2005,6000000,Ghibli\n"
    )
    return path


@pytest.fixture
def cars_csv(temp_dir):
    """Lap times with manufacturer and model label columns."""
    path = temp_dir / "cars.csv"
    path.write_text(
        "Manufacturer,Model,Time\n"
        "Ferrari,F50, 3.7\n"
        "Porsche,911,4.2\n"
        "Bugatti,Chiron,2.4\n"
        "Fiat,Panda,14.0\n"
    )
    return path


@pytest.fixture
def volcano_csv(temp_dir):
    """Volcano elevations in meters."""
    path = temp_dir / "volcanoes.csv"
    path.write_text(
        "Name,Elevation_meters\n"
        "Fuji,3776\n"
        "Aso,1592\n"
        "Sakurajima,1117\n"
        "Oshima,758\n"
    )
    return path


def pytest_configure(config):
    """Configure pytest."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
