"""Shared pytest configuration and fixtures for stockbook tests."""

import os

import pytest

from stockbook.config import reset_settings
from tests.helpers.builders import N, T, make_sheet, make_workbook


def pytest_addoption(parser):
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="Include tests marked @pytest.mark.slow (e.g. live Google Sheets)",
    )


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: marks tests as slow (skipped unless --run-slow)")


def pytest_collection_modifyitems(config, items):
    if config.getoption("--run-slow"):
        return
    skip = pytest.mark.skip(reason="slow test, pass --run-slow to include")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip)


@pytest.fixture(autouse=True)
def fresh_settings(request, monkeypatch, tmp_path):
    """Isolate every test from STOCKBOOK_* variables and any local .env file.

    Slow tests keep the environment; they read live credentials from it.
    """
    if "slow" in request.keywords:
        reset_settings()
        yield
        return
    for key in list(os.environ):
        if key.startswith("STOCKBOOK_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def inventory_sheet():
    """The default inventory layout with four products."""
    return make_sheet(
        "Inventario",
        [
            ("Producto", T),
            ("Stock Actual", N),
            ("Stock Mínimo", N),
            ("Stock Máximo", N),
            ("Coste Unit.", N),
        ],
        [
            ["Tornillos", 5, 10, 100, 0.5],
            ["Tuercas", 40, 10, 100, 0.25],
            ["Arandelas", 150, 10, 100, 0.1],
            ["Clavos", None, 10, 100, None],
        ],
    )


@pytest.fixture
def inventory(inventory_sheet):
    return make_workbook(inventory_sheet)


@pytest.fixture
def end_to_end():
    """One sheet with two products: X below minimum, Y within range."""
    sheet = make_sheet(
        "Stock",
        [("Nombre", T), ("Stock Actual", N), ("Coste", N)],
        [["X", 5, 2], ["Y", 50, 3]],
    )
    return make_workbook(sheet)
