import pytest
from procurement.catalog import get_catalog


@pytest.fixture()
def catalog():
    """The in-process catalog, emptied after every test by the root conftest."""
    return get_catalog()


@pytest.fixture()
def allow_cancellation(monkeypatch):
    """Let both parties cancel orders."""
    monkeypatch.setenv("ORDER_CANCELLATION_ROLES", "store,supplier")
