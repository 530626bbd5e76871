import pytest

from starentity import EntitySet, reset_config

from sample_entities import ItemEntity


@pytest.fixture(autouse=True)
def fresh_config():
    """Every test starts from the default global configuration"""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def items():
    """Set of A(name=x), B(name=y), C(name=x)"""
    return EntitySet(ItemEntity, [
        {"name": "x", "price": 1.0, "tag": "a"},
        {"name": "y", "price": 2.0, "tag": "b"},
        {"name": "x", "price": 3.0, "tag": "c"},
    ])
