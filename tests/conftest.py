import os
from dataclasses import replace

import pytest

from kitchen_ledger.db.models import (
    FixedCost, Ingredient, RawMaterial, Recipe, SellableProduct, UserData,
)


@pytest.fixture(scope="session", autouse=True)
def set_test_env(tmp_path_factory):
    db_file = tmp_path_factory.mktemp("data") / "test.db"
    os.environ["DB_PATH"] = str(db_file)
    os.environ["SECRET_KEY"] = "test-secret-key-for-testing"
    os.environ["DEMO_USERNAME"] = "demo"
    os.environ["DEMO_PASSWORD"] = "testpass"


@pytest.fixture(scope="session")
def client(set_test_env):
    from fastapi.testclient import TestClient
    from app.main import app
    with TestClient(app, raise_server_exceptions=True) as c:
        yield c


@pytest.fixture(scope="session")
def authed_client(client):
    client.post("/login", data={"username": "demo", "password": "testpass"}, follow_redirects=False)
    return client


@pytest.fixture
def apply():
    """Run a domain operation against an in-memory snapshot and merge its changes."""
    def _apply(data, operation, *args, **kwargs):
        return replace(data, **operation(data, *args, **kwargs))
    return _apply


@pytest.fixture
def kitchen():
    """A small in-memory kitchen: flour and sugar, one recipe, one product in stock."""
    flour = RawMaterial(id="flour", name="Flour", consumption_unit="kg", stock=10, purchase_price=5,
                        min_stock=2, supplier="Mill")
    sugar = RawMaterial(id="sugar", name="Sugar", consumption_unit="kg", stock=1, purchase_price=2,
                        min_stock=3, supplier="")
    bread = Recipe(id="bread", name="Bread", production_yield=5, cost=11.5, pvp=14.5,
                   ingredients=[Ingredient(raw_material_id="flour", quantity=10)])
    loaf = SellableProduct(id="loaf", name="Bread", type="SINGLE", quantity_in_stock=10, cost=2, pvp=4,
                           recipe_id="bread")
    return UserData(
        raw_materials=[flour, sugar],
        recipes=[bread],
        sellable_products=[loaf],
        fixed_costs=[FixedCost(id="rent", name="Rent", monthly_cost=100)],
    )
