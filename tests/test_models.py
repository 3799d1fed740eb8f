import pytest

from kitchen_ledger.db.models import (
    DEFAULT_SUPPLIER, Recipe, UserData, parse_float, serialize_changes, RawMaterial,
)


@pytest.mark.parametrize("value, expected", [
    (3, 3.0),
    ("2.5", 2.5),
    (" 1,5 ", 1.5),
    ("abc", 0.0),
    ("", 0.0),
    (None, 0.0),
    (float("nan"), 0.0),
    ("nan", 0.0),
])
def test_parse_float(value, expected):
    assert parse_float(value) == expected


def test_empty_document_loads_defaults():
    data = UserData.from_dict(None)
    assert data.raw_materials == []
    assert data.shopping_lists == []
    assert data.suppliers == [DEFAULT_SUPPLIER]


def test_stored_empty_supplier_list_is_kept():
    assert UserData.from_dict({"suppliers": []}).suppliers == []


def test_missing_fields_get_defaults():
    data = UserData.from_dict({
        "raw_materials": [{"id": "m", "name": "Milk", "stock": "2,5", "unit": "l"}],
        "sellable_products": [{"id": "p", "name": "Jam"}],
        "sales": [{"id": "s"}],
    })
    milk = data.raw_materials[0]
    assert milk.stock == 2.5
    assert milk.consumption_unit == "l"
    assert milk.purchase_unit_conversion is None
    assert milk.purchase_history == []
    assert data.sellable_products[0].type == "SINGLE"
    assert data.sales[0].date == ""
    assert data.sales[0].delivery_method == "in_person"


def test_recipe_zero_yield_becomes_one():
    recipe = Recipe.from_dict({"id": "r", "name": "Soup", "production_yield": "0"})
    assert recipe.production_yield == 1.0
    assert recipe.ingredients == []


def test_round_trip_through_dict():
    data = UserData(raw_materials=[RawMaterial(id="m", name="Salt", stock=1)])
    assert UserData.from_dict(data.to_dict()) == data


def test_serialize_changes_keeps_plain_values():
    changes = serialize_changes({"suppliers": ["A"], "raw_materials": [RawMaterial(id="m", name="Salt")]})
    assert changes["suppliers"] == ["A"]
    assert changes["raw_materials"][0]["name"] == "Salt"
