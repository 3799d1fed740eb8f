import pytest

from kitchen_ledger.core import materials
from kitchen_ledger.core.errors import NotFoundError, ValidationError
from kitchen_ledger.db.models import RawMaterial, UserData


def test_save_material_creates_with_new_id(apply):
    data = apply(UserData(), materials.save_material,
                 RawMaterial(id=None, name="  Butter ", consumption_unit="kg", supplier="Dairy"))
    [butter] = data.raw_materials
    assert butter.id
    assert butter.name == "Butter"
    assert "Dairy" in data.suppliers


def test_save_material_replaces_by_id(kitchen, apply):
    data = apply(kitchen, materials.save_material,
                 RawMaterial(id="flour", name="Bread flour", stock=10, purchase_price=5))
    assert len(data.raw_materials) == 2
    assert data.raw_materials[0].name == "Bread flour"


def test_save_material_rejects_unknown_unit():
    with pytest.raises(ValidationError):
        materials.save_material(UserData(), RawMaterial(id=None, name="Salt", consumption_unit="lb"))


def test_purchase_reaverages_price(kitchen, apply):
    data = apply(kitchen, materials.purchase_material, "flour", 10, 30, "")
    flour = data.raw_materials[0]
    assert flour.stock == pytest.approx(20)
    assert flour.purchase_price == pytest.approx(4)
    assert flour.supplier == "Mill"
    assert flour.purchase_history[0].price_per_unit == pytest.approx(3)


def test_purchase_applies_unit_conversion(apply):
    sack = RawMaterial(id="f", name="Flour", purchase_unit_conversion=25)
    data = apply(UserData(raw_materials=[sack]), materials.purchase_material, "f", 2, 60, "Mill & Co")
    flour = data.raw_materials[0]
    assert flour.stock == pytest.approx(50)
    assert flour.purchase_price == pytest.approx(1.2)
    assert flour.purchase_history[0].quantity == 2
    assert flour.purchase_history[0].price_per_unit == pytest.approx(30)
    assert "Mill & Co" in data.suppliers


def test_purchase_of_free_goods_on_empty_stock(apply):
    data = apply(UserData(raw_materials=[RawMaterial(id="x", name="Salt")]),
                 materials.purchase_material, "x", 1, 0, "")
    assert data.raw_materials[0].purchase_price == 0


def test_purchase_rejects_bad_input(kitchen):
    with pytest.raises(ValidationError):
        materials.purchase_material(kitchen, "flour", 0, 10, "")
    with pytest.raises(NotFoundError):
        materials.purchase_material(kitchen, "nope", 1, 10, "")


def test_delete_material_strips_recipes_and_recosts(kitchen, apply):
    data = apply(kitchen, materials.delete_material, "flour")
    assert [m.id for m in data.raw_materials] == ["sugar"]
    bread = data.recipes[0]
    assert bread.ingredients == []
    # Only the services share of fixed costs is left
    assert bread.cost == pytest.approx(100 * 0.10 / 5)


def test_register_supplier_is_case_insensitive():
    suppliers = materials.register_supplier(["General Supplier"], "mill")
    assert suppliers == ["General Supplier", "mill"]
    assert materials.register_supplier(suppliers, "MILL") is suppliers


def test_low_stock_and_inventory_value(kitchen):
    assert [m.id for m in materials.low_stock(kitchen)] == ["sugar"]
    assert materials.inventory_value(kitchen.raw_materials) == pytest.approx(52)


def test_recipes_using(kitchen):
    assert [r.id for r in materials.recipes_using(kitchen, "flour")] == ["bread"]
    assert materials.recipes_using(kitchen, "sugar") == []
