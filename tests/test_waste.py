from dataclasses import replace

import pytest

from kitchen_ledger.core import waste
from kitchen_ledger.core.errors import (
    InsufficientStockError, NotFoundError, OrphanedCompensationError, ValidationError,
)


def test_record_raw_material_waste(kitchen, apply):
    data = apply(kitchen, waste.record_waste, "flour", "RAW_MATERIAL", 2, " spilled ")
    assert data.raw_materials[0].stock == pytest.approx(8)
    record = data.waste_records[0]
    assert record.item_name == "Flour"
    assert record.unit == "kg"
    assert record.reason == "spilled"


def test_record_product_waste_is_newest_first(kitchen, apply):
    data = apply(kitchen, waste.record_waste, "loaf", "PRODUCT", 1)
    data = apply(data, waste.record_waste, "loaf", "PRODUCT", 2)
    assert data.sellable_products[0].quantity_in_stock == pytest.approx(7)
    assert [r.quantity for r in data.waste_records] == [2, 1]
    assert data.waste_records[0].unit == "und"


def test_record_waste_validates(kitchen):
    with pytest.raises(ValidationError):
        waste.record_waste(kitchen, "flour", "SOMETHING", 1)
    with pytest.raises(ValidationError):
        waste.record_waste(kitchen, "flour", "RAW_MATERIAL", 0)
    with pytest.raises(InsufficientStockError):
        waste.record_waste(kitchen, "flour", "RAW_MATERIAL", 11)
    with pytest.raises(NotFoundError):
        waste.record_waste(kitchen, "loaf", "RAW_MATERIAL", 1)


def test_delete_restores_stock_once(kitchen, apply):
    data = apply(kitchen, waste.record_waste, "flour", "RAW_MATERIAL", 3)
    record_id = data.waste_records[0].id
    data = apply(data, waste.delete_waste_record, record_id)
    assert data.raw_materials[0].stock == pytest.approx(10)
    assert data.waste_records == []
    with pytest.raises(NotFoundError):
        waste.delete_waste_record(data, record_id)


def test_delete_for_deleted_item(kitchen, apply):
    data = apply(kitchen, waste.record_waste, "loaf", "PRODUCT", 1)
    record_id = data.waste_records[0].id
    data = replace(data, sellable_products=[])
    with pytest.raises(OrphanedCompensationError):
        waste.delete_waste_record(data, record_id)
    data = apply(data, waste.delete_waste_record, record_id, force=True)
    assert data.waste_records == []


def test_waste_value_uses_current_cost(kitchen, apply):
    data = apply(kitchen, waste.record_waste, "flour", "RAW_MATERIAL", 2)
    data = apply(data, waste.record_waste, "loaf", "PRODUCT", 1)
    assert waste.waste_value(data) == pytest.approx(2 * 5 + 1 * 2)
