"""Raw materials: create/edit, purchases, deletion and suppliers.

Stock is always held in the material's consumption unit.  A purchase adds
quantity * purchase_unit_conversion to stock and re-averages the unit price
over the old and new valuation.  Operations return the changed collections.
"""

import logging
from dataclasses import replace

from kitchen_ledger.core import costing
from kitchen_ledger.core.errors import NotFoundError, ValidationError
from kitchen_ledger.db.models import (
    CONSUMPTION_UNITS, PurchaseRecord, RawMaterial, UserData,
    find_by_id, new_id, utc_now,
)

logger = logging.getLogger(__name__)


def register_supplier(suppliers: list, name: str) -> list:
    """Return suppliers with name added (case-insensitive, sorted), or unchanged if known."""
    trimmed = (name or "").strip()
    if not trimmed or any(s.lower() == trimmed.lower() for s in suppliers):
        return suppliers
    return sorted([*suppliers, trimmed])


def add_supplier(data: UserData, name: str) -> dict:
    if not (name or "").strip():
        raise ValidationError("Supplier name is required.")
    return {"suppliers": register_supplier(data.suppliers, name)}


def _validate(material: RawMaterial) -> None:
    if not material.name or not material.name.strip():
        raise ValidationError("Material name is required.")
    if material.consumption_unit not in CONSUMPTION_UNITS:
        raise ValidationError(f"Unknown unit '{material.consumption_unit}'.")
    if material.stock < 0 or material.min_stock < 0 or material.purchase_price < 0:
        raise ValidationError("Stock, minimum stock and price cannot be negative.")
    if material.purchase_unit_conversion is not None and material.purchase_unit_conversion <= 0:
        raise ValidationError("Purchase unit conversion must be greater than zero.")


def save_material(data: UserData, material: RawMaterial) -> dict:
    """Create a material (no id or unknown id gets a fresh one) or replace it by id."""
    _validate(material)
    material = replace(material, name=material.name.strip(), supplier=material.supplier.strip())
    suppliers = register_supplier(data.suppliers, material.supplier)

    if material.id and find_by_id(data.raw_materials, material.id):
        raw_materials = [material if m.id == material.id else m for m in data.raw_materials]
        logger.info("Updated raw material %s", material.id)
    else:
        material = replace(material, id=new_id())
        raw_materials = [*data.raw_materials, material]
        logger.info("Created raw material %s (%s)", material.id, material.name)
    return {"raw_materials": raw_materials, "suppliers": suppliers}


def purchase_material(data: UserData, material_id: str, quantity: float, total_cost: float, supplier: str) -> dict:
    """Record a purchase: append history, add stock, re-average the unit price.

    quantity is in purchase units; total_cost is what was paid for all of it.
    """
    if quantity <= 0:
        raise ValidationError("Purchased quantity must be greater than zero.")
    if total_cost < 0:
        raise ValidationError("Total cost cannot be negative.")
    material = find_by_id(data.raw_materials, material_id)
    if material is None:
        raise NotFoundError("Raw material", material_id)

    supplier = (supplier or "").strip() or material.supplier
    stock_to_add = quantity * (material.purchase_unit_conversion or 1)
    new_stock = material.stock + stock_to_add
    new_value = material.stock * material.purchase_price + total_cost
    avg_price = new_value / new_stock if new_stock > 0 else 0.0

    record = PurchaseRecord(
        date=utc_now(),
        quantity=quantity,
        price_per_unit=total_cost / quantity,
        supplier=supplier,
    )
    updated = replace(
        material,
        stock=new_stock,
        purchase_price=avg_price,
        supplier=supplier,
        purchase_history=[*material.purchase_history, record],
    )
    logger.info("Purchased %s of raw material %s for %.2f", quantity, material_id, total_cost)
    return {
        "raw_materials": [updated if m.id == material_id else m for m in data.raw_materials],
        "suppliers": register_supplier(data.suppliers, supplier),
    }


def delete_material(data: UserData, material_id: str, percentages: dict = None) -> dict:
    """Delete a material, drop it from every recipe and recost the affected recipes."""
    if find_by_id(data.raw_materials, material_id) is None:
        raise NotFoundError("Raw material", material_id)
    raw_materials = [m for m in data.raw_materials if m.id != material_id]

    recipes = []
    for recipe in data.recipes:
        if any(i.raw_material_id == material_id for i in recipe.ingredients):
            stripped = replace(recipe, ingredients=[i for i in recipe.ingredients if i.raw_material_id != material_id])
            recipe = costing.recalculate_recipe(stripped, raw_materials, data.fixed_costs, percentages)
        recipes.append(recipe)
    logger.info("Deleted raw material %s", material_id)
    return {"raw_materials": raw_materials, "recipes": recipes}


def recipes_using(data: UserData, material_id: str) -> list:
    """Return the recipes that list material_id as an ingredient."""
    return [r for r in data.recipes if any(i.raw_material_id == material_id for i in r.ingredients)]


def low_stock(data: UserData) -> list:
    """Return materials whose stock is below their minimum."""
    return [m for m in data.raw_materials if m.stock < m.min_stock]


def inventory_value(materials: list) -> float:
    return sum(m.stock * m.purchase_price for m in materials)
