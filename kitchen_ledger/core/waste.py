"""Record stock lost to spoilage or damage, and reverse a record.

Deleting a record is a compensating action: it credits the recorded quantity
back to the item and removes the record, so it can happen only once.
"""

import logging
from dataclasses import replace
from typing import Optional

from kitchen_ledger.core import stock
from kitchen_ledger.core.errors import (
    InsufficientStockError, NotFoundError, OrphanedCompensationError, ValidationError,
)
from kitchen_ledger.db.models import WASTE_ITEM_TYPES, UserData, WasteRecord, find_by_id, new_id, utc_now

logger = logging.getLogger(__name__)


def record_waste(
    data: UserData,
    item_id: str,
    item_type: str,
    quantity: float,
    reason: str = "",
    unit: Optional[str] = None,
) -> dict:
    """Deduct quantity from a raw material or pantry product and log it as waste."""
    if item_type not in WASTE_ITEM_TYPES:
        raise ValidationError(f"Unknown item type '{item_type}'.")
    if quantity <= 0:
        raise ValidationError("Waste quantity must be greater than zero.")

    changes = {}
    if item_type == "RAW_MATERIAL":
        material = find_by_id(data.raw_materials, item_id)
        if material is None:
            raise NotFoundError("Raw material", item_id)
        if not stock.has_enough(material.stock, quantity):
            raise InsufficientStockError(
                "Not enough stock to record this waste.", [(material.name, quantity, material.stock)],
            )
        item_name, default_unit = material.name, material.consumption_unit
        changes["raw_materials"] = [
            replace(m, stock=stock.deduct(m.stock, quantity)) if m.id == item_id else m
            for m in data.raw_materials
        ]
    else:
        product = find_by_id(data.sellable_products, item_id)
        if product is None:
            raise NotFoundError("Product", item_id)
        if not stock.has_enough(product.quantity_in_stock, quantity):
            raise InsufficientStockError(
                "Not enough stock to record this waste.", [(product.name, quantity, product.quantity_in_stock)],
            )
        item_name, default_unit = product.name, "und"
        changes["sellable_products"] = [
            replace(p, quantity_in_stock=stock.deduct(p.quantity_in_stock, quantity)) if p.id == item_id else p
            for p in data.sellable_products
        ]

    record = WasteRecord(
        id=new_id(),
        item_id=item_id,
        item_name=item_name,
        item_type=item_type,
        quantity=quantity,
        unit=unit or default_unit,
        date=utc_now(),
        reason=(reason or "").strip(),
    )
    changes["waste_records"] = [record, *data.waste_records]
    logger.info("Recorded waste of %s %s for %s", quantity, record.unit, item_id)
    return changes


def delete_waste_record(data: UserData, record_id: str, force: bool = False) -> dict:
    """Remove a waste record and credit its quantity back to the item.

    If the item has since been deleted, raise OrphanedCompensationError unless
    force is set, in which case the record is dropped without restoring stock.
    """
    record = find_by_id(data.waste_records, record_id)
    if record is None:
        raise NotFoundError("Waste record", record_id)

    changes = {"waste_records": [r for r in data.waste_records if r.id != record_id]}
    if record.item_type == "RAW_MATERIAL":
        target = find_by_id(data.raw_materials, record.item_id)
        if target is not None:
            changes["raw_materials"] = [
                replace(m, stock=m.stock + record.quantity) if m.id == record.item_id else m
                for m in data.raw_materials
            ]
    else:
        target = find_by_id(data.sellable_products, record.item_id)
        if target is not None:
            changes["sellable_products"] = [
                replace(p, quantity_in_stock=p.quantity_in_stock + record.quantity) if p.id == record.item_id else p
                for p in data.sellable_products
            ]

    if target is None:
        if not force:
            raise OrphanedCompensationError("waste record", record_id, record.item_id)
        logger.warning("Dropping waste record %s without restoring stock; item %s is gone",
                       record_id, record.item_id)
    logger.info("Deleted waste record %s", record_id)
    return changes


def waste_value(data: UserData, records: list = None) -> float:
    """Value the given records (default: all) at each item's current unit cost."""
    total = 0.0
    for record in data.waste_records if records is None else records:
        if record.item_type == "RAW_MATERIAL":
            item = find_by_id(data.raw_materials, record.item_id)
            unit_cost = item.purchase_price if item else 0.0
        else:
            item = find_by_id(data.sellable_products, record.item_id)
            unit_cost = item.cost if item else 0.0
        total += record.quantity * unit_cost
    return total
