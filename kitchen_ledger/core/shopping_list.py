"""Shopping lists — low-stock restocking and sales-proposal supply lists.

generate_low_stock() lists every raw material below its minimum.
proposal_requirements() works out what a prospective order of a pantry
product would consume and how much of it is missing.  Either can be saved as
an immutable ShoppingList snapshot and exported as plain text grouped by
supplier.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass

from kitchen_ledger.core import recipes as recipes_core
from kitchen_ledger.core.errors import NotFoundError, ValidationError
from kitchen_ledger.core.materials import low_stock
from kitchen_ledger.db.models import (
    SHOPPING_LIST_KINDS, ShoppingList, ShoppingListItem, UserData, find_by_id, new_id, utc_now,
)

logger = logging.getLogger(__name__)

NO_SUPPLIER = "No Supplier Assigned"


@dataclass
class ProposalLine:
    name: str
    unit: str
    supplier: str
    required: float
    available: float
    unit_cost: float
    raw_material_id: str = None

    @property
    def missing(self) -> float:
        return max(0.0, self.required - self.available)

    @property
    def missing_cost(self) -> float:
        return self.missing * self.unit_cost


def generate_low_stock(data: UserData) -> list[ShoppingListItem]:
    """Return an item for each material below minimum stock, sized to reach the minimum."""
    return [
        ShoppingListItem(
            name=m.name,
            quantity=m.min_stock - m.stock,
            unit=m.consumption_unit,
            supplier=m.supplier,
            raw_material_id=m.id,
        )
        for m in sorted(low_stock(data), key=lambda m: m.name.lower())
    ]


def proposal_requirements(data: UserData, product_id: str, quantity: float) -> list[ProposalLine]:
    """What making quantity units of a product needs.

    Recipe products need raw materials; packages and transformed products
    need units of their source product (quantity * pack_size for packages).
    """
    if quantity < 0:
        raise ValidationError("Quantity cannot be negative.")
    product = find_by_id(data.sellable_products, product_id)
    if product is None:
        raise NotFoundError("Product", product_id)

    if product.recipe_id and find_by_id(data.recipes, product.recipe_id):
        lines = []
        for req in recipes_core.production_requirements(data, product.recipe_id, quantity):
            material = find_by_id(data.raw_materials, req.raw_material_id)
            lines.append(ProposalLine(
                name=req.name,
                unit=req.unit,
                supplier=material.supplier if material else "",
                required=req.required,
                available=req.available,
                unit_cost=material.purchase_price if material else 0.0,
                raw_material_id=req.raw_material_id,
            ))
        return lines

    if product.source_product_id:
        source = find_by_id(data.sellable_products, product.source_product_id)
        if source is not None:
            return [ProposalLine(
                name=f"Source: {source.name}",
                unit="und",
                supplier="",
                required=quantity * (product.pack_size or 1),
                available=source.quantity_in_stock,
                unit_cost=source.cost,
            )]
    return []


def proposal_summary(data: UserData, product_id: str, quantity: float, discount_percentage: float = 0.0) -> dict:
    """Financial summary of selling quantity units at the product's pvp minus a discount."""
    if not 0 <= discount_percentage <= 100:
        raise ValidationError("Discount must be between 0 and 100 percent.")
    product = find_by_id(data.sellable_products, product_id)
    if product is None:
        raise NotFoundError("Product", product_id)
    production_cost = product.cost * quantity
    gross = product.pvp * quantity
    discount = gross * discount_percentage / 100
    net = gross - discount
    profit = net - production_cost
    lines = proposal_requirements(data, product_id, quantity)
    return {
        "product_id": product_id,
        "quantity": quantity,
        "gross_sale": gross,
        "discount_amount": discount,
        "net_sale": net,
        "production_cost": production_cost,
        "net_profit": profit,
        "profit_margin": profit / net * 100 if net > 0 else 0.0,
        "missing_cost": sum(line.missing_cost for line in lines),
    }


def save_shopping_list(data: UserData, name: str, kind: str, items: list) -> dict:
    if not name or not name.strip():
        raise ValidationError("Shopping list name is required.")
    if kind not in SHOPPING_LIST_KINDS:
        raise ValidationError(f"Unknown shopping list kind '{kind}'.")
    if not items:
        raise ValidationError("A shopping list needs at least one item.")
    shopping_list = ShoppingList(id=new_id(), name=name.strip(), kind=kind, items=list(items), created_at=utc_now())
    logger.info("Saved %s shopping list %s with %d items", kind, shopping_list.id, len(items))
    return {"shopping_lists": [*data.shopping_lists, shopping_list]}


def save_low_stock_list(data: UserData, name: str = None) -> dict:
    items = generate_low_stock(data)
    if not items:
        raise ValidationError("No raw materials are below their minimum stock.")
    return save_shopping_list(data, name or f"Restock {utc_now()[:10]}", "auto", items)


def save_proposal_list(data: UserData, product_id: str, quantity: float) -> dict:
    """Save the missing supplies for a proposal as a shopping list."""
    product = find_by_id(data.sellable_products, product_id)
    if product is None:
        raise NotFoundError("Product", product_id)
    items = [
        ShoppingListItem(
            name=line.name,
            quantity=line.missing,
            unit=line.unit,
            supplier=line.supplier,
            raw_material_id=line.raw_material_id,
        )
        for line in proposal_requirements(data, product_id, quantity)
        if line.missing > 0
    ]
    if not items:
        raise ValidationError("Nothing is missing for this proposal.")
    return save_shopping_list(data, f"Supplies for {quantity:g} of {product.name}", "proposal", items)


def delete_shopping_list(data: UserData, list_id: str) -> dict:
    if find_by_id(data.shopping_lists, list_id) is None:
        raise NotFoundError("Shopping list", list_id)
    return {"shopping_lists": [s for s in data.shopping_lists if s.id != list_id]}


def group_by_supplier(items: list) -> dict[str, list[ShoppingListItem]]:
    grouped: dict[str, list] = defaultdict(list)
    for item in items:
        grouped[item.supplier or NO_SUPPLIER].append(item)
    for supplier in grouped:
        grouped[supplier].sort(key=lambda i: i.name.lower())
    return dict(grouped)


def format_shopping_list(shopping_list: ShoppingList) -> str:
    """Format a shopping list as plain text for export/clipboard, grouped by supplier."""
    if not shopping_list.items:
        return "No items needed."

    lines = [shopping_list.name, ""]
    for supplier, items in sorted(group_by_supplier(shopping_list.items).items()):
        lines.append(f"=== {supplier} ===")
        for item in items:
            lines.append(f"  [ ] {item.name} — {item.quantity:.2f} {item.unit}".rstrip())
        lines.append("")
    return "\n".join(lines).strip()
