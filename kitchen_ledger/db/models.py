"""Dataclass models for the per-user aggregate document.

Each user owns exactly one UserData document.  The other classes are the
entries of its collections.  These are plain data containers; the business
rules live in kitchen_ledger/core.  from_dict() hydrates a stored JSON document,
tolerating missing fields and loosely typed numbers.
"""

import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Optional

CONSUMPTION_UNITS = ["kg", "l", "und"]
PRODUCT_TYPES = ["SINGLE", "PACKAGE", "TRANSFORMED"]
WASTE_ITEM_TYPES = ["RAW_MATERIAL", "PRODUCT"]
DELIVERY_METHODS = ["in_person", "shipping"]
SHOPPING_LIST_KINDS = ["auto", "proposal"]
DEFAULT_SUPPLIER = "General Supplier"


def new_id() -> str:
    return uuid.uuid4().hex


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def find_by_id(items: list, item_id: str):
    """Return the first item whose id matches, or None."""
    return next((i for i in items if i.id == item_id), None)


def parse_float(value) -> float:
    """Parse a number stored as int, float, or string ('1,5' is 1.5). Garbage is 0."""
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return 0.0 if value != value else float(value)  # NaN
    if not isinstance(value, str) or not value.strip():
        return 0.0
    try:
        parsed = float(value.strip().replace(",", ".", 1))
    except ValueError:
        return 0.0
    return 0.0 if parsed != parsed else parsed


def _optional_float(value) -> Optional[float]:
    return None if value is None else parse_float(value)


@dataclass
class PurchaseRecord:
    """One purchase of a raw material, in purchase units."""
    date: str
    quantity: float
    price_per_unit: float
    supplier: str = ""

    @classmethod
    def from_dict(cls, d: dict) -> "PurchaseRecord":
        return cls(
            date=d.get("date", ""),
            quantity=parse_float(d.get("quantity", 0)),
            price_per_unit=parse_float(d.get("price_per_unit", 0)),
            supplier=d.get("supplier") or "",
        )


@dataclass
class RawMaterial:
    """A raw material tracked in its consumption unit (kg, l or und).

    purchase_price is the weighted-average cost per consumption unit.
    purchase_unit_conversion is consumption units per purchase unit, for items
    bought in one unit (a 25 kg sack) and consumed in another (kg).
    """
    id: Optional[str]
    name: str
    consumption_unit: str = "kg"
    stock: float = 0.0
    purchase_price: float = 0.0
    min_stock: float = 0.0
    supplier: str = ""
    purchase_unit_conversion: Optional[float] = None
    purchase_history: list = field(default_factory=list)  # list[PurchaseRecord]

    @classmethod
    def from_dict(cls, d: dict) -> "RawMaterial":
        return cls(
            id=d.get("id"),
            name=d.get("name", ""),
            consumption_unit=d.get("consumption_unit") or d.get("unit") or "kg",
            stock=parse_float(d.get("stock", 0)),
            purchase_price=parse_float(d.get("purchase_price", 0)),
            min_stock=parse_float(d.get("min_stock", 0)),
            supplier=d.get("supplier") or "",
            purchase_unit_conversion=_optional_float(d.get("purchase_unit_conversion")),
            purchase_history=[PurchaseRecord.from_dict(p) for p in d.get("purchase_history") or []],
        )


@dataclass
class Ingredient:
    """A raw material line within a recipe, quantity per batch."""
    raw_material_id: str
    quantity: float

    @classmethod
    def from_dict(cls, d: dict) -> "Ingredient":
        return cls(raw_material_id=d.get("raw_material_id", ""), quantity=parse_float(d.get("quantity", 0)))


@dataclass
class Recipe:
    """A recipe producing production_yield units per batch.

    cost and pvp are per produced unit and are derived by core/costing.py.
    """
    id: Optional[str]
    name: str
    ingredients: list = field(default_factory=list)  # list[Ingredient]
    production_yield: float = 1.0
    cost: float = 0.0
    pvp: float = 0.0
    preparation_notes: Optional[str] = None

    @classmethod
    def from_dict(cls, d: dict) -> "Recipe":
        return cls(
            id=d.get("id"),
            name=d.get("name", ""),
            ingredients=[Ingredient.from_dict(i) for i in d.get("ingredients") or []],
            production_yield=parse_float(d.get("production_yield", 1)) or 1.0,
            cost=parse_float(d.get("cost", 0)),
            pvp=parse_float(d.get("pvp", 0)),
            preparation_notes=d.get("preparation_notes") or None,
        )


@dataclass
class SellableProduct:
    """A finished good in the pantry.

    SINGLE products come from a recipe (recipe_id).  PACKAGE products bundle
    pack_size units of source_product_id.  TRANSFORMED products are made from
    source_product_id, described by transformation_note.
    """
    id: Optional[str]
    name: str
    type: str = "SINGLE"
    quantity_in_stock: float = 0.0
    cost: float = 0.0
    pvp: float = 0.0
    recipe_id: Optional[str] = None
    source_product_id: Optional[str] = None
    pack_size: Optional[float] = None
    transformation_note: Optional[str] = None

    @classmethod
    def from_dict(cls, d: dict) -> "SellableProduct":
        return cls(
            id=d.get("id"),
            name=d.get("name", ""),
            type=d.get("type") or "SINGLE",
            quantity_in_stock=parse_float(d.get("quantity_in_stock", 0)),
            cost=parse_float(d.get("cost", 0)),
            pvp=parse_float(d.get("pvp", 0)),
            recipe_id=d.get("recipe_id"),
            source_product_id=d.get("source_product_id"),
            pack_size=_optional_float(d.get("pack_size")),
            transformation_note=d.get("transformation_note"),
        )


@dataclass
class WasteRecord:
    """An immutable log entry for stock lost to waste."""
    id: str
    item_id: str
    item_name: str
    item_type: str  # RAW_MATERIAL or PRODUCT
    quantity: float
    unit: str
    date: str
    reason: str = ""

    @classmethod
    def from_dict(cls, d: dict) -> "WasteRecord":
        return cls(
            id=d.get("id", ""),
            item_id=d.get("item_id", ""),
            item_name=d.get("item_name", ""),
            item_type=d.get("item_type", "PRODUCT"),
            quantity=parse_float(d.get("quantity", 0)),
            unit=d.get("unit") or "und",
            date=d.get("date", ""),
            reason=d.get("reason") or "",
        )


@dataclass
class Sale:
    """An immutable sale record.  Prices and costs are snapshots at sale time."""
    id: str
    product_id: str
    customer_id: str
    quantity: float
    sale_price_per_unit: float
    total_sale: float
    total_cost: float
    profit: float
    delivery_method: str
    shipping_cost: float
    total_charged: float
    date: str

    @classmethod
    def from_dict(cls, d: dict) -> "Sale":
        return cls(
            id=d.get("id", ""),
            product_id=d.get("product_id", ""),
            customer_id=d.get("customer_id", ""),
            quantity=parse_float(d.get("quantity", 0)),
            sale_price_per_unit=parse_float(d.get("sale_price_per_unit", 0)),
            total_sale=parse_float(d.get("total_sale", 0)),
            total_cost=parse_float(d.get("total_cost", 0)),
            profit=parse_float(d.get("profit", 0)),
            delivery_method=d.get("delivery_method") or "in_person",
            shipping_cost=parse_float(d.get("shipping_cost", 0)),
            total_charged=parse_float(d.get("total_charged", 0)),
            date=d.get("date", ""),
        )


@dataclass
class Customer:
    id: str
    name: str


@dataclass
class FixedCost:
    """A recurring monthly cost (rent, utilities...)."""
    id: Optional[str]
    name: str
    monthly_cost: float = 0.0

    @classmethod
    def from_dict(cls, d: dict) -> "FixedCost":
        return cls(id=d.get("id"), name=d.get("name", ""), monthly_cost=parse_float(d.get("monthly_cost", 0)))


@dataclass
class ShoppingListItem:
    name: str
    quantity: float
    unit: str
    supplier: str = ""
    raw_material_id: Optional[str] = None

    @classmethod
    def from_dict(cls, d: dict) -> "ShoppingListItem":
        return cls(
            name=d.get("name", ""),
            quantity=parse_float(d.get("quantity", 0)),
            unit=d.get("unit") or "und",
            supplier=d.get("supplier") or "",
            raw_material_id=d.get("raw_material_id"),
        )


@dataclass
class ShoppingList:
    """A saved snapshot of items to buy; kind is 'auto' (low stock) or 'proposal'."""
    id: str
    name: str
    kind: str
    items: list = field(default_factory=list)  # list[ShoppingListItem]
    created_at: str = ""

    @classmethod
    def from_dict(cls, d: dict) -> "ShoppingList":
        return cls(
            id=d.get("id", ""),
            name=d.get("name", ""),
            kind=d.get("kind") or "auto",
            items=[ShoppingListItem.from_dict(i) for i in d.get("items") or []],
            created_at=d.get("created_at", ""),
        )


@dataclass
class UserData:
    """The aggregate: everything one user owns, read and written as one document."""
    raw_materials: list = field(default_factory=list)  # list[RawMaterial]
    fixed_costs: list = field(default_factory=list)  # list[FixedCost]
    recipes: list = field(default_factory=list)  # list[Recipe]
    sales: list = field(default_factory=list)  # list[Sale]
    sellable_products: list = field(default_factory=list)  # list[SellableProduct]
    customers: list = field(default_factory=list)  # list[Customer]
    suppliers: list = field(default_factory=lambda: [DEFAULT_SUPPLIER])  # list[str]
    waste_records: list = field(default_factory=list)  # list[WasteRecord], newest first
    shopping_lists: list = field(default_factory=list)  # list[ShoppingList]

    @classmethod
    def from_dict(cls, d: Optional[dict]) -> "UserData":
        d = d or {}
        suppliers = d.get("suppliers")
        return cls(
            raw_materials=[RawMaterial.from_dict(x) for x in d.get("raw_materials") or []],
            fixed_costs=[FixedCost.from_dict(x) for x in d.get("fixed_costs") or []],
            recipes=[Recipe.from_dict(x) for x in d.get("recipes") or []],
            sales=[Sale.from_dict(x) for x in d.get("sales") or []],
            sellable_products=[SellableProduct.from_dict(x) for x in d.get("sellable_products") or []],
            customers=[Customer(id=x.get("id", ""), name=x.get("name", "")) for x in d.get("customers") or []],
            suppliers=list(suppliers) if suppliers is not None else [DEFAULT_SUPPLIER],
            waste_records=[WasteRecord.from_dict(x) for x in d.get("waste_records") or []],
            shopping_lists=[ShoppingList.from_dict(x) for x in d.get("shopping_lists") or []],
        )

    def to_dict(self) -> dict:
        return asdict(self)


COLLECTIONS = [
    "raw_materials", "fixed_costs", "recipes", "sales", "sellable_products",
    "customers", "suppliers", "waste_records", "shopping_lists",
]


def serialize_changes(changes: dict) -> dict:
    """Convert a {collection: list[dataclass | str]} patch to plain JSON values."""
    return {
        key: [asdict(item) if hasattr(item, "__dataclass_fields__") else item for item in items]
        for key, items in changes.items()
    }
