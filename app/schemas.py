"""Request bodies for the JSON API.

Field constraints here catch malformed input early; the domain functions in
kitchen_ledger.core re-check every rule against the current snapshot.
"""
from typing import List, Optional

from pydantic import BaseModel, Field


class RawMaterialIn(BaseModel):
    name: str = Field(..., min_length=1)
    consumption_unit: str = Field("kg", description="kg | l | und")
    stock: float = Field(0, ge=0)
    purchase_price: float = Field(0, ge=0, description="Cost per consumption unit")
    min_stock: float = Field(0, ge=0)
    supplier: str = ""
    purchase_unit_conversion: Optional[float] = Field(None, gt=0)


class PurchaseIn(BaseModel):
    quantity: float = Field(..., gt=0, description="Quantity in purchase units")
    total_cost: float = Field(..., ge=0)
    supplier: str = ""


class SupplierIn(BaseModel):
    name: str = Field(..., min_length=1)


class IngredientIn(BaseModel):
    raw_material_id: str
    quantity: float = Field(..., gt=0)


class RecipeIn(BaseModel):
    name: str = Field(..., min_length=1)
    ingredients: List[IngredientIn] = []
    production_yield: float = Field(1, gt=0)
    preparation_notes: Optional[str] = None
    labor_pct: Optional[float] = Field(None, ge=0)
    services_pct: Optional[float] = Field(None, ge=0)
    profit_pct: Optional[float] = Field(None, ge=0)


class ProductionIn(BaseModel):
    planned_quantity: float = Field(..., gt=0)
    actual_quantity: Optional[float] = Field(None, ge=0, description="Defaults to planned_quantity")


class PackageIn(BaseModel):
    source_product_id: str
    pack_size: float = Field(..., gt=0)
    pack_count: float = Field(..., gt=0)
    name: str = Field(..., min_length=1)
    pvp: float = Field(..., ge=0)


class TransformIn(BaseModel):
    source_product_id: str
    quantity: float = Field(..., gt=0)
    name: str = Field(..., min_length=1)
    new_yield: float = Field(..., gt=0)
    pvp: float = Field(..., ge=0)


class WasteIn(BaseModel):
    item_id: str
    item_type: str = Field(..., description="RAW_MATERIAL | PRODUCT")
    quantity: float = Field(..., gt=0)
    reason: str = ""
    unit: Optional[str] = None


class SaleIn(BaseModel):
    product_id: str
    quantity: float = Field(..., gt=0)
    customer_name: str = Field(..., min_length=1)
    delivery_method: str = Field("in_person", description="in_person | shipping")
    shipping_cost: float = Field(0, ge=0)
    discount_percentage: float = Field(0, ge=0, le=100)


class FixedCostIn(BaseModel):
    name: str = Field(..., min_length=1)
    monthly_cost: float = Field(..., ge=0)


class ProposalIn(BaseModel):
    product_id: str
    quantity: float = Field(..., ge=0)
    discount_percentage: float = Field(0, ge=0, le=100)


class ShoppingListItemIn(BaseModel):
    name: str = Field(..., min_length=1)
    quantity: float = Field(..., gt=0)
    unit: str = "und"
    supplier: str = ""
    raw_material_id: Optional[str] = None


class ShoppingListIn(BaseModel):
    name: str = Field(..., min_length=1)
    kind: str = "auto"
    items: List[ShoppingListItemIn]


class SettingsIn(BaseModel):
    claude_api_key: Optional[str] = None
    labor_pct: Optional[float] = Field(None, ge=0)
    services_pct: Optional[float] = Field(None, ge=0)
    profit_pct: Optional[float] = Field(None, ge=0)
