"""Recipe management and production runs.

A recipe lists ingredient quantities per batch of production_yield units.
Producing N units consumes (ingredient quantity / production_yield) * N of
each raw material and adds the actual yield to the recipe's SINGLE product.
"""

import logging
import math
from dataclasses import dataclass, replace
from typing import Optional

from kitchen_ledger.config import DEFAULT_PERCENTAGES
from kitchen_ledger.core import costing, stock
from kitchen_ledger.core.errors import InsufficientStockError, NotFoundError, ValidationError
from kitchen_ledger.db.models import Ingredient, Recipe, SellableProduct, UserData, find_by_id, new_id

logger = logging.getLogger(__name__)


@dataclass
class Requirement:
    """What one ingredient needs for a planned production run."""
    raw_material_id: str
    name: str
    unit: str
    required: float
    available: float

    @property
    def missing(self) -> float:
        return max(0.0, self.required - self.available)

    @property
    def has_enough(self) -> bool:
        return stock.has_enough(self.available, self.required)


def _merge_ingredients(ingredients: list) -> list:
    """Collapse repeated lines for the same material into one, keeping first-seen order."""
    merged: dict[str, float] = {}
    for ing in ingredients:
        merged[ing.raw_material_id] = merged.get(ing.raw_material_id, 0.0) + ing.quantity
    return [Ingredient(raw_material_id=mid, quantity=qty) for mid, qty in merged.items()]


def save_recipe(
    data: UserData,
    recipe: Recipe,
    labor_pct: Optional[float] = None,
    services_pct: Optional[float] = None,
    profit_pct: Optional[float] = None,
) -> dict:
    """Create or replace a recipe, deriving its per-unit cost and pvp."""
    if not recipe.name or not recipe.name.strip():
        raise ValidationError("Recipe name is required.")
    if recipe.production_yield <= 0:
        raise ValidationError("Production yield must be greater than zero.")
    for ing in recipe.ingredients:
        if ing.quantity <= 0:
            raise ValidationError("Ingredient quantities must be greater than zero.")
        if find_by_id(data.raw_materials, ing.raw_material_id) is None:
            raise NotFoundError("Raw material", ing.raw_material_id)

    breakdown = costing.cost_breakdown(
        recipe.ingredients, recipe.production_yield, data.raw_materials, data.fixed_costs,
        DEFAULT_PERCENTAGES["labor_pct"] if labor_pct is None else labor_pct,
        DEFAULT_PERCENTAGES["services_pct"] if services_pct is None else services_pct,
        DEFAULT_PERCENTAGES["profit_pct"] if profit_pct is None else profit_pct,
    )
    recipe = replace(
        recipe,
        name=recipe.name.strip(),
        ingredients=_merge_ingredients(recipe.ingredients),
        cost=breakdown.unit_cost,
        pvp=breakdown.unit_pvp,
    )

    if recipe.id and find_by_id(data.recipes, recipe.id):
        recipes = [recipe if r.id == recipe.id else r for r in data.recipes]
        logger.info("Updated recipe %s", recipe.id)
    else:
        recipe = replace(recipe, id=new_id())
        recipes = [*data.recipes, recipe]
        logger.info("Created recipe %s (%s)", recipe.id, recipe.name)
    return {"recipes": recipes}


def delete_recipe(data: UserData, recipe_id: str) -> dict:
    """Delete a recipe together with the pantry products produced from it."""
    if find_by_id(data.recipes, recipe_id) is None:
        raise NotFoundError("Recipe", recipe_id)
    logger.info("Deleted recipe %s", recipe_id)
    return {
        "recipes": [r for r in data.recipes if r.id != recipe_id],
        "sellable_products": [p for p in data.sellable_products if p.recipe_id != recipe_id],
    }


def get_recipe(data: UserData, recipe_id: str) -> Recipe:
    recipe = find_by_id(data.recipes, recipe_id)
    if recipe is None:
        raise NotFoundError("Recipe", recipe_id)
    return recipe


def production_requirements(data: UserData, recipe_id: str, planned_quantity: float) -> list[Requirement]:
    """Return one requirement per raw material for planned_quantity units, summing repeated lines."""
    recipe = get_recipe(data, recipe_id)
    requirements = []
    for ing in _merge_ingredients(recipe.ingredients):
        material = find_by_id(data.raw_materials, ing.raw_material_id)
        requirements.append(Requirement(
            raw_material_id=ing.raw_material_id,
            name=material.name if material else "N/A",
            unit=material.consumption_unit if material else "und",
            required=(ing.quantity / recipe.production_yield) * planned_quantity,
            available=material.stock if material else 0.0,
        ))
    return requirements


def max_producible(data: UserData, recipe_id: str) -> int:
    """Return the largest whole number of units current stock allows."""
    recipe = get_recipe(data, recipe_id)
    limit = math.inf
    for ing in _merge_ingredients(recipe.ingredients):
        per_unit = ing.quantity / recipe.production_yield
        if per_unit <= 0:
            continue
        material = find_by_id(data.raw_materials, ing.raw_material_id)
        if material is None:
            return 0
        limit = min(limit, material.stock / per_unit)
    return 0 if limit == math.inf else int(math.floor(limit + stock.TOLERANCE))


def produce(data: UserData, recipe_id: str, planned_quantity: float, actual_quantity: float) -> dict:
    """Run production: consume ingredients for planned_quantity, stock actual_quantity.

    All-or-nothing: if any ingredient is short, nothing is consumed.
    """
    if planned_quantity <= 0:
        raise ValidationError("Planned quantity must be greater than zero.")
    if actual_quantity < 0:
        raise ValidationError("Actual quantity cannot be negative.")
    recipe = get_recipe(data, recipe_id)

    requirements = production_requirements(data, recipe_id, planned_quantity)
    short = [r for r in requirements if not r.has_enough]
    if short:
        raise InsufficientStockError(
            "Not enough raw material for this production run.",
            [(r.name, r.required, r.available) for r in short],
        )

    required = {r.raw_material_id: r.required for r in requirements}
    raw_materials = [
        replace(m, stock=stock.deduct(m.stock, required[m.id])) if m.id in required else m
        for m in data.raw_materials
    ]

    existing = next((p for p in data.sellable_products if p.recipe_id == recipe_id), None)
    if existing:
        sellable_products = [
            replace(p, quantity_in_stock=p.quantity_in_stock + actual_quantity) if p.id == existing.id else p
            for p in data.sellable_products
        ]
    else:
        product = SellableProduct(
            id=new_id(),
            name=recipe.name,
            type="SINGLE",
            quantity_in_stock=actual_quantity,
            cost=recipe.cost,
            pvp=recipe.pvp,
            recipe_id=recipe.id,
        )
        sellable_products = [*data.sellable_products, product]

    logger.info(
        "Produced recipe %s: planned %s, actual %s", recipe_id, planned_quantity, actual_quantity,
    )
    return {"raw_materials": raw_materials, "sellable_products": sellable_products}
