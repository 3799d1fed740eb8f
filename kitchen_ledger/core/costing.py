"""Recipe costing — raw materials, labor, services and margin per produced unit.

    raw          = sum(ingredient qty * material average price)
    labor        = raw * labor%
    services     = total monthly fixed costs * services%
    margin       = (raw + services) * profit%
    production   = raw + labor + services
    pvp          = production + margin

Per-unit cost and pvp divide the batch totals by the recipe's production yield.
"""

from dataclasses import dataclass, replace

from kitchen_ledger.config import DEFAULT_PERCENTAGES
from kitchen_ledger.db.models import Recipe


@dataclass
class CostBreakdown:
    raw_materials: float
    labor: float
    services: float
    profit_base: float
    margin: float
    production_total: float
    pvp_total: float
    unit_cost: float
    unit_pvp: float


def cost_breakdown(
    ingredients: list,
    production_yield: float,
    materials: list,
    fixed_costs: list,
    labor_pct: float = DEFAULT_PERCENTAGES["labor_pct"],
    services_pct: float = DEFAULT_PERCENTAGES["services_pct"],
    profit_pct: float = DEFAULT_PERCENTAGES["profit_pct"],
) -> CostBreakdown:
    """Compute the full cost breakdown for one batch of ingredients."""
    prices = {m.id: m.purchase_price for m in materials}
    raw = sum(ing.quantity * prices.get(ing.raw_material_id, 0.0) for ing in ingredients)
    total_fixed = sum(c.monthly_cost for c in fixed_costs)

    labor = raw * labor_pct / 100
    services = total_fixed * services_pct / 100
    profit_base = raw + services
    margin = profit_base * profit_pct / 100
    production_total = raw + labor + services
    pvp_total = production_total + margin

    yield_qty = production_yield or 0
    return CostBreakdown(
        raw_materials=raw,
        labor=labor,
        services=services,
        profit_base=profit_base,
        margin=margin,
        production_total=production_total,
        pvp_total=pvp_total,
        unit_cost=production_total / yield_qty if yield_qty > 0 else 0.0,
        unit_pvp=pvp_total / yield_qty if yield_qty > 0 else 0.0,
    )


def recalculate_recipe(recipe: Recipe, materials: list, fixed_costs: list, percentages: dict = None) -> Recipe:
    """Return a copy of recipe with cost and pvp recomputed from current prices."""
    pct = {**DEFAULT_PERCENTAGES, **(percentages or {})}
    breakdown = cost_breakdown(
        recipe.ingredients, recipe.production_yield, materials, fixed_costs,
        pct["labor_pct"], pct["services_pct"], pct["profit_pct"],
    )
    return replace(recipe, cost=breakdown.unit_cost, pvp=breakdown.unit_pvp)


def recalculate_all(recipes: list, materials: list, fixed_costs: list, percentages: dict = None) -> list:
    return [recalculate_recipe(r, materials, fixed_costs, percentages) for r in recipes]
