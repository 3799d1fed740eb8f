"""Fixed monthly costs.  Any change recosts every recipe, since services are a share of the total."""

import logging
from dataclasses import replace

from kitchen_ledger.core import costing
from kitchen_ledger.core.errors import DuplicateNameError, NotFoundError, ValidationError
from kitchen_ledger.db.models import FixedCost, UserData, find_by_id, new_id

logger = logging.getLogger(__name__)


def save_fixed_cost(data: UserData, fixed_cost: FixedCost, percentages: dict = None) -> dict:
    """Create or update a fixed cost.  Names are unique (case-insensitive) on create."""
    name = (fixed_cost.name or "").strip()
    if not name:
        raise ValidationError("Fixed cost name is required.")
    if fixed_cost.monthly_cost < 0:
        raise ValidationError("Monthly cost cannot be negative.")
    fixed_cost = replace(fixed_cost, name=name)

    if fixed_cost.id and find_by_id(data.fixed_costs, fixed_cost.id):
        fixed_costs = [fixed_cost if c.id == fixed_cost.id else c for c in data.fixed_costs]
    else:
        if any(c.name.lower() == name.lower() for c in data.fixed_costs):
            raise DuplicateNameError("Fixed cost", name)
        fixed_cost = replace(fixed_cost, id=new_id())
        fixed_costs = [*data.fixed_costs, fixed_cost]

    logger.info("Saved fixed cost %s", fixed_cost.id)
    return {
        "fixed_costs": fixed_costs,
        "recipes": costing.recalculate_all(data.recipes, data.raw_materials, fixed_costs, percentages),
    }


def delete_fixed_cost(data: UserData, cost_id: str, percentages: dict = None) -> dict:
    if find_by_id(data.fixed_costs, cost_id) is None:
        raise NotFoundError("Fixed cost", cost_id)
    fixed_costs = [c for c in data.fixed_costs if c.id != cost_id]
    logger.info("Deleted fixed cost %s", cost_id)
    return {
        "fixed_costs": fixed_costs,
        "recipes": costing.recalculate_all(data.recipes, data.raw_materials, fixed_costs, percentages),
    }


def monthly_total(fixed_costs: list) -> float:
    return sum(c.monthly_cost for c in fixed_costs)
