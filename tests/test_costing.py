import pytest

from kitchen_ledger.core import costing
from kitchen_ledger.db.models import FixedCost, Ingredient, RawMaterial, Recipe


def _flour(price=5.0):
    return RawMaterial(id="flour", name="Flour", stock=10, purchase_price=price)


def test_breakdown_without_fixed_costs():
    b = costing.cost_breakdown([Ingredient("flour", 10)], 5, [_flour()], [])
    assert b.raw_materials == pytest.approx(50)
    assert b.labor == pytest.approx(7.5)
    assert b.services == 0
    assert b.margin == pytest.approx(15)
    assert b.production_total == pytest.approx(57.5)
    assert b.unit_cost == pytest.approx(11.5)
    assert b.unit_pvp == pytest.approx(14.5)


def test_services_are_a_share_of_fixed_costs():
    fixed = [FixedCost(id="a", name="Rent", monthly_cost=800), FixedCost(id="b", name="Power", monthly_cost=200)]
    b = costing.cost_breakdown([Ingredient("flour", 10)], 5, [_flour()], fixed, 0, 10, 0)
    assert b.services == pytest.approx(100)
    assert b.production_total == pytest.approx(150)
    assert b.unit_pvp == pytest.approx(30)


def test_unknown_material_costs_nothing():
    b = costing.cost_breakdown([Ingredient("gone", 3)], 1, [_flour()], [])
    assert b.raw_materials == 0


def test_zero_yield_gives_zero_unit_values():
    b = costing.cost_breakdown([Ingredient("flour", 1)], 0, [_flour()], [])
    assert b.unit_cost == 0
    assert b.unit_pvp == 0


def test_recalculate_recipe_uses_current_prices():
    recipe = Recipe(id="r", name="Bread", ingredients=[Ingredient("flour", 10)], production_yield=5)
    updated = costing.recalculate_recipe(recipe, [_flour(price=10)], [])
    assert updated.cost == pytest.approx(23)
    assert recipe.cost == 0


def test_recalculate_all_respects_percentages():
    recipe = Recipe(id="r", name="Bread", ingredients=[Ingredient("flour", 1)], production_yield=1)
    [updated] = costing.recalculate_all([recipe], [_flour()], [], {"labor_pct": 0, "profit_pct": 100})
    assert updated.cost == pytest.approx(5)
    assert updated.pvp == pytest.approx(10)
