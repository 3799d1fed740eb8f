"""Create the demo account and give it a small kitchen to play with."""
import logging
import os

from kitchen_ledger.config import get_cost_percentages
from kitchen_ledger.core import auth as auth_core, fixed_costs as fixed_costs_core, ledger
from kitchen_ledger.core import materials as materials_core, recipes as recipes_core
from kitchen_ledger.db.models import FixedCost, Ingredient, RawMaterial, Recipe

logger = logging.getLogger(__name__)

DEMO_MATERIALS = [
    RawMaterial(id=None, name="Flour", consumption_unit="kg", stock=10, purchase_price=1.2,
                min_stock=5, supplier="Mill & Co", purchase_unit_conversion=25),
    RawMaterial(id=None, name="Sugar", consumption_unit="kg", stock=4, purchase_price=1.5,
                min_stock=2, supplier="Mill & Co"),
    RawMaterial(id=None, name="Butter", consumption_unit="kg", stock=2, purchase_price=9.0,
                min_stock=3, supplier="Dairy Farm"),
    RawMaterial(id=None, name="Eggs", consumption_unit="und", stock=36, purchase_price=0.25,
                min_stock=24, supplier="Dairy Farm"),
    RawMaterial(id=None, name="Milk", consumption_unit="l", stock=6, purchase_price=1.1,
                min_stock=4, supplier="Dairy Farm"),
]

DEMO_FIXED_COSTS = [
    FixedCost(id=None, name="Rent", monthly_cost=800),
    FixedCost(id=None, name="Electricity", monthly_cost=120),
]

# (name, yield, [(material name, quantity per batch)])
DEMO_RECIPES = [
    ("Butter Cookies", 24, [("Flour", 0.5), ("Sugar", 0.2), ("Butter", 0.25), ("Eggs", 2)]),
    ("Crepes", 12, [("Flour", 0.25), ("Milk", 0.5), ("Eggs", 3), ("Butter", 0.05)]),
]


def seed_if_empty():
    """Create DEMO_USERNAME if missing and seed its document if it has no materials yet."""
    username = os.environ.get("DEMO_USERNAME", "")
    password = os.environ.get("DEMO_PASSWORD", "")
    if not username or not password:
        return

    user_id = auth_core.get_user_id(username)
    if user_id is None:
        user_id = auth_core.create_user(username, password)

    if ledger.get_user_data(user_id).raw_materials:
        return  # Already seeded

    percentages = get_cost_percentages()
    for material in DEMO_MATERIALS:
        ledger.apply(user_id, materials_core.save_material, material)
    for cost in DEMO_FIXED_COSTS:
        ledger.apply(user_id, fixed_costs_core.save_fixed_cost, cost, percentages)

    ids = {m.name: m.id for m in ledger.get_user_data(user_id).raw_materials}
    for name, production_yield, lines in DEMO_RECIPES:
        recipe = Recipe(
            id=None,
            name=name,
            ingredients=[Ingredient(raw_material_id=ids[m], quantity=q) for m, q in lines],
            production_yield=production_yield,
        )
        data = ledger.apply(user_id, recipes_core.save_recipe, recipe, **percentages)

    cookies = next(r for r in data.recipes if r.name == "Butter Cookies")
    ledger.apply(user_id, recipes_core.produce, cookies.id, 24, 22)
    logger.info("Seeded demo data for %s", username)
