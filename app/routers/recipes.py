from fastapi import APIRouter, Depends

from app.dependencies import cost_percentages, current_data, current_user_id
from app.schemas import ProductionIn, RecipeIn
from kitchen_ledger.core import costing, ledger, recipes as recipes_core
from kitchen_ledger.db.models import Ingredient, Recipe, UserData

router = APIRouter(prefix="/api/recipes", tags=["recipes"])


def _recipe_from_body(body: RecipeIn, recipe_id=None) -> Recipe:
    return Recipe(
        id=recipe_id,
        name=body.name,
        ingredients=[Ingredient(raw_material_id=i.raw_material_id, quantity=i.quantity) for i in body.ingredients],
        production_yield=body.production_yield,
        preparation_notes=body.preparation_notes or None,
    )


def _save(user_id: int, body: RecipeIn, recipe_id, percentages: dict) -> UserData:
    return ledger.apply(
        user_id, recipes_core.save_recipe, _recipe_from_body(body, recipe_id),
        labor_pct=percentages["labor_pct"] if body.labor_pct is None else body.labor_pct,
        services_pct=percentages["services_pct"] if body.services_pct is None else body.services_pct,
        profit_pct=percentages["profit_pct"] if body.profit_pct is None else body.profit_pct,
    )


@router.get("")
def recipes_list(data: UserData = Depends(current_data)):
    return data.recipes


@router.post("", status_code=201)
def recipes_add(body: RecipeIn, user_id: int = Depends(current_user_id), percentages: dict = Depends(cost_percentages)):
    data = _save(user_id, body, None, percentages)
    return data.recipes[-1]


@router.post("/preview")
def recipes_preview(body: RecipeIn, data: UserData = Depends(current_data), percentages: dict = Depends(cost_percentages)):
    """Cost breakdown for an unsaved recipe, as shown while editing."""
    pct = {
        "labor_pct": percentages["labor_pct"] if body.labor_pct is None else body.labor_pct,
        "services_pct": percentages["services_pct"] if body.services_pct is None else body.services_pct,
        "profit_pct": percentages["profit_pct"] if body.profit_pct is None else body.profit_pct,
    }
    recipe = _recipe_from_body(body)
    return costing.cost_breakdown(
        recipe.ingredients, recipe.production_yield, data.raw_materials, data.fixed_costs,
        pct["labor_pct"], pct["services_pct"], pct["profit_pct"],
    )


@router.get("/{recipe_id}")
def recipes_detail(recipe_id: str, data: UserData = Depends(current_data)):
    recipe = recipes_core.get_recipe(data, recipe_id)
    return {"recipe": recipe, "max_producible": recipes_core.max_producible(data, recipe_id)}


@router.put("/{recipe_id}")
def recipes_edit(
    recipe_id: str,
    body: RecipeIn,
    user_id: int = Depends(current_user_id),
    percentages: dict = Depends(cost_percentages),
):
    recipes_core.get_recipe(ledger.get_user_data(user_id), recipe_id)
    data = _save(user_id, body, recipe_id, percentages)
    return recipes_core.get_recipe(data, recipe_id)


@router.delete("/{recipe_id}")
def recipes_delete(recipe_id: str, user_id: int = Depends(current_user_id)):
    ledger.apply(user_id, recipes_core.delete_recipe, recipe_id)
    return {"deleted": recipe_id}


@router.get("/{recipe_id}/requirements")
def recipes_requirements(recipe_id: str, quantity: float, data: UserData = Depends(current_data)):
    return [
        {
            "raw_material_id": r.raw_material_id,
            "name": r.name,
            "unit": r.unit,
            "required": r.required,
            "available": r.available,
            "missing": r.missing,
            "has_enough": r.has_enough,
        }
        for r in recipes_core.production_requirements(data, recipe_id, quantity)
    ]


@router.post("/{recipe_id}/produce")
def recipes_produce(recipe_id: str, body: ProductionIn, user_id: int = Depends(current_user_id)):
    actual = body.planned_quantity if body.actual_quantity is None else body.actual_quantity
    data = ledger.apply(user_id, recipes_core.produce, recipe_id, body.planned_quantity, actual)
    product = next(p for p in data.sellable_products if p.recipe_id == recipe_id)
    return {"product": product, "raw_materials": data.raw_materials}
