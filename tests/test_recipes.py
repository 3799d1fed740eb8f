import pytest

from kitchen_ledger.core import materials, recipes
from kitchen_ledger.core.errors import InsufficientStockError, NotFoundError, ValidationError
from kitchen_ledger.db.models import Ingredient, RawMaterial, Recipe, UserData


def test_save_recipe_computes_cost_and_pvp(apply):
    data = UserData(raw_materials=[RawMaterial(id="flour", name="Flour", stock=10, purchase_price=5)])
    recipe = Recipe(id=None, name="Bread", production_yield=5, ingredients=[Ingredient("flour", 10)])
    data = apply(data, recipes.save_recipe, recipe, labor_pct=15, services_pct=10, profit_pct=30)
    [saved] = data.recipes
    assert saved.id
    assert saved.cost == pytest.approx(11.5)
    assert saved.pvp == pytest.approx(14.5)


def test_save_recipe_merges_repeated_ingredients(kitchen, apply):
    recipe = Recipe(id="bread", name="Bread", production_yield=5,
                    ingredients=[Ingredient("flour", 4), Ingredient("sugar", 1), Ingredient("flour", 6)])
    data = apply(kitchen, recipes.save_recipe, recipe)
    assert data.recipes[0].ingredients == [Ingredient("flour", 10), Ingredient("sugar", 1)]


def test_save_recipe_validates(kitchen):
    with pytest.raises(ValidationError):
        recipes.save_recipe(kitchen, Recipe(id=None, name="X", production_yield=0))
    with pytest.raises(ValidationError):
        recipes.save_recipe(kitchen, Recipe(id=None, name="X", ingredients=[Ingredient("flour", 0)]))
    with pytest.raises(NotFoundError):
        recipes.save_recipe(kitchen, Recipe(id=None, name="X", ingredients=[Ingredient("ghost", 1)]))


def test_delete_recipe_removes_its_products(kitchen, apply):
    data = apply(kitchen, recipes.delete_recipe, "bread")
    assert data.recipes == []
    assert data.sellable_products == []


def test_requirements_scale_with_yield(kitchen):
    [req] = recipes.production_requirements(kitchen, "bread", 2)
    assert req.required == pytest.approx(4)
    assert req.has_enough
    [req] = recipes.production_requirements(kitchen, "bread", 6)
    assert req.missing == pytest.approx(2)
    assert not req.has_enough


def test_max_producible(kitchen):
    assert recipes.max_producible(kitchen, "bread") == 5


def test_produce_tops_up_existing_product(kitchen, apply):
    data = apply(kitchen, recipes.produce, "bread", 2.5, 2)
    assert data.raw_materials[0].stock == pytest.approx(5)
    assert data.sellable_products[0].quantity_in_stock == pytest.approx(12)
    assert data.sellable_products[0].cost == 2


def test_produce_is_all_or_nothing(kitchen):
    with pytest.raises(InsufficientStockError) as excinfo:
        recipes.produce(kitchen, "bread", 6, 6)
    assert excinfo.value.shortages == [("Flour", pytest.approx(12), 10)]
    assert kitchen.raw_materials[0].stock == 10


def test_produce_rejects_bad_quantities(kitchen):
    with pytest.raises(ValidationError):
        recipes.produce(kitchen, "bread", 0, 0)
    with pytest.raises(ValidationError):
        recipes.produce(kitchen, "bread", 1, -1)


def test_purchase_then_produce(apply):
    data = UserData(raw_materials=[RawMaterial(id="flour", name="Flour", consumption_unit="kg")])
    data = apply(data, materials.purchase_material, "flour", 10, 50, "Mill")
    assert data.raw_materials[0].purchase_price == pytest.approx(5)

    recipe = Recipe(id=None, name="Bread", production_yield=5, ingredients=[Ingredient("flour", 10)])
    data = apply(data, recipes.save_recipe, recipe)
    bread = data.recipes[0]

    data = apply(data, recipes.produce, bread.id, 5, 5)
    assert data.raw_materials[0].stock == 0
    [product] = data.sellable_products
    assert product.type == "SINGLE"
    assert product.recipe_id == bread.id
    assert product.quantity_in_stock == 5
    assert product.cost == pytest.approx(bread.cost)
    assert product.pvp == pytest.approx(bread.pvp)


def test_repeated_lines_for_one_material_are_summed(apply):
    data = UserData.from_dict({
        "raw_materials": [{"id": "flour", "name": "Flour", "stock": 8}],
        "recipes": [{"id": "bread", "name": "Bread", "production_yield": 5, "ingredients": [
            {"raw_material_id": "flour", "quantity": 4},
            {"raw_material_id": "flour", "quantity": 6},
        ]}],
    })
    [req] = recipes.production_requirements(data, "bread", 5)
    assert req.required == pytest.approx(10)
    assert recipes.max_producible(data, "bread") == 4
    with pytest.raises(InsufficientStockError):
        recipes.produce(data, "bread", 5, 5)

    data = apply(data, recipes.produce, "bread", 4, 4)
    assert data.raw_materials[0].stock == pytest.approx(0)
