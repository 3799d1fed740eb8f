import pytest

from kitchen_ledger.core import fixed_costs
from kitchen_ledger.core.errors import DuplicateNameError, NotFoundError, ValidationError
from kitchen_ledger.db.models import FixedCost


def test_add_fixed_cost_recosts_recipes(kitchen, apply):
    data = apply(kitchen, fixed_costs.save_fixed_cost, FixedCost(id=None, name="Power", monthly_cost=400))
    assert fixed_costs.monthly_total(data.fixed_costs) == 500
    # 50 raw + 7.5 labor + 50 services, over a yield of 5
    assert data.recipes[0].cost == pytest.approx(21.5)


def test_duplicate_name_rejected(kitchen):
    with pytest.raises(DuplicateNameError):
        fixed_costs.save_fixed_cost(kitchen, FixedCost(id=None, name="RENT", monthly_cost=1))


def test_edit_keeps_id(kitchen, apply):
    data = apply(kitchen, fixed_costs.save_fixed_cost, FixedCost(id="rent", name="Rent", monthly_cost=50))
    assert [(c.id, c.monthly_cost) for c in data.fixed_costs] == [("rent", 50)]


def test_validation(kitchen):
    with pytest.raises(ValidationError):
        fixed_costs.save_fixed_cost(kitchen, FixedCost(id=None, name="", monthly_cost=1))
    with pytest.raises(ValidationError):
        fixed_costs.save_fixed_cost(kitchen, FixedCost(id=None, name="Gas", monthly_cost=-1))


def test_delete_fixed_cost(kitchen, apply):
    data = apply(kitchen, fixed_costs.delete_fixed_cost, "rent", {"labor_pct": 0, "profit_pct": 0})
    assert data.fixed_costs == []
    assert data.recipes[0].cost == pytest.approx(10)
    with pytest.raises(NotFoundError):
        fixed_costs.delete_fixed_cost(data, "rent")
