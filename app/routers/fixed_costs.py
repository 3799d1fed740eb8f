from fastapi import APIRouter, Depends

from app.dependencies import cost_percentages, current_data, current_user_id
from app.schemas import FixedCostIn
from kitchen_ledger.core import fixed_costs as fixed_costs_core, ledger
from kitchen_ledger.core.errors import NotFoundError
from kitchen_ledger.db.models import FixedCost, UserData, find_by_id

router = APIRouter(prefix="/api/fixed-costs", tags=["fixed-costs"])


@router.get("")
def fixed_costs_list(data: UserData = Depends(current_data)):
    return {
        "fixed_costs": data.fixed_costs,
        "monthly_total": fixed_costs_core.monthly_total(data.fixed_costs),
    }


@router.post("", status_code=201)
def fixed_costs_add(
    body: FixedCostIn,
    user_id: int = Depends(current_user_id),
    percentages: dict = Depends(cost_percentages),
):
    data = ledger.apply(
        user_id, fixed_costs_core.save_fixed_cost,
        FixedCost(id=None, name=body.name, monthly_cost=body.monthly_cost), percentages,
    )
    return data.fixed_costs[-1]


@router.put("/{cost_id}")
def fixed_costs_edit(
    cost_id: str,
    body: FixedCostIn,
    user_id: int = Depends(current_user_id),
    percentages: dict = Depends(cost_percentages),
):
    if find_by_id(ledger.get_user_data(user_id).fixed_costs, cost_id) is None:
        raise NotFoundError("Fixed cost", cost_id)
    data = ledger.apply(
        user_id, fixed_costs_core.save_fixed_cost,
        FixedCost(id=cost_id, name=body.name, monthly_cost=body.monthly_cost), percentages,
    )
    return find_by_id(data.fixed_costs, cost_id)


@router.delete("/{cost_id}")
def fixed_costs_delete(
    cost_id: str,
    user_id: int = Depends(current_user_id),
    percentages: dict = Depends(cost_percentages),
):
    ledger.apply(user_id, fixed_costs_core.delete_fixed_cost, cost_id, percentages)
    return {"deleted": cost_id}
