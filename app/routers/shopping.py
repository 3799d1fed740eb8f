from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from app.dependencies import current_data, current_user_id
from app.schemas import ProposalIn, ShoppingListIn
from kitchen_ledger.core import ledger
from kitchen_ledger.core import shopping_list as shopping_core
from kitchen_ledger.core.errors import NotFoundError
from kitchen_ledger.db.models import ShoppingListItem, UserData, find_by_id

router = APIRouter(prefix="/api/shopping", tags=["shopping"])


def _line_out(line: shopping_core.ProposalLine) -> dict:
    return {
        "name": line.name,
        "unit": line.unit,
        "supplier": line.supplier,
        "required": line.required,
        "available": line.available,
        "missing": line.missing,
        "missing_cost": line.missing_cost,
        "raw_material_id": line.raw_material_id,
    }


@router.get("")
def shopping_lists(data: UserData = Depends(current_data)):
    return data.shopping_lists


@router.post("", status_code=201)
def shopping_save(body: ShoppingListIn, user_id: int = Depends(current_user_id)):
    items = [ShoppingListItem(**item.model_dump()) for item in body.items]
    data = ledger.apply(user_id, shopping_core.save_shopping_list, body.name, body.kind, items)
    return data.shopping_lists[-1]


@router.get("/low-stock")
def shopping_low_stock(data: UserData = Depends(current_data)):
    items = shopping_core.generate_low_stock(data)
    return {"items": items, "by_supplier": shopping_core.group_by_supplier(items)}


@router.post("/low-stock", status_code=201)
def shopping_save_low_stock(name: Optional[str] = None, user_id: int = Depends(current_user_id)):
    data = ledger.apply(user_id, shopping_core.save_low_stock_list, name)
    return data.shopping_lists[-1]


@router.post("/proposal")
def shopping_proposal(body: ProposalIn, data: UserData = Depends(current_data)):
    lines = shopping_core.proposal_requirements(data, body.product_id, body.quantity)
    return {
        "lines": [_line_out(line) for line in lines],
        "summary": shopping_core.proposal_summary(data, body.product_id, body.quantity, body.discount_percentage),
    }


@router.post("/proposal/save", status_code=201)
def shopping_save_proposal(body: ProposalIn, user_id: int = Depends(current_user_id)):
    data = ledger.apply(user_id, shopping_core.save_proposal_list, body.product_id, body.quantity)
    return data.shopping_lists[-1]


@router.get("/{list_id}/export")
def shopping_export(list_id: str, data: UserData = Depends(current_data)):
    shopping_list = find_by_id(data.shopping_lists, list_id)
    if shopping_list is None:
        raise NotFoundError("Shopping list", list_id)
    text = shopping_core.format_shopping_list(shopping_list)
    return PlainTextResponse(text, headers={
        "Content-Disposition": "attachment; filename=shopping_list.txt",
    })


@router.delete("/{list_id}")
def shopping_delete(list_id: str, user_id: int = Depends(current_user_id)):
    ledger.apply(user_id, shopping_core.delete_shopping_list, list_id)
    return {"deleted": list_id}
