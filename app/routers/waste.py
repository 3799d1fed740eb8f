from fastapi import APIRouter, Depends

from app.dependencies import current_data, current_user_id
from app.schemas import WasteIn
from kitchen_ledger.core import ledger, waste as waste_core
from kitchen_ledger.db.models import UserData

router = APIRouter(prefix="/api/waste", tags=["waste"])


@router.get("")
def waste_list(data: UserData = Depends(current_data)):
    return {"records": data.waste_records, "total_value": waste_core.waste_value(data)}


@router.post("", status_code=201)
def waste_add(body: WasteIn, user_id: int = Depends(current_user_id)):
    data = ledger.apply(
        user_id, waste_core.record_waste,
        body.item_id, body.item_type, body.quantity, body.reason, body.unit,
    )
    return data.waste_records[0]


@router.delete("/{record_id}")
def waste_delete(record_id: str, force: bool = False, user_id: int = Depends(current_user_id)):
    ledger.apply(user_id, waste_core.delete_waste_record, record_id, force=force)
    return {"deleted": record_id}
