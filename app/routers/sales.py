from fastapi import APIRouter, Depends

from app.dependencies import current_data, current_user_id
from app.schemas import SaleIn
from kitchen_ledger.core import ledger, sales as sales_core
from kitchen_ledger.db.models import UserData

router = APIRouter(prefix="/api/sales", tags=["sales"])


@router.get("")
def sales_list(data: UserData = Depends(current_data)):
    return {"sales": data.sales, "customers": data.customers}


@router.post("", status_code=201)
def sales_add(body: SaleIn, user_id: int = Depends(current_user_id)):
    data = ledger.apply(
        user_id, sales_core.add_sale,
        body.product_id, body.quantity, body.customer_name,
        body.delivery_method, body.shipping_cost, body.discount_percentage,
    )
    return data.sales[0]


@router.delete("/{sale_id}")
def sales_delete(sale_id: str, force: bool = False, user_id: int = Depends(current_user_id)):
    ledger.apply(user_id, sales_core.delete_sale, sale_id, force=force)
    return {"deleted": sale_id}


@router.get("/customers")
def customers_list(data: UserData = Depends(current_data)):
    return sorted(data.customers, key=lambda c: c.name.lower())
