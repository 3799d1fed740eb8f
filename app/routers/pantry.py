from fastapi import APIRouter, Depends

from app.dependencies import current_data, current_user_id
from app.schemas import PackageIn, TransformIn
from kitchen_ledger.core import ledger, pantry as pantry_core
from kitchen_ledger.db.models import UserData

router = APIRouter(prefix="/api/pantry", tags=["pantry"])


def _by_name(data: UserData, name: str, product_type: str):
    key = name.strip().lower()
    return next(p for p in data.sellable_products if p.type == product_type and p.name.lower() == key)


@router.get("")
def pantry_list(data: UserData = Depends(current_data)):
    return {
        "products": data.sellable_products,
        "pantry_value": pantry_core.pantry_value(data.sellable_products),
    }


@router.post("/package")
def pantry_package(body: PackageIn, user_id: int = Depends(current_user_id)):
    data = ledger.apply(
        user_id, pantry_core.package_product,
        body.source_product_id, body.pack_size, body.pack_count, body.name, body.pvp,
    )
    return _by_name(data, body.name, "PACKAGE")


@router.post("/transform")
def pantry_transform(body: TransformIn, user_id: int = Depends(current_user_id)):
    data = ledger.apply(
        user_id, pantry_core.transform_product,
        body.source_product_id, body.quantity, body.name, body.new_yield, body.pvp,
    )
    return _by_name(data, body.name, "TRANSFORMED")


@router.delete("/{product_id}")
def pantry_delete(product_id: str, force: bool = False, user_id: int = Depends(current_user_id)):
    data = ledger.apply(user_id, pantry_core.delete_product, product_id, force=force)
    return {"deleted": product_id, "products": data.sellable_products}
