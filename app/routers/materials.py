from fastapi import APIRouter, Depends

from app.dependencies import cost_percentages, current_data, current_user_id
from app.schemas import PurchaseIn, RawMaterialIn, SupplierIn
from kitchen_ledger.core import ledger, materials as materials_core
from kitchen_ledger.core.errors import NotFoundError
from kitchen_ledger.db.models import RawMaterial, UserData, find_by_id

router = APIRouter(prefix="/api/materials", tags=["materials"])


def _material_out(data: UserData, material_id: str) -> RawMaterial:
    material = find_by_id(data.raw_materials, material_id)
    if material is None:
        raise NotFoundError("Raw material", material_id)
    return material


@router.get("")
def materials_list(data: UserData = Depends(current_data)):
    return {
        "raw_materials": data.raw_materials,
        "suppliers": data.suppliers,
        "inventory_value": materials_core.inventory_value(data.raw_materials),
    }


@router.get("/low-stock")
def materials_low_stock(data: UserData = Depends(current_data)):
    return materials_core.low_stock(data)


@router.post("", status_code=201)
def materials_add(body: RawMaterialIn, user_id: int = Depends(current_user_id)):
    data = ledger.apply(user_id, materials_core.save_material, RawMaterial(id=None, **body.model_dump()))
    return data.raw_materials[-1]


@router.get("/{material_id}")
def materials_detail(material_id: str, data: UserData = Depends(current_data)):
    material = _material_out(data, material_id)
    return {"material": material, "used_in": [r.name for r in materials_core.recipes_using(data, material_id)]}


@router.put("/{material_id}")
def materials_edit(material_id: str, body: RawMaterialIn, user_id: int = Depends(current_user_id)):
    existing = _material_out(ledger.get_user_data(user_id), material_id)
    material = RawMaterial(id=material_id, purchase_history=existing.purchase_history, **body.model_dump())
    data = ledger.apply(user_id, materials_core.save_material, material)
    return _material_out(data, material_id)


@router.post("/{material_id}/purchases")
def materials_purchase(material_id: str, body: PurchaseIn, user_id: int = Depends(current_user_id)):
    data = ledger.apply(
        user_id, materials_core.purchase_material,
        material_id, body.quantity, body.total_cost, body.supplier,
    )
    return _material_out(data, material_id)


@router.delete("/{material_id}")
def materials_delete(
    material_id: str,
    user_id: int = Depends(current_user_id),
    percentages: dict = Depends(cost_percentages),
):
    data = ledger.apply(user_id, materials_core.delete_material, material_id, percentages)
    return {"deleted": material_id, "recipes": data.recipes}


@router.post("/suppliers", status_code=201)
def suppliers_add(body: SupplierIn, user_id: int = Depends(current_user_id)):
    data = ledger.apply(user_id, materials_core.add_supplier, body.name)
    return data.suppliers
