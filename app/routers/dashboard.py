from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from app.dependencies import current_data
from kitchen_ledger.core import ai_assistant, dashboard as dashboard_core
from kitchen_ledger.db.models import UserData

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("")
def dashboard_summary(
    start: Optional[str] = None,
    end: Optional[str] = None,
    customer_id: Optional[str] = None,
    product_id: Optional[str] = None,
    data: UserData = Depends(current_data),
):
    return dashboard_core.summarize(data, start, end, customer_id, product_id)


@router.get("/series")
def dashboard_series(
    granularity: str = "day",
    start: Optional[str] = None,
    end: Optional[str] = None,
    data: UserData = Depends(current_data),
):
    try:
        return dashboard_core.sales_series(data.sales, granularity, start, end)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/narrative")
def dashboard_narrative(
    start: Optional[str] = None,
    end: Optional[str] = None,
    language: str = "English",
    data: UserData = Depends(current_data),
):
    summary = dashboard_core.summarize(data, start, end)
    try:
        text = ai_assistant.narrate_summary(summary, start, end, language)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"narrative": text}
