from fastapi import APIRouter, Depends

from app.dependencies import current_user_id
from app.schemas import SettingsIn
from kitchen_ledger.config import get_cost_percentages, get_setting, set_setting

router = APIRouter(prefix="/api/settings", tags=["settings"], dependencies=[Depends(current_user_id)])


def _settings_out() -> dict:
    key = get_setting("claude_api_key") or ""
    return {
        "key_set": bool(key),
        "masked_key": key[:8] + "..." if len(key) > 8 else "",
        **get_cost_percentages(),
    }


@router.get("")
def settings_get():
    return _settings_out()


@router.post("")
def settings_save(body: SettingsIn):
    if body.claude_api_key and body.claude_api_key.strip():
        set_setting("claude_api_key", body.claude_api_key.strip())
    for key in ("labor_pct", "services_pct", "profit_pct"):
        value = getattr(body, key)
        if value is not None:
            set_setting(key, str(value))
    return _settings_out()
