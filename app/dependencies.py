import os
from typing import Optional

from fastapi import HTTPException, Request
from itsdangerous import BadSignature, URLSafeTimedSerializer

from kitchen_ledger.config import get_cost_percentages
from kitchen_ledger.core import ledger
from kitchen_ledger.db.models import UserData

SESSION_COOKIE = "kl_session"
SESSION_MAX_AGE = 60 * 60 * 24 * 7  # 7 days


def _get_signer() -> URLSafeTimedSerializer:
    key = os.environ.get("SECRET_KEY", "dev-secret-change-in-production")
    return URLSafeTimedSerializer(key)


def create_session_token(user_id: int) -> str:
    return _get_signer().dumps({"uid": user_id})


def verify_session_token(token: str) -> Optional[int]:
    """Return the user id in a valid token, or None."""
    try:
        payload = _get_signer().loads(token, max_age=SESSION_MAX_AGE)
    except BadSignature:
        return None
    uid = payload.get("uid") if isinstance(payload, dict) else None
    return uid if isinstance(uid, int) else None


# Paths that don't require auth
_PUBLIC_PREFIXES = ("/login", "/static", "/health")


def is_public(path: str) -> bool:
    return any(path.startswith(p) for p in _PUBLIC_PREFIXES)


def current_user_id(request: Request) -> int:
    user_id = getattr(request.state, "user_id", None)
    if user_id is None:
        raise HTTPException(status_code=401, detail="Not signed in")
    return user_id


def current_data(request: Request) -> UserData:
    return ledger.get_user_data(current_user_id(request))


def cost_percentages() -> dict:
    return get_cost_percentages()
