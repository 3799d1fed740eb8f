"""Key-value settings storage backed by the SQLite settings table.

Known keys:
    claude_api_key  — Anthropic API key for the dashboard narrative (stored as-is).
    labor_pct       — labor share of raw material cost used when recosting recipes.
    services_pct    — share of monthly fixed costs charged to each recipe batch.
    profit_pct      — margin applied on raw materials plus services.
"""

from kitchen_ledger.db.database import get_connection

DEFAULT_PERCENTAGES = {"labor_pct": 15.0, "services_pct": 10.0, "profit_pct": 30.0}


def get_setting(key: str, default: str = None) -> str:
    """Return the value for a settings key, or default if not found."""
    conn = get_connection()
    try:
        row = conn.execute("SELECT value FROM settings WHERE key = ?", (key,)).fetchone()
        return row["value"] if row else default
    finally:
        conn.close()


def set_setting(key: str, value: str) -> None:
    """Insert or update a settings key-value pair (upsert)."""
    conn = get_connection()
    try:
        conn.execute(
            "INSERT INTO settings (key, value) VALUES (?, ?) ON CONFLICT(key) DO UPDATE SET value=excluded.value",
            (key, value),
        )
        conn.commit()
    finally:
        conn.close()


def get_float_setting(key: str, default: float) -> float:
    """Return a numeric setting, falling back to default when unset or unparsable."""
    raw = get_setting(key)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def get_cost_percentages() -> dict:
    """Return the labor/services/profit percentages used for recipe recosting."""
    return {key: get_float_setting(key, default) for key, default in DEFAULT_PERCENTAGES.items()}
