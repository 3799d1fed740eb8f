"""Claude AI integration — plain-language narrative of the dashboard metrics.

Calls the Anthropic API using the key stored in the settings table.  The
summary dict from core/dashboard.py is sent as JSON and the reply is returned
as text.
"""

import json
from typing import Optional

from kitchen_ledger.config import get_setting

MODEL = "claude-opus-4-5-20251101"


def _get_api_key() -> Optional[str]:
    """Retrieve the Claude API key from the settings table, or None if not set."""
    return get_setting("claude_api_key") or None


def _get_client():
    """Create and return an Anthropic client. Raises ValueError if the API key is not set."""
    import anthropic
    api_key = _get_api_key()
    if not api_key:
        raise ValueError("Claude API key not set. Add it under Settings.")
    return anthropic.Anthropic(api_key=api_key)


def _format_money(value) -> str:
    return f"${value:,.2f}" if isinstance(value, (int, float)) else str(value)


def narrate_summary(summary: dict, start: str = None, end: str = None, language: str = "English") -> str:
    """Ask Claude for a short narrative of the period's results and return it."""
    client = _get_client()
    period = f"from {start or 'the beginning'} to {end or 'today'}"
    headline = "\n".join(
        f"- {key.replace('_', ' ')}: {_format_money(summary[key])}"
        for key in ("sales_total", "profit_total", "inventory_value", "pantry_value",
                    "monthly_fixed_costs", "waste_value")
        if key in summary
    )
    prompt = f"""You are advising the owner of a small food business. Here are their results {period}:

{headline}

Full metrics as JSON:
{json.dumps(summary, default=str)}

Write three short paragraphs in {language}: how the period went, what stands out
(best and worst products and customers, waste), and one or two concrete
suggestions. Do not invent figures that are not in the data."""

    message = client.messages.create(
        model=MODEL,
        max_tokens=1024,
        messages=[{"role": "user", "content": prompt}],
    )
    return message.content[0].text.strip()
