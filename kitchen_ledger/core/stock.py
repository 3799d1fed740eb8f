"""Shared stock arithmetic.

Quantities are floats, so comparisons allow a tiny tolerance and a deduction
that lands within that tolerance below zero is clamped to exactly zero.
"""

TOLERANCE = 1e-9


def has_enough(available: float, required: float) -> bool:
    return available + TOLERANCE >= required


def deduct(available: float, amount: float) -> float:
    remaining = available - amount
    return 0.0 if abs(remaining) < TOLERANCE else remaining


def weighted_average(qty_a: float, cost_a: float, qty_b: float, cost_b: float) -> float:
    """Unit cost of qty_a units at cost_a merged with qty_b units at cost_b."""
    total = qty_a + qty_b
    return (qty_a * cost_a + qty_b * cost_b) / total if total > 0 else 0.0
