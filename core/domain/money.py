"""Currency comparison rules shared by every envelope and projection check.

Amounts are stored as floats; two amounts are considered equal when they differ
by no more than half a cent.
"""
from __future__ import annotations

EPSILON = 0.005


def is_zero(delta: float) -> bool:
    return abs(float(delta)) <= EPSILON


def at_least(amount: float, target: float) -> bool:
    """True when ``amount`` reaches ``target`` within rounding tolerance."""
    return float(amount) >= float(target) - EPSILON


def exceeds(amount: float, limit: float) -> bool:
    """True when ``amount`` is above ``limit`` by more than rounding tolerance."""
    return float(amount) > float(limit) + EPSILON


def amounts_match(lhs: float, rhs: float) -> bool:
    return is_zero(float(lhs) - float(rhs))


def signed_impact(amount: float, *, inflow: bool) -> float:
    value = float(amount)
    return value if inflow else -value


__all__ = ["EPSILON", "is_zero", "at_least", "exceeds", "amounts_match", "signed_impact"]
