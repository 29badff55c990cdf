from __future__ import annotations

import re

import numpy as np


def clamp(value: float, lower: float, upper: float) -> float:
    return min(upper, max(lower, value))


def excel_round(x, decimals: int = 2):
    """Excel ROUND: half away from zero (vectorized)."""
    m = 10 ** decimals
    x = np.asarray(x, dtype=float)
    return np.sign(x) * (np.floor(np.abs(x) * m + 0.5) / m)


def round_half_up(x: float, decimals: int = 2) -> float:
    """Scalar form of excel_round."""
    return float(excel_round(x, decimals))


def format_money(val: float, decimals: int = 2) -> str:
    """Format as US dollars: 1234.5 -> '$1,234.50', -12 -> '-$12.00'."""
    amount = f"{abs(val):,.{decimals}f}"
    if val < 0 and float(amount.replace(",", "")) != 0:
        return f"-${amount}"
    return f"${amount}"


def money_decimals(val: float) -> int:
    """Currency precision by magnitude: sub-cent unit costs need 4 places."""
    magnitude = abs(val)
    if magnitude == 0 or magnitude >= 1000:
        return 0
    if magnitude >= 1:
        return 2
    return 4


def format_pct(val: float, decimals: int = 1) -> str:
    return f"{val:.{decimals}f}%"


def format_number(val: float) -> str:
    """Thousands separators, at most one decimal (trailing zero dropped)."""
    text = f"{val:,.1f}"
    return text[:-2] if text.endswith(".0") else text


def slugify(text: str) -> str:
    return re.sub(r"\s+", "-", text.strip()).lower()
