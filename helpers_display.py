#!/usr/bin/env python
# coding: utf-8

# ─── File: helpers_display.py ──────────────────────────────────────────
"""
Rounding and display helpers shared by the aggregators and reports.

Rounding rule
-------------
All published figures round **half away from zero** on the value's shortest
decimal representation, i.e. what ``repr(x)`` shows:

    round_half_up(2.675)  → 2.68     (built-in round() gives 2.67)
    round_half_up(-0.125) → -0.13
    round_to_int(2.5)     → 3        (built-in round() gives 2)
"""

import math
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Dict, List

import pandas as pd


def round_half_up(value: float, decimals: int = 2) -> float:
    """Round ``value`` to ``decimals`` places, ties away from zero. Non-finite values pass through."""
    value = float(value)
    if not math.isfinite(value):
        return value
    with localcontext() as ctx:
        ctx.prec = 60
        quantum = Decimal(1).scaleb(-decimals)
        rounded = Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return float(rounded) + 0.0           # + 0.0 turns -0.0 into 0.0


def round_to_int(value: float) -> int:
    """Round to the nearest integer with the same tie rule as ``round_half_up``."""
    return int(round_half_up(value, 0))


def format_market_cap(market_cap: float) -> str:
    """$2.90T / $415.00B / $12.30M / $950.00K"""
    if market_cap >= 1e12:
        return f"${market_cap / 1e12:.2f}T"
    if market_cap >= 1e9:
        return f"${market_cap / 1e9:.2f}B"
    if market_cap >= 1e6:
        return f"${market_cap / 1e6:.2f}M"
    return f"${market_cap / 1e3:.2f}K"


def format_price(price: float) -> str:
    return f"${price:.2f}"


def format_percent(value: float) -> str:
    """Signed percentage: +1.23%, -0.50%, 0.00%."""
    return f"{'+' if value > 0 else ''}{value:.2f}%"


# ────────────────────────────────────────────────────────────────────
METRIC_LABELS = {
    "parametric_var_95":  "Parametric VaR (95%)",
    "monte_carlo_var_95": "Monte Carlo VaR (95%)",
    "deep_var_95":        "Deep VaR (95%)",
    "parametric_var_99":  "Parametric VaR (99%)",
    "monte_carlo_var_99": "Monte Carlo VaR (99%)",
    "deep_var_99":        "Deep VaR (99%)",
    "returns":            "Return",
    "volatility":         "Volatility",
    "sharpe_ratio":       "Sharpe Ratio",
}


def format_metrics_lines(metrics: Dict[str, float]) -> List[str]:
    """
    Render a metrics dict as aligned ``label: value`` lines.

    VaR and volatility print as plain percentages, returns as a signed
    percentage, and the Sharpe ratio as a bare number.
    """
    lines = []
    for key, label in METRIC_LABELS.items():
        if key not in metrics:
            continue
        value = metrics[key]
        if key == "returns":
            text = format_percent(value)
        elif key == "sharpe_ratio":
            text = f"{value:.2f}"
        else:
            text = f"{value:.2f}%"
        lines.append(f"{label + ':':<24}{text:>10}")
    return lines


def format_series_table(frame: pd.DataFrame) -> str:
    """Plain-text table of a portfolio series frame (date index, price/sentiment/volume)."""
    if frame.empty:
        return "(no series data)"
    return frame.to_string(
        formatters={
            "price":     "{:,.2f}".format,
            "sentiment": "{:+.2f}".format,
            "volume":    "{:,.0f}".format,
        }
    )
