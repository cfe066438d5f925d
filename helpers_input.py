#!/usr/bin/env python
# coding: utf-8

# ─── File: helpers_input.py ──────────────────────────────────
"""
Helpers for building and editing portfolio selections and weights.

equal_weights(...)
    • 1/n for every ticker.
select_asset(...) / deselect_asset(...)
    • Add or drop a ticker, then reset the selection to equal weights.
set_asset_weight(...)
    • Pin one weight and rescale the others so the map keeps summing to 1.
load_portfolio_config(...)
    • Read `selected_assets:` / `weights:` / `portfolio_name:` from YAML.

Every helper returns new objects; inputs are never mutated.
"""

import yaml
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple, Union

from core.exceptions import PortfolioConfigError


def parse_weight(value: Union[str, int, float]) -> float:
    """
    Convert a human-friendly weight to decimal.

    "25%", "2500bp", "0.25", 0.25  →  0.25
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    t = str(value).strip().lower().replace(" ", "")
    try:
        if t.endswith("%"):
            return float(t[:-1]) / 100
        if t.endswith(("bp", "bps")):
            return float(t.rstrip("s")[:-2]) / 10_000
        return float(t)                       # already decimal
    except ValueError as e:
        raise PortfolioConfigError(f"Invalid weight: {value!r}", portfolio_data=value) from e


def equal_weights(tickers: Sequence[str]) -> Dict[str, float]:
    unique = list(dict.fromkeys(tickers))
    if not unique:
        return {}
    return {t: 1 / len(unique) for t in unique}


def select_asset(
    selected: Sequence[str],
    weights: Dict[str, float],
    ticker: str,
) -> Tuple[List[str], Dict[str, float]]:
    """
    Add ``ticker`` to the selection and give every selected ticker an equal weight.

    Entries in ``weights`` for tickers outside the selection are carried over
    untouched.
    """
    new_selected = list(selected)
    if ticker not in new_selected:
        new_selected.append(ticker)
    new_weights = dict(weights)
    new_weights.update(equal_weights(new_selected))
    return new_selected, new_weights


def deselect_asset(
    selected: Sequence[str],
    weights: Dict[str, float],
    ticker: str,
) -> Tuple[List[str], Dict[str, float]]:
    """Remove ``ticker`` from the selection and the weight map, then re-equalize the rest."""
    new_selected = [t for t in selected if t != ticker]
    new_weights = {t: w for t, w in weights.items() if t != ticker}
    new_weights.update(equal_weights(new_selected))
    return new_selected, new_weights


def set_asset_weight(weights: Dict[str, float], ticker: str, weight: float) -> Dict[str, float]:
    """
    Set one ticker's weight and rescale the others proportionally.

    Other entries are multiplied by ``(1 - weight) / others_total`` so the map
    sums to 1 again. When the other entries sum to zero (or there are none)
    they are left as they are.
    """
    others_total = sum(w for t, w in weights.items() if t != ticker)
    new_weights = dict(weights)
    new_weights[ticker] = weight
    if others_total > 0:
        scale = (1 - weight) / others_total
        for t, w in weights.items():
            if t != ticker:
                new_weights[t] = w * scale
    return new_weights


def _require_string_tickers(tickers, section: str) -> None:
    # YAML 1.1 reads bare ON / OFF / YES / NO as booleans
    bad = [t for t in tickers if not isinstance(t, str)]
    if bad:
        raise PortfolioConfigError(
            f"'{section}' has non-string tickers {bad!r}; quote them in YAML (e.g. 'ON')",
            portfolio_data=bad,
        )


def load_portfolio_config(filepath: Union[str, Path]) -> Dict[str, Any]:
    """
    Load a portfolio selection YAML.

    Expected schema
    ---------------
    portfolio_name: Core Tech            # optional
    selected_assets: [AAPL, MSFT, GOOGL] # optional, defaults to the weight keys
    weights:                             # optional, defaults to equal weights
      AAPL: 40%
      MSFT: 0.35
      GOOGL: 2500bp

    Returns
    -------
    dict with ``portfolio_name``, ``selected_assets`` (list) and ``weights``
    (ticker → float, not normalized).
    """
    path = Path(filepath)
    if not path.is_file():
        raise PortfolioConfigError(f"Portfolio file not found: {path}", portfolio_data=str(path))

    try:
        cfg = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise PortfolioConfigError(f"Invalid YAML in {path}: {e}", portfolio_data=str(path)) from e
    if not isinstance(cfg, dict):
        raise PortfolioConfigError(f"{path} must contain a mapping", portfolio_data=cfg)

    raw_weights = cfg.get("weights")
    if raw_weights is not None and not isinstance(raw_weights, dict):
        raise PortfolioConfigError("'weights' must be a ticker → weight mapping", portfolio_data=cfg)
    if raw_weights is not None:
        _require_string_tickers(raw_weights, "weights")

    selected = cfg.get("selected_assets")
    if selected is None:
        selected = list(raw_weights or {})
    if not isinstance(selected, list):
        raise PortfolioConfigError("'selected_assets' must be a list of tickers", portfolio_data=cfg)
    _require_string_tickers(selected, "selected_assets")

    if raw_weights is None:
        weights = equal_weights(selected)
    else:
        weights = {t: parse_weight(v) for t, v in raw_weights.items()}

    return {
        "portfolio_name": cfg.get("portfolio_name"),
        "selected_assets": selected,
        "weights": weights,
    }
