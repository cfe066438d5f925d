#!/usr/bin/env python
# coding: utf-8

# File: portfolio_risk.py

import numpy as np
import pandas as pd
from typing import Dict, List, Optional, Sequence

from core.data_objects import Asset, AssetCatalog
from core.exceptions import HistoryAlignmentError, ValidationError
from core.result_objects import PortfolioMetrics, PortfolioSeriesPoint
from helpers_display import round_half_up, round_to_int
from settings import PORTFOLIO_DEFAULTS

# Import logging decorators for portfolio aggregation
from utils.logging import (
    log_portfolio_operation_decorator,
    log_performance,
    log_error_handling,
    portfolio_logger,
)

# Per-asset metrics combined as a weighted sum (Sharpe is recomputed, drawdown dropped)
AGGREGATED_METRIC_FIELDS = [
    "parametric_var_95",
    "monte_carlo_var_95",
    "deep_var_95",
    "parametric_var_99",
    "monte_carlo_var_99",
    "deep_var_99",
    "returns",
    "volatility",
]

SERIES_FIELDS = ["price", "sentiment", "volume"]

ALIGNMENT_MODES = ("strict", "truncate")


def normalize_weights(weights: Dict[str, float]) -> Dict[str, float]:
    """
    Rescale weights so they sum to 1.

    The sum is taken over every entry in ``weights``, including tickers that
    are not currently selected. A map that already sums to exactly 1, or sums
    to exactly 0, comes back unchanged (as a new dict); the zero case yields
    an all-zero aggregate downstream instead of NaN/inf.

    Args:
        weights: Dictionary of ticker -> weight

    Returns:
        Dictionary of normalized weights
    """
    total = sum(weights.values())
    if total == 0:
        if weights:
            portfolio_logger.warning("⚠️ Weights sum to zero, skipping normalization")
        return dict(weights)
    if total == 1:
        return dict(weights)
    return {t: w / total for t, w in weights.items()}


def _resolve_assets(selected_assets: Sequence[str], catalog: AssetCatalog) -> List[Asset]:
    assets = catalog.resolve(selected_assets)
    missing = catalog.unresolved(selected_assets)
    if missing:
        portfolio_logger.debug(f"Skipping tickers not in catalog: {missing}")
    return assets


@log_error_handling("high")
@log_portfolio_operation_decorator("aggregate_portfolio_metrics")
@log_performance(0.5)
def aggregate_portfolio_metrics(
    selected_assets: Sequence[str],
    weights: Dict[str, float],
    catalog: AssetCatalog,
    risk_free_rate: Optional[float] = None,
) -> PortfolioMetrics:
    """
    Combine the selected assets' risk metrics into one portfolio record.

    Steps:
      1. Resolve tickers against the catalog (unknown tickers are skipped).
      2. Normalize weights over the full weight map.
      3. Weighted sum of the six VaR figures, returns and volatility.
      4. Sharpe = (returns - risk_free_rate) / volatility, or 0 when volatility is 0.
      5. Round every field half away from zero to 2 decimals.

    An empty or fully unresolved selection gives the all-zero record.

    Args:
        selected_assets: Tickers chosen by the caller
        weights: Ticker -> weight, need not sum to 1
        catalog: Read-only asset catalog
        risk_free_rate: Percentage points; defaults to PORTFOLIO_DEFAULTS["risk_free_rate"]
    """
    if risk_free_rate is None:
        risk_free_rate = PORTFOLIO_DEFAULTS["risk_free_rate"]
    decimals = PORTFOLIO_DEFAULTS["rounding_decimals"]

    assets = _resolve_assets(selected_assets, catalog)
    w = normalize_weights(weights)

    totals = dict.fromkeys(AGGREGATED_METRIC_FIELDS, 0.0)
    if assets:
        metrics_df = pd.DataFrame(
            [a.metrics.to_dict() for a in assets],
            index=[a.ticker for a in assets],
        )[AGGREGATED_METRIC_FIELDS]
        weight_vec = np.array([w.get(a.ticker, 0.0) for a in assets], dtype=float)
        # dot product column-wise: Σ_i w_i * metric_i
        totals = dict(zip(AGGREGATED_METRIC_FIELDS, weight_vec.dot(metrics_df.values)))

    volatility = totals["volatility"]
    sharpe = (totals["returns"] - risk_free_rate) / volatility if volatility != 0 else 0.0

    return PortfolioMetrics(
        **{k: round_half_up(v, decimals) for k, v in totals.items()},
        sharpe_ratio=round_half_up(sharpe, decimals),
    )


def _aligned_dates(assets: List[Asset], frames: Dict[str, pd.DataFrame], alignment: str) -> list:
    """
    Dates of the output series, taken from the first (reference) asset.

    strict:   every other asset must cover every reference date
    truncate: keep only reference dates present in every asset
    """
    reference = assets[0]
    ref_dates = reference.dates

    if alignment == "strict":
        for asset in assets[1:]:
            available = set(frames[asset.ticker].index)
            missing = [d for d in ref_dates if d not in available]
            if missing:
                raise HistoryAlignmentError(
                    f"{asset.ticker} has no observations for {len(missing)} of "
                    f"{len(ref_dates)} dates in the {reference.ticker} reference history "
                    f"(first missing: {missing[0]})",
                    ticker=asset.ticker,
                    missing_dates=missing,
                )
        return ref_dates

    common = set(ref_dates)
    for asset in assets[1:]:
        common &= set(frames[asset.ticker].index)
    kept = [d for d in ref_dates if d in common]
    if len(kept) < len(ref_dates):
        portfolio_logger.info(
            f"📅 Series truncated to {len(kept)} of {len(ref_dates)} reference dates "
            f"shared by all selected assets"
        )
    return kept


@log_error_handling("high")
@log_portfolio_operation_decorator("aggregate_portfolio_series")
@log_performance(1.0)
def aggregate_portfolio_series(
    selected_assets: Sequence[str],
    weights: Dict[str, float],
    catalog: AssetCatalog,
    alignment: Optional[str] = None,
) -> List[PortfolioSeriesPoint]:
    """
    Combine the selected assets' daily price, sentiment and volume into one series.

    The first resolved asset (in catalog order) supplies the date axis. Other
    histories are matched to it by date according to ``alignment``
    ("strict" raises HistoryAlignmentError on gaps, "truncate" keeps only
    shared dates). Price and sentiment round to 2 decimals, volume to an int.

    Returns:
        List[PortfolioSeriesPoint]: ascending by date; empty when nothing resolves.

    Raises:
        ValidationError: Unknown alignment mode
        HistoryAlignmentError: Strict alignment with an incomplete history
    """
    alignment = alignment or PORTFOLIO_DEFAULTS["history_alignment"]
    if alignment not in ALIGNMENT_MODES:
        raise ValidationError(
            f"Unknown history alignment '{alignment}', expected one of {ALIGNMENT_MODES}",
            data=alignment,
        )
    decimals = PORTFOLIO_DEFAULTS["rounding_decimals"]

    assets = _resolve_assets(selected_assets, catalog)
    if not assets:
        return []

    w = normalize_weights(weights)
    frames = {a.ticker: a.to_frame() for a in assets}
    dates = _aligned_dates(assets, frames, alignment)

    total = pd.DataFrame(0.0, index=pd.Index(dates, name="date"), columns=SERIES_FIELDS)
    for asset in assets:
        weight = w.get(asset.ticker, 0.0)
        total += frames[asset.ticker].loc[dates, SERIES_FIELDS] * weight

    return [
        PortfolioSeriesPoint(
            date=row.Index,
            price=round_half_up(row.price, decimals),
            sentiment=round_half_up(row.sentiment, decimals),
            volume=round_to_int(row.volume),
        )
        for row in total.itertuples()
    ]


@log_error_handling("medium")
def compute_allocations(
    selected_assets: Sequence[str],
    weights: Dict[str, float],
    catalog: AssetCatalog,
) -> pd.DataFrame:
    """
    Allocation table for the resolved assets.

    Returns:
        pd.DataFrame: columns ticker, name, sector, weight (normalized),
        allocation_pct (weight x 100, 2 decimals); catalog order.
    """
    decimals = PORTFOLIO_DEFAULTS["rounding_decimals"]
    w = normalize_weights(weights)
    rows = [
        {
            "ticker": a.ticker,
            "name": a.name,
            "sector": a.sector,
            "weight": float(w.get(a.ticker, 0.0)),
            "allocation_pct": round_half_up(w.get(a.ticker, 0.0) * 100, decimals),
        }
        for a in _resolve_assets(selected_assets, catalog)
    ]
    return pd.DataFrame(rows, columns=["ticker", "name", "sector", "weight", "allocation_pct"])


def compute_sector_allocations(allocations: pd.DataFrame) -> pd.Series:
    """Sum ``allocation_pct`` by sector, largest first."""
    if allocations.empty:
        return pd.Series(dtype=float, name="allocation_pct")
    by_sector = allocations.groupby("sector")["allocation_pct"].sum()
    by_sector = by_sector.apply(round_half_up)
    return by_sector.sort_values(ascending=False, kind="stable")
