#!/usr/bin/env python3
# coding: utf-8

"""
Core portfolio view business logic.
Runs both aggregators and the allocation breakdown for one selection and
packages them as a PortfolioViewResult.
"""

from typing import Dict, Optional, Sequence
from pathlib import Path
from datetime import datetime

from core.data_objects import AssetCatalog
from core.result_objects import PortfolioViewResult
from data_loader import load_asset_catalog
from helpers_input import load_portfolio_config
from portfolio_risk import (
    aggregate_portfolio_metrics,
    aggregate_portfolio_series,
    compute_allocations,
    compute_sector_allocations,
    normalize_weights,
)
from settings import PORTFOLIO_DEFAULTS

# Add logging decorator imports
from utils.logging import (
    log_portfolio_operation,
    log_portfolio_operation_decorator,
    log_performance,
    log_error_handling,
)


@log_error_handling("high")
@log_portfolio_operation_decorator("portfolio_analysis")
@log_performance(3.0)
def analyze_portfolio(
    selected_assets: Sequence[str],
    weights: Dict[str, float],
    catalog: AssetCatalog,
    portfolio_name: Optional[str] = None,
    alignment: Optional[str] = None,
    risk_free_rate: Optional[float] = None,
) -> PortfolioViewResult:
    """
    Build the full portfolio view for one selection.

    Parameters
    ----------
    selected_assets : Sequence[str]
        Tickers chosen by the caller; unknown tickers are reported, not fatal.
    weights : Dict[str, float]
        Raw weights; normalized over the whole map.
    catalog : AssetCatalog
        Read-only asset catalog.
    portfolio_name : str, optional
        Label used in reports.
    alignment : str, optional
        "strict" or "truncate"; defaults to PORTFOLIO_DEFAULTS["history_alignment"].
    risk_free_rate : float, optional
        Percentage points; defaults to PORTFOLIO_DEFAULTS["risk_free_rate"].

    Returns
    -------
    PortfolioViewResult
    """
    selected = list(selected_assets)

    # ─── 1. Aggregates ───────────────────────────────────────
    metrics = aggregate_portfolio_metrics(selected, weights, catalog, risk_free_rate=risk_free_rate)
    series = aggregate_portfolio_series(selected, weights, catalog, alignment=alignment)

    # ─── 2. Allocation breakdown ─────────────────────────────
    allocations = compute_allocations(selected, weights, catalog)
    sector_allocations = compute_sector_allocations(allocations)

    resolved = [a.ticker for a in catalog.resolve(selected)]
    unresolved = catalog.unresolved(selected)

    log_portfolio_operation(
        "portfolio_view",
        portfolio_data={
            "portfolio_name": portfolio_name,
            "positions": len(resolved),
            "unresolved": len(unresolved),
        },
        details={"series_days": len(series)},
    )

    # ─── 3. Package result ───────────────────────────────────
    return PortfolioViewResult(
        metrics=metrics,
        series=series,
        allocations=allocations,
        sector_allocations=sector_allocations,
        selected_assets=selected,
        resolved_assets=resolved,
        unresolved_assets=unresolved,
        weights=normalize_weights(weights),
        analysis_date=datetime.now(),
        portfolio_name=portfolio_name,
    )


@log_error_handling("high")
def analyze_portfolio_file(
    portfolio_file: str,
    catalog_file: Optional[str] = None,
    alignment: Optional[str] = None,
) -> PortfolioViewResult:
    """
    Load a portfolio YAML and an asset catalog YAML, then run analyze_portfolio().

    The catalog path defaults to PORTFOLIO_DEFAULTS["catalog_file"].
    """
    catalog = load_asset_catalog(Path(catalog_file or PORTFOLIO_DEFAULTS["catalog_file"]))
    config = load_portfolio_config(portfolio_file)
    return analyze_portfolio(
        config["selected_assets"],
        config["weights"],
        catalog,
        portfolio_name=config["portfolio_name"],
        alignment=alignment,
    )
