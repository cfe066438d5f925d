"""Shared fixtures: small synthetic catalogs for the aggregator tests."""

import os
import sys
from datetime import date, timedelta

import pytest

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from core.data_objects import Asset, AssetCatalog, PricePoint, RiskMetrics


def _build_asset(ticker, prices, sentiments=None, volumes=None, dates=None,
                 start=date(2024, 1, 1), metrics=None, sector="Technology"):
    sentiments = sentiments or [0.0] * len(prices)
    volumes = volumes or [1000] * len(prices)
    dates = dates or [start + timedelta(days=i) for i in range(len(prices))]
    history = tuple(
        PricePoint(date=d, price=float(p), sentiment=float(s), volume=float(v))
        for d, p, s, v in zip(dates, prices, sentiments, volumes)
    )
    return Asset(
        ticker=ticker,
        name=f"{ticker} Corp",
        sector=sector,
        price=float(prices[-1]) if prices else 1.0,
        market_cap=1e9,
        price_history=history,
        metrics=RiskMetrics(**(metrics or {})),
    )


@pytest.fixture
def make_asset():
    return _build_asset


@pytest.fixture
def metrics_catalog():
    """X and Y with hand-picked metrics that combine exactly in binary floating point."""
    return AssetCatalog([
        _build_asset("X", [100], metrics={
            "parametric_var_95": 2.0, "monte_carlo_var_95": 3.0, "deep_var_95": 1.0,
            "parametric_var_99": 4.0, "monte_carlo_var_99": 5.0, "deep_var_99": 3.0,
            "sharpe_ratio": 9.99, "volatility": 20.0, "returns": 10.0, "max_drawdown": -15.0,
        }),
        _build_asset("Y", [200], sector="Financials", metrics={
            "parametric_var_95": 4.0, "monte_carlo_var_95": 1.0, "deep_var_95": 3.0,
            "parametric_var_99": 6.0, "monte_carlo_var_99": 7.0, "deep_var_99": 5.0,
            "sharpe_ratio": 0.5, "volatility": 10.0, "returns": 6.0, "max_drawdown": -8.0,
        }),
    ])


@pytest.fixture
def series_catalog():
    """X, Y share three dates; Z covers only the last two X dates plus one later date."""
    start = date(2024, 1, 1)
    return AssetCatalog([
        _build_asset("X", [100, 110, 120], sentiments=[0.5, -0.5, 0.1], volumes=[1000, 2000, 3001]),
        _build_asset("Y", [200, 190, 180], sentiments=[-0.5, 0.5, 0.3], volumes=[3000, 4000, 5000],
                     sector="Financials"),
        _build_asset("Z", [50, 60, 70], sentiments=[0.2, 0.4, 0.6], volumes=[500, 600, 700],
                     dates=[start + timedelta(days=1), start + timedelta(days=2), start + timedelta(days=3)],
                     sector="Healthcare"),
    ])
