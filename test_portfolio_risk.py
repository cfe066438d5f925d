"""
Tests for weight normalization and portfolio metrics aggregation.
"""

import math

import pytest

from core.data_objects import AssetCatalog
from core.result_objects import PortfolioMetrics
from portfolio_risk import (
    aggregate_portfolio_metrics,
    compute_allocations,
    compute_sector_allocations,
    normalize_weights,
)


# ─── normalize_weights ───────────────────────────────────────────

@pytest.mark.parametrize("weights", [
    {"A": 1.0, "B": 1.0},
    {"A": 0.1, "B": 0.2, "C": 0.3},
    {"A": 7.0, "B": 13.5, "C": 0.25, "D": 100.0},
    {"A": 42.0},
])
def test_normalized_weights_sum_to_one(weights):
    normalized = normalize_weights(weights)
    assert set(normalized) == set(weights)
    assert math.isclose(sum(normalized.values()), 1.0, abs_tol=1e-9)


def test_normalize_weights_keeps_proportions():
    assert normalize_weights({"A": 1.0, "B": 3.0}) == {"A": 0.25, "B": 0.75}


def test_zero_sum_weights_are_returned_unchanged():
    weights = {"A": 0.0, "B": 0.0}
    normalized = normalize_weights(weights)
    assert normalized == weights
    assert normalized is not weights


def test_empty_weights_normalize_to_empty():
    assert normalize_weights({}) == {}


def test_weights_summing_to_one_pass_through():
    weights = {"A": 0.25, "B": 0.75}
    assert normalize_weights(weights) == weights


def test_normalize_weights_does_not_mutate_input():
    weights = {"A": 2.0, "B": 2.0}
    normalize_weights(weights)
    assert weights == {"A": 2.0, "B": 2.0}


# ─── aggregate_portfolio_metrics ─────────────────────────────────

def test_equal_weights_average_metrics(metrics_catalog):
    result = aggregate_portfolio_metrics(["X", "Y"], {"X": 1, "Y": 1}, metrics_catalog)

    assert result == PortfolioMetrics(
        parametric_var_95=3.0,
        monte_carlo_var_95=2.0,
        deep_var_95=2.0,
        parametric_var_99=5.0,
        monte_carlo_var_99=6.0,
        deep_var_99=4.0,
        returns=8.0,
        volatility=15.0,
        sharpe_ratio=0.4,
    )


def test_single_asset_reproduces_metrics_with_recomputed_sharpe(metrics_catalog):
    result = aggregate_portfolio_metrics(["X"], {"X": 1.0}, metrics_catalog)

    assert result.parametric_var_95 == 2.0
    assert result.monte_carlo_var_99 == 5.0
    assert result.returns == 10.0
    assert result.volatility == 20.0
    # (10 - 2) / 20, not the stored 9.99
    assert result.sharpe_ratio == 0.4


def test_scaling_weights_does_not_change_result(metrics_catalog):
    base = aggregate_portfolio_metrics(["X", "Y"], {"X": 1, "Y": 3}, metrics_catalog)
    scaled = aggregate_portfolio_metrics(["X", "Y"], {"X": 2, "Y": 6}, metrics_catalog)
    fractional = aggregate_portfolio_metrics(["X", "Y"], {"X": 0.25, "Y": 0.75}, metrics_catalog)

    assert base == scaled == fractional
    assert base.returns == 7.0
    assert base.volatility == 12.5
    assert base.sharpe_ratio == 0.4


def test_empty_selection_gives_zero_record(metrics_catalog):
    result = aggregate_portfolio_metrics([], {"X": 1.0}, metrics_catalog)
    assert result == PortfolioMetrics()
    assert result.is_zero()


def test_zero_weights_give_zero_record(metrics_catalog):
    result = aggregate_portfolio_metrics(["X", "Y"], {"X": 0.0, "Y": 0.0}, metrics_catalog)
    assert result.is_zero()
    assert result.sharpe_ratio == 0.0


def test_selected_asset_missing_from_weights_contributes_nothing(metrics_catalog):
    result = aggregate_portfolio_metrics(["X", "Y"], {"X": 1.0}, metrics_catalog)
    assert result.returns == 10.0
    assert result.volatility == 20.0


def test_unresolved_ticker_is_skipped_but_its_weight_still_normalizes(metrics_catalog):
    # ZZZ is not in the catalog; the normalizing sum still covers the whole map
    result = aggregate_portfolio_metrics(["X", "ZZZ"], {"X": 1.0, "ZZZ": 1.0}, metrics_catalog)
    assert result.returns == 5.0
    assert result.volatility == 10.0
    assert result.sharpe_ratio == 0.3


def test_stale_weight_for_deselected_asset_dilutes_result(metrics_catalog):
    result = aggregate_portfolio_metrics(["X"], {"X": 1.0, "Y": 1.0}, metrics_catalog)
    assert result.returns == 5.0


def test_duplicate_selection_counts_once(metrics_catalog):
    result = aggregate_portfolio_metrics(["X", "X"], {"X": 1.0}, metrics_catalog)
    assert result.returns == 10.0


def test_sharpe_from_weighted_returns_and_volatility(make_asset):
    catalog = AssetCatalog([make_asset("A", [10], metrics={"returns": 10.0, "volatility": 20.0})])
    assert aggregate_portfolio_metrics(["A"], {"A": 1.0}, catalog).sharpe_ratio == 0.4


def test_negative_excess_return_gives_negative_sharpe(make_asset):
    catalog = AssetCatalog([make_asset("A", [10], metrics={"returns": 1.0, "volatility": 4.0})])
    assert aggregate_portfolio_metrics(["A"], {"A": 1.0}, catalog).sharpe_ratio == -0.25


def test_risk_free_rate_override(metrics_catalog):
    result = aggregate_portfolio_metrics(["X"], {"X": 1.0}, metrics_catalog, risk_free_rate=0.0)
    assert result.sharpe_ratio == 0.5


def test_zero_volatility_gives_zero_sharpe(make_asset):
    catalog = AssetCatalog([make_asset("A", [10], metrics={"returns": 12.0, "volatility": 0.0})])
    result = aggregate_portfolio_metrics(["A"], {"A": 1.0}, catalog)
    assert result.returns == 12.0
    assert result.sharpe_ratio == 0.0


def test_fields_round_half_away_from_zero(make_asset):
    catalog = AssetCatalog([
        make_asset("A", [10], metrics={"returns": 1.005, "deep_var_99": 2.675}),
    ])
    result = aggregate_portfolio_metrics(["A"], {"A": 1.0}, catalog)
    assert result.returns == 1.01
    assert result.deep_var_99 == 2.68


def test_result_is_rounded_to_two_decimals(make_asset):
    catalog = AssetCatalog([
        make_asset("A", [10], metrics={"returns": 10.0, "volatility": 30.0}),
        make_asset("B", [10], metrics={"returns": 5.0, "volatility": 10.0}),
    ])
    result = aggregate_portfolio_metrics(["A", "B"], {"A": 1, "B": 2}, catalog)
    # returns 20/3, volatility 50/3, sharpe (20/3 - 2) / (50/3) = 0.28
    assert result.returns == 6.67
    assert result.volatility == 16.67
    assert result.sharpe_ratio == 0.28


def test_var_table_layout(metrics_catalog):
    table = aggregate_portfolio_metrics(["X", "Y"], {"X": 1, "Y": 1}, metrics_catalog).get_var_table()
    assert list(table.index) == ["Parametric", "Monte Carlo", "Deep"]
    assert list(table.columns) == ["95%", "99%"]
    assert table.loc["Monte Carlo", "99%"] == 6.0


# ─── allocations ─────────────────────────────────────────────────

def test_allocations_use_normalized_weights(metrics_catalog):
    allocations = compute_allocations(["Y", "X", "ZZZ"], {"X": 1, "Y": 3}, metrics_catalog)

    assert list(allocations["ticker"]) == ["X", "Y"]           # catalog order
    assert list(allocations["allocation_pct"]) == [25.0, 75.0]
    assert list(allocations["weight"]) == [0.25, 0.75]


def test_sector_allocations_sum_by_sector(make_asset):
    catalog = AssetCatalog([
        make_asset("A", [1], sector="Technology"),
        make_asset("B", [1], sector="Financials"),
        make_asset("C", [1], sector="Technology"),
    ])
    allocations = compute_allocations(["A", "B", "C"], {"A": 1, "B": 1, "C": 2}, catalog)
    sectors = compute_sector_allocations(allocations)

    assert sectors.to_dict() == {"Technology": 75.0, "Financials": 25.0}
    assert list(sectors.index) == ["Technology", "Financials"]


def test_sector_allocations_empty():
    assert compute_sector_allocations(compute_allocations([], {}, AssetCatalog([]))).empty
