#!/usr/bin/env python3
# coding: utf-8

# File: run_risk.py

import argparse
import json
import sys
from typing import Any, Dict, Optional

from core.exceptions import PortfolioViewException
from core.portfolio_analysis import analyze_portfolio_file
from settings import PORTFOLIO_DEFAULTS

# Import logging decorators
from utils.logging import (
    log_error_handling,
    log_portfolio_operation_decorator,
    log_performance
)


@log_error_handling("high")
@log_portfolio_operation_decorator("run_portfolio")
@log_performance(5.0)
def run_portfolio(
    filepath: str,
    *,
    catalog_file: Optional[str] = None,
    alignment: Optional[str] = None,
    show_series: bool = False,
    return_data: bool = False,
):
    """
    High-level entry point for a portfolio view run.

        1.  Loads the asset catalog YAML (metrics + daily histories).
        2.  Loads the portfolio YAML (selected tickers + weights).
        3.  Aggregates portfolio metrics, the daily series and allocations.
        4.  Prints the formatted report (and optionally the daily series).

    Parameters
    ----------
    filepath : str
        Path to the *portfolio* YAML (`selected_assets`, `weights`, `portfolio_name`).
    catalog_file : str, optional
        Asset catalog YAML; defaults to PORTFOLIO_DEFAULTS["catalog_file"].
    alignment : str, optional
        "strict" or "truncate" history alignment.
    show_series : bool, default False
        Also print the daily portfolio series table.
    return_data : bool, default False
        If True, returns the JSON-safe result dict instead of printing.

    Example
    -------
    >>> run_portfolio("portfolio.yaml")
    === CORE TECH SUMMARY ===
    …
    >>> data = run_portfolio("portfolio.yaml", return_data=True)
    >>> data["metrics"]["sharpe_ratio"]
    0.61
    """
    result = analyze_portfolio_file(filepath, catalog_file=catalog_file, alignment=alignment)

    if return_data:
        data: Dict[str, Any] = result.to_dict()
        data["formatted_report"] = result.to_formatted_report()
        return data

    print(result.to_formatted_report())
    if show_series:
        print("\n=== Daily Portfolio Series ===")
        print(result.to_series_report())
    return None


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Aggregate a weighted portfolio view from an asset catalog.")
    parser.add_argument("--portfolio", type=str, default=PORTFOLIO_DEFAULTS["portfolio_file"],
                        help="Path to YAML portfolio file")
    parser.add_argument("--catalog", type=str, default=None,
                        help=f"Path to YAML asset catalog (default: {PORTFOLIO_DEFAULTS['catalog_file']})")
    parser.add_argument("--alignment", choices=["strict", "truncate"], default=None,
                        help="How to align asset histories that do not share every date")
    parser.add_argument("--series", action="store_true", help="Print the daily portfolio series")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    args = parser.parse_args(argv)

    try:
        if args.json:
            data = run_portfolio(args.portfolio, catalog_file=args.catalog,
                                 alignment=args.alignment, return_data=True)
            print(json.dumps(data, indent=2))
        else:
            run_portfolio(args.portfolio, catalog_file=args.catalog,
                          alignment=args.alignment, show_series=args.series)
    except PortfolioViewException as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
