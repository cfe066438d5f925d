"""Result objects for structured portfolio aggregation responses."""

from dataclasses import dataclass, field, fields
from datetime import date, datetime
from typing import Any, Dict, List, Optional

import pandas as pd

from helpers_display import format_metrics_lines, format_percent, format_series_table
from utils.serialization import make_json_safe


@dataclass(frozen=True)
class PortfolioMetrics:
    """
    Portfolio-level risk and performance figures.

    Each VaR figure, ``returns`` and ``volatility`` is the normalized-weight
    sum of the selected assets' values. ``sharpe_ratio`` is recomputed from the
    aggregated return and volatility, not averaged from per-asset ratios.
    All fields are rounded to 2 decimals.

    Example:
        ```python
        metrics = aggregate_portfolio_metrics(["AAPL", "MSFT"], {"AAPL": 0.5, "MSFT": 0.5}, catalog)
        metrics.sharpe_ratio          # 0.61
        metrics.get_var_table()       # models x confidence levels
        ```
    """

    parametric_var_95: float = 0.0
    monte_carlo_var_95: float = 0.0
    deep_var_95: float = 0.0
    parametric_var_99: float = 0.0
    monte_carlo_var_99: float = 0.0
    deep_var_99: float = 0.0
    returns: float = 0.0
    volatility: float = 0.0
    sharpe_ratio: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def is_zero(self) -> bool:
        """True for the degenerate all-zero record (empty selection or zero weights)."""
        return all(v == 0 for v in self.to_dict().values())

    def get_var_table(self) -> pd.DataFrame:
        """
        VaR figures arranged by model (rows) and confidence level (columns).

        Returns:
            pd.DataFrame: index ["Parametric", "Monte Carlo", "Deep"], columns ["95%", "99%"]
        """
        return pd.DataFrame(
            {
                "95%": [self.parametric_var_95, self.monte_carlo_var_95, self.deep_var_95],
                "99%": [self.parametric_var_99, self.monte_carlo_var_99, self.deep_var_99],
            },
            index=pd.Index(["Parametric", "Monte Carlo", "Deep"], name="model"),
        )


@dataclass(frozen=True)
class PortfolioSeriesPoint:
    """One day of the aggregated portfolio series."""

    date: date
    price: float
    sentiment: float
    volume: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "price": self.price,
            "sentiment": self.sentiment,
            "volume": self.volume,
        }


def series_to_frame(points: List[PortfolioSeriesPoint]) -> pd.DataFrame:
    """Convert series points to a DataFrame indexed by date."""
    return pd.DataFrame(
        [(p.price, p.sentiment, p.volume) for p in points],
        columns=["price", "sentiment", "volume"],
        index=pd.Index([p.date for p in points], name="date"),
    )


@dataclass
class PortfolioViewResult:
    """
    Combined portfolio view: metrics, daily series and allocation breakdown.

    Returned by core.portfolio_analysis.analyze_portfolio(). Provides
    structured access for programmatic use, ``to_dict()`` for JSON output and
    ``to_formatted_report()`` for the CLI.

    Architecture Role:
        Asset catalog → Aggregators → PortfolioViewResult → Consumer (CLI/UI)
    """

    metrics: PortfolioMetrics
    series: List[PortfolioSeriesPoint]

    # One row per resolved asset: ticker, name, sector, weight, allocation_pct
    allocations: pd.DataFrame
    sector_allocations: pd.Series

    selected_assets: List[str]
    resolved_assets: List[str]
    unresolved_assets: List[str]
    weights: Dict[str, float]           # normalized

    analysis_date: datetime = field(default_factory=datetime.now)
    portfolio_name: Optional[str] = None

    def get_series_frame(self) -> pd.DataFrame:
        return series_to_frame(self.series)

    def get_summary(self) -> Dict[str, Any]:
        """
        Key figures in a flat dictionary.

        Returns:
            Dict[str, Any]: returns, volatility, sharpe_ratio, worst 99% VaR,
            position count, series length and latest portfolio price.
        """
        last = self.series[-1] if self.series else None
        return {
            "returns": self.metrics.returns,
            "volatility": self.metrics.volatility,
            "sharpe_ratio": self.metrics.sharpe_ratio,
            "max_var_99": max(
                self.metrics.parametric_var_99,
                self.metrics.monte_carlo_var_99,
                self.metrics.deep_var_99,
            ),
            "positions": len(self.resolved_assets),
            "series_days": len(self.series),
            "latest_price": last.price if last else None,
            "latest_date": last.date.isoformat() if last else None,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-safe dictionary."""
        return make_json_safe({
            "portfolio_name": self.portfolio_name,
            "analysis_date": self.analysis_date,
            "selected_assets": self.selected_assets,
            "resolved_assets": self.resolved_assets,
            "unresolved_assets": self.unresolved_assets,
            "weights": self.weights,
            "metrics": self.metrics.to_dict(),
            "series": [p.to_dict() for p in self.series],
            "allocations": self.allocations,
            "sector_allocations": self.sector_allocations,
            "summary": self.get_summary(),
        })

    def to_formatted_report(self) -> str:
        title = self.portfolio_name or "Portfolio"
        lines = [f"=== {title.upper()} SUMMARY ===", ""]

        if not self.resolved_assets:
            lines.append("No catalog assets selected.")
        else:
            lines.append("=== Allocation ===")
            for row in self.allocations.itertuples(index=False):
                lines.append(f"{row.ticker:<8}{row.name:<32}{row.sector:<26}{row.allocation_pct:>7.2f}%")
            lines.append("")
            lines.append("=== Sector Allocation ===")
            for sector, pct in self.sector_allocations.items():
                lines.append(f"{sector:<40}{pct:>7.2f}%")
            lines.append("")

        lines.append("=== Portfolio Metrics ===")
        lines.extend(format_metrics_lines(self.metrics.to_dict()))

        if self.series:
            first, last = self.series[0], self.series[-1]
            change = (last.price / first.price - 1) * 100 if first.price else 0.0
            lines.append("")
            lines.append("=== Price History ===")
            lines.append(f"{first.date} → {last.date} ({len(self.series)} days)")
            lines.append(f"Start {first.price:,.2f}   End {last.price:,.2f}   Change {format_percent(change)}")

        if self.unresolved_assets:
            lines.append("")
            lines.append(f"⚠️  Not in catalog (ignored): {', '.join(self.unresolved_assets)}")

        return "\n".join(lines)

    def to_series_report(self) -> str:
        return format_series_table(self.get_series_frame())
