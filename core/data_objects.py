"""
Core Data Objects Module

Immutable data structures for the asset catalog consumed by the portfolio
aggregators.

Classes:
- PricePoint: One day's observation (price, sentiment, volume) for an asset
- RiskMetrics: Precomputed per-asset VaR, Sharpe, volatility, return and drawdown
- Asset: Catalog entry combining descriptive fields, history and metrics
- AssetCatalog: Read-only ticker → Asset repository injected into the aggregators

Usage: Build once at process start (usually via data_loader.load_asset_catalog)
and pass the catalog to every aggregation call.
"""

import math
from dataclasses import dataclass, field, fields
from datetime import date, datetime
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

import pandas as pd

from core.exceptions import ValidationError


def _to_date(value: Any) -> date:
    """Coerce a date-like value (date, datetime, Timestamp, ISO string) to ``date``."""
    if value is None or value is pd.NaT:
        raise ValidationError("Price point date cannot be empty", data=value)
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        ts = pd.Timestamp(value)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"Invalid date: {value!r}", data=value) from e
    if pd.isna(ts):
        raise ValidationError(f"Invalid date: {value!r}", data=value)
    return ts.date()


def _to_float(value: Any, name: str) -> float:
    try:
        result = float(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{name} must be numeric, got {value!r}", data=value) from e
    if not math.isfinite(result):
        raise ValidationError(f"{name} must be finite, got {value!r}", data=value)
    return result


@dataclass(frozen=True)
class PricePoint:
    """
    One calendar day's observation for an asset.

    Invariants (checked on construction):
    - price > 0
    - sentiment in [-1, 1]
    - volume >= 0
    """

    date: date
    price: float
    sentiment: float
    volume: float

    def __post_init__(self):
        for name in ("price", "sentiment", "volume"):
            if not math.isfinite(getattr(self, name)):
                raise ValidationError(f"{name.capitalize()} must be finite on {self.date}, got {getattr(self, name)}")
        if self.price <= 0:
            raise ValidationError(f"Price must be positive on {self.date}, got {self.price}")
        if not -1.0 <= self.sentiment <= 1.0:
            raise ValidationError(f"Sentiment must be within [-1, 1] on {self.date}, got {self.sentiment}")
        if self.volume < 0:
            raise ValidationError(f"Volume cannot be negative on {self.date}, got {self.volume}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PricePoint":
        """Create a PricePoint from a ``{date, price, sentiment, volume}`` mapping."""
        missing = {"date", "price", "sentiment", "volume"} - set(data)
        if missing:
            raise ValidationError(f"Price point missing fields: {sorted(missing)}", data=dict(data))
        return cls(
            date=_to_date(data["date"]),
            price=_to_float(data["price"], "price"),
            sentiment=_to_float(data["sentiment"], "sentiment"),
            volume=_to_float(data["volume"], "volume"),
        )


# camelCase keys used by the dashboard's JSON data files
_METRIC_ALIASES = {
    "parametricVaR95": "parametric_var_95",
    "monteCarloVaR95": "monte_carlo_var_95",
    "deepVaR95": "deep_var_95",
    "parametricVaR99": "parametric_var_99",
    "monteCarloVaR99": "monte_carlo_var_99",
    "deepVaR99": "deep_var_99",
    "sharpeRatio": "sharpe_ratio",
    "maxDrawdown": "max_drawdown",
}


@dataclass(frozen=True)
class RiskMetrics:
    """
    Precomputed per-asset risk and performance figures.

    VaR figures are positive percentage-loss magnitudes at 95% / 99% confidence
    for the parametric, Monte-Carlo and deep-learning models. ``volatility`` is
    annualized (%), ``returns`` is the signed period return (%), and
    ``max_drawdown`` is a signed percentage (<= 0).

    These values are supplied by upstream models; nothing here derives them.
    """

    parametric_var_95: float = 0.0
    monte_carlo_var_95: float = 0.0
    deep_var_95: float = 0.0
    parametric_var_99: float = 0.0
    monte_carlo_var_99: float = 0.0
    deep_var_99: float = 0.0
    sharpe_ratio: float = 0.0
    volatility: float = 0.0
    returns: float = 0.0
    max_drawdown: float = 0.0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RiskMetrics":
        """
        Create RiskMetrics from a mapping with snake_case or camelCase keys.

        Raises:
            ValidationError: On unknown keys or non-numeric values
        """
        known = {f.name for f in fields(cls)}
        values: Dict[str, float] = {}
        for key, value in data.items():
            name = _METRIC_ALIASES.get(key, key)
            if name not in known:
                raise ValidationError(f"Unknown risk metric: {key}", data=dict(data))
            values[name] = _to_float(value, name)
        return cls(**values)

    def to_dict(self) -> Dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class Asset:
    """
    Immutable catalog entry.

    ``price_history`` is ordered by strictly ascending date; construction fails
    otherwise so that aggregation can rely on the ordering.

    Example:
        asset = Asset.from_dict({
            "ticker": "AAPL", "name": "Apple Inc.", "sector": "Technology",
            "price": 185.92, "market_cap": 2.9e12,
            "price_history": [{"date": "2024-01-02", "price": 185.6, "sentiment": 0.2, "volume": 51000}],
            "metrics": {"returns": 12.4, "volatility": 21.3},
        })
        frame = asset.to_frame()
    """

    ticker: str
    name: str
    sector: str
    price: float
    market_cap: float
    price_history: Tuple[PricePoint, ...] = field(default_factory=tuple)
    metrics: RiskMetrics = field(default_factory=RiskMetrics)

    def __post_init__(self):
        if not self.ticker:
            raise ValidationError("Ticker cannot be empty")
        if self.price < 0 or self.market_cap < 0:
            raise ValidationError(f"{self.ticker}: price and market cap cannot be negative", data=self.ticker)
        if not isinstance(self.price_history, tuple):
            object.__setattr__(self, "price_history", tuple(self.price_history))
        for prev, cur in zip(self.price_history, self.price_history[1:]):
            if cur.date <= prev.date:
                raise ValidationError(
                    f"{self.ticker}: price history dates must be strictly ascending "
                    f"({prev.date} followed by {cur.date})",
                    data=self.ticker,
                )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Asset":
        """Create an Asset from a catalog record (camelCase ``marketCap`` / ``priceHistory`` accepted)."""
        ticker = data.get("ticker")
        if ticker is not None and not isinstance(ticker, str):
            raise ValidationError(
                f"Ticker must be a string, got {ticker!r}; quote it in YAML (e.g. 'ON')",
                data=dict(data),
            )
        if not ticker:
            raise ValidationError("Catalog entry is missing a ticker", data=dict(data))

        history = data.get("price_history", data.get("priceHistory", [])) or []
        points = tuple(
            p if isinstance(p, PricePoint) else PricePoint.from_dict(p)
            for p in history
        )
        metrics = data.get("metrics") or {}
        if not isinstance(metrics, RiskMetrics):
            metrics = RiskMetrics.from_dict(metrics)

        return cls(
            ticker=ticker,
            name=str(data.get("name", ticker)),
            sector=str(data.get("sector", "Unknown")),
            price=_to_float(data.get("price", 0.0), "price"),
            market_cap=_to_float(data.get("market_cap", data.get("marketCap", 0.0)), "market_cap"),
            price_history=points,
            metrics=metrics,
        )

    @property
    def dates(self) -> List[date]:
        return [p.date for p in self.price_history]

    def to_frame(self) -> pd.DataFrame:
        """Return the history as a DataFrame indexed by date with price/sentiment/volume columns."""
        frame = pd.DataFrame(
            [(p.price, p.sentiment, p.volume) for p in self.price_history],
            columns=["price", "sentiment", "volume"],
            index=pd.Index(self.dates, name="date"),
            dtype=float,
        )
        return frame


class AssetCatalog:
    """
    Read-only repository of assets keyed by ticker.

    The catalog keeps insertion order; that order decides which selected
    asset acts as the reference for series aggregation.

    Example:
        catalog = AssetCatalog.from_records(records)
        assets = catalog.resolve(["MSFT", "AAPL", "ZZZZ"])   # catalog order, ZZZZ skipped
        missing = catalog.unresolved(["MSFT", "ZZZZ"])       # ["ZZZZ"]
    """

    def __init__(self, assets: Iterable[Asset]):
        by_ticker: Dict[str, Asset] = {}
        for asset in assets:
            if asset.ticker in by_ticker:
                raise ValidationError(f"Duplicate ticker in catalog: {asset.ticker}", data=asset.ticker)
            by_ticker[asset.ticker] = asset
        self._assets = MappingProxyType(by_ticker)

    @classmethod
    def from_records(cls, records: Iterable[Union[Asset, Mapping[str, Any]]]) -> "AssetCatalog":
        return cls(r if isinstance(r, Asset) else Asset.from_dict(r) for r in records)

    def __len__(self) -> int:
        return len(self._assets)

    def __iter__(self) -> Iterator[Asset]:
        return iter(self._assets.values())

    def __contains__(self, ticker: object) -> bool:
        return ticker in self._assets

    def __repr__(self) -> str:
        return f"AssetCatalog({list(self._assets)})"

    def get(self, ticker: str) -> Optional[Asset]:
        return self._assets.get(ticker)

    def tickers(self) -> List[str]:
        return list(self._assets)

    def resolve(self, selected: Sequence[str]) -> List[Asset]:
        """
        Return the catalog assets whose tickers are in ``selected``.

        Assets come back in catalog order, each at most once; identifiers
        with no catalog entry are dropped.
        """
        wanted = set(selected)
        return [asset for ticker, asset in self._assets.items() if ticker in wanted]

    def unresolved(self, selected: Sequence[str]) -> List[str]:
        """Selected identifiers with no catalog entry, in selection order without repeats."""
        return [t for t in dict.fromkeys(selected) if t not in self._assets]
