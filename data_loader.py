#!/usr/bin/env python
# coding: utf-8

# File: data_loader.py

from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, List, Union

import pandas as pd
import yaml
from pandas.errors import EmptyDataError, ParserError

from core.data_objects import AssetCatalog
from core.exceptions import CatalogError, ValidationError

# Add logging decorator imports
from utils.logging import (
    log_performance,
    log_error_handling,
    portfolio_logger,
)

PRICE_HISTORY_COLUMNS = ["date", "price", "sentiment", "volume"]


# ── internals ──────────────────────────────────────────────────────────
def _read_price_history_csv(path: Path) -> List[Dict[str, Any]]:
    """Read a ``date,price,sentiment,volume`` CSV into price point records."""
    try:
        df = pd.read_csv(path)
    except FileNotFoundError as e:
        raise CatalogError(f"Price history file not found: {path}", source=str(path)) from e
    except (EmptyDataError, ParserError, ValueError) as e:
        raise CatalogError(f"Unreadable price history file {path.name}: {e}", source=str(path)) from e

    df.columns = [c.strip().lower() for c in df.columns]
    missing = set(PRICE_HISTORY_COLUMNS) - set(df.columns)
    if missing:
        raise CatalogError(
            f"{path.name} is missing columns {sorted(missing)}", source=str(path)
        )
    df["date"] = pd.to_datetime(df["date"], errors="coerce")
    df = df.sort_values("date").reset_index(drop=True)
    return df[PRICE_HISTORY_COLUMNS].to_dict("records")


def _expand_record(record: Dict[str, Any], base_dir: Path) -> Dict[str, Any]:
    """Inline an external ``price_history_file`` into the record."""
    record = dict(record)
    history_file = record.pop("price_history_file", None)
    if history_file is not None:
        if "price_history" in record:
            raise CatalogError(
                f"{record.get('ticker')}: give either price_history or price_history_file, not both",
                source=str(base_dir),
            )
        record["price_history"] = _read_price_history_csv(base_dir / history_file)
    return record


# ── public API ────────────────────────────────────────────────────────
@log_error_handling("high")
@log_performance(2.0)
def load_asset_catalog(path: Union[str, Path]) -> AssetCatalog:
    """
    Load the asset catalog from YAML.

    Schema
    ------
    assets:
      - ticker: AAPL
        name: Apple Inc.
        sector: Technology
        price: 185.92
        market_cap: 2900000000000
        metrics: {parametric_var_95: 2.1, ..., max_drawdown: -18.4}
        price_history:                       # inline ...
          - {date: 2024-01-02, price: 185.6, sentiment: 0.2, volume: 51000}
        # price_history_file: prices/AAPL.csv   ... or a CSV next to the YAML

    Raises
    ------
    CatalogError
        Missing file, malformed YAML or an invalid asset entry.
    """
    path = Path(path).expanduser()
    if not path.is_file():
        raise CatalogError(f"Catalog file not found: {path}", source=str(path))

    try:
        cfg = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise CatalogError(f"Invalid YAML in catalog {path}: {e}", source=str(path)) from e

    records = cfg.get("assets") if isinstance(cfg, dict) else None
    if not isinstance(records, list):
        raise CatalogError(f"{path} must contain an 'assets' list", source=str(path))

    try:
        catalog = AssetCatalog.from_records(
            _expand_record(r, path.parent) for r in records
        )
    except ValidationError as e:
        raise CatalogError(f"Invalid catalog entry in {path.name}: {e}", source=str(path)) from e
    except (AttributeError, TypeError, ValueError) as e:
        raise CatalogError(f"Malformed catalog entry in {path.name}: {e}", source=str(path)) from e

    portfolio_logger.info(f"📁 Loaded {len(catalog)} assets from {path.name}")
    return catalog
