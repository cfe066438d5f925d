#!/usr/bin/env python
# coding: utf-8

# settings.py
import os

from dotenv import load_dotenv

load_dotenv()

PORTFOLIO_DEFAULTS = {
    "risk_free_rate": float(os.getenv("PORTFOLIO_RISK_FREE_RATE", "2.0")),  # percentage points, same units as returns
    "rounding_decimals": 2,
    "history_alignment": os.getenv("PORTFOLIO_HISTORY_ALIGNMENT", "strict"),  # "strict" or "truncate"
    "catalog_file": os.getenv("PORTFOLIO_CATALOG_FILE", "asset_catalog.yaml"),
    "portfolio_file": "portfolio.yaml",
}

LOGGING_DEFAULTS = {
    "level": os.getenv("LOG_LEVEL", "INFO").upper(),
    "log_dir": os.getenv("LOG_DIR", "error_logs"),
    "write_json_logs": os.getenv("LOG_JSON_FILES", "").lower() in ("1", "true", "yes"),
}
