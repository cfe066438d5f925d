"""JSON conversion helpers for analysis results."""

import dataclasses
import math
from datetime import date, datetime
from typing import Any

import numpy as np
import pandas as pd


def make_json_safe(obj: Any) -> Any:
    """
    Recursively convert ``obj`` into plain JSON-compatible Python values.

    Handles dataclasses, pandas Series/DataFrames, numpy scalars and arrays,
    dates and timestamps. NaN and infinite floats become ``None``.
    """
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: make_json_safe(getattr(obj, f.name)) for f in dataclasses.fields(obj)}

    if isinstance(obj, pd.DataFrame):
        return [make_json_safe(row) for row in obj.to_dict("records")]

    if isinstance(obj, pd.Series):
        return {str(make_json_safe(k)): make_json_safe(v) for k, v in obj.items()}

    if isinstance(obj, (pd.Timestamp, datetime)):
        return obj.isoformat()

    if isinstance(obj, date):
        return obj.isoformat()

    if isinstance(obj, np.ndarray):
        return [make_json_safe(v) for v in obj.tolist()]

    if isinstance(obj, (np.integer, np.floating, np.bool_)):
        obj = obj.item()

    if isinstance(obj, float):
        return obj if math.isfinite(obj) else None

    if isinstance(obj, dict):
        return {str(k): make_json_safe(v) for k, v in obj.items()}

    if isinstance(obj, (list, tuple)):
        return [make_json_safe(v) for v in obj]

    return obj
