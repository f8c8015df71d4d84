"""Exploratory helpers using pandas built-ins.

Feeds the missing-value chart and the per-class predictor plots; only the
training partition is explored, so nothing seen here leaks into testing.
"""

import pandas as pd
from typing import Dict, Any

from .config import EDAResults
from .preprocessing import missing_fraction
from .utils import safe_json_convert


def summarize_missingness(df: pd.DataFrame) -> EDAResults:
    """Shape, dtypes and per-column missing percentage of one partition."""
    fraction = missing_fraction(df)
    total_cells = df.shape[0] * df.shape[1]

    stats: Dict[str, Any] = {
        "rows": df.shape[0],
        "cols": df.shape[1],
        "dtypes": df.dtypes.astype(str).to_dict(),
        "missing_percentage": (fraction * 100).round(2).to_dict(),
        "data_completeness": round((1 - df.isnull().sum().sum() / total_cells) * 100, 2) if total_cells else 100.0,
    }

    for key, value in stats.items():
        stats[key] = safe_json_convert(value)

    return stats  # type: ignore[return-value]


def predictor_summary(df: pd.DataFrame, label_column: str) -> pd.DataFrame:
    """Per-class mean of every numeric predictor (classes as columns)."""
    numeric_cols = df.select_dtypes(include=['number']).columns
    if len(numeric_cols) == 0:
        return pd.DataFrame()
    return df.groupby(label_column, observed=True)[list(numeric_cols)].mean().T


def most_separating_predictors(df: pd.DataFrame, label_column: str, top: int = 8) -> list:
    """Numeric predictors whose class means spread furthest, in standard deviations.

    A quick ranking used to choose which predictors to plot first.
    """
    summary = predictor_summary(df, label_column)
    if summary.empty:
        return []
    spread = (summary.max(axis=1) - summary.min(axis=1)) / df[summary.index].std().replace(0, 1)
    return spread.sort_values(ascending=False).head(top).index.tolist()


# ---------------------------------------------------------------------------
# Features implemented in this module
# - summarize_missingness: shape, dtypes, missing percentage, completeness
# - predictor_summary: per-class means of numeric predictors
# - most_separating_predictors: ranking used to pick exploratory plots
# ---------------------------------------------------------------------------
