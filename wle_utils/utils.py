"""Utility helpers for loading the sensor file, validation, and JSON safety."""

import numpy as np
import pandas as pd
from typing import Union, Dict, Any, Iterable


JSONSafe = Union[int, float, list, Dict[str, Any], str, None]

# Spreadsheet export artefacts that should read as missing
NA_VALUES = ['', 'NA']


def load_dataset(path: str) -> pd.DataFrame:
    """Load the delimited sensor file, keeping its column order.

    The exported file carries an unnamed leading row-number column; it is
    renamed to ``X`` so it can be dropped with the other metadata columns.
    Values such as ``#DIV/0!`` are left as text and coerced later.
    """
    df = pd.read_csv(path, na_values=NA_VALUES, keep_default_na=False, low_memory=False)
    first = df.columns[0]
    if str(first).startswith('Unnamed') or first == '':
        df = df.rename(columns={first: 'X'})
    print(f"Data loaded: {df.shape}")
    return df


def safe_json_convert(obj: Any) -> JSONSafe:
    """Convert numpy/pandas objects to JSON-safe values.

    Rules:
    - numpy scalars/arrays → native ints/floats/lists
    - NaN/None → None
    - mappings/iterables → recursively converted
    - anything else → str(obj)
    """
    if isinstance(obj, (bool, np.bool_)):
        return bool(obj)
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, (float, np.floating)):
        return None if np.isnan(obj) else float(obj)
    if isinstance(obj, np.ndarray):
        return [safe_json_convert(x) for x in obj.tolist()]
    if obj is None:
        return None
    if isinstance(obj, (int, str)):
        return obj

    if isinstance(obj, dict):
        return {str(k): safe_json_convert(v) for k, v in obj.items()}
    if isinstance(obj, (pd.Series, pd.Index)):
        return [safe_json_convert(x) for x in obj.tolist()]

    if isinstance(obj, Iterable):
        return [safe_json_convert(x) for x in obj]

    return str(obj)


def validate_dataset(df: pd.DataFrame, label_column: str) -> Dict[str, Any]:
    """Validate the loaded dataset before partitioning."""
    errors = []

    if label_column not in df.columns:
        errors.append(f"Label column '{label_column}' not found in dataset")
    elif df[label_column].isnull().all():
        errors.append(f"Label column '{label_column}' contains no valid values")

    # Each of the three partitions needs a few records per class
    if len(df) < 10:
        errors.append("Dataset too small. Need at least 10 rows for partitioning")

    if label_column in df.columns:
        n_classes = df[label_column].nunique()
        if n_classes < 2:
            errors.append(f"Classification requires at least 2 label values, found {n_classes}")

    return {
        'valid': len(errors) == 0,
        'errors': errors
    }


# ---------------------------------------------------------------------------
# Features implemented in this module
# - load_dataset: read the CSV, normalise the unnamed row-number column
# - safe_json_convert: normalise numpy/pandas objects to JSON-safe values
# - validate_dataset: guardrails on the label column and dataset size
# ---------------------------------------------------------------------------
