"""Preprocessing for the sensor partitions.

Two fitted transforms carry every column decision from the training
partition to the testing and validation partitions:

- ``ColumnTypeCleaner`` coerces mis-typed text columns to numbers, marks
  the label and window flag as categorical and drops metadata columns.
- ``MissingValueSelector`` drops mostly-missing columns and keeps the
  curated subset of predictors.

Both are fitted once on training data. Their ``transform`` never
re-derives a decision from the frame it is given.
"""

import pandas as pd
from typing import List, Optional, Sequence
from sklearn.base import BaseEstimator, TransformerMixin
from sklearn.compose import ColumnTransformer
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import StandardScaler, OneHotEncoder
from sklearn.impute import SimpleImputer
from sklearn.utils.validation import check_is_fitted

from .config import METADATA_COLUMNS


def missing_fraction(df: pd.DataFrame) -> pd.Series:
    """Per-column share of missing values."""
    return df.isna().mean()


def _is_text(dtype) -> bool:
    return pd.api.types.is_object_dtype(dtype) or pd.api.types.is_string_dtype(dtype)


class ColumnTypeCleaner(BaseEstimator, TransformerMixin):
    """Stage 1: type coercion and metadata removal.

    Text columns are located by position on the training frame. The first
    ``n_text_kept`` of them (user name, timestamp string, window flag) stay
    as they are; every later one holds numbers polluted with spreadsheet
    errors and is coerced, malformed entries becoming NaN.
    """

    def __init__(self, label_column: str = 'classe', flag_column: str = 'new_window',
                 metadata_columns: Sequence[str] = METADATA_COLUMNS, n_text_kept: int = 3):
        self.label_column = label_column
        self.flag_column = flag_column
        self.metadata_columns = metadata_columns
        self.n_text_kept = n_text_kept

    def fit(self, X: pd.DataFrame, y=None) -> 'ColumnTypeCleaner':
        text_positions = [
            i for i, (col, dtype) in enumerate(X.dtypes.items())
            if _is_text(dtype) and col != self.label_column
        ]
        self.n_columns_ = X.shape[1]
        self.char_positions_ = text_positions[self.n_text_kept:]
        self.drop_columns_ = [c for c in self.metadata_columns if c in X.columns]
        self.label_categories_ = sorted(X[self.label_column].dropna().unique().tolist())
        self.flag_categories_ = (
            sorted(X[self.flag_column].dropna().astype(str).unique().tolist())
            if self.flag_column in X.columns else None
        )
        print(f"Coercing {len(self.char_positions_)} text columns; dropping metadata {self.drop_columns_}")
        return self

    def transform(self, X: pd.DataFrame) -> pd.DataFrame:
        check_is_fitted(self, 'char_positions_')
        if X.shape[1] != self.n_columns_:
            raise ValueError(
                f"Expected {self.n_columns_} columns as in the training partition, got {X.shape[1]}"
            )

        out = X.copy()
        coerce_cols = out.columns[self.char_positions_]
        if len(coerce_cols):
            out[coerce_cols] = out[coerce_cols].apply(pd.to_numeric, errors='coerce')

        if self.label_column in out.columns:
            out[self.label_column] = out[self.label_column].astype(
                pd.CategoricalDtype(self.label_categories_)
            )
        if self.flag_categories_ is not None:
            out[self.flag_column] = out[self.flag_column].astype(str).astype(
                pd.CategoricalDtype(self.flag_categories_)
            )

        return out.drop(columns=self.drop_columns_)


class MissingValueSelector(BaseEstimator, TransformerMixin):
    """Stage 2: drop mostly-missing columns, then keep the curated subset.

    ``useful_columns`` indexes the predictors left after the missing-value
    filter (label excluded); positions past the end are ignored. ``None``
    keeps every remaining predictor. The label is always retained.
    """

    def __init__(self, label_column: str = 'classe', threshold: float = 0.9,
                 useful_columns: Optional[Sequence[int]] = None):
        self.label_column = label_column
        self.threshold = threshold
        self.useful_columns = useful_columns

    def fit(self, X: pd.DataFrame, y=None) -> 'MissingValueSelector':
        features = X.drop(columns=[self.label_column], errors='ignore')
        fraction = missing_fraction(features)
        self.drop_columns_ = fraction[fraction > self.threshold].index.tolist()

        remaining = [c for c in features.columns if c not in set(self.drop_columns_)]
        self.selected_columns_ = select_by_position(remaining, self.useful_columns)
        print(f"Dropped {len(self.drop_columns_)} columns over {self.threshold:.0%} missing; "
              f"keeping {len(self.selected_columns_)} predictors")
        return self

    def transform(self, X: pd.DataFrame) -> pd.DataFrame:
        check_is_fitted(self, 'selected_columns_')
        columns = list(self.selected_columns_)
        if self.label_column in X.columns:
            columns.append(self.label_column)
        return X[columns].copy()


def select_by_position(columns: List[str], positions: Optional[Sequence[int]]) -> List[str]:
    """Pick ``columns`` at ``positions``, skipping positions out of range."""
    if positions is None:
        return list(columns)
    return [columns[i] for i in positions if 0 <= i < len(columns)]


def create_preprocessing_pipeline(X: pd.DataFrame, scale: bool = False) -> ColumnTransformer:
    """Create the model-side imputation/encoding step for the selected predictors."""
    numeric_features = X.select_dtypes(include=['number']).columns.tolist()
    categorical_features = X.select_dtypes(include=['category', 'object']).columns.tolist()

    transformers = []

    if numeric_features:
        numeric_steps = [('imputer', SimpleImputer(strategy='median'))]
        if scale:
            numeric_steps.append(('scaler', StandardScaler()))
        transformers.append(('num', Pipeline(steps=numeric_steps), numeric_features))

    if categorical_features:
        categorical_transformer = Pipeline(steps=[
            ('imputer', SimpleImputer(strategy='most_frequent')),
            ('encoder', OneHotEncoder(sparse_output=False, handle_unknown='ignore'))
        ])
        transformers.append(('cat', categorical_transformer, categorical_features))

    if not transformers:
        raise ValueError("No valid columns found for preprocessing")

    return ColumnTransformer(transformers=transformers, remainder='drop')


# ---------------------------------------------------------------------------
# Features implemented in this module
# - ColumnTypeCleaner: positional text coercion, categorical label/flag,
#   metadata drop, all fitted on the training partition
# - MissingValueSelector: >threshold missing filter plus curated positions
# - ColumnTransformer with imputers, optional scaler, one-hot encoder
# ---------------------------------------------------------------------------
