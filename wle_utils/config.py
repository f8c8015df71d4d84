"""Configuration and typed result structures for the activity report."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Any, TypedDict

import numpy as np


METADATA_COLUMNS = (
    'X',
    'user_name',
    'raw_timestamp_part_1',
    'raw_timestamp_part_2',
    'cvtd_timestamp',
    'num_window',
)

# Positions into the columns that survive the missing-value filter, picked
# from the box plots: orientation (roll/pitch/yaw), total acceleration and
# magnetometer readings for each of the four sensors.
USEFUL_COLUMNS = (
    1, 2, 3, 4, 11, 12, 13,
    14, 15, 16, 17, 24, 25, 26,
    27, 28, 29, 30, 37, 38, 39,
    40, 41, 42, 43, 50, 51, 52,
)


def _tree_alphas() -> Tuple[float, ...]:
    return tuple(float(a) for a in np.linspace(0.0, 0.05, 51))


@dataclass
class AnalysisConfig:
    """Configuration object for the partition / preprocess / fit / evaluate run."""
    data_path: str = 'pml-training.csv'
    label_column: str = 'classe'
    flag_column: str = 'new_window'
    metadata_columns: Tuple[str, ...] = METADATA_COLUMNS
    proportions: Tuple[float, float, float] = (0.6, 0.2, 0.2)
    random_state: int = 48375
    missing_threshold: float = 0.9
    useful_columns: Optional[Tuple[int, ...]] = USEFUL_COLUMNS
    knn_neighbors: Tuple[int, ...] = (1, 2, 3)
    tree_cv_folds: int = 25
    tree_alphas: Tuple[float, ...] = field(default_factory=_tree_alphas)
    default_cv_folds: int = 5
    forest_trees: int = 100
    output_dir: Optional[str] = 'report'
    save_model: bool = False


class ClassificationMetrics(TypedDict, total=False):
    """Summary numbers derived from one confusion matrix."""
    Accuracy: float
    AccuracyLower: float
    AccuracyUpper: float
    Kappa: float
    Training_Time: float


class EDAResults(TypedDict):
    """Missingness overview of one partition."""
    rows: int
    cols: int
    dtypes: Dict[str, str]
    missing_percentage: Dict[str, float]
    data_completeness: float


class AnalysisResults(TypedDict):
    """Everything the narrative run produces."""
    partition_sizes: Dict[str, int]
    dropped_columns: List[str]
    selected_columns: List[str]
    test_results: Dict[str, Any]
    best_model_name: str
    validation_result: Any
    charts: Dict[str, str]


# ---------------------------------------------------------------------------
# Features implemented in this module
# - AnalysisConfig dataclass: label, seed, split proportions, search grids
# - Fixed metadata column names and the curated useful-column positions
# - Typed dictionaries for metrics, missingness overview and run results
# ---------------------------------------------------------------------------
