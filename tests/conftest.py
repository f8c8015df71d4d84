import numpy as np
import pandas as pd
import pytest

from wle_utils import AnalysisConfig

CLASS_COUNTS = {'A': 80, 'B': 60, 'C': 60, 'D': 50, 'E': 50}


def make_sensor_frame(seed: int = 0) -> pd.DataFrame:
    """Small frame laid out like the weight-lifting export: metadata, sensors, label."""
    rng = np.random.default_rng(seed)
    labels = np.concatenate([[k] * n for k, n in CLASS_COUNTS.items()])
    rng.shuffle(labels)
    n = len(labels)
    offset = pd.Series(labels).map({'A': 0.0, 'B': 1.5, 'C': 3.0, 'D': 4.5, 'E': 6.0}).to_numpy()

    kurtosis = np.full(n, np.nan, dtype=object)
    sparse_idx = rng.choice(n, size=15, replace=False)
    kurtosis[sparse_idx[:5]] = '#DIV/0!'
    kurtosis[sparse_idx[5:]] = [f"{v:.4f}" for v in rng.normal(size=10)]

    max_roll = np.full(n, np.nan)
    max_roll[rng.choice(n, size=12, replace=False)] = rng.normal(size=12)

    skewness = np.full(n, np.nan, dtype=object)
    skewness[rng.choice(n, size=6, replace=False)] = '#DIV/0!'

    magnet = rng.normal(size=n) + offset
    magnet[rng.choice(n, size=10, replace=False)] = np.nan

    return pd.DataFrame({
        'X': np.arange(1, n + 1),
        'user_name': rng.choice(['adelmo', 'carlitos', 'pedro'], size=n),
        'raw_timestamp_part_1': rng.integers(1_322_000_000, 1_323_000_000, size=n),
        'raw_timestamp_part_2': rng.integers(0, 1_000_000, size=n),
        'cvtd_timestamp': rng.choice(['05/12/2011 11:23', '28/11/2011 14:13'], size=n),
        'new_window': np.where(rng.random(n) < 0.05, 'yes', 'no'),
        'num_window': rng.integers(1, 800, size=n),
        'roll_belt': rng.normal(size=n) + offset,
        'pitch_belt': rng.normal(size=n) - offset,
        'yaw_belt': rng.normal(size=n),
        'kurtosis_roll_belt': kurtosis,
        'max_roll_belt': max_roll,
        'skewness_yaw_belt': skewness,
        'magnet_arm_x': magnet,
        'classe': labels,
    })


@pytest.fixture
def sensor_df():
    return make_sensor_frame()


@pytest.fixture
def small_config():
    return AnalysisConfig(
        useful_columns=None,
        tree_cv_folds=5,
        tree_alphas=(0.0, 0.01, 0.05),
        forest_trees=20,
        output_dir=None,
    )
