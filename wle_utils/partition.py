"""Stratified training / testing / validation partitioning."""

from typing import NamedTuple, Tuple, Dict

import numpy as np
import pandas as pd
from sklearn.model_selection import train_test_split


class Partitions(NamedTuple):
    training: pd.DataFrame
    testing: pd.DataFrame
    validation: pd.DataFrame

    def sizes(self) -> Dict[str, int]:
        return {name: len(part) for name, part in self._asdict().items()}


def stratified_partition(df: pd.DataFrame, label_column: str,
                         proportions: Tuple[float, float, float] = (0.6, 0.2, 0.2),
                         random_state: int = 48375) -> Partitions:
    """Split ``df`` into disjoint training, testing and validation partitions.

    Each partition keeps the label-class balance of the full dataset. The
    testing and validation shares are carved out of the non-training
    remainder in a second stratified split, so the three partitions cover
    every record exactly once.
    """
    if len(proportions) != 3 or any(p <= 0 for p in proportions):
        raise ValueError(f"Expected three positive proportions, got {proportions}")
    if not np.isclose(sum(proportions), 1.0):
        raise ValueError(f"Proportions must sum to 1, got {sum(proportions):.3f}")

    train_share, test_share, validation_share = proportions

    training, remainder = train_test_split(
        df, train_size=train_share, stratify=df[label_column], random_state=random_state
    )
    testing, validation = train_test_split(
        remainder,
        test_size=validation_share / (test_share + validation_share),
        stratify=remainder[label_column],
        random_state=random_state,
    )

    partitions = Partitions(training, testing, validation)
    print(f"Partition sizes: {partitions.sizes()}")
    return partitions
