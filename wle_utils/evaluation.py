"""Confusion-matrix evaluation and the test-then-validate selection protocol.

The testing partition is used to choose between fitted models, which makes
its accuracy an optimistic estimate for the chosen one. The chosen model is
therefore scored once more on the untouched validation partition and that
figure is reported as the final estimate.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple

import numpy as np
import pandas as pd
from scipy import stats
from sklearn.metrics import confusion_matrix, accuracy_score, cohen_kappa_score

from .config import ClassificationMetrics


@dataclass
class EvaluationResult:
    model_name: str
    partition_name: str
    confusion: pd.DataFrame
    accuracy: float
    accuracy_ci: Tuple[float, float]
    kappa: float
    sensitivity: pd.Series
    specificity: pd.Series
    index: pd.Index

    def metrics(self) -> ClassificationMetrics:
        return {
            'Accuracy': self.accuracy,
            'AccuracyLower': self.accuracy_ci[0],
            'AccuracyUpper': self.accuracy_ci[1],
            'Kappa': self.kappa,
        }


def accuracy_interval(n_correct: int, n_total: int, level: float = 0.95) -> Tuple[float, float]:
    """Exact (Clopper-Pearson) binomial confidence interval for an accuracy."""
    if n_total == 0:
        return 0.0, 1.0
    alpha = 1 - level
    lower = stats.beta.ppf(alpha / 2, n_correct, n_total - n_correct + 1) if n_correct > 0 else 0.0
    upper = stats.beta.ppf(1 - alpha / 2, n_correct + 1, n_total - n_correct) if n_correct < n_total else 1.0
    return float(lower), float(upper)


def _class_labels(y_true: pd.Series, y_pred: np.ndarray) -> List:
    if isinstance(y_true.dtype, pd.CategoricalDtype):
        return list(y_true.cat.categories)
    return sorted(set(y_true.tolist()) | set(np.asarray(y_pred).tolist()))


def evaluate_model(model, partition: pd.DataFrame, label_column: str,
                   partition_name: str) -> EvaluationResult:
    """Predict ``partition`` with ``model`` and summarise against the true labels."""
    X = partition.drop(columns=[label_column])
    y_true = partition[label_column]
    y_pred = model.predict(X)

    labels = _class_labels(y_true, y_pred)
    matrix = confusion_matrix(np.asarray(y_true), y_pred, labels=labels)
    confusion = pd.DataFrame(
        matrix,
        index=pd.Index(labels, name='Actual'),
        columns=pd.Index(labels, name='Predicted'),
    )

    n_correct = int(np.trace(matrix))
    n_total = int(matrix.sum())
    accuracy = float(accuracy_score(np.asarray(y_true), y_pred))

    actual = matrix.sum(axis=1)
    predicted = matrix.sum(axis=0)
    true_pos = np.diag(matrix)
    true_neg = n_total - actual - predicted + true_pos
    with np.errstate(divide='ignore', invalid='ignore'):
        sensitivity = np.where(actual > 0, true_pos / actual, np.nan)
        negatives = n_total - actual
        specificity = np.where(negatives > 0, true_neg / negatives, np.nan)

    return EvaluationResult(
        model_name=getattr(model, 'name', type(model).__name__),
        partition_name=partition_name,
        confusion=confusion,
        accuracy=accuracy,
        accuracy_ci=accuracy_interval(n_correct, n_total),
        kappa=float(cohen_kappa_score(np.asarray(y_true), y_pred, labels=labels)),
        sensitivity=pd.Series(sensitivity, index=labels, name='Sensitivity'),
        specificity=pd.Series(specificity, index=labels, name='Specificity'),
        index=partition.index,
    )


def select_best_model(results: Dict[str, EvaluationResult]) -> str:
    """Name of the model with the highest accuracy; ties keep the earlier one."""
    if not results:
        raise ValueError("No models to compare")

    best_name = None
    for name, result in results.items():
        if best_name is None or result.accuracy > results[best_name].accuracy:
            best_name = name
    return best_name


def assert_disjoint(first: EvaluationResult, second: EvaluationResult) -> None:
    """Raise if two evaluations were scored on overlapping records."""
    overlap = first.index.intersection(second.index)
    if len(overlap):
        raise ValueError(
            f"{first.partition_name} and {second.partition_name} share {len(overlap)} records"
        )


def format_report(result: EvaluationResult) -> str:
    lower, upper = result.accuracy_ci
    per_class = pd.concat([result.sensitivity, result.specificity], axis=1).round(4)
    return "\n".join([
        f"=== {result.model_name} on {result.partition_name} ===",
        result.confusion.to_string(),
        "",
        f"Accuracy : {result.accuracy:.4f}",
        f"95% CI   : ({lower:.4f}, {upper:.4f})",
        f"Kappa    : {result.kappa:.4f}",
        "",
        per_class.to_string(),
    ])
