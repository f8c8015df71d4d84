"""
Utilities for the weight-lifting sensor activity report.
Partitioning, fitted preprocessing, model search, evaluation and charts.
"""

from .config import AnalysisConfig, ClassificationMetrics, METADATA_COLUMNS, USEFUL_COLUMNS
from .partition import Partitions, stratified_partition
from .preprocessing import ColumnTypeCleaner, MissingValueSelector, missing_fraction, create_preprocessing_pipeline
from .eda import summarize_missingness, predictor_summary, most_separating_predictors
from .models import FittedModel, ModelComparer, fit_knn, fit_decision_tree, fit_random_forest
from .evaluation import EvaluationResult, evaluate_model, select_best_model, assert_disjoint, format_report
from .utils import load_dataset, validate_dataset, safe_json_convert

__all__ = [
    'AnalysisConfig',
    'ClassificationMetrics',
    'METADATA_COLUMNS',
    'USEFUL_COLUMNS',
    'Partitions',
    'stratified_partition',
    'ColumnTypeCleaner',
    'MissingValueSelector',
    'missing_fraction',
    'create_preprocessing_pipeline',
    'summarize_missingness',
    'predictor_summary',
    'most_separating_predictors',
    'FittedModel',
    'ModelComparer',
    'fit_knn',
    'fit_decision_tree',
    'fit_random_forest',
    'EvaluationResult',
    'evaluate_model',
    'select_best_model',
    'assert_disjoint',
    'format_report',
    'load_dataset',
    'validate_dataset',
    'safe_json_convert'
]
