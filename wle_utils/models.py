"""Model fitting for the three activity classifiers, using sklearn's search tools."""

import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
import pandas as pd
from sklearn.base import BaseEstimator
from sklearn.pipeline import Pipeline
from sklearn.model_selection import GridSearchCV, StratifiedKFold
from sklearn.neighbors import KNeighborsClassifier
from sklearn.tree import DecisionTreeClassifier
from sklearn.ensemble import RandomForestClassifier

from .config import AnalysisConfig
from .preprocessing import create_preprocessing_pipeline


@dataclass
class FittedModel:
    """A fitted hyperparameter search, consumed through ``predict`` only."""
    name: str
    search: GridSearchCV
    best_params: Dict[str, Any]
    cv_score: float
    fit_seconds: float

    def predict(self, X: pd.DataFrame) -> np.ndarray:
        return self.search.predict(X)


def _cv(n_splits: int, random_state: int) -> StratifiedKFold:
    return StratifiedKFold(n_splits=n_splits, shuffle=True, random_state=random_state)


def _run_search(name: str, pipeline: Pipeline, grid: Dict[str, List[Any]],
                cv: StratifiedKFold, X: pd.DataFrame, y: pd.Series) -> FittedModel:
    start_time = time.time()
    search = GridSearchCV(pipeline, grid, cv=cv, scoring='accuracy', refit=True)
    search.fit(X, y)
    elapsed_time = time.time() - start_time

    return FittedModel(
        name=name,
        search=search,
        best_params={k.replace('model__', ''): v for k, v in search.best_params_.items()},
        cv_score=float(search.best_score_),
        fit_seconds=round(elapsed_time, 3),
    )


def fit_knn(X: pd.DataFrame, y: pd.Series, neighbors: Sequence[int] = (1, 2, 3),
            cv_folds: int = 5, random_state: int = 48375) -> FittedModel:
    """k-nearest-neighbors on centered and scaled predictors, k searched over ``neighbors``."""
    pipeline = Pipeline([
        ('preprocess', create_preprocessing_pipeline(X, scale=True)),
        ('model', KNeighborsClassifier()),
    ])
    grid = {'model__n_neighbors': list(neighbors)}
    return _run_search('KNN', pipeline, grid, _cv(cv_folds, random_state), X, y)


def fit_decision_tree(X: pd.DataFrame, y: pd.Series, alphas: Sequence[float],
                      cv_folds: int = 25, random_state: int = 48375) -> FittedModel:
    """Decision tree with its cost-complexity parameter chosen by k-fold CV."""
    pipeline = Pipeline([
        ('preprocess', create_preprocessing_pipeline(X)),
        ('model', DecisionTreeClassifier(random_state=random_state)),
    ])
    grid = {'model__ccp_alpha': list(alphas)}
    return _run_search('DecisionTree', pipeline, grid, _cv(cv_folds, random_state), X, y)


def default_max_features_grid(n_features: int, length: int = 3) -> List[int]:
    """Evenly spaced ``max_features`` candidates between 2 and ``n_features``."""
    upper = max(n_features, 2)
    grid = np.unique(np.floor(np.linspace(2, upper, length)).astype(int))
    return [int(v) for v in grid if v <= n_features] or [n_features]


def fit_random_forest(X: pd.DataFrame, y: pd.Series, n_estimators: int = 100,
                      cv_folds: int = 5, random_state: int = 48375) -> FittedModel:
    """Random forest using the default search over ``max_features``."""
    preprocessor = create_preprocessing_pipeline(X)
    n_features = len(preprocessor.fit(X).get_feature_names_out())

    pipeline = Pipeline([
        ('preprocess', create_preprocessing_pipeline(X)),
        ('model', RandomForestClassifier(n_estimators=n_estimators, random_state=random_state)),
    ])
    grid = {'model__max_features': default_max_features_grid(n_features)}
    return _run_search('RandomForest', pipeline, grid, _cv(cv_folds, random_state), X, y)


class ModelComparer(BaseEstimator):
    """Fit the three classifiers independently against the same training data."""

    MODELS = ('KNN', 'DecisionTree', 'RandomForest')

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.config = config
        self.models_ = {}

    def fit_all(self, X: pd.DataFrame, y: pd.Series) -> Dict[str, FittedModel]:
        config = self.config or AnalysisConfig()
        seed = config.random_state
        print(f"Starting training on {X.shape[0]} rows, {X.shape[1]} predictors")

        fitters = {
            'KNN': lambda: fit_knn(X, y, config.knn_neighbors, config.default_cv_folds, seed),
            'DecisionTree': lambda: fit_decision_tree(X, y, config.tree_alphas, config.tree_cv_folds, seed),
            'RandomForest': lambda: fit_random_forest(X, y, config.forest_trees, config.default_cv_folds, seed),
        }

        self.models_ = {}
        for name in self.MODELS:
            fitted = fitters[name]()
            self.models_[name] = fitted
            print(f"{name} completed - CV accuracy: {fitted.cv_score:.3f}, "
                  f"params: {fitted.best_params}, Time: {fitted.fit_seconds:.2f}s")

        return self.models_

    def feature_importance(self, name: str = 'RandomForest') -> Dict[str, float]:
        """Native importances of a fitted tree-based model, keyed by encoded feature."""
        fitted = self.models_.get(name)
        if fitted is None:
            return {}

        pipeline = fitted.search.best_estimator_
        model = pipeline.named_steps['model']
        if not hasattr(model, 'feature_importances_'):
            return {}

        feature_names = pipeline.named_steps['preprocess'].get_feature_names_out()
        return {str(f): float(imp) for f, imp in zip(feature_names, model.feature_importances_)}


# ---------------------------------------------------------------------------
# Features implemented in this module
# - fit_knn: scaled KNN with k searched over a small grid
# - fit_decision_tree: ccp_alpha searched with 25-fold stratified CV
# - fit_random_forest: default three-point max_features search
# - ModelComparer: independent fits, progress output, feature importances
# ---------------------------------------------------------------------------
