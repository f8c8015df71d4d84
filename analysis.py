"""
Weight-lifting activity classification report.

Runs the analysis top to bottom: partition the sensor file, fit the column
decisions on training data, explore the predictors, fit KNN / decision tree /
random forest, choose on the testing partition and report the chosen model
on the validation partition.

Usage: python analysis.py [path/to/pml-training.csv]
"""

import os
import sys
from typing import Optional

import pandas as pd
from joblib import dump

from wle_utils import (
    AnalysisConfig,
    ColumnTypeCleaner,
    MissingValueSelector,
    ModelComparer,
    load_dataset,
    validate_dataset,
    stratified_partition,
    summarize_missingness,
    most_separating_predictors,
    evaluate_model,
    select_best_model,
    assert_disjoint,
    format_report,
)
from wle_utils.config import AnalysisResults
from wle_utils import charts


def run_analysis(config: AnalysisConfig, df: Optional[pd.DataFrame] = None) -> AnalysisResults:
    """Run the full report and return its key figures."""
    print("=== ANALYSIS STARTED ===")
    label = config.label_column

    if df is None:
        df = load_dataset(config.data_path)

    validation = validate_dataset(df, label)
    if not validation['valid']:
        raise ValueError("Dataset validation failed: " + "; ".join(validation['errors']))

    partitions = stratified_partition(df, label, config.proportions, config.random_state)

    # Stage 1: fitted on training, replayed on testing and validation
    cleaner = ColumnTypeCleaner(
        label_column=label,
        flag_column=config.flag_column,
        metadata_columns=config.metadata_columns,
    ).fit(partitions.training)
    training = cleaner.transform(partitions.training)
    testing = cleaner.transform(partitions.testing)
    validating = cleaner.transform(partitions.validation)

    eda_stats = summarize_missingness(training)

    # Stage 2: same rule, training-only missingness
    selector = MissingValueSelector(
        label_column=label,
        threshold=config.missing_threshold,
        useful_columns=config.useful_columns,
    ).fit(training)
    training = selector.transform(training)
    testing = selector.transform(testing)
    validating = selector.transform(validating)
    print(f"Dropped columns: {selector.drop_columns_}")
    print(f"Selected predictors: {selector.selected_columns_}")

    comparer = ModelComparer(config)
    models = comparer.fit_all(training.drop(columns=[label]), training[label])

    test_results = {}
    for name, model in models.items():
        test_results[name] = evaluate_model(model, testing, label, 'testing')
        print(format_report(test_results[name]))

    best_model_name = select_best_model(test_results)
    print(f"Best model on testing: {best_model_name} "
          f"(accuracy {test_results[best_model_name].accuracy:.4f})")

    # Testing accuracy is biased by the selection above
    validation_result = evaluate_model(models[best_model_name], validating, label, 'validation')
    assert_disjoint(test_results[best_model_name], validation_result)
    print(format_report(validation_result))

    chart_html = {}
    if config.output_dir:
        chart_html = {
            'Missing values (training)': charts.create_missing_values_chart(eda_stats, config.missing_threshold),
            'Predictors by class': charts.create_predictor_boxplots(
                training, label, most_separating_predictors(training, label)
            ),
            'Model comparison': charts.create_model_performance_chart(test_results),
            'Confusion matrix (validation)': charts.create_confusion_matrix_chart(validation_result),
            'Random forest importance': charts.create_feature_importance_chart(
                comparer.feature_importance('RandomForest'), 'RandomForest'
            ),
        }
        charts.write_report_html(chart_html, config.output_dir)

        if config.save_model:
            model_path = os.path.join(config.output_dir, 'best_model.joblib')
            dump({
                'model': models[best_model_name].search,
                'cleaner': cleaner,
                'selector': selector,
            }, model_path)
            print(f"Best model saved to: {model_path}")

    print("=== ANALYSIS COMPLETED ===")

    return {
        'partition_sizes': partitions.sizes(),
        'dropped_columns': list(selector.drop_columns_),
        'selected_columns': list(selector.selected_columns_),
        'test_results': test_results,
        'best_model_name': best_model_name,
        'validation_result': validation_result,
        'charts': chart_html,
    }


def main() -> None:
    config = AnalysisConfig()
    if len(sys.argv) > 1:
        config.data_path = sys.argv[1]
    run_analysis(config)


if __name__ == "__main__":
    main()
