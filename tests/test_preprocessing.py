import numpy as np
import pandas as pd
import pytest
from sklearn.exceptions import NotFittedError

from wle_utils import (
    ColumnTypeCleaner,
    MissingValueSelector,
    METADATA_COLUMNS,
    missing_fraction,
    stratified_partition,
)
from wle_utils.preprocessing import select_by_position, create_preprocessing_pipeline


@pytest.fixture
def partitions(sensor_df):
    return stratified_partition(sensor_df, 'classe', random_state=48375)


@pytest.fixture
def cleaned(partitions):
    cleaner = ColumnTypeCleaner().fit(partitions.training)
    return cleaner, [cleaner.transform(p) for p in partitions]


def test_cleaner_coerces_text_columns_after_the_first_three(partitions):
    cleaner = ColumnTypeCleaner().fit(partitions.training)
    names = list(partitions.training.columns[cleaner.char_positions_])

    assert names == ['kurtosis_roll_belt', 'skewness_yaw_belt']
    assert set(cleaner.drop_columns_) == set(METADATA_COLUMNS)


def test_cleaner_types_and_drops_metadata(cleaned):
    _, (training, _, _) = cleaned

    assert not set(METADATA_COLUMNS) & set(training.columns)
    assert isinstance(training['classe'].dtype, pd.CategoricalDtype)
    assert isinstance(training['new_window'].dtype, pd.CategoricalDtype)
    assert pd.api.types.is_numeric_dtype(training['kurtosis_roll_belt'])
    assert training['skewness_yaw_belt'].isna().all()


def test_cleaner_gives_every_partition_the_training_columns(cleaned):
    _, (training, testing, validation) = cleaned

    assert list(testing.columns) == list(training.columns)
    assert list(validation.columns) == list(training.columns)
    assert list(testing['classe'].cat.categories) == ['A', 'B', 'C', 'D', 'E']


def test_cleaner_leaves_input_untouched(partitions):
    before = partitions.testing.copy()
    ColumnTypeCleaner().fit(partitions.training).transform(partitions.testing)
    pd.testing.assert_frame_equal(partitions.testing, before)


def test_cleaner_rejects_a_different_column_count(partitions):
    cleaner = ColumnTypeCleaner().fit(partitions.training)
    with pytest.raises(ValueError, match='columns'):
        cleaner.transform(partitions.testing.drop(columns=['yaw_belt']))


def test_cleaner_must_be_fitted(partitions):
    with pytest.raises(NotFittedError):
        ColumnTypeCleaner().transform(partitions.training)


def test_selector_drops_mostly_missing_columns(cleaned):
    _, (training, _, _) = cleaned
    selector = MissingValueSelector(threshold=0.9).fit(training)

    assert set(selector.drop_columns_) == {'kurtosis_roll_belt', 'max_roll_belt', 'skewness_yaw_belt'}
    assert 'magnet_arm_x' in selector.selected_columns_
    assert list(selector.transform(training).columns)[-1] == 'classe'


def test_selector_reuses_training_decisions(cleaned):
    _, (training, testing, _) = cleaned
    testing = testing.copy()
    # Missingness that would change the decision if it were recomputed here
    testing['magnet_arm_x'] = np.nan
    testing['max_roll_belt'] = 1.0

    selector = MissingValueSelector().fit(training)
    refit = MissingValueSelector().fit(testing)
    assert refit.drop_columns_ != selector.drop_columns_

    out = selector.transform(testing)
    assert 'magnet_arm_x' in out.columns
    assert 'max_roll_belt' not in out.columns


def test_selector_matches_manual_application(cleaned):
    _, (training, testing, validation) = cleaned
    useful = (0, 1, 3, 40)
    selector = MissingValueSelector(useful_columns=useful).fit(training)

    for part in (testing, validation):
        manual = part.drop(columns=selector.drop_columns_)
        predictors = [c for c in manual.columns if c != 'classe']
        manual = manual[[predictors[i] for i in useful if i < len(predictors)] + ['classe']]
        pd.testing.assert_frame_equal(selector.transform(part), manual)


def test_select_by_position_ignores_out_of_range():
    columns = ['a', 'b', 'c']
    assert select_by_position(columns, None) == columns
    assert select_by_position(columns, (2, 0, 7, -1)) == ['c', 'a']


def test_missing_fraction():
    df = pd.DataFrame({'a': [1, np.nan, np.nan, np.nan], 'b': [1, 2, 3, 4]})
    assert missing_fraction(df).to_dict() == {'a': 0.75, 'b': 0.0}


def test_preprocessing_pipeline_scales_and_encodes(cleaned):
    _, (training, _, _) = cleaned
    X = MissingValueSelector().fit(training).transform(training).drop(columns=['classe'])

    transformed = create_preprocessing_pipeline(X, scale=True).fit_transform(X)
    n_numeric = X.select_dtypes(include=['number']).shape[1]

    assert not np.isnan(transformed).any()
    np.testing.assert_allclose(transformed[:, :n_numeric].mean(axis=0), 0, atol=1e-8)
