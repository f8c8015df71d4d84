import numpy as np
import pandas as pd

from wle_utils import load_dataset, validate_dataset, safe_json_convert, summarize_missingness
from wle_utils.eda import predictor_summary, most_separating_predictors


def test_load_dataset_names_row_number_column_and_keeps_text(tmp_path):
    path = tmp_path / 'pml.csv'
    path.write_text(
        '"","user_name","kurtosis_roll_belt","roll_belt","classe"\n'
        '"1","carlitos","#DIV/0!",1.41,"A"\n'
        '"2","pedro","",NA,"B"\n'
        '"3","pedro","0.512",1.42,"A"\n'
    )
    df = load_dataset(str(path))

    assert list(df.columns) == ['X', 'user_name', 'kurtosis_roll_belt', 'roll_belt', 'classe']
    assert df['kurtosis_roll_belt'].iloc[0] == '#DIV/0!'
    assert pd.isna(df['kurtosis_roll_belt'].iloc[1])
    assert pd.isna(df['roll_belt'].iloc[1])
    assert pd.api.types.is_numeric_dtype(df['roll_belt'])


def test_validate_dataset():
    df = pd.DataFrame({'a': range(20), 'classe': ['A', 'B'] * 10})
    assert validate_dataset(df, 'classe') == {'valid': True, 'errors': []}

    result = validate_dataset(df.head(5).assign(classe='A'), 'classe')
    assert not result['valid']
    assert len(result['errors']) == 2

    assert not validate_dataset(df, 'label')['valid']


def test_safe_json_convert():
    converted = safe_json_convert({'a': np.int64(3), 'b': np.float64('nan'), 'c': np.array([1.5, 2.0])})
    assert converted == {'a': 3, 'b': None, 'c': [1.5, 2.0]}


def test_summarize_missingness():
    df = pd.DataFrame({'a': [1.0, np.nan, np.nan, np.nan], 'b': ['x', 'y', 'z', 'w']})
    stats = summarize_missingness(df)

    assert stats['rows'] == 4
    assert stats['missing_percentage'] == {'a': 75.0, 'b': 0.0}
    assert stats['data_completeness'] == 62.5


def test_predictor_summary_ranks_class_separation(sensor_df):
    summary = predictor_summary(sensor_df[['roll_belt', 'yaw_belt', 'classe']], 'classe')
    assert list(summary.columns) == ['A', 'B', 'C', 'D', 'E']

    ranked = most_separating_predictors(sensor_df[['roll_belt', 'yaw_belt', 'classe']], 'classe', top=2)
    assert ranked == ['roll_belt', 'yaw_belt']
