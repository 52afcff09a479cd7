import pandas as pd
import pytest

from statlab import (
    describe_dataset,
    load_dataset,
    make_linear_data,
    make_polynomial_data,
    make_portfolio,
    train_validation_split,
)


def test_load_dataset_treats_question_mark_as_missing(auto_like_csv):
    df = load_dataset(auto_like_csv)

    assert len(df) == 4
    assert pd.api.types.is_numeric_dtype(df['horsepower'])
    assert list(df.index) == [0, 1, 2, 3]


def test_load_dataset_keeps_missing_rows_when_asked(auto_like_csv):
    df = load_dataset(auto_like_csv, dropna=False)

    assert len(df) == 6
    assert df['horsepower'].isna().sum() == 2


def test_load_dataset_column_selection(auto_like_csv):
    df = load_dataset(auto_like_csv, columns=['mpg'])

    assert list(df.columns) == ['mpg']
    assert len(df) == 6


def test_load_dataset_unknown_column(auto_like_csv):
    with pytest.raises(ValueError, match="not found"):
        load_dataset(auto_like_csv, columns=['mpg', 'weight'])


def test_load_dataset_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_dataset(tmp_path / 'nope.csv')


def test_describe_dataset_counts_missing(auto_like_csv):
    summary = describe_dataset(load_dataset(auto_like_csv, dropna=False))

    assert summary.loc['horsepower', 'missing'] == 2
    assert summary.loc['mpg', 'non_null'] == 6
    assert summary.loc['mpg', 'max'] == 25.0
    assert pd.isna(summary.loc['name', 'mean'])


def test_make_portfolio_is_deterministic():
    a = make_portfolio(n_samples=50, random_state=3)
    b = make_portfolio(n_samples=50, random_state=3)
    c = make_portfolio(n_samples=50, random_state=4)

    assert list(a.columns) == ['X', 'Y']
    pd.testing.assert_frame_equal(a, b)
    assert not a.equals(c)


def test_make_polynomial_data_without_noise():
    df = make_polynomial_data(n_samples=20, coefficients=(1.0, 0.0, 3.0), noise=0.0)

    assert (df['y'] - (1.0 + 3.0 * df['x'] ** 2)).abs().max() < 1e-12
    assert df['x'].between(-2, 2).all()


def test_make_linear_data_columns():
    df = make_linear_data(n_samples=30, coefficients=(0.0, 1.0, 1.0, 1.0))

    assert list(df.columns) == ['x1', 'x2', 'x3', 'y']
    assert len(df) == 30


def test_train_validation_split_partitions_rows(quadratic_df):
    train, validation = train_validation_split(quadratic_df, test_size=0.3, random_state=2)

    assert len(train) == 70
    assert len(validation) == 30
    assert set(train.index).isdisjoint(validation.index)
    assert set(train.index) | set(validation.index) == set(quadratic_df.index)


def test_train_validation_split_invalid_size(quadratic_df):
    with pytest.raises(ValueError):
        train_validation_split(quadratic_df, test_size=1.5)
