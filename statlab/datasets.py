"""
Dataset loading and synthetic data generators.

The labs work with small tabular datasets: a CSV on disk (e.g. the Auto
data) or a synthetic frame generated with a fixed seed so that results can
be reproduced without any download.
"""

from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from sklearn.model_selection import train_test_split

from .config import DATASET_CONFIG, SPLIT_CONFIG, RANDOM_STATE


def load_dataset(
    path: str,
    na_values: Optional[List[str]] = None,
    dropna: bool = DATASET_CONFIG['dropna'],
    columns: Optional[Sequence[str]] = None
) -> pd.DataFrame:
    """
    Load a tabular dataset from CSV.

    Parameters
    ----------
    path : str
        Path to the CSV file.

    na_values : list of str, optional
        Strings to treat as missing. Defaults to DATASET_CONFIG['na_values'].

    dropna : bool, default=True
        Drop rows with any missing value (after column selection).

    columns : sequence of str, optional
        Keep only these columns.

    Returns
    -------
    df : DataFrame
        Loaded dataset with a fresh RangeIndex.
    """
    if na_values is None:
        na_values = DATASET_CONFIG['na_values']

    df = pd.read_csv(path, na_values=na_values)

    if columns is not None:
        missing = [c for c in columns if c not in df.columns]
        if missing:
            raise ValueError(f"Columns not found in {path}: {missing}")
        df = df[list(columns)]

    if dropna:
        df = df.dropna()

    return df.reset_index(drop=True)


def describe_dataset(df: pd.DataFrame) -> pd.DataFrame:
    """
    Summarize each column of a dataset.

    Returns one row per column with dtype, non-null and missing counts and,
    for numeric columns, mean, std, min and max.
    """
    rows = []
    for col in df.columns:
        series = df[col]
        row = {
            'column': col,
            'dtype': str(series.dtype),
            'non_null': int(series.notna().sum()),
            'missing': int(series.isna().sum()),
            'mean': np.nan,
            'std': np.nan,
            'min': np.nan,
            'max': np.nan,
        }
        if pd.api.types.is_numeric_dtype(series):
            row.update({
                'mean': series.mean(),
                'std': series.std(),
                'min': series.min(),
                'max': series.max(),
            })
        rows.append(row)

    return pd.DataFrame(rows).set_index('column')


def make_portfolio(
    n_samples: int = 100,
    random_state: int = RANDOM_STATE
) -> pd.DataFrame:
    """
    Simulate returns for two assets X and Y.

    Returns are drawn from a bivariate normal with Var(X) = 1,
    Var(Y) = 1.25 and Cov(X, Y) = 0.5, which gives a true minimum-variance
    allocation of 0.6 to X.
    """
    rng = np.random.RandomState(random_state)
    cov = np.array([
        [DATASET_CONFIG['portfolio_var_x'], DATASET_CONFIG['portfolio_cov_xy']],
        [DATASET_CONFIG['portfolio_cov_xy'], DATASET_CONFIG['portfolio_var_y']],
    ])
    values = rng.multivariate_normal(mean=[0.0, 0.0], cov=cov, size=n_samples)
    return pd.DataFrame(values, columns=DATASET_CONFIG['portfolio_columns'])


def make_polynomial_data(
    n_samples: int = 100,
    coefficients: Sequence[float] = (0.0, 1.0, -2.0),
    noise: float = 1.0,
    x_range: Tuple[float, float] = (-2.0, 2.0),
    random_state: int = RANDOM_STATE
) -> pd.DataFrame:
    """
    Simulate a single-predictor polynomial regression problem.

    Parameters
    ----------
    n_samples : int, default=100
        Number of rows.

    coefficients : sequence of float
        Polynomial coefficients in increasing order of power, so
        (b0, b1, b2) gives y = b0 + b1*x + b2*x**2 + noise.

    noise : float, default=1.0
        Standard deviation of the Gaussian error.

    x_range : tuple of float
        Predictor is drawn uniformly from this interval.

    random_state : int
        Random seed.

    Returns
    -------
    df : DataFrame
        Columns 'x' and 'y'.
    """
    rng = np.random.RandomState(random_state)
    x = rng.uniform(x_range[0], x_range[1], size=n_samples)
    y = np.zeros(n_samples)
    for power, coef in enumerate(coefficients):
        y += coef * x ** power
    y += rng.normal(0.0, noise, size=n_samples)
    return pd.DataFrame({'x': x, 'y': y})


def make_linear_data(
    n_samples: int = 100,
    coefficients: Sequence[float] = (1.0, 2.0, -1.0),
    noise: float = 1.0,
    random_state: int = RANDOM_STATE
) -> pd.DataFrame:
    """
    Simulate a multiple linear regression problem.

    ``coefficients[0]`` is the intercept and the remaining values are the
    slopes of standard normal predictors x1..xp.
    """
    rng = np.random.RandomState(random_state)
    n_features = len(coefficients) - 1
    X = rng.normal(size=(n_samples, n_features))
    y = coefficients[0] + X @ np.asarray(coefficients[1:], dtype=float)
    y = y + rng.normal(0.0, noise, size=n_samples)

    df = pd.DataFrame(X, columns=[f'x{i}' for i in range(1, n_features + 1)])
    df['y'] = y
    return df


def train_validation_split(
    df: pd.DataFrame,
    test_size: float = SPLIT_CONFIG['test_size'],
    random_state: int = SPLIT_CONFIG['random_state']
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Randomly split rows into a training set and a validation set.

    Returns
    -------
    train_df, validation_df : DataFrame
        Disjoint row subsets whose union is ``df``. Original index labels
        are preserved.
    """
    if not 0 < test_size < 1:
        raise ValueError(f"test_size must be in (0, 1), got {test_size}")

    train_df, validation_df = train_test_split(
        df, test_size=test_size, random_state=random_state
    )
    return train_df, validation_df
