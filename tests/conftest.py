import matplotlib

matplotlib.use('Agg')

import numpy as np
import pandas as pd
import pytest

from statlab import make_linear_data, make_polynomial_data, make_portfolio


@pytest.fixture
def linear_df():
    return make_linear_data(n_samples=200, coefficients=(1.0, 2.0, -1.0), noise=0.5, random_state=1)


@pytest.fixture
def quadratic_df():
    return make_polynomial_data(n_samples=100, coefficients=(0.0, 1.0, -2.0), noise=1.0, random_state=1)


@pytest.fixture
def log_response_df(quadratic_df):
    """Positive response whose log follows the quadratic model."""
    df = quadratic_df.copy()
    df['y'] = np.exp(df['y'] / 10.0)
    return df


@pytest.fixture
def portfolio_df():
    return make_portfolio(n_samples=100, random_state=1)


@pytest.fixture
def auto_like_csv(tmp_path):
    """Small CSV that codes missing values as '?' like the Auto data."""
    df = pd.DataFrame({
        'mpg': [18.0, 15.0, 18.0, 16.0, 17.0, 25.0],
        'horsepower': ['130', '165', '?', '150', '140', '?'],
        'name': ['a', 'b', 'c', 'd', 'e', 'f'],
    })
    path = tmp_path / 'auto.csv'
    df.to_csv(path, index=False)
    return path


@pytest.fixture(autouse=True)
def _close_figures():
    yield
    import matplotlib.pyplot as plt
    plt.close('all')


@pytest.fixture
def rng():
    return np.random.RandomState(0)
