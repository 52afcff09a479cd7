import numpy as np
import pandas as pd
import pytest
from scipy import stats

from statlab import (
    bootstrap,
    bootstrap_coefficients,
    coefficient_statistic,
    make_portfolio,
    paired_bootstrap_mse_difference,
    portfolio_alpha,
)


def sample_mean(data, index):
    return data['x'].iloc[index].mean()


def test_portfolio_alpha_near_true_value():
    df = make_portfolio(n_samples=2000, random_state=1)

    alpha = portfolio_alpha(df, np.arange(len(df)))

    assert alpha == pytest.approx(0.6, abs=0.05)


def test_bootstrap_portfolio_alpha(portfolio_df):
    result = bootstrap(portfolio_df, portfolio_alpha, n_boot=200, random_state=1)

    assert result.n_boot == 200
    assert result.n_failed == 0
    assert list(result.draws.columns) == ['portfolio_alpha']
    assert result.original['portfolio_alpha'] == pytest.approx(
        portfolio_alpha(portfolio_df, np.arange(len(portfolio_df)))
    )
    assert 0 < result.std_error['portfolio_alpha'] < 0.5


def test_bootstrap_is_deterministic(portfolio_df):
    a = bootstrap(portfolio_df, portfolio_alpha, n_boot=50, random_state=3)
    b = bootstrap(portfolio_df, portfolio_alpha, n_boot=50, random_state=3)
    c = bootstrap(portfolio_df, portfolio_alpha, n_boot=50, random_state=4)

    pd.testing.assert_frame_equal(a.draws, b.draws)
    assert not a.draws.equals(c.draws)


def test_bootstrap_standard_error_of_mean(rng):
    df = pd.DataFrame({'x': rng.normal(size=400)})

    result = bootstrap(df, sample_mean, n_boot=500, random_state=1)

    expected = df['x'].std() / np.sqrt(len(df))
    assert result.std_error['sample_mean'] == pytest.approx(expected, rel=0.25)
    assert abs(result.bias['sample_mean']) < expected


def test_intervals(rng):
    df = pd.DataFrame({'x': rng.normal(loc=3.0, size=200)})
    result = bootstrap(df, sample_mean, n_boot=300, random_state=1)

    lower, upper = result.percentile_interval(0.05)
    assert lower['sample_mean'] < result.original['sample_mean'] < upper['sample_mean']

    n_lower, n_upper = result.normal_interval(0.05)
    center = result.original['sample_mean'] - result.bias['sample_mean']
    half_width = stats.norm.ppf(0.975) * result.std_error['sample_mean']
    assert n_lower['sample_mean'] == pytest.approx(center - half_width)
    assert n_upper['sample_mean'] == pytest.approx(center + half_width)
    # Bias-corrected center is twice the original minus the mean draw
    assert center == pytest.approx(2 * result.original['sample_mean'] - result.draws['sample_mean'].mean())

    narrow_lower, narrow_upper = result.percentile_interval(0.5)
    assert narrow_upper['sample_mean'] - narrow_lower['sample_mean'] < upper['sample_mean'] - lower['sample_mean']


def test_to_frame(portfolio_df):
    frame = bootstrap(portfolio_df, portfolio_alpha, n_boot=50).to_frame()

    assert list(frame.columns) == ['original', 'bias', 'std_error', 'ci_lower', 'ci_upper']
    assert list(frame.index) == ['portfolio_alpha']


def test_bootstrap_vector_statistic(linear_df):
    statistic = coefficient_statistic('y ~ x1 + x2')
    result = bootstrap(linear_df, statistic, n_boot=30, random_state=1)

    assert list(result.draws.columns) == ['Intercept', 'x1', 'x2']
    assert result.draws.shape == (30, 3)


def test_bootstrap_records_undefined_replicates(rng):
    df = pd.DataFrame({'x': rng.normal(size=50)})

    def mean_unless_first_row_repeated(data, index):
        if np.sum(index == 0) > 1:
            return np.nan
        return data['x'].iloc[index].mean()

    result = bootstrap(df, mean_unless_first_row_repeated, n_boot=200, random_state=1)

    assert 0 < result.n_failed < 200
    assert np.isfinite(result.std_error.iloc[0])


def test_bootstrap_rejects_bad_arguments(portfolio_df):
    with pytest.raises(ValueError, match="n_boot"):
        bootstrap(portfolio_df, portfolio_alpha, n_boot=0)

    result = bootstrap(portfolio_df, portfolio_alpha, n_boot=10)
    with pytest.raises(ValueError, match="alpha"):
        result.percentile_interval(1.5)


def test_bootstrap_coefficients(linear_df):
    table = bootstrap_coefficients('y ~ x1 + x2', linear_df, n_boot=200, random_state=1)

    assert list(table.index) == ['Intercept', 'x1', 'x2']
    assert list(table.columns) == ['estimate', 'formula_se', 'bootstrap_se', 'ci_lower', 'ci_upper']
    assert (table['bootstrap_se'] > 0).all()
    # Homoscedastic errors: both standard errors should agree closely
    ratio = table['bootstrap_se'] / table['formula_se']
    assert ((ratio > 0.6) & (ratio < 1.6)).all()
    assert ((table['ci_lower'] < table['estimate']) & (table['estimate'] < table['ci_upper'])).all()


def test_paired_bootstrap_identical_predictions(rng):
    y = rng.normal(size=50)
    pred = y + rng.normal(size=50)

    result = paired_bootstrap_mse_difference(y, pred, pred, n_boot=100)

    assert result['difference'] == 0.0
    assert result['std_error'] == 0.0
    assert result['prob_a_better'] == 0.0


def test_paired_bootstrap_better_model(rng):
    y = rng.normal(size=80)
    good = y + rng.normal(scale=0.1, size=80)
    bad = y + rng.normal(scale=2.0, size=80)

    result = paired_bootstrap_mse_difference(y, good, bad, n_boot=200)

    assert result['difference'] < 0
    assert result['ci_upper'] < 0
    assert result['prob_a_better'] == 1.0
    assert len(result['draws']) == 200


def test_paired_bootstrap_shape_mismatch():
    with pytest.raises(ValueError, match="same shape"):
        paired_bootstrap_mse_difference(np.zeros(5), np.zeros(5), np.zeros(4))
