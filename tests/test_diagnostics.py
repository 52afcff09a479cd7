import numpy as np
import pandas as pd
import pytest

from statlab import (
    LinearRegressionModel,
    flag_observations,
    heteroscedasticity_test,
    influence_frame,
    make_linear_data,
    residual_summary,
    variance_inflation_factors,
)


def test_influence_frame(linear_df):
    model = LinearRegressionModel('y ~ x1 + x2').fit(linear_df)
    frame = influence_frame(model)

    assert len(frame) == len(linear_df)
    assert {'fitted', 'residual', 'standardized_residual', 'studentized_residual',
            'leverage', 'cooks_distance'} <= set(frame.columns)
    # Trace of the hat matrix equals the number of coefficients
    assert frame['leverage'].sum() == pytest.approx(3.0)
    assert (frame['cooks_distance'] >= 0).all()


def test_flag_observations_finds_outlier_and_leverage_point():
    df = make_linear_data(n_samples=100, coefficients=(0.0, 1.0), noise=1.0, random_state=2)
    df.loc[0, 'y'] += 15.0
    df.loc[1, 'x1'] = 10.0
    df.loc[1, 'y'] = 10.0

    model = LinearRegressionModel('y ~ x1').fit(df)
    flags = flag_observations(model)

    assert flags.loc[0, 'outlier']
    assert flags.loc[1, 'high_leverage']
    assert flags['outlier'].sum() <= 3


def test_variance_inflation_factors_detect_collinearity(rng):
    x1 = rng.normal(size=200)
    df = pd.DataFrame({
        'x1': x1,
        'x2': x1 + rng.normal(scale=0.05, size=200),
        'x3': rng.normal(size=200),
    })
    df['y'] = df['x1'] + df['x3'] + rng.normal(size=200)

    vif = variance_inflation_factors(LinearRegressionModel('y ~ x1 + x2 + x3').fit(df))

    assert list(vif.index) == ['x1', 'x2', 'x3']
    assert vif['x1'] > 10
    assert vif['x2'] > 10
    assert vif['x3'] < 2


def test_heteroscedasticity_test(rng):
    x = rng.uniform(0, 5, size=300)
    df = pd.DataFrame({'x': x, 'y': 1.0 + 2.0 * x + rng.normal(size=300) * x})

    result = heteroscedasticity_test(LinearRegressionModel('y ~ x').fit(df))

    assert result['lm_pvalue'] < 0.05
    assert set(result) == {'lm_statistic', 'lm_pvalue', 'f_statistic', 'f_pvalue'}


def test_residual_summary(linear_df):
    summary = residual_summary(LinearRegressionModel('y ~ x1 + x2').fit(linear_df))

    assert abs(summary['mean']) < 1e-8
    assert summary['std'] == pytest.approx(0.5, abs=0.1)
    assert 0.0 <= summary['jarque_bera_pvalue'] <= 1.0
    assert np.isfinite(summary['kurtosis'])
