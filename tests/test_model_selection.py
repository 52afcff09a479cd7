import numpy as np
import pytest
from sklearn.base import clone

from statlab import (
    PolynomialRegression,
    kfold_mse,
    make_polynomial_data,
    polynomial_formula,
    select_polynomial_degree,
)


def test_polynomial_regression_exact_fit():
    df = make_polynomial_data(n_samples=30, coefficients=(0.5, 1.0, -2.0), noise=0.0)

    model = PolynomialRegression(degree=2).fit(df[['x']], df['y'])

    assert model.intercept_ == pytest.approx(0.5)
    np.testing.assert_allclose(model.coef_, [1.0, -2.0], atol=1e-8)
    np.testing.assert_allclose(model.predict(df['x']), df['y'], atol=1e-8)


def test_polynomial_regression_is_clonable():
    model = PolynomialRegression(degree=3)

    assert clone(model).get_params() == {'degree': 3}


def test_polynomial_regression_rejects_degree_zero(quadratic_df):
    with pytest.raises(ValueError, match="degree"):
        PolynomialRegression(degree=0).fit(quadratic_df[['x']], quadratic_df['y'])


def test_select_polynomial_degree(quadratic_df):
    best_model, best_degree, cv_table = select_polynomial_degree(
        quadratic_df[['x']], quadratic_df['y'], degrees=[1, 2, 3, 4, 5]
    )

    assert best_degree >= 2
    assert best_model.degree == best_degree
    assert list(cv_table['degree']) == [1, 2, 3, 4, 5]
    assert cv_table.set_index('degree').loc[2, 'mse'] < cv_table.set_index('degree').loc[1, 'mse']


def test_grid_search_agrees_with_formula_cv(quadratic_df):
    _, _, cv_table = select_polynomial_degree(
        quadratic_df[['x']], quadratic_df['y'], degrees=[2], cv=10, random_state=1
    )
    formula_cv = kfold_mse(polynomial_formula('y', 'x', 2), quadratic_df, n_splits=10, random_state=1)

    assert cv_table['mse'].iloc[0] == pytest.approx(formula_cv.mean, rel=1e-6)
