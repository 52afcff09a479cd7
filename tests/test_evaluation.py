import numpy as np
import pandas as pd
import pytest

from statlab import (
    LinearRegressionModel,
    bootstrap,
    format_bootstrap_report,
    format_coefficient_bootstrap_report,
    format_coefficient_report,
    format_cv_report,
    format_regression_report,
    portfolio_alpha,
    regression_metrics,
)


def test_regression_metrics_perfect_predictions():
    y = np.array([1.0, 2.0, 3.0, 4.0])
    metrics = regression_metrics(y, y)

    assert metrics['mse'] == 0.0
    assert metrics['mae'] == 0.0
    assert metrics['n_obs'] == 4
    assert metrics['r2'] == 1.0
    assert metrics['correlation'] == pytest.approx(1.0)


def test_regression_metrics_values():
    metrics = regression_metrics([0.0, 0.0, 0.0, 0.0], [1.0, -1.0, 2.0, -2.0])

    assert metrics['mae'] == pytest.approx(1.5)
    assert metrics['mse'] == pytest.approx(2.5)
    assert metrics['rmse'] == pytest.approx(np.sqrt(2.5))
    assert metrics['correlation'] == 0.0


def test_regression_metrics_shape_mismatch():
    with pytest.raises(ValueError, match="same shape"):
        regression_metrics([1.0, 2.0], [1.0])


def test_format_regression_report():
    metrics = regression_metrics([1.0, 2.0, 3.0], [1.1, 1.9, 3.2])
    report = format_regression_report(metrics, formula='y ~ x', title="Test")

    assert "Test" in report
    assert "Model: y ~ x" in report
    assert "Observations scored: 3" in report
    assert f"MSE:                        {metrics['mse']:.4f}" in report


def test_format_regression_report_without_formula():
    report = format_regression_report(regression_metrics([1.0, 2.0], [1.0, 2.5]))

    assert "Prediction Error" in report
    assert "Model:" not in report


def test_format_coefficient_report(linear_df):
    model = LinearRegressionModel('y ~ x1 + x2').fit(linear_df)
    report = format_coefficient_report(model.coefficient_table(), model.fit_statistics(), title=model.formula)

    assert 'Intercept' in report
    assert 'x2' in report
    assert 'Residual standard error' in report


def test_format_cv_report_marks_best():
    errors = pd.DataFrame({'degree': [1, 2, 3], 'mse': [5.0, 1.0, 1.2], 'std': [0.5, 0.1, np.nan]})
    report = format_cv_report(errors)

    best_line = [line for line in report.splitlines() if '<- best' in line]
    assert len(best_line) == 1
    assert best_line[0].startswith('2 ')


def test_format_bootstrap_reports(portfolio_df, linear_df):
    from statlab import bootstrap_coefficients

    result = bootstrap(portfolio_df, portfolio_alpha, n_boot=20)
    assert 'portfolio_alpha' in format_bootstrap_report(result.to_frame())

    table = bootstrap_coefficients('y ~ x1', linear_df, n_boot=20)
    report = format_coefficient_bootstrap_report(table)
    assert 'Formula SE' in report
    assert 'x1' in report
