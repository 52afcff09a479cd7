import numpy as np
import pytest

from statlab import LinearRegressionModel, compare_nested_models, polynomial_formula


def test_fit_recovers_coefficients(linear_df):
    model = LinearRegressionModel('y ~ x1 + x2').fit(linear_df)

    assert model.params['Intercept'] == pytest.approx(1.0, abs=0.2)
    assert model.params['x1'] == pytest.approx(2.0, abs=0.2)
    assert model.params['x2'] == pytest.approx(-1.0, abs=0.2)
    assert model.response_ == 'y'


def test_coefficient_table(linear_df):
    table = LinearRegressionModel('y ~ x1 + x2').fit(linear_df).coefficient_table()

    assert list(table.columns) == ['estimate', 'std_error', 't_value', 'p_value', 'ci_lower', 'ci_upper']
    assert list(table.index) == ['Intercept', 'x1', 'x2']
    assert (table['ci_lower'] < table['estimate']).all()
    assert (table['estimate'] < table['ci_upper']).all()
    assert (table['p_value'] < 1e-6).all()


def test_fit_statistics(linear_df):
    model = LinearRegressionModel('y ~ x1 + x2').fit(linear_df)
    stats = model.fit_statistics()

    assert stats['n_obs'] == 200
    assert stats['df_resid'] == 197
    assert 0.9 < stats['r2'] < 1.0
    assert stats['adj_r2'] < stats['r2']
    rss = np.sum(model.residuals ** 2)
    assert stats['rse'] == pytest.approx(np.sqrt(rss / 197))


def test_predict_defaults_to_fitted_values(linear_df):
    model = LinearRegressionModel('y ~ x1 + x2').fit(linear_df)

    np.testing.assert_allclose(model.predict(), model.fitted_values)
    np.testing.assert_allclose(model.predict(linear_df), model.fitted_values)


def test_prediction_interval_wider_than_confidence(linear_df):
    model = LinearRegressionModel('y ~ x1 + x2').fit(linear_df)
    new = linear_df.head(5)

    conf = model.predict_interval(new, kind='confidence')
    pred = model.predict_interval(new, kind='prediction')

    np.testing.assert_allclose(conf['mean'], model.predict(new))
    np.testing.assert_allclose(conf['mean'], pred['mean'])
    assert ((pred['upper'] - pred['lower']) > (conf['upper'] - conf['lower'])).all()


def test_predict_interval_rejects_unknown_kind(linear_df):
    model = LinearRegressionModel('y ~ x1').fit(linear_df)

    with pytest.raises(ValueError, match="kind"):
        model.predict_interval(linear_df, kind='tolerance')


def test_unfitted_model_raises():
    model = LinearRegressionModel('y ~ x1')

    with pytest.raises(ValueError, match="not been fitted"):
        model.predict()
    with pytest.raises(ValueError, match="not been fitted"):
        model.coefficient_table()


def test_missing_column_raises(linear_df):
    with pytest.raises(ValueError, match="design matrices"):
        LinearRegressionModel('y ~ horsepower').fit(linear_df)


def test_polynomial_formula():
    assert polynomial_formula('mpg', 'horsepower', 1) == 'mpg ~ horsepower'
    assert polynomial_formula('y', 'x', 3) == 'y ~ x + I(x ** 2) + I(x ** 3)'

    with pytest.raises(ValueError):
        polynomial_formula('y', 'x', 0)


def test_polynomial_fit_recovers_curvature(quadratic_df):
    model = LinearRegressionModel(polynomial_formula('y', 'x', 2)).fit(quadratic_df)

    assert model.params['I(x ** 2)'] == pytest.approx(-2.0, abs=0.3)


def test_evaluate_matches_training_residuals(linear_df):
    model = LinearRegressionModel('y ~ x1 + x2').fit(linear_df)
    metrics = model.evaluate(linear_df, verbose=False)

    assert metrics['mse'] == pytest.approx(np.mean(model.residuals ** 2))
    assert metrics['r2'] == pytest.approx(model.fit_statistics()['r2'])


def test_save_and_load(linear_df, tmp_path):
    model = LinearRegressionModel('y ~ x1 + x2').fit(linear_df)
    path = tmp_path / 'models' / 'lm.pkl'
    model.save(str(path))

    loaded = LinearRegressionModel.load(str(path))

    assert loaded.formula == model.formula
    np.testing.assert_allclose(loaded.predict(linear_df), model.predict(linear_df))


def test_compare_nested_models_prefers_quadratic(quadratic_df):
    linear = LinearRegressionModel(polynomial_formula('y', 'x', 1)).fit(quadratic_df)
    quadratic = LinearRegressionModel(polynomial_formula('y', 'x', 2)).fit(quadratic_df)

    table = compare_nested_models([linear, quadratic])

    assert list(table.index) == [linear.formula, quadratic.formula]
    assert table['Pr(>F)'].iloc[1] < 0.001


def test_compare_nested_models_needs_two(linear_df):
    model = LinearRegressionModel('y ~ x1').fit(linear_df)

    with pytest.raises(ValueError):
        compare_nested_models([model])


def test_response_values_apply_formula_transform(log_response_df):
    model = LinearRegressionModel('np.log(y) ~ x')

    values = model.response_values(log_response_df)

    np.testing.assert_allclose(values, np.log(log_response_df['y']))
    assert list(values.index) == list(log_response_df.index)


def test_evaluate_transformed_response_on_log_scale(log_response_df):
    model = LinearRegressionModel('np.log(y) ~ x + I(x ** 2)').fit(log_response_df)
    metrics = model.evaluate(log_response_df, verbose=False)

    assert model.response_ == 'np.log(y)'
    assert metrics['mse'] == pytest.approx(np.mean(model.residuals ** 2))
    assert metrics['r2'] == pytest.approx(model.fit_statistics()['r2'])


def test_response_values_reject_missing_values(linear_df):
    df = linear_df.copy()
    df.loc[3, 'y'] = np.nan

    with pytest.raises(ValueError, match="Could not evaluate"):
        LinearRegressionModel('y ~ x1').response_values(df)


def test_evaluate_prints_report_with_formula(linear_df, capsys):
    model = LinearRegressionModel('y ~ x1 + x2').fit(linear_df)
    model.evaluate(linear_df.head(50))

    out = capsys.readouterr().out
    assert 'Model: y ~ x1 + x2' in out
    assert 'Observations scored: 50' in out
