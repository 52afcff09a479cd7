"""
Ordinary least squares regression model.

This module provides the LinearRegressionModel class, a thin wrapper around
statsmodels' formula OLS that exposes the quantities the regression labs
inspect: coefficient tables, fit statistics, confidence and prediction
intervals, and residuals.
"""

import pickle
from pathlib import Path
from typing import Dict, Any, List, Optional

import numpy as np
import pandas as pd
import patsy
import statsmodels.formula.api as smf
from statsmodels.stats.anova import anova_lm

from .config import BOOTSTRAP_CONFIG, INTERVAL_KINDS
from .evaluation import regression_metrics, format_regression_report, format_coefficient_report


def polynomial_formula(response: str, predictor: str, degree: int) -> str:
    """
    Build a raw polynomial regression formula.

    >>> polynomial_formula('mpg', 'horsepower', 3)
    'mpg ~ horsepower + I(horsepower ** 2) + I(horsepower ** 3)'
    """
    if degree < 1:
        raise ValueError(f"degree must be >= 1, got {degree}")

    terms = [predictor] + [f'I({predictor} ** {p})' for p in range(2, degree + 1)]
    return f"{response} ~ " + " + ".join(terms)


class LinearRegressionModel:
    """
    Linear regression fitted by ordinary least squares.

    Parameters
    ----------
    formula : str
        Model formula in patsy syntax, e.g. ``'mpg ~ horsepower'``.

    Attributes
    ----------
    results_ : statsmodels RegressionResultsWrapper
        Fitted OLS results.

    response_ : str
        Left-hand side of the formula as written, e.g. 'np.log(y)'. Use
        response_values() for the corresponding values.

    Examples
    --------
    >>> model = LinearRegressionModel('y ~ x1 + x2')
    >>> model.fit(train_df)
    >>> model.coefficient_table()
    >>> predictions = model.predict(test_df)
    """

    def __init__(self, formula: str):
        self.formula = formula
        self.results_ = None
        self.response_: Optional[str] = None
        self._is_fitted = False

    def fit(self, data: pd.DataFrame, verbose: bool = False) -> 'LinearRegressionModel':
        """
        Fit the model to a data frame.

        Parameters
        ----------
        data : DataFrame
            Must contain every variable referenced by the formula.

        verbose : bool, default=False
            Print the coefficient report after fitting.

        Returns
        -------
        self : LinearRegressionModel
            Fitted model instance.
        """
        try:
            ols = smf.ols(self.formula, data=data)
        except Exception as exc:
            raise ValueError(
                f"Could not build design matrices for '{self.formula}': {exc}"
            ) from exc

        self.results_ = ols.fit()
        self.response_ = ols.endog_names
        self._is_fitted = True

        if verbose:
            print(format_coefficient_report(
                self.coefficient_table(), self.fit_statistics(), title=self.formula
            ))

        return self

    def predict(self, data: Optional[pd.DataFrame] = None) -> np.ndarray:
        """
        Predict the response.

        Parameters
        ----------
        data : DataFrame, optional
            New observations. If None, returns the fitted values.

        Returns
        -------
        y_pred : array of shape (n_samples,)
        """
        self._check_is_fitted()

        if data is None:
            return np.asarray(self.results_.fittedvalues)
        return np.asarray(self.results_.predict(data))

    def predict_interval(
        self,
        data: pd.DataFrame,
        kind: str = 'confidence',
        alpha: float = BOOTSTRAP_CONFIG['alpha']
    ) -> pd.DataFrame:
        """
        Predict with a confidence interval (for the mean response) or a
        prediction interval (for a new observation).

        Returns
        -------
        intervals : DataFrame
            Columns 'mean', 'lower' and 'upper', one row per observation.
        """
        self._check_is_fitted()

        if kind not in INTERVAL_KINDS:
            raise ValueError(f"kind must be one of {INTERVAL_KINDS}, got '{kind}'")
        if not 0 < alpha < 1:
            raise ValueError(f"alpha must be in (0, 1), got {alpha}")

        frame = self.results_.get_prediction(data).summary_frame(alpha=alpha)
        prefix = 'mean_ci' if kind == 'confidence' else 'obs_ci'

        return pd.DataFrame({
            'mean': frame['mean'].to_numpy(),
            'lower': frame[f'{prefix}_lower'].to_numpy(),
            'upper': frame[f'{prefix}_upper'].to_numpy(),
        }, index=data.index)

    def coefficient_table(self, alpha: float = BOOTSTRAP_CONFIG['alpha']) -> pd.DataFrame:
        """
        Coefficient estimates with standard errors, t tests and confidence
        intervals, indexed by term.
        """
        self._check_is_fitted()

        ci = self.results_.conf_int(alpha=alpha)
        return pd.DataFrame({
            'estimate': self.results_.params,
            'std_error': self.results_.bse,
            't_value': self.results_.tvalues,
            'p_value': self.results_.pvalues,
            'ci_lower': ci[0],
            'ci_upper': ci[1],
        })

    def fit_statistics(self) -> Dict[str, float]:
        """
        Overall goodness-of-fit statistics.

        Returns
        -------
        stats : dict
            n_obs, df_model, df_resid, r2, adj_r2, rse (residual standard
            error), f_statistic, f_pvalue, aic and bic.
        """
        self._check_is_fitted()

        res = self.results_
        return {
            'n_obs': int(res.nobs),
            'df_model': float(res.df_model),
            'df_resid': float(res.df_resid),
            'r2': float(res.rsquared),
            'adj_r2': float(res.rsquared_adj),
            'rse': float(np.sqrt(res.scale)),
            'f_statistic': float(res.fvalue) if res.df_model > 0 else np.nan,
            'f_pvalue': float(res.f_pvalue) if res.df_model > 0 else np.nan,
            'aic': float(res.aic),
            'bic': float(res.bic),
        }

    def summary(self) -> str:
        """Full statsmodels summary as text."""
        self._check_is_fitted()
        return str(self.results_.summary())

    def response_values(self, data: pd.DataFrame) -> pd.Series:
        """
        Evaluate the left-hand side of the formula on ``data``.

        Transformed responses such as ``np.log(y)`` are computed exactly as
        when fitting, so the values are on the scale the model predicts. A
        fitted model is not required.

        Raises
        ------
        ValueError
            If a model variable is missing from ``data`` or has missing values.
        """
        try:
            y, _ = patsy.dmatrices(
                self.formula, data, eval_env=0,
                NA_action='raise', return_type='dataframe'
            )
        except patsy.PatsyError as exc:
            raise ValueError(
                f"Could not evaluate '{self.formula}' on the data: {exc}"
            ) from exc

        return y.iloc[:, 0]

    def evaluate(self, data: pd.DataFrame, verbose: bool = True) -> Dict[str, float]:
        """
        Evaluate the model on a data frame containing the response.

        Errors are measured on the scale of the formula's left-hand side.

        Returns
        -------
        metrics : dict
            Output of regression_metrics().
        """
        self._check_is_fitted()

        y_true = self.response_values(data).to_numpy()
        y_pred = self.predict(data)
        metrics = regression_metrics(y_true, y_pred)

        if verbose:
            print(format_regression_report(metrics, formula=self.formula))

        return metrics

    @property
    def params(self) -> pd.Series:
        self._check_is_fitted()
        return self.results_.params

    @property
    def residuals(self) -> np.ndarray:
        self._check_is_fitted()
        return np.asarray(self.results_.resid)

    @property
    def fitted_values(self) -> np.ndarray:
        self._check_is_fitted()
        return np.asarray(self.results_.fittedvalues)

    def save(self, filepath: str) -> None:
        """
        Save the fitted model to disk.

        Parameters
        ----------
        filepath : str
            Path to save the model file.
        """
        self._check_is_fitted()

        model_data = {
            'formula': self.formula,
            'results': self.results_,
            'response': self.response_,
        }

        Path(filepath).parent.mkdir(parents=True, exist_ok=True)
        with open(filepath, 'wb') as f:
            pickle.dump(model_data, f)

        print(f"Model saved to: {filepath}")

    @classmethod
    def load(cls, filepath: str) -> 'LinearRegressionModel':
        """
        Load a fitted model from disk.

        Parameters
        ----------
        filepath : str
            Path to the saved model file.

        Returns
        -------
        model : LinearRegressionModel
            Loaded model instance.
        """
        with open(filepath, 'rb') as f:
            model_data = pickle.load(f)

        model = cls(model_data['formula'])
        model.results_ = model_data['results']
        model.response_ = model_data['response']
        model._is_fitted = True

        return model

    def _check_is_fitted(self) -> None:
        if not self._is_fitted:
            raise ValueError("Model has not been fitted. Call fit() first.")

    def __repr__(self) -> str:
        status = "fitted" if self._is_fitted else "not fitted"
        return f"LinearRegressionModel(formula='{self.formula}', {status})"


def compare_nested_models(models: List[LinearRegressionModel]) -> pd.DataFrame:
    """
    ANOVA F-tests between nested models fitted on the same data.

    Parameters
    ----------
    models : list of LinearRegressionModel
        Fitted models ordered from smallest to largest.

    Returns
    -------
    table : DataFrame
        statsmodels ANOVA table with one row per model, indexed by formula.
    """
    if len(models) < 2:
        raise ValueError("At least two models are required for comparison")

    for model in models:
        model._check_is_fitted()

    table = anova_lm(*[m.results_ for m in models])
    table.index = [m.formula for m in models]
    return table
