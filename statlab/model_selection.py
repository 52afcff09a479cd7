"""
Polynomial degree selection with scikit-learn grid search.

This module provides an sklearn-compatible polynomial regression estimator
so that the degree can be chosen with GridSearchCV, complementing the
formula-based estimates in ``cross_validation``.
"""

from typing import Any, Dict, Iterable, Tuple

import numpy as np
import pandas as pd
from sklearn.base import BaseEstimator, RegressorMixin
from sklearn.linear_model import LinearRegression
from sklearn.metrics import make_scorer, mean_squared_error
from sklearn.model_selection import GridSearchCV, KFold
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import PolynomialFeatures

from .config import CV_CONFIG


# Scores are negated MSE so that GridSearchCV can maximize them
MSE_SCORER = make_scorer(mean_squared_error, greater_is_better=False)


class PolynomialRegression(RegressorMixin, BaseEstimator):
    """
    Least squares regression on raw polynomial terms of the inputs.

    Parameters
    ----------
    degree : int, default=1
        Polynomial degree. Must be >= 1.

    Attributes
    ----------
    pipeline_ : Pipeline
        Fitted PolynomialFeatures + LinearRegression pipeline.
    """

    def __init__(self, degree: int = 1):
        self.degree = degree

    def fit(self, X, y):
        """Fit the polynomial regression."""
        if self.degree < 1:
            raise ValueError(f"degree must be >= 1, got {self.degree}")

        self.pipeline_ = Pipeline(steps=[
            ('poly', PolynomialFeatures(degree=self.degree, include_bias=False)),
            ('model', LinearRegression()),
        ])
        self.pipeline_.fit(_as_2d(X), np.asarray(y, dtype=float))
        self.n_features_in_ = self.pipeline_.named_steps['poly'].n_features_in_
        return self

    def predict(self, X):
        """Predict the response."""
        return self.pipeline_.predict(_as_2d(X))

    @property
    def intercept_(self) -> float:
        return float(self.pipeline_.named_steps['model'].intercept_)

    @property
    def coef_(self) -> np.ndarray:
        return self.pipeline_.named_steps['model'].coef_


def _as_2d(X) -> np.ndarray:
    X = np.asarray(X, dtype=float)
    if X.ndim == 1:
        X = X.reshape(-1, 1)
    return X


def select_polynomial_degree(
    X,
    y,
    degrees: Iterable[int] = CV_CONFIG['degrees'],
    cv: Any = CV_CONFIG['n_splits'],
    random_state: int = CV_CONFIG['random_state'],
    verbose: int = 0,
    n_jobs: int = None
) -> Tuple[PolynomialRegression, int, pd.DataFrame]:
    """
    Choose the polynomial degree with the lowest cross-validated MSE.

    Parameters
    ----------
    X : array-like of shape (n_samples,) or (n_samples, n_features)
        Predictor values.

    y : array-like of shape (n_samples,)
        Response values.

    degrees : iterable of int
        Candidate degrees.

    cv : int or cross-validation generator, default=10
        An int means shuffled KFold with ``random_state``.

    random_state : int
        Seed for the default KFold.

    verbose : int, default=0
        Verbosity level.

    n_jobs : int, optional
        Number of jobs to run in parallel.

    Returns
    -------
    best_model : PolynomialRegression
        Refitted on all data with the best degree.

    best_degree : int
        Degree with the lowest mean CV MSE.

    cv_table : DataFrame
        Columns 'degree', 'mse' and 'std' (std of fold MSEs).
    """
    if isinstance(cv, int):
        cv = KFold(n_splits=cv, shuffle=True, random_state=random_state)

    param_grid: Dict[str, list] = {'degree': [int(d) for d in degrees]}

    if verbose > 0:
        print("Selecting polynomial degree with MSE scoring...")
        print(f"  - degrees: {param_grid['degree']}")

    search = GridSearchCV(
        PolynomialRegression(),
        param_grid=param_grid,
        scoring=MSE_SCORER,
        cv=cv,
        verbose=max(0, verbose - 1),
        n_jobs=n_jobs
    )
    search.fit(_as_2d(X), np.asarray(y, dtype=float))

    results = search.cv_results_
    cv_table = pd.DataFrame({
        'degree': np.asarray(results['param_degree'], dtype=int),
        'mse': -np.asarray(results['mean_test_score'], dtype=float),
        'std': np.asarray(results['std_test_score'], dtype=float),
    })

    best_degree = int(search.best_params_['degree'])

    if verbose > 0:
        print(f"\nBest degree: {best_degree} (CV MSE = {-search.best_score_:.4f})")

    return search.best_estimator_, best_degree, cv_table
