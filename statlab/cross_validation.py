"""
Cross-validation estimates of test error for linear regression models.

This module implements the resampling approaches used to estimate the test
mean squared error of a formula OLS model: the validation set approach,
leave-one-out cross-validation (LOOCV) and k-fold cross-validation, plus a
stratified k-fold splitter for continuous responses.
"""

from typing import Iterable, Optional, Tuple, Generator

import numpy as np
import pandas as pd
from sklearn.model_selection import BaseCrossValidator, KFold, LeaveOneOut

from .config import CV_CONFIG, SPLIT_CONFIG, CV_METHODS
from .datasets import train_validation_split
from .linear_model import LinearRegressionModel, polynomial_formula


def _complete_response(formula: str, data: pd.DataFrame) -> np.ndarray:
    """
    Response values for ``formula`` on ``data``.

    Raises ValueError when a model variable has missing values, so that
    every resampling method scores the same rows.
    """
    return LinearRegressionModel(formula).response_values(data).to_numpy()


def _holdout_mse(formula: str, train: pd.DataFrame, test: pd.DataFrame) -> float:
    """Fit on ``train`` and return the mean squared error on ``test``."""
    model = LinearRegressionModel(formula).fit(train)
    y_true = model.response_values(test).to_numpy()
    y_pred = model.predict(test)
    return float(np.mean((y_true - y_pred) ** 2))


class CVResult:
    """
    Fold-level cross-validation errors.

    Attributes
    ----------
    fold_mse : ndarray of shape (n_splits,)
        Mean squared error on each held-out fold.

    fold_sizes : ndarray of shape (n_splits,)
        Number of held-out observations in each fold.
    """

    def __init__(self, fold_mse: np.ndarray, fold_sizes: np.ndarray):
        self.fold_mse = np.asarray(fold_mse, dtype=float)
        self.fold_sizes = np.asarray(fold_sizes, dtype=int)

    @property
    def n_splits(self) -> int:
        return len(self.fold_mse)

    @property
    def mean(self) -> float:
        """CV estimate: fold errors averaged with weights proportional to fold size."""
        return float(np.average(self.fold_mse, weights=self.fold_sizes))

    @property
    def std(self) -> float:
        """Standard deviation of the fold errors."""
        if self.n_splits < 2:
            return np.nan
        return float(np.std(self.fold_mse, ddof=1))

    def __repr__(self) -> str:
        return f"CVResult(n_splits={self.n_splits}, mean={self.mean:.4f}, std={self.std:.4f})"


def validation_set_mse(
    formula: str,
    data: pd.DataFrame,
    test_size: float = SPLIT_CONFIG['test_size'],
    random_state: int = SPLIT_CONFIG['random_state']
) -> float:
    """
    Validation set estimate of test MSE.

    The rows are split once into training and validation halves (by
    default); the model is fitted on the training rows and scored on the
    validation rows.
    """
    _complete_response(formula, data)
    train, validation = train_validation_split(data, test_size=test_size, random_state=random_state)
    return _holdout_mse(formula, train, validation)


def repeated_validation_mse(
    formula: str,
    data: pd.DataFrame,
    seeds: Iterable[int] = CV_CONFIG['repeat_seeds'],
    test_size: float = SPLIT_CONFIG['test_size']
) -> pd.Series:
    """
    Validation set MSE for several random splits.

    Shows how much the validation estimate depends on which rows land in
    the validation set.

    Returns
    -------
    errors : Series
        MSE indexed by seed.
    """
    seeds = list(seeds)
    errors = [validation_set_mse(formula, data, test_size=test_size, random_state=s) for s in seeds]
    return pd.Series(errors, index=pd.Index(seeds, name='seed'), name='mse')


def loocv_mse(
    formula: str,
    data: pd.DataFrame,
    shortcut: bool = CV_CONFIG['loocv_shortcut']
) -> float:
    """
    Leave-one-out cross-validation estimate of test MSE.

    Parameters
    ----------
    formula : str
        Model formula.

    data : DataFrame
        Complete-case data.

    shortcut : bool, default=True
        For least squares the LOOCV error has a closed form,
        mean(((y_i - yhat_i) / (1 - h_i)) ** 2), where h_i is the leverage,
        so a single fit suffices. When False, the model is refitted n times.

    Returns
    -------
    mse : float

    Raises
    ------
    ValueError
        If a model variable has missing values.
    """
    _complete_response(formula, data)

    if shortcut:
        model = LinearRegressionModel(formula).fit(data)
        leverage = np.asarray(model.results_.get_influence().hat_matrix_diag)
        return float(np.mean((model.residuals / (1.0 - leverage)) ** 2))

    return kfold_mse(formula, data, cv=LeaveOneOut()).mean


def kfold_mse(
    formula: str,
    data: pd.DataFrame,
    n_splits: int = CV_CONFIG['n_splits'],
    shuffle: bool = CV_CONFIG['shuffle'],
    random_state: int = CV_CONFIG['random_state'],
    cv: Optional[BaseCrossValidator] = None
) -> CVResult:
    """
    k-fold cross-validation estimate of test MSE.

    Parameters
    ----------
    formula : str
        Model formula.

    data : DataFrame
        Complete-case data.

    n_splits : int, default=10
        Number of folds. Must lie in [2, n_samples].

    shuffle : bool, default=True
        Shuffle rows before assigning folds.

    random_state : int
        Seed used when shuffling.

    cv : cross-validation generator, optional
        Any sklearn splitter. Overrides n_splits/shuffle/random_state. It is
        called as ``cv.split(data, y)`` so stratified splitters work.

    Returns
    -------
    result : CVResult
        Per-fold errors; ``result.mean`` is the CV estimate.
    """
    n_samples = len(data)

    if cv is None:
        if not 2 <= n_splits <= n_samples:
            raise ValueError(f"n_splits must be in [2, {n_samples}], got {n_splits}")
        cv = KFold(
            n_splits=n_splits,
            shuffle=shuffle,
            random_state=random_state if shuffle else None
        )

    y = _complete_response(formula, data)

    fold_mse = []
    fold_sizes = []
    for train_idx, test_idx in cv.split(data, y):
        fold_mse.append(_holdout_mse(formula, data.iloc[train_idx], data.iloc[test_idx]))
        fold_sizes.append(len(test_idx))

    return CVResult(np.array(fold_mse), np.array(fold_sizes))


def cv_error_by_degree(
    data: pd.DataFrame,
    response: str,
    predictor: str,
    degrees: Iterable[int] = CV_CONFIG['degrees'],
    method: str = 'kfold',
    n_splits: int = CV_CONFIG['n_splits'],
    random_state: int = CV_CONFIG['random_state'],
    verbose: bool = False
) -> pd.DataFrame:
    """
    Estimated test MSE of polynomial fits of increasing degree.

    Parameters
    ----------
    data : DataFrame
        Complete-case data.

    response, predictor : str
        Column names.

    degrees : iterable of int
        Polynomial degrees to evaluate.

    method : {'kfold', 'loocv', 'validation'}
        Error estimate to use.

    Returns
    -------
    errors : DataFrame
        Columns 'degree', 'mse' and 'std' (fold standard deviation for
        k-fold, NaN otherwise).
    """
    if method not in CV_METHODS:
        raise ValueError(f"method must be one of {CV_METHODS}, got '{method}'")

    rows = []
    for degree in degrees:
        formula = polynomial_formula(response, predictor, degree)

        if method == 'kfold':
            result = kfold_mse(formula, data, n_splits=n_splits, random_state=random_state)
            mse, std = result.mean, result.std
        elif method == 'loocv':
            mse, std = loocv_mse(formula, data), np.nan
        else:
            mse, std = validation_set_mse(formula, data, random_state=random_state), np.nan

        if verbose:
            print(f"  degree {degree}: {method} MSE = {mse:.4f}")

        rows.append({'degree': int(degree), 'mse': mse, 'std': std})

    return pd.DataFrame(rows, columns=['degree', 'mse', 'std'])


class BinnedStratifiedKFold(BaseCrossValidator):
    """
    Stratified K-Fold cross-validator for a continuous response.

    The response is cut into quantile bins, observations are shuffled
    within each bin, and each bin is dealt round-robin across folds so that
    every fold covers the full range of the response.

    Parameters
    ----------
    n_splits : int, default=5
        Number of folds.

    n_bins : int, default=5
        Number of quantile bins. Duplicate bin edges are merged.

    random_state : int, default=1
        Random seed for shuffling within bins.

    Examples
    --------
    >>> cv = BinnedStratifiedKFold(n_splits=5)
    >>> for train_idx, test_idx in cv.split(X, y):
    ...     X_train, X_test = X[train_idx], X[test_idx]
    """

    def __init__(
        self,
        n_splits: int = 5,
        n_bins: int = CV_CONFIG['n_bins'],
        random_state: int = CV_CONFIG['random_state']
    ):
        if n_splits < 2:
            raise ValueError(f"n_splits must be >= 2, got {n_splits}")
        self.n_splits = n_splits
        self.n_bins = n_bins
        self.random_state = random_state

    def split(
        self,
        X: np.ndarray,
        y: np.ndarray,
        groups: Optional[np.ndarray] = None
    ) -> Generator[Tuple[np.ndarray, np.ndarray], None, None]:
        """
        Generate indices to split data into training and test sets.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_features)
            Training data.

        y : array-like of shape (n_samples,)
            Continuous response. Required.

        groups : ignored

        Yields
        ------
        train : ndarray
            Training set indices for the current fold.

        test : ndarray
            Test set indices for the current fold.
        """
        if y is None:
            raise ValueError("y (continuous response) must be provided")

        y = np.asarray(y, dtype=float)
        n_samples = len(y)
        if self.n_splits > n_samples:
            raise ValueError(f"n_splits={self.n_splits} exceeds n_samples={n_samples}")

        bins = pd.qcut(y, q=self.n_bins, labels=False, duplicates='drop')
        rng = np.random.RandomState(self.random_state)

        fold_of = np.empty(n_samples, dtype=int)
        offset = 0
        for b in np.unique(bins):
            members = np.where(bins == b)[0]
            rng.shuffle(members)
            # Continue the round-robin across bins so fold sizes stay balanced
            fold_of[members] = (np.arange(len(members)) + offset) % self.n_splits
            offset += len(members)

        all_indices = np.arange(n_samples)
        for fold_idx in range(self.n_splits):
            test_mask = fold_of == fold_idx
            yield all_indices[~test_mask], all_indices[test_mask]

    def get_n_splits(
        self,
        X: Optional[np.ndarray] = None,
        y: Optional[np.ndarray] = None,
        groups: Optional[np.ndarray] = None
    ) -> int:
        """Returns the number of splitting iterations."""
        return self.n_splits
