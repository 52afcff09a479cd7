"""
Nonparametric bootstrap for arbitrary statistics of a data frame.

The statistic is any function ``statistic(data, index)`` that computes an
estimate from the rows ``data.iloc[index]``. The bootstrap calls it on the
original rows and on ``n_boot`` resamples drawn with replacement, and
summarizes the spread of the resampled estimates (standard error, bias and
confidence intervals).
"""

from typing import Callable, Dict, Any, Tuple

import numpy as np
import pandas as pd
from scipy import stats

from .config import BOOTSTRAP_CONFIG
from .linear_model import LinearRegressionModel


def _as_series(value: Any, default_name: str) -> pd.Series:
    """Coerce a statistic's return value to a float Series."""
    if isinstance(value, pd.Series):
        return value.astype(float)
    values = np.atleast_1d(np.asarray(value, dtype=float))
    if values.ndim != 1:
        raise ValueError("statistic must return a scalar or a 1-D vector")
    if len(values) == 1:
        return pd.Series(values, index=[default_name])
    return pd.Series(values, index=[f'{default_name}_{i}' for i in range(len(values))])


class BootstrapResult:
    """
    Result of a bootstrap run.

    Attributes
    ----------
    original : Series
        Statistic computed on the original data, one entry per component.

    draws : DataFrame of shape (n_boot, n_components)
        Statistic computed on each resample. Rows where the statistic was
        undefined contain NaN.
    """

    def __init__(self, original: pd.Series, draws: pd.DataFrame):
        self.original = original
        self.draws = draws

    @property
    def n_boot(self) -> int:
        return len(self.draws)

    @property
    def n_failed(self) -> int:
        """Number of resamples where the statistic was undefined."""
        return int(self.draws.isna().any(axis=1).sum())

    @property
    def bias(self) -> pd.Series:
        """Mean of the bootstrap estimates minus the original estimate."""
        return self.draws.mean() - self.original

    @property
    def std_error(self) -> pd.Series:
        """Standard deviation of the bootstrap estimates."""
        return self.draws.std(ddof=1)

    def percentile_interval(
        self,
        alpha: float = BOOTSTRAP_CONFIG['alpha']
    ) -> Tuple[pd.Series, pd.Series]:
        """Percentile confidence interval at level 1 - alpha."""
        _check_alpha(alpha)
        lower = self.draws.quantile(alpha / 2.0)
        upper = self.draws.quantile(1.0 - alpha / 2.0)
        return lower, upper

    def normal_interval(
        self,
        alpha: float = BOOTSTRAP_CONFIG['alpha']
    ) -> Tuple[pd.Series, pd.Series]:
        """Bias-corrected normal approximation interval at level 1 - alpha."""
        _check_alpha(alpha)
        z = stats.norm.ppf(1.0 - alpha / 2.0)
        center = self.original - self.bias
        return center - z * self.std_error, center + z * self.std_error

    def to_frame(self, alpha: float = BOOTSTRAP_CONFIG['alpha']) -> pd.DataFrame:
        """
        Summary table with one row per statistic component.

        Columns: original, bias, std_error, ci_lower, ci_upper (percentile).
        """
        lower, upper = self.percentile_interval(alpha)
        return pd.DataFrame({
            'original': self.original,
            'bias': self.bias,
            'std_error': self.std_error,
            'ci_lower': lower,
            'ci_upper': upper,
        })

    def __repr__(self) -> str:
        return (
            f"BootstrapResult(n_boot={self.n_boot}, "
            f"statistics={list(self.original.index)})"
        )


def _check_alpha(alpha: float) -> None:
    if not 0 < alpha < 1:
        raise ValueError(f"alpha must be in (0, 1), got {alpha}")


def bootstrap(
    data: pd.DataFrame,
    statistic: Callable[[pd.DataFrame, np.ndarray], Any],
    n_boot: int = BOOTSTRAP_CONFIG['n_boot'],
    random_state: int = BOOTSTRAP_CONFIG['random_state'],
    verbose: bool = False
) -> BootstrapResult:
    """
    Bootstrap a statistic by resampling rows with replacement.

    Parameters
    ----------
    data : DataFrame
        Observations; rows are the resampling unit.

    statistic : callable
        ``statistic(data, index)`` returning a scalar, a 1-D array or a
        Series computed from ``data.iloc[index]``.

    n_boot : int, default=1000
        Number of bootstrap resamples.

    random_state : int
        Random seed; the same seed always gives the same draws.

    verbose : bool, default=False
        Print a one-line summary when done.

    Returns
    -------
    result : BootstrapResult
    """
    if n_boot < 1:
        raise ValueError(f"n_boot must be >= 1, got {n_boot}")

    n = len(data)
    if n == 0:
        raise ValueError("Cannot bootstrap an empty dataset")

    name = getattr(statistic, '__name__', 'statistic')
    if name.startswith('<'):
        name = 'statistic'

    original = _as_series(statistic(data, np.arange(n)), name)

    rng = np.random.RandomState(random_state)
    rows = []
    for _ in range(n_boot):
        idx = rng.choice(n, size=n, replace=True)
        value = _as_series(statistic(data, idx), name)
        rows.append(value.reindex(original.index).to_numpy())

    draws = pd.DataFrame(np.vstack(rows), columns=original.index)
    result = BootstrapResult(original, draws)

    if verbose:
        print(f"Bootstrap: {n_boot} resamples of {n} rows "
              f"({result.n_failed} undefined)")

    return result


def portfolio_alpha(
    data: pd.DataFrame,
    index: np.ndarray,
    x: str = 'X',
    y: str = 'Y'
) -> float:
    """
    Fraction of wealth to invest in X that minimizes the variance of
    alpha * X + (1 - alpha) * Y.

    alpha = (var(Y) - cov(X, Y)) / (var(X) + var(Y) - 2 cov(X, Y))
    """
    sub = data.iloc[index]
    cov = np.cov(sub[x].to_numpy(dtype=float), sub[y].to_numpy(dtype=float))
    var_x, var_y, cov_xy = cov[0, 0], cov[1, 1], cov[0, 1]
    denom = var_x + var_y - 2.0 * cov_xy
    if denom == 0:
        return np.nan
    return float((var_y - cov_xy) / denom)


def coefficient_statistic(formula: str) -> Callable[[pd.DataFrame, np.ndarray], pd.Series]:
    """
    Build a statistic returning the OLS coefficients of ``formula``.

    >>> stat = coefficient_statistic('mpg ~ horsepower')
    >>> stat(auto, np.arange(len(auto)))
    Intercept     39.935861
    horsepower    -0.157845
    """
    def coefficients(data: pd.DataFrame, index: np.ndarray) -> pd.Series:
        return LinearRegressionModel(formula).fit(data.iloc[index]).params

    return coefficients


def bootstrap_coefficients(
    formula: str,
    data: pd.DataFrame,
    n_boot: int = BOOTSTRAP_CONFIG['n_boot'],
    random_state: int = BOOTSTRAP_CONFIG['random_state'],
    alpha: float = BOOTSTRAP_CONFIG['alpha'],
    verbose: bool = False
) -> pd.DataFrame:
    """
    Compare formula-based and bootstrap standard errors of OLS coefficients.

    The formula standard errors assume a correctly specified linear model
    with constant error variance; the bootstrap standard errors do not.

    Returns
    -------
    table : DataFrame
        One row per term: estimate, formula_se, bootstrap_se, ci_lower and
        ci_upper (bootstrap percentile interval).
    """
    model = LinearRegressionModel(formula).fit(data)
    result = bootstrap(
        data, coefficient_statistic(formula),
        n_boot=n_boot, random_state=random_state, verbose=verbose
    )
    lower, upper = result.percentile_interval(alpha)

    return pd.DataFrame({
        'estimate': model.params,
        'formula_se': model.results_.bse,
        'bootstrap_se': result.std_error,
        'ci_lower': lower,
        'ci_upper': upper,
    })


def paired_bootstrap_mse_difference(
    y_true: np.ndarray,
    pred_a: np.ndarray,
    pred_b: np.ndarray,
    n_boot: int = BOOTSTRAP_CONFIG['n_boot'],
    random_state: int = BOOTSTRAP_CONFIG['random_state'],
    alpha: float = BOOTSTRAP_CONFIG['alpha']
) -> Dict[str, Any]:
    """
    Paired bootstrap of the difference in MSE between two sets of predictions.

    Both models are scored on the same resampled rows, so the comparison
    accounts for the correlation between their errors.

    Returns
    -------
    result : dict
        - 'difference': MSE(a) - MSE(b) on the original rows
        - 'std_error': bootstrap standard error of the difference
        - 'ci_lower', 'ci_upper': percentile interval
        - 'prob_a_better': share of resamples where MSE(a) < MSE(b)
        - 'draws': ndarray of bootstrap differences
    """
    y_true = np.asarray(y_true, dtype=float)
    pred_a = np.asarray(pred_a, dtype=float)
    pred_b = np.asarray(pred_b, dtype=float)

    if not (y_true.shape == pred_a.shape == pred_b.shape):
        raise ValueError("y_true, pred_a and pred_b must have the same shape")

    errors = pd.DataFrame({
        'sq_a': (y_true - pred_a) ** 2,
        'sq_b': (y_true - pred_b) ** 2,
    })

    def mse_difference(data: pd.DataFrame, index: np.ndarray) -> float:
        sub = data.iloc[index]
        return float(sub['sq_a'].mean() - sub['sq_b'].mean())

    result = bootstrap(errors, mse_difference, n_boot=n_boot, random_state=random_state)
    draws = result.draws['mse_difference'].to_numpy()
    lower, upper = result.percentile_interval(alpha)

    return {
        'difference': float(result.original['mse_difference']),
        'std_error': float(result.std_error['mse_difference']),
        'ci_lower': float(lower['mse_difference']),
        'ci_upper': float(upper['mse_difference']),
        'prob_a_better': float(np.mean(draws < 0)),
        'draws': draws,
    }
