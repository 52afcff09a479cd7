"""
Regression diagnostics for fitted linear models.

Influence measures (leverage, studentized residuals, Cook's distance),
collinearity (variance inflation factors) and residual assumption checks
for a fitted LinearRegressionModel.
"""

from typing import Dict

import numpy as np
import pandas as pd
from scipy import stats
from statsmodels.stats.diagnostic import het_breuschpagan
from statsmodels.stats.outliers_influence import variance_inflation_factor

from .config import DIAGNOSTIC_CONFIG
from .linear_model import LinearRegressionModel


def influence_frame(model: LinearRegressionModel) -> pd.DataFrame:
    """
    Per-observation influence measures.

    Returns
    -------
    frame : DataFrame
        Columns:
        - 'fitted': fitted value
        - 'residual': raw residual
        - 'standardized_residual': internally studentized residual
        - 'studentized_residual': externally studentized residual
        - 'leverage': diagonal of the hat matrix
        - 'cooks_distance': Cook's distance
    """
    model._check_is_fitted()

    influence = model.results_.get_influence()
    return pd.DataFrame({
        'fitted': model.fitted_values,
        'residual': model.residuals,
        'standardized_residual': np.asarray(influence.resid_studentized_internal),
        'studentized_residual': np.asarray(influence.resid_studentized_external),
        'leverage': np.asarray(influence.hat_matrix_diag),
        'cooks_distance': np.asarray(influence.cooks_distance[0]),
    }, index=model.results_.fittedvalues.index)


def flag_observations(
    model: LinearRegressionModel,
    studentized_threshold: float = DIAGNOSTIC_CONFIG['studentized_threshold'],
    leverage_multiplier: float = DIAGNOSTIC_CONFIG['leverage_multiplier']
) -> pd.DataFrame:
    """
    Flag outliers and high-leverage points.

    An observation is an outlier when its externally studentized residual
    exceeds ``studentized_threshold`` in absolute value, and high leverage
    when its hat value exceeds ``leverage_multiplier * (p + 1) / n``, where
    p + 1 is the number of estimated coefficients.

    Returns
    -------
    frame : DataFrame
        influence_frame() plus boolean 'outlier' and 'high_leverage' columns.
    """
    frame = influence_frame(model)
    n_params = len(model.params)
    n_obs = len(frame)
    leverage_cutoff = leverage_multiplier * n_params / n_obs

    frame['outlier'] = frame['studentized_residual'].abs() > studentized_threshold
    frame['high_leverage'] = frame['leverage'] > leverage_cutoff
    return frame


def variance_inflation_factors(model: LinearRegressionModel) -> pd.Series:
    """
    Variance inflation factor for each predictor term (intercept excluded).

    Values above DIAGNOSTIC_CONFIG['vif_warning'] indicate problematic
    collinearity.
    """
    model._check_is_fitted()

    exog = model.results_.model.exog
    names = model.results_.model.exog_names

    vifs = {}
    for i, name in enumerate(names):
        if name == 'Intercept':
            continue
        vifs[name] = variance_inflation_factor(exog, i)

    return pd.Series(vifs, name='vif')


def heteroscedasticity_test(model: LinearRegressionModel) -> Dict[str, float]:
    """
    Breusch-Pagan test for non-constant error variance.

    Returns
    -------
    result : dict
        'lm_statistic', 'lm_pvalue', 'f_statistic' and 'f_pvalue'.
    """
    model._check_is_fitted()

    lm, lm_pvalue, fvalue, f_pvalue = het_breuschpagan(
        model.residuals, model.results_.model.exog
    )
    return {
        'lm_statistic': float(lm),
        'lm_pvalue': float(lm_pvalue),
        'f_statistic': float(fvalue),
        'f_pvalue': float(f_pvalue),
    }


def residual_summary(model: LinearRegressionModel) -> Dict[str, float]:
    """Moments of the residuals and a Jarque-Bera normality test."""
    resid = model.residuals
    jb = stats.jarque_bera(resid)

    return {
        'mean': float(np.mean(resid)),
        'std': float(np.std(resid, ddof=1)),
        'skew': float(stats.skew(resid)),
        'kurtosis': float(stats.kurtosis(resid)),
        'jarque_bera': float(jb[0]),
        'jarque_bera_pvalue': float(jb[1]),
    }
