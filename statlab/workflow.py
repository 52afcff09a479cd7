"""
End-to-end regression workflow.

Runs the sequence a regression lab walks through on one dataset: fit the
model, inspect coefficients and fit statistics, check diagnostics, estimate
test error by cross-validation, bootstrap the coefficient standard errors
and, optionally, write the figures.
"""

import re
from pathlib import Path
from typing import Any, Dict, Optional

import matplotlib.pyplot as plt
import pandas as pd

from .bootstrap import bootstrap_coefficients
from .config import BOOTSTRAP_CONFIG, CV_CONFIG, DIAGNOSTIC_CONFIG
from .cross_validation import kfold_mse, loocv_mse, validation_set_mse
from .diagnostics import (
    flag_observations,
    heteroscedasticity_test,
    residual_summary,
    variance_inflation_factors
)
from .evaluation import format_coefficient_bootstrap_report, format_coefficient_report
from .linear_model import LinearRegressionModel
from .plotting import plot_diagnostics, plot_fit


def run_regression_workflow(
    data: pd.DataFrame,
    formula: str,
    output_dir: Optional[str] = None,
    n_boot: int = BOOTSTRAP_CONFIG['n_boot'],
    n_splits: int = CV_CONFIG['n_splits'],
    random_state: int = CV_CONFIG['random_state'],
    verbose: bool = True
) -> Dict[str, Any]:
    """
    Fit, inspect, validate and resample one linear regression model.

    Parameters
    ----------
    data : DataFrame
        Complete-case data containing every variable in ``formula``.

    formula : str
        Model formula, e.g. ``'mpg ~ horsepower + I(horsepower ** 2)'``.

    output_dir : str, optional
        Directory for figures. No figures are written when None.

    n_boot : int, default=1000
        Bootstrap resamples for the coefficient standard errors.

    n_splits : int, default=10
        Folds for k-fold cross-validation.

    random_state : int
        Seed for the validation split, k-fold shuffling and bootstrap.

    verbose : bool, default=True
        Print reports as each step completes.

    Returns
    -------
    results : dict
        Keys 'model', 'coefficients', 'fit_statistics', 'flags',
        'n_outliers', 'n_high_leverage', 'vif', 'collinear_terms' (VIF above
        the warning threshold), 'heteroscedasticity',
        'residuals', 'cv' (validation, loocv and kfold MSE),
        'bootstrap' (coefficient table) and 'figures' (saved paths).
    """
    if verbose:
        print("=" * 60)
        print(f"Fitting: {formula}")
        print("=" * 60)

    model = LinearRegressionModel(formula).fit(data)
    coefficients = model.coefficient_table()
    fit_stats = model.fit_statistics()

    if verbose:
        print(format_coefficient_report(coefficients, fit_stats, title=formula))

    flags = flag_observations(model)
    n_params = len(model.params)
    vif = variance_inflation_factors(model) if n_params > 2 else pd.Series(dtype=float, name='vif')
    collinear_terms = list(vif[vif > DIAGNOSTIC_CONFIG['vif_warning']].index)
    het = heteroscedasticity_test(model) if n_params > 1 else None
    resid = residual_summary(model)

    if verbose:
        print("\nDIAGNOSTICS")
        print("-" * 40)
        print(f"Outliers (|studentized| > threshold): {int(flags['outlier'].sum())}")
        print(f"High-leverage points:                 {int(flags['high_leverage'].sum())}")
        if het is not None:
            print(f"Breusch-Pagan p-value:                {het['lm_pvalue']:.4f}")
        print(f"Jarque-Bera p-value:                  {resid['jarque_bera_pvalue']:.4f}")
        if not vif.empty:
            print(f"Max VIF:                              {vif.max():.2f}")
        if collinear_terms:
            print(f"Warning: VIF above {DIAGNOSTIC_CONFIG['vif_warning']} for: {', '.join(collinear_terms)}")

    kfold = kfold_mse(formula, data, n_splits=n_splits, random_state=random_state)
    cv = {
        'validation': validation_set_mse(formula, data, random_state=random_state),
        'loocv': loocv_mse(formula, data),
        'kfold': kfold.mean,
        'kfold_std': kfold.std,
    }

    if verbose:
        print("\nESTIMATED TEST MSE")
        print("-" * 40)
        print(f"Validation set:                       {cv['validation']:.4f}")
        print(f"LOOCV:                                {cv['loocv']:.4f}")
        print(f"k-fold CV (k={n_splits}):                     {cv['kfold']:.4f}")

    boot = bootstrap_coefficients(formula, data, n_boot=n_boot, random_state=random_state)

    if verbose:
        print(format_coefficient_bootstrap_report(boot))

    figures = []
    if output_dir is not None:
        out = Path(output_dir)
        fig = plot_diagnostics(model, output_path=out / 'diagnostics.png')
        plt.close(fig)
        figures.append(out / 'diagnostics.png')

        rhs = formula.split('~', 1)[1]
        tokens = set(re.findall(r'[A-Za-z_][A-Za-z0-9_]*', rhs))
        predictors = [name for name in data.columns if name in tokens]
        if len(predictors) == 1:
            fig = plot_fit(model, data, predictors[0], output_path=out / 'fit.png')
            plt.close(fig)
            figures.append(out / 'fit.png')

    return {
        'model': model,
        'coefficients': coefficients,
        'fit_statistics': fit_stats,
        'flags': flags,
        'n_outliers': int(flags['outlier'].sum()),
        'n_high_leverage': int(flags['high_leverage'].sum()),
        'vif': vif,
        'collinear_terms': collinear_terms,
        'heteroscedasticity': het,
        'residuals': resid,
        'cv': cv,
        'bootstrap': boot,
        'figures': figures,
    }
