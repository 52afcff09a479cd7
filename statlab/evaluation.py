"""
Evaluation metrics and text reports for regression workflows.

This module computes standard regression error metrics and formats model,
cross-validation and bootstrap results as readable console reports.
"""

from typing import Dict, Optional

import numpy as np
import pandas as pd
from sklearn.metrics import (
    mean_absolute_error,
    mean_squared_error,
    r2_score
)


def regression_metrics(
    y_true: np.ndarray,
    y_pred: np.ndarray
) -> Dict[str, float]:
    """
    Error of predictions against observed responses.

    Both arrays must be on the same scale; for a model with a transformed
    response, pass the transformed observations.

    Returns
    -------
    metrics : dict
        'n_obs', 'mse' (the quantity cross-validation estimates), 'rmse',
        'mae', 'r2' (1 - RSS / TSS on these observations, NaN for a single
        observation) and 'correlation' between observed and predicted values
        (0.0 when either is constant).
    """
    y_true = np.asarray(y_true, dtype=float)
    y_pred = np.asarray(y_pred, dtype=float)

    if y_true.shape != y_pred.shape:
        raise ValueError(
            f"y_true and y_pred must have the same shape, got {y_true.shape} and {y_pred.shape}"
        )

    n_obs = len(y_true)
    mse = float(mean_squared_error(y_true, y_pred))

    if n_obs > 1 and np.std(y_true) > 0 and np.std(y_pred) > 0:
        correlation = float(np.corrcoef(y_true, y_pred)[0, 1])
    else:
        correlation = 0.0

    return {
        'n_obs': n_obs,
        'mse': mse,
        'rmse': float(np.sqrt(mse)),
        'mae': float(mean_absolute_error(y_true, y_pred)),
        'r2': float(r2_score(y_true, y_pred)) if n_obs > 1 else np.nan,
        'correlation': correlation,
    }


def format_regression_report(
    metrics: Dict[str, float],
    formula: Optional[str] = None,
    title: str = "Prediction Error"
) -> str:
    """
    Format the output of regression_metrics() as text.

    Parameters
    ----------
    metrics : dict
        Output of regression_metrics().

    formula : str, optional
        Model whose predictions were scored; shown under the title.

    title : str
        Title for the report.
    """
    lines = [
        "=" * 60,
        title.center(60),
        "=" * 60,
    ]
    if formula is not None:
        lines.append(f"Model: {formula}")
    lines.extend([
        f"Observations scored: {metrics['n_obs']}",
        "",
        "ERRORS",
        "-" * 40,
        f"MSE:                        {metrics['mse']:.4f}",
        f"RMSE:                       {metrics['rmse']:.4f}",
        f"MAE:                        {metrics['mae']:.4f}",
        f"R-squared:                  {metrics['r2']:.4f}",
        f"Corr(observed, predicted):  {metrics['correlation']:.4f}",
        "",
        "=" * 60
    ])

    return "\n".join(lines)


def format_coefficient_report(
    coefficients: pd.DataFrame,
    fit_stats: Optional[Dict[str, float]] = None,
    title: str = "Linear Regression"
) -> str:
    """
    Format a coefficient table (and optional fit statistics) as text.

    Parameters
    ----------
    coefficients : DataFrame
        Output of LinearRegressionModel.coefficient_table().

    fit_stats : dict, optional
        Output of LinearRegressionModel.fit_statistics().

    title : str
        Title for the report.
    """
    lines = [
        "=" * 72,
        title.center(72),
        "=" * 72,
        "",
        "COEFFICIENTS",
        "-" * 72,
        f"{'Term':<24} {'Estimate':>10} {'Std.Err':>10} {'t':>8} {'p':>8}   95% CI",
    ]

    for term, row in coefficients.iterrows():
        lines.append(
            f"{str(term)[:24]:<24} {row['estimate']:>10.4f} {row['std_error']:>10.4f} "
            f"{row['t_value']:>8.2f} {row['p_value']:>8.4f}   "
            f"[{row['ci_lower']:.4f}, {row['ci_upper']:.4f}]"
        )

    if fit_stats is not None:
        lines.extend([
            "",
            "FIT STATISTICS",
            "-" * 40,
            f"Observations:               {fit_stats['n_obs']}",
            f"Residual standard error:    {fit_stats['rse']:.4f} on {fit_stats['df_resid']:.0f} df",
            f"R-squared:                  {fit_stats['r2']:.4f}",
            f"Adjusted R-squared:         {fit_stats['adj_r2']:.4f}",
            f"F-statistic:                {fit_stats['f_statistic']:.4f} (p = {fit_stats['f_pvalue']:.4g})",
            f"AIC / BIC:                  {fit_stats['aic']:.2f} / {fit_stats['bic']:.2f}",
        ])

    lines.append("=" * 72)

    return "\n".join(lines)


def format_cv_report(
    errors: pd.DataFrame,
    title: str = "Cross-Validation Error"
) -> str:
    """
    Format a table of cross-validated errors.

    Parameters
    ----------
    errors : DataFrame
        Must contain an 'mse' column; an optional 'std' column is shown
        when present. The first column (or index) labels each row.
    """
    label_col = errors.columns[0] if errors.columns[0] not in ("mse", "std") else None
    best_idx = errors['mse'].idxmin()

    lines = [
        "=" * 60,
        title.center(60),
        "=" * 60,
        "",
        f"{(label_col or 'row'):<12} {'MSE':>12} {'Std':>12}",
        "-" * 40,
    ]

    for idx, row in errors.iterrows():
        label = row[label_col] if label_col else idx
        if isinstance(label, float) and label.is_integer():
            label = int(label)  # iterrows upcasts integer labels
        std = row['std'] if 'std' in errors.columns else np.nan
        marker = "  <- best" if idx == best_idx else ""
        std_text = f"{std:>12.4f}" if not pd.isna(std) else f"{'-':>12}"
        lines.append(f"{str(label):<12} {row['mse']:>12.4f} {std_text}{marker}")

    lines.extend(["", "=" * 60])

    return "\n".join(lines)


def format_bootstrap_report(
    summary: pd.DataFrame,
    title: str = "Bootstrap Estimate"
) -> str:
    """
    Format a bootstrap summary as text.

    Parameters
    ----------
    summary : DataFrame
        Output of BootstrapResult.to_frame(): one row per statistic with
        original, bias, std_error, ci_lower and ci_upper columns.
    """
    lines = [
        "=" * 72,
        title.center(72),
        "=" * 72,
        "",
        f"{'Statistic':<20} {'Original':>10} {'Bias':>10} {'Std.Err':>10}   Percentile CI",
        "-" * 72,
    ]

    for name, row in summary.iterrows():
        lines.append(
            f"{str(name)[:20]:<20} {row['original']:>10.4f} {row['bias']:>10.4f} "
            f"{row['std_error']:>10.4f}   [{row['ci_lower']:.4f}, {row['ci_upper']:.4f}]"
        )

    lines.extend(["", "=" * 72])

    return "\n".join(lines)


def format_coefficient_bootstrap_report(
    table: pd.DataFrame,
    title: str = "Formula vs Bootstrap Standard Errors"
) -> str:
    """
    Format the output of bootstrap_coefficients() as text.

    Parameters
    ----------
    table : DataFrame
        One row per term with estimate, formula_se, bootstrap_se, ci_lower
        and ci_upper columns.
    """
    lines = [
        "=" * 72,
        title.center(72),
        "=" * 72,
        "",
        f"{'Term':<24} {'Estimate':>10} {'Formula SE':>11} {'Boot SE':>10}   Percentile CI",
        "-" * 72,
    ]

    for term, row in table.iterrows():
        lines.append(
            f"{str(term)[:24]:<24} {row['estimate']:>10.4f} {row['formula_se']:>11.4f} "
            f"{row['bootstrap_se']:>10.4f}   [{row['ci_lower']:.4f}, {row['ci_upper']:.4f}]"
        )

    lines.extend(["", "=" * 72])

    return "\n".join(lines)
