"""
Plots for regression fits, diagnostics, cross-validation and bootstrap.

Each function draws onto ``ax`` when given (or a new figure otherwise),
returns the Figure, and saves it when ``output_path`` is set.
"""

from pathlib import Path
from typing import Dict, Optional, Union

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
import seaborn as sns
from matplotlib.ticker import MaxNLocator
from scipy import stats
from statsmodels.nonparametric.smoothers_lowess import lowess

from .bootstrap import BootstrapResult
from .config import PLOT_CONFIG, DIAGNOSTIC_CONFIG, BOOTSTRAP_CONFIG
from .diagnostics import influence_frame
from .linear_model import LinearRegressionModel

COLORS = PLOT_CONFIG['colors']


def _get_ax(ax: Optional[plt.Axes], figsize=PLOT_CONFIG['figsize']):
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure
    return fig, ax


def save_figure(fig: plt.Figure, output_path: Union[str, Path]) -> Path:
    """Save a figure, creating parent directories as needed."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(output_path, dpi=PLOT_CONFIG['dpi'], bbox_inches='tight')
    print(f"Saved: {output_path}")
    return output_path


def _label_extremes(ax: plt.Axes, x, y, score, labels, n: int = PLOT_CONFIG['n_labels']) -> None:
    """Annotate the ``n`` points with the largest ``score``."""
    if n <= 0:
        return
    order = np.argsort(np.asarray(score))[::-1][:n]
    for i in order:
        ax.annotate(str(labels[i]), (x[i], y[i]), fontsize=8,
                    xytext=(3, 3), textcoords='offset points')


def _add_lowess(ax: plt.Axes, x, y) -> None:
    smoothed = lowess(np.asarray(y), np.asarray(x), frac=2.0 / 3.0)
    ax.plot(smoothed[:, 0], smoothed[:, 1], color=COLORS['highlight'], linewidth=1.5)


def plot_fit(
    model: LinearRegressionModel,
    data: pd.DataFrame,
    predictor: str,
    alpha: float = BOOTSTRAP_CONFIG['alpha'],
    ax: Optional[plt.Axes] = None,
    output_path: Optional[str] = None
) -> plt.Figure:
    """
    Scatter the response against one predictor with the fitted curve and
    its confidence band.

    The model must depend on ``predictor`` only (polynomial terms allowed). The
    vertical axis is the left-hand side of the formula, transformed or not.
    """
    fig, ax = _get_ax(ax)

    x = data[predictor].to_numpy(dtype=float)
    y = model.response_values(data).to_numpy(dtype=float)
    grid = pd.DataFrame({predictor: np.linspace(x.min(), x.max(), 200)})
    band = model.predict_interval(grid, kind='confidence', alpha=alpha)

    ax.scatter(x, y, alpha=0.5, c=COLORS['primary'], s=30, edgecolors='white', linewidth=0.5)
    ax.plot(grid[predictor], band['mean'], color=COLORS['secondary'], linewidth=2, label='Fit')
    ax.fill_between(grid[predictor], band['lower'], band['upper'],
                    color=COLORS['secondary'], alpha=0.2,
                    label=f'{100 * (1 - alpha):.0f}% confidence band')

    ax.set_xlabel(predictor, fontsize=12)
    ax.set_ylabel(model.response_, fontsize=12)
    ax.set_title(model.formula, fontsize=13, fontweight='bold')
    ax.legend()

    if output_path:
        save_figure(fig, output_path)
    return fig


def plot_residuals_vs_fitted(
    model: LinearRegressionModel,
    ax: Optional[plt.Axes] = None,
    output_path: Optional[str] = None
) -> plt.Figure:
    """Residuals against fitted values with a lowess smooth."""
    fig, ax = _get_ax(ax)
    frame = influence_frame(model)

    ax.scatter(frame['fitted'], frame['residual'], alpha=0.6, c=COLORS['primary'],
               s=25, edgecolors='white', linewidth=0.5)
    ax.axhline(0.0, color='k', linestyle='--', alpha=0.5)
    _add_lowess(ax, frame['fitted'], frame['residual'])
    _label_extremes(ax, frame['fitted'].to_numpy(), frame['residual'].to_numpy(),
                    frame['residual'].abs(), frame.index)

    ax.set_xlabel('Fitted values')
    ax.set_ylabel('Residuals')
    ax.set_title('Residuals vs Fitted', fontweight='bold')

    if output_path:
        save_figure(fig, output_path)
    return fig


def plot_qq(
    model: LinearRegressionModel,
    ax: Optional[plt.Axes] = None,
    output_path: Optional[str] = None
) -> plt.Figure:
    """Normal Q-Q plot of the standardized residuals."""
    fig, ax = _get_ax(ax)
    frame = influence_frame(model)

    (theoretical, ordered), (slope, intercept, _) = stats.probplot(
        frame['standardized_residual'], dist='norm'
    )
    ax.scatter(theoretical, ordered, alpha=0.6, c=COLORS['primary'], s=25,
               edgecolors='white', linewidth=0.5)
    ax.plot(theoretical, slope * theoretical + intercept, 'k--', alpha=0.6)

    ax.set_xlabel('Theoretical quantiles')
    ax.set_ylabel('Standardized residuals')
    ax.set_title('Normal Q-Q', fontweight='bold')

    if output_path:
        save_figure(fig, output_path)
    return fig


def plot_scale_location(
    model: LinearRegressionModel,
    ax: Optional[plt.Axes] = None,
    output_path: Optional[str] = None
) -> plt.Figure:
    """Square root of |standardized residuals| against fitted values."""
    fig, ax = _get_ax(ax)
    frame = influence_frame(model)
    root = np.sqrt(frame['standardized_residual'].abs())

    ax.scatter(frame['fitted'], root, alpha=0.6, c=COLORS['primary'], s=25,
               edgecolors='white', linewidth=0.5)
    _add_lowess(ax, frame['fitted'], root)

    ax.set_xlabel('Fitted values')
    ax.set_ylabel(r'$\sqrt{|\mathrm{Standardized\ residuals}|}$')
    ax.set_title('Scale-Location', fontweight='bold')

    if output_path:
        save_figure(fig, output_path)
    return fig


def plot_residuals_vs_leverage(
    model: LinearRegressionModel,
    ax: Optional[plt.Axes] = None,
    output_path: Optional[str] = None
) -> plt.Figure:
    """Standardized residuals against leverage with Cook's distance contours."""
    fig, ax = _get_ax(ax)
    frame = influence_frame(model)
    n_params = len(model.params)

    ax.scatter(frame['leverage'], frame['standardized_residual'], alpha=0.6,
               c=COLORS['primary'], s=25, edgecolors='white', linewidth=0.5)
    ax.axhline(0.0, color='k', linestyle='--', alpha=0.5)
    _label_extremes(ax, frame['leverage'].to_numpy(), frame['standardized_residual'].to_numpy(),
                    frame['cooks_distance'], frame.index)

    ylim = ax.get_ylim()

    # Cook's distance D satisfies r^2 = D * p * (1 - h) / h
    h = np.linspace(max(frame['leverage'].min(), 1e-3), frame['leverage'].max(), 100)
    for level in DIAGNOSTIC_CONFIG['cooks_contours']:
        r = np.sqrt(level * n_params * (1.0 - h) / h)
        ax.plot(h, r, color=COLORS['highlight'], linestyle=':', linewidth=1)
        ax.plot(h, -r, color=COLORS['highlight'], linestyle=':', linewidth=1)
        ax.annotate(f"Cook's D = {level}", (h[-1], r[-1]), fontsize=8,
                    color=COLORS['highlight'])
    ax.set_ylim(ylim)

    ax.set_xlabel('Leverage')
    ax.set_ylabel('Standardized residuals')
    ax.set_title('Residuals vs Leverage', fontweight='bold')

    if output_path:
        save_figure(fig, output_path)
    return fig


def plot_diagnostics(
    model: LinearRegressionModel,
    output_path: Optional[str] = None
) -> plt.Figure:
    """The four standard regression diagnostic plots in a 2x2 panel."""
    fig, axes = plt.subplots(2, 2, figsize=PLOT_CONFIG['panel_figsize'])

    plot_residuals_vs_fitted(model, ax=axes[0, 0])
    plot_qq(model, ax=axes[0, 1])
    plot_scale_location(model, ax=axes[1, 0])
    plot_residuals_vs_leverage(model, ax=axes[1, 1])

    fig.suptitle(model.formula, fontsize=14, fontweight='bold')

    if output_path:
        save_figure(fig, output_path)
    return fig


def plot_cv_curve(
    errors: Union[pd.DataFrame, Dict[str, pd.DataFrame]],
    ax: Optional[plt.Axes] = None,
    title: str = 'Cross-validated error by polynomial degree',
    output_path: Optional[str] = None
) -> plt.Figure:
    """
    Estimated test MSE against polynomial degree.

    Parameters
    ----------
    errors : DataFrame or dict of DataFrame
        Output of cv_error_by_degree(); a dict draws one labelled line per
        entry (e.g. one per method or per seed).
    """
    fig, ax = _get_ax(ax)

    curves = errors if isinstance(errors, dict) else {'CV error': errors}
    palette = sns.color_palette(n_colors=max(len(curves), 1))

    for color, (label, frame) in zip(palette, curves.items()):
        ax.plot(frame['degree'], frame['mse'], marker='o', color=color, label=label)
        if 'std' in frame.columns and frame['std'].notna().any():
            ax.fill_between(frame['degree'], frame['mse'] - frame['std'],
                            frame['mse'] + frame['std'], color=color, alpha=0.15)

    ax.set_xlabel('Degree of polynomial', fontsize=12)
    ax.set_ylabel('Mean squared error', fontsize=12)
    ax.set_title(title, fontsize=13, fontweight='bold')
    ax.xaxis.set_major_locator(MaxNLocator(integer=True))
    if len(curves) > 1:
        ax.legend()

    if output_path:
        save_figure(fig, output_path)
    return fig


def plot_bootstrap_distribution(
    result: BootstrapResult,
    column: Optional[str] = None,
    alpha: float = BOOTSTRAP_CONFIG['alpha'],
    ax: Optional[plt.Axes] = None,
    output_path: Optional[str] = None
) -> plt.Figure:
    """
    Histogram of bootstrap estimates with the original estimate and the
    percentile interval marked.

    ``column`` selects the statistic component; defaults to the first.
    """
    fig, ax = _get_ax(ax)

    if column is None:
        column = result.draws.columns[0]
    if column not in result.draws.columns:
        raise ValueError(f"Unknown statistic '{column}'; choose from {list(result.draws.columns)}")

    draws = result.draws[column].dropna()
    lower, upper = result.percentile_interval(alpha)

    sns.histplot(draws, bins=30, kde=True, color=COLORS['primary'], ax=ax)
    ax.axvline(result.original[column], color=COLORS['secondary'], linewidth=2,
               label=f"Original = {result.original[column]:.4f}")
    ax.axvline(lower[column], color=COLORS['highlight'], linestyle='--',
               label=f"{100 * (1 - alpha):.0f}% CI")
    ax.axvline(upper[column], color=COLORS['highlight'], linestyle='--')

    ax.set_xlabel(str(column), fontsize=12)
    ax.set_title(
        f"Bootstrap distribution (n={result.n_boot}, SE={result.std_error[column]:.4f})",
        fontsize=13, fontweight='bold'
    )
    ax.legend()

    if output_path:
        save_figure(fig, output_path)
    return fig
