"""
Statistical modeling workflows for tabular data.

This package provides:
1. Ordinary least squares regression with coefficient tables, intervals
   and regression diagnostics.
2. Resampling estimates of test error: validation set, LOOCV and k-fold
   cross-validation.
3. The nonparametric bootstrap for standard errors and confidence
   intervals of arbitrary statistics.
"""

from .linear_model import LinearRegressionModel, polynomial_formula, compare_nested_models
from .datasets import (
    load_dataset,
    describe_dataset,
    make_portfolio,
    make_polynomial_data,
    make_linear_data,
    train_validation_split
)
from .diagnostics import (
    influence_frame,
    flag_observations,
    variance_inflation_factors,
    heteroscedasticity_test,
    residual_summary
)
from .cross_validation import (
    CVResult,
    validation_set_mse,
    repeated_validation_mse,
    loocv_mse,
    kfold_mse,
    cv_error_by_degree,
    BinnedStratifiedKFold
)
from .bootstrap import (
    BootstrapResult,
    bootstrap,
    portfolio_alpha,
    coefficient_statistic,
    bootstrap_coefficients,
    paired_bootstrap_mse_difference
)
from .model_selection import (
    PolynomialRegression,
    MSE_SCORER,
    select_polynomial_degree
)
from .evaluation import (
    regression_metrics,
    format_regression_report,
    format_coefficient_report,
    format_cv_report,
    format_bootstrap_report,
    format_coefficient_bootstrap_report
)
from .config import (
    DATASET_CONFIG,
    SPLIT_CONFIG,
    CV_CONFIG,
    BOOTSTRAP_CONFIG,
    DIAGNOSTIC_CONFIG,
    PLOT_CONFIG,
    PATHS
)

__all__ = [
    # Models
    'LinearRegressionModel',
    'polynomial_formula',
    'compare_nested_models',
    # Data
    'load_dataset',
    'describe_dataset',
    'make_portfolio',
    'make_polynomial_data',
    'make_linear_data',
    'train_validation_split',
    # Diagnostics
    'influence_frame',
    'flag_observations',
    'variance_inflation_factors',
    'heteroscedasticity_test',
    'residual_summary',
    # Cross-validation
    'CVResult',
    'validation_set_mse',
    'repeated_validation_mse',
    'loocv_mse',
    'kfold_mse',
    'cv_error_by_degree',
    'BinnedStratifiedKFold',
    # Bootstrap
    'BootstrapResult',
    'bootstrap',
    'portfolio_alpha',
    'coefficient_statistic',
    'bootstrap_coefficients',
    'paired_bootstrap_mse_difference',
    # Model selection
    'PolynomialRegression',
    'MSE_SCORER',
    'select_polynomial_degree',
    # Reports
    'regression_metrics',
    'format_regression_report',
    'format_coefficient_report',
    'format_cv_report',
    'format_bootstrap_report',
    'format_coefficient_bootstrap_report',
    # Configuration
    'DATASET_CONFIG',
    'SPLIT_CONFIG',
    'CV_CONFIG',
    'BOOTSTRAP_CONFIG',
    'DIAGNOSTIC_CONFIG',
    'PLOT_CONFIG',
    'PATHS'
]
