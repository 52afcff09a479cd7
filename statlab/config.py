"""
Configuration and defaults for the statistical modeling workflows.

This module contains the default settings shared by the dataset helpers,
cross-validation, bootstrap and plotting modules.
"""

from typing import Dict, List, Any

# Seed used throughout the labs so that splits and resamples are repeatable
RANDOM_STATE = 1

# Dataset loading configuration
DATASET_CONFIG: Dict[str, Any] = {
    'na_values': ['?', 'NA', ''],  # Auto data codes missing horsepower as '?'
    'dropna': True,
    'portfolio_columns': ['X', 'Y'],
    'portfolio_var_x': 1.0,
    'portfolio_var_y': 1.25,
    'portfolio_cov_xy': 0.5,
}

# Validation-set split configuration
SPLIT_CONFIG: Dict[str, Any] = {
    'test_size': 0.5,
    'random_state': RANDOM_STATE,
}

# Cross-validation configuration
CV_CONFIG: Dict[str, Any] = {
    'n_splits': 10,
    'shuffle': True,
    'random_state': RANDOM_STATE,
    'degrees': [1, 2, 3, 4, 5],
    'repeat_seeds': list(range(1, 11)),
    'n_bins': 5,
    'loocv_shortcut': True,
}

# Bootstrap configuration
BOOTSTRAP_CONFIG: Dict[str, Any] = {
    'n_boot': 1000,
    'random_state': RANDOM_STATE,
    'alpha': 0.05,
}

# Regression diagnostics thresholds
DIAGNOSTIC_CONFIG: Dict[str, float] = {
    'studentized_threshold': 3.0,
    'leverage_multiplier': 2.0,
    'cooks_contours': [0.5, 1.0],
    'vif_warning': 5.0,
}

# Plotting configuration
PLOT_CONFIG: Dict[str, Any] = {
    'style': 'seaborn-v0_8-whitegrid',
    'dpi': 150,
    'figsize': (8, 6),
    'panel_figsize': (12, 10),
    'n_labels': 3,  # Most extreme points annotated on diagnostic plots
    'colors': {
        'primary': '#1f77b4',
        'secondary': '#ff7f0e',
        'tertiary': '#2ca02c',
        'highlight': '#d62728',
    },
}

# File paths (relative to project root)
PATHS: Dict[str, str] = {
    'figures_dir': 'outputs/figures',
    'default_model_output': 'outputs/models/linear_model.pkl',
}

INTERVAL_KINDS: List[str] = ['confidence', 'prediction']
CV_METHODS: List[str] = ['kfold', 'loocv', 'validation']


def get_cv_config(custom_params: Dict[str, Any] = None) -> Dict[str, Any]:
    """
    Get cross-validation settings (defaults + custom).

    Parameters
    ----------
    custom_params : dict, optional
        Settings that override the defaults.

    Returns
    -------
    params : dict
        Combined settings dictionary.
    """
    params = CV_CONFIG.copy()

    if custom_params:
        params.update(custom_params)

    return params


def get_bootstrap_config(custom_params: Dict[str, Any] = None) -> Dict[str, Any]:
    """
    Get bootstrap settings (defaults + custom).

    Parameters
    ----------
    custom_params : dict, optional
        Settings that override the defaults.

    Returns
    -------
    params : dict
        Combined settings dictionary.
    """
    params = BOOTSTRAP_CONFIG.copy()

    if custom_params:
        params.update(custom_params)

    return params
