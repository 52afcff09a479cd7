#!/usr/bin/env python
"""
Bootstrap standard errors and confidence intervals.

This script produces:
1. Bootstrap estimate of the minimum-variance portfolio allocation alpha
   (standard error, bias and percentile / normal intervals)
2. Formula vs bootstrap standard errors for OLS coefficients, for a linear
   and a quadratic fit
3. Paired bootstrap comparison of the two fits' validation-set MSE

Usage:
    python scripts/bootstrap_analysis.py
    python scripts/bootstrap_analysis.py --n-boot 2000
    python scripts/bootstrap_analysis.py --data data/Auto.csv --response mpg --predictor horsepower
    python scripts/bootstrap_analysis.py --portfolio data/Portfolio.csv --output-dir figures/bootstrap
"""

import argparse
import sys
import warnings
from pathlib import Path

import matplotlib.pyplot as plt
import pandas as pd

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from statlab import (
    LinearRegressionModel,
    bootstrap,
    bootstrap_coefficients,
    format_bootstrap_report,
    format_coefficient_bootstrap_report,
    load_dataset,
    make_polynomial_data,
    make_portfolio,
    paired_bootstrap_mse_difference,
    polynomial_formula,
    portfolio_alpha,
    train_validation_split,
)
from statlab.config import PLOT_CONFIG
from statlab.plotting import plot_bootstrap_distribution

warnings.filterwarnings('ignore', category=FutureWarning)


def portfolio_analysis(portfolio: pd.DataFrame, n_boot: int, random_state: int, output_dir=None):
    """Bootstrap the portfolio allocation alpha."""
    print(f"\n{'='*70}")
    print(f"PORTFOLIO ALLOCATION (n={n_boot} resamples)")
    print(f"{'='*70}")

    result = bootstrap(portfolio, portfolio_alpha, n_boot=n_boot,
                       random_state=random_state, verbose=True)
    print(format_bootstrap_report(result.to_frame(), title="Bootstrap: portfolio alpha"))

    lower, upper = result.normal_interval()
    print(f"Normal interval: [{lower.iloc[0]:.4f}, {upper.iloc[0]:.4f}]")

    if output_dir is not None:
        fig = plot_bootstrap_distribution(result, output_path=Path(output_dir) / 'portfolio_alpha.png')
        plt.close(fig)

    return result


def coefficient_analysis(df: pd.DataFrame, response: str, predictor: str,
                         n_boot: int, random_state: int):
    """Compare formula and bootstrap standard errors for linear and quadratic fits."""
    print(f"\n{'='*70}")
    print("OLS COEFFICIENT STANDARD ERRORS")
    print(f"{'='*70}")

    tables = {}
    for degree in [1, 2]:
        formula = polynomial_formula(response, predictor, degree)
        table = bootstrap_coefficients(formula, df, n_boot=n_boot, random_state=random_state)
        print(format_coefficient_bootstrap_report(table, title=formula))
        tables[degree] = table

    return tables


def model_comparison(df: pd.DataFrame, response: str, predictor: str,
                     n_boot: int, random_state: int):
    """Paired bootstrap of validation MSE: linear vs quadratic."""
    print(f"\n{'='*70}")
    print("PAIRED COMPARISON: LINEAR vs QUADRATIC")
    print(f"{'='*70}")

    train, validation = train_validation_split(df, random_state=random_state)
    linear = LinearRegressionModel(polynomial_formula(response, predictor, 1)).fit(train)
    quadratic = LinearRegressionModel(polynomial_formula(response, predictor, 2)).fit(train)

    comparison = paired_bootstrap_mse_difference(
        validation[response].to_numpy(),
        linear.predict(validation),
        quadratic.predict(validation),
        n_boot=n_boot, random_state=random_state
    )

    print(f"MSE(linear) - MSE(quadratic): {comparison['difference']:.4f}")
    print(f"Bootstrap SE:                 {comparison['std_error']:.4f}")
    print(f"95% CI:                       [{comparison['ci_lower']:.4f}, {comparison['ci_upper']:.4f}]")
    print(f"P(linear better):             {comparison['prob_a_better']:.3f}")

    return comparison


def main():
    parser = argparse.ArgumentParser(
        description="Bootstrap standard errors and confidence intervals",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument('--n-boot', type=int, default=1000,
                        help='Number of bootstrap resamples (default: 1000)')
    parser.add_argument('--seed', type=int, default=1,
                        help='Random seed (default: 1)')
    parser.add_argument('--portfolio', type=str, default=None,
                        help='CSV with X and Y return columns (default: simulated)')
    parser.add_argument('--data', '-d', type=str, default=None,
                        help='CSV dataset for the coefficient analysis (default: simulated)')
    parser.add_argument('--response', type=str, default='y',
                        help='Response column (default: y)')
    parser.add_argument('--predictor', type=str, default='x',
                        help='Predictor column (default: x)')
    parser.add_argument('--skip-comparison', action='store_true',
                        help='Skip the paired model comparison')
    parser.add_argument('--output-dir', type=str, default=None,
                        help='Directory for the bootstrap histogram')
    args = parser.parse_args()

    if args.output_dir:
        plt.style.use(PLOT_CONFIG['style'])

    if args.portfolio is None:
        portfolio = make_portfolio(random_state=args.seed)
        print(f"Simulated {len(portfolio)} portfolio returns")
    else:
        portfolio = load_dataset(args.portfolio, columns=['X', 'Y'])
        print(f"Loaded {len(portfolio)} portfolio returns from {args.portfolio}")

    if args.data is None:
        df = make_polynomial_data(random_state=args.seed)
        df = df.rename(columns={'x': args.predictor, 'y': args.response})
        print(f"Simulated {len(df)} rows from a quadratic model")
    else:
        df = load_dataset(args.data, columns=[args.response, args.predictor])
        print(f"Loaded {len(df)} complete rows from {args.data}")

    portfolio_analysis(portfolio, args.n_boot, args.seed, args.output_dir)
    coefficient_analysis(df, args.response, args.predictor, args.n_boot, args.seed)

    if not args.skip_comparison:
        model_comparison(df, args.response, args.predictor, args.n_boot, args.seed)

    print("\nBootstrap analysis complete!")


if __name__ == '__main__':
    main()
