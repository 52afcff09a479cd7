"""
Fit a linear regression model and print its coefficient report.

Fits an OLS model from a formula, prints coefficients, fit statistics and
diagnostics, and optionally saves the fitted model.

Usage:
    python scripts/fit_linear_model.py
    python scripts/fit_linear_model.py --data data/Auto.csv --formula "mpg ~ horsepower"
    python scripts/fit_linear_model.py --formula "y ~ x1 + x2" --save
    python scripts/fit_linear_model.py --save outputs/models/auto_lm.pkl
    python scripts/fit_linear_model.py --predict-at 1.5 --predictor x
"""

import argparse
import sys
import warnings
from pathlib import Path

import pandas as pd

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from statlab import (
    LinearRegressionModel,
    load_dataset,
    make_linear_data,
    describe_dataset,
    flag_observations,
    variance_inflation_factors,
    heteroscedasticity_test,
)
from statlab.config import DIAGNOSTIC_CONFIG, PATHS

warnings.filterwarnings('ignore', category=FutureWarning)


def load_data(data_path: str = None, n_samples: int = 100, random_state: int = 1) -> pd.DataFrame:
    """Load a CSV dataset, or simulate a linear regression dataset."""
    if data_path is None:
        df = make_linear_data(n_samples=n_samples, random_state=random_state)
        print(f"Simulated {len(df)} rows (columns: {', '.join(df.columns)})")
    else:
        df = load_dataset(data_path)
        print(f"Loaded {len(df)} complete rows from {data_path}")
    return df


def main():
    parser = argparse.ArgumentParser(
        description="Fit a linear regression model",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    parser.add_argument(
        '--data', '-d', type=str, default=None,
        help='Path to CSV dataset (default: simulated data)'
    )
    parser.add_argument(
        '--formula', '-f', type=str, default='y ~ x1 + x2',
        help='Model formula (default: "y ~ x1 + x2")'
    )
    parser.add_argument(
        '--n-samples', type=int, default=100,
        help='Rows to simulate when --data is not given (default: 100)'
    )
    parser.add_argument(
        '--describe', action='store_true',
        help='Print a summary of each column first'
    )
    parser.add_argument(
        '--predictor', type=str, default=None,
        help='Predictor used with --predict-at'
    )
    parser.add_argument(
        '--predict-at', type=float, nargs='+', default=None,
        help='Predictor values at which to print confidence and prediction intervals'
    )
    parser.add_argument(
        '--save', type=str, nargs='?', const=PATHS['default_model_output'], default=None,
        help=f"Save the fitted model (default path: {PATHS['default_model_output']})"
    )
    parser.add_argument(
        '--seed', type=int, default=1,
        help='Random seed for simulated data (default: 1)'
    )

    args = parser.parse_args()

    df = load_data(args.data, n_samples=args.n_samples, random_state=args.seed)

    if args.describe:
        print("\nDATASET SUMMARY")
        print(describe_dataset(df).to_string())

    model = LinearRegressionModel(args.formula).fit(df, verbose=True)

    # Diagnostics
    flags = flag_observations(model)
    print("\nDIAGNOSTICS")
    print("-" * 40)
    print(f"Outliers:             {int(flags['outlier'].sum())}")
    print(f"High-leverage points: {int(flags['high_leverage'].sum())}")
    if len(model.params) > 1:
        het = heteroscedasticity_test(model)
        print(f"Breusch-Pagan p:      {het['lm_pvalue']:.4f}")
    if len(model.params) > 2:
        print("Variance inflation factors:")
        for term, vif in variance_inflation_factors(model).items():
            flag = "  (collinear)" if vif > DIAGNOSTIC_CONFIG['vif_warning'] else ""
            print(f"  {term:<20} {vif:.3f}{flag}")

    if args.predict_at is not None:
        if args.predictor is None:
            parser.error("--predict-at requires --predictor")
        new_data = pd.DataFrame({args.predictor: args.predict_at})
        for kind in ['confidence', 'prediction']:
            print(f"\n{kind.capitalize()} intervals:")
            print(model.predict_interval(new_data, kind=kind).assign(
                **{args.predictor: args.predict_at}
            ).to_string(index=False))

    if args.save:
        model.save(args.save)

    print("\nDone!")


if __name__ == '__main__':
    main()
