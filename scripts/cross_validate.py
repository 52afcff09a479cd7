"""
Cross-validated test error of polynomial regression fits.

Estimates the test MSE of polynomial fits of increasing degree with the
validation set approach, LOOCV and k-fold cross-validation, and selects the
degree with scikit-learn's GridSearchCV for comparison.

Usage:
    python scripts/cross_validate.py
    python scripts/cross_validate.py --data data/Auto.csv --response mpg --predictor horsepower
    python scripts/cross_validate.py --max-degree 10 --k 5
    python scripts/cross_validate.py --repeat-seeds 10 --output-dir figures/cv
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
    cv_error_by_degree,
    format_cv_report,
    load_dataset,
    make_polynomial_data,
    select_polynomial_degree,
)
from statlab.config import PLOT_CONFIG
from statlab.plotting import plot_cv_curve

warnings.filterwarnings('ignore', category=FutureWarning)


def load_data(data_path: str, response: str, predictor: str,
              n_samples: int, random_state: int) -> pd.DataFrame:
    """Load the response/predictor columns, or simulate a quadratic dataset."""
    if data_path is None:
        df = make_polynomial_data(n_samples=n_samples, random_state=random_state)
        df = df.rename(columns={'x': predictor, 'y': response})
        print(f"Simulated {len(df)} rows from a quadratic model")
    else:
        df = load_dataset(data_path, columns=[response, predictor])
        print(f"Loaded {len(df)} complete rows from {data_path}")
    return df


def main():
    parser = argparse.ArgumentParser(
        description="Estimate test error of polynomial fits by cross-validation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    parser.add_argument('--data', '-d', type=str, default=None,
                        help='Path to CSV dataset (default: simulated data)')
    parser.add_argument('--response', type=str, default='y',
                        help='Response column (default: y)')
    parser.add_argument('--predictor', type=str, default='x',
                        help='Predictor column (default: x)')
    parser.add_argument('--max-degree', type=int, default=5,
                        help='Highest polynomial degree (default: 5)')
    parser.add_argument('--k', type=int, default=10,
                        help='Number of folds for k-fold CV (default: 10)')
    parser.add_argument('--repeat-seeds', type=int, default=0,
                        help='Also repeat the validation set approach with this many seeds')
    parser.add_argument('--n-samples', type=int, default=100,
                        help='Rows to simulate when --data is not given (default: 100)')
    parser.add_argument('--seed', type=int, default=1,
                        help='Random seed (default: 1)')
    parser.add_argument('--output-dir', type=str, default=None,
                        help='Directory for the CV curve figure')

    args = parser.parse_args()

    if args.output_dir:
        plt.style.use(PLOT_CONFIG['style'])

    df = load_data(args.data, args.response, args.predictor, args.n_samples, args.seed)
    degrees = list(range(1, args.max_degree + 1))

    curves = {}
    for method, label in [('validation', 'Validation set'),
                          ('loocv', 'LOOCV'),
                          ('kfold', f'{args.k}-fold CV')]:
        print(f"\n{label}...")
        errors = cv_error_by_degree(
            df, args.response, args.predictor,
            degrees=degrees, method=method,
            n_splits=args.k, random_state=args.seed
        )
        print(format_cv_report(errors, title=f"{label} MSE by degree"))
        curves[label] = errors

    if args.repeat_seeds > 0:
        print(f"\nValidation set approach repeated over {args.repeat_seeds} seeds...")
        seed_curves = {}
        for seed in range(1, args.repeat_seeds + 1):
            seed_curves[f'seed {seed}'] = cv_error_by_degree(
                df, args.response, args.predictor,
                degrees=degrees, method='validation', random_state=seed
            )
        spread = pd.concat(
            {name: frame.set_index('degree')['mse'] for name, frame in seed_curves.items()},
            axis=1
        )
        print(spread.round(4).to_string())

        if args.output_dir:
            fig = plot_cv_curve(seed_curves, title='Validation set MSE across splits',
                                output_path=Path(args.output_dir) / 'validation_repeats.png')
            plt.close(fig)

    print("\nGrid search over degree (scikit-learn)...")
    _, best_degree, cv_table = select_polynomial_degree(
        df[[args.predictor]], df[args.response],
        degrees=degrees, cv=args.k, random_state=args.seed
    )
    print(format_cv_report(cv_table, title="GridSearchCV MSE by degree"))
    print(f"Selected degree: {best_degree}")

    if args.output_dir:
        fig = plot_cv_curve(curves, output_path=Path(args.output_dir) / 'cv_error_by_degree.png')
        plt.close(fig)

    print("\nDone!")


if __name__ == '__main__':
    main()
