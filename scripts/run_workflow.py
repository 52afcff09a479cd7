"""
Run the complete regression workflow on one dataset.

Fits the model, prints coefficients, fit statistics and diagnostics,
estimates test error by cross-validation, bootstraps the coefficient
standard errors, and writes diagnostic figures.

Usage:
    python scripts/run_workflow.py
    python scripts/run_workflow.py --data data/Auto.csv --formula "mpg ~ horsepower + I(horsepower ** 2)"
    python scripts/run_workflow.py --n-boot 200 --k 5 --output-dir outputs/workflow
"""

import argparse
import sys
import warnings
from pathlib import Path

import matplotlib.pyplot as plt

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from statlab import load_dataset, make_polynomial_data
from statlab.config import PATHS, PLOT_CONFIG
from statlab.workflow import run_regression_workflow

warnings.filterwarnings('ignore', category=FutureWarning)


def main():
    parser = argparse.ArgumentParser(
        description="Run the regression workflow",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument('--data', '-d', type=str, default=None,
                        help='Path to CSV dataset (default: simulated data)')
    parser.add_argument('--formula', '-f', type=str, default='y ~ x + I(x ** 2)',
                        help='Model formula (default: "y ~ x + I(x ** 2)")')
    parser.add_argument('--n-boot', type=int, default=1000,
                        help='Bootstrap resamples (default: 1000)')
    parser.add_argument('--k', type=int, default=10,
                        help='Folds for k-fold CV (default: 10)')
    parser.add_argument('--seed', type=int, default=1,
                        help='Random seed (default: 1)')
    parser.add_argument('--output-dir', type=str, default=None,
                        help='Directory for figures (default: no figures)')
    parser.add_argument('--save-model', type=str, nargs='?', const=PATHS['default_model_output'],
                        default=None, help='Save the fitted model (default path when no value is given)')
    args = parser.parse_args()

    if args.output_dir:
        plt.style.use(PLOT_CONFIG['style'])

    if args.data is None:
        df = make_polynomial_data(random_state=args.seed)
        print(f"Simulated {len(df)} rows from a quadratic model")
    else:
        df = load_dataset(args.data)
        print(f"Loaded {len(df)} complete rows from {args.data}")

    results = run_regression_workflow(
        df, args.formula,
        output_dir=args.output_dir,
        n_boot=args.n_boot,
        n_splits=args.k,
        random_state=args.seed
    )

    if args.save_model:
        results['model'].save(args.save_model)

    print("\nWorkflow complete!")


if __name__ == '__main__':
    main()
