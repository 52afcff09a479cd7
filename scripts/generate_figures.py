"""
Generate regression figures.

Creates:
1. Fitted curve with confidence band (single-predictor formulas)
2. Residuals vs fitted
3. Normal Q-Q
4. Scale-location
5. Residuals vs leverage
6. The four diagnostics as one 2x2 panel

Usage:
    python scripts/generate_figures.py
    python scripts/generate_figures.py --data data/Auto.csv --formula "mpg ~ horsepower" --predictor horsepower
    python scripts/generate_figures.py --output-dir figures/diagnostics
"""

import argparse
import sys
from pathlib import Path

import matplotlib.pyplot as plt

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from statlab import LinearRegressionModel, load_dataset, make_polynomial_data
from statlab.config import PLOT_CONFIG, PATHS
from statlab.plotting import (
    plot_fit,
    plot_residuals_vs_fitted,
    plot_qq,
    plot_scale_location,
    plot_residuals_vs_leverage,
    plot_diagnostics,
)

# Style settings
plt.style.use(PLOT_CONFIG['style'])


def main():
    parser = argparse.ArgumentParser(description='Generate regression figures')
    parser.add_argument('--data', '-d', type=str, default=None,
                        help='Path to CSV dataset (default: simulated data)')
    parser.add_argument('--formula', '-f', type=str, default='y ~ x',
                        help='Model formula (default: "y ~ x")')
    parser.add_argument('--predictor', type=str, default='x',
                        help='Predictor for the fitted-curve plot (default: x)')
    parser.add_argument('--seed', type=int, default=1,
                        help='Random seed for simulated data (default: 1)')
    parser.add_argument('--output-dir', type=str, default=PATHS['figures_dir'],
                       help='Output directory for figures')
    args = parser.parse_args()

    # Create output directory
    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    print(f"Output directory: {output_dir}")

    if args.data is None:
        df = make_polynomial_data(random_state=args.seed)
        print(f"Simulated {len(df)} rows from a quadratic model")
    else:
        df = load_dataset(args.data)
        print(f"Loaded {len(df)} complete rows from {args.data}")

    model = LinearRegressionModel(args.formula).fit(df)
    print(f"Fitted: {model.formula} (R² = {model.fit_statistics()['r2']:.4f})")

    print("\n" + "=" * 60)
    print("Generating figures...")
    print("=" * 60)

    figures = [
        ('residuals_vs_fitted.png', plot_residuals_vs_fitted),
        ('qq.png', plot_qq),
        ('scale_location.png', plot_scale_location),
        ('residuals_vs_leverage.png', plot_residuals_vs_leverage),
        ('diagnostics.png', plot_diagnostics),
    ]

    if args.predictor in df.columns:
        fig = plot_fit(model, df, args.predictor, output_path=output_dir / 'fit.png')
        plt.close(fig)

    for filename, plot_func in figures:
        fig = plot_func(model, output_path=output_dir / filename)
        plt.close(fig)

    print("\n" + "=" * 60)
    print(f"All figures saved to: {output_dir}")
    print("=" * 60)


if __name__ == '__main__':
    main()
