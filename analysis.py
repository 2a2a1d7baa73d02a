# Video game ratings & sales analysis: runs the whole pipeline once,
# prints the tables and writes the figures to config.FIGURE_DIR.
import logging
import sys

import pandas as pd

import config
import plots
from cleaning import missing_summary
from modeling import design_vif, significant_terms
from pipeline import run_from_file
from rankings import COMBINED_RANK, RATING_RANK, SALES_RANK, top_titles
from schema import GENRE, PLATFORM

logger = logging.getLogger(__name__)

pd.set_option('display.width', 140)
pd.set_option('display.max_columns', 20)


def main(path=config.DATA_PATH, out_dir=config.FIGURE_DIR) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    # Load and run
    try:
        result = run_from_file(path)
    except FileNotFoundError:
        print(f"Error: '{path}' not found. Set VGSALES_DATA or check the file path.")
        return 1
    print("Dataset loaded successfully with shape:", result.raw.shape)

    # Cleaning summary
    print("\n=== Rows per Stage ===")
    print(f"Raw: {len(result.raw)}  Year/platform filtered: {len(result.filtered)}  "
          f"Platforms kept: {result.filtered[PLATFORM].nunique()}")

    print("\n=== Missing Scores Before Imputation ===")
    print(missing_summary(result.normalized))
    print("\n=== Missing Scores After Imputation ===")
    print(missing_summary(result.imputed))

    # Rankings
    print("\n=== Top 10 Titles by Global Sales ===")
    print(top_titles(result.sales, SALES_RANK))
    print("\n=== Top 10 Titles by Mean Critic Score ===")
    print(top_titles(result.ratings, RATING_RANK))
    print("\n=== Top 10 Titles by Combined Rank ===")
    print(top_titles(result.combined, COMBINED_RANK))

    # Models
    for key, fit in result.models.items():
        print(f"\n=== OLS: {fit.formula} ===")
        print(fit.coefficients.round(4))
        print("Metrics:", {k: round(float(v), 4) for k, v in fit.metrics.items()})
        print("Significant terms (p < 0.05):", significant_terms(fit).index.tolist())
        if key != "sales":
            print("Highest VIF:")
            print(design_vif(fit).head(5))

    # Figures
    figures = {
        'sales_by_platform': plots.sales_by_platform(result.imputed),
        'sales_by_genre': plots.sales_by_genre(result.imputed),
        'score_distributions': plots.score_distributions(result.normalized, result.imputed),
        'critic_score_by_platform': plots.score_boxplot(result.imputed, PLATFORM),
        'critic_score_by_genre': plots.score_boxplot(result.imputed, GENRE),
        'critic_vs_user': plots.critic_vs_user(result.imputed),
        'top_combined': plots.top_ranked(result.combined),
    }
    for key, fit in result.models.items():
        figures[f'diagnostics_{key}'] = plots.model_diagnostics(fit)
        figures[f'coefficients_{key}'] = plots.coefficient_plot(fit)
    for name, fig in figures.items():
        logger.info("Saved %s", plots.save_figure(fig, name, out_dir))

    print(f"\n{len(figures)} figures saved to {out_dir}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
