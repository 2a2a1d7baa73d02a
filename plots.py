"""Descriptive plots and regression diagnostics.

Every function returns a matplotlib Figure so the same chart can be saved by
the analysis script or shown by the Streamlit app.
"""

import os

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pandas as pd
import scipy.stats as stats
import seaborn as sns

import config
from rankings import COMBINED_RANK, MEAN_CRITIC_SCORE, TOTAL_SALES
from schema import CRITIC_SCORE, GENRE, GLOBAL_SALES, NAME, PLATFORM, USER_SCORE

# Set visualization style
sns.set_style(config.PLOT_STYLE)
plt.rcParams['figure.figsize'] = config.FIGURE_SIZE


def sales_by_platform(df: pd.DataFrame):
    fig = plt.figure(figsize=(12, 8))
    platform_sales = df.groupby(PLATFORM)[GLOBAL_SALES].sum().sort_values(ascending=False)
    sns.barplot(x=platform_sales.values, y=platform_sales.index, hue=platform_sales.index,
                palette='viridis', legend=False)
    plt.title('Total Global Sales by Platform', fontsize=16)
    plt.xlabel('Total Global Sales (in millions)', fontsize=12)
    plt.ylabel('Platform', fontsize=12)
    plt.grid(axis='x', linestyle=':', alpha=0.7)
    return fig


def sales_by_genre(df: pd.DataFrame):
    fig = plt.figure(figsize=(12, 8))
    genre_sales = df.groupby(GENRE)[GLOBAL_SALES].sum().sort_values(ascending=False)
    sns.barplot(x=genre_sales.values, y=genre_sales.index, hue=genre_sales.index,
                palette='magma', legend=False)
    plt.title('Total Global Sales by Genre', fontsize=16)
    plt.xlabel('Total Global Sales (in millions)', fontsize=12)
    plt.ylabel('Genre', fontsize=12)
    plt.grid(axis='x', linestyle=':', alpha=0.7)
    return fig


def score_distributions(before: pd.DataFrame, after: pd.DataFrame):
    """Critic and user score histograms before and after imputation."""
    fig, axes = plt.subplots(1, 2, figsize=(14, 6))
    for ax, col in zip(axes, [CRITIC_SCORE, USER_SCORE]):
        sns.histplot(after[col].dropna(), bins=40, ax=ax, color='orange', alpha=0.5, label='After imputation')
        sns.histplot(before[col].dropna(), bins=40, ax=ax, color='steelblue', alpha=0.6, label='Before imputation')
        ax.set_title(f'Distribution of {col} (0-100)', fontsize=14)
        ax.set_xlabel(col, fontsize=12)
        ax.legend()
    plt.tight_layout()
    return fig


def score_boxplot(df: pd.DataFrame, by: str):
    """Critic scores per category of `by` (Platform or Genre), ordered by median."""
    fig = plt.figure(figsize=(14, 7))
    order = df.groupby(by)[CRITIC_SCORE].median().sort_values(ascending=False).index
    sns.boxplot(data=df, x=by, y=CRITIC_SCORE, order=order, color='lightsteelblue')
    plt.title(f'Critic Score by {by}', fontsize=16)
    plt.xlabel(by, fontsize=12)
    plt.ylabel('Critic Score', fontsize=12)
    plt.xticks(rotation=45, ha='right')
    plt.tight_layout()
    return fig


def critic_vs_user(df: pd.DataFrame):
    fig = plt.figure(figsize=(10, 8))
    sns.scatterplot(data=df, x=CRITIC_SCORE, y=USER_SCORE, alpha=0.4)
    plt.title('Critic Score vs User Score', fontsize=16)
    plt.xlabel('Critic Score', fontsize=12)
    plt.ylabel('User Score (rescaled to 0-100)', fontsize=12)
    return fig


def top_ranked(combined: pd.DataFrame, n: int = config.TOP_N):
    """Best titles of the combined ranking with their sales and critic score."""
    top = combined.nsmallest(n, COMBINED_RANK)
    fig, axes = plt.subplots(1, 2, figsize=(16, 7), sharey=True)
    sns.barplot(x=TOTAL_SALES, y=NAME, data=top, ax=axes[0], color='seagreen')
    axes[0].set_title('Total Global Sales', fontsize=14)
    axes[0].set_xlabel('Sales (in millions)', fontsize=12)
    axes[0].set_ylabel('Game Title', fontsize=12)
    sns.barplot(x=MEAN_CRITIC_SCORE, y=NAME, data=top, ax=axes[1], color='slateblue')
    axes[1].set_title('Mean Critic Score', fontsize=14)
    axes[1].set_xlabel('Critic Score', fontsize=12)
    axes[1].set_ylabel('')
    fig.suptitle(f'Top {n} Titles by Combined Sales and Rating Rank', fontsize=16)
    plt.tight_layout()
    return fig


def model_diagnostics(fit):
    """
    Regression diagnostics for a fitted model:
    - Residuals vs fitted values: linearity and homoscedasticity.
    - Normal Q-Q plot of residuals.
    - Residual histogram.
    - Observed vs fitted values.
    """
    observed = fit.observations['observed']
    fitted = fit.observations['fitted']
    residuals = fit.observations['residual']

    fig, axes = plt.subplots(2, 2, figsize=(14, 12))

    sns.scatterplot(x=fitted, y=residuals, ax=axes[0, 0], alpha=0.6)
    axes[0, 0].axhline(y=0, color='r', linestyle='--', linewidth=2)
    axes[0, 0].set_title('Residual Plot (Fitted vs. Residuals)', fontsize=14)
    axes[0, 0].set_xlabel('Fitted Critic Score', fontsize=12)
    axes[0, 0].set_ylabel('Residuals (Observed - Fitted)', fontsize=12)
    axes[0, 0].grid(True, linestyle=':', alpha=0.7)

    stats.probplot(residuals, plot=axes[0, 1])
    axes[0, 1].set_title('Normal Q-Q Plot of Residuals', fontsize=14)
    axes[0, 1].set_xlabel('Theoretical Quantiles', fontsize=12)
    axes[0, 1].set_ylabel('Ordered Residuals', fontsize=12)

    sns.histplot(residuals, kde=bool(residuals.std() > 0), ax=axes[1, 0], color='skyblue', bins=50)
    axes[1, 0].set_title('Distribution of Residuals', fontsize=14)
    axes[1, 0].set_xlabel('Residuals', fontsize=12)
    axes[1, 0].set_ylabel('Frequency', fontsize=12)
    axes[1, 0].axvline(residuals.mean(), color='navy', linestyle='--', label=f'Mean: {residuals.mean():.3f}')
    axes[1, 0].legend()
    axes[1, 0].grid(True, linestyle=':', alpha=0.7)

    sns.scatterplot(x=observed, y=fitted, ax=axes[1, 1], alpha=0.6, color='green')
    axes[1, 1].plot([observed.min(), observed.max()], [observed.min(), observed.max()],
                    'r--', linewidth=2, label='Perfect Fit')
    axes[1, 1].set_title('Observed vs Fitted', fontsize=14)
    axes[1, 1].set_xlabel('Observed', fontsize=12)
    axes[1, 1].set_ylabel('Fitted', fontsize=12)
    axes[1, 1].legend()
    axes[1, 1].grid(True, linestyle=':', alpha=0.7)

    fig.suptitle(f'Diagnostics: {fit.formula}', fontsize=16)
    plt.tight_layout()
    return fig


def coefficient_plot(fit):
    """Estimates with 95% confidence intervals, intercept left out."""
    coefs = fit.coefficients.drop(index='Intercept', errors='ignore').sort_values('coef')
    fig = plt.figure(figsize=(10, max(4, 0.4 * len(coefs))))
    plt.errorbar(coefs['coef'], coefs.index, xerr=1.96 * coefs['std_err'], fmt='o', color='darkblue', capsize=3)
    plt.axvline(0, color='r', linestyle='--', linewidth=1)
    plt.title(f'Coefficients: {fit.formula}', fontsize=14)
    plt.xlabel('Estimate (critic score points)', fontsize=12)
    plt.grid(axis='x', linestyle=':', alpha=0.7)
    plt.tight_layout()
    return fig


def save_figure(fig, name: str, out_dir: str = config.FIGURE_DIR) -> str:
    """Writes `fig` as a PNG under `out_dir` and closes it."""
    os.makedirs(out_dir, exist_ok=True)
    path = os.path.join(out_dir, f'{name}.png')
    fig.savefig(path, dpi=150, bbox_inches='tight')
    plt.close(fig)
    return path
