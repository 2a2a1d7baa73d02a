"""The analysis as one ordered run, from CSV to fitted models."""

import logging
from dataclasses import dataclass

import pandas as pd

import config
from cleaning import group_averages, impute_scores, normalize
from loader import load_games
from modeling import fit_models
from rankings import aggregate_ratings, aggregate_sales, combine_rankings, rank_ratings, rank_sales

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    """Every intermediate table of a run, in the order they were produced."""
    raw: pd.DataFrame
    filtered: pd.DataFrame
    normalized: pd.DataFrame
    group_averages: pd.DataFrame
    imputed: pd.DataFrame
    sales: pd.DataFrame
    ratings: pd.DataFrame
    combined: pd.DataFrame
    models: dict


def run_pipeline(raw: pd.DataFrame,
                 min_year: int = config.MIN_YEAR,
                 min_platform_rows: int = config.MIN_PLATFORM_ROWS,
                 min_critic_count: int = config.MIN_CRITIC_COUNT,
                 legacy_or: bool = config.LEGACY_OR_FILTER,
                 fit: bool = True) -> PipelineResult:
    """
    Filters, normalizes and imputes `raw`, then aggregates, ranks and (with
    `fit=True`) fits the three regressions.
    """
    logger.info("Pipeline start: %d rows", len(raw))
    filtered, normalized = normalize(raw, min_year, min_platform_rows, config.USER_SCORE_SCALE, legacy_or)
    averages = group_averages(normalized)
    imputed = impute_scores(normalized, averages)

    sales = rank_sales(aggregate_sales(imputed))
    ratings = rank_ratings(aggregate_ratings(imputed, min_critic_count))
    combined = combine_rankings(sales, ratings)

    models = fit_models(combined, imputed) if fit else {}
    logger.info("Pipeline done: %d titles ranked, %d models", len(combined), len(models))
    return PipelineResult(
        raw=raw,
        filtered=filtered,
        normalized=normalized,
        group_averages=averages,
        imputed=imputed,
        sales=sales,
        ratings=ratings,
        combined=combined,
        models=models,
    )


def run_from_file(path=config.DATA_PATH, **kwargs) -> PipelineResult:
    """Loads the CSV at `path` and runs the whole pipeline on it."""
    return run_pipeline(load_games(path), **kwargs)
