"""Per-title aggregates and the sales / rating / combined rankings."""

import logging

import numpy as np
import pandas as pd

import config
from schema import CRITIC_COUNT, CRITIC_SCORE, GLOBAL_SALES, NAME, require_columns

logger = logging.getLogger(__name__)

TOTAL_SALES = "total_sales"
SALES_RANK = "sales_rank"
MEAN_CRITIC_SCORE = "mean_critic_score"
CRITIC_ROWS = "critic_rows"
RATING_RANK = "rating_rank"
COMBINED = "combined"
COMBINED_RANK = "combined_rank"


# --- Aggregator ---

def aggregate_sales(df: pd.DataFrame) -> pd.DataFrame:
    """
    Total global sales per title, summed over all of its platforms.

    Missing sales count as zero; rows without a title are left out.
    """
    require_columns(df, [NAME, GLOBAL_SALES], "aggregate_sales")
    sales = (df.groupby(NAME)[GLOBAL_SALES]
             .sum()
             .rename(TOTAL_SALES)
             .reset_index())
    logger.info("Sales aggregate: %d titles", len(sales))
    return sales


def aggregate_ratings(df: pd.DataFrame, min_critic_count: int = config.MIN_CRITIC_COUNT) -> pd.DataFrame:
    """
    Mean critic score per title over rows with more than `min_critic_count`
    critic reviews, with the number of rows behind each mean.

    Titles with no such row (or only null scores) do not appear.
    """
    require_columns(df, [NAME, CRITIC_SCORE, CRITIC_COUNT], "aggregate_ratings")
    enough_reviews = (df[CRITIC_COUNT] > min_critic_count).fillna(False).astype(bool)
    reviewed = df[enough_reviews & df[CRITIC_SCORE].notna()]
    ratings = (reviewed.groupby(NAME)[CRITIC_SCORE]
               .agg(["mean", "count"])
               .rename(columns={"mean": MEAN_CRITIC_SCORE, "count": CRITIC_ROWS})
               .reset_index())
    ratings[MEAN_CRITIC_SCORE] = ratings[MEAN_CRITIC_SCORE].astype(float)
    ratings[CRITIC_ROWS] = ratings[CRITIC_ROWS].astype(int)
    logger.info("Ratings aggregate: %d titles from %d rows with %s > %d",
                len(ratings), len(reviewed), CRITIC_COUNT, min_critic_count)
    return ratings


# --- Ranker ---

def rank_descending(table: pd.DataFrame, metric: str, rank_col: str) -> pd.DataFrame:
    """
    Sorts `table` by `metric`, highest first, and numbers the rows 1..N.

    The sort is stable, so tied values keep their input order. Aggregates come
    out of the group-by sorted by title, which makes ties alphabetical.
    """
    require_columns(table, [metric], "rank_descending")
    ranked = table.sort_values(metric, ascending=False, kind="mergesort").reset_index(drop=True)
    ranked[rank_col] = np.arange(1, len(ranked) + 1)
    return ranked


def rank_sales(sales: pd.DataFrame) -> pd.DataFrame:
    return rank_descending(sales, TOTAL_SALES, SALES_RANK)


def rank_ratings(ratings: pd.DataFrame) -> pd.DataFrame:
    return rank_descending(ratings, MEAN_CRITIC_SCORE, RATING_RANK)


def combine_rankings(sales: pd.DataFrame, ratings: pd.DataFrame) -> pd.DataFrame:
    """
    Joins the ranked sales and rating tables on title and ranks the sum of the
    two ranks, lowest first (1 = best on both).

    Titles missing from either table are dropped. Ties on the summed rank keep
    the order of the sales ranking.
    """
    require_columns(sales, [NAME, SALES_RANK], "combine_rankings")
    require_columns(ratings, [NAME, RATING_RANK], "combine_rankings")
    merged = sales.merge(ratings, on=NAME, how="inner")
    merged[COMBINED] = merged[SALES_RANK] + merged[RATING_RANK]
    combined = merged.sort_values(COMBINED, ascending=True, kind="mergesort").reset_index(drop=True)
    combined[COMBINED_RANK] = np.arange(1, len(combined) + 1)
    logger.info("Combined ranking: %d titles (%d by sales, %d by rating)",
                len(combined), len(sales), len(ratings))
    return combined


def top_titles(table: pd.DataFrame, rank_col: str, n: int = config.TOP_N) -> pd.DataFrame:
    """The `n` best rows of a ranked table."""
    return table.nsmallest(n, rank_col, keep="first").reset_index(drop=True)
