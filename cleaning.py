"""Filtering, normalization and score imputation.

Stages run in a fixed order: year filter, platform filter, score
normalization, then imputation. Each function returns a new DataFrame.
"""

import logging

import numpy as np
import pandas as pd

import config
from schema import (
    CRITIC_SCORE,
    GROUP_KEYS,
    PLATFORM,
    REGIONAL_SALES,
    SCORE_FIELDS,
    TBD,
    USER_SCORE,
    YEAR,
    SchemaError,
    forbid_columns,
    require_columns,
)

logger = logging.getLogger(__name__)


# --- Filter / Normalizer ---

def filter_years(df: pd.DataFrame, min_year: int = config.MIN_YEAR, legacy_or: bool = False) -> pd.DataFrame:
    """
    Keeps games released in `min_year` or later. Rows without a release year
    are dropped.

    With `legacy_or=True` a row is kept when the year passes OR its user score
    is not 'tbd', which is what the exploratory notebook did.
    """
    require_columns(df, [YEAR, USER_SCORE], "filter_years")
    keep = (df[YEAR] >= min_year).fillna(False).astype(bool)
    if legacy_or:
        keep = keep | (df[USER_SCORE] != TBD)
    filtered = df[keep].copy()
    logger.info("Year filter (>= %d%s): %d -> %d rows",
                min_year, ", legacy OR" if legacy_or else "", len(df), len(filtered))
    return filtered


def filter_platforms(df: pd.DataFrame, min_rows: int = config.MIN_PLATFORM_ROWS) -> pd.DataFrame:
    """Drops platforms with fewer than `min_rows` rows in `df`."""
    require_columns(df, [PLATFORM], "filter_platforms")
    counts = df[PLATFORM].value_counts()
    kept_platforms = counts[counts >= min_rows].index
    filtered = df[df[PLATFORM].isin(kept_platforms)].copy()
    logger.info("Platform filter (>= %d rows): kept %d of %d platforms, %d -> %d rows",
                min_rows, len(kept_platforms), len(counts), len(df), len(filtered))
    return filtered


def normalize_scores(df: pd.DataFrame, scale: float = config.USER_SCORE_SCALE) -> pd.DataFrame:
    """
    Converts User_Score to a number on the critic 0-100 scale and drops the
    regional sales columns. 'tbd' and any other non-numeric text become NaN.
    """
    require_columns(df, [USER_SCORE] + REGIONAL_SALES, "normalize_scores")
    normalized = df.drop(columns=REGIONAL_SALES)
    normalized[USER_SCORE] = pd.to_numeric(normalized[USER_SCORE], errors="coerce").astype(float) * scale
    logger.info("User scores: %d numeric, %d missing after conversion",
                normalized[USER_SCORE].notna().sum(), normalized[USER_SCORE].isna().sum())
    return normalized


def normalize(df: pd.DataFrame,
              min_year: int = config.MIN_YEAR,
              min_platform_rows: int = config.MIN_PLATFORM_ROWS,
              scale: float = config.USER_SCORE_SCALE,
              legacy_or: bool = config.LEGACY_OR_FILTER):
    """
    Runs the filters in order and returns `(filtered, normalized)`.

    The platform counts are taken after the year filter.
    """
    filtered = filter_platforms(filter_years(df, min_year, legacy_or), min_platform_rows)
    return filtered, normalize_scores(filtered, scale)


# --- Imputer ---

def _require_normalized(df: pd.DataFrame, stage: str) -> None:
    require_columns(df, GROUP_KEYS + SCORE_FIELDS, stage)
    forbid_columns(df, REGIONAL_SALES, stage)
    if not pd.api.types.is_float_dtype(df[USER_SCORE]):
        raise SchemaError(f"{stage}: {USER_SCORE} is not numeric, run normalization first")


def group_averages(df: pd.DataFrame) -> pd.DataFrame:
    """
    Mean critic score, critic count, user score and user count per
    (Genre, Platform, Year_of_Release).

    Only rows where all four fields are present contribute; a row missing any
    one of them is left out of every average.
    """
    _require_normalized(df, "group_averages")
    complete = df.dropna(subset=SCORE_FIELDS)
    averages = (complete.astype({col: float for col in SCORE_FIELDS})
                .groupby(GROUP_KEYS)[SCORE_FIELDS]
                .mean())
    logger.info("Group averages: %d groups from %d complete rows", len(averages), len(complete))
    return averages


def impute_scores(df: pd.DataFrame, averages: pd.DataFrame = None) -> pd.DataFrame:
    """
    Fills missing Critic_Score and User_Score values with the mean of the
    row's (Genre, Platform, Year_of_Release) group.

    Rows whose group has no average stay null. Present values are never
    replaced, so running this twice gives the same table.
    """
    _require_normalized(df, "impute_scores")
    if averages is None:
        averages = group_averages(df)

    imputed = df.copy()
    if averages.empty:
        logger.warning("No complete rows to average, nothing imputed")
        return imputed

    lookup = df[GROUP_KEYS].join(averages[[CRITIC_SCORE, USER_SCORE]], on=GROUP_KEYS)
    for col in (CRITIC_SCORE, USER_SCORE):
        before = imputed[col].isna().sum()
        imputed[col] = imputed[col].fillna(lookup[col]).astype(float)
        after = imputed[col].isna().sum()
        logger.info("%s: imputed %d of %d missing values (%d left)", col, before - after, before, after)
    return imputed


def missing_summary(df: pd.DataFrame) -> pd.DataFrame:
    """Missing count and share per score field, for before/after reporting."""
    counts = df[SCORE_FIELDS].isnull().sum()
    share = counts / len(df) if len(df) else counts * np.nan
    return pd.DataFrame({"missing": counts, "share": share.round(3)})
