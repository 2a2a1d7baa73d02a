"""Column schema of the video game sales table.

Column names are the ones used by the source CSV and must be kept literally.
"""

import numpy as np
import pandas as pd

NAME = "Name"
PLATFORM = "Platform"
YEAR = "Year_of_Release"
GENRE = "Genre"
PUBLISHER = "Publisher"
DEVELOPER = "Developer"
RATING = "Rating"

NA_SALES = "NA_Sales"
EU_SALES = "EU_Sales"
JP_SALES = "JP_Sales"
OTHER_SALES = "Other_Sales"
GLOBAL_SALES = "Global_Sales"

CRITIC_SCORE = "Critic_Score"
CRITIC_COUNT = "Critic_Count"
USER_SCORE = "User_Score"
USER_COUNT = "User_Count"

REGIONAL_SALES = [NA_SALES, EU_SALES, JP_SALES, OTHER_SALES]
SCORE_FIELDS = [CRITIC_SCORE, CRITIC_COUNT, USER_SCORE, USER_COUNT]
GROUP_KEYS = [GENRE, PLATFORM, YEAR]

# Sentinel used by the source for "user score not yet determined"
TBD = "tbd"

TEXT_COLUMNS = [NAME, PLATFORM, GENRE, PUBLISHER, DEVELOPER]
INTEGER_COLUMNS = [YEAR, CRITIC_COUNT, USER_COUNT]
FLOAT_COLUMNS = REGIONAL_SALES + [GLOBAL_SALES, CRITIC_SCORE]

# Header order of the source file. User_Score stays text until normalization.
REQUIRED_COLUMNS = [
    NAME, PLATFORM, YEAR, GENRE, PUBLISHER,
    NA_SALES, EU_SALES, JP_SALES, OTHER_SALES, GLOBAL_SALES,
    CRITIC_SCORE, CRITIC_COUNT, USER_SCORE, USER_COUNT, DEVELOPER,
]
OPTIONAL_COLUMNS = [RATING]


class SchemaError(ValueError):
    """Raised when a table does not carry the columns a stage expects."""


def require_columns(df: pd.DataFrame, columns, stage: str) -> None:
    """Fail fast if `df` is missing any of `columns`."""
    missing = [col for col in columns if col not in df.columns]
    if missing:
        raise SchemaError(f"{stage}: missing column(s) {missing}")


def forbid_columns(df: pd.DataFrame, columns, stage: str) -> None:
    """Fail fast if `df` still carries columns an earlier stage should have dropped."""
    present = [col for col in columns if col in df.columns]
    if present:
        raise SchemaError(f"{stage}: unexpected column(s) {present}, run normalization first")


def coerce_types(df: pd.DataFrame) -> pd.DataFrame:
    """Cast raw text columns to the schema dtypes.

    Unparseable numbers become nulls instead of errors. Integer columns also
    null out values that are non-integral, infinite or outside the int64 range.
    """
    df = df.copy()
    for col in FLOAT_COLUMNS:
        df[col] = pd.to_numeric(df[col], errors="coerce").astype(float)
    for col in INTEGER_COLUMNS:
        values = pd.to_numeric(df[col], errors="coerce").astype(float)
        # 2001.5, inf and 1e20 -> NaN
        values = values.where(np.isfinite(values) & (values.round() == values) & (values.abs() < 2**63))
        df[col] = values.astype("Int64")
    for col in TEXT_COLUMNS + [USER_SCORE] + [c for c in OPTIONAL_COLUMNS if c in df.columns]:
        df[col] = df[col].astype(object)
    return df
