"""Loading the video game sales CSV into a typed DataFrame."""

import logging

import pandas as pd

from schema import REQUIRED_COLUMNS, coerce_types, require_columns

logger = logging.getLogger(__name__)


def load_games(path) -> pd.DataFrame:
    """
    Reads the sales/review CSV at `path` (a path or an open text buffer) and
    returns one row per (title, platform) with the schema dtypes applied.

    Every cell is read as text first so that a bad numeric value only nulls
    that cell. Rows with more fields than the header keep their leading
    fields and lose the extras; short rows are padded with nulls. Bytes that
    are not valid UTF-8 are replaced instead of failing the load.
    """
    df = pd.read_csv(path, dtype=str, engine="python",
                     on_bad_lines=lambda fields: fields,  # pandas drops the extra fields
                     encoding="utf-8", encoding_errors="replace")
    require_columns(df, REQUIRED_COLUMNS, "load_games")
    df = coerce_types(df)

    logger.info("Loaded %d rows, %d columns", len(df), df.shape[1])
    nulls = df.isnull().sum()
    logger.info("Null counts: %s", nulls[nulls > 0].to_dict())
    return df
