"""Configuration for the video game ratings analysis.

File locations, filter thresholds and plot styling. Path-like settings can be
overridden through environment variables so the same scripts run against a
different copy of the dataset.
"""

import os

# =============================================================================
# FILES
# =============================================================================

DATA_PATH = os.getenv("VGSALES_DATA", "Video_Games_Sales_as_at_22_Dec_2016.csv")
FIGURE_DIR = os.getenv("VGSALES_FIGURES", "figures")

# =============================================================================
# FILTERS
# MIN_YEAR: first release year kept in the analysis
# MIN_PLATFORM_ROWS: platforms with fewer rows (after the year filter) are dropped
# USER_SCORE_SCALE: user scores come on a 0-10 scale, critic scores on 0-100
# MIN_CRITIC_COUNT: ratings aggregate keeps rows with strictly more critic reviews
# =============================================================================

MIN_YEAR = 2000
MIN_PLATFORM_ROWS = 100
USER_SCORE_SCALE = 10
MIN_CRITIC_COUNT = 1

# The exploratory notebook kept a row when year >= 2000 OR User_Score != 'tbd',
# which retains almost every row. Off by default; set to reproduce that output.
LEGACY_OR_FILTER = os.getenv("VGSALES_LEGACY_OR_FILTER", "0").lower() in ("1", "true", "yes")

# =============================================================================
# PLOTS
# =============================================================================

PLOT_STYLE = "whitegrid"
FIGURE_SIZE = (12, 6)
TOP_N = 10
