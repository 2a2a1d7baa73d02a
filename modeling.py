"""OLS models relating critic scores to sales, platform and genre."""

import logging
from dataclasses import dataclass, field

import numpy as np
import pandas as pd
import statsmodels.formula.api as smf
from sklearn.metrics import mean_absolute_error, mean_squared_error, r2_score
from statsmodels.stats.outliers_influence import variance_inflation_factor

from rankings import MEAN_CRITIC_SCORE, TOTAL_SALES
from schema import CRITIC_SCORE, GENRE, PLATFORM, require_columns

logger = logging.getLogger(__name__)


class ModelFitError(RuntimeError):
    """Raised when a regression cannot be fitted on the data it was given."""


@dataclass(frozen=True)
class ModelFit:
    """
    One fitted regression.

    coefficients: one row per term with coef, std_err, t and p_value.
    observations: observed, fitted and residual (observed - fitted) per row
        used in the fit, indexed like the input table.
    metrics: n_obs, r_squared, adj_r_squared, rmse, mae.
    """
    name: str
    formula: str
    coefficients: pd.DataFrame
    observations: pd.DataFrame
    metrics: dict
    results: object = field(repr=False)


def fit_ols(name: str, formula: str, data: pd.DataFrame, response: str, regressor: str) -> ModelFit:
    """
    Fits `formula` by ordinary least squares on the rows of `data` where both
    `response` and `regressor` are present.

    Categorical terms written as C(column) are treatment coded by patsy, with
    the first level in sorted order as the reference.
    """
    require_columns(data, [response, regressor], name)
    usable = data[[response, regressor]].dropna()
    if usable.empty:
        raise ModelFitError(f"{name}: no rows with both {response} and {regressor}")
    usable = usable.astype({response: float})

    try:
        results = smf.ols(formula, data=usable).fit()
    except (ValueError, np.linalg.LinAlgError) as exc:
        raise ModelFitError(f"{name}: {exc}") from exc
    if results.nobs <= len(results.params):
        raise ModelFitError(f"{name}: {int(results.nobs)} rows for {len(results.params)} parameters")

    coefficients = pd.DataFrame({
        "coef": results.params,
        "std_err": results.bse,
        "t": results.tvalues,
        "p_value": results.pvalues,
    })
    observed = usable[response]
    fitted = results.fittedvalues
    observations = pd.DataFrame({
        "observed": observed,
        "fitted": fitted,
        "residual": observed - fitted,
    })
    metrics = {
        "n_obs": int(results.nobs),
        "r_squared": r2_score(observed, fitted),
        "adj_r_squared": results.rsquared_adj,
        "rmse": np.sqrt(mean_squared_error(observed, fitted)),
        "mae": mean_absolute_error(observed, fitted),
    }
    logger.info("%s: %s, n=%d, R^2=%.3f", name, formula, metrics["n_obs"], metrics["r_squared"])
    return ModelFit(name, formula, coefficients, observations, metrics, results)


def fit_rating_vs_sales(combined: pd.DataFrame) -> ModelFit:
    """Mean critic score of a title against its total sales."""
    return fit_ols("sales", f"{MEAN_CRITIC_SCORE} ~ {TOTAL_SALES}", combined, MEAN_CRITIC_SCORE, TOTAL_SALES)


def fit_score_by_platform(games: pd.DataFrame) -> ModelFit:
    """Critic score against platform, one dummy per non-reference platform."""
    return fit_ols("platform", f"{CRITIC_SCORE} ~ C({PLATFORM})", games, CRITIC_SCORE, PLATFORM)


def fit_score_by_genre(games: pd.DataFrame) -> ModelFit:
    """Critic score against genre, one dummy per non-reference genre."""
    return fit_ols("genre", f"{CRITIC_SCORE} ~ C({GENRE})", games, CRITIC_SCORE, GENRE)


def fit_models(combined: pd.DataFrame, games: pd.DataFrame) -> dict:
    """The three models, keyed 'sales', 'platform' and 'genre'."""
    return {
        "sales": fit_rating_vs_sales(combined),
        "platform": fit_score_by_platform(games),
        "genre": fit_score_by_genre(games),
    }


def significant_terms(fit: ModelFit, alpha: float = 0.05) -> pd.DataFrame:
    """Coefficients with p-value below `alpha`, smallest p-value first."""
    coefs = fit.coefficients
    return coefs[coefs["p_value"] < alpha].sort_values("p_value")


def design_vif(fit: ModelFit) -> pd.DataFrame:
    """
    Variance Inflation Factor for every non-intercept column of the design
    matrix. Values above 5-10 point to collinear regressors.
    """
    exog = fit.results.model.exog
    names = fit.results.model.exog_names
    rows = [
        {"Feature": names[i], "VIF": variance_inflation_factor(exog, i)}
        for i in range(exog.shape[1])
        if names[i] != "Intercept"
    ]
    return pd.DataFrame(rows, columns=["Feature", "VIF"]).sort_values("VIF", ascending=False)
