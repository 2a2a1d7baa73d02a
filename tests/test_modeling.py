import unittest

import numpy as np
import pandas as pd

from modeling import (
    ModelFitError,
    design_vif,
    fit_models,
    fit_rating_vs_sales,
    fit_score_by_genre,
    fit_score_by_platform,
    significant_terms,
)


def perfect_line():
    sales = np.array([0.5, 1.0, 2.0, 3.5, 5.0, 10.0])
    return pd.DataFrame({
        "Name": [f"Game {i}" for i in range(len(sales))],
        "total_sales": sales,
        "mean_critic_score": 50 + 0.5 * sales,
    })


def platform_games():
    return pd.DataFrame({
        "Platform": ["X360", "PS2", "Wii", "PS2", "Wii", "X360", "PS2"],
        "Genre": ["Action", "Action", "Sports", "Sports", "Action", "Sports", "Racing"],
        "Critic_Score": [85.0, 70.0, 60.0, 80.0, 64.0, 89.0, np.nan],
    })


class TestRatingVsSales(unittest.TestCase):

    def setUp(self):
        self.fit = fit_rating_vs_sales(perfect_line())

    def test_recovers_intercept_and_slope(self):
        coefs = self.fit.coefficients["coef"]
        self.assertAlmostEqual(coefs["Intercept"], 50.0, places=8)
        self.assertAlmostEqual(coefs["total_sales"], 0.5, places=8)

    def test_residuals_are_zero(self):
        np.testing.assert_allclose(self.fit.observations["residual"], 0.0, atol=1e-8)
        np.testing.assert_allclose(self.fit.observations["fitted"], self.fit.observations["observed"], atol=1e-8)

    def test_coefficient_table_columns(self):
        self.assertEqual(list(self.fit.coefficients.columns), ["coef", "std_err", "t", "p_value"])
        self.assertEqual(self.fit.coefficients.index.tolist(), ["Intercept", "total_sales"])

    def test_metrics(self):
        self.assertEqual(self.fit.metrics["n_obs"], 6)
        self.assertAlmostEqual(self.fit.metrics["r_squared"], 1.0)
        self.assertAlmostEqual(self.fit.metrics["rmse"], 0.0, places=8)


class TestCategoricalModels(unittest.TestCase):

    def test_platform_dummies_against_first_sorted_level(self):
        fit = fit_score_by_platform(platform_games())
        coefs = fit.coefficients["coef"]
        # PS2 is the reference level: mean of 70 and 80
        self.assertAlmostEqual(coefs["Intercept"], 75.0)
        self.assertAlmostEqual(coefs["C(Platform)[T.Wii]"], -13.0)
        self.assertAlmostEqual(coefs["C(Platform)[T.X360]"], 12.0)
        self.assertEqual(len(coefs), 3)

    def test_rows_with_missing_score_excluded(self):
        fit = fit_score_by_platform(platform_games())
        self.assertEqual(fit.metrics["n_obs"], 6)
        self.assertEqual(len(fit.observations), 6)

    def test_residual_is_observed_minus_fitted(self):
        obs = fit_score_by_genre(platform_games()).observations
        np.testing.assert_allclose(obs["residual"], obs["observed"] - obs["fitted"])

    def test_genre_reference_level(self):
        coefs = fit_score_by_genre(platform_games()).coefficients
        self.assertIn("C(Genre)[T.Sports]", coefs.index)
        self.assertNotIn("C(Genre)[T.Action]", coefs.index)

    def test_vif_skips_intercept(self):
        vif = design_vif(fit_score_by_platform(platform_games()))
        self.assertEqual(sorted(vif["Feature"]), ["C(Platform)[T.Wii]", "C(Platform)[T.X360]"])
        self.assertTrue((vif["VIF"] >= 1.0 - 1e-9).all())


class TestFitErrors(unittest.TestCase):

    def test_no_usable_rows(self):
        games = pd.DataFrame({"Platform": ["PS2", "Wii"], "Critic_Score": [np.nan, np.nan]})
        with self.assertRaises(ModelFitError):
            fit_score_by_platform(games)

    def test_fewer_rows_than_parameters(self):
        games = pd.DataFrame({"Platform": ["PS2", "Wii"], "Critic_Score": [70.0, 80.0]})
        with self.assertRaises(ModelFitError):
            fit_score_by_platform(games)


class TestFitModels(unittest.TestCase):

    def test_three_models(self):
        line = perfect_line()
        line["mean_critic_score"] += np.array([0.3, -0.2, 0.1, -0.4, 0.2, 0.0])
        models = fit_models(line, platform_games())
        self.assertEqual(sorted(models), ["genre", "platform", "sales"])
        self.assertEqual(models["sales"].formula, "mean_critic_score ~ total_sales")
        self.assertIsInstance(significant_terms(models["sales"]), pd.DataFrame)


if __name__ == "__main__":
    unittest.main()
