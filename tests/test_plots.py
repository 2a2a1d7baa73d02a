import os
import tempfile
import unittest

import matplotlib.pyplot as plt
from matplotlib.figure import Figure

import plots
from pipeline import run_pipeline
from scenario import scenario_games


class TestPlots(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.result = run_pipeline(scenario_games(), min_year=2000, min_platform_rows=1, legacy_or=False)

    def tearDown(self):
        plt.close('all')

    def test_descriptive_plots(self):
        games = self.result.imputed
        figures = [
            plots.sales_by_platform(games),
            plots.sales_by_genre(games),
            plots.score_distributions(self.result.normalized, games),
            plots.score_boxplot(games, 'Platform'),
            plots.score_boxplot(games, 'Genre'),
            plots.critic_vs_user(games),
            plots.top_ranked(self.result.combined, n=3),
        ]
        for fig in figures:
            self.assertIsInstance(fig, Figure)

    def test_model_plots(self):
        for fit in self.result.models.values():
            self.assertEqual(len(plots.model_diagnostics(fit).axes), 4)
            self.assertIsInstance(plots.coefficient_plot(fit), Figure)

    def test_save_figure(self):
        with tempfile.TemporaryDirectory() as tmp:
            out_dir = os.path.join(tmp, 'figures')
            path = plots.save_figure(plots.sales_by_genre(self.result.imputed), 'sales_by_genre', out_dir)
            self.assertTrue(os.path.isfile(path))
            self.assertTrue(path.endswith('sales_by_genre.png'))


if __name__ == "__main__":
    unittest.main()
