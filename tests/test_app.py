import unittest
from unittest import mock

import matplotlib.pyplot as plt

import app


class TestShowFigure(unittest.TestCase):

    def test_figure_closed_after_render(self):
        fig, ax = plt.subplots()
        ax.plot([1, 2], [3, 4])
        with mock.patch.object(app.st, "pyplot") as pyplot:
            app.show_figure(fig)
        pyplot.assert_called_once_with(fig)
        self.assertFalse(plt.fignum_exists(fig.number))

    def test_repeated_renders_do_not_accumulate(self):
        before = len(plt.get_fignums())
        with mock.patch.object(app.st, "pyplot"):
            for _ in range(5):
                fig, _ax = plt.subplots()
                app.show_figure(fig)
        self.assertEqual(len(plt.get_fignums()), before)


if __name__ == "__main__":
    unittest.main()
