#!/usr/bin/env python3
"""
Visualization and command-line tests
====================================
"""

import io
import os
import sys
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt  # noqa: E402

sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from gridnav.core.config import NavigationConfig  # noqa: E402
from gridnav.geometry import Coordinate, Position  # noqa: E402
from gridnav.main import main  # noqa: E402
from gridnav.mapping import NavigationMap, load_map  # noqa: E402
from gridnav.navigation import Planner  # noqa: E402
from gridnav.simulation import create_wall_arena  # noqa: E402
from gridnav.visualization import plot_snapshot, render_text  # noqa: E402


def planner_snapshot():
    nav_map = NavigationMap(NavigationConfig(resolution=1.0, chassis_radius=0.25))
    for x in range(-3, 2):
        nav_map.add_obstacle(Coordinate(x, -1))
    nav_map.add_coord(Coordinate(-4, -2), 0.0)
    planner = Planner(nav_map, Position.from_xy(-1, -3), Coordinate(-1, 1))
    planner.step()
    return planner.snapshot()


class TestRenderText(unittest.TestCase):
    """Character grid."""

    def test_symbols(self):
        """Robot, target, detour and wall all show up."""
        text = render_text(planner_snapshot())
        self.assertIn('@', text)
        self.assertIn('T', text)
        self.assertIn('t', text)
        self.assertIn('#####', text)

    def test_north_up(self):
        """The target row is printed above the robot row."""
        lines = render_text(planner_snapshot()).split('\n')
        target_row = next(i for i, line in enumerate(lines) if 'T' in line)
        robot_row = next(i for i, line in enumerate(lines) if '@' in line)
        self.assertLess(target_row, robot_row)

    def test_fixed_bounds(self):
        """A fixed window gives a fixed number of rows."""
        text = render_text(planner_snapshot(), bounds=(-5, -5, 3, 3))
        self.assertEqual(len(text.split('\n')), 9)


class TestPlotSnapshot(unittest.TestCase):
    """Matplotlib rendering."""

    def tearDown(self):
        plt.close('all')

    def test_plot(self):
        """Drawing returns the axes it drew on."""
        fig, ax = plt.subplots()
        result = plot_snapshot(planner_snapshot(), ax=ax, environment=create_wall_arena(),
                               title='wall')
        self.assertIs(result, ax)
        self.assertEqual(ax.get_title(), 'wall')
        self.assertGreater(len(ax.patches), 0)

    def test_plot_new_figure(self):
        """Without axes a figure is created."""
        ax = plot_snapshot(planner_snapshot())
        self.assertIn('NAVIGATING', ax.get_title())


class TestCommandLine(unittest.TestCase):
    """gridnav entry point."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_empty_arena_run(self):
        """A run in the open arena succeeds and saves its map."""
        path = os.path.join(self.tmpdir.name, 'arena.yaml')
        out = io.StringIO()
        with redirect_stdout(out):
            code = main(['--arena', 'empty', '--text', '--save-map', path,
                         '--log-level', 'WARNING'])
        self.assertEqual(code, 0)
        self.assertIn('target reached', out.getvalue())
        self.assertGreater(load_map(path).obstacle_count, 0)

    def test_double_wall_run(self):
        """The double-wall arena is crossed without touching a wall."""
        out = io.StringIO()
        with redirect_stdout(out):
            code = main(['--arena', 'double-wall', '--log-level', 'ERROR'])
        self.assertEqual(code, 0)
        self.assertIn('Collisions: 0 blocked moves, 0 waypoints inside walls', out.getvalue())

    def test_exhausted_budget(self):
        """Running out of steps gives exit code 2."""
        with redirect_stdout(io.StringIO()):
            code = main(['--arena', 'empty', '--max-steps', '1', '--log-level', 'ERROR'])
        self.assertEqual(code, 2)

    def test_bad_config(self):
        """A broken configuration file gives exit code 1."""
        path = os.path.join(self.tmpdir.name, 'bad.yaml')
        with open(path, 'w') as f:
            f.write("navigation:\n  resolution: -1\n")
        with redirect_stdout(io.StringIO()):
            code = main(['--config', path, '--log-level', 'CRITICAL'])
        self.assertEqual(code, 1)


if __name__ == '__main__':
    unittest.main()
