#!/usr/bin/env python3
"""
Navigation map tests
====================
- Nodes and obstacles share one grid
- Visibility through the chassis buffer
- Best-step selection and re-costing
- Recorded paths
"""

import math
import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from gridnav.core.config import NavigationConfig
from gridnav.core.errors import InvariantViolation
from gridnav.geometry import Coordinate
from gridnav.mapping import NavigationMap

START = Coordinate(-1, -3)
TARGET = Coordinate(-1, 1)

FREE = [Coordinate(-4, -4), Coordinate(-4, -3), Coordinate(-4, -1), Coordinate(-2, -4),
        Coordinate(-2, -2), Coordinate(-1, -4), Coordinate(-1, -2), Coordinate(0, -4),
        Coordinate(0, -2), Coordinate(2, -4), Coordinate(2, -3), Coordinate(2, -1)]

BLOCKED = [Coordinate(-5, -4), Coordinate(-5, -3), Coordinate(-5, -1), Coordinate(-3, -5),
           Coordinate(-3, -1), Coordinate(-2, -5), Coordinate(-2, -1), Coordinate(-1, -5),
           Coordinate(-1, -1), Coordinate(0, -5), Coordinate(0, -1), Coordinate(1, -5),
           Coordinate(1, -1), Coordinate(3, -4), Coordinate(3, -3), Coordinate(3, -1)]


def unit_map() -> NavigationMap:
    return NavigationMap(NavigationConfig(resolution=1.0, chassis_radius=0.25))


def populated_map() -> NavigationMap:
    """Start, free cells and wall as seen from (-1, -3), costed for (-1, 1)."""
    nav_map = unit_map()
    nav_map.add_coord(START, START.distance_to(TARGET))
    for coord in FREE:
        nav_map.add_coord(coord, coord.distance_to(TARGET))
    for coord in BLOCKED:
        nav_map.add_obstacle(coord)
    for coord in FREE:
        nav_map.add_path(START, coord)
    return nav_map


class TestNodes(unittest.TestCase):
    """Node storage."""

    def setUp(self):
        self.map = NavigationMap(NavigationConfig(resolution=0.5, chassis_radius=0.2))

    def test_add_coord_snaps(self):
        """Nodes are stored at their cell center."""
        node = self.map.add_coord(Coordinate(0.7, -0.2), 2.0)
        self.assertEqual(node.coordinate, Coordinate(0.5, 0.0))
        self.assertIs(self.map.get_step(Coordinate(0.6, 0.1)), node)
        self.assertTrue(self.map.has_node(Coordinate(0.5, 0.0)))

    def test_one_node_per_cell(self):
        """Re-adding a cell updates the node in place."""
        first = self.map.add_coord(Coordinate(1, 1), 2.0)
        second = self.map.add_coord(Coordinate(1.1, 0.9), 3.0, visited=True)
        self.assertIs(first, second)
        self.assertEqual(self.map.node_count, 1)
        self.assertEqual(second.distance, 3.0)
        self.assertTrue(second.visited)

    def test_indirect_adjustment(self):
        """Indirect nodes default to an adjustment equal to their distance."""
        node = self.map.add_coord(Coordinate(2, 0), 4.0, indirect=True)
        self.assertEqual(node.adjustment, 4.0)
        self.assertEqual(node.cost, 8.0)
        direct = self.map.add_coord(Coordinate(3, 0), 4.0)
        self.assertEqual(direct.adjustment, 0.0)

    def test_invalid_values(self):
        """Negative, NaN and infinite distances are refused."""
        with self.assertRaises(InvariantViolation):
            self.map.add_coord(Coordinate(0, 0), -1.0)
        with self.assertRaises(InvariantViolation):
            self.map.add_coord(Coordinate(0, 0), float('nan'))
        with self.assertRaises(InvariantViolation):
            self.map.add_coord(Coordinate(0, 0), math.inf)
        with self.assertRaises(InvariantViolation):
            self.map.add_coord(Coordinate(0, 0), 1.0, adjustment=-2.0)
        self.assertTrue(self.map.is_empty())

    def test_set_temporary_cost(self):
        """A temporary cost marks the node indirect."""
        self.map.add_coord(Coordinate(1, 1), 2.0)
        node = self.map.set_temporary_cost(Coordinate(1, 1))
        self.assertTrue(node.indirect)
        self.assertEqual(node.adjustment, math.inf)
        self.assertIsNone(self.map.set_temporary_cost(Coordinate(5, 5), 1.0))

    def test_set_visited(self):
        """Visited flag."""
        self.map.add_coord(Coordinate(1, 1), 2.0)
        self.assertTrue(self.map.set_visited(Coordinate(1, 1)).visited)
        self.assertIsNone(self.map.set_visited(Coordinate(4, 4)))

    def test_get_targets_ordered(self):
        """Targets come back cheapest first."""
        self.map.add_coord(Coordinate(2, 0), 3.0)
        self.map.add_coord(Coordinate(1, 0), 1.0, indirect=True)
        self.map.add_coord(Coordinate(0, 1), 1.5)
        costs = [n.cost for n in self.map.get_targets()]
        self.assertEqual(costs, [1.5, 2.0, 3.0])
        self.assertEqual(self.map.get_coords()[0], Coordinate(0, 1))

    def test_equivalence(self):
        """Coordinates in one cell are the same node."""
        self.assertTrue(self.map.are_equivalent(Coordinate(0.1, 0.1), Coordinate(-0.2, 0.2)))
        self.assertFalse(self.map.are_equivalent(Coordinate(0.1, 0.1), Coordinate(0.3, 0.1)))


class TestObstacles(unittest.TestCase):
    """Obstacle cells."""

    def setUp(self):
        self.map = populated_map()

    def test_is_obstacle(self):
        """Every blocked cell is an obstacle, no free cell is."""
        for coord in BLOCKED:
            self.assertTrue(self.map.is_obstacle(coord), coord)
        for coord in FREE:
            self.assertFalse(self.map.is_obstacle(coord), coord)

    def test_idempotent(self):
        """Adding the same cell twice keeps one obstacle."""
        count = self.map.obstacle_count
        first = self.map.get_obstacles()[0]
        again = self.map.add_obstacle(first.coordinate)
        self.assertIs(again, first)
        self.assertEqual(self.map.obstacle_count, count)
        self.assertIs(self.map.get_obstacle(first.id), first)

    def test_obstacle_removes_node(self):
        """A node inside a new obstacle cell disappears with its paths."""
        victim = Coordinate(-2, -2)
        self.assertTrue(self.map.has_path(START, victim))
        self.map.add_obstacle(victim)
        self.assertFalse(self.map.has_node(victim))
        self.assertFalse(self.map.has_path(START, victim))
        self.assertTrue(self.map.has_node(Coordinate(-1, -2)))

    def test_no_node_inside_obstacle(self):
        """No live node lies inside an obstacle."""
        for node in self.map.get_targets():
            self.assertFalse(self.map.is_obstacle(node.coordinate))


class TestVisibility(unittest.TestCase):
    """Straight-line clearance."""

    def setUp(self):
        self.map = unit_map()
        self.map.add_obstacle(Coordinate(0, 0))

    def test_blocked(self):
        """A segment through an obstacle is blocked."""
        self.assertFalse(self.map.clear_view(Coordinate(-2, 0), Coordinate(2, 0)))

    def test_chassis_clearance(self):
        """The chassis radius widens the segment."""
        self.assertTrue(self.map.clear_view(Coordinate(-2, 0.8), Coordinate(2, 0.8)))
        self.assertFalse(self.map.clear_view(Coordinate(-2, 0.7), Coordinate(2, 0.7)))

    def test_symmetric(self):
        """clear_view(a, b) == clear_view(b, a)."""
        a, b = Coordinate(-2, -1.5), Coordinate(1.5, 2)
        self.assertEqual(self.map.clear_view(a, b), self.map.clear_view(b, a))

    def test_empty_map(self):
        """With no obstacles every view is clear."""
        self.assertTrue(unit_map().clear_view(Coordinate(-9, -9), Coordinate(9, 9)))


class TestPlanningQueries(unittest.TestCase):
    """Best step and re-costing."""

    def test_best_step(self):
        """The cheapest visible node wins."""
        nav_map = populated_map()
        best = nav_map.get_best_step(START)
        self.assertIsNotNone(best)
        self.assertEqual(best.coordinate, Coordinate(-1, -2))
        self.assertEqual(best.distance, 3.0)

    def test_best_step_requires_clear_view(self):
        """A cheaper node behind an obstacle is skipped."""
        nav_map = unit_map()
        nav_map.add_coord(Coordinate(0, 4), 0.0)
        nav_map.add_coord(Coordinate(3, 0), 3.0)
        nav_map.add_obstacle(Coordinate(0, 2))
        best = nav_map.get_best_step(Coordinate(0, 0))
        self.assertEqual(best.coordinate, Coordinate(3, 0))
        self.assertTrue(nav_map.clear_view(Coordinate(0, 0), best.coordinate))

    def test_best_step_skips_visited_and_current(self):
        """Visited nodes and the current cell are never returned."""
        nav_map = unit_map()
        nav_map.add_coord(Coordinate(0, 0), 0.0)
        nav_map.add_coord(Coordinate(1, 0), 1.0, visited=True)
        self.assertIsNone(nav_map.get_best_step(Coordinate(0, 0)))

    def test_empty_map(self):
        """Queries on an empty map find nothing."""
        nav_map = unit_map()
        self.assertTrue(nav_map.is_empty())
        self.assertIsNone(nav_map.get_best_step(Coordinate(0, 0)))
        self.assertEqual(nav_map.get_targets(), [])
        self.assertFalse(nav_map.has_path(Coordinate(0, 0), Coordinate(1, 1)))

    def test_recalculate(self):
        """A new target re-costs every node."""
        nav_map = populated_map()
        before = nav_map.get_step(Coordinate(-4, -1)).cost
        nav_map.recalculate(Coordinate(-4, 1))

        side = nav_map.get_step(Coordinate(-4, -1))
        self.assertNotEqual(side.cost, before)
        self.assertEqual(side.distance, 2.0)
        self.assertFalse(side.indirect)

        behind = nav_map.get_step(Coordinate(0, -2))
        self.assertTrue(behind.indirect)
        self.assertAlmostEqual(behind.distance, 5.0)
        self.assertAlmostEqual(behind.adjustment, 5.0)

    def test_update_is_indirect(self):
        """New obstacles between a node and the target flag the node."""
        nav_map = unit_map()
        target = Coordinate(0, 1)
        hidden = nav_map.add_coord(Coordinate(0, -3), 4.0)
        open_ = nav_map.add_coord(Coordinate(3, -3), 5.0)
        obstacle = nav_map.add_obstacle(Coordinate(0, -1))

        self.assertEqual(nav_map.update_is_indirect(target, [obstacle]), 1)
        self.assertTrue(hidden.indirect)
        self.assertEqual(hidden.adjustment, 4.0)
        self.assertFalse(open_.indirect)
        self.assertEqual(nav_map.update_is_indirect(target, []), 0)


class TestPaths(unittest.TestCase):
    """Recorded path edges."""

    def setUp(self):
        self.map = populated_map()

    def test_connected_through_start(self):
        """Two free cells connect through the start."""
        self.assertTrue(self.map.has_path(Coordinate(-4, -4), Coordinate(2, -1)))

    def test_cut_path(self):
        """Cutting the only edge disconnects."""
        self.assertTrue(self.map.cut_path(START, Coordinate(2, -1)))
        self.assertFalse(self.map.has_path(Coordinate(-4, -4), Coordinate(2, -1)))
        self.assertFalse(self.map.cut_path(START, Coordinate(2, -1)))

    def test_get_paths(self):
        """One edge per free cell."""
        self.assertEqual(len(self.map.get_paths()), len(FREE))

    def test_snapshot(self):
        """Snapshots copy every node, obstacle and edge."""
        snap = self.map.snapshot()
        self.assertEqual(len(snap.nodes), len(FREE) + 1)
        self.assertEqual(len(snap.obstacles), len(BLOCKED))
        self.assertEqual(len(snap.edges), len(FREE))
        self.assertFalse(snap.is_empty)

    def test_clear(self):
        """clear() forgets everything."""
        self.map.clear()
        self.assertTrue(self.map.is_empty())
        self.assertEqual(self.map.get_paths(), [])


if __name__ == '__main__':
    unittest.main()
