#!/usr/bin/env python3
"""
Simulation tests
================
- Arena builders and ray casting
- Simulated range sensor
- Simulated mover
"""

import math
import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from gridnav.core.config import MoverConfig, SensorConfig
from gridnav.geometry import Coordinate, Position
from gridnav.interface import SimulatedMover, SimulatedRangeSensor
from gridnav.simulation import (
    Environment, ObstacleType, create_double_wall_arena, create_empty_arena, create_wall_arena
)


class TestEnvironment(unittest.TestCase):
    """Ground-truth arenas."""

    def test_wall_arena_layout(self):
        """Border ring plus the interior wall."""
        env = create_wall_arena()
        self.assertEqual(len(env.obstacles), 32 + 5)
        self.assertEqual(env.bounds(), (-5.0, -5.0, 4.0, 4.0))
        self.assertTrue(env.is_blocked(-0.5, -0.5))
        self.assertFalse(env.is_blocked(-1.5, -3.0))
        self.assertTrue(env.is_blocked(-1.5, -1.2, radius=0.3))
        self.assertFalse(env.is_blocked(-1.5, -1.8, radius=0.3))

    def test_empty_arena(self):
        """Only the border."""
        env = create_empty_arena()
        self.assertEqual(len(env.obstacles), 32)
        self.assertFalse(env.is_blocked(0, 0, radius=1.0))

    def test_double_wall_arena(self):
        """Two offset walls."""
        env = create_double_wall_arena()
        self.assertEqual(len(env.obstacles), 32 + 5 + 5)
        self.assertTrue(env.is_blocked(-3.5, -1.5))
        self.assertTrue(env.is_blocked(1.5, 0.5))

    def test_raycast_hits_wall(self):
        """Straight up from the start hits the wall two meters away."""
        env = create_wall_arena()
        self.assertAlmostEqual(env.raycast(-1.5, -3, math.pi / 2), 2.0)
        self.assertAlmostEqual(env.raycast(-1.5, -3, -math.pi / 2), 1.0)

    def test_path_blocked(self):
        """Segments through the wall are blocked, segments through the gap are not."""
        env = create_wall_arena()
        self.assertTrue(env.is_path_blocked(-1, -3, -1, 1))
        self.assertFalse(env.is_path_blocked(-3.5, -3, -3.5, 1))
        self.assertTrue(env.is_path_blocked(-3.5, -3, -3.5, 1, radius=0.6))
        self.assertFalse(env.is_path_blocked(-1, -3, -1, -3))

    def test_raycast_miss(self):
        """Nothing hit returns the maximum range."""
        env = Environment()
        self.assertEqual(env.raycast(0, 0, 0.0, max_range=7.5), 7.5)

    def test_obstacle_shapes(self):
        """Walls, boxes and cylinders all stop rays."""
        env = Environment()
        env.add_wall(2, -1, 2, 1)
        env.add_cylinder(0, 3, 0.5)
        env.add_box(-3, 0, 1, 1)
        self.assertAlmostEqual(env.raycast(0, 0, 0.0), 2.0)
        self.assertAlmostEqual(env.raycast(0, 0, math.pi / 2), 2.5)
        self.assertAlmostEqual(env.raycast(0, 0, math.pi), 2.5)
        types = {o.obstacle_type for o in env.obstacles}
        self.assertEqual(types, {ObstacleType.WALL, ObstacleType.CYLINDER, ObstacleType.BOX})


class TestSimulatedRangeSensor(unittest.TestCase):
    """Ray-casting sensor."""

    def test_four_rays(self):
        """Readings are relative to the heading."""
        pose = Position.from_xy(0.5, 0.5, 0.0)
        sensor = SimulatedRangeSensor(create_empty_arena(), lambda: pose,
                                      SensorConfig(num_rays=4))
        readings = sensor.sense()
        self.assertEqual(len(readings), 4)
        self.assertAlmostEqual(readings[0].angle, 0.0)
        self.assertAlmostEqual(readings[1].angle, math.pi / 2)
        self.assertAlmostEqual(readings[0].range, 2.5)
        self.assertAlmostEqual(readings[2].range, 4.5)
        self.assertEqual(sensor.max_range, 12.0)

    def test_out_of_range(self):
        """Hits past the maximum range read as infinite."""
        pose = Position.from_xy(0, 0)
        sensor = SimulatedRangeSensor(create_empty_arena(), lambda: pose,
                                      SensorConfig(num_rays=8, max_range=2.0))
        self.assertTrue(all(math.isinf(r.range) for r in sensor.sense()))

    def test_noise_is_seeded(self):
        """Equal seeds give equal noisy scans."""
        pose = Position.from_xy(0, 0)
        config = SensorConfig(num_rays=16, noise_std=0.05, seed=7)
        first = SimulatedRangeSensor(create_empty_arena(), lambda: pose, config).sense()
        second = SimulatedRangeSensor(create_empty_arena(), lambda: pose, config).sense()
        self.assertEqual([r.range for r in first], [r.range for r in second])


class TestSimulatedMover(unittest.TestCase):
    """Speed-limited mover."""

    def test_partial_move(self):
        """Long moves stop after `speed` meters."""
        mover = SimulatedMover(Position.from_xy(0, 0), MoverConfig(speed=1.0))
        pos = mover.move(Coordinate(3, 4))
        self.assertAlmostEqual(pos.x, 0.6)
        self.assertAlmostEqual(pos.y, 0.8)
        self.assertAlmostEqual(pos.heading, math.atan2(4, 3))
        self.assertAlmostEqual(mover.distance_travelled, 1.0)

    def test_exact_arrival(self):
        """Short moves land exactly on the target."""
        mover = SimulatedMover(Position.from_xy(0, 0), MoverConfig(speed=2.0))
        pos = mover.move(Coordinate(1, 1))
        self.assertEqual(pos.coordinate, Coordinate(1, 1))
        self.assertEqual(mover.moves, 1)

    def test_no_move(self):
        """Moving to the current position changes nothing."""
        mover = SimulatedMover(Position.from_xy(1, 1))
        mover.move(Coordinate(1, 1))
        self.assertEqual(mover.moves, 0)
        self.assertEqual(mover.distance_travelled, 0.0)

    def test_wall_stops_move(self):
        """A move into a wall is refused and counted."""
        mover = SimulatedMover(Position.from_xy(-1, -1.5), MoverConfig(speed=1.0),
                               create_wall_arena())
        pos = mover.move(Coordinate(-1, 1))
        self.assertEqual(pos.coordinate, Coordinate(-1, -1.5))
        self.assertEqual(mover.blocked_moves, 1)
        self.assertEqual(mover.moves, 0)

        pos = mover.move(Coordinate(-1, -3))
        self.assertAlmostEqual(pos.x, -1.0)
        self.assertAlmostEqual(pos.y, -2.5)
        self.assertEqual(mover.blocked_moves, 1)


if __name__ == '__main__':
    unittest.main()
