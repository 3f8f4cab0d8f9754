"""
GRIDNAV - incremental grid navigation
=====================================

Runs the planner in a simulated arena:
  - a ray-cast range sensor feeds the Mapper
  - the Planner picks the next waypoint each step
  - a speed-limited mover follows it

Usage:
    gridnav --arena wall
    gridnav --arena double-wall --config config/navigation.yaml --gui
    gridnav --start -1 -3 --target -1 1 --text --save-map arena.yaml
"""

import argparse
import logging
import sys

from .core.config import GridNavConfig, load_config
from .core.errors import NavigationError
from .core.log import setup_logging
from .geometry.coordinate import Coordinate, Position
from .interface.simulation_adapters import SimulatedMover, SimulatedRangeSensor
from .mapping.map_io import save_map
from .navigation.processor import Processor
from .simulation.environment import (
    create_double_wall_arena, create_empty_arena, create_wall_arena
)

logger = logging.getLogger(__name__)

ARENAS = {
    'wall': (create_wall_arena, (-1.0, -3.0), (-1.0, 1.0)),
    'double-wall': (create_double_wall_arena, (-1.0, -3.0), (1.0, 2.0)),
    'empty': (create_empty_arena, (-3.0, -3.0), (2.0, 2.0)),
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Incremental grid navigation in a simulated arena',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('--arena', choices=sorted(ARENAS), default='wall',
                        help='Simulated arena (default: wall)')
    parser.add_argument('--config', type=str, default=None,
                        help='YAML configuration file')
    parser.add_argument('--start', type=float, nargs=2, metavar=('X', 'Y'),
                        help='Start position (default depends on arena)')
    parser.add_argument('--target', type=float, nargs=2, metavar=('X', 'Y'),
                        help='Target position (default depends on arena)')
    parser.add_argument('--max-steps', type=int, default=None,
                        help='Step budget (default from config)')
    parser.add_argument('--no-simplify', action='store_true',
                        help='Keep the raw travelled route')
    parser.add_argument('--text', action='store_true',
                        help='Print a text rendering of the final map')
    parser.add_argument('--gui', action='store_true',
                        help='Show the final map with matplotlib')
    parser.add_argument('--save-map', type=str, default=None,
                        help='Write the learned map to a YAML file')
    parser.add_argument('--log-level', default='INFO',
                        help='Logging level (default: INFO)')
    return parser


def run(args) -> int:
    config = load_config(args.config) if args.config else GridNavConfig()
    factory, default_start, default_target = ARENAS[args.arena]
    environment = factory()
    start = Coordinate(*(args.start or default_start))
    target = Coordinate(*(args.target or default_target))

    print("=" * 60)
    print("   GRIDNAV - SIMULATION")
    print("=" * 60)
    print(f"Arena: {args.arena}")
    print(f"Start: ({start.x:g}, {start.y:g})  Target: ({target.x:g}, {target.y:g})")
    print(f"Resolution: {config.navigation.resolution} m  "
          f"Chassis radius: {config.navigation.chassis_radius} m")

    mover = SimulatedMover(Position(start, start.angle_to(target)), config.mover, environment)
    sensor = SimulatedRangeSensor(environment, lambda: mover.position, config.sensor)
    processor = Processor(sensor, mover, config)

    reached = processor.move_to(target, args.max_steps)
    raw_route = processor.solution.coordinates()
    raw_waypoints = len(raw_route)
    raw_cost = processor.solution.cost()
    inside = [c for c in raw_route if environment.is_blocked(c.x, c.y)]
    if mover.blocked_moves or inside:
        logger.warning("route touched walls: %d blocked moves, %d waypoints inside walls",
                       mover.blocked_moves, len(inside))
    if not args.no_simplify:
        processor.planner.record_solution()

    print(f"Result: {'target reached' if reached else 'step budget exhausted'} "
          f"in {processor.steps_taken} steps")
    print(f"Route: {raw_waypoints} waypoints ({raw_cost:.2f} m)"
          + ("" if args.no_simplify else
             f" -> {len(processor.solution)} waypoints ({processor.solution.cost():.2f} m)"))
    print(f"Collisions: {mover.blocked_moves} blocked moves, "
          f"{len(inside)} waypoints inside walls")
    print(f"Map: {processor.map.node_count} nodes, {processor.map.obstacle_count} obstacles")
    for coord in processor.solution:
        print(f"  ({coord.x:6.2f}, {coord.y:6.2f})")

    snapshot = processor.snapshot()
    if args.text:
        from .visualization.text import render_text
        print(render_text(snapshot))

    if args.save_map:
        save_map(processor.map, args.save_map)
        print(f"Map saved to {args.save_map}")

    if args.gui:
        import matplotlib.pyplot as plt
        from .visualization.plot import plot_snapshot
        plot_snapshot(snapshot, environment=environment)
        plt.show()

    return 0 if reached else 2


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        setup_logging(args.log_level)
    except ValueError as e:
        parser.error(str(e))

    try:
        return run(args)
    except NavigationError as e:
        logger.error("%s", e)
        return 1
    except KeyboardInterrupt:
        print("\n[INFO] Interrupted")
        return 130


if __name__ == '__main__':
    sys.exit(main())
