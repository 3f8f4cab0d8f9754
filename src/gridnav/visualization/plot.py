"""
Matplotlib view of a navigation snapshot.

Usage:
    fig, ax = plt.subplots()
    plot_snapshot(processor.snapshot(), ax=ax, environment=env)
    plt.show()
"""

import math
from typing import Optional

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.collections import LineCollection
from matplotlib.patches import Circle, Polygon, Rectangle

from ..navigation.snapshot import NavigationSnapshot
from ..simulation.environment import Environment, ObstacleType

NODE_COLORS = {
    'direct': 'tab:green',
    'indirect': 'tab:orange',
    'visited': 'lightgray',
}


def _draw_environment(ax, environment: Environment):
    """Ground-truth obstacles, drawn faintly under the sensed map."""
    for obs in environment.obstacles:
        if obs.obstacle_type == ObstacleType.WALL:
            ax.plot([obs.x, obs.x2], [obs.y, obs.y2], 'k-', linewidth=1, alpha=0.3)
        elif obs.obstacle_type == ObstacleType.BOX:
            ax.add_patch(Polygon(np.array(obs.corners()), closed=True,
                                 facecolor='none', edgecolor='black', alpha=0.3))
        elif obs.obstacle_type == ObstacleType.CYLINDER:
            ax.add_patch(Circle((obs.x, obs.y), obs.radius,
                                facecolor='none', edgecolor='black', alpha=0.3))


def plot_snapshot(snapshot: NavigationSnapshot, ax=None,
                  environment: Optional[Environment] = None,
                  title: Optional[str] = None):
    """
    Draw obstacles, nodes, paths, route and robot.

    Args:
        snapshot: Planner snapshot to draw
        ax: Axes to draw on (new figure if None)
        environment: Optional ground truth to draw underneath
        title: Axes title

    Returns:
        The axes
    """
    if ax is None:
        _, ax = plt.subplots(1, 1, figsize=(8, 8))

    map_snap = snapshot.map
    if environment is not None:
        _draw_environment(ax, environment)

    # Sensed obstacle cells
    for obs in map_snap.obstacles:
        half = obs.size / 2
        ax.add_patch(Rectangle((obs.x - half, obs.y - half), obs.size, obs.size,
                               facecolor='gray', edgecolor='black', alpha=0.7))

    # Recorded paths
    if map_snap.edges:
        ax.add_collection(LineCollection(map_snap.edges, colors='tab:blue',
                                         linewidths=0.5, alpha=0.2))

    # Nodes
    for kind in ('direct', 'indirect', 'visited'):
        if kind == 'visited':
            nodes = [n for n in map_snap.nodes if n.visited]
        else:
            nodes = [n for n in map_snap.nodes
                     if not n.visited and n.indirect == (kind == 'indirect')]
        if nodes:
            ax.scatter([n.x for n in nodes], [n.y for n in nodes],
                       c=NODE_COLORS[kind], s=12, label=f"{kind} ({len(nodes)})")

    # Route
    if snapshot.solution:
        xs, ys = zip(*(c.as_tuple() for c in snapshot.solution))
        ax.plot(xs, ys, 'b-', linewidth=2, alpha=0.8, label='route')

    # Targets
    if snapshot.final_target is not None:
        ax.scatter([snapshot.final_target.x], [snapshot.final_target.y],
                   c='red', marker='*', s=200, label='target')
    if snapshot.target is not None and snapshot.target != snapshot.final_target:
        ax.scatter([snapshot.target.x], [snapshot.target.y],
                   c='magenta', marker='x', s=80, label='detour')

    # Robot
    pos = snapshot.position
    ax.add_patch(Circle((pos.x, pos.y), max(map_snap.chassis_radius, 0.05),
                        facecolor='tab:blue', edgecolor='navy'))
    arrow = max(map_snap.resolution, 0.3)
    ax.arrow(pos.x, pos.y, arrow * math.cos(snapshot.heading), arrow * math.sin(snapshot.heading),
             head_width=0.1, color='navy')

    ax.set_aspect('equal')
    ax.autoscale_view()
    ax.grid(True, alpha=0.3)
    ax.set_xlabel('X (meters)')
    ax.set_ylabel('Y (meters)')
    ax.set_title(title or f"{snapshot.state}: {len(snapshot.solution)} waypoints")
    ax.legend(loc='upper right', fontsize=8)
    return ax
