"""
Visualization module.
- matplotlib plot of a navigation snapshot
- text rendering for terminals and logs
"""

from .plot import plot_snapshot
from .text import render_text

__all__ = ['plot_snapshot', 'render_text']
