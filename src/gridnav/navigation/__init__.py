"""
Navigation module.
- Planner: step-wise greedy planner with a two-deep target stack
- Solution: recorded route and its simplification
- Processor: sense / plan / move loop
"""

from .target_stack import TargetStack
from .solution import Solution
from .snapshot import NavigationSnapshot
from .planner import Planner
from .processor import Processor

__all__ = [
    'TargetStack',
    'Solution',
    'NavigationSnapshot',
    'Planner',
    'Processor',
]
