"""
GraphQL surface for registered grids.
"""

from .mutations import GridMutations
from .queries import GridQuery

__all__ = ["GridMutations", "GridQuery"]
