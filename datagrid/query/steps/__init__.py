"""
Query pipeline steps.

Fixed order: search (10), filtering (20), sorting (30), pagination (100).
"""

from .filtering import FilterStep
from .pagination import PaginationStep
from .search import SearchStep
from .sorting import SortStep

__all__ = ["FilterStep", "PaginationStep", "SearchStep", "SortStep"]
