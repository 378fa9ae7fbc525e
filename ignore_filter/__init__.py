"""
ignore-filter - drop files excluded by gitignore-style rule files

Rule files are looked up in every directory between a file and a boundary
directory, read once per directory, and combined from the boundary down.
"""

__version__ = "1.0.0"

from .ignore import (
    IgnoreResolver,
    IgnoreFilterError,
    BoundaryViolationError,
    RuleFileReadError,
    RuleCompilationError,
    ResolverClosedError,
)
from .config import FileRecord, FilterError, FilterOptions
from .stream import FileFilterStage, filter_files

__all__ = [
    '__version__',
    'IgnoreResolver',
    'IgnoreFilterError',
    'BoundaryViolationError',
    'RuleFileReadError',
    'RuleCompilationError',
    'ResolverClosedError',
    'FileRecord',
    'FilterError',
    'FilterOptions',
    'FileFilterStage',
    'filter_files',
]
