"""
Hierarchical ignore file processing

This module decides inclusion of files from gitignore-style rule files:
- Rule files are looked for in every directory between a file and a boundary
- Each directory's rules are read and compiled once, even under concurrent queries
- A directory excluded by an ancestor excludes everything beneath it without
  reading its own rule files
"""

from .constants import DEFAULT_IGNORE_FILENAME, PLUGIN_NAME
from .errors import (
    IgnoreFilterError,
    BoundaryViolationError,
    RuleFileReadError,
    RuleCompilationError,
    ResolverClosedError,
)
from .file_loader import IgnoreFileLoader, RuleFile, read_file_if_exists
from .rule_engine import IgnoreRuleEngine, ALWAYS, NEVER
from .cache import CheckerCache
from .manager import IgnoreResolver

__all__ = [
    'DEFAULT_IGNORE_FILENAME',
    'PLUGIN_NAME',
    'IgnoreFilterError',
    'BoundaryViolationError',
    'RuleFileReadError',
    'RuleCompilationError',
    'ResolverClosedError',
    'IgnoreFileLoader',
    'RuleFile',
    'read_file_if_exists',
    'IgnoreRuleEngine',
    'ALWAYS',
    'NEVER',
    'CheckerCache',
    'IgnoreResolver',
]
