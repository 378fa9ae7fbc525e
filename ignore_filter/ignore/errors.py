"""
Exceptions raised while resolving ignore rules
"""

from pathlib import Path
from typing import Optional


class IgnoreFilterError(Exception):
    """Base class for every error raised by the ignore engine"""


class BoundaryViolationError(IgnoreFilterError, ValueError):
    """A directory outside the configured boundary was asked for"""

    def __init__(self, directory: Path, boundary: Path):
        super().__init__(f"{directory} is outside of max parent ({boundary}).")
        self.directory = directory
        self.boundary = boundary


class RuleFileReadError(IgnoreFilterError, OSError):
    """A rule file exists but could not be read"""

    def __init__(self, path: Path, cause: OSError):
        reason = cause.strerror or str(cause)
        super().__init__(cause.errno, f"Cannot read rule file {path}: {reason}", str(path))
        self.path = path


class RuleCompilationError(IgnoreFilterError, ValueError):
    """The rule set of a directory could not be compiled"""

    def __init__(self, directory: Path, reason: str, pattern: Optional[str] = None):
        message = f"Invalid ignore rules in {directory}: {reason}"
        super().__init__(message)
        self.directory = directory
        self.pattern = pattern


class ResolverClosedError(IgnoreFilterError, RuntimeError):
    """The resolver was used after cleanup()"""
