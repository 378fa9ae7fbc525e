"""
Main ignore resolver API: hierarchical, memoized rule resolution per directory
"""

import asyncio
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Union

from .cache import CheckerCache
from .constants import DEFAULT_IGNORE_FILENAME
from .errors import BoundaryViolationError, IgnoreFilterError
from .file_loader import IgnoreFileLoader, RuleFileReader
from .rule_engine import IgnoreRuleEngine, DirectoryChecker, NEVER
from ignore_filter.utils import get_logger, log_with_context

logger = get_logger(__name__)

PathLike = Union[str, os.PathLike]


def normalize_path(path: PathLike) -> Path:
    """Absolute, lexically normalized path (symlinks are not resolved)"""
    return Path(os.path.normpath(os.path.abspath(os.fspath(path))))


def is_within(directory: Path, boundary: Path) -> bool:
    """Whether `directory` is `boundary` or below it, compared by path components"""
    return directory == boundary or boundary in directory.parents


class IgnoreResolver:
    """
    Decides inclusion of files from the rule files of every directory between
    the file and a boundary directory.

    The checker of a directory combines its own rule files with the checker of
    its parent. Checkers are resolved once per (directory, boundary) and shared
    by every query, including queries that are still in flight.
    """

    def __init__(self,
                 filenames: Sequence[str] = (DEFAULT_IGNORE_FILENAME,),
                 reader: Optional[RuleFileReader] = None,
                 engine: Optional[IgnoreRuleEngine] = None):
        """
        Initialize the resolver

        Args:
            filenames: Rule file names looked for in every directory, in precedence order
            reader: Async capability returning a file's content or None when it does not exist
            engine: Rule engine to use instead of one built from `filenames` and `reader`
        """
        if engine is None:
            engine = IgnoreRuleEngine(IgnoreFileLoader(filenames, reader))
        self._engine = engine
        self.filenames = engine.loader.filenames
        self._cache = CheckerCache()

    async def check(self, file_path: PathLike, boundary: PathLike) -> bool:
        """
        Check whether a file should be included

        Args:
            file_path: Absolute path of the file
            boundary: Highest directory whose rule files are considered

        Returns:
            True if the file is included, False if it is excluded
        """
        file_path = normalize_path(file_path)
        checker = await self.resolve(file_path.parent, boundary)
        return checker(file_path)

    async def resolve(self, directory: PathLike, boundary: PathLike) -> DirectoryChecker:
        """
        Get the combined checker for files directly inside a directory

        Args:
            directory: Directory whose files will be checked
            boundary: Highest directory whose rule files are considered

        Returns:
            Checker considering the rule files of `directory` and of every
            ancestor up to `boundary`, but none below `directory`

        Raises:
            BoundaryViolationError: if `directory` is not inside `boundary`
            RuleFileReadError: if a rule file exists but cannot be read
            RuleCompilationError: if a rule file holds invalid patterns
        """
        directory = normalize_path(directory)
        boundary = normalize_path(boundary)
        try:
            return await self._checker_for(directory, boundary)
        except IgnoreFilterError as e:
            log_with_context(
                logger, logging.WARNING, f"Ignore resolution failed: {e}",
                directory=str(directory), boundary=str(boundary),
            )
            raise

    def _checker_for(self, directory: Path, boundary: Path) -> "asyncio.Future[DirectoryChecker]":
        key = (directory, boundary)
        if key not in self._cache and not is_within(directory, boundary):
            raise BoundaryViolationError(directory, boundary)
        task = self._cache.get_or_start(key, lambda: self._resolve(directory, boundary))
        # A waiter giving up must not cancel the resolution other waiters share
        return asyncio.shield(task)

    async def _resolve(self, directory: Path, boundary: Path) -> DirectoryChecker:
        if directory == boundary:
            logger.debug(f"Resolving {directory} (boundary)")
            return await self._engine.compile_directory(directory)

        parent_checker = await self._checker_for(directory.parent, boundary)
        if self._excludes_directory(parent_checker, directory):
            logger.trace(f"{directory} is excluded by its parent, skipping its rule files")
            return NEVER

        logger.debug(f"Resolving {directory}")
        own_checker = await self._engine.compile_directory(directory)

        def checker(path, is_dir: bool = False) -> bool:
            return own_checker(path, is_dir) and parent_checker(path, is_dir)

        return checker

    @staticmethod
    def _excludes_directory(parent_checker: DirectoryChecker, directory: Path) -> bool:
        # The plain form decides, as for a candidate file. The slash form alone
        # must not: `d/**` matches `d/` yet `!d/keep` still re-includes d/keep.
        return not parent_checker(directory) and not parent_checker(directory, is_dir=True)

    async def cleanup(self):
        """Free cached checkers; the resolver cannot be queried afterwards"""
        logger.debug(f"Discarding {len(self._cache)} cached directory checkers")
        self._cache.clear()

    def get_stats(self) -> Dict[str, Any]:
        """
        Get resolver statistics

        Returns:
            Dictionary with cache and rule file statistics
        """
        return {
            'filenames': list(self.filenames),
            'cache': self._cache.get_stats(),
            'rule_file_reads': self._engine.loader.files_read,
            'closed': self._cache.closed,
        }
