"""
Rule engine compiling the rule files of one directory into a checker
"""

import os
from pathlib import Path
from typing import Callable, List, Optional

import pathspec

from .errors import RuleCompilationError
from .file_loader import IgnoreFileLoader, RuleFile
from ignore_filter.utils import get_logger

logger = get_logger(__name__)

# (path, is_dir) -> True when the path is included
DirectoryChecker = Callable[..., bool]


def ALWAYS(path, is_dir: bool = False) -> bool:
    """Checker of a directory without rule files: everything is included"""
    return True


def NEVER(path, is_dir: bool = False) -> bool:
    """Checker of an excluded directory: nothing beneath it is included"""
    return False


def relative_rule_path(path: Path, directory: Path, is_dir: bool = False) -> str:
    """
    Express a path the way gitignore patterns of `directory` see it

    Args:
        path: Absolute path inside `directory`
        directory: Directory holding the rule files
        is_dir: Whether `path` is a directory; adds the trailing slash
            directory-only patterns need

    Returns:
        POSIX path relative to `directory`
    """
    rel_path = Path(os.path.relpath(path, directory)).as_posix()
    if is_dir:
        rel_path += '/'
    return rel_path


class IgnoreRuleEngine:
    """
    Handles pattern compilation and path matching for a single directory level
    """

    def __init__(self, loader: IgnoreFileLoader):
        self.loader = loader

    def compile_rules(self, directory: Path, rule_files: List[RuleFile]) -> pathspec.GitIgnoreSpec:
        """
        Compile the rule files of one directory into a single matcher

        Args:
            directory: Directory the rules belong to
            rule_files: Rule files in precedence order; later lines win

        Returns:
            Compiled matcher

        Raises:
            RuleCompilationError: if the matcher library rejects a pattern
        """
        lines = [line for rule_file in rule_files for line in rule_file.lines]
        try:
            return pathspec.GitIgnoreSpec.from_lines(lines)
        except ValueError as e:
            raise RuleCompilationError(directory, str(e), getattr(e, 'pattern', None)) from e

    def build_checker(self, directory: Path, spec: Optional[pathspec.GitIgnoreSpec]) -> DirectoryChecker:
        """Wrap a matcher into a checker for paths inside `directory`"""
        if spec is None:
            return ALWAYS

        def checker(path, is_dir: bool = False) -> bool:
            return not spec.match_file(relative_rule_path(path, directory, is_dir))

        return checker

    async def compile_directory(self, directory: Path) -> DirectoryChecker:
        """
        Build the checker for the rule files found directly inside a directory

        Args:
            directory: Directory to read rule files from

        Returns:
            ALWAYS if none of the configured rule files exist, otherwise a
            checker excluding the paths the combined rules match
        """
        rule_files = await self.loader.load_directory(directory)
        if not rule_files:
            return ALWAYS

        spec = self.compile_rules(directory, rule_files)
        logger.debug(
            f"Compiled {sum(len(rule_file.lines) for rule_file in rule_files)} rule lines from "
            f"{', '.join(rule_file.path.name for rule_file in rule_files)} in {directory}"
        )
        return self.build_checker(directory, spec)
