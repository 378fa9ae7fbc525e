"""
File loader for reading the rule files of one directory
"""

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, List, Optional, Sequence, Union

from .constants import RULE_FILE_ENCODING, RULE_FILE_ERRORS
from .errors import RuleFileReadError
from ignore_filter.utils import get_logger

logger = get_logger(__name__)

RuleFileReader = Callable[[Path], Awaitable[Optional[str]]]


@dataclass
class RuleFile:
    """Contents of one rule file found in a directory"""
    path: Path
    content: str

    @property
    def lines(self) -> List[str]:
        return self.content.splitlines()


def _read_text(path: Path) -> Optional[str]:
    try:
        with open(path, 'r', encoding=RULE_FILE_ENCODING, errors=RULE_FILE_ERRORS) as f:
            return f.read()
    except FileNotFoundError:
        return None
    except OSError as e:
        raise RuleFileReadError(path, e) from e


async def read_file_if_exists(path: Union[str, Path]) -> Optional[str]:
    """
    Read a rule file without blocking the event loop

    Args:
        path: File to read

    Returns:
        The file content, or None if the file does not exist

    Raises:
        RuleFileReadError: for any other failure (permissions, path is a directory, ...)
    """
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, _read_text, Path(path))


class IgnoreFileLoader:
    """
    Reads the configured rule files of a directory concurrently
    """

    def __init__(self, filenames: Sequence[str], reader: Optional[RuleFileReader] = None):
        """
        Initialize loader

        Args:
            filenames: Names of rule files to look for, in precedence order
            reader: Async capability returning file content or None when absent
        """
        if not filenames:
            raise ValueError("at least one rule file name is required")
        self.filenames = tuple(filenames)
        self._reader = reader or read_file_if_exists
        self.files_read = 0

    async def load_directory(self, directory: Path) -> List[RuleFile]:
        """
        Read every configured rule file directly inside a directory

        All reads are started together and joined before returning, so the
        result keeps the configured filename order whatever order they finish in.

        Args:
            directory: Directory to look in

        Returns:
            The rule files that exist, in configured filename order
        """
        paths = [directory / filename for filename in self.filenames]
        contents = await asyncio.gather(*(self._reader(path) for path in paths))
        self.files_read += len(paths)

        found = [
            RuleFile(path=path, content=content)
            for path, content in zip(paths, contents)
            if content is not None
        ]
        for rule_file in found:
            logger.trace(f"Loaded rule file {rule_file.path} ({len(rule_file.lines)} lines)")
        return found
