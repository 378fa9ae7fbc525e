"""
Option handling for the ignore filter stream stage and CLI
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterable, Tuple, Union

from ignore_filter.ignore.constants import DEFAULT_IGNORE_FILENAME, PLUGIN_NAME
from ignore_filter.ignore.manager import normalize_path
from ignore_filter.utils import get_logger

logger = get_logger(__name__)

FILENAMES_ENV = 'IGNORE_FILTER_FILENAMES'


class FilterError(Exception):
    """Error raised by the filter stage, prefixed with the plugin name"""

    def __init__(self, message: Union[str, BaseException]):
        if isinstance(message, BaseException):
            message = str(message) or type(message).__name__
        super().__init__(f"{PLUGIN_NAME}: {message}")
        self.plugin = PLUGIN_NAME


@dataclass
class FileRecord:
    """One file travelling through a filter stream"""
    path: Path
    base: Path
    payload: Any = None

    @classmethod
    def from_path(cls, path: Union[str, os.PathLike], base: Union[str, os.PathLike, None] = None,
                  cwd: Union[str, os.PathLike, None] = None, payload: Any = None) -> 'FileRecord':
        """Build a record, resolving relative paths against `cwd`"""
        cwd = Path(cwd) if cwd is not None else Path.cwd()
        base = cwd if base is None else cwd / base
        return cls(path=normalize_path(cwd / path), base=normalize_path(base), payload=payload)


def _normalize_filenames(filename: Any) -> Tuple[str, ...]:
    if isinstance(filename, str):
        return (filename,)
    if not isinstance(filename, (list, tuple)):
        raise FilterError(
            f"options.filename must be a string or a not-empty string array. "
            f"Got {type(filename).__name__}."
        )
    if len(filename) == 0:
        raise FilterError("options.filename may not be empty")
    if not all(isinstance(name, str) for name in filename):
        raise FilterError(f"options.filename may only contain strings. Got {list(filename)!r}.")
    return tuple(filename)


def _normalize_max_parent(max_parent: Any, cwd: Path) -> Callable[[FileRecord], Path]:
    if max_parent is None:
        return lambda record: normalize_path(cwd / record.base)
    if isinstance(max_parent, (str, os.PathLike)):
        parent = normalize_path(cwd / max_parent)
        return lambda record: parent
    if callable(max_parent):
        return lambda record: normalize_path(cwd / max_parent(record))
    raise FilterError(
        f"options.max_parent must be a function or a path. Got {type(max_parent).__name__}."
    )


@dataclass
class FilterOptions:
    """
    Normalized filter options

    Attributes:
        filenames: Rule file names, in precedence order
        max_parent: Function giving the boundary directory of a record
        exclude_ignore_file: Whether rule files themselves are dropped from the stream
        cwd: Working directory relative paths were resolved against
    """
    filenames: Tuple[str, ...] = (DEFAULT_IGNORE_FILENAME,)
    max_parent: Callable[[FileRecord], Path] = field(
        default=lambda record: normalize_path(record.base)
    )
    exclude_ignore_file: bool = True
    cwd: Path = field(default_factory=Path.cwd)

    @classmethod
    def from_options(cls,
                     filename: Union[str, Iterable[str]] = DEFAULT_IGNORE_FILENAME,
                     max_parent: Union[str, os.PathLike, Callable[[FileRecord], Any], None] = None,
                     exclude_ignore_file: bool = True,
                     cwd: Union[str, os.PathLike, None] = None) -> 'FilterOptions':
        """
        Validate user options and normalize them

        Args:
            filename: Rule file name or list of names
            max_parent: Boundary directory, or a function of the record returning it.
                Defaults to the record's base directory
            exclude_ignore_file: Drop rule files themselves from the stream
            cwd: Directory relative paths are resolved against, captured once.
                Defaults to the process working directory

        Returns:
            Normalized options

        Raises:
            FilterError: if an option has the wrong type
        """
        cwd = normalize_path(cwd if cwd is not None else os.getcwd())
        filenames = _normalize_filenames(filename)
        if not isinstance(exclude_ignore_file, bool):
            raise FilterError(
                f"options.exclude_ignore_file must be a boolean. "
                f"Got {type(exclude_ignore_file).__name__}."
            )
        options = cls(
            filenames=filenames,
            max_parent=_normalize_max_parent(max_parent, cwd),
            exclude_ignore_file=exclude_ignore_file,
            cwd=cwd,
        )
        logger.debug(f"Filter options: filenames={list(filenames)}, cwd={cwd}")
        return options

    def is_rule_file(self, record: FileRecord) -> bool:
        return Path(record.path).name in self.filenames


def filenames_from_env(default: Tuple[str, ...] = (DEFAULT_IGNORE_FILENAME,)) -> Tuple[str, ...]:
    """Rule file names from IGNORE_FILTER_FILENAMES (comma separated), or `default`"""
    value = os.environ.get(FILENAMES_ENV, '')
    names = tuple(name.strip() for name in value.split(',') if name.strip())
    return names or default
