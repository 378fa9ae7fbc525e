"""Shared fixtures for ignore-filter tests"""

import asyncio
from collections import Counter
from pathlib import Path
from typing import Iterable, Optional

import pytest

from ignore_filter.ignore import read_file_if_exists


def touch(root: Path, files: Iterable[str]) -> Path:
    """Create empty files (and their directories) below root"""
    for name in files:
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("")
    return root


def write_ignore_file(root: Path, name: str, lines: Iterable[str]) -> Path:
    path = root / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines))
    return path


class CountingReader:
    """Rule file reader recording every read, optionally slowed down"""

    def __init__(self, delay: float = 0.0):
        self.delay = delay
        self.reads = Counter()

    async def __call__(self, path: Path) -> Optional[str]:
        self.reads[Path(path)] += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        return await read_file_if_exists(path)

    def read_count(self, path: Path) -> int:
        return self.reads[Path(path)]

    @property
    def total(self) -> int:
        return sum(self.reads.values())


@pytest.fixture
def reader():
    return CountingReader()


@pytest.fixture
def slow_reader():
    return CountingReader(delay=0.01)
