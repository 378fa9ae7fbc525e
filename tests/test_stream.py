#!/usr/bin/env python3
"""
Tests for the filter stream stage
"""

from pathlib import Path
from typing import List

import pytest

from ignore_filter import FileFilterStage, FileRecord, FilterError, FilterOptions, filter_files
from ignore_filter.ignore import IgnoreResolver

from conftest import CountingReader, touch, write_ignore_file


def records_for(root: Path, names: List[str]) -> List[FileRecord]:
    return [FileRecord(path=root / name, base=root) for name in names]


async def collect(stream) -> List[str]:
    return [str(record.path.relative_to(record.base)) async for record in stream]


@pytest.mark.asyncio
async def test_stream_unchanged_without_rule_files(tmp_path):
    files = ["a", "b/a", "b/b", "b/c", "b/d/a/a/a", "b/d/a/b", "b/e"]
    touch(tmp_path, files)

    result = await collect(filter_files(records_for(tmp_path, files)))

    assert result == files


@pytest.mark.asyncio
async def test_stream_drops_excluded_files_in_order(tmp_path):
    files = ["a", "b/a", "b/b", "c"]
    touch(tmp_path, files)
    write_ignore_file(tmp_path, ".ignore", ["c"])
    write_ignore_file(tmp_path, "b/.ignore", ["b"])

    result = await collect(filter_files(records_for(tmp_path, files), concurrency=2))

    assert result == ["a", "b/a"]


@pytest.mark.asyncio
async def test_rule_files_are_dropped_by_default(tmp_path):
    files = [".ignore", "a", "b/.ignore", "b/a"]
    touch(tmp_path, files)

    dropped = await collect(filter_files(records_for(tmp_path, files)))
    kept = await collect(filter_files(
        records_for(tmp_path, files),
        FilterOptions.from_options(exclude_ignore_file=False),
    ))

    assert dropped == ["a", "b/a"]
    assert kept == files


@pytest.mark.asyncio
async def test_multiple_filenames(tmp_path):
    files = ["a.log", "a.tmp", "a.py", ".gitignore"]
    touch(tmp_path, files)
    write_ignore_file(tmp_path, ".ignore", ["*.log"])
    write_ignore_file(tmp_path, ".buildignore", ["*.tmp"])
    options = FilterOptions.from_options(filename=[".ignore", ".buildignore"])

    result = await collect(filter_files(records_for(tmp_path, files), options))

    assert result == ["a.py", ".gitignore"]


@pytest.mark.asyncio
async def test_max_parent_option(tmp_path):
    touch(tmp_path, ["project/src/a.log", "project/src/b.py"])
    write_ignore_file(tmp_path, ".ignore", ["*.log"])
    records = records_for(tmp_path / "project", ["src/a.log", "src/b.py"])

    default = await collect(filter_files(records))
    widened = await collect(filter_files(
        records, FilterOptions.from_options(max_parent=tmp_path)
    ))

    assert default == ["src/a.log", "src/b.py"]
    assert widened == ["src/b.py"]


@pytest.mark.asyncio
async def test_async_iterable_input(tmp_path):
    touch(tmp_path, ["a", "b"])
    write_ignore_file(tmp_path, ".ignore", ["b"])

    async def produce():
        for record in records_for(tmp_path, ["a", "b"]):
            yield record

    assert await collect(filter_files(produce())) == ["a"]


@pytest.mark.asyncio
async def test_errors_are_wrapped(tmp_path):
    touch(tmp_path, ["a/.ignore/b", "c"])
    options = FilterOptions.from_options(filename=".ignore")

    with pytest.raises(FilterError) as exc_info:
        await collect(filter_files(records_for(tmp_path, ["c", "a/x"]), options))

    assert "Is a directory" in str(exc_info.value)
    assert str(exc_info.value).startswith("ignore-filter: ")
    assert isinstance(exc_info.value.__cause__, OSError)


@pytest.mark.asyncio
async def test_invalid_concurrency(tmp_path):
    with pytest.raises(FilterError):
        await collect(filter_files([], concurrency=0))


@pytest.mark.asyncio
async def test_stage_reads_each_directory_once_and_cleans_up(tmp_path):
    files = [f"d/f{i}" for i in range(10)]
    touch(tmp_path, files)
    reader = CountingReader()
    stage = FileFilterStage(
        FilterOptions.from_options(),
        IgnoreResolver([".ignore"], reader=reader),
    )

    result = await collect(filter_files(records_for(tmp_path, files), stage=stage))

    assert result == files
    assert reader.total == 2
    assert stage.forwarded == 10
    assert stage.dropped == 0
    assert stage.resolver.get_stats()["closed"]


@pytest.mark.asyncio
async def test_process_single_record(tmp_path):
    touch(tmp_path, ["keep", "drop"])
    write_ignore_file(tmp_path, ".ignore", ["drop"])

    async with FileFilterStage() as stage:
        kept = await stage.process(FileRecord(path=tmp_path / "keep", base=tmp_path))
        dropped = await stage.process(FileRecord(path=tmp_path / "drop", base=tmp_path))

    assert kept is not None and kept.path == tmp_path / "keep"
    assert dropped is None
    assert (stage.forwarded, stage.dropped) == (1, 1)
