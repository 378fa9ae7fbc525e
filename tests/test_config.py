#!/usr/bin/env python3
"""
Tests for filter option validation and normalization
"""

from pathlib import Path

import pytest

from ignore_filter.config import FileRecord, FilterError, FilterOptions, filenames_from_env


def test_defaults(tmp_path):
    options = FilterOptions.from_options(cwd=tmp_path)

    assert options.filenames == (".ignore",)
    assert options.exclude_ignore_file is True
    assert options.cwd == tmp_path

    record = FileRecord(path=tmp_path / "src" / "a.py", base=tmp_path / "src")
    assert options.max_parent(record) == tmp_path / "src"


@pytest.mark.parametrize("filename, expected", [
    ("foo", ("foo",)),
    (["foo"], ("foo",)),
    (["foo", "bar"], ("foo", "bar")),
])
def test_filename_accepts_strings_and_string_lists(filename, expected):
    assert FilterOptions.from_options(filename=filename).filenames == expected


@pytest.mark.parametrize("filename", [{}, [], ["foo", 3, "bar"], ["foo", None, "bar"], None])
def test_filename_rejects_other_types(filename):
    with pytest.raises(FilterError, match="ignore-filter"):
        FilterOptions.from_options(filename=filename)


def test_max_parent_string_is_resolved_once_against_cwd(tmp_path):
    options = FilterOptions.from_options(max_parent="project", cwd=tmp_path)
    record = FileRecord(path=tmp_path / "project" / "a", base=tmp_path / "elsewhere")

    assert options.max_parent(record) == tmp_path / "project"


def test_max_parent_accepts_path_objects(tmp_path):
    options = FilterOptions.from_options(max_parent=tmp_path / "x" / "..", cwd="/")
    record = FileRecord(path=tmp_path / "a", base=Path("/"))

    assert options.max_parent(record) == tmp_path


def test_max_parent_function_result_is_resolved_against_cwd(tmp_path):
    options = FilterOptions.from_options(max_parent=lambda record: "sub", cwd=tmp_path)
    record = FileRecord(path=tmp_path / "sub" / "a", base=tmp_path)

    assert options.max_parent(record) == tmp_path / "sub"


@pytest.mark.parametrize("max_parent", [3, ["a"], {}])
def test_max_parent_rejects_other_types(max_parent):
    with pytest.raises(FilterError):
        FilterOptions.from_options(max_parent=max_parent)


@pytest.mark.parametrize("value", [None, "yes", 1])
def test_exclude_ignore_file_must_be_bool(value):
    with pytest.raises(FilterError, match="exclude_ignore_file"):
        FilterOptions.from_options(exclude_ignore_file=value)


def test_is_rule_file(tmp_path):
    options = FilterOptions.from_options(filename=[".ignore", ".buildignore"])

    assert options.is_rule_file(FileRecord(path=tmp_path / ".buildignore", base=tmp_path))
    assert not options.is_rule_file(FileRecord(path=tmp_path / "ignore", base=tmp_path))


def test_record_from_relative_path(tmp_path):
    record = FileRecord.from_path("src/../lib/a.py", cwd=tmp_path, payload="raw")

    assert record.path == tmp_path / "lib" / "a.py"
    assert record.base == tmp_path
    assert record.payload == "raw"


def test_filter_error_wraps_exceptions():
    error = FilterError(OSError("boom"))
    assert str(error) == "ignore-filter: boom"
    assert error.plugin == "ignore-filter"


def test_filenames_from_env(monkeypatch):
    monkeypatch.setenv("IGNORE_FILTER_FILENAMES", ".ignore, .buildignore,,")
    assert filenames_from_env() == (".ignore", ".buildignore")

    monkeypatch.delenv("IGNORE_FILTER_FILENAMES")
    assert filenames_from_env() == (".ignore",)
