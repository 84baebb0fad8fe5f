"""Tests for componentry.fs."""

from __future__ import annotations

from pathlib import Path

import pytest

from componentry.errors import PreconditionError
from componentry.fs import normalize_paths, read_dirs, scan_dirs
from tests._fixtures.source_builder import SourceBuilder


def test_scan_dirs_reads_files_in_sorted_walk_order(source_builder: SourceBuilder) -> None:
    source_builder.write(
        {
            "b.txt": "b",
            "a/one.txt": "one",
            "node_modules/pkg/index.js": "ignored",
            ".git/config": "ignored",
        }
    )

    files = scan_dirs([source_builder.path()])
    relatives = [file.relative for file in files]

    assert relatives == ["b.txt", "a/one.txt"]
    first = files.find("a/one.txt")
    assert first is not None
    assert first.contents == b"one"
    assert first.size == 3
    assert first.base == source_builder.path().resolve()


def test_scan_dirs_honours_custom_exclude_patterns(source_builder: SourceBuilder) -> None:
    source_builder.write({"keep.html": "x", "skip.log": "x", "build/out.html": "x"})

    files = scan_dirs([source_builder.path()], exclude=["*.log", "build"])

    assert [file.relative for file in files] == ["keep.html"]


def test_scan_dirs_rejects_missing_directory(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        scan_dirs([tmp_path / "missing"])


@pytest.mark.asyncio
async def test_read_dirs_is_awaitable(source_builder: SourceBuilder) -> None:
    source_builder.write({"page.html": "<p></p>"})

    files = await read_dirs([source_builder.path()])

    assert [file.name for file in files] == ["page.html"]


def test_normalize_paths_accepts_single_and_multiple_paths(tmp_path: Path) -> None:
    assert normalize_paths(tmp_path) == [str(tmp_path.resolve())]
    assert normalize_paths([tmp_path, str(tmp_path)]) == [str(tmp_path.resolve())] * 2


def test_normalize_paths_rejects_invalid_values() -> None:
    with pytest.raises(PreconditionError) as excinfo:
        normalize_paths(42)  # type: ignore[arg-type]

    assert excinfo.value.code == "src-invalid"


@pytest.mark.asyncio
async def test_read_dirs_records_the_source_encoding(source_builder: SourceBuilder) -> None:
    (source_builder.path() / "note.txt").write_bytes("déjà vu".encode("latin-1"))

    default_files = await read_dirs([source_builder.path()])
    latin1_files = await read_dirs([source_builder.path()], encoding="latin-1")

    assert default_files.get_all()[0].encoding == "utf-8"
    note = latin1_files.get_all()[0]
    assert note.encoding == "latin-1"
    assert note.text() == "déjà vu"
    assert note.copy().text() == "déjà vu"
