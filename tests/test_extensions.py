"""Tests for extension loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from componentry.errors import PreconditionError
from componentry.extensions import load_extension
from componentry.orchestrator import Orchestrator


def _write_extension_module(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / "library_ext.py").write_text(
        "def register(app):\n"
        "    app.add_method('greeting', lambda result: 'hello')\n"
        "\n"
        "class Bundle:\n"
        "    @staticmethod\n"
        "    def register(app):\n"
        "        app.add_method('bundled', lambda result: True, 'files')\n"
        "\n"
        "NOT_CALLABLE = 42\n",
        encoding="utf-8",
    )
    monkeypatch.syspath_prepend(str(tmp_path))


def test_load_extension_returns_callables_unchanged() -> None:
    def extension(app):
        return None

    assert load_extension(extension) is extension


@pytest.mark.parametrize("ref", ["library_ext:register", "library_ext.register", "library_ext:Bundle.register"])
def test_load_extension_resolves_import_paths(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, ref: str) -> None:
    _write_extension_module(tmp_path, monkeypatch)

    extension = load_extension(ref)

    assert callable(extension)
    assert extension.__name__ == "register"


@pytest.mark.parametrize("ref", ["", "   ", "register", 42, None])
def test_load_extension_rejects_malformed_references(ref) -> None:
    with pytest.raises(PreconditionError) as excinfo:
        load_extension(ref)

    assert excinfo.value.code == "extension-invalid"


def test_load_extension_rejects_non_callable_targets(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _write_extension_module(tmp_path, monkeypatch)

    with pytest.raises(PreconditionError) as excinfo:
        load_extension("library_ext:NOT_CALLABLE")

    assert excinfo.value.code == "extension-invalid"


def test_load_extension_propagates_import_errors() -> None:
    with pytest.raises(ModuleNotFoundError):
        load_extension("componentry_missing_module:register")


@pytest.mark.asyncio
async def test_configured_extensions_are_applied_in_order(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _write_extension_module(tmp_path, monkeypatch)

    app = Orchestrator({"extensions": ["library_ext:register", "library_ext:Bundle.register"]})
    components = await app.process("components")
    files = await app.process("files")

    assert components.greeting() == "hello"
    assert files.bundled() is True
