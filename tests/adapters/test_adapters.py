"""Tests for the built-in render adapters and adapter validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from componentry.adapters import (
    Adapter,
    JinjaAdapter,
    TextAdapter,
    available_adapters,
    get_adapter_factory,
    validate_adapter,
)
from componentry.errors import PreconditionError
from componentry.models import File


def _file(tmp_path: Path, name: str, content: str) -> File:
    path = tmp_path / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return File(path=path, base=tmp_path, contents=content.encode("utf-8"), size=len(content))


class _Recorder:
    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def __call__(self, *args) -> None:
        self.calls.append(args)


def test_builtin_factories_are_available() -> None:
    assert {"text", "jinja"} <= set(available_adapters())
    assert get_adapter_factory("jinja") is JinjaAdapter
    assert get_adapter_factory("does-not-exist") is None


def test_adapters_match_by_extension_by_default(tmp_path: Path) -> None:
    adapter = JinjaAdapter()

    assert adapter.name == "jinja"
    assert adapter.match(_file(tmp_path, "page.html", ""))
    assert adapter.match(_file(tmp_path, "page.J2", ""))
    assert not adapter.match(_file(tmp_path, "notes.txt", ""))


def test_adapter_options_override_name_and_match(tmp_path: Path) -> None:
    adapter = TextAdapter({"name": "plain", "match": lambda file: file.stem == "readme"})

    assert adapter.name == "plain"
    assert adapter.match(_file(tmp_path, "readme.md", ""))
    assert not adapter.match(_file(tmp_path, "notes.txt", ""))


@pytest.mark.asyncio
async def test_text_adapter_substitutes_context(tmp_path: Path) -> None:
    done = _Recorder()
    file = _file(tmp_path, "greeting.txt", "Hello $name, $unknown")

    output = await TextAdapter().render(file, {"name": "Ada"}, done)

    assert output == "Hello Ada, $unknown"
    assert done.calls == [(None, "Hello Ada, $unknown")]


@pytest.mark.asyncio
async def test_jinja_adapter_renders_with_includes_and_globals(tmp_path: Path) -> None:
    _file(tmp_path, "partials/icon.html", "<i>{{ icon }}</i>")
    file = _file(tmp_path, "button.html", "{% include 'partials/icon.html' %}{{ label | shout }} {{ brand }}")
    adapter = JinjaAdapter({"globals": {"brand": "ACME"}, "filters": {"shout": str.upper}})
    done = _Recorder()

    output = await adapter.render(file, {"label": "save", "icon": "disk"}, done)

    assert output == "<i>disk</i>SAVE ACME"
    assert done.calls == [(None, output)]


@pytest.mark.asyncio
async def test_jinja_adapter_reports_template_errors_through_done(tmp_path: Path) -> None:
    file = _file(tmp_path, "broken.html", "{% if %}")
    done = _Recorder()

    output = await JinjaAdapter().render(file, {}, done)

    assert output is None
    assert len(done.calls) == 1
    assert len(done.calls[0]) == 1
    assert isinstance(done.calls[0][0], Exception)


@pytest.mark.asyncio
async def test_jinja_adapter_strict_mode_rejects_undefined(tmp_path: Path) -> None:
    file = _file(tmp_path, "card.html", "{{ missing }}")
    done = _Recorder()

    await JinjaAdapter({"strict": True}).render(file, {}, done)

    assert isinstance(done.calls[0][0], Exception)


@pytest.mark.parametrize(
    "adapter",
    [
        None,
        {"render": lambda *args: None},
        {"name": "", "render": lambda *args: None},
        {"name": "html"},
        {"name": "html", "render": "not callable"},
        {"name": "html", "render": lambda *args: None, "match": "nope"},
    ],
)
def test_validate_adapter_rejects_malformed_shapes(adapter) -> None:
    with pytest.raises(PreconditionError) as excinfo:
        validate_adapter(adapter)

    assert excinfo.value.code == "adapter-invalid"


def test_validate_adapter_accepts_objects_and_mappings() -> None:
    record = {"name": "html", "render": lambda *args: None}

    assert validate_adapter(record) is record
    adapter = TextAdapter()
    assert validate_adapter(adapter) is adapter


@pytest.mark.parametrize("factory", [TextAdapter, JinjaAdapter])
def test_builtin_adapters_satisfy_the_adapter_protocol(factory) -> None:
    assert isinstance(factory(), Adapter)


def test_adapter_protocol_rejects_objects_without_render() -> None:
    class Nameless:
        name = "broken"

    assert not isinstance(Nameless(), Adapter)


@pytest.mark.asyncio
async def test_adapters_decode_with_the_file_encoding_unless_overridden(tmp_path: Path) -> None:
    path = tmp_path / "greeting.txt"
    contents = "Grüße $name".encode("latin-1")
    path.write_bytes(contents)
    file = File(path=path, base=tmp_path, contents=contents, size=len(contents), encoding="latin-1")

    output = await TextAdapter().render(file, {"name": "Ada"}, _Recorder())
    failures = _Recorder()
    forced = await TextAdapter({"encoding": "utf-8"}).render(file, {"name": "Ada"}, failures)

    assert output == "Grüße Ada"
    assert forced is None
    assert isinstance(failures.calls[0][0], UnicodeDecodeError)
