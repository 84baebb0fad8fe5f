"""CLI entrypoints for componentry commands."""

from __future__ import annotations

import argparse
import asyncio
import inspect
import json
import sys
from pathlib import Path
from typing import Any, Dict, List

import yaml

from .adapters import adapter_attr
from .config import load_config
from .errors import ComponentryError
from .interface import EntityResult
from .logging import configure_logging
from .orchestrator import Orchestrator


class CommandError(ComponentryError):
    """Raised when a command cannot complete with the given arguments."""


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_source_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "src",
        nargs="*",
        help="Source directories to parse (defaults to 'src' from the config, then '.').",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to componentry.yml or the directory holding it (defaults to the current directory).",
    )
    parser.add_argument(
        "--adapter",
        action="append",
        default=[],
        help="Register a built-in adapter by name; may be repeated.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="componentry",
        description="Parse component libraries into files and components and render component files.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_parser = subparsers.add_parser(
        "parse",
        help="Parse source directories and list the components found.",
    )
    _add_verbose_option(parse_parser, suppress_default=True)
    parse_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the summary as JSON.",
    )
    _add_source_options(parse_parser)

    render_parser = subparsers.add_parser(
        "render",
        help="Render one component file with its adapter.",
    )
    _add_verbose_option(render_parser, suppress_default=True)
    render_parser.add_argument("component", help="Name of the component.")
    render_parser.add_argument("file", help="File name or path relative to the component directory.")
    render_parser.add_argument(
        "--context",
        type=Path,
        default=None,
        help="YAML or JSON file with the render context.",
    )
    _add_source_options(render_parser)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for componentry commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config if args.config is not None else Path.cwd())
        logging_options = config.get("logging") or {}
        configure_logging(
            verbose=bool(args.verbose),
            level=logging_options.get("level"),
            log_file=logging_options.get("file"),
        )
        orchestrator = _build_orchestrator(args, config)
        output = asyncio.run(_execute(orchestrator, args))
    except (ComponentryError, OSError) as exc:
        parser.exit(1, f"componentry {args.command} failed: {exc}\nRun with --verbose for more details.\n")
    print(output)


def _build_orchestrator(args: argparse.Namespace, config: Dict[str, Any]) -> Orchestrator:
    if args.src:
        config["src"] = list(args.src)
    elif not config.get("src"):
        config["src"] = ["."]
    if args.adapter:
        config["adapters"] = list(config.get("adapters") or []) + list(args.adapter)
    return Orchestrator(config)


async def _execute(orchestrator: Orchestrator, args: argparse.Namespace) -> str:
    components, files = await orchestrator.run()
    if args.command == "parse":
        return _format_summary(components, files, as_json=bool(args.json))
    if args.command == "render":
        return await _render(orchestrator, components, args)
    raise CommandError(f"Unknown command: {args.command}")  # pragma: no cover - argparse enforces choices


def _format_summary(components: EntityResult, files: EntityResult, *, as_json: bool) -> str:
    entries: List[Dict[str, Any]] = []
    for component in components.get_all():
        entries.append(
            {
                "name": component.name,
                "path": component.relative,
                "config": component.config,
                "files": [
                    {"path": file.relative, "adapter": file.adapter} for file in component.files
                ],
            }
        )
    if as_json:
        payload = {"files": len(files.get_all()), "components": entries}
        return json.dumps(payload, indent=2, sort_keys=True, default=str)

    lines = [f"{len(entries)} component(s), {len(files.get_all())} file(s)"]
    for entry in entries:
        lines.append(f"- {entry['name']} ({entry['path']})")
        for item in entry["files"]:
            suffix = f" [{item['adapter']}]" if item["adapter"] else ""
            lines.append(f"    {item['path']}{suffix}")
    return "\n".join(lines)


async def _render(orchestrator: Orchestrator, components: EntityResult, args: argparse.Namespace) -> str:
    component = components.find(args.component)
    if component is None:
        raise CommandError(f"Unknown component '{args.component}'")
    file = component.find_file(args.file)
    if file is None:
        raise CommandError(f"Component '{component.name}' has no file '{args.file}'")

    adapter_name = file.adapter or adapter_attr(orchestrator.default_adapter, "name")
    if not adapter_name:
        raise CommandError("No adapter is registered; pass --adapter or list one in the config")

    context = dict(component.config.get("context") or {})
    if args.context is not None:
        context.update(_load_context(args.context))

    outcome: Dict[str, Any] = {}

    def done(error: Exception | None, output: str | None = None) -> None:
        outcome["error"] = error
        outcome["output"] = output

    pending = components.call(f"render.{adapter_name}", file, context, done)
    if inspect.isawaitable(pending):
        await pending
    if outcome.get("error") is not None:
        raise CommandError(f"Rendering {file.relative} failed: {outcome['error']}")
    return str(outcome.get("output") or "")


def _load_context(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(text) if text.strip() else {}
    except yaml.YAMLError as exc:
        raise CommandError(f"Failed to parse context file {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise CommandError(f"Context file {path} must contain a mapping at the root")
    return data


if __name__ == "__main__":
    main(sys.argv[1:])
