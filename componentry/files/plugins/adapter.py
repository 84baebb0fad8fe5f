"""Files pipeline step that tags files with the adapter able to render them."""

from __future__ import annotations

from typing import Any, Callable, Optional

from ...models import File

Matcher = Callable[[File], bool]


def match_all(file: File) -> bool:
    return True


def adapter_plugin(name: str, match: Optional[Matcher] = None) -> Callable[[Any], Any]:
    """Return a step setting ``file.adapter = name`` on every file ``match`` accepts.

    Steps run in registration order, so a file matched by several adapters ends
    up tagged with the most recently registered one.
    """
    matcher = match or match_all

    def tag_files(files: Any) -> Any:
        for file in files:
            if matcher(file):
                file.adapter = name
        return files

    tag_files.__name__ = f"adapter_plugin[{name}]"
    return tag_files


__all__ = ["adapter_plugin", "match_all"]
