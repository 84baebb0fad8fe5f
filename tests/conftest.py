from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.source_builder import SourceBuilder


@pytest.fixture
def source_builder(tmp_path: Path) -> SourceBuilder:
    """Provide a reusable source tree builder rooted at the pytest tmp_path."""
    return SourceBuilder(tmp_path)


@pytest.fixture
def sample_library(source_builder: SourceBuilder) -> SourceBuilder:
    """A small component library with two components and one loose file."""
    source_builder.write(
        {
            "@button/button.html": "<button>{{ label }}</button>\n",
            "@button/README.txt": "Button for $product\n",
            "card/component.yml": "name: card\ncontext:\n  title: Hello\n",
            "card/card.html": "<div>{{ title }}</div>\n",
            "notes.md": "# Notes\n",
        }
    )
    return source_builder
