"""Built-in plugins for the files pipeline."""

from .adapter import adapter_plugin, match_all

__all__ = ["adapter_plugin", "match_all"]
