"""Components entity: default parser and interface factories."""

from .api import create_interface
from .parser import catalogue_components, create_parser

__all__ = ["catalogue_components", "create_interface", "create_parser"]
