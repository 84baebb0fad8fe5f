"""Files entity: default parser and interface factories."""

from .api import create_interface
from .parser import catalogue_files, create_parser

__all__ = ["catalogue_files", "create_interface", "create_parser"]
