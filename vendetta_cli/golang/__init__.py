"""Go source support: listing the imports of a package directory."""

from .imports import GoImportLister
from .imports import parse_header

__all__ = ["GoImportLister", "parse_header"]
