"""Dependency resolution engine.

Decides, for every import of the project, whether it is project code, an
already vendored package, or a missing dependency, and where to fetch the
missing ones from.
"""

from .hosting import ExternalLocator
from .hosting import FixedRepos
from .hosting import RemoteImportProbe
from .models import ImportEdge
from .models import Resolution
from .models import ResolutionKind
from .models import SearchRoot
from .models import VendoredRoot
from .registry import VendorRegistry
from .resolver import PackageResolver
from .search_path import SearchPathResolver

__all__ = [
    "ExternalLocator",
    "FixedRepos",
    "RemoteImportProbe",
    "ImportEdge",
    "Resolution",
    "ResolutionKind",
    "SearchRoot",
    "VendoredRoot",
    "VendorRegistry",
    "PackageResolver",
    "SearchPathResolver",
]
