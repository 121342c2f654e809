"""Error kinds raised while resolving and vendoring dependencies.

Every error aborts the run. Work already done (submodules added) is left in
place; git is the durable ledger and the operator can inspect it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .resolution.models import ImportEdge


class VendettaError(Exception):
    """Base class for all fatal resolution errors."""

    def __init__(self, message: str):
        super().__init__(message)
        # Filled in by the session when the error escapes an import edge
        self.import_chain: list[ImportEdge] | None = None


class ImportListingFailure(VendettaError):
    """A directory's import list could not be gathered."""


class NoSourceFilesError(ImportListingFailure):
    """A directory holds no compilable source files.

    Non-fatal during the generic project traversal, fatal when the directory
    was reached by resolving an import.
    """


class UnknownHostingConvention(VendettaError):
    """An externally hosted import whose repository root cannot be inferred."""

    def __init__(self, import_path: str):
        super().__init__(f"Don't know how to handle package '{import_path}'")
        self.import_path = import_path


class SubmoduleOperationFailure(VendettaError):
    """A git command failed. ``output`` holds its diagnostics verbatim."""

    def __init__(self, message: str, output: str = ""):
        super().__init__(message)
        self.output = output


class MissingWorkingTree(VendettaError):
    """A registered submodule has no files in the working tree."""

    def __init__(self, path: str):
        super().__init__(
            f"The submodule '{path}' doesn't seem to be present in the working tree. "
            "Maybe you forgot to update with 'git submodule update --init --recursive'?"
        )
        self.path = path


class ConfigurationError(VendettaError):
    """Invalid settings, or a project name that cannot be determined."""
