"""Helpers for project-relative directory paths.

Directories are always ``/``-separated strings relative to the project root,
with the root itself spelled ``""``. This matches the paths git reports for
submodules and the shape of Go import paths.
"""

VENDOR_DIR = "vendor"


def is_subpath(path: str, directory: str) -> bool:
    """Return True if ``path`` is ``directory`` or lies below it.

    Comparison is component-wise: ``vendor/foobar`` is not below ``vendor/foo``.
    """
    if directory == "":
        return True
    return path == directory or (path.startswith(directory) and path[len(directory) : len(directory) + 1] == "/")


def join(*parts: str) -> str:
    """Join relative path fragments, dropping empty ones."""
    return "/".join(part.strip("/") for part in parts if part and part.strip("/"))


def parent_dir(path: str) -> str:
    """Parent of a relative directory; the parent of a top-level entry is ``""``."""
    slash = path.rfind("/")
    if slash < 0:
        return ""
    return path[:slash]


def split(path: str) -> tuple[str, ...]:
    """Split a relative path into its components."""
    if not path:
        return ()
    return tuple(path.split("/"))


def in_vendor_tree(path: str) -> bool:
    """True if any component of ``path`` is a vendor directory."""
    return VENDOR_DIR in split(path)


def expected_import_path(path: str, project_names: list[str] | frozenset[str]) -> list[str]:
    """Import paths under which the package in ``path`` should be addressed.

    Inside a vendor tree that is the part after the innermost ``vendor``
    component; elsewhere it is the directory below each project name.
    """
    parts = split(path)
    if VENDOR_DIR in parts:
        innermost = len(parts) - 1 - parts[::-1].index(VENDOR_DIR)
        return ["/".join(parts[innermost + 1 :])]
    return sorted(join(name, path) for name in project_names)
