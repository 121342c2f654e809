"""Go import lister.

Reads the header of every Go file in a directory (package clause and import
declarations) without parsing the rest of the file. The rules follow what
``go/build`` does when importing a directory, minus GOOS/GOARCH filtering:
every platform's files count, so every platform's dependencies get vendored.
"""

import ast
import logging
import re
from pathlib import Path

from ..collaborators import PackageImports
from ..errors import ImportListingFailure
from ..errors import NoSourceFilesError
from .constraints import BuildConstraints

logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(
    r"""
    (?P<newline>\n)
  | (?P<space>[ \t\r\f\v]+)
  | (?P<line_comment>//[^\n]*)
  | (?P<block_comment>/\*.*?\*/)
  | (?P<string>"(?:\\.|[^"\\\n])*"|`[^`]*`)
  | (?P<ident>[A-Za-z_][A-Za-z0-9_]*)
  | (?P<punct>[().;])
  | (?P<other>.)
    """,
    re.VERBOSE | re.DOTALL,
)

_IMPORT_COMMENT_RE = re.compile(r"""^\s*(?://\s*import\s+|/\*\s*import\s+)("[^"]*"|`[^`]*`)""")

_BOM = "\ufeff"

# Package name go/build ignores when checking for mixed packages
_DOCUMENTATION_PACKAGE = "documentation"


class _Token:
    __slots__ = ("kind", "text", "end")

    def __init__(self, kind: str, text: str, end: int):
        self.kind = kind
        self.text = text
        self.end = end


class GoFileHeader:
    """Package clause and imports of one Go file."""

    def __init__(self, package: str, imports: list[str], import_comment: str | None, ignored: bool):
        self.package = package
        self.imports = imports
        self.import_comment = import_comment
        self.ignored = ignored


def _unquote(literal: str) -> str:
    if literal.startswith("`"):
        return literal[1:-1]
    if "\\" not in literal:
        return literal[1:-1]
    return ast.literal_eval(literal)


def parse_header(source: str, filename: str = "<source>") -> GoFileHeader:
    """Parse the package clause and import declarations of a Go file.

    Args:
        source: Full text of the file
        filename: Name used in error messages

    Returns:
        GoFileHeader

    Raises:
        ValueError: Malformed header
    """
    # go/build accepts a leading byte order mark
    source = source.removeprefix(_BOM)
    tokens = _tokenize(source)
    pos = 0
    constraints = BuildConstraints()

    # Build constraints are line comments preceding the package clause
    while pos < len(tokens) and tokens[pos].kind in ("line_comment", "block_comment", "newline"):
        if tokens[pos].kind == "line_comment":
            try:
                constraints.add_comment(tokens[pos].text)
            except ValueError as e:
                raise ValueError(f"{filename}: {e}") from e
        pos += 1

    pos = _skip_trivia(tokens, pos)
    if pos >= len(tokens) or tokens[pos].text != "package":
        raise ValueError(f"{filename}: expected 'package'")
    pos = _skip_trivia(tokens, pos + 1)
    if pos >= len(tokens) or tokens[pos].kind != "ident":
        raise ValueError(f"{filename}: expected package name")
    package = tokens[pos].text

    import_comment = None
    match = _IMPORT_COMMENT_RE.match(source[tokens[pos].end :].split("\n", 1)[0])
    if match:
        import_comment = _unquote(match.group(1))

    imports: list[str] = []
    pos += 1
    while True:
        pos = _skip_trivia(tokens, pos, semicolons=True)
        if pos >= len(tokens) or tokens[pos].text != "import":
            break
        pos = _skip_trivia(tokens, pos + 1)
        if pos < len(tokens) and tokens[pos].text == "(":
            pos += 1
            while True:
                pos = _skip_trivia(tokens, pos, semicolons=True)
                if pos >= len(tokens):
                    raise ValueError(f"{filename}: unterminated import block")
                if tokens[pos].text == ")":
                    pos += 1
                    break
                path, pos = _import_spec(tokens, pos, filename)
                imports.append(path)
        else:
            path, pos = _import_spec(tokens, pos, filename)
            imports.append(path)

    return GoFileHeader(package, imports, import_comment, constraints.excluded())


def _tokenize(source: str) -> list[_Token]:
    tokens = []
    for match in _TOKEN_RE.finditer(source):
        kind = match.lastgroup or "other"
        if kind == "space":
            continue
        tokens.append(_Token(kind, match.group(), match.end()))
    return tokens


def _skip_trivia(tokens: list[_Token], pos: int, semicolons: bool = False) -> int:
    skip = {"newline", "line_comment", "block_comment"}
    while pos < len(tokens) and (tokens[pos].kind in skip or (semicolons and tokens[pos].text == ";")):
        pos += 1
    return pos


def _import_spec(tokens: list[_Token], pos: int, filename: str) -> tuple[str, int]:
    # Optional alias: a name, "_" or "."
    if pos < len(tokens) and (tokens[pos].kind == "ident" or tokens[pos].text == "."):
        pos = _skip_trivia(tokens, pos + 1)
    if pos >= len(tokens) or tokens[pos].kind != "string":
        raise ValueError(f"{filename}: expected import path")
    return _unquote(tokens[pos].text), pos + 1


class GoImportLister:
    """Lists the imports of the Go package in a directory."""

    def list_imports(self, directory: Path) -> PackageImports:
        """Gather the imports of ``directory``.

        Args:
            directory: Directory holding the package

        Returns:
            PackageImports for the directory

        Raises:
            NoSourceFilesError: No Go files (after exclusions) in the directory
            ImportListingFailure: Unreadable or malformed files, or mixed packages
        """
        try:
            candidates = sorted(
                p
                for p in directory.iterdir()
                if p.suffix == ".go" and not p.name.startswith(("_", ".")) and p.is_file()
            )
        except OSError as e:
            raise ImportListingFailure(f"gathering imports in {directory}: {e}") from e

        package = None
        package_file = None
        buildable = 0
        imports: set[str] = set()
        test_imports: set[str] = set()
        import_comment = None

        for path in candidates:
            try:
                header = parse_header(path.read_text(encoding="utf-8"), path.name)
            except (OSError, UnicodeDecodeError, ValueError, SyntaxError) as e:
                raise ImportListingFailure(f"gathering imports in {directory}: {e}") from e

            if header.ignored:
                logger.debug(f"Skipping {path}: excluded by build constraint")
                continue
            buildable += 1

            # Both in-package and external (package x_test) tests land here
            if path.name.endswith("_test.go"):
                test_imports.update(header.imports)
                continue

            if header.package != _DOCUMENTATION_PACKAGE:
                if package is None:
                    package, package_file = header.package, path.name
                elif header.package != package:
                    raise ImportListingFailure(
                        f"gathering imports in {directory}: found packages {package} ({package_file}) "
                        f"and {header.package} ({path.name})"
                    )

            imports.update(header.imports)
            if header.import_comment and import_comment is None:
                import_comment = header.import_comment

        if not buildable:
            raise NoSourceFilesError(f"no buildable Go source files in {directory}")

        return PackageImports(
            name=package or "",
            imports=sorted(imports),
            test_imports=sorted(test_imports),
            import_comment=import_comment,
        )

    def __repr__(self) -> str:
        return "GoImportLister()"
