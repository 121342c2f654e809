"""Git-backed submodule inventory and mutator.

Every operation shells out to ``git -C <project root>``. Operations are run
one at a time: git's index cannot be safely mutated concurrently.
"""

import logging
import re
import subprocess
from pathlib import Path

from .errors import SubmoduleOperationFailure
from .resolution.paths import VENDOR_DIR
from .resolution.paths import is_subpath
from .resolution.paths import parent_dir

logger = logging.getLogger(__name__)

_WS_RE = re.compile(r"[ \t]+")

_GITHUB_REMOTE_RE = re.compile(r"^(?:https://github\.com/|git@github\.com:)(.+)$")


class GitSubmodules:
    """Submodule operations on the repository at ``root``."""

    def __init__(self, root: str | Path, git: str = "git"):
        """Initialize with the repository root.

        Args:
            root: Root of the git working tree (the project directory)
            git: git executable
        """
        self.root = Path(root)
        self.git_executable = git

    def run(self, *args: str) -> str:
        """Run a git command in the project and return its stdout.

        Raises:
            SubmoduleOperationFailure: git could not be started or exited non-zero
        """
        cmd = [self.git_executable, "-C", str(self.root), *args]
        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            result = subprocess.run(cmd, check=True, capture_output=True, text=True)
        except subprocess.CalledProcessError as e:
            raise SubmoduleOperationFailure(
                f"Command failed: {' '.join(cmd)} (exit status {e.returncode})",
                output=(e.stderr or "").strip(),
            ) from e
        except OSError as e:
            raise SubmoduleOperationFailure(f"Command failed: {' '.join(cmd)} ({e})") from e

        if result.stderr.strip():
            logger.debug(result.stderr.strip())
        return result.stdout

    def status(self, recursive: bool = False) -> list[str]:
        """Paths of the registered submodules, from ``git submodule status``."""
        args = ["submodule", "status"]
        if recursive:
            args.append("--recursive")

        paths = []
        for line in self.run(*args).splitlines():
            line = line.strip()
            if not line:
                continue
            fields = _WS_RE.split(line)
            if len(fields) < 2:
                raise SubmoduleOperationFailure("could not parse 'git submodule status' output", output=line)
            paths.append(fields[1])
        return paths

    def add(self, url: str, directory: str) -> None:
        self.run("submodule", "add", url, directory)

    def update_from_remote(self, directory: str) -> None:
        self.run("submodule", "update", "--remote", "--recursive", directory)

    def remove(self, directory: str) -> None:
        """Remove a submodule and the directories that only existed to hold it."""
        self.run("rm", "-f", directory)
        self._remove_empty_parents(directory)

    def _remove_empty_parents(self, directory: str) -> None:
        # git rm leaves e.g. vendor/github.com/user behind once its last repo is gone
        current = parent_dir(directory)
        while current and current != VENDOR_DIR and is_subpath(current, VENDOR_DIR):
            path = self.root / current
            if path.is_dir():
                try:
                    path.rmdir()
                except OSError:
                    # Not empty
                    break
                logger.debug(f"Removed empty directory {current}")
            current = parent_dir(current)

    def remote_urls(self) -> list[str]:
        """Fetch URLs of the configured remotes, from ``git remote -v``."""
        urls = []
        for line in self.run("remote", "-v").splitlines():
            if not line.strip():
                continue
            fields = _WS_RE.split(line.replace("\t", " ").strip())
            if len(fields) < 2:
                raise SubmoduleOperationFailure("could not parse 'git remote' output", output=line)
            if fields[1] not in urls:
                urls.append(fields[1])
        return urls

    def __repr__(self) -> str:
        return f"GitSubmodules({self.root})"


def project_name_from_remote(url: str) -> str | None:
    """Import path implied by a GitHub remote URL, or None for other hosts.

    Example:
        >>> project_name_from_remote("git@github.com:user/proj.git")
        'github.com/user/proj'
    """
    match = _GITHUB_REMOTE_RE.match(url)
    if not match:
        return None

    name = match.group(1).rstrip("/")
    if name.endswith(".git"):
        name = name[:-4]
    return "github.com/" + name


def infer_project_names(git: GitSubmodules) -> list[str]:
    """Project import paths inferred from the repository's GitHub remotes."""
    names: list[str] = []
    for url in git.remote_urls():
        name = project_name_from_remote(url)
        if name and name not in names:
            logger.info(f"Inferred package name {name} from git remote")
            names.append(name)
    return names
