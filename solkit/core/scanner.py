"""Workspace scanning: find project manifests under root directories."""
import fnmatch
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence, Union

from solkit.core.errors import ManifestIOError
from solkit.core.logger import get_logger
from solkit.models.pattern import Pattern

logger = get_logger(__name__)

DEFAULT_MANIFEST_GLOB = "*.csproj"
DEFAULT_EXCLUDE_DIRS = ("bin", "obj", ".git", ".vs", "node_modules")


def scan(
    root: Union[str, Path],
    name_pattern: Optional[Pattern] = None,
    manifest_glob: str = DEFAULT_MANIFEST_GLOB,
    exclude_dirs: Iterable[str] = DEFAULT_EXCLUDE_DIRS,
) -> Iterator[Path]:
    """Lazily enumerate manifest files under root.

    The root is checked immediately; the walk itself happens as the result is
    consumed. Every call walks the filesystem again. Symlinked directories are
    not followed.

    Args:
        root: Directory to search recursively
        name_pattern: Keep only manifests whose containing directory name matches
        manifest_glob: File name glob identifying manifests
        exclude_dirs: Directory names that are never descended into

    Raises:
        ManifestIOError: If root does not exist or is not a directory
    """
    root = Path(root)
    if not root.is_dir():
        reason = "not a directory" if root.exists() else "directory not found"
        raise ManifestIOError(root, reason)
    return _walk(root, name_pattern, manifest_glob, frozenset(exclude_dirs))


def _walk(
    root: Path,
    name_pattern: Optional[Pattern],
    manifest_glob: str,
    exclude_dirs: frozenset,
) -> Iterator[Path]:
    def on_error(err: OSError) -> None:
        logger.warning(f"Cannot read {err.filename}: {err.strerror}")

    for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
        dirnames[:] = sorted(d for d in dirnames if d not in exclude_dirs)
        current = Path(dirpath)
        if name_pattern is not None and not name_pattern.matches(current.name):
            continue
        for filename in sorted(fnmatch.filter(filenames, manifest_glob)):
            yield current / filename


def project_names(paths: Iterable[Path]) -> List[str]:
    """Project names (manifest file stems) in discovery order."""
    return [Path(p).stem for p in paths]


@dataclass
class Workspace:
    """A set of manifests defined by root directories and an optional filter.

    Passed explicitly to every operation that needs to discover manifests.
    """
    roots: Sequence[Path]
    name_pattern: Optional[Pattern] = None
    manifest_glob: str = DEFAULT_MANIFEST_GLOB
    exclude_dirs: Sequence[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE_DIRS))

    def __post_init__(self):
        self.roots = [Path(r) for r in self.roots]

    def check_roots(self) -> None:
        """Raise ManifestIOError for the first root that is not a directory."""
        for root in self.roots:
            scan(root, manifest_glob=self.manifest_glob)

    def scan_root(self, root: Path) -> Iterator[Path]:
        return scan(root, self.name_pattern, self.manifest_glob, self.exclude_dirs)

    def manifests(self) -> Iterator[Path]:
        """Yield every manifest across all roots once, in discovery order."""
        seen = set()
        for root in self.roots:
            for path in self.scan_root(root):
                key = path.resolve()
                if key in seen:
                    continue
                seen.add(key)
                yield path

    def project_names(self) -> List[str]:
        return project_names(self.manifests())
