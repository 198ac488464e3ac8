"""Project manifest models."""
from dataclasses import dataclass, field
from pathlib import Path, PureWindowsPath
from typing import List


@dataclass
class ReferenceEntry:
    """A ProjectReference inside a manifest.

    start/end are the character offsets of the attribute value in the
    manifest text; write() moves them when earlier values change length.
    """
    path: str
    start: int
    end: int
    original: str = ""

    def __post_init__(self):
        if not self.original:
            self.original = self.path

    @property
    def target_name(self) -> str:
        """Project name the reference points at (file stem, any separator)."""
        return PureWindowsPath(self.path.replace("/", "\\")).stem

    @property
    def changed(self) -> bool:
        return self.path != self.original


@dataclass
class ProjectManifest:
    """A parsed build manifest (.csproj and friends)."""
    path: Path
    text: str
    references: List[ReferenceEntry] = field(default_factory=list)
    encoding: str = "utf-8"
    has_bom: bool = False

    @property
    def name(self) -> str:
        return self.path.stem

    @property
    def dirty(self) -> bool:
        return any(ref.changed for ref in self.references)
