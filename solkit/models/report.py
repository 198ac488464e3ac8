"""Result objects returned by batch operations."""
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple


@dataclass
class ItemFailure:
    """One item of a batch that could not be processed."""
    item: str
    reason: str


@dataclass
class CoverageReport:
    """Outcome of comparing source project names with test project names.

    All lists are sorted ascending.
    """
    missing: List[str] = field(default_factory=list)
    orphaned: List[str] = field(default_factory=list)
    excluded: List[str] = field(default_factory=list)
    source_count: int = 0
    test_count: int = 0

    @property
    def missing_count(self) -> int:
        return len(self.missing)

    @property
    def orphaned_count(self) -> int:
        return len(self.orphaned)

    def is_clean(self) -> bool:
        return not self.missing and not self.orphaned


@dataclass
class RewriteSummary:
    """Outcome of rewriting references across a workspace."""
    changed: List[Tuple[Path, int]] = field(default_factory=list)
    unchanged: List[Path] = field(default_factory=list)
    failures: List[ItemFailure] = field(default_factory=list)

    @property
    def manifest_count(self) -> int:
        return len(self.changed) + len(self.unchanged) + len(self.failures)

    @property
    def reference_count(self) -> int:
        return sum(count for _, count in self.changed)


@dataclass
class SyncResult:
    """Outcome of synchronizing solution membership."""
    removed: List[str] = field(default_factory=list)
    added: List[str] = field(default_factory=list)
    duplicates: List[str] = field(default_factory=list)
    failures: List[ItemFailure] = field(default_factory=list)
    dry_run: bool = False

    @property
    def partial(self) -> bool:
        return bool(self.failures)


@dataclass
class ScaffoldResult:
    """Outcome of scaffolding a batch of manifests."""
    written: List[Path] = field(default_factory=list)
    failures: List[ItemFailure] = field(default_factory=list)

    @property
    def partial(self) -> bool:
        return bool(self.failures)
