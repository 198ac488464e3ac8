"""Rebuild solution membership from the manifests found on disk."""
import time
from typing import Optional

from solkit.core.errors import AggregatorError, MemberNotFound, SyncTimeout
from solkit.core.logger import get_logger
from solkit.core.scanner import Workspace
from solkit.models.report import ItemFailure, SyncResult
from solkit.services.solution import Aggregator

logger = get_logger(__name__)


class MembershipSynchronizer:
    """Replace an aggregator's members with the manifests of a workspace.

    Membership is rebuilt from scratch every time (remove all, then add what
    is on disk) so the result does not depend on earlier drift.
    """

    def __init__(self, aggregator: Aggregator, timeout: Optional[float] = None):
        self.aggregator = aggregator
        self.timeout = timeout
        self._deadline: Optional[float] = None

    def _remaining(self) -> Optional[float]:
        if self._deadline is None:
            return None
        remaining = self._deadline - time.monotonic()
        if remaining <= 0:
            raise SyncTimeout(None, f"membership sync exceeded {self.timeout}s")
        return remaining

    def synchronize(self, workspace: Workspace, dry_run: bool = False) -> SyncResult:
        """Make the aggregator's membership equal the workspace's manifests.

        Raises:
            AggregatorError: If the current members cannot be listed
            SyncTimeout: If the overall timeout expires
            ManifestIOError: If a source root is not a readable directory
        """
        workspace.check_roots()
        self._deadline = time.monotonic() + self.timeout if self.timeout else None
        result = SyncResult(dry_run=dry_run)

        current = self.aggregator.list_members(timeout=self._remaining())
        logger.info(f"Removing {len(current)} existing members")
        for member in current:
            if dry_run:
                result.removed.append(member)
                continue
            try:
                self.aggregator.remove(member, timeout=self._remaining())
            except SyncTimeout:
                raise
            except MemberNotFound as e:
                # Already gone is as good as removed
                logger.debug(f"{member} already absent: {e.reason}")
            except AggregatorError as e:
                logger.warning(f"Failed to remove {member}: {e.reason}")
                result.failures.append(ItemFailure(member, e.reason))
                continue
            result.removed.append(member)

        added = set()
        for root in workspace.roots:
            logger.info(f"Adding projects from {root}")
            for path in workspace.scan_root(root):
                key = path.resolve()
                if key in added:
                    result.duplicates.append(str(path))
                    continue
                added.add(key)
                if dry_run:
                    result.added.append(str(path))
                    continue
                try:
                    self.aggregator.add(path, timeout=self._remaining())
                except SyncTimeout:
                    raise
                except AggregatorError as e:
                    logger.warning(f"Failed to add {path}: {e.reason}")
                    result.failures.append(ItemFailure(str(path), e.reason))
                    continue
                result.added.append(str(path))

        logger.info(
            f"Membership sync: {len(result.added)} added, {len(result.failures)} failed"
        )
        return result


def synchronize(
    aggregator: Aggregator,
    workspace: Workspace,
    timeout: Optional[float] = None,
    dry_run: bool = False,
) -> SyncResult:
    """Functional shortcut for MembershipSynchronizer(...).synchronize(...)."""
    return MembershipSynchronizer(aggregator, timeout=timeout).synchronize(workspace, dry_run=dry_run)
