"""Rewrite project reference paths according to a RewriteRule."""
import re
from typing import Optional

from solkit.core import manifest as manifest_io
from solkit.core.errors import MalformedManifest, ManifestIOError
from solkit.core.logger import get_logger
from solkit.core.scanner import Workspace
from solkit.models.manifest import ProjectManifest
from solkit.models.report import ItemFailure, RewriteSummary
from solkit.models.rules import RewriteRule

logger = get_logger(__name__)

_SEPARATORS = re.compile(r"[/\\]")


def rewrite_path(path: str, rule: RewriteRule) -> Optional[str]:
    """Return the rewritten path, or None when the rule does not apply."""
    if rule.marker in path:
        return None
    match = rule.regex.search(path)
    if match is None:
        return None
    remainder = _SEPARATORS.sub(lambda _: rule.separator, path[match.end():])
    return path[:match.start()] + rule.replacement + remainder


def rewrite(manifest: ProjectManifest, rule: RewriteRule) -> int:
    """Apply rule to every qualifying reference of manifest.

    References that already contain the rule's marker, or that the pattern
    does not match, are left alone, so a second pass changes nothing.

    Returns:
        Number of references modified
    """
    count = 0
    for entry in manifest_io.get_references(manifest):
        new_path = rewrite_path(entry.path, rule)
        if new_path is None or new_path == entry.path:
            continue
        logger.debug(f"{manifest.path}: {entry.path} -> {new_path}")
        manifest_io.set_reference_path(entry, new_path)
        count += 1
    return count


def rewrite_workspace(
    workspace: Workspace,
    rule: RewriteRule,
    dry_run: bool = False,
) -> RewriteSummary:
    """Rewrite references in every manifest of the workspace.

    Manifests that cannot be parsed or written are recorded as failures and
    the remaining manifests are still processed.
    """
    summary = RewriteSummary()

    for path in workspace.manifests():
        try:
            manifest = manifest_io.parse(path)
            count = rewrite(manifest, rule)
            if count and not dry_run:
                manifest_io.write(manifest)
        except (MalformedManifest, ManifestIOError) as e:
            logger.warning(f"Skipping {path}: {e.reason}")
            summary.failures.append(ItemFailure(str(path), e.reason))
            continue

        if count:
            summary.changed.append((path, count))
        else:
            summary.unchanged.append(path)

    logger.info(
        f"Rewrote {summary.reference_count} references in {len(summary.changed)} manifests"
        + (" (dry run)" if dry_run else "")
    )
    return summary
