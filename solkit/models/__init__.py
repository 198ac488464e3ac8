"""Data models for solkit."""
from solkit.models.manifest import ProjectManifest, ReferenceEntry
from solkit.models.pattern import Pattern, RegexPattern, SubstringPattern, make_pattern
from solkit.models.report import CoverageReport, ItemFailure, RewriteSummary, ScaffoldResult, SyncResult
from solkit.models.rules import RewriteRule

__all__ = [
    "CoverageReport",
    "ItemFailure",
    "Pattern",
    "ProjectManifest",
    "ReferenceEntry",
    "RegexPattern",
    "RewriteRule",
    "RewriteSummary",
    "ScaffoldResult",
    "SubstringPattern",
    "SyncResult",
    "make_pattern",
]
