"""Reference rewrite rule."""
import re
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class RewriteRule:
    """Replace the prefix of a reference path matched by pattern.

    marker identifies paths this rule has already produced; it must appear in
    replacement so the rule can never match its own output twice.
    """
    pattern: str
    replacement: str
    marker: Optional[str] = None
    regex: "re.Pattern[str]" = field(init=False, repr=False)

    def __post_init__(self):
        self.regex = re.compile(self.pattern)
        if not self.marker:
            self.marker = default_marker(self.replacement)
        if not self.marker:
            raise ValueError(
                f"Cannot derive a marker from replacement {self.replacement!r}; pass one explicitly"
            )
        if self.marker not in self.replacement:
            raise ValueError(
                f"Marker {self.marker!r} does not occur in replacement {self.replacement!r}"
            )

    @property
    def separator(self) -> str:
        """Directory separator used by the replacement ('/' unless it has a backslash)."""
        return "\\" if "\\" in self.replacement else "/"


def default_marker(replacement: str) -> Optional[str]:
    """Longest path segment of replacement that is not '.' or '..'."""
    segments = [
        seg for seg in re.split(r"[/\\]", replacement)
        if seg and seg not in (".", "..")
    ]
    if not segments:
        return None
    return max(segments, key=len)
