"""Name filters used to select projects and exclude them from audits."""
import re
from abc import ABC, abstractmethod

# Characters that mark a filter as a regular expression. '.' is not one of
# them, so dotted project names ("Foo.Tests") stay plain substrings.
_REGEX_CHARS = set("^$*+?[](){}|\\")


class Pattern(ABC):
    """Something that can accept or reject a name."""

    text: str

    @abstractmethod
    def matches(self, value: str) -> bool:
        """Return True when value is selected by this pattern."""

    def __str__(self) -> str:
        return self.text


class SubstringPattern(Pattern):
    """Case-insensitive substring match."""

    def __init__(self, text: str):
        self.text = text
        self._needle = text.casefold()

    def matches(self, value: str) -> bool:
        return self._needle in value.casefold()

    def __repr__(self) -> str:
        return f"SubstringPattern({self.text!r})"


class RegexPattern(Pattern):
    """Case-insensitive regular expression searched anywhere in the name."""

    def __init__(self, text: str):
        self.text = text
        self._regex = re.compile(text, re.IGNORECASE)

    def matches(self, value: str) -> bool:
        return self._regex.search(value) is not None

    def __repr__(self) -> str:
        return f"RegexPattern({self.text!r})"


def make_pattern(text: str) -> Pattern:
    """Build a pattern from user input.

    Plain text becomes a SubstringPattern; anything containing regex
    metacharacters becomes a RegexPattern.

    Raises:
        re.error: If text looks like a regex but does not compile
    """
    if any(ch in _REGEX_CHARS for ch in text):
        return RegexPattern(text)
    return SubstringPattern(text)
