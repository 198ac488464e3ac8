"""Compare source projects with test projects."""
from typing import Iterable, Optional

from solkit.core.scaffolder import DEFAULT_TEST_SUFFIX, source_name_for
from solkit.models.pattern import Pattern
from solkit.models.report import CoverageReport


def audit(
    source_names: Iterable[str],
    test_names: Iterable[str],
    exclude: Optional[Pattern] = None,
    suffix: str = DEFAULT_TEST_SUFFIX,
) -> CoverageReport:
    """Find source projects without tests and tests without a source project.

    Test names have the suffix stripped before comparison. Source names
    matching exclude (generators, analyzers, ...) are not expected to have
    tests and are reported separately. Comparison is case-sensitive.
    """
    sources = set(source_names)
    tests = {source_name_for(name, suffix) for name in test_names}

    excluded = set()
    if exclude is not None:
        excluded = {name for name in sources if exclude.matches(name)}

    return CoverageReport(
        missing=sorted(sources - excluded - tests),
        orphaned=sorted(tests - sources),
        excluded=sorted(excluded),
        source_count=len(sources),
        test_count=len(tests),
    )
