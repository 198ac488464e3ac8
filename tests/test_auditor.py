"""Tests for the test coverage audit."""
from solkit.core.auditor import audit
from solkit.models.pattern import make_pattern


class TestAudit:
    """Set differences between source and test projects."""

    def test_scenario_missing_and_orphaned(self):
        report = audit({"A", "B", "C"}, {"A.Tests", "C.Tests", "D.Tests"})

        assert report.missing == ["B"]
        assert report.orphaned == ["D"]
        assert report.missing_count == 1
        assert report.orphaned_count == 1
        assert not report.is_clean()

    def test_clean(self):
        report = audit(["A"], ["A.Tests"])
        assert report.is_clean()
        assert report.source_count == report.test_count == 1

    def test_exclusion_pattern(self):
        report = audit(
            {"Core", "Core.SourceGenerators", "Core.Analyzers"},
            {"Core.Tests"},
            exclude=make_pattern("(SourceGenerators|Analyzers)$"),
        )

        assert report.missing == []
        assert report.excluded == ["Core.Analyzers", "Core.SourceGenerators"]

    def test_case_sensitive(self):
        report = audit({"Foo"}, {"foo.Tests"})
        assert report.missing == ["Foo"]
        assert report.orphaned == ["foo"]

    def test_sorted_output(self):
        report = audit(["Z", "M", "A"], [])
        assert report.missing == ["A", "M", "Z"]

    def test_set_properties_hold(self):
        sources = {"A", "B", "C", "E"}
        tests = {"A.Tests", "D.Tests", "E.Tests", "F"}
        stripped = {"A", "D", "E", "F"}

        report = audit(sources, tests)

        assert set(report.missing) <= sources
        assert set(report.orphaned) <= stripped
        assert not set(report.missing) & stripped
        assert not set(report.missing) & set(report.orphaned)
