"""Tests for workspace scanning."""
import pytest

from solkit.core.errors import ManifestIOError
from solkit.core.scanner import Workspace, project_names, scan
from solkit.models.pattern import make_pattern


class TestScan:
    """Manifest discovery under a single root."""

    def test_empty_root_yields_nothing(self, tmp_path):
        (tmp_path / "docs").mkdir()
        (tmp_path / "docs" / "readme.md").write_text("hi")

        assert list(scan(tmp_path)) == []

    def test_finds_nested_manifests_in_order(self, tmp_path, make_project):
        b = make_project("B")
        a = make_project("A")
        nested = make_project("Inner", root="src/Group")

        assert list(scan(tmp_path / "src")) == [a, b, nested]

    def test_build_output_directories_skipped(self, tmp_path, make_project):
        real = make_project("App")
        obj_dir = real.parent / "obj"
        obj_dir.mkdir()
        (obj_dir / "App.csproj").write_text("<Project/>")

        assert list(scan(tmp_path / "src")) == [real]

    def test_name_filter_matches_directory_case_insensitively(self, tmp_path, make_project):
        make_project("Company.Core")
        tests = make_project("Company.Core.Tests")

        found = list(scan(tmp_path / "src", make_pattern("tests")))

        assert found == [tests]

    def test_regex_filter(self, tmp_path, make_project):
        make_project("Company.Core")
        gen = make_project("Company.SourceGenerators")

        assert list(scan(tmp_path / "src", make_pattern("Generators$"))) == [gen]

    def test_restartable(self, tmp_path, make_project):
        make_project("A")
        assert list(scan(tmp_path / "src")) == list(scan(tmp_path / "src"))

    def test_each_call_rescans(self, tmp_path, make_project):
        make_project("A")
        assert len(list(scan(tmp_path / "src"))) == 1
        make_project("B")
        assert len(list(scan(tmp_path / "src"))) == 2

    def test_missing_root_raises(self, tmp_path):
        with pytest.raises(ManifestIOError, match="directory not found"):
            scan(tmp_path / "missing")

    def test_project_names(self, tmp_path, make_project):
        make_project("A")
        make_project("B")
        assert project_names(scan(tmp_path / "src")) == ["A", "B"]


class TestWorkspace:
    """Multi-root workspaces."""

    def test_overlapping_roots_yield_unique_paths(self, tmp_path, make_project):
        make_project("A")
        make_project("B", root="src/nested")

        workspace = Workspace(roots=[tmp_path / "src", tmp_path / "src" / "nested"])
        manifests = list(workspace.manifests())

        assert len(manifests) == len(set(manifests)) == 2

    def test_project_names_across_roots(self, tmp_path, make_project):
        make_project("A")
        make_project("A.Tests", root="tests")

        workspace = Workspace(roots=[tmp_path / "src", tmp_path / "tests"])

        assert workspace.project_names() == ["A", "A.Tests"]

    def test_check_roots(self, tmp_path):
        with pytest.raises(ManifestIOError):
            Workspace(roots=[tmp_path, tmp_path / "nope"]).check_roots()
