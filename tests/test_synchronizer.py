"""Tests for solution membership synchronization."""
import os
import subprocess
from pathlib import Path

import pytest

from solkit.core import synchronizer as sync_module
from solkit.core.errors import AggregatorError, MemberNotFound, SyncTimeout
from solkit.core.scanner import Workspace
from solkit.core.synchronizer import MembershipSynchronizer, synchronize
from solkit.services.solution import DotnetSolution, parse_list_output


class TestSynchronize:
    """Rebuilding membership from disk."""

    def test_stale_members_replaced(self, tmp_path, make_project, fake_solution):
        a = make_project("A")
        t = make_project("A.Tests", root="tests")
        solution = fake_solution(members=["src/Gone/Gone.csproj", str(a)])

        result = synchronize(solution, Workspace(roots=[tmp_path / "src", tmp_path / "tests"]))

        assert solution.members == [str(a), str(t)]
        assert result.removed == ["src/Gone/Gone.csproj", str(a)]
        assert result.added == [str(a), str(t)]
        assert not result.partial

    def test_running_twice_is_stable(self, tmp_path, make_project, fake_solution):
        make_project("A")
        make_project("B")
        solution = fake_solution()
        workspace = Workspace(roots=[tmp_path / "src"])

        synchronize(solution, workspace)
        first = list(solution.members)
        synchronize(solution, workspace)

        assert solution.members == first

    def test_duplicates_across_roots_skipped(self, tmp_path, make_project, fake_solution):
        make_project("A")
        solution = fake_solution()

        result = synchronize(solution, Workspace(roots=[tmp_path / "src", tmp_path / "src"]))

        assert len(solution.members) == 1
        assert len(result.duplicates) == 1

    def test_add_failure_continues(self, tmp_path, make_project, fake_solution):
        make_project("A")
        bad = make_project("Bad")
        c = make_project("C")
        solution = fake_solution(fail_add={"Bad.csproj"})

        result = synchronize(solution, Workspace(roots=[tmp_path / "src"]))

        assert result.partial
        assert [f.item for f in result.failures] == [str(bad)]
        assert str(c) in solution.members
        assert len(solution.members) == 2

    def test_already_absent_member_counts_as_removed(self, tmp_path, make_project, fake_solution):
        a = make_project("A")
        solution = fake_solution(vanished=["ghost.csproj"])

        result = synchronize(solution, Workspace(roots=[tmp_path / "src"]))

        assert result.removed == ["ghost.csproj"]
        assert not result.partial
        assert str(a) in solution.members

    def test_remove_failure_recorded(self, tmp_path, make_project, fake_solution):
        a = make_project("A")
        solution = fake_solution(members=["src/Old/Old.csproj"], fail_remove={"src/Old/Old.csproj"})

        result = synchronize(solution, Workspace(roots=[tmp_path / "src"]))

        assert result.removed == []
        assert result.partial
        assert result.failures[0].item == "src/Old/Old.csproj"
        assert "locked" in result.failures[0].reason
        assert str(a) in solution.members

    def test_dry_run_only_lists(self, tmp_path, make_project, fake_solution):
        make_project("A")
        solution = fake_solution(members=["old.csproj"])

        result = synchronize(solution, Workspace(roots=[tmp_path / "src"]), dry_run=True)

        assert solution.members == ["old.csproj"]
        assert [call[0] for call in solution.calls] == ["list"]
        assert result.removed == ["old.csproj"]
        assert len(result.added) == 1

    def test_list_failure_aborts(self, tmp_path, make_project, fake_solution):
        make_project("A")
        solution = fake_solution()

        def broken_list(timeout=None):
            raise AggregatorError(None, "solution file is corrupt")

        solution.list_members = broken_list

        with pytest.raises(AggregatorError):
            synchronize(solution, Workspace(roots=[tmp_path / "src"]))

    def test_deadline_exceeded(self, tmp_path, make_project, fake_solution, monkeypatch):
        make_project("A")
        make_project("B")

        class Clock:
            now = 0.0

            def monotonic(self):
                self.now += 10.0
                return self.now

        monkeypatch.setattr(sync_module, "time", Clock())
        synchronizer = MembershipSynchronizer(fake_solution(), timeout=25)

        with pytest.raises(SyncTimeout):
            synchronizer.synchronize(Workspace(roots=[tmp_path / "src"]))

class FakeDotnet:
    """Stand-in for `dotnet sln` with its path rules.

    `list` prints members relative to the solution folder; `remove` and `add`
    resolve their argument against the working directory of the call.
    """

    def __init__(self, solution_dir: Path, members):
        self.solution_dir = solution_dir.resolve()
        self.members = list(members)
        self.calls = []

    def __call__(self, cmd, cwd=None, **kwargs):
        self.calls.append((cmd, cwd))
        verb = cmd[3]
        stdout = ""
        if verb == "list":
            stdout = "Project(s)\n----------\n" + "".join(f"{m}\n" for m in self.members)
        else:
            target = (Path(cwd or os.getcwd()) / cmd[4]).resolve()
            member = Path(os.path.relpath(target, self.solution_dir)).as_posix()
            if verb == "add" and member not in self.members:
                self.members.append(member)
            elif verb == "remove" and member in self.members:
                self.members.remove(member)
            elif verb == "remove":
                stdout = f"Project `{cmd[4]}` could not be found in the solution.\n"
        return subprocess.CompletedProcess(cmd, 0, stdout=stdout, stderr="")


class TestDotnetSolution:
    """The dotnet sln adapter."""

    def test_parse_list_output(self):
        output = "Project(s)\n----------\nsrc\\A\\A.csproj\ntests\\A.Tests\\A.Tests.csproj\n"
        assert parse_list_output(output) == ["src\\A\\A.csproj", "tests\\A.Tests\\A.Tests.csproj"]

    def test_parse_empty_solution(self):
        assert parse_list_output("No projects found in the solution.\n") == []

    def test_commands_run_from_solution_folder(self, tmp_path, monkeypatch):
        dotnet = FakeDotnet(tmp_path, ["A/A.csproj"])
        monkeypatch.setattr(subprocess, "run", dotnet)
        solution = DotnetSolution(tmp_path / "All.sln")

        assert solution.list_members() == ["A/A.csproj"]
        solution.remove("A/A.csproj")
        solution.add("B/B.csproj")

        assert [call[0] for call in dotnet.calls] == [
            ["dotnet", "sln", "All.sln", "list"],
            ["dotnet", "sln", "All.sln", "remove", "A/A.csproj"],
            ["dotnet", "sln", "All.sln", "add", str(Path("B/B.csproj").resolve())],
        ]
        assert all(cwd == tmp_path for _, cwd in dotnet.calls)

    def test_sync_from_subdirectory_removes_stale_members(self, tmp_path, make_project, monkeypatch):
        make_project("A")
        dotnet = FakeDotnet(tmp_path, ["src/Gone/Gone.csproj"])
        monkeypatch.setattr(subprocess, "run", dotnet)
        monkeypatch.chdir(tmp_path / "src")

        result = synchronize(DotnetSolution("../All.sln"), Workspace(roots=["."]))

        assert dotnet.members == ["src/A/A.csproj"]
        assert result.removed == ["src/Gone/Gone.csproj"]
        assert not result.partial

    def test_remove_of_non_member(self, tmp_path, monkeypatch):
        monkeypatch.setattr(subprocess, "run", FakeDotnet(tmp_path, []))

        with pytest.raises(MemberNotFound):
            DotnetSolution(tmp_path / "All.sln").remove("src/Gone/Gone.csproj")

    def test_locked_solution_is_not_member_not_found(self, monkeypatch):
        def fake_run(cmd, **kwargs):
            raise subprocess.CalledProcessError(1, cmd, output="", stderr="The process cannot access the file")

        monkeypatch.setattr(subprocess, "run", fake_run)

        with pytest.raises(AggregatorError) as excinfo:
            DotnetSolution("All.sln").remove("A/A.csproj")
        assert not isinstance(excinfo.value, MemberNotFound)

    def test_failure_becomes_aggregator_error(self, monkeypatch):
        def fake_run(cmd, **kwargs):
            raise subprocess.CalledProcessError(1, cmd, output="", stderr="Invalid project file")

        monkeypatch.setattr(subprocess, "run", fake_run)

        with pytest.raises(AggregatorError, match="Invalid project file"):
            DotnetSolution("All.sln").add("B/B.csproj")

    def test_timeout_becomes_sync_timeout(self, monkeypatch):
        def fake_run(cmd, **kwargs):
            raise subprocess.TimeoutExpired(cmd, kwargs["timeout"])

        monkeypatch.setattr(subprocess, "run", fake_run)

        with pytest.raises(SyncTimeout):
            DotnetSolution("All.sln", call_timeout=5).list_members()

    def test_missing_dotnet(self, monkeypatch):
        def fake_run(cmd, **kwargs):
            raise FileNotFoundError(cmd[0])

        monkeypatch.setattr(subprocess, "run", fake_run)

        with pytest.raises(AggregatorError, match="not found"):
            DotnetSolution("All.sln", dotnet="dotnet-missing").list_members()

    def test_mock_mode_keeps_members_in_memory(self, tmp_path, make_project):
        path = make_project("A")
        solution = DotnetSolution(tmp_path / "All.sln", mock=True)

        solution.add(path)
        assert solution.list_members() == [str(Path("src", "A", "A.csproj"))]
        solution.remove(str(Path("src", "A", "A.csproj")))
        assert solution.list_members() == []

        with pytest.raises(MemberNotFound):
            solution.remove(str(Path("src", "A", "A.csproj")))
        with pytest.raises(AggregatorError):
            solution.add(path.parent / "Missing.csproj")
