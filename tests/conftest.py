"""Shared test fixtures for solkit tests."""
from pathlib import Path
from typing import List, Optional

import pytest

from solkit.core.errors import AggregatorError, MemberNotFound
from solkit.services.solution import Aggregator

CSPROJ = """<Project Sdk="Microsoft.NET.Sdk">

  <PropertyGroup>
    <TargetFramework>net10.0</TargetFramework>
  </PropertyGroup>

  <ItemGroup>
{references}
  </ItemGroup>

</Project>
"""


def csproj_text(references: Optional[List[str]] = None) -> str:
    lines = [f'    <ProjectReference Include="{ref}" />' for ref in references or []]
    return CSPROJ.format(references="\n".join(lines))


@pytest.fixture
def make_project(tmp_path):
    """Create <root>/<name>/<name>.csproj and return its path."""
    def _make(name: str, references: Optional[List[str]] = None, root: str = "src") -> Path:
        project_dir = tmp_path / root / name
        project_dir.mkdir(parents=True, exist_ok=True)
        path = project_dir / f"{name}.csproj"
        path.write_text(csproj_text(references), encoding="utf-8")
        return path

    return _make


class FakeSolution(Aggregator):
    """In-memory aggregator that records calls."""

    def __init__(self, members=None, fail_add=(), fail_remove=(), vanished=()):
        self.members = list(members or [])
        # Listed by the aggregator but already gone when removed
        self.vanished = list(vanished)
        self.fail_add = set(fail_add)
        self.fail_remove = set(fail_remove)
        self.calls = []

    def list_members(self, timeout=None):
        self.calls.append(("list", None))
        return list(self.members) + self.vanished

    def remove(self, identifier, timeout=None):
        self.calls.append(("remove", identifier))
        if identifier in self.fail_remove:
            raise AggregatorError(identifier, "solution file is locked by another process")
        if identifier not in self.members:
            raise MemberNotFound(identifier, "not found in solution")
        self.members.remove(identifier)

    def add(self, path, timeout=None):
        identifier = str(path)
        self.calls.append(("add", identifier))
        if Path(path).name in self.fail_add:
            raise AggregatorError(identifier, "invalid project file")
        if identifier not in self.members:
            self.members.append(identifier)


@pytest.fixture
def fake_solution():
    return FakeSolution
