"""Solution file membership via the dotnet CLI."""
import os
import re
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Union

from solkit.core.errors import AggregatorError, MemberNotFound, SyncTimeout
from solkit.core.logger import get_logger

logger = get_logger(__name__)

_NOT_FOUND_RE = re.compile(r"could not be found|not found in (the )?solution", re.IGNORECASE)


class Aggregator(ABC):
    """External collection of project identifiers (e.g. a .sln file)."""

    @abstractmethod
    def list_members(self, timeout: Optional[float] = None) -> List[str]:
        """Return current member identifiers in the aggregator's order."""

    @abstractmethod
    def remove(self, identifier: str, timeout: Optional[float] = None) -> None:
        """Remove a member.

        Raises:
            MemberNotFound: If the member is not in the aggregator
            AggregatorError: On any other failure
        """

    @abstractmethod
    def add(self, path: Union[str, Path], timeout: Optional[float] = None) -> None:
        """Add a manifest. Raises AggregatorError on failure."""


class DotnetSolution(Aggregator):
    """Drive `dotnet sln` for one solution file.

    `dotnet sln list` prints members relative to the solution's folder, so
    every call runs from that folder and added paths are made absolute.
    """

    def __init__(
        self,
        solution: Union[str, Path],
        dotnet: str = "dotnet",
        call_timeout: Optional[float] = None,
        mock: bool = False,
    ):
        self.solution = Path(solution)
        self.dotnet = dotnet
        self.call_timeout = call_timeout
        self.mock = mock
        self._mock_members: List[str] = []

    @property
    def solution_dir(self) -> Path:
        return self.solution.parent

    def _timeout(self, timeout: Optional[float]) -> Optional[float]:
        if timeout is None:
            return self.call_timeout
        if self.call_timeout is None:
            return timeout
        return min(timeout, self.call_timeout)

    def _run(self, args: List[str], identifier: Optional[str], timeout: Optional[float]) -> str:
        cmd = [self.dotnet, 'sln', self.solution.name] + args
        logger.debug(f"Running: {' '.join(cmd)} (in {self.solution_dir})")
        try:
            result = subprocess.run(
                cmd,
                cwd=self.solution_dir,
                capture_output=True,
                text=True,
                check=True,
                timeout=self._timeout(timeout),
            )
        except subprocess.TimeoutExpired as e:
            raise SyncTimeout(identifier, f"'{' '.join(args)}' timed out after {e.timeout}s") from e
        except subprocess.CalledProcessError as e:
            output = (e.stderr or e.stdout or "").strip()
            raise AggregatorError(identifier, output or f"dotnet exited with {e.returncode}") from e
        except FileNotFoundError as e:
            raise AggregatorError(identifier, f"'{self.dotnet}' not found. Install the .NET SDK first.") from e
        return result.stdout

    def list_members(self, timeout: Optional[float] = None) -> List[str]:
        if self.mock:
            logger.info(f"MOCK: Would list projects in {self.solution}")
            return list(self._mock_members)
        return parse_list_output(self._run(['list'], None, timeout))

    def remove(self, identifier: str, timeout: Optional[float] = None) -> None:
        if self.mock:
            logger.info(f"MOCK: Would remove {identifier} from {self.solution}")
            if identifier not in self._mock_members:
                raise MemberNotFound(identifier, "not found in solution")
            self._mock_members.remove(identifier)
            return
        try:
            output = self._run(['remove', identifier], identifier, timeout)
        except SyncTimeout:
            raise
        except AggregatorError as e:
            if _NOT_FOUND_RE.search(e.reason):
                raise MemberNotFound(identifier, e.reason) from e
            raise
        # dotnet only warns, with exit code 0, when the project is not a member
        if _NOT_FOUND_RE.search(output):
            raise MemberNotFound(identifier, output.strip())

    def add(self, path: Union[str, Path], timeout: Optional[float] = None) -> None:
        absolute = Path(path).resolve()
        if self.mock:
            identifier = os.path.relpath(absolute, self.solution_dir.resolve())
            logger.info(f"MOCK: Would add {identifier} to {self.solution}")
            if not absolute.is_file():
                raise AggregatorError(str(path), "project file not found")
            if identifier not in self._mock_members:
                self._mock_members.append(identifier)
            return
        self._run(['add', str(absolute)], str(path), timeout)


def parse_list_output(output: str) -> List[str]:
    """Extract project paths from `dotnet sln list` output.

    The listing starts with a 'Project(s)' header underlined by dashes; an
    empty solution prints a single informational line instead.
    """
    lines = [line.strip() for line in output.splitlines() if line.strip()]
    for index, line in enumerate(lines):
        if set(line) == {'-'}:
            return lines[index + 1:]
    return [line for line in lines if line.lower().endswith('proj')]
