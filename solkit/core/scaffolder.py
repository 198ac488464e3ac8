"""Generate test-project manifests from a template."""
import re
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Union

from solkit.core.errors import ManifestIOError
from solkit.core.logger import get_logger
from solkit.models.report import CoverageReport, ItemFailure, ScaffoldResult

logger = get_logger(__name__)

DEFAULT_TEST_SUFFIX = ".Tests"

_SLOT_RE = re.compile(r"\{(\d+)\}")


def substitute(template: str, *params: str) -> str:
    """Replace positional slots {0}, {1}, ... with params.

    Braces that are not a numbered slot, or whose index has no parameter,
    are left as they are.
    """
    def replace(match: re.Match) -> str:
        index = int(match.group(1))
        if index < len(params):
            return params[index]
        return match.group(0)

    return _SLOT_RE.sub(replace, template)


def source_name_for(target_name: str, suffix: str = DEFAULT_TEST_SUFFIX) -> str:
    """Name of the project a test project covers ("Foo.Tests" -> "Foo")."""
    if suffix and target_name.endswith(suffix) and len(target_name) > len(suffix):
        return target_name[: -len(suffix)]
    return target_name


def default_output_path(out_dir: Union[str, Path], extension: str = ".csproj") -> Callable[[str], Path]:
    """Layout <out_dir>/<name>/<name><extension>."""
    out_dir = Path(out_dir)

    def output_path(name: str) -> Path:
        return out_dir / name / f"{name}{extension}"

    return output_path


class TemplateScaffolder:
    """Writes one manifest per target name from a shared template."""

    def __init__(self, template: str, suffix: str = DEFAULT_TEST_SUFFIX):
        self.template = template
        self.suffix = suffix

    def render(self, target_name: str) -> str:
        return substitute(self.template, source_name_for(target_name, self.suffix))

    def scaffold(
        self,
        target_names: Iterable[str],
        output_path_fn: Callable[[str], Path],
    ) -> ScaffoldResult:
        """Write each target's manifest, overwriting existing files.

        A target whose directory cannot be created or whose file cannot be
        written is recorded as a failure; the remaining targets are still
        written.
        """
        result = ScaffoldResult()
        for name in target_names:
            destination = Path(output_path_fn(name))
            try:
                self.write(destination, self.render(name))
            except ManifestIOError as e:
                logger.warning(f"Failed to scaffold {name}: {e.reason}")
                result.failures.append(ItemFailure(str(destination), e.reason))
                continue
            logger.info(f"Scaffolded {destination}")
            result.written.append(destination)
        return result

    @staticmethod
    def write(destination: Path, content: str) -> None:
        """Create the parent directory and write content.

        Raises:
            ManifestIOError: If the directory cannot be created or the file
                cannot be written
        """
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            with open(destination, "w", encoding="utf-8", newline="") as f:
                f.write(content)
        except OSError as e:
            raise ManifestIOError(destination, e.strerror or str(e)) from e


def scaffold(
    target_names: Iterable[str],
    template: str,
    output_path_fn: Callable[[str], Path],
    suffix: str = DEFAULT_TEST_SUFFIX,
) -> ScaffoldResult:
    """Functional shortcut for TemplateScaffolder(template, suffix).scaffold(...)."""
    return TemplateScaffolder(template, suffix).scaffold(target_names, output_path_fn)


def missing_test_projects(report: CoverageReport, suffix: Optional[str] = DEFAULT_TEST_SUFFIX) -> List[str]:
    """Test project names for every source project the audit found uncovered."""
    return [f"{name}{suffix or ''}" for name in report.missing]
