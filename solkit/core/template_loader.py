"""Template loading for scaffolded manifests."""
from pathlib import Path
from typing import List, Optional, Union

TEMPLATE_SUFFIX = ".template"


class TemplateLoader:
    """Loads manifest templates from a file path or the bundled templates."""

    def __init__(self, templates_dir: Optional[Path] = None):
        """Initialize template loader.

        Args:
            templates_dir: Path to templates directory. Defaults to solkit/templates/
        """
        if templates_dir is None:
            # Loader is in solkit/core/, templates are in solkit/templates/
            templates_dir = Path(__file__).parent.parent / "templates"
        self.templates_dir = templates_dir

    def list_templates(self) -> List[str]:
        """Names of the bundled templates."""
        if not self.templates_dir.is_dir():
            return []
        return sorted(
            p.name[: -len(TEMPLATE_SUFFIX)]
            for p in self.templates_dir.glob(f"*{TEMPLATE_SUFFIX}")
        )

    def resolve(self, template: Union[str, Path]) -> Path:
        """Find a template by file path first, then by bundled name.

        Raises:
            FileNotFoundError: If neither exists
        """
        candidate = Path(template)
        if candidate.is_file():
            return candidate

        bundled = self.templates_dir / f"{template}{TEMPLATE_SUFFIX}"
        if bundled.is_file():
            return bundled

        available = ", ".join(self.list_templates()) or "none"
        raise FileNotFoundError(
            f"Template '{template}' not found (bundled templates: {available})"
        )

    def load(self, template: Union[str, Path]) -> str:
        """Return the template text."""
        with open(self.resolve(template), encoding="utf-8", newline="") as f:
            return f.read()
