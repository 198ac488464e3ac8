"""YAML configuration loader for solkit.yml."""
from pathlib import Path
from typing import List, Optional, Union

import yaml
from pydantic import ValidationError

from solkit.core.errors import ConfigValidationError
from solkit.models.config import WorkspaceConfig


class ConfigLoader:
    """Loads and validates a workspace configuration file."""

    def __init__(self, config_path: Optional[Union[str, Path]] = "solkit.yml"):
        self.config_path = Path(config_path) if config_path else None
        self.raw_config = None
        self.config: Optional[WorkspaceConfig] = None

    @property
    def base_dir(self) -> Path:
        if self.config_path is None:
            return Path.cwd()
        return self.config_path.parent

    def load(self, required: bool = False) -> WorkspaceConfig:
        """Load YAML configuration from file.

        A missing file yields the defaults unless required is set.

        Raises:
            FileNotFoundError: If required and the file does not exist
            ConfigValidationError: If the file is not valid YAML or fails validation
        """
        if self.config_path is None or not self.config_path.exists():
            if required:
                raise FileNotFoundError(f"Config file not found: {self.config_path}")
            self.config = WorkspaceConfig()
            return self.config

        try:
            with open(self.config_path, encoding="utf-8") as f:
                self.raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigValidationError(f"{self.config_path}: invalid YAML: {e}") from e

        if self.raw_config is None:
            self.raw_config = {}
        if not isinstance(self.raw_config, dict):
            raise ConfigValidationError(f"{self.config_path}: top level must be a mapping")

        try:
            self.config = WorkspaceConfig.model_validate(self.raw_config)
        except ValidationError as e:
            raise ConfigValidationError(f"{self.config_path}: {_format_errors(e)}") from e
        return self.config

    def resolve(self, path: Union[str, Path]) -> Path:
        """Resolve a config-relative path."""
        path = Path(path)
        if path.is_absolute():
            return path
        return self.base_dir / path

    def resolve_all(self, paths: List[str]) -> List[Path]:
        return [self.resolve(p) for p in paths]


def _format_errors(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(p) for p in item["loc"]) or "<root>"
        parts.append(f"{location}: {item['msg']}")
    return "; ".join(parts)
