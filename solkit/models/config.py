"""Workspace configuration file models (solkit.yml)."""
import re
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from solkit.core.scaffolder import DEFAULT_TEST_SUFFIX
from solkit.core.scanner import DEFAULT_EXCLUDE_DIRS, DEFAULT_MANIFEST_GLOB


def _check_regex(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    try:
        re.compile(value)
    except re.error as e:
        raise ValueError(f"Invalid regular expression {value!r}: {e}") from e
    return value


class RewriteSection(BaseModel):
    """Default reference rewrite rule."""

    model_config = ConfigDict(extra='forbid')

    pattern: str = r"^\.\.[/\\]"
    replacement: Optional[str] = None
    marker: Optional[str] = None

    @field_validator('pattern')
    @classmethod
    def validate_pattern(cls, v):
        return _check_regex(v)


class ScaffoldSection(BaseModel):
    """Test project scaffolding defaults."""

    model_config = ConfigDict(extra='forbid')

    template: str = "xunit"
    suffix: str = DEFAULT_TEST_SUFFIX
    out_dir: Optional[str] = None


class AuditSection(BaseModel):
    """Coverage audit defaults."""

    model_config = ConfigDict(extra='forbid')

    exclude: Optional[str] = Field(
        None, description="Source projects matching this pattern need no tests"
    )

    @field_validator('exclude')
    @classmethod
    def validate_exclude(cls, v):
        return _check_regex(v)


class WorkspaceConfig(BaseModel):
    """Top level of solkit.yml. Relative paths are relative to the file."""

    model_config = ConfigDict(extra='forbid')

    solution: Optional[str] = None
    source_roots: List[str] = Field(default_factory=list)
    test_roots: List[str] = Field(default_factory=list)
    manifest_glob: str = DEFAULT_MANIFEST_GLOB
    exclude_dirs: List[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDE_DIRS))
    rewrite: RewriteSection = Field(default_factory=RewriteSection)
    scaffold: ScaffoldSection = Field(default_factory=ScaffoldSection)
    audit: AuditSection = Field(default_factory=AuditSection)
