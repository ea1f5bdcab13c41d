"""Configuration system for file-explorer.

This module implements the configuration schema using Pydantic for
validation, with support for environment variable resolution and fail-fast
validation with actionable error messages.
"""

import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Annotated, Final

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from file_explorer.core.data.filesystem.exclusions import (
    DefaultExclusionFilter,
    ExclusionFilter,
    NoExclusions,
)
from file_explorer.core.data.filesystem.filters import (
    AcceptAllFilter,
    CompositeFilter,
    ExtensionFilter,
    GlobFilter,
)
from file_explorer.core.explorer import ScanStrategy
from file_explorer.types.protocols import Exclusions, Filter

# Matches ${VARIABLE_NAME} where VARIABLE_NAME is upper-case letters, digits and underscores
ENV_VAR_PATTERN: Final[re.Pattern[str]] = re.compile(r"\$\{([A-Z0-9_]+)\}")


class ScanConfig(BaseModel):
    """Where to start and how to walk."""

    base_paths: Annotated[
        list[Path],
        Field(description="Files and directories to enumerate"),
    ] = []
    strategy: Annotated[
        ScanStrategy,
        Field(description="Expansion order for pending directories"),
    ] = ScanStrategy.DEPTH_FIRST


class ExclusionsConfig(BaseModel):
    """Paths skipped before they are enqueued.

    Name patterns match the final path component; ``paths`` exclude whole
    subtrees.
    """

    names: Annotated[list[str], Field(description="Exact entry names to exclude")] = []
    globs: Annotated[list[str], Field(description="Glob patterns matched against entry names")] = []
    regexes: Annotated[list[str], Field(description="Regular expressions searched in entry names")] = []
    extensions: Annotated[list[str], Field(description="File extensions to exclude")] = []
    gitignore: Annotated[list[str], Field(description="Git-style ignore patterns")] = []
    paths: Annotated[list[Path], Field(description="Subtrees to exclude")] = []
    use_defaults: Annotated[
        bool,
        Field(description="Start from the built-in list of VCS, cache and OS metadata names"),
    ] = False
    case_sensitive: Annotated[bool, Field(description="Case-sensitive pattern matching")] = True

    @field_validator("regexes", mode="after")
    @classmethod
    def validate_regexes_compile(cls, v: list[str]) -> list[str]:
        """Reject regular expressions that do not compile.

        Raises:
            ValueError: If any pattern is not a valid regular expression
        """
        for pattern in v:
            try:
                _ = re.compile(pattern)
            except re.error as e:
                msg = f"Invalid regular expression {pattern!r}: {e}"
                raise ValueError(msg) from e
        return v

    @field_validator("gitignore", mode="after")
    @classmethod
    def validate_gitignore_not_negated(cls, v: list[str]) -> list[str]:
        """Reject negated patterns, which cannot be expressed as exclusions.

        Raises:
            ValueError: If any pattern starts with ``!``
        """
        negated = [pattern for pattern in v if pattern.startswith("!")]
        if negated:
            msg = f"Negated gitignore patterns are not supported: {negated}"
            raise ValueError(msg)
        return v

    def is_empty(self) -> bool:
        return not (
            self.names
            or self.globs
            or self.regexes
            or self.extensions
            or self.gitignore
            or self.paths
            or self.use_defaults
        )

    def build(self) -> Exclusions:
        """Create the exclusion policy described by this section."""
        if self.is_empty():
            return NoExclusions()

        exclusions = (
            DefaultExclusionFilter(self.case_sensitive)
            if self.use_defaults
            else ExclusionFilter(self.case_sensitive)
        )
        exclusions.add_exact_names(self.names)
        exclusions.add_glob_patterns(self.globs)
        exclusions.add_regex_patterns(self.regexes)
        exclusions.add_extensions(self.extensions)
        exclusions.add_gitignore_patterns(self.gitignore)
        exclusions.add_paths(self.paths)
        exclusions.compile()
        return exclusions


class FilterConfig(BaseModel):
    """Which discovered files are emitted. Empty lists accept everything."""

    extensions: Annotated[list[str], Field(description="Allowed file extensions")] = []
    globs: Annotated[list[str], Field(description="Allowed file name globs")] = []

    def build(self) -> Filter:
        """Create the filter policy described by this section."""
        filters: list[Filter] = []
        if self.extensions:
            filters.append(ExtensionFilter(self.extensions))
        if self.globs:
            filters.append(GlobFilter(self.globs))

        if not filters:
            return AcceptAllFilter()
        if len(filters) == 1:
            return filters[0]
        return CompositeFilter(*filters)


class ApplicationConfig(BaseModel):
    """Application-level settings."""

    log_level: Annotated[
        str,
        Field(
            description="Logging level",
            pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        ),
    ] = "WARNING"
    log_file: Annotated[
        Path | None,
        Field(description="Optional file receiving a copy of the log"),
    ] = None

    @field_validator("log_file", mode="after")
    @classmethod
    def validate_log_file_parent_exists(cls, v: Path | None) -> Path | None:
        """Validate that the log file's parent directory exists.

        Raises:
            ValueError: If the parent directory does not exist
        """
        if v is not None and not v.parent.exists():
            msg = f"Log file parent directory does not exist: {v.parent}"
            raise ValueError(msg)
        return v


class MainConfig(BaseModel):
    """Top-level configuration container.

    Aggregates all configuration sections:
    - scan: base paths and traversal strategy
    - exclusions: paths skipped at enqueue time
    - filter: files dropped at emit time
    - application: logging settings
    """

    scan: Annotated[ScanConfig, Field(description="Traversal configuration")] = ScanConfig()
    exclusions: Annotated[
        ExclusionsConfig,
        Field(description="Exclusion policy configuration"),
    ] = ExclusionsConfig()
    filter: Annotated[FilterConfig, Field(description="Emission filter configuration")] = FilterConfig()
    application: Annotated[
        ApplicationConfig,
        Field(description="Application-level configuration"),
    ] = ApplicationConfig()

    def build_exclusions(self) -> Exclusions:
        return self.exclusions.build()

    def build_filter(self) -> Filter:
        return self.filter.build()


class EnvironmentVariableError(Exception):
    """Raised when a referenced environment variable is not set."""


class ConfigurationError(Exception):
    """Raised when configuration loading or validation fails.

    Messages are multi-line and say what to fix.
    """


def resolve_env_var(value: str) -> str:
    """Resolve environment variable references in a string value.

    Replaces every ``${VARIABLE_NAME}`` with the variable's value.

    Args:
        value: String potentially containing environment variable references

    Returns:
        String with environment variables resolved

    Raises:
        EnvironmentVariableError: If a referenced environment variable is missing

    Examples:
        >>> os.environ["DATA_ROOT"] = "/srv/data"
        >>> resolve_env_var("${DATA_ROOT}/incoming")
        '/srv/data/incoming'
    """

    def replace_match(match: re.Match[str]) -> str:
        var_name = match.group(1)
        env_value = os.environ.get(var_name)

        if env_value is None:
            msg = (
                f"Required environment variable '{var_name}' is not set. "
                f"Please set this variable before starting the scan."
            )
            raise EnvironmentVariableError(msg)

        return env_value

    return ENV_VAR_PATTERN.sub(replace_match, value)


def resolve_env_vars_in_dict(data: Mapping[str, object]) -> dict[str, object]:
    """Recursively resolve environment variables in a mapping.

    Traverses nested mappings and lists, resolving references in string
    values. Non-string values are preserved as-is. Used on raw YAML data
    before Pydantic validation.

    Args:
        data: Mapping potentially containing environment variable references

    Returns:
        New dictionary with environment variables resolved

    Raises:
        EnvironmentVariableError: If a referenced environment variable is missing
    """
    return {key: _resolve_value(value) for key, value in data.items()}


def _resolve_value(value: object) -> object:
    if isinstance(value, str):
        return resolve_env_var(value)
    if isinstance(value, dict):
        # YAML data is untyped at load time; validated by Pydantic after resolution
        return resolve_env_vars_in_dict(value)  # pyright: ignore[reportUnknownArgumentType]  # YAML boundary
    if isinstance(value, list):
        return [_resolve_value(item) for item in value]  # pyright: ignore[reportUnknownVariableType]  # YAML list items
    return value


def load_main_config(config_path: Path) -> MainConfig:
    """Load and validate configuration from a YAML file.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        Validated MainConfig instance

    Raises:
        ConfigurationError: If the file cannot be loaded, references a missing
            environment variable, or fails validation
    """
    if not config_path.exists():
        msg = (
            f"Configuration file not found: {config_path}\n"
            f"Please create a configuration file at this location."
        )
        raise ConfigurationError(msg)

    try:
        with config_path.open("r") as f:
            raw_data: object = yaml.safe_load(f)  # pyright: ignore[reportAny]  # YAML boundary
    except yaml.YAMLError as e:
        msg = (
            f"Failed to parse YAML configuration file: {config_path}\n"
            f"YAML parsing error: {e}\n"
            f"Please check the file for syntax errors."
        )
        raise ConfigurationError(msg) from e
    except OSError as e:
        msg = f"Failed to read configuration file: {config_path}\nError: {e}\nPlease check file permissions."
        raise ConfigurationError(msg) from e

    # An empty file is a valid, all-defaults configuration
    if raw_data is None:
        raw_data = {}

    if not isinstance(raw_data, dict):
        msg = (
            f"Invalid configuration file format: {config_path}\n"
            f"Expected YAML dictionary at root level, got: {type(raw_data).__name__}\n"
            f"Configuration file must contain key-value pairs."
        )
        raise ConfigurationError(msg)

    try:
        resolved_data = resolve_env_vars_in_dict(raw_data)  # pyright: ignore[reportUnknownArgumentType]  # YAML boundary
    except EnvironmentVariableError as e:
        msg = (
            f"Environment variable resolution failed in: {config_path}\n"
            f"{e}\n"
            f"Set the required environment variable before starting the scan."
        )
        raise ConfigurationError(msg) from e

    try:
        config = MainConfig.model_validate(resolved_data)
    except ValidationError as e:
        error_lines = ["Configuration validation failed:", ""]
        for error in e.errors():
            field_path = " → ".join(str(loc) for loc in error["loc"])
            error_lines.append(f"  Field: {field_path}")
            error_lines.append(f"  Error: {error['msg']}")
            error_lines.append(f"  Type: {error['type']}")
            error_lines.append("")

        error_lines.append(f"Configuration file: {config_path}")
        error_lines.append("Please fix the above errors and try again.")
        raise ConfigurationError("\n".join(error_lines)) from e

    return config
