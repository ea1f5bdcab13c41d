"""Command-line interface for File Explorer."""

from __future__ import annotations

from pathlib import Path

import click

from file_explorer.core.config import ConfigurationError, MainConfig, load_main_config
from file_explorer.core.explorer import ScanStrategy

# Configuration file discovery, in order of precedence
CURRENT_DIR_CONFIG_FILES = [
    "file-explorer.yaml",
    "file-explorer.yml",
]

HOME_CONFIG_FILES = [
    ".file-explorer.yaml",
    ".file-explorer.yml",
]

EXIT_CONFIG_ERROR = 2


class ConfigurationFailed(click.ClickException):
    """Configuration could not be loaded; reported without a traceback."""

    exit_code = EXIT_CONFIG_ERROR


def discover_config_file() -> Path | None:
    """Discover a configuration file in standard locations.

    Searches the current directory first, then the user's home directory.

    Returns:
        Path to the first configuration file found, or None
    """
    for config_file in CURRENT_DIR_CONFIG_FILES:
        config_path = Path(config_file)
        if config_path.is_file():
            return config_path

    try:
        home_dir = Path.home()
    except (OSError, RuntimeError):
        # Path.home() can fail in some environments
        return None

    for config_file in HOME_CONFIG_FILES:
        config_path = home_dir / config_file
        if config_path.is_file():
            return config_path

    return None


def validate_config_path(
    ctx: click.Context,  # pyright: ignore[reportUnusedParameter] # required by Click callback signature
    param: click.Parameter,  # pyright: ignore[reportUnusedParameter] # required by Click callback signature
    value: Path | None,
) -> Path | None:
    """Validate configuration file path.

    Raises:
        click.BadParameter: If the path is a directory or not a YAML file
    """
    if value is None:
        return value

    if value.is_dir():
        raise click.BadParameter("Configuration path must be a file, not a directory")

    valid_extensions = {".yaml", ".yml"}
    if value.suffix.lower() not in valid_extensions:
        extensions_str = ", ".join(sorted(valid_extensions))
        raise click.BadParameter(
            f"Invalid configuration file extension. Supported extensions: {extensions_str}"
        )

    return value


def validate_log_level(
    ctx: click.Context,  # pyright: ignore[reportUnusedParameter] # required by Click callback signature
    param: click.Parameter,  # pyright: ignore[reportUnusedParameter] # required by Click callback signature
    value: str | None,
) -> str | None:
    """Validate and normalize log level.

    Raises:
        click.BadParameter: If the level is unknown
    """
    if value is None:
        return value

    normalized_value = value.upper().strip()

    valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
    if normalized_value not in valid_levels:
        raise click.BadParameter(
            f'Invalid log level "{value}". Valid options: {", ".join(sorted(valid_levels))}'
        )

    return normalized_value


def apply_overrides(
    config: MainConfig,
    *,
    paths: tuple[Path, ...] = (),
    exclude: tuple[str, ...] = (),
    exclude_paths: tuple[Path, ...] = (),
    extensions: tuple[str, ...] = (),
    strategy: str | None = None,
    default_exclusions: bool = False,
    log_level: str | None = None,
) -> MainConfig:
    """Merge command-line options over a loaded configuration.

    Paths given on the command line replace the configured base paths; the
    remaining list options extend the configured ones.

    Returns:
        A new configuration; the input is left untouched
    """
    scan = config.scan.model_copy(
        update={
            "base_paths": list(paths) if paths else config.scan.base_paths,
            "strategy": ScanStrategy(strategy) if strategy else config.scan.strategy,
        }
    )
    exclusions = config.exclusions.model_copy(
        update={
            "globs": [*config.exclusions.globs, *exclude],
            "paths": [*config.exclusions.paths, *exclude_paths],
            "use_defaults": config.exclusions.use_defaults or default_exclusions,
        }
    )
    file_filter = config.filter.model_copy(
        update={"extensions": [*config.filter.extensions, *extensions]}
    )
    application = config.application.model_copy(
        update={"log_level": log_level or config.application.log_level}
    )
    return config.model_copy(
        update={
            "scan": scan,
            "exclusions": exclusions,
            "filter": file_filter,
            "application": application,
        }
    )


try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("file-explorer")
except PackageNotFoundError:
    __version__ = "unknown"


@click.command()
@click.argument(
    "paths",
    nargs=-1,
    type=click.Path(path_type=Path),
)
@click.option(
    "--config", "-c",
    type=click.Path(path_type=Path),
    default=None,
    callback=validate_config_path,
    help="Configuration file path (.yaml or .yml). If not specified, searches for "
    "file-explorer.yaml in the current directory, then ~/.file-explorer.yaml.",
)
@click.option(
    "--exclude", "-e",
    multiple=True,
    help="Glob matched against entry names; matching files and directories are skipped. Repeatable.",
)
@click.option(
    "--exclude-path",
    multiple=True,
    type=click.Path(path_type=Path),
    help="Skip this path and everything beneath it. Repeatable.",
)
@click.option(
    "--extension", "-x",
    multiple=True,
    help="Only emit files with this extension. Repeatable.",
)
@click.option(
    "--strategy",
    type=click.Choice([s.value for s in ScanStrategy]),
    default=None,
    help="Order in which directories are expanded (default: depth_first).",
)
@click.option(
    "--default-exclusions",
    is_flag=True,
    help="Skip VCS metadata, tool caches and OS metadata files.",
)
@click.option(
    "--log-level", "-l",
    type=str,
    default=None,
    callback=validate_log_level,
    help="Logging verbosity level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
)
@click.option(
    "--strict",
    is_flag=True,
    help="Exit with status 1 if any path could not be read.",
)
@click.version_option(version=__version__, prog_name="File Explorer")
@click.pass_context
def cli(
    ctx: click.Context,
    paths: tuple[Path, ...],
    config: Path | None,
    exclude: tuple[str, ...],
    exclude_path: tuple[Path, ...],
    extension: tuple[str, ...],
    strategy: str | None,
    default_exclusions: bool,
    log_level: str | None,
    strict: bool,
) -> None:
    """File Explorer - list every file beneath PATHS.

    Paths are printed to stdout as they are discovered. Paths that could not
    be read are reported on stderr once the scan finishes.

    Examples:

        # List everything under two directories
        file-explorer src/ docs/

        # Only Python files, skipping caches and virtualenvs
        file-explorer --default-exclusions -x py .

        # Use a configuration file and fail on unreadable paths
        file-explorer --config scan.yaml --strict
    """
    from file_explorer.app.runner import ApplicationRunner

    config_path = config if config is not None else discover_config_file()
    try:
        loaded = load_main_config(config_path) if config_path is not None else MainConfig()
    except ConfigurationError as e:
        raise ConfigurationFailed(str(e)) from e

    merged = apply_overrides(
        loaded,
        paths=paths,
        exclude=exclude,
        exclude_paths=exclude_path,
        extensions=extension,
        strategy=strategy,
        default_exclusions=default_exclusions,
        log_level=log_level,
    )
    if not merged.scan.base_paths:
        raise click.UsageError("No paths to scan: pass PATHS or set scan.base_paths in the configuration.")

    runner = ApplicationRunner(merged, strict=strict)
    ctx.exit(runner.run())
