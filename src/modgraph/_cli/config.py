"""Configuration loading from pyproject.toml."""

import tomllib
from dataclasses import dataclass
from pathlib import Path

from modgraph._style import Orientation


class ConfigError(Exception):
    """Error in modgraph configuration."""


@dataclass(slots=True, frozen=True)
class ModgraphConfig:
    """Configuration loaded from the ``[tool.modgraph]`` table of pyproject.toml.

    All relative paths are resolved from the project root (directory containing pyproject.toml).
    Fields left as None fall back to the command line defaults.
    """

    workspace: Path | None = None
    output: Path | None = None
    ignore_versions: bool | None = None
    filter_tests: bool | None = None
    orientation: Orientation | None = None
    title: str | None = None
    project_root: Path | None = None


def find_pyproject_toml(start_dir: Path | None = None) -> Path | None:
    """Find pyproject.toml by walking up from start_dir.

    Args:
        start_dir: Starting directory. Defaults to current working directory.

    Returns:
        Path to pyproject.toml if found, None otherwise.

    """
    current = (start_dir or Path.cwd()).resolve()

    while True:
        candidate = current / "pyproject.toml"
        if candidate.is_file():
            return candidate
        if current.parent == current:
            return None
        current = current.parent


def _parse_path(section: dict[str, object], key: str, project_root: Path) -> Path | None:
    if key not in section:
        return None
    value = section[key]
    if not isinstance(value, str):
        msg = f"Invalid [tool.modgraph].{key}: expected string path"
        raise ConfigError(msg)
    path = Path(value)
    if not path.is_absolute():
        path = project_root / path
    return path


def _parse_bool(section: dict[str, object], key: str) -> bool | None:
    if key not in section:
        return None
    value = section[key]
    if not isinstance(value, bool):
        msg = f"Invalid [tool.modgraph].{key}: expected true or false"
        raise ConfigError(msg)
    return value


def _parse_orientation(section: dict[str, object]) -> Orientation | None:
    if "orientation" not in section:
        return None
    value = section["orientation"]
    try:
        return Orientation(str(value).replace("-", "_"))
    except ValueError as e:
        choices = ", ".join(o.value for o in Orientation)
        msg = f"Invalid [tool.modgraph].orientation '{value}'. Expected one of: {choices}"
        raise ConfigError(msg) from e


def load_config(pyproject_path: Path) -> ModgraphConfig:
    """Load and validate [tool.modgraph] config from pyproject.toml.

    Args:
        pyproject_path: Path to pyproject.toml

    Returns:
        Parsed ModgraphConfig

    Raises:
        ConfigError: If the configuration is invalid

    """
    project_root = pyproject_path.parent

    with pyproject_path.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML in {pyproject_path}: {e}"
            raise ConfigError(msg) from e

    section = data.get("tool", {}).get("modgraph", {})
    if not section:
        return ModgraphConfig(project_root=project_root)
    if not isinstance(section, dict):
        msg = "Invalid [tool.modgraph] configuration: expected a table"
        raise ConfigError(msg)

    title = section.get("title")
    if title is not None and not isinstance(title, str):
        msg = "Invalid [tool.modgraph].title: expected string"
        raise ConfigError(msg)

    return ModgraphConfig(
        workspace=_parse_path(section, "workspace", project_root),
        output=_parse_path(section, "output", project_root),
        ignore_versions=_parse_bool(section, "ignore-versions"),
        filter_tests=_parse_bool(section, "filter-tests"),
        orientation=_parse_orientation(section),
        title=title,
        project_root=project_root,
    )


def get_config() -> ModgraphConfig:
    """Get config from pyproject.toml in current directory or parents.

    Returns:
        ModgraphConfig (may be empty if no pyproject.toml or no [tool.modgraph] section)

    """
    pyproject_path = find_pyproject_toml()
    if pyproject_path is None:
        return ModgraphConfig()
    return load_config(pyproject_path)
