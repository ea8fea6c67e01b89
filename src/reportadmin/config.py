"""Configuration management for reportadmin.

Handles loading .reportadmin.yaml files with directory traversal,
environment variable overrides, and default values.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .errors import ReportAdminError
from .identity import NAME_RE
from .viewer import ANONYMOUS, ViewerContext

CONFIG_FILENAME = ".reportadmin.yaml"
ENV_REPORTS_DIR = "REPORTADMIN_REPORTS_DIR"
ENV_VIEWER = "REPORTADMIN_VIEWER"

DEFAULT_PERMISSION = "CMS_ACCESS_ReportAdmin"


@dataclass
class ViewerConfig:
    """Ambient viewer used when no viewer is given explicitly."""

    name: str | None = None  # None = anonymous
    permissions: list[str] = field(default_factory=list)

    def to_context(self) -> ViewerContext:
        if self.name is None:
            return ANONYMOUS
        return ViewerContext.for_user(self.name, self.permissions)


@dataclass
class ReportAdminConfig:
    """Complete reportadmin configuration."""

    reports_dir: Path | None = None  # Extra directory of report plugins
    reports: dict[str, bool] | None = None  # {type_id: enabled}
    content_prefix: str = "Report"  # Numeric ids resolve to <prefix>_<type>
    required_permission: str | None = DEFAULT_PERMISSION
    viewer: ViewerConfig = field(default_factory=ViewerConfig)
    content: dict[int, str] | None = None  # {id: type_name} content seed
    config_path: Path | None = None  # Path where config was loaded from

    def validate(self) -> None:
        """Validate configuration.

        Raises:
            ReportAdminError: If configuration is invalid.
        """
        if not isinstance(self.content_prefix, str) or not NAME_RE.match(
            self.content_prefix
        ):
            raise ReportAdminError(
                f"Invalid content_prefix: {self.content_prefix!r}. "
                f"Must match [A-Za-z_][A-Za-z0-9_]*"
            )

        if self.required_permission is not None and not self.required_permission:
            raise ReportAdminError("required_permission cannot be empty")

        if self.reports is not None:
            for type_id, enabled in self.reports.items():
                if not isinstance(enabled, bool):
                    raise ReportAdminError(
                        f"reports.{type_id} must be true or false, got {enabled!r}"
                    )

        if self.content is not None:
            for numeric_id, type_name in self.content.items():
                if not isinstance(numeric_id, int) or numeric_id < 0:
                    raise ReportAdminError(
                        f"Content id must be a non-negative integer: {numeric_id!r}"
                    )
                if not NAME_RE.match(type_name):
                    raise ReportAdminError(
                        f"Invalid content type name for id {numeric_id}: "
                        f"{type_name!r}"
                    )

        if self.viewer.name is not None and not self.viewer.name:
            raise ReportAdminError("Viewer name cannot be empty")


def find_config_file(start_path: Path | None = None) -> Path | None:
    """Find .reportadmin.yaml by traversing up from start_path.

    Args:
        start_path: Directory to start searching from. Defaults to cwd.

    Returns:
        Path to config file if found, None otherwise.
    """
    if start_path is None:
        start_path = Path.cwd()
    else:
        start_path = Path(start_path).resolve()

    # If start_path is a file, use its parent directory
    if start_path.is_file():
        start_path = start_path.parent

    current = start_path
    while True:
        config_path = current / CONFIG_FILENAME
        if config_path.is_file():
            return config_path

        parent = current.parent
        if parent == current:
            # Reached root, no config found
            return None
        current = parent


def load_config(
    config_path: Path | None = None,
    start_path: Path | None = None,
) -> ReportAdminConfig:
    """Load configuration from file and environment.

    Priority (highest to lowest):
    1. Environment variables (REPORTADMIN_REPORTS_DIR, REPORTADMIN_VIEWER)
    2. Config file
    3. Default values

    Args:
        config_path: Explicit path to config file.
        start_path: Directory to start searching for config.

    Returns:
        Loaded and validated configuration.

    Raises:
        ReportAdminError: If config is invalid.
    """
    config = ReportAdminConfig()

    # Find or use explicit config file
    if config_path is not None:
        config_path = Path(config_path)
        if not config_path.is_file():
            raise ReportAdminError(f"Config file not found: {config_path}")
    else:
        config_path = find_config_file(start_path)

    if config_path is not None:
        config = _load_config_file(config_path)
        config.config_path = config_path

    env_reports_dir = os.environ.get(ENV_REPORTS_DIR)
    if env_reports_dir:
        config.reports_dir = Path(env_reports_dir)

    # Env viewer replaces the configured one, permissions included
    env_viewer = os.environ.get(ENV_VIEWER)
    if env_viewer:
        config.viewer = ViewerConfig(name=env_viewer)

    config.validate()
    return config


def _content_id(key: Any) -> int:
    # YAML gives ints for bare keys; quoted digit strings are accepted too
    if isinstance(key, int) and not isinstance(key, bool):
        return key
    if isinstance(key, str) and key.isascii() and key.isdigit():
        return int(key)
    raise ReportAdminError(f"Content id must be an integer: {key!r}")


def _load_config_file(config_path: Path) -> ReportAdminConfig:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to .reportadmin.yaml file.

    Returns:
        Configuration loaded from file.

    Raises:
        ReportAdminError: If file cannot be read or parsed.
    """
    try:
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ReportAdminError(f"Invalid YAML in {config_path}: {e}") from e
    except OSError as e:
        raise ReportAdminError(f"Cannot read config file {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ReportAdminError(f"Config file {config_path} must contain a mapping")

    config = ReportAdminConfig(config_path=config_path)

    # Resolve relative plugin directory against config file directory
    if data.get("reports_dir"):
        reports_dir = Path(str(data["reports_dir"]))
        if not reports_dir.is_absolute():
            reports_dir = config_path.parent / reports_dir
        config.reports_dir = reports_dir

    if "reports" in data and isinstance(data["reports"], dict):
        config.reports = {str(k): v for k, v in data["reports"].items()}

    if "content_prefix" in data:
        config.content_prefix = data["content_prefix"]

    # Explicit null disables the section-level permission check
    if "required_permission" in data:
        value = data["required_permission"]
        config.required_permission = None if value is None else str(value)

    if "viewer" in data and isinstance(data["viewer"], dict):
        viewer_data = data["viewer"]
        name = viewer_data.get("name")
        permissions = viewer_data.get("permissions") or []
        if not isinstance(permissions, list):
            raise ReportAdminError(
                f"viewer.permissions must be a list, got {permissions!r}"
            )
        config.viewer = ViewerConfig(
            name=None if name is None else str(name),
            permissions=[str(p) for p in permissions],
        )

    if "content" in data and isinstance(data["content"], dict):
        content: dict[int, str] = {}
        for k, v in data["content"].items():
            content[_content_id(k)] = str(v)
        config.content = content

    return config


def create_default_config(path: Path | None = None) -> Path:
    """Create a default .reportadmin.yaml config file.

    Args:
        path: Directory to create config in. Defaults to cwd.

    Returns:
        Path to created config file.

    Raises:
        ReportAdminError: If file already exists or cannot be written.
    """
    if path is None:
        path = Path.cwd()
    else:
        path = Path(path)

    config_path = path / CONFIG_FILENAME

    if config_path.exists():
        raise ReportAdminError(f"Config file already exists: {config_path}")

    config_content = f'''# reportadmin configuration

# Directory with extra report plugins (.py files defining Report subclasses)
# reports_dir: "reports"

# Enable or disable individual report types
# reports:
#   BrokenLinksReport: false

# Numeric identities resolve to "<content_prefix>_<content type name>"
content_prefix: "Report"

# Permission a viewer needs to see the reports section at all (null = none)
required_permission: "{DEFAULT_PERMISSION}"

# Ambient viewer used when no viewer is given (or REPORTADMIN_VIEWER env var)
# viewer:
#   name: "admin"
#   permissions: ["ADMIN", "{DEFAULT_PERMISSION}"]

# Content entities known to the built-in content store
# content:
#   1: "Page"
'''

    try:
        config_path.write_text(config_content)
    except OSError as e:
        raise ReportAdminError(f"Cannot write config file: {e}") from e

    return config_path


def config_to_dict(config: ReportAdminConfig) -> dict[str, Any]:
    """Convert config to dictionary for display."""
    return {
        "reports_dir": str(config.reports_dir) if config.reports_dir else None,
        "reports": dict(config.reports) if config.reports is not None else None,
        "content_prefix": config.content_prefix,
        "required_permission": config.required_permission,
        "viewer": {
            "name": config.viewer.name,
            "permissions": list(config.viewer.permissions),
        },
        "content": dict(config.content) if config.content is not None else None,
        "config_path": str(config.config_path) if config.config_path else None,
    }
