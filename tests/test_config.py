"""Tests for reportadmin.config module."""

from pathlib import Path

import pytest

from reportadmin.config import (
    CONFIG_FILENAME,
    DEFAULT_PERMISSION,
    ReportAdminConfig,
    ViewerConfig,
    config_to_dict,
    create_default_config,
    find_config_file,
    load_config,
)
from reportadmin.errors import ReportAdminError
from reportadmin.viewer import ANONYMOUS


class TestFindConfigFile:
    """Tests for find_config_file function."""

    def test_finds_config_in_current_dir(self, tmp_path):
        config_path = tmp_path / CONFIG_FILENAME
        config_path.write_text("content_prefix: Report")

        assert find_config_file(tmp_path) == config_path

    def test_finds_config_in_parent_dir(self, tmp_path):
        config_path = tmp_path / CONFIG_FILENAME
        config_path.write_text("content_prefix: Report")

        subdir = tmp_path / "sub" / "deep"
        subdir.mkdir(parents=True)

        assert find_config_file(subdir) == config_path

    def test_returns_none_when_not_found(self, tmp_path):
        assert find_config_file(tmp_path) is None

    def test_starts_from_file_path(self, tmp_path):
        config_path = tmp_path / CONFIG_FILENAME
        config_path.write_text("content_prefix: Report")
        file_path = tmp_path / "report.py"
        file_path.write_text("")

        assert find_config_file(file_path) == config_path


class TestLoadConfig:
    """Tests for load_config function."""

    def test_defaults_without_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv("REPORTADMIN_REPORTS_DIR", raising=False)
        monkeypatch.delenv("REPORTADMIN_VIEWER", raising=False)

        config = load_config(start_path=tmp_path)

        assert config.reports_dir is None
        assert config.reports is None
        assert config.content_prefix == "Report"
        assert config.required_permission == DEFAULT_PERMISSION
        assert config.viewer.to_context() is ANONYMOUS
        assert config.config_path is None

    def test_loads_from_file(self, tmp_path):
        config_path = tmp_path / CONFIG_FILENAME
        config_path.write_text("""
reports_dir: "plugins"
reports:
  BrokenLinksReport: false
  EmptyPagesReport: true
content_prefix: "SS_Report"
required_permission: "VIEW_REPORTS"
viewer:
  name: "admin"
  permissions: ["ADMIN"]
content:
  1: "Page"
  "2": "VirtualPage"
""")

        config = load_config(config_path=config_path)

        assert config.reports_dir == tmp_path / "plugins"
        assert config.reports == {
            "BrokenLinksReport": False,
            "EmptyPagesReport": True,
        }
        assert config.content_prefix == "SS_Report"
        assert config.required_permission == "VIEW_REPORTS"
        assert config.viewer.name == "admin"
        assert config.viewer.to_context().permissions == frozenset({"ADMIN"})
        assert config.content == {1: "Page", 2: "VirtualPage"}
        assert config.config_path == config_path

    def test_absolute_reports_dir(self, tmp_path):
        plugins = tmp_path / "elsewhere"
        config_path = tmp_path / CONFIG_FILENAME
        config_path.write_text(f'reports_dir: "{plugins.as_posix()}"')

        assert load_config(config_path=config_path).reports_dir == plugins

    def test_null_required_permission(self, tmp_path):
        config_path = tmp_path / CONFIG_FILENAME
        config_path.write_text("required_permission: null")

        assert load_config(config_path=config_path).required_permission is None

    def test_empty_file(self, tmp_path):
        config_path = tmp_path / CONFIG_FILENAME
        config_path.write_text("")

        config = load_config(config_path=config_path)
        assert config.content_prefix == "Report"

    def test_env_overrides(self, tmp_path, monkeypatch):
        config_path = tmp_path / CONFIG_FILENAME
        config_path.write_text("""
reports_dir: "plugins"
viewer:
  name: "admin"
  permissions: ["ADMIN"]
""")
        monkeypatch.setenv("REPORTADMIN_REPORTS_DIR", "/opt/reports")
        monkeypatch.setenv("REPORTADMIN_VIEWER", "guest")

        config = load_config(config_path=config_path)

        assert config.reports_dir == Path("/opt/reports")
        assert config.viewer.name == "guest"
        assert config.viewer.permissions == []

    def test_missing_explicit_config_fails(self, tmp_path):
        with pytest.raises(ReportAdminError, match="not found"):
            load_config(config_path=tmp_path / "nonexistent.yaml")

    def test_invalid_yaml_fails(self, tmp_path):
        config_path = tmp_path / CONFIG_FILENAME
        config_path.write_text("invalid: yaml: syntax:")

        with pytest.raises(ReportAdminError, match="Invalid YAML"):
            load_config(config_path=config_path)

    def test_non_mapping_fails(self, tmp_path):
        config_path = tmp_path / CONFIG_FILENAME
        config_path.write_text("- just\n- a list\n")

        with pytest.raises(ReportAdminError, match="must contain a mapping"):
            load_config(config_path=config_path)

    def test_invalid_prefix_fails(self, tmp_path):
        config_path = tmp_path / CONFIG_FILENAME
        config_path.write_text('content_prefix: "Bad Prefix"')

        with pytest.raises(ReportAdminError, match="Invalid content_prefix"):
            load_config(config_path=config_path)

    def test_non_bool_report_toggle_fails(self, tmp_path):
        config_path = tmp_path / CONFIG_FILENAME
        config_path.write_text("reports:\n  BrokenLinksReport: maybe\n")

        with pytest.raises(ReportAdminError, match="must be true or false"):
            load_config(config_path=config_path)

    def test_non_integer_content_id_fails(self, tmp_path):
        config_path = tmp_path / CONFIG_FILENAME
        config_path.write_text("content:\n  home: Page\n")

        with pytest.raises(ReportAdminError, match="must be an integer"):
            load_config(config_path=config_path)

    def test_float_content_id_fails(self, tmp_path):
        config_path = tmp_path / CONFIG_FILENAME
        config_path.write_text("content:\n  1.9: Page\n")

        with pytest.raises(ReportAdminError, match="must be an integer"):
            load_config(config_path=config_path)

    def test_quoted_content_id_accepted(self, tmp_path):
        config_path = tmp_path / CONFIG_FILENAME
        config_path.write_text('content:\n  "7": Page\n')

        assert load_config(config_path=config_path).content == {7: "Page"}

    def test_scalar_viewer_permissions_fails(self, tmp_path):
        config_path = tmp_path / CONFIG_FILENAME
        config_path.write_text("viewer:\n  name: editor\n  permissions: ADMIN\n")

        with pytest.raises(ReportAdminError, match="must be a list"):
            load_config(config_path=config_path)

    def test_invalid_content_type_name_fails(self, tmp_path):
        config_path = tmp_path / CONFIG_FILENAME
        config_path.write_text('content:\n  1: "Bad Name"\n')

        with pytest.raises(ReportAdminError, match="Invalid content type name"):
            load_config(config_path=config_path)


class TestValidate:
    """Tests for ReportAdminConfig.validate."""

    def test_default_is_valid(self):
        ReportAdminConfig().validate()

    def test_empty_permission_fails(self):
        with pytest.raises(ReportAdminError, match="cannot be empty"):
            ReportAdminConfig(required_permission="").validate()

    def test_negative_content_id_fails(self):
        with pytest.raises(ReportAdminError, match="non-negative"):
            ReportAdminConfig(content={-1: "Page"}).validate()

    def test_empty_viewer_name_fails(self):
        with pytest.raises(ReportAdminError, match="Viewer name"):
            ReportAdminConfig(viewer=ViewerConfig(name="")).validate()


class TestCreateDefaultConfig:
    """Tests for create_default_config function."""

    def test_creates_loadable_file(self, tmp_path):
        config_path = create_default_config(tmp_path)

        assert config_path == tmp_path / CONFIG_FILENAME
        config = load_config(config_path=config_path)
        assert config.content_prefix == "Report"
        assert config.required_permission == DEFAULT_PERMISSION

    def test_refuses_to_overwrite(self, tmp_path):
        create_default_config(tmp_path)
        with pytest.raises(ReportAdminError, match="already exists"):
            create_default_config(tmp_path)


class TestConfigToDict:
    """Tests for config_to_dict function."""

    def test_defaults(self):
        data = config_to_dict(ReportAdminConfig())
        assert data == {
            "reports_dir": None,
            "reports": None,
            "content_prefix": "Report",
            "required_permission": DEFAULT_PERMISSION,
            "viewer": {"name": None, "permissions": []},
            "content": None,
            "config_path": None,
        }

    def test_values(self, tmp_path):
        config = ReportAdminConfig(
            reports_dir=tmp_path,
            reports={"A": False},
            viewer=ViewerConfig(name="bob", permissions=["ADMIN"]),
            content={1: "Page"},
        )
        data = config_to_dict(config)
        assert data["reports_dir"] == str(tmp_path)
        assert data["reports"] == {"A": False}
        assert data["viewer"] == {"name": "bob", "permissions": ["ADMIN"]}
        assert data["content"] == {1: "Page"}
