"""Command-line interface for reportadmin."""

import logging
from pathlib import Path

import click
import yaml

from . import __version__
from .admin import ReportAdmin
from .config import (
    CONFIG_FILENAME,
    config_to_dict,
    create_default_config,
    find_config_file,
    load_config,
)
from .errors import ReportAdminError
from .viewer import ANONYMOUS, ViewerContext


@click.group()
@click.version_option(version=__version__, prog_name="reportadmin")
@click.option("-v", "--verbose", is_flag=True, help="Log discovery and resolution")
def main(verbose):
    """Inspect the reports installed in an admin interface.

    Reports are plugins: built-in ones plus any .py files in the
    configured reports_dir. Each report decides who may see it.

    \b
    Quick start:
      reportadmin config init             # Create .reportadmin.yaml
      reportadmin list                    # Reports visible to the ambient viewer
      reportadmin list --all              # Every installed report
      reportadmin menu --viewer bob -p CMS_ACCESS_ReportAdmin
      reportadmin schema BrokenLinksReport --viewer admin -p ADMIN
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def viewer_options(f):
    """Options selecting the viewer a command runs as."""
    f = click.option(
        "--anonymous",
        is_flag=True,
        help="Run as the anonymous viewer (ignores the configured viewer)",
    )(f)
    f = click.option(
        "-p",
        "--permission",
        "permissions",
        multiple=True,
        help="Permission code granted to --viewer (can specify multiple)",
    )(f)
    f = click.option("--viewer", "viewer_name", help="Run as this viewer")(f)
    f = click.option(
        "-c",
        "--config",
        "config_path",
        type=click.Path(exists=True),
        help="Config file path",
    )(f)
    return f


def _build_viewer(
    viewer_name: str | None, permissions: tuple, anonymous: bool
) -> ViewerContext | None:
    """Explicit viewer from options, or None for the ambient viewer.

    Raises:
        click.UsageError: For conflicting options.
    """
    if anonymous:
        if viewer_name or permissions:
            raise click.UsageError("--anonymous cannot be combined with --viewer/-p")
        return ANONYMOUS
    if viewer_name:
        return ViewerContext.for_user(viewer_name, permissions)
    if permissions:
        raise click.UsageError("-p/--permission requires --viewer")
    return None


def _load_admin(config_path: str | None) -> ReportAdmin:
    cfg = load_config(config_path=Path(config_path) if config_path else None)
    return ReportAdmin.from_config(cfg)


@main.command("list")
@viewer_options
@click.option("--all", "show_all", is_flag=True, help="Ignore visibility")
def list_reports(config_path, viewer_name, permissions, anonymous, show_all):
    """List installed reports.

    Without --all only reports visible to the viewer are shown.

    \b
    Examples:
      reportadmin list
      reportadmin list --viewer alice -p CMS_ACCESS_CMSMain
      reportadmin list --anonymous
    """
    viewer = _build_viewer(viewer_name, permissions, anonymous)
    try:
        admin = _load_admin(config_path)
        if show_all:
            descriptors = admin.registry.discover()
        else:
            descriptors = admin.list_visible_reports(viewer)
    except ReportAdminError as e:
        raise click.ClickException(str(e))

    if not descriptors:
        click.echo("No reports found")
        return

    for d in descriptors:
        if d.title != d.type_id:
            click.echo(f"{d.type_id}  {d.title}")
        else:
            click.echo(d.type_id)


@main.command()
@viewer_options
def menu(config_path, viewer_name, permissions, anonymous):
    """Show whether the reports section is offered to the viewer.

    Exits with status 1 when the section is hidden.
    """
    viewer = _build_viewer(viewer_name, permissions, anonymous)
    try:
        admin = _load_admin(config_path)
        shown = admin.can_view(viewer)
    except ReportAdminError as e:
        raise click.ClickException(str(e))

    if shown:
        click.echo("Reports menu: shown")
    else:
        click.echo("Reports menu: hidden")
        raise SystemExit(1)


@main.command()
@click.argument("identity")
@viewer_options
def schema(identity, config_path, viewer_name, permissions, anonymous):
    """Print the edit schema of one report as YAML.

    IDENTITY is a report type id (e.g. BrokenLinksReport) or a numeric
    content id that maps to "<content_prefix>_<content type>".
    """
    viewer = _build_viewer(viewer_name, permissions, anonymous)
    try:
        admin = _load_admin(config_path)
        fields = admin.get_edit_schema(identity, viewer)
    except ReportAdminError as e:
        raise click.ClickException(str(e))

    click.echo(yaml.dump(fields.to_list(), default_flow_style=False, sort_keys=False))


@main.group()
def config():
    """Manage reportadmin configuration."""
    pass


@config.command("init")
@click.option(
    "-d",
    "--directory",
    type=click.Path(),
    default=".",
    help="Directory to create config in",
)
def config_init(directory):
    """Create a new .reportadmin.yaml configuration file."""
    try:
        config_path = create_default_config(Path(directory))
        click.echo(f"Created: {config_path}")
    except ReportAdminError as e:
        raise click.ClickException(str(e))


@config.command("show")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True),
    help="Config file path",
)
def config_show(config_path):
    """Display current configuration.

    Shows merged configuration from file, environment, and defaults.
    """
    try:
        cfg = load_config(config_path=Path(config_path) if config_path else None)
        data = config_to_dict(cfg)
        click.echo(yaml.dump(data, default_flow_style=False, sort_keys=False))
    except ReportAdminError as e:
        raise click.ClickException(str(e))


@config.command("where")
@click.option(
    "-d",
    "--directory",
    type=click.Path(exists=True),
    help="Directory to search from",
)
def config_where(directory):
    """Show which config file would be used.

    Searches up the directory tree for .reportadmin.yaml.
    """
    start = Path(directory) if directory else Path.cwd()
    config_path = find_config_file(start)

    if config_path:
        click.echo(f"Config file: {config_path}")
    else:
        click.echo(f"No {CONFIG_FILENAME} found (searched from {start})")
