"""Report type registry and plugin discovery.

The registry is an explicit mapping from type id to report class. It is
filled by ``register()`` (usable as a class decorator) and by scanning
plugin directories for .py files that define Report subclasses. Built-in
reports ship in ``reports/builtins/``. Users can add custom reports via the
``reports_dir`` config option.
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from ..errors import UnknownReportTypeError
from ..identity import Identifier
from .base import Report

if TYPE_CHECKING:
    from ..config import ReportAdminConfig

logger = logging.getLogger(__name__)

# Path to the built-in reports directory (ships with reportadmin)
_BUILTINS_DIR = Path(__file__).parent / "builtins"


@dataclass(frozen=True)
class ReportDescriptor:
    """Identifies one discoverable report type without instantiating it."""

    type_id: str
    report_class: type[Report]
    instantiable: bool = True

    @property
    def title(self) -> str:
        return self.report_class.title or self.type_id

    @property
    def description(self) -> str:
        return self.report_class.description

    def instantiate(self, identity: Identifier | None = None) -> Report:
        return self.report_class(identity)


def is_instantiable(cls: type) -> bool:
    """True for concrete Report subclasses other than the base itself."""
    return (
        inspect.isclass(cls)
        and issubclass(cls, Report)
        and cls is not Report
        and not inspect.isabstract(cls)
    )


class ReportRegistry:
    """Catalog of report types known to the host."""

    def __init__(self, classes: list[type[Report]] | None = None):
        self._catalog: dict[str, type[Report]] = {}
        self._discovered: tuple[ReportDescriptor, ...] | None = None
        for cls in classes or []:
            self.register(cls)

    def register(self, cls: type[Report]) -> type[Report]:
        """Add a report class to the catalog.

        A class registered under an existing type id replaces the previous
        one. Returns the class so this can be used as a decorator.

        Raises:
            TypeError: If cls is not a Report subclass.
        """
        if not (inspect.isclass(cls) and issubclass(cls, Report)):
            raise TypeError(f"{cls!r} is not a Report subclass")

        existing = self._catalog.get(cls.type_id)
        if existing is not None and existing is not cls:
            logger.warning(
                "Report %r from %s overrides %s",
                cls.type_id,
                cls.__module__,
                existing.__module__,
            )
        self._catalog[cls.type_id] = cls
        self.invalidate()
        return cls

    def unregister(self, type_id: str) -> type[Report] | None:
        cls = self._catalog.pop(type_id, None)
        if cls is not None:
            self.invalidate()
        return cls

    def invalidate(self) -> None:
        """Drop the cached discovery result."""
        self._discovered = None

    def catalog(self) -> dict[str, type[Report]]:
        """All registered classes, abstract ones included."""
        return dict(self._catalog)

    def describe(self) -> list[ReportDescriptor]:
        """Descriptors for every registered subclass, sorted by type id.

        Abstract classes are included with ``instantiable=False``. The base
        Report class is left out.
        """
        return sorted(
            (
                ReportDescriptor(
                    type_id=type_id,
                    report_class=cls,
                    instantiable=is_instantiable(cls),
                )
                for type_id, cls in self._catalog.items()
                if cls is not Report
            ),
            key=lambda d: d.type_id,
        )

    def discover(self) -> tuple[ReportDescriptor, ...]:
        """Return descriptors for all instantiable report types.

        The base Report class and abstract subclasses are excluded.
        Descriptors are ordered by type id.
        """
        if self._discovered is None:
            descriptors = [d for d in self.describe() if d.instantiable]
            self._discovered = tuple(descriptors)
            logger.debug(
                "Discovered %d report type(s): %s",
                len(descriptors),
                ", ".join(d.type_id for d in descriptors),
            )
        return self._discovered

    def type_ids(self) -> list[str]:
        return [d.type_id for d in self.discover()]

    def get(self, type_id: str) -> ReportDescriptor:
        """Look up the descriptor of an instantiable report type.

        Raises:
            UnknownReportTypeError: If no such report type is discoverable.
        """
        for d in self.discover():
            if d.type_id == type_id:
                return d
        raise UnknownReportTypeError(f"Unknown report type: {type_id}")

    def instantiate(self, type_id: str, identity: Identifier | None = None) -> Report:
        return self.get(type_id).instantiate(identity)

    def __contains__(self, type_id: object) -> bool:
        return any(d.type_id == type_id for d in self.discover())

    def __len__(self) -> int:
        return len(self.discover())


def build_registry(config: ReportAdminConfig | None = None) -> ReportRegistry:
    """Build a registry from built-in and user report plugins.

    Loads built-in reports from ``reports/builtins/``, then scans the
    user's ``reports_dir`` (if configured). User reports override builtins
    on type id collision. Finally drops types disabled by config's
    ``reports:`` section.

    Args:
        config: Optional configuration with reports overrides.

    Returns:
        Populated ReportRegistry.
    """
    registry = ReportRegistry(scan_directory(_BUILTINS_DIR))

    if config is not None and getattr(config, "reports_dir", None) is not None:
        user_dir = Path(config.reports_dir)
        if user_dir.is_dir():
            for cls in scan_directory(user_dir):
                registry.register(cls)
        else:
            logger.warning("reports_dir does not exist: %s", user_dir)

    if config is not None:
        filter_by_config(registry, config)

    return registry


def filter_by_config(registry: ReportRegistry, config: ReportAdminConfig) -> None:
    """Remove report types disabled in the ``reports:`` config section.

    If ``config.reports`` is None (absent from YAML), all reports stay.
    Type ids not present in the section stay enabled.
    """
    report_config = getattr(config, "reports", None)
    if report_config is None:
        return

    for type_id, enabled in report_config.items():
        if not enabled and registry.unregister(type_id) is not None:
            logger.debug("Report %r disabled by config", type_id)


def scan_directory(directory: Path) -> list[type[Report]]:
    """Scan a directory for .py files containing Report subclasses.

    Each .py file is imported as a module and inspected for Report
    subclasses defined in it (classes imported from elsewhere are ignored).
    Abstract classes are returned too; the registry decides which types
    are instantiable. Files starting with ``_`` are skipped.

    Args:
        directory: Path to directory to scan.

    Returns:
        Report classes found, in file order, then by class name.
    """
    classes: list[type[Report]] = []
    if not directory.is_dir():
        return classes

    for py_file in sorted(directory.glob("*.py")):
        if py_file.name.startswith("_"):
            continue

        try:
            module = _import_file(py_file)
        except Exception:
            logger.warning("Failed to import report file: %s", py_file, exc_info=True)
            continue

        for _name, obj in inspect.getmembers(module, inspect.isclass):
            if (
                issubclass(obj, Report)
                and obj is not Report
                and obj.__module__ == module.__name__
            ):
                classes.append(obj)

    return classes


def _import_file(path: Path):
    """Import a Python file as a module.

    Uses importlib.util to load a .py file without requiring it to be
    on sys.path or part of a package.
    """
    module_name = f"reportadmin_report_{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot create module spec for {path}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module
