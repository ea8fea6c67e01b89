"""Report plugin system for reportadmin.

Provides the API for defining, discovering, checking visibility of and
resolving reports.

Report discovery scans directories for .py files that define Report
subclasses. Built-in reports ship in ``builtins/``. Users can add custom
reports via the ``reports_dir`` config option, or register classes directly
with ``ReportRegistry.register``.
"""

from .base import Report
from .dispatch import Dispatcher
from .fields import Field, FieldSchema
from .registry import (
    ReportDescriptor,
    ReportRegistry,
    build_registry,
    filter_by_config,
    scan_directory,
)
from .visibility import any_visible, is_visible

__all__ = [
    "Report",
    "ReportDescriptor",
    "ReportRegistry",
    "Dispatcher",
    "Field",
    "FieldSchema",
    "build_registry",
    "filter_by_config",
    "scan_directory",
    "is_visible",
    "any_visible",
]
