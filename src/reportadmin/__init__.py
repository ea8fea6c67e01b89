"""reportadmin - Discover, filter and dispatch pluggable admin reports."""

__version__ = "1.0.0"

from .admin import ReportAdmin
from .errors import (
    ForbiddenError,
    InvalidIdentityError,
    NotFoundError,
    ReportAdminError,
    UnknownReportTypeError,
)
from .identity import NumericID, SymbolicName, parse_identity
from .reports import Report, ReportRegistry
from .viewer import ANONYMOUS, ViewerContext

__all__ = [
    "ReportAdmin",
    "Report",
    "ReportRegistry",
    "ViewerContext",
    "ANONYMOUS",
    "NumericID",
    "SymbolicName",
    "parse_identity",
    "ReportAdminError",
    "InvalidIdentityError",
    "NotFoundError",
    "UnknownReportTypeError",
    "ForbiddenError",
    "__version__",
]
