"""Exceptions raised by reportadmin."""


class ReportAdminError(Exception):
    """Base exception for reportadmin errors."""

    pass


class InvalidIdentityError(ReportAdminError):
    """Identity is neither a numeric id nor a valid report name."""

    pass


class NotFoundError(ReportAdminError):
    """Numeric identity does not match any content entity."""

    pass


class UnknownReportTypeError(ReportAdminError):
    """Type id has no matching instantiable report type."""

    pass


class ForbiddenError(ReportAdminError):
    """Resolved report is not visible to the viewer."""

    pass
