"""Per-viewer report visibility."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from ..viewer import ViewerContext, anonymous_viewer, resolve_viewer
from .base import Report
from .registry import ReportDescriptor

logger = logging.getLogger(__name__)


def is_visible(
    target: ReportDescriptor | Report,
    viewer: ViewerContext | None = None,
    current_viewer: Callable[[], ViewerContext] = anonymous_viewer,
) -> bool:
    """Ask a report whether ``viewer`` may see it.

    Descriptors are instantiated transiently for the check. When ``viewer``
    is None the ambient viewer from ``current_viewer`` is used; an explicit
    ANONYMOUS viewer is checked as-is.

    Args:
        target: Report descriptor or an already resolved report instance.
        viewer: Viewer to check, or None for the ambient viewer.
        current_viewer: Provider of the ambient viewer.

    Returns:
        The report's own can_view() decision.
    """
    viewer = resolve_viewer(viewer, current_viewer)
    report = target.instantiate() if isinstance(target, ReportDescriptor) else target
    visible = bool(report.can_view(viewer))
    logger.debug(
        "Report %s %s for viewer %r",
        report.type_id,
        "visible" if visible else "hidden",
        viewer.name,
    )
    return visible


def visible_descriptors(
    descriptors: Iterable[ReportDescriptor],
    viewer: ViewerContext | None = None,
    current_viewer: Callable[[], ViewerContext] = anonymous_viewer,
) -> list[ReportDescriptor]:
    """Keep the descriptors visible to ``viewer``, preserving order."""
    viewer = resolve_viewer(viewer, current_viewer)
    return [d for d in descriptors if is_visible(d, viewer)]


def any_visible(
    descriptors: Iterable[ReportDescriptor],
    viewer: ViewerContext | None = None,
    current_viewer: Callable[[], ViewerContext] = anonymous_viewer,
) -> bool:
    """True if at least one descriptor is visible to ``viewer``."""
    viewer = resolve_viewer(viewer, current_viewer)
    return any(is_visible(d, viewer) for d in descriptors)
