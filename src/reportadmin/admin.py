"""Reports section of an admin interface.

ReportAdmin ties the registry, visibility checks and dispatcher together
into the operations a host UI needs: list the reports a viewer may see,
decide whether to show the reports menu item at all, and produce the edit
schema for one report.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from .config import ReportAdminConfig
from .content import ContentStore, InMemoryContentStore
from .errors import ForbiddenError
from .identity import Identifier, parse_identity
from .reports.base import Report
from .reports.dispatch import DEFAULT_PREFIX, Dispatcher
from .reports.fields import FieldSchema
from .reports.registry import ReportDescriptor, ReportRegistry, build_registry
from .reports.visibility import any_visible, is_visible, visible_descriptors
from .viewer import ViewerContext, anonymous_viewer, resolve_viewer

logger = logging.getLogger(__name__)


class ReportAdmin:
    """Caller-facing report operations.

    Args:
        registry: Catalog of report types.
        content_store: Lookup for numeric identities.
        prefix: Namespace prefix for report types derived from content.
        required_permission: Permission needed to see the section at all,
            or None to rely on report visibility only.
        current_viewer: Provider of the ambient viewer, used whenever an
            operation is called without a viewer.
    """

    def __init__(
        self,
        registry: ReportRegistry,
        content_store: ContentStore | None = None,
        prefix: str = DEFAULT_PREFIX,
        required_permission: str | None = None,
        current_viewer: Callable[[], ViewerContext] | None = None,
    ):
        self.registry = registry
        self.dispatcher = Dispatcher(registry, content_store, prefix)
        self.required_permission = required_permission
        self.current_viewer = current_viewer or anonymous_viewer

    @classmethod
    def from_config(
        cls,
        config: ReportAdminConfig,
        content_store: ContentStore | None = None,
    ) -> ReportAdmin:
        """Build from configuration: plugins, content seed and ambient viewer."""
        if content_store is None:
            content_store = InMemoryContentStore(config.content)
        ambient = config.viewer.to_context()
        return cls(
            build_registry(config),
            content_store=content_store,
            prefix=config.content_prefix,
            required_permission=config.required_permission,
            current_viewer=lambda: ambient,
        )

    def _viewer(self, viewer: ViewerContext | None) -> ViewerContext:
        return resolve_viewer(viewer, self.current_viewer)

    def report_type_ids(self) -> list[str]:
        """Type ids of all installed reports, without visibility filtering."""
        return self.registry.type_ids()

    def reports(self) -> list[Report]:
        """One fresh instance per installed report type."""
        return [d.instantiate() for d in self.registry.discover()]

    def list_visible_reports(
        self, viewer: ViewerContext | None = None
    ) -> list[ReportDescriptor]:
        """Descriptors of the reports ``viewer`` may see, ordered by type id."""
        return visible_descriptors(self.registry.discover(), self._viewer(viewer))

    def has_visible_reports(self, viewer: ViewerContext | None = None) -> bool:
        """True if ``viewer`` may see at least one report."""
        return any_visible(self.registry.discover(), self._viewer(viewer))

    def can_view(self, viewer: ViewerContext | None = None) -> bool:
        """Whether to show the reports section to ``viewer``.

        Requires the section permission or ADMIN (when a permission is
        configured) and at least one visible report.
        """
        viewer = self._viewer(viewer)
        if self.required_permission is not None and not viewer.has_permission(
            self.required_permission, "ADMIN"
        ):
            return False
        return self.has_visible_reports(viewer)

    def resolve(self, identity: Identifier | int | str) -> Report:
        """Resolve an identity without any visibility check."""
        return self.dispatcher.resolve(identity)

    def get_edit_schema(
        self,
        identity: Identifier | int | str,
        viewer: ViewerContext | None = None,
    ) -> FieldSchema:
        """Return the edit schema of the report ``identity`` refers to.

        Raises:
            InvalidIdentityError: If identity cannot be parsed.
            NotFoundError: If a numeric identity has no content entity.
            UnknownReportTypeError: If no such report type is installed.
            ForbiddenError: If the report is not visible to ``viewer``.
        """
        viewer = self._viewer(viewer)
        report = self.dispatcher.resolve(identity)
        if not is_visible(report, viewer):
            logger.info(
                "Denied edit schema of %s to viewer %r", report.type_id, viewer.name
            )
            raise ForbiddenError(f"Report {report.type_id} is not visible to viewer")
        return self.dispatcher.build_schema(report)

    def current_edit_schema(
        self,
        requested: Identifier | int | str | None = None,
        last_identity: Identifier | int | str | None = None,
        viewer: ViewerContext | None = None,
    ) -> FieldSchema | None:
        """Edit schema for the report currently shown in the host UI.

        Uses ``requested`` if given, otherwise ``last_identity`` (the host
        keeps track of the last viewed report). Returns None when neither
        is set or the identity does not map to a current report type, so
        stale or forged identities never reach the dispatcher.
        """
        identity = requested if requested is not None else last_identity
        if identity is None or not self.dispatcher.is_resolvable(identity):
            return None
        return self.get_edit_schema(parse_identity(identity), viewer)
