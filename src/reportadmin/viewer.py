"""Viewer contexts used for report visibility checks."""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field


@dataclass(frozen=True)
class ViewerContext:
    """Authorization subject a visibility decision is made for.

    ``name`` is None for the anonymous viewer. Permissions are plain codes
    (e.g. "ADMIN", "CMS_ACCESS_CMSMain") granted to the viewer by the host.
    """

    name: str | None = None
    permissions: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def for_user(cls, name: str, permissions: Iterable[str] = ()) -> "ViewerContext":
        return cls(name=name, permissions=frozenset(permissions))

    @property
    def is_anonymous(self) -> bool:
        return self.name is None

    def has_permission(self, *codes: str) -> bool:
        """True if the viewer holds any of the given permission codes."""
        return any(code in self.permissions for code in codes)


# Explicit "no viewer". Never replaced by the ambient viewer.
ANONYMOUS = ViewerContext()


def anonymous_viewer() -> ViewerContext:
    """Default ambient viewer provider for hosts without a logged-in user."""
    return ANONYMOUS


def resolve_viewer(
    viewer: ViewerContext | None,
    current_viewer: Callable[[], ViewerContext] = anonymous_viewer,
) -> ViewerContext:
    """Return the viewer to check against.

    None means the caller did not supply a viewer, so the ambient one from
    ``current_viewer`` is used. Any ViewerContext, including ANONYMOUS, is
    returned unchanged.
    """
    if viewer is None:
        return current_viewer()
    return viewer
