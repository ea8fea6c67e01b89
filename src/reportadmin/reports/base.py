"""Base class for reportadmin report plugins."""

from abc import ABC, abstractmethod

from ..identity import NAME_RE, Identifier, SymbolicName
from ..viewer import ViewerContext
from .fields import FieldSchema


class Report(ABC):
    """Abstract base class for reports.

    Every report type is identified by ``type_id``, which defaults to the
    class name. Subclasses must implement:
        can_view(viewer): Per-viewer visibility decision.
        get_field_schema(): Fields used to configure the report.

    Optionally define class attributes:
        title: Human readable name (defaults to type_id).
        description: One-line summary shown in listings.

    Construction must stay cheap and free of side effects: the registry
    instantiates report types transiently to ask them about visibility.
    Abstract intermediate classes are allowed and are never discovered.
    """

    type_id: str
    title: str = ""
    description: str = ""

    def __init_subclass__(cls, **kwargs: object) -> None:
        """Assign and validate the type id at definition time."""
        super().__init_subclass__(**kwargs)

        if "type_id" not in cls.__dict__:
            cls.type_id = cls.__name__
        if not isinstance(cls.type_id, str) or not NAME_RE.match(cls.type_id):
            raise TypeError(
                f"Report subclass {cls.__name__} has invalid type_id "
                f"{cls.type_id!r}: must match [A-Za-z_][A-Za-z0-9_]*"
            )

    def __init__(self, identity: Identifier | None = None):
        self.identity: Identifier = (
            identity if identity is not None else SymbolicName(self.type_id)
        )

    @abstractmethod
    def can_view(self, viewer: ViewerContext) -> bool:
        """Return True if ``viewer`` may see this report."""
        ...

    @abstractmethod
    def get_field_schema(self) -> FieldSchema:
        """Return the fields used to configure this report.

        Must return a fresh FieldSchema on every call; the dispatcher
        appends the identity field to it.
        """
        ...

    def get_title(self) -> str:
        return self.title or self.type_id

    def __repr__(self) -> str:
        return f"<{type(self).__name__} identity={str(self.identity)!r}>"
