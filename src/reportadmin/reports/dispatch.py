"""Resolution of report identities to report instances and field schemas."""

from __future__ import annotations

import logging

from ..content import ContentStore, InMemoryContentStore
from ..errors import InvalidIdentityError, NotFoundError
from ..identity import Identifier, NumericID, SymbolicName, parse_identity
from .base import Report
from .fields import IDENTITY_FIELD, FieldSchema, hidden_field
from .registry import ReportRegistry

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "Report"


class Dispatcher:
    """Turns external identities into report instances.

    Numeric identities refer to content entities: the report type id is
    ``"<prefix>_<entity type name>"``. Symbolic identities are type ids.
    """

    def __init__(
        self,
        registry: ReportRegistry,
        content_store: ContentStore | None = None,
        prefix: str = DEFAULT_PREFIX,
    ):
        self.registry = registry
        self.content_store = (
            content_store if content_store is not None else InMemoryContentStore()
        )
        self.prefix = prefix

    def type_id_for(self, identity: Identifier | int | str) -> str:
        """Derive the report type id an identity refers to.

        Raises:
            InvalidIdentityError: If identity cannot be parsed.
            NotFoundError: If a numeric identity has no content entity.
        """
        identity = parse_identity(identity)
        if isinstance(identity, NumericID):
            type_name = self.content_store.find_by_id(identity.value)
            if type_name is None:
                raise NotFoundError(f"No content entity with id {identity.value}")
            return f"{self.prefix}_{type_name}"
        return identity.value

    def resolve(self, identity: Identifier | int | str) -> Report:
        """Create a new report instance for ``identity``.

        Raises:
            InvalidIdentityError: If identity cannot be parsed.
            NotFoundError: If a numeric identity has no content entity.
            UnknownReportTypeError: If the type id is not a known,
                instantiable report type.
        """
        identity = parse_identity(identity)
        type_id = self.type_id_for(identity)
        report = self.registry.instantiate(type_id, identity)
        logger.debug("Resolved %r to %s", str(identity), type_id)
        return report

    def build_schema(self, report: Report) -> FieldSchema:
        """Return the report's fields plus the hidden identity field.

        An identity field declared by the report itself is replaced, so
        the schema always carries exactly one.
        """
        schema = report.get_field_schema()
        if schema.remove(IDENTITY_FIELD) is not None:
            logger.warning(
                "Report %s declares its own %r field; replacing it",
                report.type_id,
                IDENTITY_FIELD,
            )
        schema.push(hidden_field(IDENTITY_FIELD, str(report.identity)))
        return schema

    def resolvable_identities(self) -> frozenset[Identifier]:
        """One identity per currently discoverable report type."""
        return frozenset(SymbolicName(d.type_id) for d in self.registry.discover())

    def is_resolvable(self, identity: Identifier | int | str) -> bool:
        """True if identity maps to a current report type.

        Unparseable identities are simply not resolvable.
        """
        try:
            identity = parse_identity(identity)
        except InvalidIdentityError:
            return False
        return identity in self.resolvable_identities()
