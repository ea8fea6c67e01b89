"""Field schema returned by reports for their edit form."""

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

IDENTITY_FIELD = "ID"

FIELD_KINDS = {"text", "textarea", "number", "checkbox", "date", "dropdown", "hidden"}


@dataclass
class Field:
    """One configurable field of a report."""

    name: str
    title: str = ""
    kind: str = "text"
    value: Any = None
    options: dict[str, str] | None = None  # dropdown only

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Field name cannot be empty")
        if self.kind not in FIELD_KINDS:
            raise ValueError(
                f"Invalid field kind {self.kind!r}. "
                f"Must be one of: {', '.join(sorted(FIELD_KINDS))}"
            )
        if not self.title:
            self.title = self.name

    @property
    def hidden(self) -> bool:
        return self.kind == "hidden"

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "title": self.title,
            "kind": self.kind,
            "value": self.value,
        }
        if self.options is not None:
            data["options"] = dict(self.options)
        return data


def hidden_field(name: str, value: Any = None) -> Field:
    return Field(name=name, kind="hidden", value=value)


class FieldSchema:
    """Ordered collection of fields, addressable by name."""

    def __init__(self, fields: list[Field] | None = None):
        self._fields: list[Field] = []
        for f in fields or []:
            self.push(f)

    def push(self, f: Field) -> None:
        """Append a field. Names must be unique within a schema."""
        if f.name in self:
            raise ValueError(f"Duplicate field name: {f.name!r}")
        self._fields.append(f)

    def remove(self, name: str) -> Field | None:
        for i, f in enumerate(self._fields):
            if f.name == name:
                return self._fields.pop(i)
        return None

    def get(self, name: str) -> Field | None:
        return next((f for f in self._fields if f.name == name), None)

    @property
    def identity(self) -> str | None:
        """Value of the hidden identity field, if present."""
        f = self.get(IDENTITY_FIELD)
        return f.value if f is not None and f.hidden else None

    def names(self) -> list[str]:
        return [f.name for f in self._fields]

    def to_list(self) -> list[dict[str, Any]]:
        return [f.to_dict() for f in self._fields]

    def __contains__(self, name: object) -> bool:
        return any(f.name == name for f in self._fields)

    def __iter__(self) -> Iterator[Field]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"FieldSchema({self.names()!r})"
