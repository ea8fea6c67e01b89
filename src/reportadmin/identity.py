"""Report identifiers.

An identifier selects one report. It is either a numeric id referring to a
content entity (the report type is derived from the entity's type name), or
a symbolic name that is the report type id itself.
"""

import re
from dataclasses import dataclass

from .errors import InvalidIdentityError

# Report type ids are class names
NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class NumericID:
    """Reference to a content entity by its numeric id."""

    value: int

    def __post_init__(self) -> None:
        # bool is an int subclass; True is not a content id
        if not isinstance(self.value, int) or isinstance(self.value, bool):
            raise InvalidIdentityError(
                f"Numeric identity must be an int, got {type(self.value).__name__}"
            )
        if self.value < 0:
            raise InvalidIdentityError(
                f"Numeric identity must be >= 0, got {self.value}"
            )

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class SymbolicName:
    """Direct reference to a report type id."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not self.value:
            raise InvalidIdentityError("Report name cannot be empty")
        if not NAME_RE.match(self.value):
            raise InvalidIdentityError(f"Invalid report name: {self.value!r}")

    def __str__(self) -> str:
        return self.value


Identifier = NumericID | SymbolicName


def parse_identity(raw: object) -> Identifier:
    """Turn a raw identity into an Identifier.

    Accepts Identifier instances unchanged, non-negative ints, digit
    strings (e.g. ``"42"`` from a request parameter) and report names.

    Args:
        raw: Value supplied by the caller.

    Returns:
        NumericID or SymbolicName.

    Raises:
        InvalidIdentityError: If the value is neither numeric nor a valid name.
    """
    # Both variants validate themselves on construction
    if isinstance(raw, (NumericID, SymbolicName)):
        return raw

    if isinstance(raw, bool):
        raise InvalidIdentityError(f"Invalid report identity: {raw!r}")

    if isinstance(raw, int):
        return NumericID(raw)

    if isinstance(raw, str):
        text = raw.strip()
        if text.isascii() and text.isdigit():
            try:
                value = int(text)
            except ValueError as e:
                # Digit strings beyond the interpreter's conversion limit
                raise InvalidIdentityError(
                    f"Numeric identity too long ({len(text)} digits)"
                ) from e
            return NumericID(value)
        if NAME_RE.match(text):
            return SymbolicName(text)
        if not text:
            raise InvalidIdentityError("Report identity cannot be empty")
        raise InvalidIdentityError(f"Invalid report identity: {raw!r}")

    raise InvalidIdentityError(
        f"Report identity must be int or str, got {type(raw).__name__}"
    )
