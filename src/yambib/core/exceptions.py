"""Exception hierarchy for bibliography ingestion and entry access.

Ingestion failures come in two tiers. Structural errors describe a document
whose overall shape is wrong (no top-level mapping, an entry body that is not
a mapping, unreadable keys). Field errors describe a single field whose content
cannot be coerced; they always carry the entry key and field name, and chain
the originating semantic error through ``__cause__``.

Accessor errors are raised by typed `Entry` getters after ingestion and are
meant to be handled like a missing optional value.
"""

from __future__ import annotations

from enum import Enum


class ValueParseError(ValueError):
    """Base class for errors raised by the primitive value parsers."""


class DateError(ValueParseError):
    """Raised when a string does not follow the date grammar."""


class DurationError(ValueParseError):
    """Raised when a string does not follow the duration grammar."""


class PersonError(ValueParseError):
    """Raised when a person shorthand cannot be split into name parts."""


class UrlParseError(ValueParseError):
    """Raised when a string cannot be read as an absolute URL."""


class FormattableStringProblem(Enum):
    """Ways in which a formattable string mapping can be malformed."""

    NO_VALUE = "no value was found"
    VALUE_IS_NO_STRING = "value cannot be parsed as a string"
    VERBATIM_NOT_BOOL = "the `verbatim` property must be boolean"


class FormattableStringError(ValueParseError):
    """Raised when a formattable string mapping is structurally malformed."""

    def __init__(self, problem: FormattableStringProblem) -> None:
        super().__init__(problem.value)
        self.problem = problem


class BibliographyError(ValueError):
    """Base exception for every ingestion failure."""


class DocumentStructureError(BibliographyError):
    """The document as a whole does not have the expected shape."""


class ScanError(DocumentStructureError):
    """Raised when the text cannot be read as YAML."""

    def __init__(self, message: str = "string could not be read as yaml") -> None:
        super().__init__(message)


class StructureError(DocumentStructureError):
    """Raised when the document has no top-level mapping."""

    def __init__(self) -> None:
        super().__init__("file has no top-level hash map")


class KeyUnparsableError(DocumentStructureError):
    """Raised when an entry key is not a string."""

    def __init__(self) -> None:
        super().__init__("an entry key cannot be parsed as a string")


class EntryStructureError(DocumentStructureError):
    """Raised when an entry body is not a mapping."""

    def __init__(self, key: str) -> None:
        super().__init__(f"the entry with key `{key}` does not contain a hash map")
        self.key = key


class FieldNameUnparsableError(DocumentStructureError):
    """Raised when a field name inside an entry is not a string."""

    def __init__(self, key: str) -> None:
        super().__init__(f"a field name in the entry with key `{key}` cannot be read as a string")
        self.key = key


class DataTypeProblem(Enum):
    """Underlying reason attached to a `DataTypeError`."""

    FORMATTABLE_STRING = "formattable string structurally malformed"
    DATE = "date string structurally malformed"
    PERSON = "person string structurally malformed"
    DURATION = "duration string structurally malformed"
    URL = "invalid url"
    RANGE = "string is not a range"
    MISSING_REQUIRED_FIELD = "missing required field in details hash map"
    MISMATCHED_PRIMITIVE = "mismatched primitive type"
    UNKNOWN_ENTRY_TYPE = "unknown entry type"
    PARENT_CYCLE = "parent entry contains itself"


class FieldContentError(BibliographyError):
    """A single field of an entry holds content that cannot be coerced."""

    def __init__(self, message: str, *, key: str, field: str) -> None:
        super().__init__(message)
        self.key = key
        self.field = field


class DataTypeMismatchError(FieldContentError):
    """The raw value has a different shape than the field accepts."""

    def __init__(self, key: str, field: str, expected: str) -> None:
        super().__init__(
            f"wrong data type for field `{field}` in entry `{key}` (expected {expected})",
            key=key,
            field=field,
        )
        self.expected = expected


class DataTypeError(FieldContentError):
    """The raw value has the right shape but its content is invalid."""

    def __init__(self, key: str, field: str, reason: DataTypeProblem) -> None:
        super().__init__(
            f"error when parsing data for field `{field}` in entry `{key}` ({reason.value})",
            key=key,
            field=field,
        )
        self.reason = reason


class EntryAccessError(LookupError):
    """Base class for typed accessor failures on an `Entry`."""


class NoSuchFieldError(EntryAccessError):
    """The queried field is not present."""

    def __init__(self, field: str) -> None:
        super().__init__(f"the queried field `{field}` is not present")
        self.field = field


class WrongTypeError(EntryAccessError):
    """The queried field holds a different shape than requested."""

    def __init__(self, expected: object, actual: object) -> None:
        super().__init__(
            f"datatype mismatch in the queried field (expected {expected}, got {actual})"
        )
        self.expected = expected
        self.actual = actual


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


def exception_hint(exc: BaseException) -> str | None:
    """Return the most specific message available for an exception chain."""
    messages = exception_messages(exc)
    return messages[-1] if messages else None


__all__ = [
    "BibliographyError",
    "DataTypeError",
    "DataTypeMismatchError",
    "DataTypeProblem",
    "DateError",
    "DocumentStructureError",
    "DurationError",
    "EntryAccessError",
    "EntryStructureError",
    "FieldContentError",
    "FieldNameUnparsableError",
    "FormattableStringError",
    "FormattableStringProblem",
    "KeyUnparsableError",
    "NoSuchFieldError",
    "PersonError",
    "ScanError",
    "StructureError",
    "UrlParseError",
    "ValueParseError",
    "WrongTypeError",
    "exception_hint",
    "exception_messages",
]
