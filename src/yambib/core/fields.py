"""Tagged union of every payload shape a bibliography field can hold."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import TYPE_CHECKING, Any

from .exceptions import WrongTypeError
from .primitives import (
    Date,
    FormattableString,
    FormattedString,
    LanguageTag,
    NumOrStr,
    Person,
    PersonRole,
    QualifiedUrl,
    Role,
    TimeRange,
    UnknownRole,
)


if TYPE_CHECKING:  # pragma: no cover - typing only
    from .entry import Entry


class FieldKind(Enum):
    """Discriminant of a `FieldValue`."""

    FORMATTABLE_STRING = "formattable string"
    FORMATTED_STRING = "formatted string"
    TEXT = "text"
    INTEGER = "integer"
    DATE = "date"
    PERSONS = "persons"
    PERSONS_WITH_ROLES = "persons with roles"
    INTEGER_OR_TEXT = "integer or text"
    RANGE = "integer range"
    DURATION = "duration"
    TIME_RANGE = "time range"
    URL = "qualified url"
    LANGUAGE = "language"
    ENTRIES = "entries"


_SEQUENCE_KINDS = frozenset({FieldKind.PERSONS, FieldKind.PERSONS_WITH_ROLES, FieldKind.ENTRIES})

_PAYLOAD_TYPES: dict[FieldKind, type | tuple[type, ...]] = {
    FieldKind.FORMATTABLE_STRING: FormattableString,
    FieldKind.FORMATTED_STRING: FormattedString,
    FieldKind.TEXT: str,
    FieldKind.INTEGER: int,
    FieldKind.DATE: Date,
    FieldKind.INTEGER_OR_TEXT: (int, str),
    FieldKind.RANGE: range,
    FieldKind.DURATION: timedelta,
    FieldKind.TIME_RANGE: TimeRange,
    FieldKind.URL: QualifiedUrl,
    FieldKind.LANGUAGE: LanguageTag,
}


def _is_person_with_role(item: Any) -> bool:
    return (
        isinstance(item, tuple)
        and len(item) == 2
        and isinstance(item[0], list)
        and all(isinstance(person, Person) for person in item[0])
        and isinstance(item[1], (PersonRole, UnknownRole))
    )


def _payload_matches(kind: FieldKind, value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if kind in _PAYLOAD_TYPES:
        return isinstance(value, _PAYLOAD_TYPES[kind])
    if kind is FieldKind.PERSONS:
        return all(isinstance(item, Person) for item in value)
    if kind is FieldKind.PERSONS_WITH_ROLES:
        return all(_is_person_with_role(item) for item in value)
    from .entry import Entry

    return all(isinstance(item, Entry) for item in value)


@dataclass(frozen=True, slots=True)
class FieldValue:
    """A field payload together with the shape it was stored as.

    The per-shape constructors trust their argument. `build`, which backs the
    generated entry setters, rejects payloads of the wrong Python type. Reading
    a value back with `expect` succeeds only for the shape it was built with;
    there is no coercion between shapes, not even between integers and text.
    """

    kind: FieldKind
    value: Any

    @classmethod
    def formattable_string(cls, value: FormattableString) -> FieldValue:
        return cls(FieldKind.FORMATTABLE_STRING, value)

    @classmethod
    def formatted_string(cls, value: FormattedString) -> FieldValue:
        return cls(FieldKind.FORMATTED_STRING, value)

    @classmethod
    def text(cls, value: str) -> FieldValue:
        return cls(FieldKind.TEXT, value)

    @classmethod
    def integer(cls, value: int) -> FieldValue:
        return cls(FieldKind.INTEGER, value)

    @classmethod
    def date(cls, value: Date) -> FieldValue:
        return cls(FieldKind.DATE, value)

    @classmethod
    def persons(cls, value: Iterable[Person]) -> FieldValue:
        return cls(FieldKind.PERSONS, list(value))

    @classmethod
    def persons_with_roles(cls, value: Iterable[tuple[list[Person], Role]]) -> FieldValue:
        return cls(FieldKind.PERSONS_WITH_ROLES, list(value))

    @classmethod
    def integer_or_text(cls, value: NumOrStr) -> FieldValue:
        return cls(FieldKind.INTEGER_OR_TEXT, value)

    @classmethod
    def range(cls, value: range) -> FieldValue:
        return cls(FieldKind.RANGE, value)

    @classmethod
    def duration(cls, value: timedelta) -> FieldValue:
        return cls(FieldKind.DURATION, value)

    @classmethod
    def time_range(cls, value: TimeRange) -> FieldValue:
        return cls(FieldKind.TIME_RANGE, value)

    @classmethod
    def url(cls, value: QualifiedUrl) -> FieldValue:
        return cls(FieldKind.URL, value)

    @classmethod
    def language(cls, value: LanguageTag) -> FieldValue:
        return cls(FieldKind.LANGUAGE, value)

    @classmethod
    def entries(cls, value: Iterable[Entry]) -> FieldValue:
        return cls(FieldKind.ENTRIES, list(value))

    @classmethod
    def build(cls, kind: FieldKind, value: Any) -> FieldValue:
        """Dispatch to the constructor matching ``kind`` after checking the payload type.

        Raises `TypeError` when ``value`` is not of the shape ``kind`` stores.
        """
        if kind in _SEQUENCE_KINDS:
            if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
                raise TypeError(f"cannot store {type(value).__name__} as {kind.value}")
            value = list(value)
        if not _payload_matches(kind, value):
            raise TypeError(f"cannot store {type(value).__name__} as {kind.value}")
        constructor = getattr(cls, kind.name.lower())
        return constructor(value)

    def expect(self, kind: FieldKind) -> Any:
        """Return the payload if it was stored as ``kind``."""
        if self.kind is not kind:
            raise WrongTypeError(kind.value, self.kind.value)
        if kind in _SEQUENCE_KINDS:
            return list(self.value)
        return self.value


__all__ = ["FieldKind", "FieldValue"]
