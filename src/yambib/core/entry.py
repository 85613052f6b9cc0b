"""Bibliography entries and their typed accessors.

Architecture
: An `Entry` is a key, an `EntryType`, and a mapping from field names to
  `FieldValue` payloads. Raw access goes through `get` and `set`.
: Typed accessors are generated from `FIELD_ACCESSORS`. Each row names the
  accessor suffix, the field name used in documents, the payload shape, and
  an optional fallback used when the field is absent. Recognising a new
  field means adding one row.
: `check_with_spec` walks the `parent` tree to decide whether an entry
  matches an `EntryTypeSpec`.

Usage Example

```pycon
>>> from yambib.core.entry import Entry
>>> from yambib.core.entry_types import EntryType
>>> entry = Entry("smith2020", EntryType.BOOK)
>>> entry.set_page_range(range(10, 50))
>>> entry.get_page_total()
40
>>> entry.get_authors()
[]
```
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

from .entry_types import EntryType, EntryTypeSpec
from .exceptions import EntryAccessError, NoSuchFieldError
from .fields import FieldKind, FieldValue


@dataclass(frozen=True, slots=True)
class FieldAccessor:
    """One row of the accessor table."""

    name: str
    field: str
    kind: FieldKind
    fallback: Callable[[Entry], FieldValue] | None = None


def _no_authors(entry: Entry) -> FieldValue:
    return FieldValue.persons([])


def _page_total_from_range(entry: Entry) -> FieldValue:
    pages = entry.get_page_range()
    return FieldValue.integer(pages.stop - pages.start)


def _runtime_from_time_range(entry: Entry) -> FieldValue:
    return FieldValue.duration(entry.get_time_range().length)


FIELD_ACCESSORS: tuple[FieldAccessor, ...] = (
    FieldAccessor("parents", "parent", FieldKind.ENTRIES),
    FieldAccessor("title", "title", FieldKind.FORMATTABLE_STRING),
    FieldAccessor("authors", "author", FieldKind.PERSONS, _no_authors),
    FieldAccessor("editors", "editor", FieldKind.PERSONS),
    FieldAccessor("affiliated_persons", "affiliated", FieldKind.PERSONS_WITH_ROLES),
    FieldAccessor("organization", "organization", FieldKind.TEXT),
    FieldAccessor("date", "date", FieldKind.DATE),
    FieldAccessor("issue", "issue", FieldKind.INTEGER_OR_TEXT),
    FieldAccessor("edition", "edition", FieldKind.INTEGER_OR_TEXT),
    FieldAccessor("version", "version", FieldKind.TEXT),
    FieldAccessor("volume", "volume", FieldKind.RANGE),
    FieldAccessor("volume_total", "volume-total", FieldKind.INTEGER),
    FieldAccessor("page_range", "page-range", FieldKind.RANGE),
    FieldAccessor("page_total", "page-total", FieldKind.INTEGER, _page_total_from_range),
    FieldAccessor("time_range", "time-range", FieldKind.TIME_RANGE),
    FieldAccessor("runtime", "runtime", FieldKind.DURATION, _runtime_from_time_range),
    FieldAccessor("issn", "issn", FieldKind.TEXT),
    FieldAccessor("isbn", "isbn", FieldKind.TEXT),
    FieldAccessor("doi", "doi", FieldKind.TEXT),
    FieldAccessor("serial_number", "serial-number", FieldKind.TEXT),
    FieldAccessor("url", "url", FieldKind.URL),
    FieldAccessor("language", "language", FieldKind.LANGUAGE),
    FieldAccessor("note", "note", FieldKind.TEXT),
    FieldAccessor("location", "location", FieldKind.FORMATTABLE_STRING),
    FieldAccessor("publisher", "publisher", FieldKind.FORMATTABLE_STRING),
    FieldAccessor("archive", "archive", FieldKind.FORMATTABLE_STRING),
    FieldAccessor("archive_location", "archive-location", FieldKind.FORMATTABLE_STRING),
)


def _make_getter(accessor: FieldAccessor) -> Callable[[Entry], Any]:
    def getter(self: Entry) -> Any:
        value = self.get(accessor.field)
        if value is None:
            if accessor.fallback is None:
                raise NoSuchFieldError(accessor.field)
            try:
                value = accessor.fallback(self)
            except NoSuchFieldError:
                raise NoSuchFieldError(accessor.field) from None
        return value.expect(accessor.kind)

    getter.__name__ = getter.__qualname__ = f"get_{accessor.name}"
    getter.__doc__ = f"Get and parse the `{accessor.field}` field."
    return getter


def _make_setter(accessor: FieldAccessor) -> Callable[[Entry, Any], None]:
    def setter(self: Entry, item: Any) -> None:
        self.set(accessor.field, FieldValue.build(accessor.kind, item))

    setter.__name__ = setter.__qualname__ = f"set_{accessor.name}"
    setter.__doc__ = f"Set a value in the `{accessor.field}` field."
    return setter


def _install_accessors(cls: type[Entry]) -> type[Entry]:
    for accessor in FIELD_ACCESSORS:
        setattr(cls, f"get_{accessor.name}", _make_getter(accessor))
        setattr(cls, f"set_{accessor.name}", _make_setter(accessor))
    return cls


@_install_accessors
@dataclass(slots=True)
class Entry:
    """A keyed, typed bibliography record."""

    key: str
    entry_type: EntryType = EntryType.MISC
    content: dict[str, FieldValue] = field(default_factory=dict)

    def get(self, field_name: str) -> FieldValue | None:
        """Return the raw value stored under ``field_name``."""
        return self.content.get(field_name)

    def set(self, field_name: str, value: FieldValue) -> None:
        """Insert or overwrite the value stored under ``field_name``."""
        self.content[field_name] = value

    def remove(self, field_name: str) -> FieldValue | None:
        return self.content.pop(field_name, None)

    def __contains__(self, field_name: object) -> bool:
        return field_name in self.content

    def field_names(self) -> Iterator[str]:
        return iter(self.content)

    def check_with_spec(self, spec: EntryTypeSpec) -> bool:
        """Recursively check whether this entry and its parents satisfy ``spec``."""
        if not self.entry_type.check(spec.here):
            return False

        try:
            parents = self.get_parents()
        except EntryAccessError:
            parents = []

        for constraint in spec.parents:
            if not any(parent.check_with_spec(constraint) for parent in parents):
                return False

        return True


def check_with_spec(entry: Entry, spec: EntryTypeSpec) -> bool:
    """Function form of `Entry.check_with_spec`."""
    return entry.check_with_spec(spec)


__all__ = ["FIELD_ACCESSORS", "Entry", "FieldAccessor", "check_with_spec"]
