"""Turn a YAML bibliography document into typed entries.

The document root maps entry keys to entry bodies. Each body maps field
names to raw YAML values, and the field name decides which coercion applies.
Ingestion stops at the first failure; no partial result is returned.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
import logging
import re
from typing import Any

import yaml

from .config import LoadOptions, resolve_options
from .diagnostics import DiagnosticEmitter, NullEmitter
from .entry import Entry
from .entry_types import EntryType
from .exceptions import (
    DataTypeError,
    DataTypeMismatchError,
    DataTypeProblem,
    DateError,
    DurationError,
    EntryStructureError,
    FieldNameUnparsableError,
    FormattableStringError,
    FormattableStringProblem,
    KeyUnparsableError,
    PersonError,
    ScanError,
    StructureError,
    UrlParseError,
)
from .fields import FieldValue
from .primitives import (
    Date,
    FormattableString,
    Person,
    PersonRole,
    QualifiedUrl,
    UnknownRole,
    parse_date,
    parse_duration,
    parse_duration_range,
    parse_language_tag,
    parse_range,
    parse_url,
)


logger = logging.getLogger(__name__)

_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"
_INT_TAG = "tag:yaml.org,2002:int"
_FLOAT_TAG = "tag:yaml.org,2002:float"
_BOOL_TAG = "tag:yaml.org,2002:bool"
# Only true/false are booleans, so `no` (Norwegian) and `Yes` stay strings.
_BOOL_RE = re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$")
# YAML 1.1 numbers minus the base-60 forms, so `1:42:21` and `1:42:21.802`
# stay duration strings.
_INT_RE = re.compile(
    r"""^(?:[-+]?0b[0-1_]+
    |[-+]?0[0-7_]+
    |[-+]?(?:0|[1-9][0-9_]*)
    |[-+]?0x[0-9a-fA-F_]+)$""",
    re.VERBOSE,
)
_FLOAT_RE = re.compile(
    r"""^(?:[-+]?(?:[0-9][0-9_]*)\.[0-9_]*(?:[eE][-+][0-9]+)?
    |\.[0-9][0-9_]*(?:[eE][-+][0-9]+)?
    |[-+]?\.(?:inf|Inf|INF)
    |\.(?:nan|NaN|NAN))$""",
    re.VERBOSE,
)
_REPLACED_TAGS = frozenset({_TIMESTAMP_TAG, _BOOL_TAG, _INT_TAG, _FLOAT_TAG})


class _BibliographyLoader(yaml.SafeLoader):
    """Safe loader that leaves unquoted dates, durations and yes/no as strings."""


_BibliographyLoader.yaml_implicit_resolvers = {
    first: [(tag, pattern) for tag, pattern in resolvers if tag not in _REPLACED_TAGS]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
_BibliographyLoader.add_implicit_resolver(_BOOL_TAG, _BOOL_RE, list("tTfF"))
_BibliographyLoader.add_implicit_resolver(_INT_TAG, _INT_RE, list("-+0123456789"))
_BibliographyLoader.add_implicit_resolver(_FLOAT_TAG, _FLOAT_RE, list("-+0123456789."))

_FORMATTABLE_FIELDS = ("title", "publisher", "location", "archive", "archive-location")
_PERSON_OPTIONAL_FIELDS = ("given_name", "prefix", "suffix", "alias")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _string_keyed(mapping: Mapping[Any, Any]) -> dict[str, Any]:
    return {key: value for key, value in mapping.items() if isinstance(key, str)}


def _format_float(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return repr(value)


@dataclass(frozen=True, slots=True)
class _Location:
    """Entry key and field name a raw value was read from."""

    key: str
    field: str

    def mismatch(self, expected: str) -> DataTypeMismatchError:
        return DataTypeMismatchError(self.key, self.field, expected)

    def invalid(self, reason: DataTypeProblem) -> DataTypeError:
        return DataTypeError(self.key, self.field, reason)


def formattable_string_from_mapping(mapping: Mapping[Any, Any]) -> FormattableString:
    """Build a `FormattableString` from its verbose mapping form.

    ``value`` is preferred; when it is missing the first string among
    ``sentence-case`` and ``title-case`` stands in for it.
    """
    fields = _string_keyed(mapping)

    candidates = [
        fields[name]
        for name in ("value", "sentence-case", "title-case")
        if isinstance(fields.get(name), str)
    ]
    if not candidates:
        raise FormattableStringError(FormattableStringProblem.NO_VALUE)

    verbatim = fields.get("verbatim", False)
    if not isinstance(verbatim, bool):
        raise FormattableStringError(FormattableStringProblem.VERBATIM_NOT_BOOL)

    alternates: dict[str, str | None] = {}
    for name in ("title-case", "sentence-case"):
        if name not in fields:
            alternates[name] = None
            continue
        if not isinstance(fields[name], str):
            raise FormattableStringError(FormattableStringProblem.VALUE_IS_NO_STRING)
        alternates[name] = fields[name]

    return FormattableString(
        candidates[0],
        title_case=alternates["title-case"],
        sentence_case=alternates["sentence-case"],
        verbatim=verbatim,
    )


class _EntryReader:
    """Coerce raw YAML entry bodies into `Entry` objects."""

    def __init__(self, options: LoadOptions, emitter: DiagnosticEmitter) -> None:
        self._options = options
        self._emitter = emitter
        # ids of the entry bodies on the parent chain being read
        self._open: set[int] = set()
        self._readers: dict[str, Callable[[Any, _Location], FieldValue]] = {
            **dict.fromkeys(_FORMATTABLE_FIELDS, self._read_formattable),
            "author": self._read_person_field,
            "editor": self._read_person_field,
            "affiliated": self._read_affiliated,
            "date": self._read_date_field,
            "issue": self._read_integer_or_text,
            "edition": self._read_integer_or_text,
            "volume-total": self._read_integer,
            "page-total": self._read_integer,
            "volume": self._read_range,
            "page-range": self._read_range,
            "runtime": self._read_duration,
            "time-range": self._read_time_range,
            "url": self._read_url,
            "language": self._read_language,
            "parent": self._read_parents,
        }

    def read_entry(self, key: str, payload: Any) -> Entry:
        if not isinstance(payload, Mapping):
            raise EntryStructureError(key)

        entry = Entry(key)
        self._open.add(id(payload))
        try:
            for field_name, value in payload.items():
                if not isinstance(field_name, str):
                    raise FieldNameUnparsableError(key)
                location = _Location(key, field_name)

                if field_name == "type":
                    entry.entry_type = self._read_entry_type(value, location, entry.entry_type)
                    continue

                reader = self._readers.get(field_name, self._read_text)
                entry.set(field_name, reader(value, location))
        finally:
            self._open.discard(id(payload))

        return entry

    def _read_entry_type(self, value: Any, location: _Location, default: EntryType) -> EntryType:
        if not isinstance(value, str):
            raise location.invalid(DataTypeProblem.MISMATCHED_PRIMITIVE)

        entry_type = EntryType.parse(value)
        if entry_type is not None:
            return entry_type
        if self._options.strict_entry_types:
            raise location.invalid(DataTypeProblem.UNKNOWN_ENTRY_TYPE)

        self._emitter.event("unknown_entry_type", {"key": location.key, "value": value})
        return default

    def _read_formattable(self, value: Any, location: _Location) -> FieldValue:
        if isinstance(value, Mapping):
            try:
                return FieldValue.formattable_string(formattable_string_from_mapping(value))
            except FormattableStringError as exc:
                raise location.invalid(DataTypeProblem.FORMATTABLE_STRING) from exc
        if isinstance(value, str):
            return FieldValue.formattable_string(FormattableString.shorthand(value))
        raise location.mismatch("text or formattable string")

    def _read_person(self, item: Any, location: _Location) -> Person:
        if isinstance(item, Mapping):
            fields = _string_keyed(item)
            name = fields.get("name")
            if not isinstance(name, str):
                raise location.invalid(DataTypeProblem.MISSING_REQUIRED_FIELD)
            optionals = {
                attribute: fields[attribute] if isinstance(fields.get(attribute), str) else None
                for attribute in _PERSON_OPTIONAL_FIELDS
            }
            return Person(name, **optionals)

        if isinstance(item, str):
            try:
                return Person.from_strings(item.split(","))
            except PersonError as exc:
                raise location.invalid(DataTypeProblem.PERSON) from exc

        raise location.mismatch("person")

    def _read_persons(self, value: Any, location: _Location) -> list[Person]:
        if isinstance(value, list):
            return [self._read_person(item, location) for item in value]
        return [self._read_person(value, location)]

    def _read_person_field(self, value: Any, location: _Location) -> FieldValue:
        return FieldValue.persons(self._read_persons(value, location))

    def _read_affiliated(self, value: Any, location: _Location) -> FieldValue:
        if not isinstance(value, list):
            raise location.mismatch("affiliated person")

        affiliated = []
        for item in value:
            if not isinstance(item, Mapping):
                raise location.mismatch("affiliated person")
            fields = _string_keyed(item)

            if "names" not in fields:
                raise location.invalid(DataTypeProblem.MISSING_REQUIRED_FIELD)
            persons = self._read_persons(fields["names"], location)

            if "role" not in fields:
                raise location.invalid(DataTypeProblem.MISSING_REQUIRED_FIELD)
            raw_role = fields["role"]
            if not isinstance(raw_role, str):
                raise location.invalid(DataTypeProblem.MISMATCHED_PRIMITIVE)

            role = PersonRole.parse(raw_role)
            if isinstance(role, UnknownRole):
                self._emitter.event(
                    "unknown_person_role", {"key": location.key, "role": raw_role}
                )
            affiliated.append((persons, role))

        return FieldValue.persons_with_roles(affiliated)

    def _read_date(self, value: Any, location: _Location, *, mismatch: str | None) -> Date:
        if _is_int(value):
            return Date.from_year(value)
        if isinstance(value, str):
            try:
                return parse_date(value)
            except DateError as exc:
                raise location.invalid(DataTypeProblem.DATE) from exc
        if mismatch is None:
            raise location.invalid(DataTypeProblem.MISMATCHED_PRIMITIVE)
        raise location.mismatch(mismatch)

    def _read_date_field(self, value: Any, location: _Location) -> FieldValue:
        return FieldValue.date(self._read_date(value, location, mismatch="date"))

    def _read_integer_or_text(self, value: Any, location: _Location) -> FieldValue:
        if _is_int(value) or isinstance(value, str):
            return FieldValue.integer_or_text(value)
        raise location.mismatch("integer or text")

    def _read_integer(self, value: Any, location: _Location) -> FieldValue:
        if _is_int(value):
            return FieldValue.integer(value)
        raise location.mismatch("integer")

    def _read_range(self, value: Any, location: _Location) -> FieldValue:
        if _is_int(value):
            return FieldValue.range(range(value, value))
        if isinstance(value, str):
            parsed = parse_range(value)
            if parsed is None:
                raise location.invalid(DataTypeProblem.RANGE)
            return FieldValue.range(parsed)
        raise location.mismatch("integer range")

    def _read_duration(self, value: Any, location: _Location) -> FieldValue:
        if not isinstance(value, str):
            raise location.mismatch("duration")
        try:
            return FieldValue.duration(parse_duration(value))
        except DurationError as exc:
            raise location.invalid(DataTypeProblem.DURATION) from exc

    def _read_time_range(self, value: Any, location: _Location) -> FieldValue:
        if not isinstance(value, str):
            raise location.mismatch("duration")
        try:
            return FieldValue.time_range(parse_duration_range(value))
        except DurationError as exc:
            raise location.invalid(DataTypeProblem.DURATION) from exc

    def _parse_url(self, value: str, location: _Location) -> str:
        try:
            return parse_url(value)
        except UrlParseError as exc:
            raise location.invalid(DataTypeProblem.URL) from exc

    def _read_url(self, value: Any, location: _Location) -> FieldValue:
        if isinstance(value, str):
            return FieldValue.url(QualifiedUrl(self._parse_url(value, location)))

        if not isinstance(value, Mapping):
            raise location.mismatch("qualified url")

        fields = _string_keyed(value)
        if "value" not in fields:
            raise location.invalid(DataTypeProblem.MISSING_REQUIRED_FIELD)
        raw_url = fields["value"]
        if not isinstance(raw_url, str):
            raise location.invalid(DataTypeProblem.MISMATCHED_PRIMITIVE)
        url = self._parse_url(raw_url, location)

        visit_date = None
        if "date" in fields:
            visit_date = self._read_date(fields["date"], location, mismatch=None)

        return FieldValue.url(QualifiedUrl(url, visit_date))

    def _read_language(self, value: Any, location: _Location) -> FieldValue:
        language = parse_language_tag(value) if isinstance(value, str) else None
        if language is None:
            raise location.mismatch("unicode language identifier")
        return FieldValue.language(language)

    def _read_parents(self, value: Any, location: _Location) -> FieldValue:
        # Nested entries are keyed after the containing entry unless the
        # options ask for distinct keys.
        if isinstance(value, list):
            logger.debug("Reading %d parents of entry '%s'", len(value), location.key)
            return FieldValue.entries(
                self._read_parent(item, location, index) for index, item in enumerate(value)
            )
        logger.debug("Reading parent of entry '%s'", location.key)
        return FieldValue.entries([self._read_parent(value, location)])

    def _read_parent(self, item: Any, location: _Location, index: int | None = None) -> Entry:
        # YAML aliases can make an entry body its own ancestor.
        if id(item) in self._open:
            raise location.invalid(DataTypeProblem.PARENT_CYCLE)
        return self.read_entry(self._options.parent_key(location.key, index), item)

    def _read_text(self, value: Any, location: _Location) -> FieldValue:
        if isinstance(value, str):
            return FieldValue.text(value)
        if _is_int(value):
            return FieldValue.text(str(value))
        if isinstance(value, float):
            return FieldValue.text(_format_float(value))
        raise location.mismatch("text")


def _parse_document(text: str) -> Any:
    try:
        loader = _BibliographyLoader(text)
        try:
            return loader.get_data() if loader.check_data() else None
        finally:
            loader.dispose()
    except yaml.YAMLError as exc:
        raise ScanError(f"string could not be read as yaml: {exc}") from exc


def load_yaml_structure(
    text: str,
    *,
    options: LoadOptions | Mapping[str, Any] | None = None,
    emitter: DiagnosticEmitter | None = None,
) -> list[Entry]:
    """Parse a YAML bibliography into entries.

    Only the first document of a multi-document stream is read. The first
    structural or field error aborts ingestion.
    """
    reader = _EntryReader(resolve_options(options), emitter or NullEmitter())

    root = _parse_document(text)
    if not isinstance(root, Mapping):
        raise StructureError()

    entries: list[Entry] = []
    for key, payload in root.items():
        if not isinstance(key, str):
            raise KeyUnparsableError()
        entries.append(reader.read_entry(key, payload))

    logger.debug("Loaded %d bibliography entries", len(entries))
    return entries


load = load_yaml_structure


__all__ = ["formattable_string_from_mapping", "load", "load_yaml_structure"]
