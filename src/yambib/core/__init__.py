"""Core bibliography model and YAML ingestion.

Architecture
: `primitives` holds the semantic value types (dates, durations, persons,
  URLs, language tags, integer ranges) and their grammars.
: `fields` wraps those values in the `FieldValue` tagged union.
: `entry` defines `Entry`, its generated typed accessors and the recursive
  `check_with_spec` predicate over `entry_types.EntryTypeSpec`.
: `loader` walks a parsed YAML document and dispatches every field to the
  coercion matching its name.
: `exceptions` separates document-structure failures from per-field content
  failures, and both from post-ingestion accessor errors.
"""

from __future__ import annotations

from .config import LoadOptions
from .diagnostics import DiagnosticEmitter, LoggingEmitter, NullEmitter
from .entry import FIELD_ACCESSORS, Entry, FieldAccessor, check_with_spec
from .entry_types import EntryType, EntryTypeSpec, TypeConstraint
from .exceptions import (
    BibliographyError,
    DataTypeError,
    DataTypeMismatchError,
    DataTypeProblem,
    DateError,
    DocumentStructureError,
    DurationError,
    EntryAccessError,
    EntryStructureError,
    FieldContentError,
    FieldNameUnparsableError,
    FormattableStringError,
    FormattableStringProblem,
    KeyUnparsableError,
    NoSuchFieldError,
    PersonError,
    ScanError,
    StructureError,
    UrlParseError,
    ValueParseError,
    WrongTypeError,
)
from .fields import FieldKind, FieldValue
from .loader import load, load_yaml_structure
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


__all__ = [
    "FIELD_ACCESSORS",
    "BibliographyError",
    "DataTypeError",
    "DataTypeMismatchError",
    "DataTypeProblem",
    "Date",
    "DateError",
    "DiagnosticEmitter",
    "DocumentStructureError",
    "DurationError",
    "Entry",
    "EntryAccessError",
    "EntryStructureError",
    "EntryType",
    "EntryTypeSpec",
    "FieldAccessor",
    "FieldContentError",
    "FieldKind",
    "FieldNameUnparsableError",
    "FieldValue",
    "FormattableString",
    "FormattableStringError",
    "FormattableStringProblem",
    "FormattedString",
    "KeyUnparsableError",
    "LanguageTag",
    "LoadOptions",
    "LoggingEmitter",
    "NoSuchFieldError",
    "NullEmitter",
    "NumOrStr",
    "Person",
    "PersonError",
    "PersonRole",
    "QualifiedUrl",
    "Role",
    "ScanError",
    "StructureError",
    "TimeRange",
    "TypeConstraint",
    "UnknownRole",
    "UrlParseError",
    "ValueParseError",
    "WrongTypeError",
    "check_with_spec",
    "load",
    "load_yaml_structure",
]
