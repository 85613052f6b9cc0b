"""Primitive semantic values stored inside bibliography fields.

Each value type owns its textual grammar. Parsers either return the value or
raise a `ValueParseError` subclass; the loader wraps those errors with the
entry key and field name before surfacing them.

Dates
: `YYYY`, `YYYY-MM` or `YYYY-MM-DD`. A leading `-` denotes a year before the
  common era. Months and days are validated against the calendar.

Durations
: `[[[DD:]HH:]MM:]SS[,mmm]`, at least minutes and seconds. Ranges join two
  durations with a single `-`.

Persons
: Either explicit parts or the comma shorthand `Last, Given, Suffix`. The
  BibTeX "von" words of the last name (`van der`) become the prefix.

Integer ranges
: Python's half-open `range`. `"10-20"` becomes `range(10, 20)` and a single
  number `n` becomes the empty `range(n, n)`.
"""

from __future__ import annotations

import calendar
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
import re
from urllib.parse import urlsplit

from pybtex.database import Person as BibtexPerson
from pybtex.exceptions import PybtexError

from .exceptions import DateError, DurationError, PersonError, UrlParseError


NumOrStr = int | str

_DATE_RE = re.compile(r"^(?P<year>-?\d{1,4})(?:-(?P<month>\d{1,2})(?:-(?P<day>\d{1,2}))?)?$")
_DAYS_IN_MONTH = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


@dataclass(frozen=True, slots=True)
class Date:
    """A calendar date with optional month and day precision."""

    year: int
    month: int | None = None
    day: int | None = None

    @classmethod
    def from_year(cls, year: int) -> Date:
        return cls(year=year)

    def __str__(self) -> str:
        sign = "-" if self.year < 0 else ""
        text = f"{sign}{abs(self.year):04d}"
        if self.month is not None:
            text += f"-{self.month:02d}"
            if self.day is not None:
                text += f"-{self.day:02d}"
        return text


def _days_in_month(year: int, month: int) -> int:
    if month == 2 and calendar.isleap(year):
        return 29
    return _DAYS_IN_MONTH[month - 1]


def parse_date(text: str) -> Date:
    """Parse an ISO-like date string of year, month, or day precision."""
    match = _DATE_RE.match(text.strip())
    if match is None:
        raise DateError(f"date '{text}' does not match YYYY[-MM[-DD]]")

    year = int(match.group("year"))
    raw_month = match.group("month")
    if raw_month is None:
        return Date(year)

    month = int(raw_month)
    if not 1 <= month <= 12:
        raise DateError(f"month {month} is out of range in date '{text}'")

    raw_day = match.group("day")
    if raw_day is None:
        return Date(year, month)

    day = int(raw_day)
    if not 1 <= day <= _days_in_month(year, month):
        raise DateError(f"day {day} is out of range in date '{text}'")
    return Date(year, month, day)


_DURATION_RE = re.compile(
    r"^(?:(?:(?P<days>\d+):)?(?P<hours>\d+):)?(?P<minutes>\d+):(?P<seconds>\d+)"
    r"(?:[,.](?P<millis>\d{1,3}))?$"
)


@dataclass(frozen=True, slots=True)
class TimeRange:
    """A span between two points of a timed medium."""

    start: timedelta
    end: timedelta

    @property
    def length(self) -> timedelta:
        return self.end - self.start


def parse_duration(text: str) -> timedelta:
    """Parse a colon-separated duration such as ``01:42:21,802``."""
    candidate = text.strip()
    match = _DURATION_RE.match(candidate)
    if match is None:
        raise DurationError(f"duration '{text}' does not match [[[DD:]HH:]MM:]SS[,mmm]")

    days = int(match.group("days") or 0)
    hours = int(match.group("hours") or 0)
    minutes = int(match.group("minutes"))
    seconds = int(match.group("seconds"))
    millis = int((match.group("millis") or "0").ljust(3, "0"))

    if seconds >= 60:
        raise DurationError(f"seconds out of range in duration '{text}'")
    if match.group("hours") is not None and minutes >= 60:
        raise DurationError(f"minutes out of range in duration '{text}'")
    if match.group("days") is not None and hours >= 24:
        raise DurationError(f"hours out of range in duration '{text}'")

    return timedelta(
        days=days,
        hours=hours,
        minutes=minutes,
        seconds=seconds,
        milliseconds=millis,
    )


def parse_duration_range(text: str) -> TimeRange:
    """Parse two durations joined by a dash, e.g. ``00:57:12-00:58:31``."""
    parts = text.split("-")
    if len(parts) != 2:
        raise DurationError(f"time range '{text}' must contain exactly one '-'")

    start = parse_duration(parts[0])
    end = parse_duration(parts[1])
    if end < start:
        raise DurationError(f"time range '{text}' ends before it starts")
    return TimeRange(start, end)


_RANGE_RE = re.compile(r"^\s*(?P<start>\d+)\s*(?:[-–—]+\s*(?P<end>\d+)\s*)?$")


def parse_range(text: str) -> range | None:
    """Return the integer range described by ``text`` or None."""
    match = _RANGE_RE.match(text)
    if match is None:
        return None
    start = int(match.group("start"))
    raw_end = match.group("end")
    end = start if raw_end is None else int(raw_end)
    if end < start:
        return None
    return range(start, end)


@dataclass(frozen=True, slots=True)
class Person:
    """A person credited on an entry."""

    name: str
    given_name: str | None = None
    prefix: str | None = None
    suffix: str | None = None
    alias: str | None = None

    @classmethod
    def from_strings(cls, parts: Sequence[str]) -> Person:
        """Build a person from the comma-separated shorthand parts.

        The parts are positional: last name (with an optional lowercase
        prefix such as ``van der``), given name, suffix. The prefix is split
        off with BibTeX's "von Last" rule.
        """
        cleaned = [part.strip() for part in parts]
        if not cleaned or not cleaned[0]:
            raise PersonError("the name part of a person must not be empty")
        if len(cleaned) > 3:
            raise PersonError(f"too many comma-separated parts in person '{', '.join(parts)}'")

        try:
            parsed = BibtexPerson(cleaned[0])
        except PybtexError as exc:
            raise PersonError(f"cannot split name '{cleaned[0]}': {exc}") from exc

        # Capitalised leading words mean there is no leading prefix.
        if parsed.first_names or parsed.middle_names:
            name, prefix = cleaned[0], None
        else:
            name = " ".join(parsed.last_names)
            prefix = " ".join(parsed.prelast_names) or None

        given_name = cleaned[1] if len(cleaned) > 1 and cleaned[1] else None
        suffix = cleaned[2] if len(cleaned) > 2 and cleaned[2] else None
        return cls(name=name, given_name=given_name, prefix=prefix, suffix=suffix)

    def __str__(self) -> str:
        parts = [part for part in (self.given_name, self.prefix, self.name) if part]
        text = " ".join(parts)
        if self.suffix:
            text = f"{text} {self.suffix}"
        return text


class PersonRole(Enum):
    """Roles a person can hold besides author and editor."""

    TRANSLATOR = "translator"
    AFTERWORD = "afterword"
    FOREWORD = "foreword"
    INTRODUCTION = "introduction"
    ANNOTATOR = "annotator"
    COMMENTATOR = "commentator"
    HOLDER = "holder"
    COMPILER = "compiler"
    FOUNDER = "founder"
    COLLABORATOR = "collaborator"
    ORGANIZER = "organizer"
    CAST_MEMBER = "cast-member"
    COMPOSER = "composer"
    PRODUCER = "producer"
    EXECUTIVE_PRODUCER = "executive-producer"
    WRITER = "writer"
    CINEMATOGRAPHY = "cinematography"
    DIRECTOR = "director"
    ILLUSTRATOR = "illustrator"
    NARRATOR = "narrator"

    @classmethod
    def parse(cls, text: str) -> PersonRole | UnknownRole:
        """Match ``text`` case-insensitively, keeping unknown roles verbatim."""
        try:
            return cls(text.lower())
        except ValueError:
            return UnknownRole(text)


@dataclass(frozen=True, slots=True)
class UnknownRole:
    """A role string outside the `PersonRole` vocabulary."""

    role: str


Role = PersonRole | UnknownRole


def _title_case(value: str) -> str:
    return " ".join(word[:1].upper() + word[1:] for word in value.split(" "))


def _sentence_case(value: str) -> str:
    lowered = value.lower()
    return lowered[:1].upper() + lowered[1:]


@dataclass(frozen=True, slots=True)
class FormattedString:
    """Text whose case variants have already been computed."""

    value: str
    title_case: str
    sentence_case: str


@dataclass(frozen=True, slots=True)
class FormattableString:
    """Text with optional case alternates and a verbatim flag."""

    value: str
    title_case: str | None = None
    sentence_case: str | None = None
    verbatim: bool = False

    @classmethod
    def shorthand(cls, value: str) -> FormattableString:
        return cls(value)

    def render(
        self,
        *,
        title_case: Callable[[str], str] = _title_case,
        sentence_case: Callable[[str], str] = _sentence_case,
    ) -> FormattedString:
        """Compute the missing case variants.

        Explicit alternates always win. Verbatim strings keep their value for
        every variant.
        """
        if self.verbatim:
            title = self.title_case or self.value
            sentence = self.sentence_case or self.value
        else:
            title = self.title_case or title_case(self.value)
            sentence = self.sentence_case or sentence_case(self.value)
        return FormattedString(self.value, title, sentence)


_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")


@dataclass(frozen=True, slots=True)
class QualifiedUrl:
    """A URL with the optional date on which it was visited."""

    value: str
    visit_date: Date | None = None


def parse_url(text: str) -> str:
    """Validate an absolute URL and return it without surrounding whitespace."""
    candidate = text.strip()
    if not candidate or any(char.isspace() for char in candidate):
        raise UrlParseError(f"'{text}' is not a valid URL")
    try:
        parts = urlsplit(candidate)
    except ValueError as exc:
        raise UrlParseError(f"'{text}' is not a valid URL: {exc}") from exc
    if not parts.scheme or not _SCHEME_RE.match(parts.scheme):
        raise UrlParseError(f"'{text}' has no scheme")
    if not (parts.netloc or parts.path):
        raise UrlParseError(f"'{text}' has nothing after its scheme")
    return candidate


_LANGUAGE_RE = re.compile(
    r"""^
    (?P<language>[A-Za-z]{2,3}|[A-Za-z]{5,8})
    (?:[-_](?P<script>[A-Za-z]{4}))?
    (?:[-_](?P<region>[A-Za-z]{2}|\d{3}))?
    (?P<variants>(?:[-_](?:[A-Za-z0-9]{5,8}|\d[A-Za-z0-9]{3}))*)
    $""",
    re.VERBOSE,
)


@dataclass(frozen=True, slots=True)
class LanguageTag:
    """A BCP 47 language identifier in canonical casing."""

    language: str
    script: str | None = None
    region: str | None = None
    variants: tuple[str, ...] = ()

    def __str__(self) -> str:
        parts = [self.language, self.script, self.region, *self.variants]
        return "-".join(part for part in parts if part)


def parse_language_tag(text: str) -> LanguageTag | None:
    """Return the language tag described by ``text`` or None."""
    match = _LANGUAGE_RE.match(text.strip())
    if match is None:
        return None
    script = match.group("script")
    region = match.group("region")
    variants = tuple(
        variant.lower() for variant in re.split(r"[-_]", match.group("variants")) if variant
    )
    return LanguageTag(
        language=match.group("language").lower(),
        script=script.title() if script else None,
        region=region.upper() if region else None,
        variants=variants,
    )


__all__ = [
    "Date",
    "FormattableString",
    "FormattedString",
    "LanguageTag",
    "NumOrStr",
    "Person",
    "PersonRole",
    "QualifiedUrl",
    "Role",
    "TimeRange",
    "UnknownRole",
    "parse_date",
    "parse_duration",
    "parse_duration_range",
    "parse_language_tag",
    "parse_range",
    "parse_url",
]
