from datetime import timedelta

import pytest

from yambib.core.entry import FIELD_ACCESSORS, Entry
from yambib.core.entry_types import EntryType
from yambib.core.exceptions import NoSuchFieldError, WrongTypeError
from yambib.core.fields import FieldKind, FieldValue
from yambib.core.primitives import (
    Date,
    FormattableString,
    LanguageTag,
    Person,
    PersonRole,
    QualifiedUrl,
    TimeRange,
    UnknownRole,
)


SAMPLES = {
    FieldKind.FORMATTABLE_STRING: FormattableString("Title", title_case="Title", verbatim=True),
    FieldKind.TEXT: "text value",
    FieldKind.INTEGER: 7,
    FieldKind.DATE: Date(2021, 5, 4),
    FieldKind.PERSONS: [Person("Doe", given_name="Jane"), Person("Roe")],
    FieldKind.PERSONS_WITH_ROLES: [
        ([Person("Doe")], PersonRole.TRANSLATOR),
        ([Person("Roe")], UnknownRole("gaffer")),
    ],
    FieldKind.INTEGER_OR_TEXT: "second",
    FieldKind.RANGE: range(3, 9),
    FieldKind.DURATION: timedelta(minutes=3),
    FieldKind.TIME_RANGE: TimeRange(timedelta(0), timedelta(minutes=2)),
    FieldKind.URL: QualifiedUrl("https://example.org", Date(2020)),
    FieldKind.LANGUAGE: LanguageTag("fr", region="CA"),
    FieldKind.ENTRIES: [Entry("parent", EntryType.PERIODICAL)],
}


@pytest.mark.parametrize("accessor", FIELD_ACCESSORS, ids=lambda accessor: accessor.name)
def test_setter_then_getter_returns_value(accessor) -> None:
    entry = Entry("ref")
    sample = SAMPLES[accessor.kind]

    getattr(entry, f"set_{accessor.name}")(sample)

    assert getattr(entry, f"get_{accessor.name}")() == sample
    assert entry.get(accessor.field) == FieldValue.build(accessor.kind, sample)


@pytest.mark.parametrize(
    "accessor",
    [accessor for accessor in FIELD_ACCESSORS if accessor.fallback is None],
    ids=lambda accessor: accessor.name,
)
def test_getter_without_field_raises_no_such_field(accessor) -> None:
    entry = Entry("ref")
    with pytest.raises(NoSuchFieldError) as excinfo:
        getattr(entry, f"get_{accessor.name}")()
    assert excinfo.value.field == accessor.field


@pytest.mark.parametrize("accessor", FIELD_ACCESSORS, ids=lambda accessor: accessor.name)
def test_getter_with_mismatched_shape_raises_wrong_type(accessor) -> None:
    entry = Entry("ref")
    other_kind = FieldKind.TEXT if accessor.kind is not FieldKind.TEXT else FieldKind.INTEGER
    entry.set(accessor.field, FieldValue.build(other_kind, SAMPLES[other_kind]))

    with pytest.raises(WrongTypeError):
        getattr(entry, f"get_{accessor.name}")()


def test_accessor_table_field_names_are_unique() -> None:
    fields = [accessor.field for accessor in FIELD_ACCESSORS]
    names = [accessor.name for accessor in FIELD_ACCESSORS]
    assert len(set(fields)) == len(fields)
    assert len(set(names)) == len(names)


def test_generated_accessors_are_documented() -> None:
    assert Entry.get_page_range.__name__ == "get_page_range"
    assert "`page-range`" in Entry.get_page_range.__doc__
    assert "`archive-location`" in Entry.set_archive_location.__doc__


def test_authors_default_to_empty_list() -> None:
    assert Entry("ref").get_authors() == []


def test_authors_with_wrong_shape_still_fail() -> None:
    entry = Entry("ref")
    entry.set("author", FieldValue.text("Jane Doe"))
    with pytest.raises(WrongTypeError):
        entry.get_authors()


def test_page_total_prefers_explicit_value() -> None:
    entry = Entry("ref")
    entry.set_page_total(12)
    assert entry.get_page_total() == 12

    entry.set_page_range(range(10, 50))
    assert entry.get_page_total() == 12


def test_page_total_falls_back_to_page_range() -> None:
    entry = Entry("ref")
    entry.set_page_range(range(10, 50))
    assert entry.get_page_total() == 40


def test_page_total_without_any_source_fails() -> None:
    with pytest.raises(NoSuchFieldError) as excinfo:
        Entry("ref").get_page_total()
    assert excinfo.value.field == "page-total"


def test_page_total_fallback_propagates_wrong_type() -> None:
    entry = Entry("ref")
    entry.set("page-range", FieldValue.text("10-50"))
    with pytest.raises(WrongTypeError):
        entry.get_page_total()


def test_runtime_falls_back_to_time_range() -> None:
    entry = Entry("ref")
    entry.set_time_range(TimeRange(timedelta(minutes=57), timedelta(minutes=58, seconds=30)))
    assert entry.get_runtime() == timedelta(minutes=1, seconds=30)

    entry.set_runtime(timedelta(hours=2))
    assert entry.get_runtime() == timedelta(hours=2)

    with pytest.raises(NoSuchFieldError):
        Entry("ref").get_runtime()


def test_raw_get_set_and_remove() -> None:
    entry = Entry("ref", EntryType.BOOK)
    assert entry.get("note") is None
    assert "note" not in entry

    entry.set("note", FieldValue.text("first"))
    entry.set("note", FieldValue.text("second"))
    assert entry.get("note") == FieldValue.text("second")
    assert "note" in entry
    assert list(entry.field_names()) == ["note"]

    assert entry.remove("note") == FieldValue.text("second")
    assert entry.remove("note") is None


def test_entries_default_to_misc() -> None:
    entry = Entry("ref")
    assert entry.entry_type is EntryType.MISC
    assert entry.key == "ref"


def test_setter_rejects_value_of_wrong_type() -> None:
    entry = Entry("ref")
    with pytest.raises(TypeError):
        entry.set_page_total("lots")
    assert "page-total" not in entry

    entry.set_page_total(12)
    with pytest.raises(TypeError):
        entry.set_title("Plain string")
    assert entry.get_page_total() == 12
