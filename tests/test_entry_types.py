import pytest

from yambib.core.entry import Entry, check_with_spec
from yambib.core.entry_types import EntryType, EntryTypeSpec, TypeConstraint
from yambib.core.fields import FieldValue


def _entry(entry_type: EntryType, *parents: Entry) -> Entry:
    entry = Entry("ref", entry_type)
    if parents:
        entry.set_parents(list(parents))
    return entry


def test_entry_type_parse() -> None:
    assert EntryType.parse("Article") is EntryType.ARTICLE
    assert EntryType.parse(" web ") is EntryType.WEB
    assert EntryType.parse("podcast") is None


def test_type_constraints() -> None:
    assert TypeConstraint.specific(EntryType.BOOK).accepts(EntryType.BOOK)
    assert not TypeConstraint.specific(EntryType.BOOK).accepts(EntryType.ARTICLE)
    assert TypeConstraint.alternate(EntryType.BOOK, EntryType.ANTHOLOGY).accepts(
        EntryType.ANTHOLOGY
    )
    assert TypeConstraint.any().accepts(EntryType.TWEET)
    assert not TypeConstraint.not_(EntryType.TWEET).accepts(EntryType.TWEET)
    assert TypeConstraint.not_(EntryType.TWEET).accepts(EntryType.BLOG)
    assert EntryType.VIDEO.check(TypeConstraint.specific(EntryType.VIDEO))


def test_article_in_periodical() -> None:
    article = _entry(EntryType.ARTICLE, _entry(EntryType.PERIODICAL))

    in_periodical = EntryTypeSpec.of(
        EntryType.ARTICLE, parents=[EntryTypeSpec.of(EntryType.PERIODICAL)]
    )
    in_book = EntryTypeSpec.of(EntryType.ARTICLE, parents=[EntryTypeSpec.of(EntryType.BOOK)])

    assert check_with_spec(article, in_periodical)
    assert not check_with_spec(article, in_book)


def test_own_type_is_checked_first() -> None:
    chapter = _entry(EntryType.CHAPTER, _entry(EntryType.PERIODICAL))
    spec = EntryTypeSpec.of(EntryType.ARTICLE, parents=[EntryTypeSpec.of(EntryType.PERIODICAL)])
    assert not chapter.check_with_spec(spec)


def test_missing_parent_fails_only_when_parents_are_required() -> None:
    lone = _entry(EntryType.ARTICLE)
    assert lone.check_with_spec(EntryTypeSpec.of(EntryType.ARTICLE))
    assert not lone.check_with_spec(
        EntryTypeSpec.of(EntryType.ARTICLE, parents=[EntryTypeSpec.of()])
    )


def test_malformed_parent_field_counts_as_no_parents() -> None:
    entry = _entry(EntryType.ARTICLE)
    entry.set("parent", FieldValue.text("Journal of Things"))
    assert entry.check_with_spec(EntryTypeSpec.of(EntryType.ARTICLE))
    assert not entry.check_with_spec(
        EntryTypeSpec.of(EntryType.ARTICLE, parents=[EntryTypeSpec.of(EntryType.PERIODICAL)])
    )


def test_every_parent_constraint_needs_its_own_match() -> None:
    chapter = _entry(
        EntryType.CHAPTER,
        _entry(EntryType.ANTHOLOGY),
        _entry(EntryType.CONFERENCE),
    )
    both = EntryTypeSpec.of(
        EntryType.CHAPTER,
        parents=[EntryTypeSpec.of(EntryType.CONFERENCE), EntryTypeSpec.of(EntryType.ANTHOLOGY)],
    )
    with_missing = EntryTypeSpec.of(
        EntryType.CHAPTER,
        parents=[EntryTypeSpec.of(EntryType.ANTHOLOGY), EntryTypeSpec.of(EntryType.REPORT)],
    )
    assert chapter.check_with_spec(both)
    assert not chapter.check_with_spec(with_missing)


@pytest.mark.parametrize(
    ("series_type", "expected"),
    [(EntryType.BOOK, True), (EntryType.PERIODICAL, False)],
)
def test_constraints_recurse_through_ancestors(series_type: EntryType, expected: bool) -> None:
    article = _entry(EntryType.ARTICLE, _entry(EntryType.ANTHOLOGY, _entry(series_type)))
    spec = EntryTypeSpec.of(
        EntryType.ARTICLE,
        parents=[
            EntryTypeSpec.of(
                EntryType.ANTHOLOGY,
                parents=[EntryTypeSpec.of(EntryType.BOOK)],
            )
        ],
    )
    assert article.check_with_spec(spec) is expected


def test_negated_parent_constraint() -> None:
    post = _entry(EntryType.BLOG, _entry(EntryType.WEB))
    spec = EntryTypeSpec(
        TypeConstraint.any(),
        parents=(EntryTypeSpec(TypeConstraint.not_(EntryType.PERIODICAL)),),
    )
    assert post.check_with_spec(spec)
