"""Entry types and the constraints a renderer matches them against.

An `EntryTypeSpec` mirrors the `parent` tree of an entry: its `here`
constraint applies to the entry itself and every nested spec in `parents`
must be satisfied by at least one of the entry's parents. A spec such as
"article inside a periodical" reads::

    EntryTypeSpec.of(
        EntryType.ARTICLE,
        parents=[EntryTypeSpec.of(EntryType.PERIODICAL)],
    )
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum


class EntryType(Enum):
    """The kinds of works an entry can describe."""

    ARTICLE = "article"
    CHAPTER = "chapter"
    ENTRY = "entry"
    ANTHOS = "anthos"
    REPORT = "report"
    THESIS = "thesis"
    WEB = "web"
    SCENE = "scene"
    ARTWORK = "artwork"
    PATENT = "patent"
    CASE = "case"
    NEWSPAPER = "newspaper"
    LEGISLATION = "legislation"
    MANUSCRIPT = "manuscript"
    TWEET = "tweet"
    MISC = "misc"
    PERIODICAL = "periodical"
    PROCEEDINGS = "proceedings"
    BOOK = "book"
    BLOG = "blog"
    REFERENCE = "reference"
    CONFERENCE = "conference"
    ANTHOLOGY = "anthology"
    THREAD = "thread"
    VIDEO = "video"
    AUDIO = "audio"
    EXHIBITION = "exhibition"
    REPOSITORY = "repository"

    @classmethod
    def parse(cls, text: str) -> EntryType | None:
        """Return the entry type named by ``text``, ignoring case."""
        try:
            return cls(text.strip().lower())
        except ValueError:
            return None

    def check(self, constraint: TypeConstraint) -> bool:
        return constraint.accepts(self)


@dataclass(frozen=True, slots=True)
class TypeConstraint:
    """Predicate over a single entry type.

    ``types`` of None accepts every type. With ``negated`` set the listed
    types are rejected and every other type is accepted.
    """

    types: frozenset[EntryType] | None = None
    negated: bool = False

    @classmethod
    def specific(cls, entry_type: EntryType) -> TypeConstraint:
        return cls(frozenset({entry_type}))

    @classmethod
    def alternate(cls, *entry_types: EntryType) -> TypeConstraint:
        return cls(frozenset(entry_types))

    @classmethod
    def any(cls) -> TypeConstraint:
        return cls()

    @classmethod
    def not_(cls, *entry_types: EntryType) -> TypeConstraint:
        return cls(frozenset(entry_types), negated=True)

    def accepts(self, entry_type: EntryType) -> bool:
        if self.types is None:
            return not self.negated
        return (entry_type in self.types) != self.negated


@dataclass(frozen=True, slots=True)
class EntryTypeSpec:
    """Constraint on an entry type and, recursively, on its parents."""

    here: TypeConstraint
    parents: tuple[EntryTypeSpec, ...] = ()

    @classmethod
    def of(
        cls,
        *entry_types: EntryType,
        parents: Iterable[EntryTypeSpec] = (),
    ) -> EntryTypeSpec:
        """Build a spec accepting any of ``entry_types`` (or any type if empty)."""
        here = TypeConstraint.alternate(*entry_types) if entry_types else TypeConstraint.any()
        return cls(here, tuple(parents))


__all__ = ["EntryType", "EntryTypeSpec", "TypeConstraint"]
