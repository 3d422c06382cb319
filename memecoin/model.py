"""The meme coin aggregate and its value objects."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime

from memecoin import snowflake
from memecoin.dddcore import AggregateRoot, DomainEvent

MEME_COIN_EVENT_NAME = "boost_created"

_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1
_DECIMAL_RE = re.compile(r"[+-]?[0-9]+")


def new_created_event() -> DomainEvent:
    """Return the event raised when a meme coin is created."""
    return DomainEvent.create(MEME_COIN_EVENT_NAME)


def parse_id(id_text: str) -> int:
    """Parse a base-10 signed 64-bit meme coin id."""
    if not _DECIMAL_RE.fullmatch(id_text):
        raise ValueError(f"convert to int64: invalid syntax: {id_text!r}")
    value = int(id_text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError(f"convert to int64: value out of range: {id_text!r}")
    return value


@dataclass(frozen=True)
class PopularityScore:
    """A non-negative count of pokes."""

    value: int = 0

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("popularity score cannot be negative")

    @classmethod
    def parse(cls, value: int) -> PopularityScore:
        return cls(value)

    def increment(self) -> PopularityScore:
        return PopularityScore(self.value + 1)


@dataclass
class UpdatableFields:
    """Fields changed since the aggregate was loaded; ``None`` means unchanged."""

    description: str | None = None
    popularity_score: PopularityScore | None = None


@dataclass
class MemeCoin:
    """A meme coin aggregate."""

    id: int
    name: str
    description: str
    popularity_score: PopularityScore = field(default_factory=PopularityScore)
    created_at: datetime | None = None
    updated_at: datetime | None = None
    root: AggregateRoot = field(default_factory=AggregateRoot, repr=False)
    updated_fields: UpdatableFields = field(default_factory=UpdatableFields, repr=False)

    @classmethod
    def create(cls, name: str, description: str) -> MemeCoin:
        """Create a new coin with a fresh id and a creation event."""
        root = AggregateRoot().set_new()
        root.append_domain_event(new_created_event())
        return cls(
            id=snowflake.new_id(),
            name=name,
            description=description,
            root=root,
        )

    @classmethod
    def rebuild(
        cls,
        id: int,
        name: str,
        description: str,
        popularity_score: PopularityScore,
        created_at: datetime | None,
        updated_at: datetime | None,
    ) -> MemeCoin:
        """Restore a stored coin."""
        return cls(
            id=id,
            name=name,
            description=description,
            popularity_score=popularity_score,
            created_at=created_at,
            updated_at=updated_at,
        )

    @property
    def is_new(self) -> bool:
        return self.root.is_new

    def domain_events(self) -> list[DomainEvent]:
        return self.root.domain_events()

    def update_description(self, description: str) -> None:
        self.description = description
        self.updated_fields.description = description

    def poke(self) -> None:
        """Raise the popularity score by one."""
        score = self.popularity_score.increment()
        self.popularity_score = score
        self.updated_fields.popularity_score = score