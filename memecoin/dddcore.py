"""Aggregate root and domain event building blocks."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field


@dataclass(frozen=True)
class DomainEvent:
    """Something that happened in the domain."""

    id: str
    name: str

    @classmethod
    def create(cls, name: str) -> DomainEvent:
        """Create an event with a fresh dashless UUID."""
        return cls(id=uuid.uuid4().hex, name=name)


@dataclass
class AggregateRoot:
    """Tracks whether an aggregate is new and the events it raised."""

    is_new: bool = False
    _events: list[DomainEvent] = field(default_factory=list, init=False, repr=False)

    def set_new(self) -> AggregateRoot:
        self.is_new = True
        return self

    def domain_events(self) -> list[DomainEvent]:
        """Return recorded events, keeping the first of each name."""
        seen: set[str] = set()
        unique = []
        for event in self._events:
            if event.name not in seen:
                seen.add(event.name)
                unique.append(event)
        return unique

    def has_domain_events(self) -> bool:
        return bool(self._events)

    def append_domain_event(self, *args: DomainEvent) -> AggregateRoot:
        self._events.extend(args)
        return self