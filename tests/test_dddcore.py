import string

from memecoin.dddcore import AggregateRoot, DomainEvent


def test_domain_event_create_has_dashless_uuid():
    event = DomainEvent.create("boost_created")
    assert event.name == "boost_created"
    assert len(event.id) == 32
    assert set(event.id) <= set(string.hexdigits.lower())


def test_domain_event_ids_are_unique():
    ids = {DomainEvent.create("e").id for _ in range(50)}
    assert len(ids) == 50


def test_aggregate_root_new_flag():
    root = AggregateRoot()
    assert root.is_new is False
    assert root.set_new() is root
    assert root.is_new is True


def test_no_events_initially():
    root = AggregateRoot()
    assert root.has_domain_events() is False
    assert root.domain_events() == []


def test_append_returns_self_and_records():
    root = AggregateRoot()
    event = DomainEvent.create("created")
    assert root.append_domain_event(event) is root
    assert root.has_domain_events() is True
    assert root.domain_events() == [event]


def test_append_nothing_keeps_empty():
    root = AggregateRoot().append_domain_event()
    assert root.has_domain_events() is False


def test_domain_events_unique_by_name_keeping_first():
    first = DomainEvent.create("created")
    second = DomainEvent.create("created")
    other = DomainEvent.create("poked")
    root = AggregateRoot().append_domain_event(first, other, second)
    assert root.domain_events() == [first, other]
    assert root.has_domain_events() is True


def test_events_not_shared_between_roots():
    a = AggregateRoot().append_domain_event(DomainEvent.create("x"))
    b = AggregateRoot()
    assert a.has_domain_events() is True
    assert b.has_domain_events() is False