import io

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from memecoin import snowflake
from memecoin.dao import MemeCoinDao, MemeCoinRecord
from memecoin.database import SessionTransactionManager
from memecoin.domain_service import MemeCoinDomainService
from memecoin.errors import WrappedError
from memecoin.logs import Logger
from memecoin.messages import (
    CreateMemeCoinCommand,
    DeleteMemeCoinCommand,
    GetMemeCoinQuery,
    PokeMemeCoinCommand,
    UpdateMemeCoinCommand,
)
from memecoin.repository import DaoMemeCoinRepository


def _logger():
    return Logger(stream=io.StringIO())


@pytest.fixture(autouse=True)
def id_generator(monkeypatch):
    monkeypatch.setattr(snowflake, "_instance", snowflake.Snowflake(1, 2, _logger()))


class FakeTransactionManager:
    def __init__(self):
        self.calls = 0

    def execute(self, fn):
        self.calls += 1
        return fn()


class FakeRepository:
    def __init__(self, error=None):
        self.saved = []
        self.error = error

    def save(self, coin):
        if self.error is not None:
            raise self.error
        self.saved.append(coin)


@pytest.fixture
def service():
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    ).execution_options(schema_translate_map={"meme_coin": None})
    MemeCoinRecord.metadata.create_all(engine)
    txm = SessionTransactionManager(sessionmaker(bind=engine, expire_on_commit=False))
    repository = DaoMemeCoinRepository(MemeCoinDao(txm))
    yield MemeCoinDomainService(_logger(), repository, txm)
    engine.dispose()


def test_create_meme_coin_returns_new_coin():
    txm = FakeTransactionManager()
    repository = FakeRepository()
    svc = MemeCoinDomainService(_logger(), repository, txm)
    cmd = CreateMemeCoinCommand(name="TestCoin", description="This is a test meme coin")

    result = svc.create_meme_coin(cmd)

    assert result.name == "TestCoin"
    assert result.description == "This is a test meme coin"
    assert txm.calls == 1
    assert [(c.name, c.description) for c in repository.saved] == [
        ("TestCoin", "This is a test meme coin")
    ]


def test_create_meme_coin_wraps_save_failure():
    svc = MemeCoinDomainService(
        _logger(), FakeRepository(error=RuntimeError("boom")), FakeTransactionManager()
    )
    with pytest.raises(WrappedError) as info:
        svc.create_meme_coin(CreateMemeCoinCommand(name="TestCoin", description="d"))
    assert str(info.value) == "transaction manager execute: save: boom"


def test_get_returns_created_coin(service):
    created = service.create_meme_coin(CreateMemeCoinCommand(name="TestCoin", description="d"))
    loaded = service.get_meme_coin(GetMemeCoinQuery(id=str(created.id)))
    assert (loaded.id, loaded.name, loaded.popularity_score.value) == (created.id, "TestCoin", 0)


def test_update_changes_description(service):
    created = service.create_meme_coin(CreateMemeCoinCommand(name="TestCoin", description="d"))
    service.update_meme_coin(UpdateMemeCoinCommand(id=str(created.id), description="new"))
    loaded = service.get_meme_coin(GetMemeCoinQuery(id=str(created.id)))
    assert loaded.description == "new"


def test_poke_increments_score(service):
    created = service.create_meme_coin(CreateMemeCoinCommand(name="TestCoin", description="d"))
    service.poke_meme_coin(PokeMemeCoinCommand(id=str(created.id)))
    service.poke_meme_coin(PokeMemeCoinCommand(id=str(created.id)))
    loaded = service.get_meme_coin(GetMemeCoinQuery(id=str(created.id)))
    assert loaded.popularity_score.value == 2


def test_delete_removes_coin(service):
    created = service.create_meme_coin(CreateMemeCoinCommand(name="TestCoin", description="d"))
    service.delete_meme_coin(DeleteMemeCoinCommand(id=str(created.id)))
    with pytest.raises(WrappedError) as info:
        service.get_meme_coin(GetMemeCoinQuery(id=str(created.id)))
    assert str(info.value).startswith("get by id")


def test_update_missing_coin_fails_in_transaction(service):
    with pytest.raises(WrappedError) as info:
        service.update_meme_coin(UpdateMemeCoinCommand(id="42", description="new"))
    assert str(info.value).startswith("transaction manager execute: get by id")


@pytest.mark.parametrize(
    "call",
    [
        lambda s: s.get_meme_coin(GetMemeCoinQuery(id="abc")),
        lambda s: s.update_meme_coin(UpdateMemeCoinCommand(id="abc", description="x")),
        lambda s: s.delete_meme_coin(DeleteMemeCoinCommand(id="abc")),
        lambda s: s.poke_meme_coin(PokeMemeCoinCommand(id="abc")),
    ],
)
def test_invalid_id_is_rejected(service, call):
    with pytest.raises(WrappedError) as info:
        call(service)
    assert str(info.value).startswith("parse id")