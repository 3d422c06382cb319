import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from memecoin import errors
from memecoin.dao import MemeCoinDao, MemeCoinRecord
from memecoin.database import SessionTransactionManager
from memecoin.dddcore import AggregateRoot
from memecoin.errors import WrappedError
from memecoin.model import MemeCoin


@pytest.fixture
def txm():
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    ).execution_options(schema_translate_map={"meme_coin": None})
    MemeCoinRecord.metadata.create_all(engine)
    yield SessionTransactionManager(sessionmaker(bind=engine, expire_on_commit=False))
    engine.dispose()


@pytest.fixture
def dao(txm):
    return MemeCoinDao(txm)


def _new_coin(coin_id, name="doge"):
    return MemeCoin(
        id=coin_id,
        name=name,
        description="such wow",
        root=AggregateRoot().set_new(),
    )


def test_create_then_get_round_trip(dao):
    coin = _new_coin(101)
    dao.create(coin)
    loaded = dao.get_by_id(coin.id)
    assert (loaded.id, loaded.name, loaded.description, loaded.popularity_score) == (
        coin.id,
        coin.name,
        coin.description,
        coin.popularity_score,
    )
    assert loaded.is_new is False
    assert loaded.created_at is not None and loaded.updated_at is not None


def test_update_writes_changed_fields(dao):
    dao.create(_new_coin(102))
    loaded = dao.get_by_id(102)
    loaded.update_description("much update")
    loaded.poke()
    dao.update(loaded)
    again = dao.get_by_id(102)
    assert again.description == "much update"
    assert again.popularity_score == loaded.popularity_score
    assert again.name == loaded.name


def test_update_without_changes_keeps_values(dao):
    coin = _new_coin(103)
    dao.create(coin)
    before = dao.get_by_id(103)
    dao.update(before)
    after = dao.get_by_id(103)
    assert (after.description, after.popularity_score) == (
        before.description,
        before.popularity_score,
    )
    assert after.updated_at >= before.updated_at


def test_delete_removes_row(dao):
    coin = _new_coin(104)
    dao.create(coin)
    dao.delete(coin)
    with pytest.raises(WrappedError) as info:
        dao.get_by_id(coin.id)
    assert isinstance(errors.cause(info.value), LookupError)
    assert str(info.value).startswith("tx get by id")


def test_duplicate_id_is_reported(dao):
    dao.create(_new_coin(105))
    with pytest.raises(WrappedError) as info:
        dao.create(_new_coin(105, name="shiba"))
    assert str(info.value).startswith("tx create")
    assert errors.cause_custom_error(info.value) is None


def test_create_inside_failed_transaction_is_rolled_back(txm, dao):
    coin = _new_coin(106)

    def work():
        dao.create(coin)
        raise RuntimeError("abort")

    with pytest.raises(RuntimeError):
        txm.execute(work)
    with pytest.raises(WrappedError):
        dao.get_by_id(coin.id)


def test_get_inside_transaction_sees_uncommitted_row(txm, dao):
    coin = _new_coin(107)

    def work():
        dao.create(coin)
        return dao.get_by_id(coin.id)

    assert txm.execute(work).name == coin.name


def test_to_aggregate_rejects_negative_score():
    record = MemeCoinRecord(id=1, name="n", description="d", popularity_score=-1)
    with pytest.raises(ValueError, match="parse popularity score"):
        record.to_aggregate()