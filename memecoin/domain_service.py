"""Use cases on the meme coin aggregate."""

from __future__ import annotations

import contextlib
from collections.abc import Iterator

from memecoin import errors
from memecoin.database import TransactionManager
from memecoin.logs import Logger
from memecoin.messages import (
    CreateMemeCoinCommand,
    DeleteMemeCoinCommand,
    GetMemeCoinQuery,
    PokeMemeCoinCommand,
    UpdateMemeCoinCommand,
)
from memecoin.model import MemeCoin, parse_id
from memecoin.repository import MemeCoinRepository


@contextlib.contextmanager
def _annotate(message: str) -> Iterator[None]:
    try:
        yield
    except Exception as exc:
        raise errors.wrap(exc, message) from exc


class MemeCoinDomainService:
    """Creates, reads, changes and removes meme coins."""

    def __init__(
        self,
        logger: Logger,
        repository: MemeCoinRepository,
        transaction_manager: TransactionManager,
    ) -> None:
        self._logger = logger
        self._repository = repository
        self._txm = transaction_manager

    def create_meme_coin(self, cmd: CreateMemeCoinCommand) -> MemeCoin:
        def create() -> MemeCoin:
            meme_coin = MemeCoin.create(cmd.name, cmd.description)
            with _annotate("save"):
                self._repository.save(meme_coin)
            return meme_coin

        with _annotate("transaction manager execute"):
            return self._txm.execute(create)

    def get_meme_coin(self, query: GetMemeCoinQuery) -> MemeCoin:
        with _annotate("parse id"):
            coin_id = parse_id(query.id)
        with _annotate("get by id"):
            return self._repository.get_by_id(coin_id)

    def _load(self, coin_id: int) -> MemeCoin:
        with _annotate("get by id"):
            return self._repository.get_by_id(coin_id)

    def update_meme_coin(self, cmd: UpdateMemeCoinCommand) -> None:
        with _annotate("parse id"):
            coin_id = parse_id(cmd.id)

        def change() -> None:
            meme_coin = self._load(coin_id)
            meme_coin.update_description(cmd.description)
            with _annotate("save"):
                self._repository.save(meme_coin)

        with _annotate("transaction manager execute"):
            self._txm.execute(change)

    def delete_meme_coin(self, cmd: DeleteMemeCoinCommand) -> None:
        with _annotate("parse id"):
            coin_id = parse_id(cmd.id)

        def remove() -> None:
            meme_coin = self._load(coin_id)
            with _annotate("save"):
                self._repository.delete(meme_coin)

        with _annotate("transaction manager execute"):
            self._txm.execute(remove)

    def poke_meme_coin(self, cmd: PokeMemeCoinCommand) -> None:
        with _annotate("parse id"):
            coin_id = parse_id(cmd.id)

        def poke() -> None:
            meme_coin = self._load(coin_id)
            meme_coin.poke()
            with _annotate("save"):
                self._repository.save(meme_coin)

        with _annotate("transaction manager execute"):
            self._txm.execute(poke)