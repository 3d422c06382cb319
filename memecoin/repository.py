"""Storage of meme coin aggregates."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from memecoin import errors
from memecoin.model import MemeCoin


class MemeCoinRepository(ABC):
    """Where meme coin aggregates are kept."""

    @abstractmethod
    def save(self, meme_coin: MemeCoin) -> None:
        """Store a new coin or its changes."""

    @abstractmethod
    def delete(self, meme_coin: MemeCoin) -> None:
        """Remove a coin."""

    @abstractmethod
    def get_by_id(self, id: int) -> MemeCoin:
        """Load a coin by id."""


class DaoMemeCoinRepository(MemeCoinRepository):
    """A repository backed by a meme coin DAO."""

    def __init__(self, dao: Any) -> None:
        self._dao = dao

    def save(self, meme_coin: MemeCoin) -> None:
        """Insert new coins, update the others."""
        try:
            if meme_coin.is_new:
                self._dao.create(meme_coin)
            else:
                self._dao.update(meme_coin)
        except Exception as exc:
            raise errors.wrap(exc, "create") from exc

    def delete(self, meme_coin: MemeCoin) -> None:
        self._dao.delete(meme_coin)

    def get_by_id(self, id: int) -> MemeCoin:
        return self._dao.get_by_id(id)