"""Application-level meme coin operations returning transport DTOs."""

from __future__ import annotations

from datetime import datetime, timezone

from memecoin import errors
from memecoin.domain_service import MemeCoinDomainService
from memecoin.dto import CreateMemeCoinResponse, GetMemeCoinResponse
from memecoin.logs import Logger
from memecoin.messages import (
    CreateMemeCoinCommand,
    DeleteMemeCoinCommand,
    GetMemeCoinQuery,
    PokeMemeCoinCommand,
    UpdateMemeCoinCommand,
)

_ZERO_TIME = "0001-01-01T00:00:00Z"


def _rfc3339(moment: datetime | None) -> str:
    if moment is None:
        return _ZERO_TIME
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    text = moment.replace(microsecond=0).isoformat()
    if text.endswith("+00:00"):
        return text[: -len("+00:00")] + "Z"
    return text


class MemeCoinAppService:
    """Runs domain use cases and shapes their results for the API."""

    def __init__(self, logger: Logger, domain_service: MemeCoinDomainService) -> None:
        self._logger = logger
        self._domain_service = domain_service

    def create_meme_coin(self, cmd: CreateMemeCoinCommand) -> CreateMemeCoinResponse:
        try:
            meme_coin = self._domain_service.create_meme_coin(cmd)
        except Exception as exc:
            raise errors.wrap(exc, "create meme coin") from exc
        return CreateMemeCoinResponse(id=str(meme_coin.id))

    def get_meme_coin(self, query: GetMemeCoinQuery) -> GetMemeCoinResponse:
        try:
            meme_coin = self._domain_service.get_meme_coin(query)
        except Exception as exc:
            raise errors.wrap(exc, "get meme coin") from exc
        return GetMemeCoinResponse(
            id=str(meme_coin.id),
            name=meme_coin.name,
            description=meme_coin.description,
            popularity_score=meme_coin.popularity_score.value,
            created_at=_rfc3339(meme_coin.created_at),
        )

    def update_meme_coin(self, cmd: UpdateMemeCoinCommand) -> None:
        try:
            self._domain_service.update_meme_coin(cmd)
        except Exception as exc:
            raise errors.wrap(exc, "update meme coin") from exc

    def delete_meme_coin(self, cmd: DeleteMemeCoinCommand) -> None:
        try:
            self._domain_service.delete_meme_coin(cmd)
        except Exception as exc:
            raise errors.wrap(exc, "delete meme coin") from exc

    def poke_meme_coin(self, cmd: PokeMemeCoinCommand) -> None:
        try:
            self._domain_service.poke_meme_coin(cmd)
        except Exception as exc:
            raise errors.wrap(exc, "poke meme coin") from exc