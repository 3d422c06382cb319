"""Commands and queries accepted by the meme coin services."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CreateMemeCoinCommand:
    name: str
    description: str


@dataclass(frozen=True)
class GetMemeCoinQuery:
    id: str


@dataclass(frozen=True)
class UpdateMemeCoinCommand:
    id: str
    description: str


@dataclass(frozen=True)
class DeleteMemeCoinCommand:
    id: str


@dataclass(frozen=True)
class PokeMemeCoinCommand:
    id: str