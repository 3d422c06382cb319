"""Request and response bodies of the meme coin endpoints."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


def _string_field(payload: Any, name: str) -> str:
    if payload is None:
        return ""
    if not isinstance(payload, Mapping):
        raise ValueError(
            f"json: cannot unmarshal {type(payload).__name__} into request object"
        )
    if name in payload:
        value = payload[name]
    else:
        value = next(
            (item for key, item in payload.items() if str(key).lower() == name.lower()),
            None,
        )
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(
            f"json: cannot unmarshal {type(value).__name__} into field {name} of type string"
        )
    return value


@dataclass
class CreateMemeCoinRequest:
    name: str = ""
    description: str = ""

    @classmethod
    def from_json(cls, payload: Any) -> CreateMemeCoinRequest:
        """Build from a decoded JSON value; raise ValueError on a wrong shape."""
        return cls(
            name=_string_field(payload, "name"),
            description=_string_field(payload, "description"),
        )

    def validate(self) -> None:
        if not self.name:
            raise ValueError("invalid name")


@dataclass
class UpdateMemeCoinRequest:
    description: str = ""

    @classmethod
    def from_json(cls, payload: Any) -> UpdateMemeCoinRequest:
        """Build from a decoded JSON value; raise ValueError on a wrong shape."""
        return cls(description=_string_field(payload, "description"))

    def validate(self) -> None:
        if not self.description:
            raise ValueError("invalid description")


@dataclass(frozen=True)
class CreateMemeCoinResponse:
    id: str


@dataclass(frozen=True)
class GetMemeCoinResponse:
    id: str
    name: str
    description: str
    popularity_score: int
    created_at: str