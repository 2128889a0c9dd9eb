from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from .types import Row, Side, WeatherKind

RejectionReason = Literal[
    "not_your_turn",
    "card_not_in_hand",
    "row_mismatch",
    "not_in_progress",
    "invalid_action",
]


@dataclass(frozen=True)
class Rejection:
    reason: RejectionReason
    message: str


@dataclass(frozen=True)
class CardPlayed:
    side: Side
    card_id: str
    row: Row | None


@dataclass(frozen=True)
class Passed:
    side: Side


@dataclass(frozen=True)
class CardsScorched:
    burned: dict[Side, tuple[str, ...]] = field(default_factory=dict)


@dataclass(frozen=True)
class WeatherChanged:
    row: Row | None  # None means every lane
    weather: WeatherKind


@dataclass(frozen=True)
class RoundEnded:
    round: int
    winner: Side | None  # None on a tie
    powers: dict[Side, int]


@dataclass(frozen=True)
class MatchEnded:
    winner: Side


Event = CardPlayed | Passed | CardsScorched | WeatherChanged | RoundEnded | MatchEnded
