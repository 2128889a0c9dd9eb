from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

CardKind = Literal["unit", "spell", "leader"]
Row = Literal["close_combat", "ranged", "siege"]
Faction = Literal["nilfgaard", "northern_realms", "scoia_tael", "monsters", "skellige", "neutral"]
Ability = Literal[
    "spy",
    "decoy",
    "medic",
    "scorch",
    "muster",
    "moral_boost",
    "tight_bond",
    "berserker",
    "transform",
]
WeatherKind = Literal["clear", "frost", "fog", "rain"]

Side = Literal["player", "opponent"]
Phase = Literal[
    "menu",
    "deck_building",
    "pre_match",
    "round_start",
    "in_progress",
    "round_end",
    "match_end",
]
Difficulty = Literal["easy", "medium", "hard"]

# Runtime mirrors of the literal sets, used to validate external input.
CARD_KINDS: tuple[CardKind, ...] = ("unit", "spell", "leader")
ROWS: tuple[Row, ...] = ("close_combat", "ranged", "siege")
ABILITIES: tuple[Ability, ...] = (
    "spy",
    "decoy",
    "medic",
    "scorch",
    "muster",
    "moral_boost",
    "tight_bond",
    "berserker",
    "transform",
)
WEATHER_KINDS: tuple[WeatherKind, ...] = ("clear", "frost", "fog", "rain")
SIDES: tuple[Side, ...] = ("player", "opponent")
DIFFICULTIES: tuple[Difficulty, ...] = ("easy", "medium", "hard")

# Lane each affliction lands on when played as a spell.
WEATHER_ROW: dict[WeatherKind, Row] = {
    "frost": "close_combat",
    "fog": "ranged",
    "rain": "siege",
}


def other_side(side: Side) -> Side:
    return "opponent" if side == "player" else "player"


@dataclass(frozen=True)
class Card:
    id: str
    name: str
    faction: Faction
    kind: CardKind
    power: int
    row: Row | None = None
    ability: Ability | None = None
    is_hero: bool = False
    weather: WeatherKind | None = None
    description: str = ""

    @property
    def is_unit(self) -> bool:
        return self.kind == "unit"

    def has(self, ability: Ability) -> bool:
        return self.ability == ability


@dataclass(frozen=True)
class CardDatabase:
    """Immutable card database used by the engine."""

    cards: dict[str, Card]
    decks: dict[str, tuple[str, ...]]

    def get(self, card_id: str) -> Card:
        return self.cards[card_id]
