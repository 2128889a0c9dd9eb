"""Row and side power calculation.

Stages run in a fixed order: tight bond, then moral boost, then weather.
Weather clamps every non-hero card to 1 and overrides both earlier stages.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping, Sequence

from .types import ROWS, Card, Row, WeatherKind


def weather_active(kind: WeatherKind) -> bool:
    return kind != "clear"


def _tight_bond(cards: Sequence[Card]) -> list[int]:
    counts = Counter(c.name for c in cards if c.has("tight_bond"))
    return [c.power * counts[c.name] if c.has("tight_bond") else c.power for c in cards]


def _moral_boost(cards: Sequence[Card], powers: list[int]) -> list[int]:
    # Presence check: several boosters still grant only +1.
    if not any(c.has("moral_boost") for c in cards):
        return powers
    return [
        p + 1 if c.is_unit and not c.has("moral_boost") else p
        for c, p in zip(cards, powers)
    ]


def effective_powers(cards: Sequence[Card], weather_is_active: bool) -> list[int]:
    powers = _moral_boost(cards, _tight_bond(cards))
    if weather_is_active:
        powers = [p if c.is_hero else 1 for c, p in zip(cards, powers)]
    return powers


def row_power(cards: Sequence[Card], weather_is_active: bool) -> int:
    return sum(effective_powers(cards, weather_is_active))


def side_power(rows: Mapping[Row, Sequence[Card]], weather: Mapping[Row, WeatherKind]) -> int:
    total = 0
    for row in ROWS:
        total += row_power(rows.get(row, ()), weather_active(weather.get(row, "clear")))
    return total
