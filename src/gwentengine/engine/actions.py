from __future__ import annotations

from dataclasses import dataclass

from .types import Row, Side


@dataclass(frozen=True)
class PlayCardAction:
    player: Side
    card_id: str
    target_row: Row | None = None


@dataclass(frozen=True)
class PassAction:
    player: Side


Action = PlayCardAction | PassAction
