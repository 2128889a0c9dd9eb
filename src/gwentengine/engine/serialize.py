from __future__ import annotations

from dataclasses import asdict

from .actions import Action, PassAction, PlayCardAction
from .events import Event
from .match import Board, MatchState, PlayerState
from .types import ROWS, SIDES, Card


def action_to_dict(a: Action) -> dict[str, object]:
    if isinstance(a, PlayCardAction):
        return {
            "type": "play_card",
            "player": a.player,
            "card_id": a.card_id,
            "target_row": a.target_row,
        }
    if isinstance(a, PassAction):
        return {"type": "pass", "player": a.player}
    # should be unreachable
    return {"type": "unknown"}


def event_to_dict(ev: Event) -> dict[str, object]:
    d: dict[str, object] = {"type": type(ev).__name__}
    d.update(asdict(ev))
    return d


def _ids(cards: list[Card]) -> list[str]:
    return [c.id for c in cards]


def _player_to_dict(p: PlayerState) -> dict[str, object]:
    return {
        "id": p.id,
        "name": p.name,
        "faction": p.faction,
        "deck": _ids(p.deck),
        "hand": _ids(p.hand),
        "discard": _ids(p.discard),
        "lives_remaining": p.lives_remaining,
        "has_passed": p.has_passed,
    }


def _board_to_dict(b: Board) -> dict[str, object]:
    return {
        "rows": {side: {row: _ids(b.rows[side][row]) for row in ROWS} for side in SIDES},
        "weather": {row: b.weather[row] for row in ROWS},
        "power": {side: b.power(side) for side in SIDES},
    }


def snapshot(state: MatchState) -> dict[str, object]:
    """Return a JSON-serializable canonical snapshot of the current match state."""
    return {
        "phase": state.phase,
        "current_player": state.current_player,
        "current_round": state.current_round,
        "round_wins": dict(state.round_wins),
        "selected_card": state.selected_card,
        "is_game_over": state.is_game_over,
        "winner": state.winner,
        "players": {side: _player_to_dict(state.players[side]) for side in SIDES},
        "board": _board_to_dict(state.board),
        "action_log": [action_to_dict(a) for a in state.action_log],
    }
