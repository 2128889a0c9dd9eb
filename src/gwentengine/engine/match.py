from __future__ import annotations

import copy
import logging
import random
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from .actions import Action, PassAction, PlayCardAction
from .events import (
    CardPlayed,
    CardsScorched,
    Event,
    MatchEnded,
    Passed,
    Rejection,
    RejectionReason,
    RoundEnded,
    WeatherChanged,
)
from .power import side_power
from .types import (
    ROWS,
    SIDES,
    WEATHER_ROW,
    Card,
    Faction,
    Phase,
    Row,
    Side,
    WeatherKind,
    other_side,
)

logger = logging.getLogger(__name__)


class EngineError(RuntimeError):
    pass


@dataclass(frozen=True)
class MatchConfig:
    starting_hand: int = 10
    round_draw: int = 2
    rounds_to_win: int = 2
    starting_lives: int = 2
    first_player: Side = "player"
    min_deck_size: int = 10


def _empty_rows() -> dict[Row, list[Card]]:
    return {row: [] for row in ROWS}


def _clear_weather() -> dict[Row, WeatherKind]:
    return {row: "clear" for row in ROWS}


@dataclass
class Board:
    rows: dict[Side, dict[Row, list[Card]]]
    weather: dict[Row, WeatherKind]

    @staticmethod
    def empty() -> "Board":
        return Board(rows={side: _empty_rows() for side in SIDES}, weather=_clear_weather())

    def cards_on(self, side: Side) -> list[Card]:
        return [c for row in ROWS for c in self.rows[side][row]]

    def power(self, side: Side) -> int:
        return side_power(self.rows[side], self.weather)


@dataclass
class PlayerState:
    id: Side
    name: str
    faction: Faction
    deck: list[Card]
    hand: list[Card]
    discard: list[Card] = field(default_factory=list)
    lives_remaining: int = 2
    has_passed: bool = False

    def find_in_hand(self, card_id: str) -> int | None:
        for i, c in enumerate(self.hand):
            if c.id == card_id:
                return i
        return None


@dataclass
class StepResult:
    ok: bool
    state: "MatchState"
    events: list[Event] = field(default_factory=list)
    rejection: Rejection | None = None

    @property
    def round_ended(self) -> RoundEnded | None:
        for ev in self.events:
            if isinstance(ev, RoundEnded):
                return ev
        return None

    @property
    def match_ended(self) -> MatchEnded | None:
        for ev in self.events:
            if isinstance(ev, MatchEnded):
                return ev
        return None


@dataclass
class MatchState:
    config: MatchConfig
    players: dict[Side, PlayerState]
    board: Board
    phase: Phase = "pre_match"
    current_player: Side = "player"
    current_round: int = 1
    round_wins: dict[Side, int] = field(default_factory=lambda: {"player": 0, "opponent": 0})
    selected_card: str | None = None
    is_game_over: bool = False
    winner: Side | None = None
    dealt: bool = False
    action_log: list[Action] = field(default_factory=list)

    def opponent(self, side: Side) -> Side:
        return other_side(side)

    def player(self, side: Side) -> PlayerState:
        try:
            return self.players[side]
        except KeyError as e:
            raise EngineError(f"Unknown side: {side!r}") from e

    def power(self, side: Side) -> int:
        return self.board.power(side)

    def total_cards(self, side: Side) -> int:
        ps = self.player(side)
        return len(ps.deck) + len(ps.hand) + len(ps.discard) + len(self.board.cards_on(side))


def shuffle(cards: Sequence[Card], rng: random.Random) -> list[Card]:
    """Return a shuffled copy; the input sequence is left untouched."""
    out = list(cards)
    rng.shuffle(out)
    return out


def _draw(ps: PlayerState, count: int) -> int:
    drawn = ps.deck[:count]
    del ps.deck[:count]
    ps.hand.extend(drawn)
    return len(drawn)


def _reject(state: MatchState, reason: RejectionReason, message: str) -> StepResult:
    logger.warning("Rejected action (%s): %s", reason, message)
    return StepResult(ok=False, state=state, rejection=Rejection(reason=reason, message=message))


def _check_turn(state: MatchState, side: Side) -> StepResult | None:
    if side != state.current_player:
        return _reject(state, "not_your_turn", "Not your turn.")
    return None


def _scorch(state: MatchState) -> CardsScorched | None:
    """Burn the strongest non-hero unit(s) on both battlefields."""
    targets = [
        c
        for side in SIDES
        for c in state.board.cards_on(side)
        if c.is_unit and not c.is_hero
    ]
    if not targets:
        return None
    top = max(c.power for c in targets)
    burned: dict[Side, tuple[str, ...]] = {}
    for side in SIDES:
        ids: list[str] = []
        for row in ROWS:
            kept: list[Card] = []
            for c in state.board.rows[side][row]:
                if c.is_unit and not c.is_hero and c.power == top:
                    state.players[side].discard.append(c)
                    ids.append(c.id)
                else:
                    kept.append(c)
            state.board.rows[side][row] = kept
        if ids:
            burned[side] = tuple(ids)
    return CardsScorched(burned=burned)


def _apply_weather(state: MatchState, kind: WeatherKind) -> WeatherChanged:
    if kind == "clear":
        state.board.weather = _clear_weather()
        return WeatherChanged(row=None, weather="clear")
    row = WEATHER_ROW[kind]
    state.board.weather[row] = kind
    return WeatherChanged(row=row, weather=kind)


def _validate_play(state: MatchState, action: PlayCardAction) -> StepResult | int:
    chk = _check_turn(state, action.player)
    if chk:
        return chk
    ps = state.player(action.player)
    idx = ps.find_in_hand(action.card_id)
    if idx is None:
        return _reject(state, "card_not_in_hand", f"Card {action.card_id!r} is not in hand.")
    if action.target_row is not None and action.target_row not in ROWS:
        return _reject(state, "row_mismatch", f"Unknown row {action.target_row!r}.")
    card = ps.hand[idx]
    if card.is_unit and (card.row is None or action.target_row != card.row):
        return _reject(
            state, "row_mismatch", f"{card.name} must be played to {card.row}, not {action.target_row}."
        )
    return idx


def _play_card(state: MatchState, action: PlayCardAction) -> StepResult:
    checked = _validate_play(state, action)
    if isinstance(checked, StepResult):
        return checked

    new = copy.deepcopy(state)
    side = action.player
    ps = new.players[side]
    card = ps.hand.pop(checked)
    events: list[Event] = []

    if card.has("scorch"):
        scorched = _scorch(new)
        if scorched is not None:
            events.append(scorched)

    if card.is_unit:
        assert card.row is not None
        new.board.rows[side][card.row].append(card)
        events.insert(0, CardPlayed(side=side, card_id=card.id, row=card.row))
    else:
        ps.discard.append(card)
        events.insert(0, CardPlayed(side=side, card_id=card.id, row=None))
        if card.weather is not None:
            events.append(_apply_weather(new, card.weather))

    new.selected_card = None
    # A side that has passed sits out the rest of the round.
    if not new.players[new.opponent(side)].has_passed:
        new.current_player = new.opponent(side)
    new.action_log.append(action)
    logger.debug("%s played %s", side, card.id)
    return StepResult(ok=True, state=new, events=events)


def _start_next_round(state: MatchState) -> None:
    for side in SIDES:
        state.players[side].discard.extend(state.board.cards_on(side))
    state.board = Board.empty()
    state.current_round += 1
    for side in SIDES:
        ps = state.players[side]
        ps.has_passed = False
        _draw(ps, state.config.round_draw)
    state.phase = "in_progress"


def _resolve_round(state: MatchState) -> list[Event]:
    powers: dict[Side, int] = {side: state.power(side) for side in SIDES}
    winner: Side | None = None
    if powers["player"] > powers["opponent"]:
        winner = "player"
    elif powers["opponent"] > powers["player"]:
        winner = "opponent"
    # Ties award nothing to either side.
    if winner is not None:
        state.round_wins[winner] += 1
    state.phase = "round_end"
    events: list[Event] = [RoundEnded(round=state.current_round, winner=winner, powers=powers)]
    logger.info(
        "Round %d ended %d-%d, winner: %s",
        state.current_round,
        powers["player"],
        powers["opponent"],
        winner or "tie",
    )

    for side in SIDES:
        if state.round_wins[side] >= state.config.rounds_to_win:
            state.is_game_over = True
            state.winner = side
            state.phase = "match_end"
            events.append(MatchEnded(winner=side))
            logger.info("Match ended, winner: %s", side)
            return events

    _start_next_round(state)
    return events


def _pass(state: MatchState, action: PassAction) -> StepResult:
    chk = _check_turn(state, action.player)
    if chk:
        return chk

    new = copy.deepcopy(state)
    side = action.player
    new.players[side].has_passed = True
    new.action_log.append(action)
    events: list[Event] = [Passed(side=side)]
    logger.debug("%s passed", side)

    if all(new.players[s].has_passed for s in SIDES):
        events.extend(_resolve_round(new))
    else:
        new.current_player = new.opponent(side)
    return StepResult(ok=True, state=new, events=events)


def step(state: MatchState, action: Action) -> StepResult:
    """Apply a single action and return the resulting state.

    The input state is never mutated. On rejection the result carries the
    original state object unchanged.
    """
    if state.phase != "in_progress":
        if state.is_game_over:
            return _reject(state, "not_in_progress", "Match already ended.")
        return _reject(state, "not_in_progress", f"No round in progress (phase: {state.phase}).")

    if isinstance(action, PlayCardAction):
        return _play_card(state, action)
    if isinstance(action, PassAction):
        return _pass(state, action)
    return _reject(state, "invalid_action", f"Unknown action: {action!r}.")


def select_card(state: MatchState, side: Side, card_id: str | None) -> StepResult:
    """Highlight a card in hand before committing to play it. None clears."""
    if state.phase != "in_progress":
        return _reject(state, "not_in_progress", "No round in progress.")
    chk = _check_turn(state, side)
    if chk:
        return chk
    if card_id is not None and state.player(side).find_in_hand(card_id) is None:
        return _reject(state, "card_not_in_hand", f"Card {card_id!r} is not in hand.")
    new = copy.deepcopy(state)
    new.selected_card = card_id
    return StepResult(ok=True, state=new)


def _deck_faction(deck: Sequence[Card]) -> Faction:
    for c in deck:
        if c.faction != "neutral":
            return c.faction
    return "neutral"


def new_match(
    deck_player: Sequence[Card],
    deck_opponent: Sequence[Card],
    rng: random.Random,
    config: MatchConfig | None = None,
) -> MatchState:
    cfg = config or MatchConfig()
    if len(deck_player) < cfg.min_deck_size or len(deck_opponent) < cfg.min_deck_size:
        raise ValueError(f"Decks must hold at least {cfg.min_deck_size} cards.")

    players: dict[Side, PlayerState] = {}
    for side, deck, name in (
        ("player", deck_player, "Player"),
        ("opponent", deck_opponent, "AI Opponent"),
    ):
        players[side] = PlayerState(
            id=side,
            name=name,
            faction=_deck_faction(deck),
            deck=shuffle(deck, rng),
            hand=[],
            lives_remaining=cfg.starting_lives,
        )

    return MatchState(
        config=cfg,
        players=players,
        board=Board.empty(),
        phase="pre_match",
        current_player=cfg.first_player,
    )


def deal_initial_hands(state: MatchState) -> MatchState:
    if state.dealt:
        raise EngineError("Initial hands have already been dealt.")
    new = copy.deepcopy(state)
    for side in SIDES:
        _draw(new.players[side], new.config.starting_hand)
    new.dealt = True
    new.phase = "in_progress"
    logger.debug(
        "Dealt initial hands: player=%d opponent=%d",
        len(new.players["player"].hand),
        len(new.players["opponent"].hand),
    )
    return new


def start_match(
    deck_player: Sequence[Card],
    deck_opponent: Sequence[Card],
    rng: random.Random,
    config: MatchConfig | None = None,
) -> MatchState:
    return deal_initial_hands(new_match(deck_player, deck_opponent, rng, config))


def replay(
    deck_player: Sequence[Card],
    deck_opponent: Sequence[Card],
    seed: int,
    actions: Iterable[Action],
    config: MatchConfig | None = None,
) -> MatchState:
    state = start_match(deck_player, deck_opponent, random.Random(seed), config)
    for a in actions:
        state = step(state, a).state
        if state.is_game_over:
            break
    return state
