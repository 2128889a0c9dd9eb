from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Sequence

from .actions import Action, PassAction, PlayCardAction
from .match import MatchState, StepResult, step
from .types import Ability, Card, Difficulty, Row, Side, other_side

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AISpec:
    """AI tuning parameters.

    difficulty:
      easy   = random plays, passes at random
      medium = compares board power, holds back strong cards
      hard   = bluffs, tracks resources, scores every candidate
    """

    difficulty: Difficulty = "medium"
    easy_pass_chance: float = 0.3
    medium_lead_margin: int = 15
    medium_pass_chance: float = 0.6
    hard_lead_margin: int = 10
    hard_hand_reserve: int = 5
    hard_pass_chance: float = 0.7


@dataclass(frozen=True)
class AIDecision:
    action: Action
    reasoning: str

    @property
    def is_pass(self) -> bool:
        return isinstance(self.action, PassAction)


def playable_cards(hand: Sequence[Card]) -> list[Card]:
    return [c for c in hand if (c.is_unit and c.row is not None) or c.kind == "spell"]


def card_priority(card: Card) -> int:
    if card.is_hero:
        return 5
    if card.has("spy") or card.has("medic"):
        return 4
    if card.has("scorch"):
        return 3
    if card.power >= 8:
        return 3
    if card.power >= 5:
        return 2
    return 1


def _play(side: Side, card: Card, reasoning: str, default_row: Row = "close_combat") -> AIDecision:
    row = card.row or default_row
    return AIDecision(action=PlayCardAction(player=side, card_id=card.id, target_row=row), reasoning=reasoning)


def _pass(side: Side, reasoning: str) -> AIDecision:
    return AIDecision(action=PassAction(player=side), reasoning=reasoning)


def _strongest(cards: Sequence[Card]) -> Card | None:
    best: Card | None = None
    for c in cards:
        if best is None or c.power > best.power:
            best = c
    return best


def _weakest_viable(cards: Sequence[Card]) -> Card:
    # Late spies waste their card advantage, so they are never the cheap play.
    non_spy = [c for c in cards if not c.has("spy")]
    if not non_spy:
        return cards[0]
    best = non_spy[0]
    for c in non_spy[1:]:
        if c.power < best.power:
            best = c
    return best


def _first_with(cards: Sequence[Card], ability: Ability) -> Card | None:
    for c in cards:
        if c.has(ability):
            return c
    return None


def _decide_easy(state: MatchState, side: Side, spec: AISpec, rng: random.Random) -> AIDecision:
    playable = playable_cards(state.player(side).hand)
    if not playable:
        return _pass(side, "No playable cards")
    if rng.random() < spec.easy_pass_chance:
        return _pass(side, "Random pass")
    return _play(side, rng.choice(playable), "Random play")


def _decide_medium(state: MatchState, side: Side, spec: AISpec, rng: random.Random) -> AIDecision:
    playable = playable_cards(state.player(side).hand)
    if not playable:
        return _pass(side, "No playable cards")

    own = state.power(side)
    theirs = state.power(other_side(side))

    if own - theirs > spec.medium_lead_margin and state.current_round > 1:
        if rng.random() < spec.medium_pass_chance:
            return _pass(side, "Winning by large margin")

    if state.current_round == 1:
        spy = _first_with(playable, "spy")
        if spy is not None:
            return _play(side, spy, "Playing spy for card advantage")

    if theirs > own:
        strongest = _strongest(playable)
        assert strongest is not None
        return _play(side, strongest, "Playing strongest card while losing")

    ranked = sorted(playable, key=card_priority, reverse=True)
    return _play(side, ranked[len(ranked) // 3], "Strategic medium power play")


def score_card(card: Card, state: MatchState, side: Side) -> float:
    score = float(card.power)

    if card.has("spy"):
        score += 20
    if card.has("medic"):
        score += 15
    if card.has("scorch"):
        score += 10
    if card.is_hero:
        score += 25

    if state.current_round == 1:
        if card.has("spy"):
            score += 10
    elif state.current_round == 3:
        score += card.power * 0.5

    if state.round_wins[other_side(side)] > state.round_wins[side]:
        score += card.power * 0.3

    return score


def _decide_hard(state: MatchState, side: Side, spec: AISpec, rng: random.Random) -> AIDecision:
    ps = state.player(side)
    playable = playable_cards(ps.hand)
    if not playable:
        return _pass(side, "No playable cards")

    enemy = other_side(side)
    power_diff = state.power(side) - state.power(enemy)
    hand_size = len(ps.hand)

    if state.round_wins[side] > state.round_wins[enemy] and state.current_round == 2:
        if power_diff > spec.hard_lead_margin or hand_size > spec.hard_hand_reserve:
            if rng.random() < spec.hard_pass_chance:
                return _pass(side, "Bluffing to save cards for final round")

    spy = _first_with(playable, "spy")
    if spy is not None and state.current_round <= 2 and hand_size <= 8:
        return _play(side, spy, "Strategic spy play for card advantage")

    medic = _first_with(playable, "medic")
    if medic is not None and any(not c.is_hero and c.power >= 6 for c in ps.discard):
        return _play(side, medic, "Using medic to resurrect strong card", default_row="siege")

    scorch = _first_with(playable, "scorch")
    if scorch is not None:
        target = _strongest(state.board.cards_on(enemy))
        if target is not None and target.power >= 8 and not target.is_hero:
            return AIDecision(
                action=PlayCardAction(player=side, card_id=scorch.id, target_row=scorch.row or "siege"),
                reasoning="Using scorch to destroy strong enemy card",
            )

    if state.current_round == 3:
        if power_diff < -5:
            strongest = _strongest(playable)
            assert strongest is not None
            return _play(side, strongest, "Final round - playing strongest card")
        if power_diff > 3:
            return _play(side, _weakest_viable(playable), "Final round - minimal play to secure win")

    best = playable[0]
    best_score = score_card(best, state, side)
    for c in playable[1:]:
        s = score_card(c, state, side)
        if s > best_score:
            best, best_score = c, s
    return _play(side, best, "Optimal strategic play")


_TIERS = {
    "easy": _decide_easy,
    "medium": _decide_medium,
    "hard": _decide_hard,
}


def decide(
    state: MatchState,
    side: Side,
    spec: AISpec | None = None,
    rng: random.Random | None = None,
) -> AIDecision:
    """Recommend one action for `side` without touching the state.

    Randomised branches draw only from `rng`, so a seeded generator gives
    reproducible choices.
    """
    spec = spec or AISpec()
    rng = rng or random.Random()
    decision = _TIERS[spec.difficulty](state, side, spec, rng)
    logger.debug("AI %s (%s): %s", side, spec.difficulty, decision.reasoning)
    return decision


def ai_take_turn(
    state: MatchState,
    side: Side,
    spec: AISpec | None = None,
    rng: random.Random | None = None,
) -> StepResult:
    """Decide for `side` and submit the decision through the dispatcher."""
    return step(state, decide(state, side, spec, rng).action)
