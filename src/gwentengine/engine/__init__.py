"""Deterministic, headless rules engine for gwent-engine.

IMPORTANT: This package must never perform I/O or touch module-level
random state. Randomness always arrives as an explicit `random.Random`.
"""

from .actions import Action, PassAction, PlayCardAction
from .ai import AIDecision, AISpec, ai_take_turn, decide
from .events import MatchEnded, Rejection, RoundEnded
from .match import (
    EngineError,
    MatchConfig,
    MatchState,
    StepResult,
    deal_initial_hands,
    new_match,
    start_match,
    step,
)
from .power import row_power, side_power
from .serialize import snapshot
from .types import Ability, Card, CardKind, Row, Side, WeatherKind

__all__ = [
    "AIDecision",
    "AISpec",
    "Ability",
    "Action",
    "Card",
    "CardKind",
    "EngineError",
    "MatchConfig",
    "MatchEnded",
    "MatchState",
    "PassAction",
    "PlayCardAction",
    "Rejection",
    "RoundEnded",
    "Row",
    "Side",
    "StepResult",
    "WeatherKind",
    "ai_take_turn",
    "deal_initial_hands",
    "decide",
    "new_match",
    "row_power",
    "side_power",
    "snapshot",
    "start_match",
    "step",
]
