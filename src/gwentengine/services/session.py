from __future__ import annotations

import logging
import random
import uuid

from gwentengine.engine.actions import Action
from gwentengine.engine.ai import AIDecision, AISpec, decide
from gwentengine.engine.match import MatchConfig, MatchState, StepResult, select_card, start_match, step
from gwentengine.engine.serialize import action_to_dict, event_to_dict, snapshot
from gwentengine.engine.types import Side
from gwentengine.services.content import ContentService
from gwentengine.services.telemetry import TelemetryService

logger = logging.getLogger(__name__)


class MatchSession:
    """Owns one match: the current state, its random source and the AI seat.

    Every state change goes through `step`; the session only swaps in the
    returned state when the action was accepted.
    """

    def __init__(
        self,
        state: MatchState,
        rng: random.Random,
        ai_spec: AISpec | None = None,
        telemetry: TelemetryService | None = None,
        ai_side: Side = "opponent",
    ) -> None:
        self._state = state
        self.rng = rng
        self.ai_spec = ai_spec or AISpec()
        self.telemetry = telemetry
        self.ai_side: Side = ai_side

    @classmethod
    def start(
        cls,
        content: ContentService,
        faction: str,
        opponent_faction: str | None = None,
        seed: int | None = None,
        ai_spec: AISpec | None = None,
        telemetry: TelemetryService | None = None,
        config: MatchConfig | None = None,
    ) -> "MatchSession":
        rng = random.Random(seed)
        opponent_faction = opponent_faction or faction
        state = start_match(content.deck_for(faction), content.deck_for(opponent_faction), rng, config)
        if telemetry is not None:
            telemetry.match_id = uuid.uuid4().hex
        session = cls(state, rng, ai_spec=ai_spec, telemetry=telemetry)
        session._log(
            "match_started",
            {
                "seed": seed,
                "faction": faction,
                "opponent_faction": opponent_faction,
                "difficulty": session.ai_spec.difficulty,
            },
            round_no=state.current_round,
        )
        logger.info("Started %s vs %s (seed=%s, ai=%s)", faction, opponent_faction, seed, session.ai_spec.difficulty)
        return session

    @property
    def state(self) -> MatchState:
        return self._state

    def query(self) -> dict[str, object]:
        return snapshot(self._state)

    def _log(
        self,
        event_type: str,
        payload: dict[str, object],
        round_no: int | None = None,
        side: Side | None = None,
    ) -> None:
        if self.telemetry is not None:
            self.telemetry.log(event_type, payload, round_no=round_no, side=side)

    def _apply(self, res: StepResult, action: Action | None = None) -> StepResult:
        # events belong to the round the action was played in
        round_no = self._state.current_round
        if res.ok:
            self._state = res.state
            for ev in res.events:
                self._log("match_event", event_to_dict(ev), round_no, getattr(ev, "side", None))
        elif res.rejection is not None:
            payload: dict[str, object] = {"reason": res.rejection.reason, "message": res.rejection.message}
            if action is not None:
                payload["action"] = action_to_dict(action)
            self._log("action_rejected", payload, round_no, getattr(action, "player", None))
        return res

    def submit(self, action: Action) -> StepResult:
        return self._apply(step(self._state, action), action)

    def select(self, card_id: str | None, side: Side = "player") -> StepResult:
        return self._apply(select_card(self._state, side, card_id))

    def recommend(self, side: Side | None = None, spec: AISpec | None = None) -> AIDecision:
        return decide(self._state, side or self.ai_side, spec or self.ai_spec, self.rng)

    def opponent_turn(self) -> StepResult | None:
        """Let the AI seat act once. Returns None when it is not the AI's turn."""
        if self._state.is_game_over or self._state.current_player != self.ai_side:
            return None
        decision = self.recommend()
        return self.submit(decision.action)
