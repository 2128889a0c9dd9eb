from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Mapping

from gwentengine.engine.types import Side


@dataclass
class TelemetryService:
    """Append-only JSONL record of one or more matches.

    Each line is `{ts, match_id, type, round, side, payload}`. `round` and
    `side` are null for records that are not tied to a round or a seat.
    """

    path: Path
    match_id: str | None = None

    def log(
        self,
        event_type: str,
        payload: Mapping[str, object],
        *,
        round_no: int | None = None,
        side: Side | None = None,
    ) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        rec = {
            "ts": datetime.now(tz=timezone.utc).isoformat(),
            "match_id": self.match_id,
            "type": event_type,
            "round": round_no,
            "side": side,
            "payload": dict(payload),
        }
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(rec, ensure_ascii=False) + "\n")

    def read_all(self, match_id: str | None = None) -> list[dict[str, object]]:
        if not self.path.exists():
            return []
        with self.path.open("r", encoding="utf-8") as f:
            records = [json.loads(line) for line in f if line.strip()]
        if match_id is not None:
            records = [r for r in records if r.get("match_id") == match_id]
        return records
