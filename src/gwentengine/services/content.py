from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Mapping

from jsonschema import Draft202012Validator

from gwentengine.engine.types import (
    ABILITIES,
    CARD_KINDS,
    ROWS,
    WEATHER_KINDS,
    Card,
    CardDatabase,
)

logger = logging.getLogger(__name__)


class ContentError(RuntimeError):
    pass


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ContentError(f"Missing content file: {path}") from e
    except json.JSONDecodeError as e:
        raise ContentError(f"Invalid JSON in {path}: {e}") from e


def validate_json(instance: object, schema: object, *, context: str) -> None:
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: "/".join(str(p) for p in e.absolute_path))
    if errors:
        lines = [f"Schema validation failed for {context}:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        raise ContentError("\n".join(lines))


def _require_str(obj: Mapping[str, object], key: str) -> str:
    v = obj.get(key)
    if not isinstance(v, str):
        raise ContentError(f"Expected string for {key}")
    return v


def _require_int(obj: Mapping[str, object], key: str) -> int:
    v = obj.get(key)
    if not isinstance(v, int):
        raise ContentError(f"Expected int for {key}")
    return v


def _optional_choice(obj: Mapping[str, object], key: str, allowed: tuple[str, ...]) -> str | None:
    v = obj.get(key)
    if v is None:
        return None
    if v not in allowed:
        raise ContentError(f"Unexpected {key}: {v!r}")
    return v  # type: ignore[return-value]


def _parse_card(raw: Mapping[str, object]) -> Card:
    kind = _optional_choice(raw, "kind", CARD_KINDS)
    if kind is None:
        raise ContentError("Card missing kind")
    card = Card(
        id=_require_str(raw, "id"),
        name=_require_str(raw, "name"),
        faction=_require_str(raw, "faction"),  # type: ignore[arg-type]
        kind=kind,  # type: ignore[arg-type]
        power=_require_int(raw, "power"),
        row=_optional_choice(raw, "row", ROWS),  # type: ignore[arg-type]
        ability=_optional_choice(raw, "ability", ABILITIES),  # type: ignore[arg-type]
        is_hero=bool(raw.get("is_hero", False)),
        weather=_optional_choice(raw, "weather", WEATHER_KINDS),  # type: ignore[arg-type]
        description=str(raw.get("description", "")),
    )
    if card.is_unit and card.ability is None and card.row is None:
        raise ContentError(f"Unit {card.id} has neither a row nor an ability")
    return card


class ContentService:
    def __init__(self, data_dir: Path, schema_dir: Path) -> None:
        self._data_dir = data_dir
        self._schema_dir = schema_dir
        self._db: CardDatabase | None = None

    def load_cards_db(self) -> CardDatabase:
        cards_path = self._data_dir / "cards.json"
        schema_path = self._schema_dir / "cards.schema.json"
        raw = _load_json(cards_path)
        schema = _load_json(schema_path)
        validate_json(raw, schema, context=str(cards_path))

        if not isinstance(raw, dict):
            raise ContentError("cards.json must be an object")
        raw_cards = raw.get("cards")
        if not isinstance(raw_cards, list):
            raise ContentError("cards.json.cards must be a list")

        cards: dict[str, Card] = {}
        for item in raw_cards:
            if not isinstance(item, dict):
                continue
            card = _parse_card(item)
            if card.id in cards:
                raise ContentError(f"Duplicate card id: {card.id}")
            cards[card.id] = card

        decks: dict[str, tuple[str, ...]] = {}
        raw_decks = raw.get("decks", {})
        if isinstance(raw_decks, dict):
            for faction, ids in raw_decks.items():
                if not isinstance(faction, str) or not isinstance(ids, list):
                    continue
                missing = [cid for cid in ids if cid not in cards]
                if missing:
                    raise ContentError(f"Deck {faction} references unknown cards: {', '.join(missing)}")
                decks[faction] = tuple(ids)

        logger.debug("Loaded %d cards and %d decks from %s", len(cards), len(decks), cards_path)
        return CardDatabase(cards=cards, decks=decks)

    def _database(self) -> CardDatabase:
        if self._db is None:
            self._db = self.load_cards_db()
        return self._db

    def list_cards(self) -> list[Card]:
        return list(self._database().cards.values())

    def deck_for(self, faction: str) -> list[Card]:
        """Return the starting deck for `faction` (copies repeated, catalog order)."""
        db = self._database()
        ids = db.decks.get(faction)
        if ids is None:
            raise ContentError(f"No deck defined for faction: {faction}")
        return [db.get(cid) for cid in ids]

    def factions(self) -> list[str]:
        return sorted(self._database().decks.keys())

    def validate_all(self) -> None:
        # Load is validation (schema + parse + deck references)
        self._db = self.load_cards_db()
