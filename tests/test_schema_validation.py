from __future__ import annotations

import json
from pathlib import Path

import pytest

from gwentengine.paths import get_paths
from gwentengine.services.content import ContentError, ContentService


def test_content_schemas_validate() -> None:
    paths = get_paths()
    content = ContentService(paths.data_dir, paths.schema_dir)
    content.validate_all()


def test_catalog_invariants() -> None:
    paths = get_paths()
    content = ContentService(paths.data_dir, paths.schema_dir)
    cards = content.list_cards()
    assert cards
    for card in cards:
        assert card.power >= 0
        if card.kind == "unit" and card.ability is None:
            assert card.row is not None

    assert content.factions() == ["nilfgaard", "northern_realms"]
    deck = content.deck_for("nilfgaard")
    assert len(deck) == 25
    assert all(c.kind != "leader" for c in deck)
    assert sum(1 for c in content.deck_for("northern_realms") if c.id == "blue_stripes_commando") == 3


def test_unknown_faction_raises() -> None:
    paths = get_paths()
    content = ContentService(paths.data_dir, paths.schema_dir)
    with pytest.raises(ContentError):
        content.deck_for("monsters")


def _write_catalog(tmp_path: Path, payload: object) -> ContentService:
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    (data_dir / "cards.json").write_text(json.dumps(payload), encoding="utf-8")
    return ContentService(data_dir, get_paths().schema_dir)


def test_unit_without_row_fails_schema(tmp_path: Path) -> None:
    content = _write_catalog(
        tmp_path,
        {
            "version": 1,
            "cards": [{"id": "lost", "name": "Lost", "faction": "neutral", "kind": "unit", "power": 3}],
            "decks": {},
        },
    )
    with pytest.raises(ContentError, match="Schema validation failed"):
        content.load_cards_db()


def test_deck_with_unknown_card_fails(tmp_path: Path) -> None:
    content = _write_catalog(
        tmp_path,
        {
            "version": 1,
            "cards": [
                {"id": "a", "name": "A", "faction": "neutral", "kind": "unit", "power": 3, "row": "siege"}
            ],
            "decks": {"neutral": ["a", "ghost"]},
        },
    )
    with pytest.raises(ContentError, match="ghost"):
        content.load_cards_db()


def test_missing_and_malformed_files(tmp_path: Path) -> None:
    missing = ContentService(tmp_path, get_paths().schema_dir)
    with pytest.raises(ContentError, match="Missing content file"):
        missing.load_cards_db()

    (tmp_path / "cards.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(ContentError, match="Invalid JSON"):
        missing.load_cards_db()
