"""Static champion matchup table with id/name lookups."""
import json
import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class MatchupTable:
    """Which champions a champion beats, and which beat it.

    The data is sparse and one-sided: an entry may exist for only one side
    of a pairing. Lookups never fail; unknown ids give empty sets.
    """

    def __init__(self, knowledge_dir: Optional[Path] = None, infer_symmetric: bool = False):
        """Load the table.

        Args:
            knowledge_dir: Directory with matchups.json and champions.json
            infer_symmetric: Also treat "A counters B" as "B is countered by A"
                (and vice versa) when only one side is recorded
        """
        if knowledge_dir is None:
            knowledge_dir = Path(__file__).parents[1] / "knowledge"
        self.knowledge_dir = knowledge_dir
        self.infer_symmetric = infer_symmetric
        self._counters: dict[int, frozenset[int]] = {}
        self._countered_by: dict[int, frozenset[int]] = {}
        self._names: dict[int, str] = {}
        self._ids: dict[str, int] = {}
        self._load_data()

    def _load_data(self):
        """Load matchup relations and champion names."""
        matchup_path = self.knowledge_dir / "matchups.json"
        if matchup_path.exists():
            with open(matchup_path, encoding="utf-8") as f:
                data = json.load(f)
            for raw_id, entry in data.get("matchups", {}).items():
                champion_id = int(raw_id)
                self._counters[champion_id] = frozenset(int(i) for i in entry.get("counters", []))
                self._countered_by[champion_id] = frozenset(int(i) for i in entry.get("counteredBy", []))
        else:
            logger.warning(f"matchups.json not found at {matchup_path}")

        if self.infer_symmetric:
            self._mirror()

        roster_path = self.knowledge_dir / "champions.json"
        if roster_path.exists():
            with open(roster_path, encoding="utf-8") as f:
                roster = json.load(f).get("champions", [])
            self.register_names({int(c["id"]): c["name"] for c in roster})

    def _mirror(self):
        counters = {k: set(v) for k, v in self._counters.items()}
        countered_by = {k: set(v) for k, v in self._countered_by.items()}
        for champion_id, beaten in self._counters.items():
            for other in beaten:
                countered_by.setdefault(other, set()).add(champion_id)
        for champion_id, beaten_by in self._countered_by.items():
            for other in beaten_by:
                counters.setdefault(other, set()).add(champion_id)
        self._counters = {k: frozenset(v) for k, v in counters.items()}
        self._countered_by = {k: frozenset(v) for k, v in countered_by.items()}

    def register_names(self, names: dict[int, str]) -> None:
        """Add or replace id->name entries (e.g. from a fresh champion list)."""
        for champion_id, name in names.items():
            self._names[champion_id] = name
            self._ids[name.lower()] = champion_id

    def counters(self, champion_id: int) -> frozenset[int]:
        """Champions this champion reliably beats."""
        return self._counters.get(champion_id, frozenset())

    def countered_by(self, champion_id: int) -> frozenset[int]:
        """Champions that reliably beat this champion."""
        return self._countered_by.get(champion_id, frozenset())

    def name_of(self, champion_id: int) -> str:
        """Display name for an id; ``Champion {id}`` when unknown."""
        return self._names.get(champion_id, f"Champion {champion_id}")

    def id_of(self, name: str) -> Optional[int]:
        """Champion id for a display name (case-insensitive), None when unknown."""
        return self._ids.get(name.strip().lower())
