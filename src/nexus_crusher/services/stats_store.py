"""Champion statistics store with disk cache and bundled fallback."""
import json
import logging
import os
import threading
import time
from pathlib import Path
from typing import Optional

import httpx

from nexus_crusher.exceptions import StatsUnavailableError
from nexus_crusher.models.champion import Champion
from nexus_crusher.services.data_dragon_client import DataDragonClient
from nexus_crusher.services.stats_estimator import StatsEstimator

logger = logging.getLogger(__name__)

# Used for champions with neither curated nor estimated stats
NEUTRAL_STATS = {
    "winRate": 0.5,
    "pickRate": 0.05,
    "banRate": 0.01,
    "tier": "C",
    "lanes": {},  # Champion fills every role with the neutral default
}


class ChampionStatsStore:
    """Supplies the full champion list.

    Lookup order on fetch_all():
    1. In-memory snapshot, if younger than the cache window
    2. Disk cache (``cache_dir/champions.json``), if its mtime is inside the window
    3. Data Dragon roster merged with curated/estimated stats (then written to disk)
    4. Bundled roster in ``knowledge/champions.json`` merged the same way

    The returned tuple is never mutated; a refresh swaps in a new tuple.
    """

    CACHE_FILENAME = "champions.json"

    def __init__(
        self,
        cache_dir: Path,
        knowledge_dir: Optional[Path] = None,
        client: Optional[DataDragonClient] = None,
        cache_ttl_hours: float = 24.0,
        estimate_missing: bool = True,
        estimator: Optional[StatsEstimator] = None,
    ):
        if knowledge_dir is None:
            knowledge_dir = Path(__file__).parents[1] / "knowledge"
        self.knowledge_dir = knowledge_dir
        self.cache_dir = Path(cache_dir)
        self.cache_file = self.cache_dir / self.CACHE_FILENAME
        self.cache_ttl_seconds = cache_ttl_hours * 60 * 60
        self.client = client or DataDragonClient()
        self.estimate_missing = estimate_missing
        self.estimator = estimator or StatsEstimator(knowledge_dir)

        self._champions: tuple[Champion, ...] = ()
        self._loaded_at: float = 0.0
        self._source: str = "none"
        self._lock = threading.Lock()
        self._curated: dict[str, dict] = {}
        self._load_curated()

    def _load_curated(self):
        """Load curated per-champion stats keyed by champion id."""
        stats_path = self.knowledge_dir / "champion_stats.json"
        if stats_path.exists():
            with open(stats_path, encoding="utf-8") as f:
                self._curated = json.load(f).get("stats", {})
        else:
            logger.warning(f"champion_stats.json not found at {stats_path}")

    @property
    def source(self) -> str:
        """Where the current snapshot came from: memory/cache/remote/bundled/none."""
        return self._source

    def fetch_all(self) -> tuple[Champion, ...]:
        """Return the current champion snapshot.

        Raises:
            StatsUnavailableError: If no source produced any champion
        """
        with self._lock:
            if self._champions and time.time() - self._loaded_at < self.cache_ttl_seconds:
                return self._champions

            champions = self._load_from_cache()
            source = "cache"
            if not champions:
                champions = self._fetch_remote()
                source = "remote"
                if champions:
                    self._save_to_cache(champions)
            if not champions:
                champions = self._load_bundled()
                source = "bundled"
            if not champions:
                self._source = "none"
                raise StatsUnavailableError("No champion statistics available")

            return self._swap(champions, source)

    def refresh(self) -> tuple[Champion, ...]:
        """Force a remote fetch, keeping the current snapshot if it fails."""
        with self._lock:
            champions = self._fetch_remote()
            if champions:
                self._save_to_cache(champions)
                return self._swap(champions, "remote")
        return self.fetch_all()

    def invalidate(self) -> None:
        """Drop the in-memory snapshot so the next fetch re-reads cache/remote."""
        with self._lock:
            self._champions = ()
            self._loaded_at = 0.0

    def _swap(self, champions: tuple[Champion, ...], source: str) -> tuple[Champion, ...]:
        self._champions = champions
        self._loaded_at = time.time()
        self._source = source
        logger.info(f"Loaded {len(champions)} champions from {source}")
        return champions

    def _load_from_cache(self) -> tuple[Champion, ...]:
        """Load champion data from the disk cache, if present and fresh."""
        if not self.cache_file.exists():
            return ()
        age = time.time() - os.path.getmtime(self.cache_file)
        if age > self.cache_ttl_seconds:
            logger.debug(f"Champion cache expired ({age / 3600:.1f}h old)")
            return ()
        try:
            with open(self.cache_file, encoding="utf-8") as f:
                data = json.load(f)
            entries = data.get("champions", []) if isinstance(data, dict) else data
            return tuple(Champion.from_dict(entry) for entry in entries)
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"Ignoring unreadable champion cache {self.cache_file}: {e}")
            return ()

    def _save_to_cache(self, champions: tuple[Champion, ...]) -> None:
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            payload = {
                "fetched_at": time.time(),
                "champions": [champion.to_dict() for champion in champions],
            }
            with open(self.cache_file, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
        except OSError as e:
            logger.warning(f"Could not write champion cache {self.cache_file}: {e}")

    def _fetch_remote(self) -> tuple[Champion, ...]:
        try:
            roster = self.client.get_champions()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Champion fetch failed, falling back: {e}")
            return ()
        return self._merge(roster)

    def _load_bundled(self) -> tuple[Champion, ...]:
        roster_path = self.knowledge_dir / "champions.json"
        try:
            with open(roster_path, encoding="utf-8") as f:
                roster = json.load(f).get("champions", [])
        except (OSError, ValueError) as e:
            logger.error(f"Bundled champion snapshot unavailable at {roster_path}: {e}")
            return ()
        return self._merge(roster)

    def _merge(self, roster: list[dict]) -> tuple[Champion, ...]:
        """Combine roster entries with curated, estimated, or neutral stats."""
        champions = []
        for entry in roster:
            champion_id = int(entry["id"])
            name = entry.get("name", "")
            stats = self._curated.get(str(champion_id))
            if stats is None:
                if self.estimate_missing:
                    stats = self.estimator.estimate(champion_id, name)
                else:
                    stats = NEUTRAL_STATS
            champions.append(Champion.from_dict({
                **stats,
                "id": champion_id,
                "name": name,
                "title": entry.get("title", ""),
            }))
        return tuple(champions)
