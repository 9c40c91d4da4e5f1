"""
Finished-game records and a JSON leaderboard store
"""

import json
import logging
import threading
import time
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Dict, List, Optional

import numpy as np

from .errors import PersistenceFailure
from .session import GameOverStats

logger = logging.getLogger(__name__)


class NumpyEncoder(json.JSONEncoder):
    """JSON encoder that handles numpy types"""
    def default(self, obj):
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        if isinstance(obj, np.integer):
            return int(obj)
        if isinstance(obj, np.floating):
            return float(obj)
        if isinstance(obj, np.bool_):
            return bool(obj)
        return super().default(obj)


@dataclass(frozen=True)
class FinishedSessionRecord:
    player_name: str
    score: int
    level: int
    lines_cleared: int
    pieces_placed: int
    game_duration_seconds: int
    game_mode: str = "classic"

    @classmethod
    def from_stats(cls, stats: GameOverStats, player_name: str) -> "FinishedSessionRecord":
        return cls(player_name=player_name, **stats.to_dict())

    def to_dict(self) -> Dict:
        return asdict(self)


class JsonLeaderboardStore:
    """
    Leaderboard kept in a single JSON file.

    Every record is stamped with the store's family id, a sequential id and a
    creation time. Queries return plain dicts ordered by score, best first.
    """

    def __init__(self, path: str, family_id: int = 0):
        self.path = Path(path)
        self.family_id = family_id
        self._lock = threading.Lock()

    def _load(self) -> Dict:
        if not self.path.exists():
            return {"records": []}
        with open(self.path, 'r') as f:
            return json.load(f)

    def _save(self, data: Dict):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, 'w') as f:
            json.dump(data, f, indent=2, cls=NumpyEncoder)
        tmp_path.replace(self.path)

    def add_record(self, record: FinishedSessionRecord) -> Dict:
        with self._lock:
            data = self._load()
            records = data.setdefault("records", [])
            entry = record.to_dict()
            entry["id"] = max((r.get("id", 0) for r in records), default=0) + 1
            entry["family_id"] = self.family_id
            entry["created_at"] = time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime())
            records.append(entry)
            self._save(data)
        return entry

    def _family(self) -> List[Dict]:
        records = [r for r in self._load().get("records", [])
                   if r.get("family_id") == self.family_id]
        # stable sort keeps older records first among equal scores
        return sorted(records, key=lambda r: r.get("score", 0), reverse=True)

    def family_records(self, limit: int = 10) -> List[Dict]:
        return self._family()[:limit]

    def player_records(self, player_name: str, limit: int = 10) -> List[Dict]:
        return [r for r in self._family() if r.get("player_name") == player_name][:limit]

    def family_best(self) -> Optional[Dict]:
        best = self.family_records(limit=1)
        return best[0] if best else None

    def player_best(self, player_name: str) -> Optional[Dict]:
        best = self.player_records(player_name, limit=1)
        return best[0] if best else None


class RecordPublisher:
    """
    Game-over callback that writes the finished record to a store.

    Writes are fire-and-forget: with `background=True` each write runs on its
    own daemon thread. A failed write is logged as PersistenceFailure and
    dropped; it never reaches the session and is never retried.
    """

    def __init__(self, store, player_name: str, background: bool = True):
        self.store = store
        self.player_name = player_name
        self.background = background
        self.failures: List[PersistenceFailure] = []
        self._threads: List[threading.Thread] = []

    def __call__(self, stats: GameOverStats):
        record = FinishedSessionRecord.from_stats(stats, self.player_name)
        if not self.background:
            self._write(record)
            return
        t = threading.Thread(target=self._write, args=(record,), name="record-writer", daemon=True)
        self._threads.append(t)
        t.start()

    def _write(self, record: FinishedSessionRecord):
        try:
            self.store.add_record(record)
        except Exception as e:
            failure = PersistenceFailure(f"Could not save record for {record.player_name}: {e}")
            failure.__cause__ = e
            self.failures.append(failure)
            logger.error("%s", failure, exc_info=e)
            return
        logger.info("Saved record: %s scored %d", record.player_name, record.score)

    def wait(self, timeout: Optional[float] = None):
        """Join pending background writes"""
        for t in self._threads:
            t.join(timeout)
        self._threads = [t for t in self._threads if t.is_alive()]
