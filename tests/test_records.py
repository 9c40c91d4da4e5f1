import json
import logging

import pytest

from cattetris.errors import PersistenceFailure
from cattetris.records import FinishedSessionRecord, JsonLeaderboardStore, RecordPublisher
from cattetris.session import GameOverStats


def stats(score, **overrides):
    values = dict(score=score, level=1, lines_cleared=score // 10, pieces_placed=12,
                  game_duration_seconds=95, game_mode="classic")
    values.update(overrides)
    return GameOverStats(**values)


def test_record_from_stats():
    record = FinishedSessionRecord.from_stats(stats(120, level=2), "Mom")
    assert record.to_dict() == {
        "player_name": "Mom",
        "score": 120,
        "level": 2,
        "lines_cleared": 12,
        "pieces_placed": 12,
        "game_duration_seconds": 95,
        "game_mode": "classic",
    }


def test_store_orders_by_score(tmp_path):
    store = JsonLeaderboardStore(str(tmp_path / "board.json"), family_id=7)
    for name, score in [("Mom", 50), ("Dad", 200), ("Mom", 120), ("Dad", 10)]:
        store.add_record(FinishedSessionRecord.from_stats(stats(score), name))

    assert [r["score"] for r in store.family_records()] == [200, 120, 50, 10]
    assert [r["score"] for r in store.player_records("Mom")] == [120, 50]
    assert store.family_best()["player_name"] == "Dad"
    assert store.player_best("Mom")["score"] == 120
    assert store.player_best("Grandma") is None
    assert len(store.family_records(limit=2)) == 2


def test_store_stamps_records(tmp_path):
    path = tmp_path / "board.json"
    store = JsonLeaderboardStore(str(path), family_id=3)
    first = store.add_record(FinishedSessionRecord.from_stats(stats(10), "Mom"))
    second = store.add_record(FinishedSessionRecord.from_stats(stats(20), "Mom"))
    assert (first["id"], second["id"]) == (1, 2)
    assert first["family_id"] == 3
    assert "created_at" in first
    assert len(json.loads(path.read_text())["records"]) == 2


def test_store_separates_families(tmp_path):
    path = str(tmp_path / "board.json")
    JsonLeaderboardStore(path, family_id=1).add_record(
        FinishedSessionRecord.from_stats(stats(500), "Other"))
    ours = JsonLeaderboardStore(path, family_id=2)
    assert ours.family_best() is None
    ours.add_record(FinishedSessionRecord.from_stats(stats(5), "Us"))
    assert ours.family_best()["player_name"] == "Us"


def test_publisher_writes_in_background(tmp_path):
    store = JsonLeaderboardStore(str(tmp_path / "board.json"))
    publisher = RecordPublisher(store, "Mom")
    publisher(stats(80))
    publisher.wait(timeout=5)
    assert store.family_best()["score"] == 80
    assert publisher.failures == []


class BrokenStore:
    def add_record(self, record):
        raise OSError("disk full")


@pytest.mark.parametrize("background", [True, False])
def test_publisher_logs_and_swallows_failures(background, caplog):
    publisher = RecordPublisher(BrokenStore(), "Mom", background=background)
    with caplog.at_level(logging.ERROR, logger="cattetris.records"):
        publisher(stats(80))
        publisher.wait(timeout=5)
    assert len(publisher.failures) == 1
    assert isinstance(publisher.failures[0], PersistenceFailure)
    assert isinstance(publisher.failures[0].__cause__, OSError)
    assert "disk full" in caplog.text
