import json

from stats import SessionRecord, StatsStore


def make_record(**overrides):
    fields = dict(
        id="abc",
        created_at="2026-01-01T00:00:00+00:00",
        duration=30,
        source="words",
        wpm=60.0,
        raw_wpm=65.0,
        accuracy=96,
        active_seconds=28.4,
    )
    fields.update(overrides)
    return SessionRecord(**fields)


def test_missing_file_is_empty(tmp_path):
    store = StatsStore(tmp_path / "stats.json")
    assert store.load() == {"sessions": []}
    assert store.best_scores() == {}


def test_corrupt_file_is_empty(tmp_path):
    path = tmp_path / "stats.json"
    path.write_text("{not json")
    assert StatsStore(path).load() == {"sessions": []}


def test_append_creates_directories(tmp_path):
    path = tmp_path / "nested" / "dir" / "stats.json"
    store = StatsStore(path)
    store.append_session(make_record())

    data = json.loads(path.read_text())
    assert data["sessions"][0]["wpm"] == 60.0
    assert data["sessions"][0]["source_meta"] == {}


def test_best_scores_per_duration(tmp_path):
    store = StatsStore(tmp_path / "stats.json")
    store.append_session(make_record(id="1", duration=30, wpm=55.0))
    store.append_session(make_record(id="2", duration=30, wpm=71.5))
    store.append_session(make_record(id="3", duration=60, wpm=48.0))

    assert store.best_scores() == {30: 71.5, 60: 48.0}


def test_summary(tmp_path):
    store = StatsStore(tmp_path / "stats.json")
    assert store.summary()["total"] == 0

    store.append_session(make_record(id="1", wpm=50.0, raw_wpm=60.0, accuracy=90))
    store.append_session(make_record(id="2", wpm=70.0, raw_wpm=80.0, accuracy=100))

    summary = store.summary()
    assert summary["total"] == 2
    assert summary["avg_wpm"] == 60.0
    assert summary["avg_raw_wpm"] == 70.0
    assert summary["avg_accuracy"] == 95.0


def test_sessions_that_are_not_a_list_are_reset(tmp_path):
    path = tmp_path / "stats.json"
    path.write_text(json.dumps({"sessions": {}}))
    store = StatsStore(path)

    store.append_session(make_record())

    assert len(store.sessions()) == 1
