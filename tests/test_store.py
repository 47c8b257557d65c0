import json

import pytest

from color_mapper.gamut import OklchColor
from color_mapper.models import ColorEntry
from color_mapper.store import DAY_MS, EntryStore

NOW = 1_760_000_000_000


def _entry(name, *, ts=NOW, **kw):
    return ColorEntry(color=OklchColor(0.6, 0.1, 25), name=name, timestamp=ts, **kw)


def test_record_json_shape():
    e = _entry("正紅", id="abc")
    d = e.to_dict()
    assert d == {
        "id": "abc",
        "color": {"l": 0.6, "c": 0.1, "h": 25},
        "name": "正紅",
        "votes": 1,
        "isSuspicious": False,
        "timestamp": NOW,
        "isSeed": False,
    }
    assert ColorEntry.from_dict(d) == e

    flagged = _entry("怪", id="x", is_suspicious=True, suspicious_reason="off")
    assert flagged.to_dict()["suspiciousReason"] == "off"
    assert ColorEntry.from_dict(flagged.to_dict()) == flagged


@pytest.mark.parametrize(
    "bad",
    [
        [],
        {"name": "紅"},
        {"name": "", "color": {"l": 0.5, "c": 0.1, "h": 25}},
        {"name": "紅", "color": {"l": "dark", "c": 0.1, "h": 25}},
        {"name": "紅", "color": {"l": 0.5, "c": 0.1, "h": 25}, "votes": "many"},
        {"name": "紅", "color": {"l": "nan", "c": 0.1, "h": 25}},
        {
            "name": "紅",
            "color": {"l": 0.5, "c": 0.1, "h": 25},
            "isSuspicious": "false",
        },
        {"name": "紅", "color": {"l": 0.5, "c": 0.1, "h": 25}, "isSeed": "no"},
        {"name": "紅", "color": {"l": 0.5, "c": 0.1, "h": 25}, "isSeed": 1},
    ],
)
def test_record_rejects_malformed(bad):
    with pytest.raises(ValueError):
        ColorEntry.from_dict(bad)


def test_append_and_subscribe():
    store = EntryStore()
    seen = []
    unsubscribe = store.subscribe(seen.append)
    assert seen == [()]

    key = store.append(_entry("紅"))
    assert store.get(key).name == "紅"
    assert len(seen) == 2 and len(seen[-1]) == 1

    unsubscribe()
    store.append(_entry("藍"))
    assert len(seen) == 2
    assert len(store) == 2


def test_human_count_skips_seed():
    store = EntryStore([_entry("a", is_seed=True), _entry("b"), _entry("c")])
    assert store.human_count() == 2


def test_prune_sweep():
    old = NOW - 15 * DAY_MS
    store = EntryStore(
        [
            _entry("bad-old", ts=old, is_suspicious=True, suspicious_reason="r"),
            _entry("ok-old", ts=old, suspicious_reason="stale"),
            _entry("plain-old", ts=old),
            _entry("bad-new", is_suspicious=True, suspicious_reason="r"),
            _entry("ok-new", suspicious_reason="kept"),
        ]
    )
    report = store.prune(now=NOW)
    assert (report.deleted, report.updated) == (1, 1)

    by_name = {e.name: e for e in store.snapshot()}
    assert "bad-old" not in by_name
    assert by_name["ok-old"].suspicious_reason is None
    assert by_name["bad-new"].is_suspicious
    assert by_name["ok-new"].suspicious_reason == "kept"


def test_export_skips_suspicious():
    store = EntryStore([_entry("紅", id="1"), _entry("怪", id="2", is_suspicious=True)])
    dumped = json.loads(store.export_json())
    assert [d["id"] for d in dumped] == ["1"]


def test_import_replaces_seed_and_dedups():
    store = EntryStore([_entry("seed", id="s", is_seed=True), _entry("mine", id="1")])
    backup = json.dumps(
        [_entry("theirs", id="1").to_dict(), _entry("new", id="2").to_dict()]
    )
    assert store.import_json(backup) == 2
    names = sorted(e.name for e in store.snapshot())
    assert names == ["new", "theirs"]


@pytest.mark.parametrize("text", ["not json", '{"id": "1"}'])
def test_import_rejects_bad_backup(text):
    with pytest.raises(ValueError):
        EntryStore().import_json(text)
