import json

import numpy as np
import pytest

from color_mapper.app import create_app
from color_mapper.gamut import max_chroma
from color_mapper.moderation import StubModerator
from color_mapper.store import EntryStore


@pytest.fixture
def store():
    return EntryStore()


@pytest.fixture
def client(store):
    app = create_app(
        store=store,
        moderator=StubModerator(blocked=frozenset({"香蕉"})),
        rng=np.random.default_rng(42),
    )
    app.testing = True
    return app.test_client()


def test_hues(client):
    res = client.get("/hues")
    assert res.status_code == 200
    hues = res.get_json()
    assert len(hues) == 18
    assert hues[1] == {"angle": 25, "id": "red", "nameEN": "Red", "nameZH": "紅"}


@pytest.mark.parametrize("hue", ["25", "red"])
def test_question(client, hue):
    body = client.get(f"/question?hue={hue}").get_json()
    col = body["color"]
    assert col["h"] == 25
    assert col["c"] <= max_chroma(col["l"], 25)
    assert len(body["prefixes"]) == 6
    assert body["hex"].startswith("#")
    assert len(body["shader"]["shaderColors"]) == 4
    assert body["zone"] in {"pale", "dark", "gray", "vivid"}


def test_question_random_hue(client):
    assert client.get("/question").status_code == 200


def test_unknown_hue_is_bad_request(client):
    res = client.get("/question?hue=violet")
    assert res.status_code == 400
    assert "error" in res.get_json()
    assert client.get("/clusters?hue=7").status_code == 400


def test_prefixes(client):
    res = client.get("/prefixes?l=0.10&c=0.01&h=25")
    assert res.get_json()[0] == "黑"
    assert client.get("/prefixes?l=0.1&h=25").status_code == 400
    assert client.get("/prefixes?l=dark&c=0&h=25").status_code == 400


def test_gamut(client):
    body = client.get("/gamut?hue=145").get_json()
    assert body["boundary"][0] == [0.0, 0.0]
    assert 0.1 <= body["peak"]["l"] <= 0.95
    assert body["peak"]["maxC"] > 0


def _submit(client, name, l=0.55, c=0.2, h=25):
    body = {"color": {"l": l, "c": c, "h": h}, "name": name}
    return client.post("/entries", json=body)


def test_submit_and_cluster(client, store):
    assert _submit(client, "正紅").status_code == 201
    assert _submit(client, "正紅", l=0.56).status_code == 201
    res = _submit(client, "香蕉")
    assert res.status_code == 201
    assert res.get_json()["verdict"]["accepted"] is False
    assert len(store) == 3

    clusters = client.get("/clusters?hue=25").get_json()["clusters"]
    assert len(clusters) == 1
    assert clusters[0]["displayLabel"] == "正紅"
    assert clusters[0]["totalVotes"] == 2
    assert client.get("/clusters?hue=245").get_json()["clusters"] == []


def test_submit_validation(client):
    assert _submit(client, "   ").status_code == 400
    assert _submit(client, "紅", h=26).status_code == 400
    assert client.post("/entries", data="nope").status_code == 400


@pytest.mark.parametrize(
    "color",
    [
        {"l": "nan", "c": 0.2, "h": 25},
        {"l": 0.55, "c": "inf", "h": 25},
        {"l": 0.55, "c": -3, "h": 25},
        {"l": 7.5, "c": 0.2, "h": 25},
    ],
)
def test_submit_rejects_out_of_range_color(client, store, color):
    res = client.post("/entries", json={"color": color, "name": "正紅"})
    assert res.status_code == 400
    assert "error" in res.get_json()
    assert len(store) == 0
    assert client.get("/entries").get_json() == []


def test_prefixes_reject_non_finite(client):
    assert client.get("/prefixes?l=nan&c=0.1&h=25").status_code == 400
    assert client.get("/prefixes?l=0.5&c=inf&h=25").status_code == 400


def test_export_import_roundtrip(client, store):
    _submit(client, "正紅")
    _submit(client, "香蕉")
    dumped = client.get("/export").get_data(as_text=True)
    assert len(json.loads(dumped)) == 1

    fresh = create_app(store=EntryStore(), rng=np.random.default_rng(0)).test_client()
    res = fresh.post("/import", data=dumped, content_type="application/json")
    assert res.get_json() == {"stored": 1}
    assert fresh.post("/import", data="[oops").status_code == 400


def test_prune_endpoint(client):
    _submit(client, "正紅")
    assert client.post("/prune").get_json() == {"deletedCount": 0, "updatedCount": 0}


def test_unknown_route_stays_404(client):
    assert client.get("/nope").status_code == 404


def test_territories(client):
    empty = client.get("/territories?hue=25").get_json()
    assert empty["labels"] == []
    assert {v for row in empty["cells"] for v in row} == {-1}

    _submit(client, "白", l=0.95, c=0.01)
    _submit(client, "正紅", l=0.55, c=0.2)
    body = client.get("/territories?hue=25").get_json()
    assert sorted(body["labels"]) == ["正紅", "白"]
    assert len(body["cells"]) == body["height"]
    assert len(body["cells"][0]) == body["width"]
    assert {v for row in body["cells"] for v in row} == {0, 1}
