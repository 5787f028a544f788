# tests/test_api.py

import pytest
from fastapi.testclient import TestClient

from api.main import app, get_config, get_notifier
from core.config import Config, DeployConfig, FlakeConfig

OLD_REV = "0875adf8d630246ac3d0c338157a5b89fa0c57a8"
PUSHED_REV = "9c1f2e3d4b5a69788796a5b4c3d2e1f0a9b8c7d6"


class RecordingNotifier:
    def __init__(self):
        self.messages = []

    def send(self, message):
        self.messages.append(message)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def client(flake_file, notifier):
    config = Config(
        flake=FlakeConfig(path=str(flake_file), input="ultron"),
        deploy=DeployConfig(repository="covercash2/ultron", branch="refs/heads/main"),
    )
    app.dependency_overrides[get_config] = lambda: config
    app.dependency_overrides[get_notifier] = lambda: notifier
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_healthcheck(client):
    resp = client.get("/healthcheck")
    assert resp.status_code == 200
    assert "SYSTEM STATUS: ONLINE" in resp.text


def test_get_rev(client):
    resp = client.get("/flake/rev")
    assert resp.status_code == 200
    assert resp.json() == {"input": "ultron", "rev": OLD_REV}


def test_put_rev(client, flake_file):
    resp = client.put("/flake/rev", json={"rev": PUSHED_REV})
    assert resp.status_code == 200
    assert resp.json() == {"old": OLD_REV, "new": PUSHED_REV, "changed": True}
    assert PUSHED_REV in flake_file.read_text(encoding="utf-8")


def test_put_rev_invalid(client):
    resp = client.put("/flake/rev", json={"rev": "abc"})
    assert resp.status_code == 422
    assert "commit sha" in resp.json()["detail"]


def test_get_rev_broken_flake(client, flake_file):
    flake_file.write_text("{ inputs = { }; }", encoding="utf-8")
    resp = client.get("/flake/rev")
    assert resp.status_code == 422


def test_get_rev_missing_flake(client, flake_file):
    flake_file.unlink()
    resp = client.get("/flake/rev")
    assert resp.status_code == 500


def test_webhook_ping(client, notifier, ping_body):
    resp = client.post("/webhook", json=ping_body)
    assert resp.status_code == 200
    body = resp.json()
    assert body["event"] == "ping"
    assert body["notified"] is True
    assert body["rev_change"] is None
    assert notifier.messages == [body["message"]]


def test_webhook_push_deploys(client, flake_file, push_body):
    resp = client.post("/webhook", json=push_body)
    assert resp.status_code == 200
    body = resp.json()
    assert body["event"] == "push"
    assert body["rev_change"] == {"old": OLD_REV, "new": PUSHED_REV, "changed": True}
    assert PUSHED_REV in flake_file.read_text(encoding="utf-8")


def test_webhook_bad_payload(client):
    resp = client.post("/webhook", json={"zen": "nope"})
    assert resp.status_code == 422
