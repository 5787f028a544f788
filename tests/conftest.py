import json
from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def good_flake() -> str:
    return (FIXTURES / "good_ultron.flake.nix").read_text(encoding="utf-8")


@pytest.fixture
def flake_file(tmp_path, good_flake) -> Path:
    path = tmp_path / "flake.nix"
    path.write_text(good_flake, encoding="utf-8")
    return path


@pytest.fixture
def ping_body() -> dict:
    return json.loads((FIXTURES / "ping_webhook.json").read_text(encoding="utf-8"))


@pytest.fixture
def push_body() -> dict:
    return json.loads((FIXTURES / "push_webhook.json").read_text(encoding="utf-8"))
