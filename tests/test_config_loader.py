# tests/test_config_loader.py
from __future__ import annotations

import json
from pathlib import Path

import pytest

from postbatch.config.loader import load_batch
from postbatch.config.types import ConfigError, UnsupportedConfigFormatError
from postbatch.request import FetchRequest
from postbatch.transport import TimeoutConfig


# -------------------------
# Helpers
# -------------------------


def write_text(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def write_json(path: Path, obj: object) -> Path:
    path.write_text(json.dumps(obj), encoding="utf-8")
    return path


def minimal() -> dict:
    return {"requests": [{"url": "http://api.test/a"}]}


# -------------------------
# Basic file/path errors
# -------------------------


def test_missing_file_raises_config_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_batch(tmp_path / "missing.yaml")


def test_path_is_dir_raises_config_error(tmp_path: Path) -> None:
    d = tmp_path / "dir"
    d.mkdir()
    with pytest.raises(ConfigError):
        load_batch(d)


def test_unsupported_extension_raises_unsupported_format(tmp_path: Path) -> None:
    p = write_text(tmp_path / "batch.txt", "requests: []")
    with pytest.raises(UnsupportedConfigFormatError):
        load_batch(p)


# -------------------------
# Parse errors are wrapped
# -------------------------


def test_invalid_yaml_is_wrapped_as_config_error(tmp_path: Path) -> None:
    p = write_text(tmp_path / "batch.yaml", "requests: [\n")  # invalid
    with pytest.raises(ConfigError):
        load_batch(p)


def test_invalid_toml_is_wrapped_as_config_error(tmp_path: Path) -> None:
    p = write_text(tmp_path / "batch.toml", "requests = [")  # invalid
    with pytest.raises(ConfigError):
        load_batch(p)


def test_invalid_json_is_wrapped_as_config_error(tmp_path: Path) -> None:
    p = write_text(tmp_path / "batch.json", '{"requests": ')  # invalid
    with pytest.raises(ConfigError):
        load_batch(p)


def test_top_level_list_is_rejected(tmp_path: Path) -> None:
    p = write_text(tmp_path / "batch.yml", "- url: http://api.test\n")
    with pytest.raises(ConfigError):
        load_batch(p)


# -------------------------
# Happy paths, all formats
# -------------------------


def test_yaml_full_batch(tmp_path: Path) -> None:
    p = write_text(
        tmp_path / "batch.yml",
        """
engine: Concurrent
parallelism: 4
charset: GBK
timeouts:
  connection_request: 1000
  connect: 2000
  socket: 3000
requests:
  - url: http://api.test/a
    params: {id: "1", page: 2}
  - url: " http://api.test/b "
    params:
      - [q, x]
      - [q, y]
""",
    )

    batch = load_batch(p)

    assert batch.engine == "concurrent"
    assert batch.parallelism == 4
    assert batch.charset == "gbk"
    assert batch.timeouts == TimeoutConfig(1000, 2000, 3000)
    assert batch.requests == [
        FetchRequest("http://api.test/a", [("id", "1"), ("page", "2")]),
        FetchRequest("http://api.test/b", [("q", "x"), ("q", "y")]),
    ]
    assert len(batch) == 2


def test_toml_batch(tmp_path: Path) -> None:
    p = write_text(
        tmp_path / "batch.toml",
        """
engine = "sequential"

[[requests]]
url = "http://api.test/a"
params = { id = "1" }

[[requests]]
url = "http://api.test/b"
""",
    )

    batch = load_batch(p)

    assert batch.engine == "sequential"
    assert [r.url for r in batch] == ["http://api.test/a", "http://api.test/b"]
    assert batch.requests[0].params == (("id", "1"),)
    assert batch.requests[1].params == ()


def test_json_defaults(tmp_path: Path) -> None:
    batch = load_batch(write_json(tmp_path / "batch.json", minimal()))

    assert batch.engine == "sequential"
    assert batch.parallelism is None
    assert batch.charset == "utf-8"
    assert batch.timeouts == TimeoutConfig()


def test_partial_timeouts_keep_defaults(tmp_path: Path) -> None:
    raw = minimal()
    raw["timeouts"] = {"socket": 100}

    batch = load_batch(write_json(tmp_path / "batch.json", raw))

    assert batch.timeouts == TimeoutConfig(socket_ms=100)


# -------------------------
# Validation
# -------------------------


@pytest.mark.parametrize(
    "raw",
    [
        {},
        {"requests": {}},
        {"requests": []},
        {"requests": ["http://api.test"]},
        {"requests": [{"params": {}}]},
        {"requests": [{"url": "   "}]},
        {"requests": [{"url": 5}]},
        {"requests": [{"url": "http://a", "method": "GET"}]},
        {"requests": [{"url": "http://a", "params": "a=1"}]},
        {"requests": [{"url": "http://a", "params": [["a"]]}]},
        {"requests": [{"url": "http://a", "params": {"a": True}}]},
        {"requests": [{"url": "http://a", "params": {"a": None}}]},
        {"requests": [{"url": "http://a", "params": {" ": "1"}}]},
        {"requests": [{"url": "http://a"}], "retries": 3},
        {"requests": [{"url": "http://a"}], "engine": ""},
        {"requests": [{"url": "http://a"}], "parallelism": 0},
        {"requests": [{"url": "http://a"}], "parallelism": "4"},
        {"requests": [{"url": "http://a"}], "charset": "no-such-charset"},
        {"requests": [{"url": "http://a"}], "timeouts": 5},
        {"requests": [{"url": "http://a"}], "timeouts": {"read": 5}},
        {"requests": [{"url": "http://a"}], "timeouts": {"connect": -5}},
    ],
)
def test_invalid_batch_raises_config_error(tmp_path: Path, raw: dict) -> None:
    with pytest.raises(ConfigError):
        load_batch(write_json(tmp_path / "batch.json", raw))
