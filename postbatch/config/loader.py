import codecs
import json
import tomllib
from pathlib import Path
from typing import Any, Mapping

import yaml

from postbatch.request import FetchRequest
from postbatch.transport import TimeoutConfig

from .types import BatchConfig, ConfigError, UnsupportedConfigFormatError

_TOP_LEVEL_KEYS = {"requests", "engine", "parallelism", "charset", "timeouts"}
_TIMEOUT_KEYS = {
    "connection_request": "connection_request_ms",
    "connect": "connect_ms",
    "socket": "socket_ms",
}


def load_batch(path: str | Path) -> BatchConfig:
    pure_path = Path(path).expanduser().resolve()

    if not pure_path.exists():
        raise ConfigError(f"Config file not found: {pure_path}")

    if not pure_path.is_file():
        raise ConfigError(f"Config path is not a file: {pure_path}")

    fmt = _detect_format(pure_path)
    raw_file = _parse_file(pure_path, fmt)
    return _build_batch_config(raw_file)


def _detect_format(path: Path) -> str:
    fmt = path.suffix
    match fmt:
        case ".yaml" | ".yml":
            return "yaml"
        case ".toml":
            return "toml"
        case ".json":
            return "json"
        case _:
            raise UnsupportedConfigFormatError(
                f"Non supported file extension: {fmt}\n Expected format: .yml/.yaml, .toml, .json"
            )


def _parse_file(path: Path, fmt: str) -> Mapping[str, Any]:
    text = path.read_text(encoding="utf-8")
    match fmt:
        case "yaml":
            try:
                raw_file = yaml.safe_load(text)
            except yaml.YAMLError as exc:
                raise ConfigError(f"{path}: invalid YAML") from exc
        case "toml":
            try:
                raw_file = tomllib.loads(text)
            except tomllib.TOMLDecodeError as exc:
                raise ConfigError(f"{path}: invalid TOML") from exc
        case "json":
            try:
                raw_file = json.loads(text)
            except json.JSONDecodeError as exc:
                raise ConfigError(f"{path}: invalid JSON") from exc
        case _:
            raise AssertionError("Unreachable")

    if not isinstance(raw_file, Mapping):
        raise ConfigError(
            f"{path}: {fmt.upper()} parsed successfully but top-level value is not an object: {type(raw_file)}"
        )

    return raw_file


def _build_batch_config(raw: Mapping[str, Any]) -> BatchConfig:
    for key in raw.keys():
        if key not in _TOP_LEVEL_KEYS:
            raise ConfigError(f"Can't process: {key}")

    if "requests" not in raw:
        raise ConfigError("Missing 'requests' field")

    if not isinstance(raw["requests"], list):
        raise ConfigError(f"'requests' must be a list, got {type(raw['requests'])}")

    if len(raw["requests"]) < 1:
        raise ConfigError("There must be at least one request in the config file")

    requests = [
        _build_request(index, fields) for index, fields in enumerate(raw["requests"])
    ]
    config = BatchConfig(requests=requests)

    if "engine" in raw:
        if not isinstance(raw["engine"], str) or len(raw["engine"].strip()) < 1:
            raise ConfigError("'engine' should be a non empty string")
        config.engine = raw["engine"].strip().lower()

    if "parallelism" in raw:
        value = raw["parallelism"]
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ConfigError(f"'parallelism' should be a positive integer, got {value!r}")
        config.parallelism = value

    if "charset" in raw:
        if not isinstance(raw["charset"], str):
            raise ConfigError("'charset' should be a string")
        try:
            config.charset = codecs.lookup(raw["charset"].strip()).name
        except LookupError as exc:
            raise ConfigError(f"Unknown charset: {raw['charset']}") from exc

    if "timeouts" in raw:
        config.timeouts = _build_timeouts(raw["timeouts"])

    return config


def _build_request(index: int, fields: Any) -> FetchRequest:
    where = f"requests[{index}]"

    if not isinstance(fields, Mapping):
        raise ConfigError(f"{where} must be a mapping")

    for field in fields.keys():
        if field not in {"url", "params"}:
            raise ConfigError(f"{where}: Can't process: {field}")

    if "url" not in fields:
        raise ConfigError(f"{where}: missing 'url'")

    if not isinstance(fields["url"], str) or len(fields["url"].strip()) < 1:
        raise ConfigError(f"{where}: The url should be a non empty string")

    url = fields["url"].strip()
    params: list[tuple[str, str]] = []

    if "params" in fields:
        raw_params = fields["params"]
        if isinstance(raw_params, Mapping):
            pairs = list(raw_params.items())
        elif isinstance(raw_params, list):
            pairs = []
            for item in raw_params:
                if not isinstance(item, list) or len(item) != 2:
                    raise ConfigError(
                        f"{where}: {item!r} should be a [name, value] pair"
                    )
                pairs.append((item[0], item[1]))
        else:
            raise ConfigError(f"{where}: Params should be a mapping or a list of pairs")

        for name, value in pairs:
            if not isinstance(name, str) or len(name.strip()) < 1:
                raise ConfigError(f"{where}: parameter name {name!r} should be a non empty string")
            params.append((name.strip(), _param_value(where, name, value)))

    return FetchRequest(url, tuple(params))


def _param_value(where: str, name: str, value: Any) -> str:
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise ConfigError(f"{where}: value of {name} should be a string or a number")
    return str(value)


def _build_timeouts(raw: Any) -> TimeoutConfig:
    if not isinstance(raw, Mapping):
        raise ConfigError("'timeouts' should be a mapping")

    values: dict[str, int] = {}
    for key, value in raw.items():
        if key not in _TIMEOUT_KEYS:
            raise ConfigError(f"timeouts: Can't process: {key}")
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ConfigError(f"timeouts: {key} should be a positive number of milliseconds")
        values[_TIMEOUT_KEYS[key]] = value

    return TimeoutConfig(**values)
