import pytest

from hexshift.config import (
    DEFAULT_EXPANSION_CAP,
    DEFAULT_TURN_BUDGET,
    EXPANSION_CAP_ENV,
    TURN_BUDGET_ENV,
    ConfigError,
    SearchConfig,
)
from hexshift.protocol import ProtocolError, decode, encode, read_file, write_file


def test_defaults_without_environment(monkeypatch):
    monkeypatch.delenv(TURN_BUDGET_ENV, raising=False)
    monkeypatch.delenv(EXPANSION_CAP_ENV, raising=False)
    config = SearchConfig.from_env()
    assert config == SearchConfig(DEFAULT_TURN_BUDGET, DEFAULT_EXPANSION_CAP)
    assert config.turn_budget == 20
    assert config.expansion_cap == 50_000


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv(TURN_BUDGET_ENV, " 7 ")
    monkeypatch.setenv(EXPANSION_CAP_ENV, "")
    config = SearchConfig.from_env()
    assert config.turn_budget == 7
    assert config.expansion_cap == DEFAULT_EXPANSION_CAP


def test_smallest_accepted_values(monkeypatch):
    monkeypatch.setenv(TURN_BUDGET_ENV, "0")
    monkeypatch.setenv(EXPANSION_CAP_ENV, "1")
    assert SearchConfig.from_env() == SearchConfig(turn_budget=0, expansion_cap=1)


@pytest.mark.parametrize("fields", [{"turn_budget": -1}, {"expansion_cap": 0}])
def test_config_rejects_out_of_range_values(fields):
    with pytest.raises(ConfigError):
        SearchConfig(**fields)


def test_overrides_are_validated_too():
    base = SearchConfig(turn_budget=5, expansion_cap=10)
    assert base.with_overrides() == base
    assert base.with_overrides(turn_budget=7) == SearchConfig(turn_budget=7, expansion_cap=10)
    with pytest.raises(ConfigError):
        base.with_overrides(turn_budget=-3)
    with pytest.raises(ConfigError):
        base.with_overrides(expansion_cap=0)


@pytest.mark.parametrize(
    "name, value",
    [
        (EXPANSION_CAP_ENV, "seven"),
        (EXPANSION_CAP_ENV, "2.5"),
        (EXPANSION_CAP_ENV, "0"),
        (TURN_BUDGET_ENV, "-1"),
    ],
)
def test_bad_environment_values(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigError):
        SearchConfig.from_env()


def test_encode_is_compact_and_newline_terminated():
    payload = encode({"a": 1, "b": [1, 2]})
    assert payload == b'{"a":1,"b":[1,2]}\n'
    assert decode(payload) == {"a": 1, "b": [1, 2]}


@pytest.mark.parametrize("payload", [b"{oops", b"\xff\xfe", b"[1, 2]", b'"text"'])
def test_decode_rejects_non_objects(payload):
    with pytest.raises(ProtocolError):
        decode(payload)


def test_file_helpers(tmp_path):
    path = tmp_path / "message.json"
    write_file(path, {"turn": 3})
    assert read_file(path) == {"turn": 3}
