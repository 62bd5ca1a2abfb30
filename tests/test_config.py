# File: tests/test_config.py
import json
from pathlib import Path

import pytest
from pydantic import ValidationError
from page_relay.config import CachePolicy, RelayConfig, load_config


def write_file(tmp_path: Path, content: str, suffix: str) -> Path:
    path = tmp_path / f"config{suffix}"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.mark.parametrize(
    "content,loader,expect_exc",
    [
        ("port: 9000\ncache: {default_time: 7200}", load_config, None),
        (json.dumps({"port": 9000, "cache": {"default_time": 7200}}), load_config, None),
        ('{"port": 0}', load_config, ValidationError),
        ('{"unknown_option": 1}', load_config, ValidationError),
        ("not: a: mapping", load_config, ValueError),
        ("::invalid yaml", load_config, TypeError),
    ],
)
def test_load_config_variants(tmp_path, content, loader, expect_exc):
    # Write YAML or JSON based on content
    suffix = ".yaml" if not content.strip().startswith("{") else ".json"
    cfg_path = write_file(tmp_path, content, suffix)
    if expect_exc:
        with pytest.raises(expect_exc):
            loader(cfg_path)
    else:
        cfg = loader(cfg_path)
        assert isinstance(cfg, RelayConfig)
        assert cfg.port == 9000
        assert cfg.cache.default_time == 7200
        assert cfg.cache.min_time == 300


def test_load_config_default_missing(tmp_path, monkeypatch):
    # Without configs/default.yaml the built-in defaults apply
    monkeypatch.chdir(tmp_path)
    cfg = load_config(None)
    assert cfg == RelayConfig()


def test_load_config_default_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "configs").mkdir()
    (tmp_path / "configs" / "default.yaml").write_text("port: 8181\n", encoding="utf-8")
    assert load_config(None).port == 8181


def test_named_config_not_found(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.yaml")


def test_unsupported_suffix(tmp_path):
    cfg_path = write_file(tmp_path, "port = 1", ".toml")
    with pytest.raises(ValueError):
        load_config(cfg_path)


def test_cache_policy_bounds():
    with pytest.raises(ValidationError):
        CachePolicy(default_time=100, min_time=300)


@pytest.mark.parametrize(
    "requested,disabled,expected",
    [(None, False, 3600), (1, False, 300), (7200, False, 7200), (7200, True, 0), (-10, False, 300)],
)
def test_cache_policy_max_age(requested, disabled, expected):
    assert CachePolicy().max_age(requested, disabled) == expected


def test_config_is_frozen():
    cfg = RelayConfig()
    with pytest.raises(ValidationError):
        cfg.port = 1
